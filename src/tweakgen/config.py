"""
Runtime Configuration Store.

Settings come from the `[tool.tweakgen]` table of the nearest `pyproject.toml`
and are overridden by command line arguments. Relative paths in the TOML file
are resolved against the directory that contains it.

.. code-block:: toml

    [tool.tweakgen]
    catalog = "gl/catalog.json"
    tweaks = ["gl/tweaks.yaml"]
    workers = 4

    [tool.tweakgen.name_fixes]
    texunit = "texUnit"
"""

import tomllib
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

from pydantic import BaseModel, Field
from rich.markup import escape

from tweakgen.tweaks.names import NameNormalizer
from tweakgen.types import TypeMapper
from tweakgen.utils.console import log_warning


class RuntimeConfig(BaseModel):
  """
  Global configuration for a generation run.
  """

  catalog: Optional[Path] = Field(None, description="JSON native API catalog.")
  tweaks: List[Path] = Field(default_factory=list, description="Tweak tables. Empty selects the bundled table.")
  workers: int = Field(1, ge=1, description="Concurrent generation workers.")
  functions: List[str] = Field(default_factory=list, description="Generate only these functions.")
  name_fixes: Dict[str, str] = Field(default_factory=dict, description="Extra parameter name normalizations.")
  handle_types: Dict[str, str] = Field(
    default_factory=dict, description="Extra parameter name -> handle type mappings."
  )

  def normalizer(self) -> NameNormalizer:
    """Builds the name normalizer with any configured extra fixes."""
    return NameNormalizer(self.name_fixes)

  def type_mapper(self) -> TypeMapper:
    """Builds the type mapper with any configured extra handle types."""
    return TypeMapper(handle_types=self.handle_types)

  @classmethod
  def load(
    cls,
    catalog: Optional[Path] = None,
    tweaks: Optional[List[Path]] = None,
    workers: Optional[int] = None,
    functions: Optional[List[str]] = None,
    overrides: Optional[Dict[str, Any]] = None,
    search_path: Optional[Path] = None,
  ) -> "RuntimeConfig":
    """
    Loads configuration from pyproject.toml and overrides with CLI arguments.

    Args:
        catalog: Override for the catalog path.
        tweaks: Override for the tweak table list.
        workers: Override for the worker count.
        functions: Override for the function filter.
        overrides: Extra `key=value` overrides (from `--set`).
        search_path: Directory to start searching for TOML config.

    Returns:
        RuntimeConfig: The fully resolved configuration object.
    """
    start_dir = search_path or Path.cwd()
    toml_config, toml_dir = _load_toml_settings(start_dir)
    toml_config.update(overrides or {})

    def _path(raw: Any) -> Path:
      p = Path(raw)
      if toml_dir and not p.is_absolute():
        return (toml_dir / p).resolve()
      return p

    # 1. Catalog
    final_catalog = catalog
    if final_catalog is None and toml_config.get("catalog"):
      final_catalog = _path(toml_config["catalog"])

    # 2. Tweak tables
    if tweaks:
      final_tweaks = list(tweaks)
    else:
      raw = toml_config.get("tweaks", [])
      if isinstance(raw, str):
        raw = [raw]
      final_tweaks = [_path(p) for p in raw]

    # 3. Workers
    final_workers = workers
    if final_workers is None:
      raw_workers = toml_config.get("workers", 1)
      try:
        final_workers = int(raw_workers)
      except (TypeError, ValueError):
        log_warning(escape(f"Ignoring invalid workers value '{raw_workers}'. Expected an integer."))
        final_workers = 1

    # 4. Function filter
    final_functions = list(functions) if functions else list(toml_config.get("functions", []))

    return cls(
      catalog=final_catalog,
      tweaks=final_tweaks,
      workers=final_workers,
      functions=final_functions,
      name_fixes=dict(toml_config.get("name_fixes", {})),
      handle_types=dict(toml_config.get("handle_types", {})),
    )


def _load_toml_settings(start_path: Path) -> Tuple[Dict[str, Any], Optional[Path]]:
  """
  Searches start_path and its parents for 'pyproject.toml' and extracts config.

  Args:
      start_path (Path): Directory to start search from.

  Returns:
      Tuple[Dict, Optional[Path]]: The config dict and the directory it was found in.
  """
  current = start_path.resolve()

  for parent in [current, *current.parents]:
    toml_path = parent / "pyproject.toml"
    if toml_path.is_file():
      try:
        with open(toml_path, "rb") as f:
          data = tomllib.load(f)
      except tomllib.TOMLDecodeError as e:
        log_warning(escape(f"Ignoring malformed {toml_path}: {e}"))
        return {}, None

      return dict(data.get("tool", {}).get("tweakgen", {})), parent

  return {}, None


def parse_cli_key_values(items: Optional[List[str]]) -> Dict[str, Any]:
  """
  Parses a list of 'key=value' strings into a dictionary.

  Integers and booleans are inferred; everything else stays a string.

  Args:
      items (Optional[List[str]]): Raw CLI strings directly from argparse.

  Returns:
      Dict[str, Any]: Parsed dictionary.
  """
  if not items:
    return {}

  config: Dict[str, Any] = {}
  for item in items:
    if "=" not in item:
      log_warning(f"Ignoring invalid config format: '{item}'. Expected 'key=value'.")
      continue

    key, val_str = item.split("=", 1)
    key = key.strip()
    val_str = val_str.strip()

    final_val: Any = val_str
    if val_str.lower() == "true":
      final_val = True
    elif val_str.lower() == "false":
      final_val = False
    else:
      try:
        final_val = int(val_str)
      except ValueError:
        pass

    config[key] = final_val

  return config
