"""
Tweak Table Loading.

Reads descriptor files (YAML or JSON) into validated `FunctionTweak` records
and builds a `TweakRegistry` from them.

Accepted layouts:
- A list of descriptors.
- A mapping with a `functions` list.

When no file is given, the bundled OpenGL table (`tweakgen/data/gl_tweaks.yaml`)
is used.
"""

import json
from importlib.resources import files
from pathlib import Path
from typing import Any, Iterable, List, Optional

import yaml
from pydantic import ValidationError

from tweakgen.errors import ConfigError
from tweakgen.tweaks.registry import TweakRegistry
from tweakgen.tweaks.schema import FunctionTweak
from tweakgen.utils.console import log_info

BUNDLED_TABLE = "gl_tweaks.yaml"


def resolve_data_dir() -> Path:
  """
  Locates the directory holding bundled data files.

  Returns:
      Path: Absolute path of `tweakgen/data`.
  """
  local_path = Path(__file__).resolve().parent.parent / "data"
  if local_path.exists():
    return local_path
  return Path(str(files("tweakgen.data")))


def _read_structured(path: Path) -> Any:
  try:
    text = path.read_text(encoding="utf-8")
  except OSError as e:
    raise ConfigError(f"cannot read tweak table {path}: {e}") from e

  try:
    if path.suffix.lower() == ".json":
      return json.loads(text)
    return yaml.safe_load(text)
  except (json.JSONDecodeError, yaml.YAMLError) as e:
    raise ConfigError(f"invalid tweak table {path.name}: {e}") from e


def parse_tweaks(content: Any, source: str = "<memory>") -> List[FunctionTweak]:
  """
  Validates raw table content into descriptors.

  Args:
      content: Parsed YAML/JSON (list of dicts or `{"functions": [...]}`).
      source: Label used in error messages.

  Returns:
      List[FunctionTweak]: Descriptors in file order.

  Raises:
      ConfigError: If the layout is wrong or a descriptor fails validation.
  """
  if content is None:
    return []
  if isinstance(content, dict):
    content = content.get("functions", [])
  if not isinstance(content, list):
    raise ConfigError(f"{source}: expected a list of function descriptors")

  tweaks: List[FunctionTweak] = []
  for index, entry in enumerate(content):
    name = entry.get("name") if isinstance(entry, dict) else None
    try:
      tweaks.append(FunctionTweak.model_validate(entry))
    except ValidationError as e:
      label = name or f"{source}[{index}]"
      raise ConfigError(f"invalid descriptor: {e}", function=label) from e
  return tweaks


def load_tweaks(path: Path) -> List[FunctionTweak]:
  """
  Reads a single YAML or JSON tweak table.
  """
  return parse_tweaks(_read_structured(path), source=path.name)


def load_registry(paths: Optional[Iterable[Path]] = None) -> TweakRegistry:
  """
  Builds a registry from one or more tweak tables.

  Later files may not redefine functions from earlier ones; duplicates are a
  configuration error.

  Args:
      paths: Table files. Empty or None selects the bundled table.

  Returns:
      TweakRegistry: The loaded, read-only registry.
  """
  selected = list(paths or [])
  if not selected:
    selected = [resolve_data_dir() / BUNDLED_TABLE]

  tweaks: List[FunctionTweak] = []
  for path in selected:
    loaded = load_tweaks(path)
    log_info(f"Loaded {len(loaded)} descriptors from {path.name}")
    tweaks.extend(loaded)
  return TweakRegistry(tweaks)
