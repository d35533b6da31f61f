"""
Native API Catalog.

The catalog is supplied by an external collaborator (a header or registry
parser). This module only defines its shape and reads it from JSON:

.. code-block:: json

    {"functions": [{"name": "GenBuffers", "result": "void",
                    "params": [{"name": "n", "type": "GLsizei"},
                               {"name": "buffers", "type": "GLuint*"}]}]}
"""

import json
from pathlib import Path
from typing import Any, Dict, Iterator, List, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError, model_validator

from tweakgen.errors import ConfigError


class NativeParam(BaseModel):
  """A native parameter as declared in the native prototype."""

  model_config = ConfigDict(frozen=True)

  name: str
  type: str


class NativeFunction(BaseModel):
  """
  A native function prototype.

  Attributes:
      name: Canonical name (without API prefix, e.g. `GenBuffers`).
      params: Parameters in declaration order.
      result: Native return type; `void` or empty means none.
  """

  model_config = ConfigDict(frozen=True)

  name: str
  params: List[NativeParam] = Field(default_factory=list)
  result: str = "void"

  @model_validator(mode="after")
  def _unique_param_names(self) -> "NativeFunction":
    seen = set()
    for param in self.params:
      if param.name in seen:
        raise ValueError(f"duplicate parameter '{param.name}' in {self.name}")
      seen.add(param.name)
    return self

  def param(self, name: str) -> Optional[NativeParam]:
    for p in self.params:
      if p.name == name:
        return p
    return None


class Catalog:
  """
  Name-keyed, read-only view over native prototypes, preserving catalog order.
  """

  def __init__(self, functions: List[NativeFunction]):
    self._functions: Dict[str, NativeFunction] = {}
    for fn in functions:
      if fn.name in self._functions:
        raise ConfigError("duplicate catalog entry", function=fn.name)
      self._functions[fn.name] = fn

  def __contains__(self, name: object) -> bool:
    return name in self._functions

  def __iter__(self) -> Iterator[NativeFunction]:
    return iter(self._functions.values())

  def __len__(self) -> int:
    return len(self._functions)

  def names(self) -> List[str]:
    return list(self._functions)

  def lookup(self, name: str) -> NativeFunction:
    """
    Raises:
        ConfigError: If the function is not in the catalog.
    """
    try:
      return self._functions[name]
    except KeyError:
      raise ConfigError("unknown function", function=name) from None

  @classmethod
  def from_dict(cls, data: Any) -> "Catalog":
    """Builds a catalog from `{"functions": [...]}` data or a bare list of entries."""
    entries = data.get("functions", []) if isinstance(data, dict) else data
    if not isinstance(entries, list):
      raise ConfigError('invalid catalog: expected {"functions": [...]} or a list of entries')
    try:
      return cls([NativeFunction.model_validate(entry) for entry in entries])
    except ValidationError as e:
      raise ConfigError(f"invalid catalog: {e}") from e

  @classmethod
  def load(cls, path: Path) -> "Catalog":
    """Reads a JSON catalog file."""
    try:
      with open(path, "r", encoding="utf-8") as f:
        data = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
      raise ConfigError(f"cannot load catalog {path}: {e}") from e
    return cls.from_dict(data)
