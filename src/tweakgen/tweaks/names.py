"""
Parameter Name Normalization.

Native headers spell some parameter names inconsistently (`bufsize` in one
function, `bufSize` in the next). A fixed table maps the loose spellings to a
single exposed form, applied to every function before any per-function tweak.
"""

from types import MappingProxyType
from typing import Dict, Mapping, Optional

PARAM_NAME_FIXES: Mapping[str, str] = MappingProxyType(
  {
    "binaryformat": "binaryFormat",
    "bufsize": "bufSize",
    "indx": "index",
    "infolog": "infoLog",
    "internalformat": "internalFormat",
    "precisiontype": "precisionType",
  }
)


class NameNormalizer:
  """
  Immutable lookup of native parameter name fixes.

  Args:
      extra (Optional[Mapping[str, str]]): Additional fixes, layered over the defaults.
  """

  def __init__(self, extra: Optional[Mapping[str, str]] = None):
    table: Dict[str, str] = dict(PARAM_NAME_FIXES)
    table.update(extra or {})
    self._table: Mapping[str, str] = MappingProxyType(table)

  @property
  def table(self) -> Mapping[str, str]:
    return self._table

  def normalize(self, native_name: str) -> str:
    """
    Returns the exposed spelling of a native parameter name.

    Names missing from the table are returned unchanged.
    """
    return self._table.get(native_name, native_name)

  __call__ = normalize
