"""
Error Taxonomy for the Tweak Engine.

Two families of failure exist:

- `ConfigError`: The tweak table is malformed or inconsistent with the native
  catalog (unknown copy target, copy cycle, unknown parameter, conflicting roles,
  unknown function, duplicate descriptor).
- `TemplateError`: A snippet template cannot be parsed or evaluated.

Both carry the function and field they are attributed to, so the generator can
accumulate them into a report rather than stopping at the first failure.
"""

from typing import Optional


class TweakError(Exception):
  """
  Base class for all errors attributed to a single function.

  Attributes:
      message (str): Human readable description of the failure.
      function (Optional[str]): Canonical name of the affected function.
      field (Optional[str]): Descriptor field or snippet kind that failed.
  """

  kind = "error"

  def __init__(self, message: str, function: Optional[str] = None, field: Optional[str] = None):
    super().__init__(message)
    self.message = message
    self.function = function
    self.field = field

  def __str__(self) -> str:
    where = self.function or "<unknown>"
    if self.field:
      where = f"{where}.{self.field}"
    return f"{where}: {self.message}"


class ConfigError(TweakError):
  """Raised when a descriptor is malformed or inconsistent."""

  kind = "config"


class TemplateError(TweakError):
  """Raised when a before/after/doc snippet fails to parse or evaluate."""

  kind = "template"
