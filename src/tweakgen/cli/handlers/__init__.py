from .generate import handle_check, handle_generate
from .meta import handle_schema
from .show import handle_show

__all__ = [
  "handle_check",
  "handle_generate",
  "handle_schema",
  "handle_show",
]
