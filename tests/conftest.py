"""
Pytest Configuration and Fixtures.

Includes:
- Syspath patching for local imports.
- A small GL catalog and registry builders shared across test modules.
- Console isolation so captured logs never leak between tests.
"""

import io
import sys
from pathlib import Path
from typing import Callable, Dict, List, Tuple

import pytest
from rich.console import Console

# Add src to path so we can import 'tweakgen' without installing it
src_path = Path(__file__).parent.parent / "src"
sys.path.insert(0, str(src_path))

from tweakgen.catalog import Catalog, NativeFunction, NativeParam  # noqa: E402
from tweakgen.tweaks.registry import TweakRegistry  # noqa: E402
from tweakgen.tweaks.schema import FunctionTweak  # noqa: E402
from tweakgen.utils.console import reset_console, set_console  # noqa: E402


def native(name: str, params: List[Tuple[str, str]], result: str = "void") -> NativeFunction:
  """Builds a NativeFunction from (name, type) pairs."""
  return NativeFunction(name=name, params=[NativeParam(name=n, type=t) for n, t in params], result=result)


def registry_of(*entries: Dict) -> TweakRegistry:
  """Builds a registry from raw descriptor dicts (as they appear in table files)."""
  return TweakRegistry([FunctionTweak.model_validate(e) for e in entries])


@pytest.fixture
def make_native() -> Callable[..., NativeFunction]:
  return native


@pytest.fixture
def make_registry() -> Callable[..., TweakRegistry]:
  return registry_of


@pytest.fixture
def gl_catalog() -> Catalog:
  """A handful of GL 2.0 prototypes used across engine tests."""
  return Catalog(
    [
      native("GenBuffers", [("n", "GLsizei"), ("buffers", "GLuint*")]),
      native(
        "GetShaderInfoLog",
        [("shader", "GLuint"), ("bufSize", "GLsizei"), ("length", "GLsizei*"), ("infoLog", "GLchar*")],
      ),
      native("GetUniformfv", [("program", "GLuint"), ("location", "GLint"), ("params", "GLfloat*")]),
      native("GetUniformiv", [("program", "GLuint"), ("location", "GLint"), ("params", "GLint*")]),
      native("CreateProgram", [], result="GLuint"),
      native("GetError", [], result="GLenum"),
      native("Viewport", [("x", "GLint"), ("y", "GLint"), ("width", "GLsizei"), ("height", "GLsizei")]),
    ]
  )


@pytest.fixture
def captured_console():
  """Redirects console and logging output into a buffer."""
  buffer = io.StringIO()
  set_console(Console(file=buffer, force_terminal=False, width=200))
  yield buffer
  reset_console()
