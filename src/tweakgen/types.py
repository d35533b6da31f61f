"""
Native to Exposed Type Mapping.

Translates native (C / OpenGL) parameter and return types into the exposed
type strings used in composed signatures.

Rules:
1.  Qualifiers (`const`) are dropped and pointer/array suffixes are counted.
2.  The base type is mapped through `SCALAR_TYPES`.
3.  A scalar whose parameter name denotes an object handle (e.g. `shader`,
    `program`) is mapped through `HANDLE_TYPES` instead.
4.  One level of indirection (`T*` or `T[N]`) becomes a sequence `[]T`.
    Deeper indirection yields `[]*T`. `void*` is an opaque value.

The mapper is immutable after construction and safe to share between workers.
"""

import re
from typing import Dict, Mapping, NamedTuple, Optional

SCALAR_TYPES: Dict[str, str] = {
  "GLenum": "glbase.Enum",
  "GLbitfield": "glbase.Bitfield",
  "GLboolean": "bool",
  "GLbyte": "int8",
  "GLubyte": "uint8",
  "GLshort": "int16",
  "GLushort": "uint16",
  "GLint": "int32",
  "GLuint": "uint32",
  "GLsizei": "int32",
  "GLint64": "int64",
  "GLuint64": "uint64",
  "GLfloat": "float32",
  "GLclampf": "float32",
  "GLdouble": "float64",
  "GLclampd": "float64",
  "GLchar": "byte",
  "GLcharARB": "byte",
  "GLintptr": "int",
  "GLsizeiptr": "int",
  "GLhalf": "uint16",
  "GLsync": "uintptr",
  "int": "int32",
  "unsigned int": "uint32",
  "float": "float32",
  "double": "float64",
  "char": "byte",
}

# Scalar parameters holding object names, keyed by normalized parameter name.
HANDLE_TYPES: Dict[str, str] = {
  "shader": "glbase.Shader",
  "program": "glbase.Program",
  "buffer": "glbase.Buffer",
  "texture": "glbase.Texture",
  "framebuffer": "glbase.Framebuffer",
  "renderbuffer": "glbase.Renderbuffer",
  "location": "glbase.Uniform",
}

VOID_TYPES = frozenset({"", "void", "GLvoid"})
OPAQUE_TYPE = "interface{}"

_ARRAY_SUFFIX = re.compile(r"\[\s*\d*\s*\]")


class ParsedType(NamedTuple):
  """
  A native type broken into its base name and level of indirection.
  """

  base: str
  indirection: int


class MappedType(NamedTuple):
  """
  The exposed form of a native type.

  Attributes:
      exposed (str): Exposed type string (e.g. `[]float32`).
      sequence (bool): True when the native type is a pointer or array.
      element (str): Exposed type of a single element (equals `exposed` for scalars).
  """

  exposed: str
  sequence: bool
  element: str


def parse_native_type(native: str) -> ParsedType:
  """
  Splits a native type string into base type and indirection depth.

  Args:
      native (str): E.g. `const GLchar *const*` or `GLfloat[16]`.

  Returns:
      ParsedType: `("GLchar", 2)` for the first example above.
  """
  text = native.strip()
  arrays = len(_ARRAY_SUFFIX.findall(text))
  text = _ARRAY_SUFFIX.sub("", text)
  pointers = text.count("*")
  text = text.replace("*", " ")
  words = [w for w in text.split() if w not in ("const", "struct")]
  return ParsedType(" ".join(words), pointers + arrays)


def is_void(native: Optional[str]) -> bool:
  """True if the native type denotes "no value" (a bare `void`)."""
  if native is None:
    return True
  parsed = parse_native_type(native)
  return parsed.indirection == 0 and parsed.base in VOID_TYPES


class TypeMapper:
  """
  Maps native types to exposed types.

  Extra scalar and handle entries may be layered on top of the built-in tables;
  they win over the defaults.
  """

  def __init__(
    self,
    scalar_types: Optional[Mapping[str, str]] = None,
    handle_types: Optional[Mapping[str, str]] = None,
  ):
    self._scalars: Dict[str, str] = {**SCALAR_TYPES, **(scalar_types or {})}
    self._handles: Dict[str, str] = {**HANDLE_TYPES, **(handle_types or {})}

  def scalar(self, base: str) -> str:
    """
    Maps a base type name. Unknown names pass through unchanged.
    """
    return self._scalars.get(base, base)

  def map(self, native: str, param_name: Optional[str] = None) -> MappedType:
    """
    Computes the exposed type of a native parameter or return type.

    Args:
        native (str): The native type string.
        param_name (Optional[str]): Normalized parameter name, used for handle lookup.

    Returns:
        MappedType: The exposed type and its sequence metadata.
    """
    parsed = parse_native_type(native)

    if parsed.base in VOID_TYPES:
      if parsed.indirection == 0:
        return MappedType("", False, "")
      return MappedType(OPAQUE_TYPE, False, OPAQUE_TYPE)

    element = self.scalar(parsed.base)
    if param_name and param_name in self._handles and parsed.base in ("GLuint", "GLint"):
      element = self._handles[param_name]

    if parsed.indirection == 0:
      return MappedType(element, False, element)
    if parsed.indirection == 1:
      return MappedType(f"[]{element}", True, element)

    inner = "*" * (parsed.indirection - 1) + element
    return MappedType(f"[]{inner}", True, inner)
