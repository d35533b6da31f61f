"""
Signature Composer.

Assembles the exposed input list and result list from classified parameters
and the declared result.

- Inputs: parameters with role `input`, native order.
- Results: the declared result (descriptor `result`, else the mapped native
  return type unless void), then `output` parameters in native order. An
  `unnamed` output keeps its slot but loses its identifier.

The composition never reorders parameters relative to the native prototype.
"""

from typing import List, Optional, Sequence

from pydantic import BaseModel, ConfigDict

from tweakgen.engine.classifier import ClassifiedParameter
from tweakgen.enums import ParamRole, ResultShape
from tweakgen.tweaks.schema import ResolvedTweak
from tweakgen.types import TypeMapper, is_void


class InputEntry(BaseModel):
  """One exposed input parameter."""

  model_config = ConfigDict(frozen=True)

  name: str
  type: str


class ResultEntry(BaseModel):
  """One result slot. `name` is None for the declared result and unnamed outputs."""

  model_config = ConfigDict(frozen=True)

  name: Optional[str] = None
  type: str


class CallArgument(BaseModel):
  """
  One argument of the native call, in native order.

  Attributes:
      native_name: Native parameter this argument feeds.
      expression: Identifier the renderer passes (shadow name for `replace`).
      native_type: Native parameter type, for conversion at the call site.
      sequence: Whether the exposed value is a sequence.
  """

  model_config = ConfigDict(frozen=True)

  native_name: str
  expression: str
  native_type: str
  sequence: bool = False


class Signature(BaseModel):
  """The composed input and result lists."""

  model_config = ConfigDict(frozen=True)

  inputs: List[InputEntry]
  results: List[ResultEntry]
  call_args: List[CallArgument]

  @property
  def shape(self) -> ResultShape:
    if not self.results:
      return ResultShape.NONE
    if len(self.results) == 1:
      return ResultShape.SINGLE
    return ResultShape.TUPLE

  def describe(self) -> str:
    """
    Neutral one-line rendering used in logs and the `show` command.

    Example: `(n int32) -> []glbase.Buffer`
    """
    params = ", ".join(f"{entry.name} {entry.type}" for entry in self.inputs)
    if self.shape is ResultShape.NONE:
      return f"({params})"
    if self.shape is ResultShape.SINGLE:
      return f"({params}) -> {self.results[0].type}"
    results = ", ".join(f"{entry.name or '_'} {entry.type}" for entry in self.results)
    return f"({params}) -> ({results})"


def declared_result(resolved: ResolvedTweak, native_result: str, types: Optional[TypeMapper] = None) -> str:
  """
  Returns the declared result type, or an empty string when there is none.
  """
  if resolved.result:
    return resolved.result
  if is_void(native_result):
    return ""
  return (types or TypeMapper()).map(native_result).exposed


def compose(
  params: Sequence[ClassifiedParameter],
  resolved: ResolvedTweak,
  native_result: str = "void",
  types: Optional[TypeMapper] = None,
) -> Signature:
  """
  Builds the exposed signature.

  Args:
      params: Classified parameters in native order.
      resolved: The copy-resolved descriptor.
      native_result: The native return type.
      types: Type mapper for the native return type.

  Returns:
      Signature: Inputs, results and native call arguments.
  """
  inputs = [InputEntry(name=p.exposed_name, type=p.exposed_type) for p in params if p.role is ParamRole.INPUT]

  results: List[ResultEntry] = []
  declared = declared_result(resolved, native_result, types)
  if declared:
    results.append(ResultEntry(type=declared))
  for p in params:
    if p.role is ParamRole.OUTPUT:
      results.append(ResultEntry(name=None if p.unnamed else p.exposed_name, type=p.exposed_type))

  call_args = [
    CallArgument(
      native_name=p.native_name,
      expression=p.call_name,
      native_type=p.native_type,
      sequence=p.sequence,
    )
    for p in params
  ]

  return Signature(inputs=inputs, results=results, call_args=call_args)
