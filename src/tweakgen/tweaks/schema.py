"""
Pydantic Schemas for the Tweak Table.

Defines the per-function descriptor (`FunctionTweak`) and the per-parameter
flags (`ParamTweak`) read from the tweak table files, plus `ResolvedTweak`,
the flattened form produced by copy-resolution.

All models are frozen: the table is loaded once and never mutated.
"""

from typing import Dict, List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator


class ParamTweak(BaseModel):
  """
  Adjustments applied to a single native parameter.
  """

  model_config = ConfigDict(extra="forbid", frozen=True)

  rename: str = Field("", description="Exposed name override. The native call keeps the original name.")
  replace: bool = Field(
    False,
    description="The native call references a shadow variable '<name>_c' instead of the exposed name.",
  )
  retype: str = Field("", description="Exposed type override.")
  output: bool = Field(False, description="Move the parameter from the input list to the result list.")
  unnamed: bool = Field(False, description="Drop the identifier when the parameter appears in the result list.")
  single: bool = Field(False, description="Treat a pointer/array parameter as a scalar rather than a sequence.")
  omit: bool = Field(False, description="Drop the parameter; the before snippet must define it for the native call.")


class FunctionTweak(BaseModel):
  """
  Descriptor for one tweaked function, keyed by its canonical native name.

  Template fields (`before`, `after`, `doc`) are Jinja2 sources. They are not
  parsed here; parsing happens after copy-resolution so inherited text renders
  in the context of the inheriting function.
  """

  model_config = ConfigDict(extra="forbid", frozen=True, populate_by_name=True)

  name: str = Field(..., min_length=1, description="Canonical function name (matches a catalog entry).")
  copy_from: Optional[str] = Field(
    None,
    alias="copy",
    description="Inherit every unset field from the resolved descriptor of this function.",
  )
  params: Dict[str, ParamTweak] = Field(default_factory=dict, description="Tweaks keyed by native parameter name.")
  result: str = Field("", description="Declared result type, replacing the mapped native return type.")
  before: str = Field("", description="Template for code injected before the native call.")
  after: str = Field("", description="Template for code injected after the native call.")
  doc: str = Field("", description="Template for the function documentation.")

  @field_validator("copy_from")
  @classmethod
  def _blank_copy_is_none(cls, v: Optional[str]) -> Optional[str]:
    if v is not None and not v.strip():
      return None
    return v


class ResolvedTweak(BaseModel):
  """
  A descriptor after copy-resolution: every field is final.

  Attributes:
      name: The function this resolution belongs to.
      lineage: Names walked along the copy chain, starting with `name`.
  """

  model_config = ConfigDict(frozen=True)

  name: str
  lineage: Tuple[str, ...] = ()
  params: Dict[str, ParamTweak] = Field(default_factory=dict)
  result: str = ""
  before: str = ""
  after: str = ""
  doc: str = ""

  @classmethod
  def from_tweak(cls, tweak: FunctionTweak) -> "ResolvedTweak":
    """Wraps a descriptor that has no `copy` reference."""
    return cls(
      name=tweak.name,
      lineage=(tweak.name,),
      params=dict(tweak.params),
      result=tweak.result,
      before=tweak.before,
      after=tweak.after,
      doc=tweak.doc,
    )

  @classmethod
  def empty(cls, name: str) -> "ResolvedTweak":
    """The identity tweak for functions without a descriptor."""
    return cls(name=name, lineage=(name,))

  @property
  def inherited(self) -> bool:
    return len(self.lineage) > 1


class TweakTable(BaseModel):
  """
  Top-level file format: `{"functions": [...]}`.
  """

  functions: List[FunctionTweak] = Field(default_factory=list)
