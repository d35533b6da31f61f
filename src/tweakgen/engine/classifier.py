"""
Parameter Classifier.

Applies the per-parameter flags of a resolved descriptor to a native prototype,
producing one `ClassifiedParameter` per native parameter, in native order.

Per parameter:
1.  Normalize the native name (system-wide table), then apply `rename`.
2.  Map the native type; `single` collapses a sequence to its element type,
    then `retype` overrides the result.
3.  Assign the role: `omit` → omitted, `output` → output, otherwise input.
4.  `replace` routes the native call through a `<name>_c` shadow variable.

Tweak lookup contract: tweaks are keyed by the original native parameter name.
The normalized spelling is accepted as an alias; keying the same parameter both
ways is a configuration error.
"""

import logging
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict

from tweakgen.catalog import NativeFunction
from tweakgen.enums import ParamRole
from tweakgen.errors import ConfigError
from tweakgen.tweaks.names import NameNormalizer
from tweakgen.tweaks.schema import ParamTweak, ResolvedTweak
from tweakgen.types import TypeMapper

logger = logging.getLogger(__name__)

SHADOW_SUFFIX = "_c"


class ClassifiedParameter(BaseModel):
  """
  A native parameter annotated with its exposed form and role.

  Attributes:
      native_name: Name in the native prototype.
      native_type: Type in the native prototype.
      name: Normalized native name; what the before snippet defines for omitted
          or renamed parameters.
      exposed_name: Name in the exposed signature.
      exposed_type: Type in the exposed signature.
      role: input, output or omitted.
      sequence: True when the exposed value is a sequence over a native pointer.
      unnamed: Drop the identifier when listed as a result.
      replace: The native call uses `call_name` (a shadow variable).
      call_name: Identifier passed to the native call.
  """

  model_config = ConfigDict(frozen=True)

  native_name: str
  native_type: str
  name: str
  exposed_name: str
  exposed_type: str
  role: ParamRole
  sequence: bool = False
  unnamed: bool = False
  replace: bool = False
  call_name: str


def _match_tweaks(fn: NativeFunction, resolved: ResolvedTweak, normalizer: NameNormalizer) -> Dict[str, ParamTweak]:
  """
  Maps native parameter names to their tweaks, validating every tweak key.
  """
  by_native: Dict[str, ParamTweak] = {}
  claimed: Dict[str, str] = {}

  for param in fn.params:
    normalized = normalizer(param.name)
    keys = [param.name] if normalized == param.name else [param.name, normalized]
    hits = [k for k in keys if k in resolved.params]
    if len(hits) > 1:
      raise ConfigError(
        f"parameter '{param.name}' is tweaked under both '{hits[0]}' and '{hits[1]}'",
        function=fn.name,
        field="params",
      )
    if hits:
      by_native[param.name] = resolved.params[hits[0]]
      claimed[hits[0]] = param.name

  for key in resolved.params:
    if key not in claimed:
      raise ConfigError(f"unknown parameter '{key}'", function=fn.name, field=f"params.{key}")

  return by_native


def classify(
  fn: NativeFunction,
  resolved: ResolvedTweak,
  normalizer: Optional[NameNormalizer] = None,
  types: Optional[TypeMapper] = None,
) -> List[ClassifiedParameter]:
  """
  Classifies every native parameter of a function.

  Args:
      fn: The native prototype.
      resolved: The copy-resolved descriptor for `fn`.
      normalizer: Name normalization table (defaults to the built-in table).
      types: Type mapper (defaults to the built-in tables).

  Returns:
      List[ClassifiedParameter]: One entry per native parameter, native order.

  Raises:
      ConfigError: Unknown parameter in the descriptor, or `output` and `omit`
          set on the same parameter.
  """
  normalizer = normalizer or NameNormalizer()
  types = types or TypeMapper()
  tweaks = _match_tweaks(fn, resolved, normalizer)

  classified: List[ClassifiedParameter] = []
  for param in fn.params:
    tweak = tweaks.get(param.name, ParamTweak())
    if tweak.output and tweak.omit:
      raise ConfigError(
        f"conflicting roles on '{param.name}': output and omit are exclusive",
        function=fn.name,
        field=f"params.{param.name}",
      )

    name = normalizer(param.name)
    mapped = types.map(param.type, param_name=name)

    exposed_type = mapped.exposed
    sequence = mapped.sequence
    if tweak.single:
      if mapped.sequence:
        exposed_type = mapped.element
        sequence = False
      else:
        logger.warning("%s: 'single' has no effect on non-pointer parameter '%s'", fn.name, param.name)
    if tweak.retype:
      exposed_type = tweak.retype

    if tweak.omit:
      role = ParamRole.OMITTED
    elif tweak.output:
      role = ParamRole.OUTPUT
    else:
      role = ParamRole.INPUT

    classified.append(
      ClassifiedParameter(
        native_name=param.name,
        native_type=param.type,
        name=name,
        exposed_name=tweak.rename or name,
        exposed_type=exposed_type,
        role=role,
        sequence=sequence,
        unnamed=tweak.unnamed,
        replace=tweak.replace,
        call_name=name + SHADOW_SUFFIX if tweak.replace else name,
      )
    )

  return classified
