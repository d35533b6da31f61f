"""
Tweak Registry and Copy Resolution.

Holds one `FunctionTweak` per tweaked function and flattens `copy` chains into
`ResolvedTweak` records.

Resolution rules:
- A descriptor without `copy` resolves to itself.
- With `copy = T`, `T` is resolved first. Every field left unset on the
  descriptor falls back to the resolved `T`; `params` merge per key, with the
  descriptor's own entries winning.
- A name revisited while its own resolution is in progress is a copy cycle.

Results are memoized. The cache is lock-guarded so one registry can be shared by
concurrent generation workers.
"""

import logging
import threading
from types import MappingProxyType
from typing import Dict, Iterable, Iterator, List, Mapping, Tuple

from tweakgen.errors import ConfigError
from tweakgen.tweaks.schema import FunctionTweak, ResolvedTweak

logger = logging.getLogger(__name__)


class TweakRegistry:
  """
  Immutable, name-keyed store of function descriptors.

  Args:
      tweaks: Descriptors to register. Names must be unique.

  Raises:
      ConfigError: If two descriptors share a name.
  """

  def __init__(self, tweaks: Iterable[FunctionTweak] = ()):
    table: Dict[str, FunctionTweak] = {}
    for tweak in tweaks:
      if tweak.name in table:
        raise ConfigError("duplicate descriptor", function=tweak.name, field="name")
      table[tweak.name] = tweak

    self._tweaks: Mapping[str, FunctionTweak] = MappingProxyType(table)
    self._resolved: Dict[str, ResolvedTweak] = {}
    self._lock = threading.RLock()

  def __contains__(self, name: object) -> bool:
    return name in self._tweaks

  def __iter__(self) -> Iterator[str]:
    return iter(self._tweaks)

  def __len__(self) -> int:
    return len(self._tweaks)

  def names(self) -> List[str]:
    """Registered descriptor names in load order."""
    return list(self._tweaks)

  def get(self, name: str) -> FunctionTweak:
    """
    Returns the raw (unresolved) descriptor.

    Raises:
        ConfigError: If no descriptor has this name.
    """
    try:
      return self._tweaks[name]
    except KeyError:
      raise ConfigError("no descriptor registered", function=name) from None

  def resolve(self, name: str) -> ResolvedTweak:
    """
    Flattens the copy chain of a descriptor.

    Args:
        name: Canonical function name.

    Returns:
        ResolvedTweak: The merged, final descriptor.

    Raises:
        ConfigError: Unknown name, unknown copy target, or copy cycle.
    """
    if name not in self._tweaks:
      raise ConfigError("no descriptor registered", function=name)
    with self._lock:
      return self._resolve(name, ())

  def resolve_or_empty(self, name: str) -> ResolvedTweak:
    """
    Like `resolve`, but untweaked functions get the identity descriptor.
    """
    if name not in self._tweaks:
      return ResolvedTweak.empty(name)
    return self.resolve(name)

  def _resolve(self, name: str, in_progress: Tuple[str, ...]) -> ResolvedTweak:
    cached = self._resolved.get(name)
    if cached is not None:
      return cached

    if name in in_progress:
      cycle = in_progress[in_progress.index(name) :] + (name,)
      raise ConfigError(f"copy cycle: {' -> '.join(cycle)}", function=in_progress[0], field="copy")

    tweak = self._tweaks[name]
    if tweak.copy_from is None:
      resolved = ResolvedTweak.from_tweak(tweak)
    else:
      target = tweak.copy_from
      if target not in self._tweaks:
        raise ConfigError(f"unknown copy target '{target}'", function=name, field="copy")
      base = self._resolve(target, in_progress + (name,))
      resolved = _merge(tweak, base)
      logger.debug("Resolved %s via %s", name, " -> ".join(resolved.lineage))

    self._resolved[name] = resolved
    return resolved


def _merge(tweak: FunctionTweak, base: ResolvedTweak) -> ResolvedTweak:
  """
  Overlays the explicitly set fields of `tweak` on a resolved base.
  """
  params = dict(base.params)
  params.update(tweak.params)
  return ResolvedTweak(
    name=tweak.name,
    lineage=(tweak.name,) + base.lineage,
    params=params,
    result=tweak.result or base.result,
    before=tweak.before or base.before,
    after=tweak.after or base.after,
    doc=tweak.doc or base.doc,
  )
