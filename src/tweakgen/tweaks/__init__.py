"""
Tweak Table Package.

Contains the descriptor schema, the name normalizer, the registry with copy
resolution, and the file loaders.
"""

from tweakgen.tweaks.names import NameNormalizer, PARAM_NAME_FIXES
from tweakgen.tweaks.registry import TweakRegistry
from tweakgen.tweaks.schema import FunctionTweak, ParamTweak, ResolvedTweak

__all__ = [
  "FunctionTweak",
  "NameNormalizer",
  "PARAM_NAME_FIXES",
  "ParamTweak",
  "ResolvedTweak",
  "TweakRegistry",
]
