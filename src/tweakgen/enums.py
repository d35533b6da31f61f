"""
Enumerations for tweakgen.

Defines the parameter roles assigned by the classifier, the snippet kinds
handled by the template expander, and the shape of a composed result list.
"""

from enum import Enum


class ParamRole(str, Enum):
  """
  Where a classified parameter ends up in the exposed signature.
  """

  INPUT = "input"
  OUTPUT = "output"
  OMITTED = "omitted"


class SnippetKind(str, Enum):
  """
  The three template-expanded fragments attached to a function.
  """

  BEFORE = "before"
  AFTER = "after"
  DOC = "doc"


class ResultShape(str, Enum):
  """
  Rendering rule for a result list.

  NONE: the function returns nothing.
  SINGLE: one element, rendered as a bare type.
  TUPLE: several elements, rendered as an ordered tuple.
  """

  NONE = "none"
  SINGLE = "single"
  TUPLE = "tuple"
