"""
Engine Package.

The per-function pipeline: classification, signature composition, template
expansion, and the generator driving them over a catalog.
"""

from tweakgen.engine.classifier import ClassifiedParameter, classify
from tweakgen.engine.composer import Signature, compose
from tweakgen.engine.generator import FunctionError, GeneratedFunction, GenerationReport, Generator
from tweakgen.engine.templates import FuncContext, TemplateExpander

__all__ = [
  "ClassifiedParameter",
  "FuncContext",
  "FunctionError",
  "GeneratedFunction",
  "GenerationReport",
  "Generator",
  "Signature",
  "TemplateExpander",
  "classify",
  "compose",
]
