"""
Generation Pipeline.

Runs, for each catalog function:

    resolve (copy chain) -> classify -> compose -> expand templates

and collects the structured results into a `GenerationReport`.

Failures are attributed to one function and never abort the run: every error
across the catalog is accumulated so a single run reports the complete set of
problems. Functions are independent, so `workers > 1` processes them on a
thread pool; the report always follows catalog order.
"""

import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Iterable, List, Optional, Sequence, Tuple, Union

from pydantic import BaseModel, Field
from rich.markup import escape

from tweakgen.catalog import Catalog
from tweakgen.engine.classifier import ClassifiedParameter, classify
from tweakgen.engine.composer import CallArgument, InputEntry, ResultEntry, Signature, compose
from tweakgen.engine.templates import FuncContext, TemplateExpander
from tweakgen.enums import ResultShape
from tweakgen.errors import ConfigError, TweakError
from tweakgen.tweaks.names import NameNormalizer
from tweakgen.tweaks.registry import TweakRegistry
from tweakgen.tweaks.schema import ResolvedTweak
from tweakgen.types import TypeMapper
from tweakgen.utils.console import log_error, log_success, log_warning

logger = logging.getLogger(__name__)


class GeneratedFunction(BaseModel):
  """
  Structured description of one wrapper function, handed to a renderer.
  """

  name: str
  lineage: List[str] = Field(default_factory=list, description="Copy chain the descriptor was resolved through.")
  inputs: List[InputEntry] = Field(default_factory=list)
  results: List[ResultEntry] = Field(default_factory=list)
  result_shape: ResultShape = ResultShape.NONE
  params: List[ClassifiedParameter] = Field(default_factory=list)
  call_args: List[CallArgument] = Field(default_factory=list)
  native_result: str = "void"
  before: str = ""
  after: str = ""
  doc: str = ""


class FunctionError(BaseModel):
  """An error attributed to one function and field."""

  function: str
  kind: str
  field: Optional[str] = None
  message: str

  @classmethod
  def from_exception(cls, name: str, exc: TweakError) -> "FunctionError":
    return cls(function=exc.function or name, kind=exc.kind, field=exc.field, message=exc.message)

  def __str__(self) -> str:
    where = f"{self.function}.{self.field}" if self.field else self.function
    return f"[{self.kind}] {where}: {self.message}"


class GenerationReport(BaseModel):
  """
  Outcome of a generation run.
  """

  functions: List[GeneratedFunction] = Field(default_factory=list)
  errors: List[FunctionError] = Field(default_factory=list)

  @property
  def success(self) -> bool:
    return not self.errors

  def get(self, name: str) -> Optional[GeneratedFunction]:
    for fn in self.functions:
      if fn.name == name:
        return fn
    return None


Outcome = Union[GeneratedFunction, List[FunctionError]]


class Generator:
  """
  Applies a tweak registry to a native catalog.

  Args:
      catalog: Native prototypes.
      registry: Function descriptors.
      normalizer: Parameter name table (built-in table when omitted).
      types: Native type mapper (built-in tables when omitted).
      workers: Number of concurrent workers. 1 runs sequentially.
  """

  def __init__(
    self,
    catalog: Catalog,
    registry: TweakRegistry,
    normalizer: Optional[NameNormalizer] = None,
    types: Optional[TypeMapper] = None,
    workers: int = 1,
  ):
    self.catalog = catalog
    self.registry = registry
    self.normalizer = normalizer or NameNormalizer()
    self.types = types or TypeMapper()
    self.workers = max(1, workers)
    self.expander = TemplateExpander(context_factory=self._context_for)

  def generate(self, name: str) -> GeneratedFunction:
    """
    Runs the full pipeline for one function.

    Raises:
        ConfigError: Descriptor or catalog inconsistency.
        TemplateError: Snippet expansion failure.
    """
    native = self.catalog.lookup(name)
    ctx, resolved, signature = self._prepare(name)
    snippets = self.expander.expand(ctx, resolved)

    return GeneratedFunction(
      name=name,
      lineage=list(resolved.lineage),
      inputs=ctx.inputs,
      results=ctx.results,
      result_shape=signature.shape,
      params=ctx.params,
      call_args=signature.call_args,
      native_result=native.result,
      before=snippets.before,
      after=snippets.after,
      doc=snippets.doc,
    )

  def run(self, names: Optional[Iterable[str]] = None) -> GenerationReport:
    """
    Generates every catalog function (or the selected subset).

    Descriptors naming functions absent from the catalog are reported as
    `unknown function` errors.

    Args:
        names: Optional subset of function names to generate.

    Returns:
        GenerationReport: Generated functions in catalog order plus all errors.
    """
    report = GenerationReport()

    if names is None:
      selected = self.catalog.names()
      for tweak_name in self.registry.names():
        if tweak_name not in self.catalog:
          missing = ConfigError("unknown function", function=tweak_name)
          report.errors.append(FunctionError.from_exception(tweak_name, missing))
    else:
      selected = list(names)

    outcomes = self._run_all(selected)
    for outcome in outcomes:
      if isinstance(outcome, GeneratedFunction):
        report.functions.append(outcome)
      else:
        report.errors.extend(outcome)

    for error in report.errors:
      log_error(escape(str(error)))
    if report.success:
      log_success(f"Generated {len(report.functions)} functions")
    else:
      log_warning(f"Generated {len(report.functions)} functions with {len(report.errors)} errors")
    return report

  def _run_all(self, names: Sequence[str]) -> List[Outcome]:
    if self.workers == 1 or len(names) < 2:
      return [self._run_one(n) for n in names]
    with ThreadPoolExecutor(max_workers=self.workers) as pool:
      return list(pool.map(self._run_one, names))

  def _run_one(self, name: str) -> Outcome:
    try:
      return self.generate(name)
    except TweakError as e:
      return [FunctionError.from_exception(name, e)]

  def _context_for(self, name: str) -> Tuple[FuncContext, ResolvedTweak]:
    ctx, resolved, _ = self._prepare(name)
    return ctx, resolved

  def _prepare(self, name: str) -> Tuple[FuncContext, ResolvedTweak, Signature]:
    """
    Resolves, classifies and composes a function.

    Functions that are not in the catalog but have a descriptor get a
    name-only context, which is enough for `copy_doc` of shared prose.
    """
    resolved = self.registry.resolve_or_empty(name)
    if name not in self.catalog:
      if name not in self.registry:
        raise ConfigError("unknown function", function=name)
      empty = Signature(inputs=[], results=[], call_args=[])
      return FuncContext(name=name, lineage=resolved.lineage), resolved, empty

    native = self.catalog.lookup(name)
    params = classify(native, resolved, self.normalizer, self.types)
    signature = compose(params, resolved, native.result, self.types)
    logger.debug("%s%s", name, signature.describe())
    ctx = FuncContext(
      name=name,
      lineage=resolved.lineage,
      params=params,
      inputs=signature.inputs,
      results=signature.results,
    )
    return ctx, resolved, signature
