"""
Template Expander.

Evaluates the `before`, `after` and `doc` snippets of a resolved descriptor with
Jinja2. Each snippet sees:

- `func`: the `FuncContext` of the function being generated.
- `param_type(func, "name")`: exposed type of a classified parameter.
- `copy_doc("Other")`: the expanded documentation of another function.
- `func_since(func, "2.0+")`: an availability sentence for the docs.

Helpers are closures created per expansion; they read only their arguments and
the context factory, never shared mutable state.

Expansion runs after copy-resolution and classification, so inherited text
that refers to `{{ func.name }}` names the inheriting function.
"""

import textwrap
from typing import Callable, List, Optional, Tuple, Union

import jinja2
from pydantic import BaseModel, ConfigDict

from tweakgen.engine.classifier import ClassifiedParameter
from tweakgen.engine.composer import InputEntry, ResultEntry
from tweakgen.enums import SnippetKind
from tweakgen.errors import TemplateError, TweakError
from tweakgen.tweaks.schema import ResolvedTweak


class FuncContext(BaseModel):
  """
  Read-only view of a function handed to templates as `func`.
  """

  model_config = ConfigDict(frozen=True)

  name: str
  lineage: Tuple[str, ...] = ()
  params: List[ClassifiedParameter] = []
  inputs: List[InputEntry] = []
  results: List[ResultEntry] = []

  def param(self, name: str) -> Optional[ClassifiedParameter]:
    """Finds a classified parameter by native or normalized name."""
    for p in self.params:
      if name in (p.native_name, p.name):
        return p
    return None


class Snippets(BaseModel):
  """The three expanded fragments of one function."""

  model_config = ConfigDict(frozen=True)

  before: str = ""
  after: str = ""
  doc: str = ""


# Supplies the context and resolved descriptor of another function (for copy_doc).
ContextFactory = Callable[[str], Tuple[FuncContext, ResolvedTweak]]


def format_since(name: str, since: str) -> str:
  """
  Formats an availability sentence.

  `"2.0+"` reads "2.0 or greater"; `"|"` separates alternative versions.

  Example:
      >>> format_since("AttachShader", "2.0+")
      'AttachShader is available in GL version 2.0 or greater.'
  """
  versions = [v.strip() for v in since.split("|") if v.strip()]
  if not versions:
    raise TemplateError(f"empty version tag in func_since for {name}")
  rendered = [f"{v[:-1]} or greater" if v.endswith("+") else v for v in versions]
  return f"{name} is available in GL version {' or '.join(rendered)}."


def clean_snippet(source: str) -> str:
  """Dedents an indented table literal and trims surrounding blank lines."""
  return textwrap.dedent(source).strip()


class TemplateExpander:
  """
  Expands snippet templates for resolved descriptors.

  Args:
      context_factory: Returns the context of another function by name. Used by
          `copy_doc`. When None, `copy_doc` is unavailable.
  """

  def __init__(self, context_factory: Optional[ContextFactory] = None):
    self._context_factory = context_factory
    self._env = jinja2.Environment(
      undefined=jinja2.StrictUndefined,
      autoescape=False,
      keep_trailing_newline=False,
    )

  def expand(self, ctx: FuncContext, resolved: ResolvedTweak) -> Snippets:
    """
    Expands all three snippets of a function.

    Raises:
        TemplateError: Attributed to the function and the failing snippet kind.
    """
    return Snippets(
      before=self.render(resolved.before, ctx, SnippetKind.BEFORE),
      after=self.render(resolved.after, ctx, SnippetKind.AFTER),
      doc=self.render(resolved.doc, ctx, SnippetKind.DOC),
    )

  def render(
    self,
    source: str,
    ctx: FuncContext,
    kind: SnippetKind,
    doc_stack: Tuple[str, ...] = (),
  ) -> str:
    """
    Expands one snippet.

    Args:
        source: Raw template text from the resolved descriptor.
        ctx: Context of the function being generated.
        kind: Which snippet this is, for error attribution.
        doc_stack: Functions whose docs are being expanded through `copy_doc`.

    Returns:
        str: The expanded, trimmed text.
    """
    text = clean_snippet(source)
    if not text:
      return ""

    stack = doc_stack + (ctx.name,)
    try:
      template = self._env.from_string(text)
      rendered = template.render(
        func=ctx,
        param_type=self._param_type_helper(ctx),
        copy_doc=self._copy_doc_helper(stack),
        func_since=_func_since,
      )
    except TweakError as e:
      if e.function in (None, ctx.name):
        raise TemplateError(e.message, function=ctx.name, field=kind.value) from e
      raise TemplateError(str(e), function=ctx.name, field=kind.value) from e
    except Exception as e:
      raise TemplateError(f"{type(e).__name__}: {e}", function=ctx.name, field=kind.value) from e

    return rendered.strip()

  def _param_type_helper(self, owner: FuncContext) -> Callable[..., str]:
    def param_type(func: FuncContext, name: str) -> str:
      target = func if isinstance(func, FuncContext) else owner
      param = target.param(name)
      if param is None:
        raise TemplateError(f"unknown parameter '{name}' in param_type", function=target.name)
      return param.exposed_type

    return param_type

  def _copy_doc_helper(self, stack: Tuple[str, ...]) -> Callable[[str], str]:
    def copy_doc(name: str) -> str:
      if name in stack:
        chain = " -> ".join(stack + (name,))
        raise TemplateError(f"recursive copy_doc: {chain}", function=stack[-1])
      if self._context_factory is None:
        raise TemplateError("copy_doc is not available in this context", function=stack[-1])
      other_ctx, other = self._context_factory(name)
      return self.render(other.doc, other_ctx, SnippetKind.DOC, doc_stack=stack)

    return copy_doc


def _func_since(func: Union[FuncContext, str], since: str) -> str:
  name = func.name if isinstance(func, FuncContext) else str(func)
  return format_since(name, since)
