"""
Show Command Handler.

Prints how a single function is transformed: its copy lineage, classified
parameters, composed signature and expanded snippets.
"""

from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from tweakgen.cli.handlers.pipeline import build_generator
from tweakgen.config import RuntimeConfig
from tweakgen.engine.composer import Signature
from tweakgen.errors import TweakError
from tweakgen.utils.console import console, log_error


def handle_show(config: RuntimeConfig, name: str) -> int:
  """
  Displays the generated description of one function.

  Args:
      config: Resolved runtime configuration.
      name: Canonical function name.

  Returns:
      int: 0 on success, 1 if the function fails to generate.
  """
  try:
    generator = build_generator(config)
    fn = generator.generate(name)
  except TweakError as e:
    log_error(escape(str(e)))
    return 1

  signature = Signature(inputs=fn.inputs, results=fn.results, call_args=fn.call_args)
  console.print(f"[func]{escape(fn.name)}[/func][code]{escape(signature.describe())}[/code]")
  if len(fn.lineage) > 1:
    console.print(f"copied via {escape(' -> '.join(fn.lineage))}")

  table = Table(title="Parameters")
  table.add_column("Native")
  table.add_column("Native Type")
  table.add_column("Exposed")
  table.add_column("Exposed Type")
  table.add_column("Role")
  table.add_column("Call")
  for p in fn.params:
    table.add_row(
      escape(p.native_name),
      escape(p.native_type),
      escape(p.exposed_name),
      escape(p.exposed_type),
      p.role.value,
      escape(p.call_name),
    )
  console.print(table)

  for label, text in (("before", fn.before), ("after", fn.after), ("doc", fn.doc)):
    if text:
      console.print(Panel(escape(text), title=label))
  return 0
