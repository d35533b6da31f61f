"""
Generate and Check Command Handlers.

`generate` runs the pipeline and emits the JSON report for a renderer.
`check` runs the same pipeline and prints only a summary of the problems found.
"""

import sys
from pathlib import Path
from typing import Optional

from rich.markup import escape
from rich.table import Table

from tweakgen.cli.handlers.pipeline import build_generator
from tweakgen.config import RuntimeConfig
from tweakgen.errors import ConfigError
from tweakgen.utils.console import console, log_error, log_success


def handle_generate(config: RuntimeConfig, out: Optional[Path] = None) -> int:
  """
  Generates every configured function and writes the report.

  Args:
      config: Resolved runtime configuration.
      out: Destination JSON file. Stdout when None.

  Returns:
      int: 0 if every function generated cleanly, 1 otherwise.
  """
  try:
    generator = build_generator(config)
  except ConfigError as e:
    log_error(escape(str(e)))
    return 1

  report = generator.run(config.functions or None)
  payload = report.model_dump_json(indent=2)

  if out is None:
    sys.stdout.write(payload + "\n")
  else:
    out.parent.mkdir(parents=True, exist_ok=True)
    out.write_text(payload + "\n", encoding="utf-8")
    log_success(f"Report written to [path]{escape(str(out))}[/path]")

  return 0 if report.success else 1


def handle_check(config: RuntimeConfig) -> int:
  """
  Validates the tweak tables against the catalog without writing output.

  Returns:
      int: 0 if no errors were found, 1 otherwise.
  """
  try:
    generator = build_generator(config)
  except ConfigError as e:
    log_error(escape(str(e)))
    return 1

  report = generator.run(config.functions or None)
  if report.success:
    log_success(f"All {len(report.functions)} functions are consistent")
    return 0

  table = Table(title="Tweak Table Problems")
  table.add_column("Function", style="func")
  table.add_column("Kind")
  table.add_column("Field")
  table.add_column("Message", style="error")
  for error in report.errors:
    table.add_row(escape(error.function), error.kind, escape(error.field or "-"), escape(error.message))
  console.print(table)
  return 1
