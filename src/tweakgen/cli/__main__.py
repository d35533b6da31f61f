"""
Main Entry Point for the tweakgen CLI.

Parses arguments and dispatches to the handlers in `tweakgen.cli.handlers`.
"""

import argparse
import sys
from pathlib import Path
from typing import List, Optional

from tweakgen import __version__
from tweakgen.cli import handlers
from tweakgen.config import RuntimeConfig, parse_cli_key_values


def _add_pipeline_args(cmd: argparse.ArgumentParser) -> None:
  cmd.add_argument("--catalog", type=Path, default=None, help="Native API catalog JSON (default: from toml or bundled)")
  cmd.add_argument(
    "--tweaks",
    type=Path,
    nargs="+",
    default=None,
    help="Tweak tables, YAML or JSON (default: from toml or bundled)",
  )
  cmd.add_argument("--workers", type=int, default=None, help="Concurrent workers (default: 1)")
  cmd.add_argument(
    "--set",
    dest="overrides",
    nargs="*",
    help="Configuration overrides in key=value format (e.g. workers=4)",
  )


def _config_from(args: argparse.Namespace, functions: Optional[List[str]] = None) -> RuntimeConfig:
  return RuntimeConfig.load(
    catalog=args.catalog,
    tweaks=args.tweaks,
    workers=args.workers,
    functions=functions,
    overrides=parse_cli_key_values(args.overrides),
  )


def main(argv: Optional[List[str]] = None) -> int:
  """
  Main CLI entry point.

  Args:
      argv: Optional list of command line arguments (defaults to sys.argv).

  Returns:
      int: Exit code (0 for success, non-zero for failure).
  """
  parser = argparse.ArgumentParser(description="tweakgen: Tweak-driven binding signature generator")
  parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")

  subparsers = parser.add_subparsers(dest="command", required=True)

  # --- Command: GENERATE ---
  cmd_gen = subparsers.add_parser("generate", help="Generate wrapper descriptions as JSON")
  _add_pipeline_args(cmd_gen)
  cmd_gen.add_argument("--out", type=Path, default=None, help="Output JSON file (default: stdout)")
  cmd_gen.add_argument("--only", nargs="+", default=None, help="Generate only these functions")

  # --- Command: CHECK ---
  cmd_check = subparsers.add_parser("check", help="Validate tweak tables against the catalog")
  _add_pipeline_args(cmd_check)

  # --- Command: SHOW ---
  cmd_show = subparsers.add_parser("show", help="Show how one function is transformed")
  cmd_show.add_argument("name", help="Canonical function name (e.g. GenBuffers)")
  _add_pipeline_args(cmd_show)

  # --- Command: SCHEMA ---
  subparsers.add_parser("schema", help="Print the JSON schema of the tweak table format")

  args = parser.parse_args(argv)

  if args.command == "generate":
    return handlers.handle_generate(_config_from(args, args.only), args.out)

  elif args.command == "check":
    return handlers.handle_check(_config_from(args))

  elif args.command == "show":
    return handlers.handle_show(_config_from(args), args.name)

  elif args.command == "schema":
    return handlers.handle_schema()

  return 0


if __name__ == "__main__":
  sys.exit(main())
