"""
Meta Command Handlers.

Exports the JSON schema of the tweak table format so editors and external
tools can validate tables before they reach the generator.
"""

import json

from tweakgen.tweaks.schema import TweakTable


def handle_schema() -> int:
  """
  Prints the JSON schema derived from `TweakTable` to standard output.

  Returns:
      int: Exit code (0 for success).
  """
  schema = TweakTable.model_json_schema(by_alias=True)
  print(json.dumps(schema, indent=2))
  return 0
