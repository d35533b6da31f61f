"""
Tests for Runtime Configuration Loading.

Verifies:
1. `[tool.tweakgen]` is discovered in the nearest pyproject.toml.
2. Relative paths resolve against the TOML directory.
3. CLI arguments and `--set` overrides win over TOML values.
4. Malformed TOML is ignored with a warning.
"""

from pathlib import Path

import pytest
from pydantic import ValidationError

from tweakgen.config import RuntimeConfig, parse_cli_key_values

TOML = """
[project]
name = "bindings"

[tool.tweakgen]
catalog = "gl/catalog.json"
tweaks = ["gl/tweaks.yaml", "gl/extra.json"]
workers = 3
functions = ["GenBuffers"]

[tool.tweakgen.name_fixes]
texunit = "texUnit"

[tool.tweakgen.handle_types]
query = "glbase.Query"
"""


@pytest.fixture
def project(tmp_path):
  (tmp_path / "pyproject.toml").write_text(TOML, encoding="utf-8")
  nested = tmp_path / "src" / "pkg"
  nested.mkdir(parents=True)
  return tmp_path, nested


def test_defaults_without_toml(tmp_path):
  config = RuntimeConfig.load(search_path=tmp_path)

  assert config.catalog is None
  assert config.tweaks == []
  assert config.workers == 1
  assert config.functions == []


def test_toml_settings_are_loaded_from_parent(project):
  root, nested = project

  config = RuntimeConfig.load(search_path=nested)

  assert config.catalog == (root / "gl" / "catalog.json").resolve()
  assert config.tweaks == [(root / "gl" / "tweaks.yaml").resolve(), (root / "gl" / "extra.json").resolve()]
  assert config.workers == 3
  assert config.functions == ["GenBuffers"]
  assert config.normalizer()("texunit") == "texUnit"
  assert config.type_mapper().map("GLuint", param_name="query").exposed == "glbase.Query"


def test_cli_arguments_override_toml(project):
  root, _ = project

  config = RuntimeConfig.load(
    catalog=Path("other.json"),
    tweaks=[Path("mine.yaml")],
    workers=8,
    functions=["CreateProgram"],
    search_path=root,
  )

  assert config.catalog == Path("other.json")
  assert config.tweaks == [Path("mine.yaml")]
  assert config.workers == 8
  assert config.functions == ["CreateProgram"]


def test_set_overrides_update_toml_values(project):
  root, _ = project

  config = RuntimeConfig.load(overrides={"workers": 2}, search_path=root)

  assert config.workers == 2


def test_single_tweak_path_string_is_accepted(tmp_path):
  (tmp_path / "pyproject.toml").write_text('[tool.tweakgen]\ntweaks = "t.yaml"\n', encoding="utf-8")

  config = RuntimeConfig.load(search_path=tmp_path)

  assert config.tweaks == [(tmp_path / "t.yaml").resolve()]


def test_malformed_toml_is_ignored(tmp_path, captured_console):
  (tmp_path / "pyproject.toml").write_text("[tool.tweakgen\nworkers = ", encoding="utf-8")

  config = RuntimeConfig.load(search_path=tmp_path)

  assert config.workers == 1
  assert "malformed" in captured_console.getvalue()


def test_workers_must_be_positive(tmp_path):
  with pytest.raises(ValidationError):
    RuntimeConfig.load(workers=0, search_path=tmp_path)


def test_parse_cli_key_values(captured_console):
  parsed = parse_cli_key_values(["workers=4", "strict=true", "quiet=False", "catalog = gl.json", "broken"])

  assert parsed == {"workers": 4, "strict": True, "quiet": False, "catalog": "gl.json"}
  assert "Ignoring invalid config format" in captured_console.getvalue()
  assert parse_cli_key_values(None) == {}


def test_non_numeric_workers_fall_back_with_warning(project, captured_console):
  root, _ = project

  config = RuntimeConfig.load(overrides={"workers": "abc"}, search_path=root)

  assert config.workers == 1
  assert "Ignoring invalid workers value 'abc'" in captured_console.getvalue()
