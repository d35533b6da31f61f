"""
Tests for the Name Normalizer and Tweak Table Loading.
"""

import json

import pytest

from tweakgen.errors import ConfigError
from tweakgen.tweaks.loader import BUNDLED_TABLE, load_registry, load_tweaks, parse_tweaks, resolve_data_dir
from tweakgen.tweaks.names import PARAM_NAME_FIXES, NameNormalizer


def test_normalizer_fixes_loose_spellings():
  norm = NameNormalizer()

  assert norm("bufsize") == "bufSize"
  assert norm("infolog") == "infoLog"
  assert norm("indx") == "index"
  assert norm("internalformat") == "internalFormat"


def test_normalizer_passes_unknown_names_through():
  assert NameNormalizer()("shader") == "shader"
  assert NameNormalizer()("bufSize") == "bufSize"


def test_normalizer_extra_entries_layer_over_defaults():
  norm = NameNormalizer({"texunit": "texUnit", "indx": "idx"})

  assert norm("texunit") == "texUnit"
  assert norm("indx") == "idx"
  assert norm("bufsize") == "bufSize"


def test_normalizer_tables_are_immutable():
  with pytest.raises(TypeError):
    PARAM_NAME_FIXES["x"] = "y"
  with pytest.raises(TypeError):
    NameNormalizer().table["x"] = "y"


def test_load_yaml_table(tmp_path):
  table = tmp_path / "tweaks.yaml"
  table.write_text(
    """
functions:
  - name: GenBuffers
    params:
      buffers: {output: true, unnamed: true, retype: "[]glbase.Buffer"}
    before: |
      buffers := make([]glbase.Buffer, n)
  - name: GenTextures
    copy: GenBuffers
""",
    encoding="utf-8",
  )

  tweaks = load_tweaks(table)

  assert [t.name for t in tweaks] == ["GenBuffers", "GenTextures"]
  assert tweaks[0].params["buffers"].output is True
  assert tweaks[0].before == "buffers := make([]glbase.Buffer, n)\n"
  assert tweaks[1].copy_from == "GenBuffers"


def test_load_json_list_table(tmp_path):
  table = tmp_path / "tweaks.json"
  table.write_text(json.dumps([{"name": "CreateProgram", "result": "glbase.Program"}]), encoding="utf-8")

  tweaks = load_tweaks(table)

  assert tweaks[0].result == "glbase.Program"


def test_unknown_flag_is_rejected_and_attributed():
  with pytest.raises(ConfigError) as exc:
    parse_tweaks([{"name": "GenBuffers", "params": {"buffers": {"outptu": True}}}])

  assert exc.value.function == "GenBuffers"
  assert "invalid descriptor" in exc.value.message


def test_unknown_descriptor_field_is_rejected():
  with pytest.raises(ConfigError):
    parse_tweaks([{"name": "GenBuffers", "docs": "typo"}])


def test_wrong_layout_is_rejected():
  with pytest.raises(ConfigError, match="expected a list"):
    parse_tweaks("not a table")


def test_empty_file_is_an_empty_table(tmp_path):
  table = tmp_path / "empty.yaml"
  table.write_text("", encoding="utf-8")

  assert load_tweaks(table) == []


def test_invalid_yaml_raises_config_error(tmp_path):
  table = tmp_path / "broken.yaml"
  table.write_text("functions: [name: {", encoding="utf-8")

  with pytest.raises(ConfigError, match="invalid tweak table"):
    load_tweaks(table)


def test_missing_file_raises_config_error(tmp_path):
  with pytest.raises(ConfigError, match="cannot read"):
    load_tweaks(tmp_path / "absent.yaml")


def test_duplicates_across_files_are_rejected(tmp_path):
  first = tmp_path / "a.json"
  second = tmp_path / "b.json"
  first.write_text(json.dumps([{"name": "A"}]), encoding="utf-8")
  second.write_text(json.dumps([{"name": "A"}]), encoding="utf-8")

  with pytest.raises(ConfigError, match="duplicate descriptor"):
    load_registry([first, second])


def test_bundled_table_loads_by_default():
  assert (resolve_data_dir() / BUNDLED_TABLE).exists()

  registry = load_registry()

  assert "GenBuffers" in registry
  assert registry.resolve("GetUniformiv").lineage == ("GetUniformiv", "GetUniformfv")
