"""
Tests for the Generation Pipeline.

Verifies:
1. End-to-end resolution, classification, composition and expansion.
2. Inherited templates refer to the inheriting function.
3. Errors are attributed per function and accumulated across the run.
4. Parallel runs produce the same report as sequential runs.
5. The bundled tables generate cleanly against the bundled catalog.
"""

import pytest

import tweakgen
from tweakgen.catalog import Catalog
from tweakgen.cli.handlers.pipeline import BUNDLED_CATALOG
from tweakgen.engine.generator import Generator
from tweakgen.enums import ResultShape
from tweakgen.errors import ConfigError
from tweakgen.tweaks.loader import load_registry, resolve_data_dir

UNIFORM_FV = {
  "name": "GetUniformfv",
  "params": {"params": {"replace": True}},
  "before": 'params_c := make({{ param_type(func, "params") }}, 4)',
  "after": "copy(params, params_c)",
  "doc": "returns the value. Call {{ func.name }} for each element.",
}


def test_example_d_copied_templates_name_the_inheritor(gl_catalog, make_registry):
  registry = make_registry(UNIFORM_FV, {"name": "GetUniformiv", "copy": "GetUniformfv"})

  report = Generator(gl_catalog, registry).run(["GetUniformfv", "GetUniformiv"])

  assert report.success
  fv = report.get("GetUniformfv")
  iv = report.get("GetUniformiv")
  assert fv.doc == "returns the value. Call GetUniformfv for each element."
  assert iv.doc == "returns the value. Call GetUniformiv for each element."
  assert "GetUniformfv" not in iv.doc
  # param_type follows the inheritor's own prototype.
  assert fv.before == "params_c := make([]float32, 4)"
  assert iv.before == "params_c := make([]int32, 4)"
  assert iv.after == "copy(params, params_c)"
  assert iv.lineage == ["GetUniformiv", "GetUniformfv"]
  assert [a.expression for a in iv.call_args] == ["program", "location", "params_c"]


def test_untweaked_function_passes_through(gl_catalog, make_registry):
  fn = Generator(gl_catalog, make_registry()).generate("Viewport")

  assert [e.name for e in fn.inputs] == ["x", "y", "width", "height"]
  assert fn.results == []
  assert fn.result_shape is ResultShape.NONE
  assert (fn.before, fn.after, fn.doc) == ("", "", "")


def test_native_result_becomes_declared_result(gl_catalog, make_registry):
  gen = Generator(gl_catalog, make_registry({"name": "CreateProgram", "result": "glbase.Program"}))

  assert gen.generate("CreateProgram").results[0].type == "glbase.Program"
  assert gen.generate("GetError").results[0].type == "glbase.Enum"


def test_errors_accumulate_across_functions(gl_catalog, make_registry, captured_console):
  registry = make_registry(
    {"name": "GenBuffers", "params": {"bufers": {"output": True}}},
    {"name": "GetUniformfv", "doc": "{{ func.nmae }}"},
    {"name": "GetUniformiv", "copy": "Missing"},
    {"name": "Viewport", "doc": "sets the viewport."},
    {"name": "NotInCatalog"},
  )

  report = Generator(gl_catalog, registry).run()

  assert not report.success
  by_function = {e.function: e for e in report.errors}
  assert set(by_function) == {"GenBuffers", "GetUniformfv", "GetUniformiv", "NotInCatalog"}
  assert by_function["GenBuffers"].kind == "config"
  assert by_function["GenBuffers"].field == "params.bufers"
  assert by_function["GetUniformfv"].kind == "template"
  assert by_function["GetUniformfv"].field == "doc"
  assert "unknown copy target" in by_function["GetUniformiv"].message
  assert by_function["NotInCatalog"].message == "unknown function"
  # Healthy functions are still generated, in catalog order.
  assert [f.name for f in report.functions] == ["GetShaderInfoLog", "CreateProgram", "GetError", "Viewport"]
  assert report.get("Viewport").doc == "sets the viewport."
  assert "4 errors" in captured_console.getvalue()


def test_unknown_function_in_subset(gl_catalog, make_registry):
  report = Generator(gl_catalog, make_registry()).run(["GenBuffers", "Nope"])

  assert [f.name for f in report.functions] == ["GenBuffers"]
  assert str(report.errors[0]) == "[config] Nope: unknown function"


def test_generate_raises_for_unknown_function(gl_catalog, make_registry):
  with pytest.raises(ConfigError):
    Generator(gl_catalog, make_registry()).generate("Nope")


def test_copy_doc_reads_registry_only_function(gl_catalog, make_registry):
  registry = make_registry(
    {"name": "SharedProse", "doc": "text from {{ func.name }}."},
    {"name": "GenBuffers", "doc": '{{ copy_doc("SharedProse") }}'},
  )

  fn = Generator(gl_catalog, registry).generate("GenBuffers")

  assert fn.doc == "text from SharedProse."


def test_parallel_run_matches_sequential(gl_catalog, make_registry):
  registry = make_registry(UNIFORM_FV, {"name": "GetUniformiv", "copy": "GetUniformfv"})

  sequential = Generator(gl_catalog, registry, workers=1).run()
  parallel = Generator(gl_catalog, registry, workers=4).run()

  assert parallel.model_dump() == sequential.model_dump()


def test_bundled_tables_generate_cleanly():
  catalog = Catalog.load(resolve_data_dir() / BUNDLED_CATALOG)
  report = tweakgen.generate(catalog, load_registry())

  assert report.errors == []
  assert len(report.functions) == len(catalog)

  info_log = report.get("GetShaderInfoLog")
  assert [(e.name, e.type) for e in info_log.inputs] == [("shader", "glbase.Shader")]
  assert [(r.name, r.type) for r in info_log.results] == [(None, "[]byte")]

  source = report.get("ShaderSource")
  assert [(e.name, e.type) for e in source.inputs] == [("shader", "glbase.Shader"), ("source", "...string")]

  assert "MultMatrixf is executed" in report.get("MultMatrixf").doc
  assert report.get("GetVertexAttribiv").before == "params_c := make([]int32, 4)"
  assert report.get("VertexAttrib1f").inputs[0].name == "index"
  assert report.get("AttachShader").doc.endswith("AttachShader is available in GL version 2.0 or greater.")


def test_helper_misuse_is_reported_and_run_continues(gl_catalog, make_registry, captured_console):
  registry = make_registry(
    {"name": "CreateProgram", "doc": "{{ func_since(func) }}"},
    {"name": "GenBuffers", "doc": "ok {{ func.name }}"},
  )

  report = Generator(gl_catalog, registry, workers=2).run(["CreateProgram", "GenBuffers"])

  assert [f.name for f in report.functions] == ["GenBuffers"]
  assert report.get("GenBuffers").doc == "ok GenBuffers"
  error = report.errors[0]
  assert (error.function, error.kind, error.field) == ("CreateProgram", "template", "doc")
  assert error.message.startswith("TypeError")
