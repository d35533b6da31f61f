"""
tweakgen Package.

A declarative, tweak-driven signature transformation engine. Given native
function prototypes (e.g. the OpenGL C API) and a table of per-function tweaks,
it produces idiomatic wrapper descriptions: exposed inputs, composed results,
and before/after/doc snippets expanded from Jinja2 templates.

Usage
-----

.. code-block:: python

    import tweakgen

    catalog = tweakgen.Catalog.from_dict({"functions": [
        {"name": "GenBuffers", "result": "void",
         "params": [{"name": "n", "type": "GLsizei"}, {"name": "buffers", "type": "GLuint*"}]},
    ]})
    registry = tweakgen.TweakRegistry([
        tweakgen.FunctionTweak(name="GenBuffers", params={
            "buffers": tweakgen.ParamTweak(output=True, unnamed=True, retype="[]glbase.Buffer"),
        }),
    ])
    report = tweakgen.generate(catalog, registry)
    fn = report.get("GenBuffers")
    # fn.inputs  -> [InputEntry(name='n', type='int32')]
    # fn.results -> [ResultEntry(name=None, type='[]glbase.Buffer')]
"""

from typing import Iterable, Optional

from tweakgen.catalog import Catalog, NativeFunction, NativeParam
from tweakgen.config import RuntimeConfig
from tweakgen.engine.generator import GeneratedFunction, GenerationReport, Generator
from tweakgen.errors import ConfigError, TemplateError, TweakError
from tweakgen.tweaks.registry import TweakRegistry
from tweakgen.tweaks.schema import FunctionTweak, ParamTweak

__version__ = "0.1.0"


def generate(
  catalog: Catalog,
  registry: TweakRegistry,
  names: Optional[Iterable[str]] = None,
  config: Optional[RuntimeConfig] = None,
) -> GenerationReport:
  """
  Runs the generation pipeline over a catalog.

  Args:
      catalog: Native prototypes.
      registry: Function descriptors.
      names: Optional subset of functions to generate.
      config: Optional runtime configuration (workers, extra name fixes,
          extra handle types). Defaults are used when omitted.

  Returns:
      GenerationReport: Generated functions and all accumulated errors.
  """
  config = config or RuntimeConfig()
  generator = Generator(
    catalog,
    registry,
    normalizer=config.normalizer(),
    types=config.type_mapper(),
    workers=config.workers,
  )
  return generator.run(names)


__all__ = [
  "Catalog",
  "ConfigError",
  "FunctionTweak",
  "GeneratedFunction",
  "GenerationReport",
  "Generator",
  "NativeFunction",
  "NativeParam",
  "ParamTweak",
  "RuntimeConfig",
  "TemplateError",
  "TweakError",
  "TweakRegistry",
  "__version__",
  "generate",
]
