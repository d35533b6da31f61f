"""
Shared construction of the generation pipeline for CLI handlers.
"""

from tweakgen.catalog import Catalog
from tweakgen.config import RuntimeConfig
from tweakgen.engine.generator import Generator
from tweakgen.tweaks.loader import load_registry, resolve_data_dir

BUNDLED_CATALOG = "gl_catalog.json"


def build_generator(config: RuntimeConfig) -> Generator:
  """
  Loads the catalog and tweak tables named by the configuration.

  The bundled sample catalog is used when none is configured.

  Args:
      config: Resolved runtime configuration.

  Returns:
      Generator: Ready to run.

  Raises:
      ConfigError: If a catalog or tweak table cannot be loaded.
  """
  catalog_path = config.catalog or resolve_data_dir() / BUNDLED_CATALOG
  catalog = Catalog.load(catalog_path)
  registry = load_registry(config.tweaks)
  return Generator(
    catalog,
    registry,
    normalizer=config.normalizer(),
    types=config.type_mapper(),
    workers=config.workers,
  )
