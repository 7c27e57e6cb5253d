# src/amp_sanitizer/dom/registry.py
import importlib
import pkgutil
import logging
from typing import Dict, List, Optional

from .core import SanitizerDefinition

logger = logging.getLogger(__name__)


class SanitizerRegistry:
    """
    Central registry for sanitizers.

    Dynamically discovers SanitizerDefinition objects from the modules of the
    'amp_sanitizer.sanitizers' package.
    """

    _definitions: Dict[str, SanitizerDefinition] = {}
    _loaded: bool = False

    @classmethod
    def discover(cls) -> None:
        """
        Registers every sanitizer definition found in the 'amp_sanitizer.sanitizers' package.

        Modules without a `DEFINITION` attribute (instance of `SanitizerDefinition`)
        are ignored; modules that fail to import are logged and skipped.
        """
        if cls._loaded:
            return

        try:
            import amp_sanitizer.sanitizers as sanitizers_pkg

            for _, name, _ in pkgutil.iter_modules(sanitizers_pkg.__path__):
                full_name = f"amp_sanitizer.sanitizers.{name}"
                try:
                    module = importlib.import_module(full_name)
                except Exception as e:
                    logger.error(f"Error loading sanitizer module {name}: {e}")
                    continue

                defn = getattr(module, "DEFINITION", None)
                if isinstance(defn, SanitizerDefinition):
                    if defn.name in cls._definitions:
                        logger.warning(f"Sanitizer '{defn.name}' from {name} replaces an earlier definition")
                    cls._definitions[defn.name] = defn
                    logger.debug(f"Sanitizer loaded: {defn.name}")

            cls._loaded = True
        except ImportError as e:
            logger.error(f"Could not find sanitizers package: {e}")

    @classmethod
    def get_definition(cls, name: str) -> Optional[SanitizerDefinition]:
        cls.discover()
        return cls._definitions.get(name)

    @classmethod
    def get_definitions(cls) -> List[SanitizerDefinition]:
        """Returns all registered definitions in pipeline order."""
        cls.discover()
        return sorted(cls._definitions.values(), key=lambda d: (d.priority, d.name))
