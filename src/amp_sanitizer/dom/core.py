import abc
import logging
from typing import Any, Dict, List, Mapping, Optional, Type

from .document import HTMLDocument
from .exemption import ValidationExemption
from ..model import SanitizeReport
from ..specs.component_specs import ComponentSpecTable

logger = logging.getLogger(__name__)


class BaseSanitizer(metaclass=abc.ABCMeta):
    """
    Abstract base class for all sanitizers.

    A sanitizer owns one pass over an HTMLDocument. Its behaviour is tuned
    through `args`: the class-level DEFAULT_ARGS merged with whatever the
    caller passes in. Sibling sanitizers may adjust those args mid-pipeline
    through update_args().
    """

    DEFAULT_ARGS: Dict[str, Any] = {}

    def __init__(
            self,
            document: HTMLDocument,
            args: Optional[Mapping[str, Any]] = None,
            spec_table: Optional[ComponentSpecTable] = None,
            exemption: Any = ValidationExemption,
    ):
        """
        Args:
            document: The document this sanitizer mutates.
            args: Overrides for DEFAULT_ARGS.
            spec_table: Read-only AMP component spec table.
            exemption: Sink used to flag nodes and attributes as PX-verified.
        """
        self.document = document
        self.args: Dict[str, Any] = {**self.DEFAULT_ARGS, **(args or {})}
        self.spec_table = spec_table
        self.exemption = exemption

    def init(self, sanitizers: Mapping[str, "BaseSanitizer"]) -> None:
        """
        Called once before any sanitize() with every sanitizer in the
        pipeline, keyed by definition name.
        """

    def update_args(self, args: Mapping[str, Any]) -> None:
        self.args.update(args)
        logger.debug("%s args updated: %s", type(self).__name__, dict(args))

    @abc.abstractmethod
    def sanitize(self) -> SanitizeReport:
        """Mutates the document in place and reports what was done."""
        raise NotImplementedError("Every sanitizer must implement a 'sanitize' method.")

    def get_selector_conversion_mapping(self) -> Dict[str, List[str]]:
        """
        Mapping of HTML selectors to the AMP component selectors they may be
        converted into, used when tree-shaking stylesheets.
        """
        return {}

    def has_light_shadow_dom(self) -> bool:
        """Whether the converted components render children into a light shadow DOM."""
        return True


class SanitizerDefinition:
    """
    Configuration object binding a sanitizer class to its pipeline name and
    position (lower priority runs first).
    """

    def __init__(self, name: str, sanitizer_class: Type[BaseSanitizer], priority: int = 100):
        self.name = name
        self.sanitizer_class = sanitizer_class
        self.priority = priority

    def __repr__(self) -> str:
        return f"SanitizerDefinition(name={self.name!r}, priority={self.priority})"
