import logging
import posixpath
import re
from typing import Any, Dict, List, Mapping, Optional
from urllib.parse import urlparse

from bs4 import Tag

from ..dom.core import BaseSanitizer, SanitizerDefinition
from ..dom.css import CssLength, parse_style_string, reassemble_style_string
from ..dom.document import HTMLDocument
from ..dom.exemption import ValidationExemption
from ..model import BentoSanitizeReport
from ..specs.component_specs import ComponentSpecTable

logger = logging.getLogger(__name__)

BENTO_PREFIX = "bento-"
AMP_PREFIX = "amp-"

LAYOUT_FIXED_HEIGHT = "fixed-height"
LAYOUT_RESPONSIVE = "responsive"

_COMPONENT_FILENAME_PATTERN = re.compile(r'^(bento-.*?)-\d+\.\d+\.(m?js|css)')
_ASPECT_RATIO_PATTERN = re.compile(r'(?P<width>\d+(?:\.\d+)?)(?:\s*/\s*(?P<height>\d+(?:\.\d+)?))?')


def get_bento_component_name_from_url(url: Optional[str]) -> Optional[str]:
    """
    Parses the Bento component name out of a Bento CDN URL, e.g.
    https://cdn.ampproject.org/v0/bento-base-carousel-1.0.mjs -> bento-base-carousel.

    Returns None when the filename carries no component name and version.
    """
    if not url:
        return None
    path = urlparse(url).path
    if not path:
        return None
    match = _COMPONENT_FILENAME_PATTERN.match(posixpath.basename(path))
    return match.group(1) if match else None


class BentoSanitizer(BaseSanitizer):
    """
    Converts bento-prefixed components into their amp-prefixed equivalents,
    or marks them as PX-verified when no AMP version exists. Bento
    stylesheets and scripts are removed when nothing on the page needs them.
    """

    DEFAULT_ARGS: Dict[str, Any] = {
        "cdn_base_url": "https://cdn.ampproject.org",
    }

    def __init__(
            self,
            document: HTMLDocument,
            args: Optional[Mapping[str, Any]] = None,
            spec_table: Optional[ComponentSpecTable] = None,
            exemption: Any = ValidationExemption,
    ):
        super().__init__(
            document,
            args,
            spec_table=spec_table if spec_table is not None else ComponentSpecTable.default(),
            exemption=exemption,
        )

    @property
    def cdn_base_url(self) -> str:
        return self.args["cdn_base_url"].rstrip("/")

    def get_selector_conversion_mapping(self) -> Dict[str, List[str]]:
        mapping = {}
        for amp_name in self.spec_table.bento_variants():
            bento_name = amp_name.replace(AMP_PREFIX, BENTO_PREFIX, 1)
            if bento_name != amp_name:
                mapping[bento_name] = [amp_name]
        return mapping

    def has_light_shadow_dom(self) -> bool:
        # Bento components use the real shadow DOM, so selectors such as
        # `bento-foo div` never match and can be tree-shaken freely.
        return False

    def sanitize(self) -> BentoSanitizeReport:
        report = BentoSanitizeReport()

        # Dicts keyed by tag name double as ordered sets.
        discovered: Dict[str, bool] = {}
        converted: Dict[str, bool] = {}

        for bento_element in self.document.query_by_prefix(BENTO_PREFIX):
            bento_name = bento_element.name
            amp_name = bento_name.replace(BENTO_PREFIX, AMP_PREFIX, 1)
            discovered[bento_name] = True

            # Leave Bento components without an AMP version as-is.
            if amp_name not in self.spec_table:
                self.exemption.mark_node_as_px_verified(bento_element)
                logger.debug("No AMP equivalent for <%s>; marked as PX-verified.", bento_name)
                continue

            amp_element = self._convert_element(bento_element, amp_name)
            self.adapt_layout_styles(amp_element)
            converted[bento_name] = True
            logger.debug("Converted <%s> into <%s>.", bento_name, amp_name)

        # Bento stylesheets: drop the unneeded ones, PX-verify the rest.
        stylesheet_prefix = f"{self.cdn_base_url}/v0/bento-"
        links = self.document.query(
            lambda tag: tag.name == "link"
            and tag.get("rel") == "stylesheet"
            and tag.get("href", "").startswith(stylesheet_prefix)
        )
        for link in links:
            href = link.get("href")
            bento_name = get_bento_component_name_from_url(href)
            if not bento_name:
                continue

            if self._is_resource_unneeded(bento_name, discovered, converted):
                link.decompose()
                report.removed_resources.append(href)
            else:
                self.exemption.mark_node_as_px_verified(link)
                self.exemption.mark_attribute_as_px_verified(link, "href")
                report.retained_resources.append(href)

        # Bento component scripts; every one kept means the runtime is needed too.
        script_prefix = f"{self.cdn_base_url}/v0/bento"
        scripts = self.document.query(
            lambda tag: tag.name == "script" and tag.get("src", "").startswith(script_prefix)
        )
        for script in scripts:
            src = script.get("src")
            bento_name = get_bento_component_name_from_url(src)
            if not bento_name:
                continue

            if self._is_resource_unneeded(bento_name, discovered, converted):
                script.decompose()
                report.removed_resources.append(src)
            else:
                self.exemption.mark_node_as_px_verified(script)
                report.retained_resources.append(src)
                report.non_amp_scripts_retained += 1

        runtime_urls = {f"{self.cdn_base_url}/bento.mjs", f"{self.cdn_base_url}/bento.js"}
        runtime_scripts = self.document.query(
            lambda tag: tag.name == "script" and tag.get("src") in runtime_urls
        )
        for runtime_script in runtime_scripts:
            src = runtime_script.get("src")
            if report.non_amp_scripts_retained == 0:
                runtime_script.decompose()
                report.removed_resources.append(src)
            else:
                self.exemption.mark_node_as_px_verified(runtime_script)
                report.retained_resources.append(src)

        report.discovered = list(discovered)
        report.converted = list(converted)

        # Validation downstream must prefer the Bento flavour of component rules.
        if discovered:
            report.arg_updates = {"prefer_bento": True}

        logger.info(
            "Bento pass: %d discovered, %d converted, %d resources removed, %d retained.",
            len(report.discovered), len(report.converted),
            len(report.removed_resources), len(report.retained_resources)
        )
        return report

    @staticmethod
    def _is_resource_unneeded(bento_name: str, discovered: Mapping[str, bool], converted: Mapping[str, bool]) -> bool:
        """A resource is unneeded if its element is absent from the page or was converted to AMP."""
        return bento_name not in discovered or bento_name in converted

    def _convert_element(self, bento_element: Tag, amp_name: str) -> Tag:
        """Replaces `bento_element` in place with a new `amp_name` element holding its attributes and children."""
        amp_element = self.document.create_element(amp_name)

        # Take every attribute at once so the source is left with none.
        amp_element.attrs, bento_element.attrs = bento_element.attrs, {}

        for child in list(bento_element.contents):
            amp_element.append(child.extract())

        bento_element.replace_with(amp_element)
        return amp_element

    def adapt_layout_styles(self, amp_element: Tag) -> None:
        """
        Adapt inline styles from a converted Bento element to AMP layout attributes.

        `width`, `height` and `aspect-ratio` inline styles are turned into the
        corresponding layout attributes. A Bento component is only
        AMP-compatible when its dimensions come from inline styles rather
        than a stylesheet rule. `aspect-ratio` wins over width/height.
        """
        style_string = amp_element.get("style")
        if not style_string:
            return

        styles = parse_style_string(style_string)
        layout_attributes: Dict[str, str] = {}

        if "height" in styles:
            height = CssLength(styles["height"]).validate(allow_auto=False, allow_fluid=False)
            if height.is_valid:
                layout_attributes["height"] = height.to_attribute_value()
                del styles["height"]

        if "width" not in styles or styles["width"] == "100%":
            layout_attributes["width"] = "auto"
            layout_attributes["layout"] = LAYOUT_FIXED_HEIGHT
            styles.pop("width", None)
        else:
            width = CssLength(styles["width"]).validate(allow_auto=False, allow_fluid=False)
            if width.is_valid:
                layout_attributes["width"] = width.to_attribute_value()
                del styles["width"]

        if "aspect-ratio" in styles:
            match = _ASPECT_RATIO_PATTERN.search(styles["aspect-ratio"])
            if match:
                layout_attributes["height"] = match.group("height") or "1"
                layout_attributes["width"] = match.group("width")
                layout_attributes["layout"] = LAYOUT_RESPONSIVE
                del styles["aspect-ratio"]

        if layout_attributes:
            amp_element["style"] = reassemble_style_string(styles)
            for name, value in layout_attributes.items():
                amp_element[name] = value


# --- SANITIZER DEFINITION ---

DEFINITION = SanitizerDefinition(
    name="bento",
    sanitizer_class=BentoSanitizer,
    priority=10,
)
