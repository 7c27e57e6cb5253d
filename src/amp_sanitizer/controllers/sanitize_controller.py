from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional, Tuple

from amp_sanitizer.dom.core import BaseSanitizer, SanitizerDefinition
from amp_sanitizer.dom.document import HTMLDocument
from amp_sanitizer.dom.exemption import ValidationExemption
from amp_sanitizer.dom.registry import SanitizerRegistry
from amp_sanitizer.model import PipelineReport, PipelineSettings
from amp_sanitizer.specs.component_specs import ComponentSpecTable

logger = logging.getLogger(__name__)


class SanitizeController:
    """
    Orchestrates a pipeline of sanitizers over one document at a time.

    Sanitizers never call each other directly: configuration a sanitizer
    wants its siblings to pick up (e.g. `prefer_bento`) is returned in its
    report and forwarded here via update_args().
    """

    def __init__(
            self,
            settings: Optional[PipelineSettings] = None,
            *,
            spec_table: Optional[ComponentSpecTable] = None,
            definitions: Optional[List[SanitizerDefinition]] = None,
            exemption: Any = ValidationExemption,
    ) -> None:
        self.settings = settings or PipelineSettings()
        if spec_table is not None:
            self.spec_table = spec_table
        elif self.settings.extension_specs_path:
            self.spec_table = ComponentSpecTable.from_json(self.settings.extension_specs_path)
        else:
            self.spec_table = ComponentSpecTable.default()

        if definitions is None:
            definitions = SanitizerRegistry.get_definitions()
        names = [d.name for d in definitions]
        duplicates = sorted({n for n in names if names.count(n) > 1})
        if duplicates:
            raise ValueError(f"Duplicate sanitizer names: {', '.join(duplicates)}")
        self.definitions = sorted(definitions, key=lambda d: d.priority)
        self.exemption = exemption

    def _sanitizer_args(self) -> Dict[str, Any]:
        return {"cdn_base_url": self.settings.cdn_base_url}

    def build_sanitizers(self, document: HTMLDocument) -> Dict[str, BaseSanitizer]:
        """Instantiates every sanitizer for `document`, keyed by definition name, in pipeline order."""
        sanitizers: Dict[str, BaseSanitizer] = {}
        for defn in self.definitions:
            sanitizers[defn.name] = defn.sanitizer_class(
                document,
                self._sanitizer_args(),
                spec_table=self.spec_table,
                exemption=self.exemption,
            )
        for sanitizer in sanitizers.values():
            sanitizer.init(sanitizers)
        return sanitizers

    def sanitize_document(self, document: HTMLDocument) -> PipelineReport:
        """Runs the full pipeline over `document`, mutating it in place."""
        sanitizers = self.build_sanitizers(document)
        pipeline_report = PipelineReport()

        for name, sanitizer in sanitizers.items():
            logger.debug("Running sanitizer '%s'", name)
            report = sanitizer.sanitize()
            pipeline_report.reports.append(report)

            if report.arg_updates:
                pipeline_report.arg_updates.update(report.arg_updates)
                for other_name, other in sanitizers.items():
                    if other_name != name:
                        other.update_args(report.arg_updates)

            for selector, targets in sanitizer.get_selector_conversion_mapping().items():
                merged = pipeline_report.selector_conversion_mapping.setdefault(selector, [])
                merged.extend(t for t in targets if t not in merged)

        return pipeline_report

    def sanitize_html(self, html: str) -> Tuple[str, PipelineReport]:
        """Parses, sanitizes and re-serializes an HTML string."""
        document = HTMLDocument.from_html(html)
        report = self.sanitize_document(document)
        return document.to_html(), report
