# ============================================
# file: src/amp_sanitizer/model.py
# ============================================
from __future__ import annotations

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field


class ComponentSpec(BaseModel):
    """Capability descriptor for one AMP extension (e.g. amp-base-carousel)."""
    name: str
    bento: bool = False
    versions: List[str] = Field(default_factory=list)


class SanitizeReport(BaseModel):
    """
    Outcome of a single sanitizer pass.

    `arg_updates` holds configuration the sanitizer wants applied to its
    sibling sanitizers; the SanitizeController forwards it via update_args().
    """
    sanitizer: str
    arg_updates: Dict[str, Any] = Field(default_factory=dict)


class BentoSanitizeReport(SanitizeReport):
    sanitizer: str = "bento"
    discovered: List[str] = Field(default_factory=list)
    converted: List[str] = Field(default_factory=list)
    removed_resources: List[str] = Field(default_factory=list)
    retained_resources: List[str] = Field(default_factory=list)
    non_amp_scripts_retained: int = 0

    @property
    def exempted(self) -> List[str]:
        """Bento tag names that were discovered but had no AMP equivalent."""
        return [name for name in self.discovered if name not in self.converted]


class PipelineReport(BaseModel):
    """Aggregated result of running every registered sanitizer over a document."""
    reports: List[SanitizeReport] = Field(default_factory=list)
    arg_updates: Dict[str, Any] = Field(default_factory=dict)
    selector_conversion_mapping: Dict[str, List[str]] = Field(default_factory=dict)

    def get(self, sanitizer: str) -> Optional[SanitizeReport]:
        for report in self.reports:
            if report.sanitizer == sanitizer:
                return report
        return None


class PipelineSettings(BaseModel):
    cdn_base_url: str = "https://cdn.ampproject.org"
    extension_specs_path: Optional[str] = None
