# src/amp_sanitizer/dom/exemption.py
from bs4 import Tag

PX_VERIFIED_TAG_ATTRIBUTE = "data-px-verified-tag"
PX_VERIFIED_ATTRS_ATTRIBUTE = "data-px-verified-attrs"


class ValidationExemption:
    """
    Default validation exemption sink.

    Nodes judged safe by a sanitizer are annotated "PX-verified" so the
    downstream validator skips them: elements carry `data-px-verified-tag`,
    and exempt attributes are listed (space separated) in
    `data-px-verified-attrs` on their owner element.
    """

    @staticmethod
    def mark_node_as_px_verified(tag: Tag) -> None:
        if PX_VERIFIED_TAG_ATTRIBUTE not in tag.attrs:
            tag[PX_VERIFIED_TAG_ATTRIBUTE] = ""

    @staticmethod
    def mark_attribute_as_px_verified(tag: Tag, attribute_name: str) -> None:
        names = tag.get(PX_VERIFIED_ATTRS_ATTRIBUTE, "").split()
        if attribute_name not in names:
            names.append(attribute_name)
        tag[PX_VERIFIED_ATTRS_ATTRIBUTE] = " ".join(names)

    @staticmethod
    def is_node_px_verified(tag: Tag) -> bool:
        return PX_VERIFIED_TAG_ATTRIBUTE in tag.attrs

    @staticmethod
    def is_attribute_px_verified(tag: Tag, attribute_name: str) -> bool:
        return attribute_name in tag.get(PX_VERIFIED_ATTRS_ATTRIBUTE, "").split()
