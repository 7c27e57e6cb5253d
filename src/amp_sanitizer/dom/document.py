# src/amp_sanitizer/dom/document.py
import logging
from typing import Callable, List, Optional, Union

from bs4 import BeautifulSoup, Tag
from bs4.dammit import EntitySubstitution
from bs4.formatter import HTMLFormatter

logger = logging.getLogger(__name__)

TagPredicate = Callable[[Tag], bool]


class SourceOrderFormatter(HTMLFormatter):
    """The 'minimal' formatter, minus the alphabetical attribute sort."""

    def __init__(self):
        super().__init__(entity_substitution=EntitySubstitution.substitute_xml)

    def attributes(self, tag):
        return list(tag.attrs.items()) if tag.attrs else []


_FORMATTER = SourceOrderFormatter()


class HTMLDocument:
    """
    Thin wrapper around a BeautifulSoup tree that gives sanitizers the
    handful of DOM operations they need: scoped queries in document order,
    element creation and serialization.

    Attributes are kept as plain strings (no multi-valued `class`/`rel`
    lists), so every element's attributes form an ordered name -> str mapping.
    """

    def __init__(self, soup: BeautifulSoup):
        self.soup = soup

    @classmethod
    def from_html(cls, html: str) -> "HTMLDocument":
        """Parses raw HTML (full document or fragment) into an HTMLDocument."""
        # Basic cleanup of potentially dirty HTML (e.g., BOM)
        clean_html = (html or "").replace('\ufeff', '')
        soup = BeautifulSoup(clean_html, 'html.parser', multi_valued_attributes=None)
        return cls(soup)

    @property
    def body(self) -> Optional[Tag]:
        return self.soup.body

    @property
    def content_root(self) -> Union[BeautifulSoup, Tag]:
        """The <body> element, or the whole tree when parsing a fragment."""
        return self.soup.body if self.soup.body is not None else self.soup

    def query(self, predicate: TagPredicate, root: Optional[Tag] = None) -> List[Tag]:
        """
        Returns every element under `root` (default: the whole document)
        matching `predicate`, in document order.

        The result is a snapshot; callers may mutate the tree while iterating.
        """
        scope = root if root is not None else self.soup
        return list(scope.find_all(predicate))

    def query_by_prefix(self, prefix: str) -> List[Tag]:
        """Returns every element in the content root whose tag name starts with `prefix`."""
        return self.query(lambda tag: tag.name.startswith(prefix), root=self.content_root)

    def create_element(self, name: str) -> Tag:
        return self.soup.new_tag(name)

    def to_html(self) -> str:
        return self.soup.decode(formatter=_FORMATTER)

    def __str__(self) -> str:
        return self.to_html()
