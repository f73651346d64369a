# src/formfixer/dom/builder.py
import logging
from typing import List, Optional, Set

from bs4 import BeautifulSoup, Tag

from .models import FormDocument, FormElement
from .registry import DOMRegistry
from .elements.control import CONTROL_TAGS, ControlElement
from ..errors import ParseDegraded
from ..managers.config_manager import config_manager

logger = logging.getLogger(__name__)


class DOMBuilder:
    """
    Builder responsible for parsing raw HTML into a FormDocument.

    It tolerates fragments (no <html>/<body> required) and degrades to an
    empty control set instead of failing when the parser gives up.
    """

    def __init__(self, features: Optional[str] = None):
        """Initializes the builder and ensures the DOMRegistry is populated."""
        DOMRegistry.discover()
        self.features = features or config_manager.get_nested("parser.features", "html.parser")

    def parse_doc(self, html: str) -> FormDocument:
        """
        Parses raw HTML content into a FormDocument.

        Args:
            html (str): The raw HTML string (full document or fragment).

        Returns:
            FormDocument: Forms with their controls, all controls, and the label lookup.
        """
        if not html:
            return FormDocument()

        # Strip a stray BOM; everything else is left as written
        clean_html = html.replace('\ufeff', '')

        try:
            soup = self._parse(clean_html)
        except ParseDegraded as e:
            logger.warning(f"Markup could not be parsed, continuing without controls: {e}")
            return FormDocument(raw_html=clean_html, doc_errors=[str(e)])

        label_targets = self._collect_label_targets(soup)

        forms: List[FormElement] = []
        for form_index, form_tag in enumerate(soup.find_all('form')):
            controls = [
                self._build_control(tag, label_targets, position=j)
                for j, tag in enumerate(form_tag.find_all(CONTROL_TAGS))
            ]
            forms.append(FormElement(index=form_index, controls=controls))

        all_controls = [
            self._build_control(tag, label_targets)
            for tag in soup.find_all(CONTROL_TAGS)
        ]

        logger.debug(
            f"Parsed document: {len(forms)} form(s), {len(all_controls)} control(s), "
            f"{len(label_targets)} label target(s)"
        )

        return FormDocument(
            soup=soup,
            forms=forms,
            controls=all_controls,
            label_targets=label_targets,
        )

    def _parse(self, html: str) -> BeautifulSoup:
        try:
            return BeautifulSoup(html, self.features)
        except Exception as e:
            # bs4 raises ParserRejectedMarkup, the underlying parsers AssertionError and friends
            raise ParseDegraded(f"{type(e).__name__}: {e}") from e

    def _collect_label_targets(self, soup: BeautifulSoup) -> Set[str]:
        """Builds the set of `for` values once, so each control lookup is O(1)."""
        parser = DOMRegistry.get_parser('label')
        targets: Set[str] = set()
        for tag in soup.find_all('label'):
            label = parser(tag)
            if label.target is not None:
                targets.add(label.target)
        return targets

    def _build_control(
            self, tag: Tag, label_targets: Set[str], position: Optional[int] = None
    ) -> ControlElement:
        parser = DOMRegistry.get_parser(tag.name)
        element: ControlElement = parser(tag)

        # --- Enrichment: form position & label binding ---
        element.position = position
        element.has_label = bool(element.id) and element.id in label_targets

        return element
