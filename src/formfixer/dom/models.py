# src/formfixer/dom/models.py
from typing import Optional, List, Set
from bs4 import BeautifulSoup
from bs4.dammit import EntitySubstitution
from bs4.formatter import HTMLFormatter
from pydantic import BaseModel, ConfigDict, Field

from .elements.control import ControlElement

# Like "minimal", but void elements stay unclosed and empty boolean attributes stay bare
HTML_OUTPUT_FORMATTER = HTMLFormatter(
    entity_substitution=EntitySubstitution.substitute_xml,
    void_element_close_prefix=None,
    empty_attributes_are_booleans=True,
)


class FormElement(BaseModel):
    """A <form> and the controls it contains, in document order."""
    index: int
    controls: List[ControlElement] = Field(default_factory=list)


class FormDocument(BaseModel):
    """
    A parsed HTML document scoped to a single analysis call.

    Owns the mutable BeautifulSoup tree. Repairs applied to controls write
    through to this tree, and `to_html()` serializes the current state.
    """
    model_config = ConfigDict(arbitrary_types_allowed=True)

    soup: Optional[BeautifulSoup] = Field(default=None, exclude=True, repr=False)
    forms: List[FormElement] = Field(default_factory=list)

    # Every control in the document, regardless of enclosing form
    controls: List[ControlElement] = Field(default_factory=list)

    # Precomputed `for` values of every <label> in the document
    label_targets: Set[str] = Field(default_factory=set)

    doc_errors: List[str] = Field(default_factory=list)

    # Input markup, returned untouched when the parser produced no tree
    raw_html: str = Field(default="", repr=False)

    @property
    def degraded(self) -> bool:
        return bool(self.doc_errors)

    def to_html(self) -> str:
        """Serializes the tree; empty-valued boolean attributes stay bare (`required`)."""
        if self.soup is None:
            return self.raw_html
        return self.soup.decode(formatter=HTML_OUTPUT_FORMATTER)
