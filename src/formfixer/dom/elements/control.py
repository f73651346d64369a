from typing import List, Optional
from bs4 import Tag
from ..core import ElementBase, ElementDefinition, AuditResult, audit_spec

CONTROL_TAGS = ["input", "textarea", "select"]


class ControlElement(ElementBase):
    """
    Data model for an input-capable form control (<input>, <textarea>, <select>).

    `position` is the 0-based index of the control within its enclosing form and
    is only set for controls reached through a form. `has_label` is filled in by
    the DOMBuilder from the document-wide label lookup.
    """
    position: Optional[int] = None
    has_label: bool = False

    @property
    def id(self) -> Optional[str]:
        """The id attribute; an empty id counts as absent."""
        return self.get_attr('id') or None

    @property
    def field_key(self) -> Optional[str]:
        """name, else id. None when the control carries neither."""
        return self.get_attr('name') or self.id

    @property
    def name(self) -> str:
        """Display name used in finding messages; synthesized when nothing else is available."""
        key = self.field_key
        if key:
            return key
        return f"field-{self.position if self.position is not None else 0}"

    @property
    def input_type(self) -> str:
        """The type attribute, falling back to the tag name (textarea/select have none)."""
        return (self.get_attr('type') or self.tag).lower()

    @property
    def is_required(self) -> bool:
        return self.has_attr('required')


def parse_control(tag: Tag) -> ControlElement:
    """Parses an <input>, <textarea> or <select> tag into the ControlElement model."""
    return ControlElement(tag=tag.name, attrs=dict(tag.attrs), source=tag)


# --- AUDIT RULES ---

@audit_spec(codes=["MISSING_REQUIRED"])
def check_required(node: ControlElement) -> List[AuditResult]:
    """Every control is expected to carry the boolean `required` attribute."""
    if node.is_required:
        return []
    return [("MISSING_REQUIRED", f"Missing 'required' on \"{node.name}\"", "error")]


@audit_spec(codes=["MISSING_LABEL"])
def check_label(node: ControlElement) -> List[AuditResult]:
    """A control with an id must be referenced by at least one <label for=...>."""
    if node.id and not node.has_label:
        return [("MISSING_LABEL", f"No label associated with input id=\"{node.id}\"", "warning")]
    return []


# --- REPAIRS ---

def add_required(node: ControlElement) -> None:
    node.set_attr('required', "true")


# --- ELEMENT DEFINITION ---

DEFINITION = ElementDefinition(
    tag_names=CONTROL_TAGS,
    model=ControlElement,
    parser=parse_control,
    # Order matters: the required-check is reported before the label-check
    audit_rules=[check_required, check_label],
    repairs={"MISSING_REQUIRED": add_required}
)
