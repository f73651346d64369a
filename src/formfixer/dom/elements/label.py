from typing import Optional
from bs4 import Tag
from ..core import ElementBase, ElementDefinition


class LabelElement(ElementBase):
    """Data model for <label> tags. Only the `for` binding is of interest."""
    tag: str = "label"

    @property
    def target(self) -> Optional[str]:
        return self.get_attr('for')


def parse_label(tag: Tag) -> LabelElement:
    return LabelElement(attrs=dict(tag.attrs), source=tag)


DEFINITION = ElementDefinition(
    tag_names=["label"],
    model=LabelElement,
    parser=parse_label
)
