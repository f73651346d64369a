from typing import Dict, Any, List, Callable, Type, Optional, Tuple, Set
from pydantic import BaseModel, ConfigDict, Field
from bs4 import Tag


def audit_spec(codes: List[str]):
    """
    Decorator to declare which finding codes a specific audit rule function returns.
    Facilitates auto-discovery by the DOMRegistry.
    """
    def decorator(func):
        func.defined_codes = codes
        return func
    return decorator


class ElementBase(BaseModel):
    """
    Base data model for an element of interest in a parsed form document.

    The model keeps a reference to the live BeautifulSoup tag so that repair
    actions can mutate the document the element was read from.
    """
    model_config = ConfigDict(arbitrary_types_allowed=True)

    tag: str
    attrs: Dict[str, Any] = Field(default_factory=dict)
    source: Optional[Tag] = Field(default=None, exclude=True, repr=False)

    @property
    def live_attrs(self) -> Dict[str, Any]:
        """Attributes as they currently are in the document, including earlier repairs."""
        if self.source is not None:
            return self.source.attrs
        return self.attrs

    def has_attr(self, name: str) -> bool:
        """Boolean-presence check; the attribute value is irrelevant."""
        return name in self.live_attrs

    def set_attr(self, name: str, value: str) -> None:
        self.attrs[name] = value
        if self.source is not None:
            self.source[name] = value

    def get_attr(self, name: str) -> Optional[str]:
        value = self.live_attrs.get(name)
        # bs4 returns multi-valued attributes (class, rel, ...) as lists
        if isinstance(value, list):
            return " ".join(value)
        return value


# Type alias for audit findings: (Code, Message, Severity)
AuditResult = Tuple[str, str, str]

# A repair receives the element a finding fired on and mutates its source tag
RepairAction = Callable[[ElementBase], None]


class ElementDefinition:
    """
    Configuration object binding one or more HTML tags to their model, parser,
    audit rules and the repair actions available for the codes those rules emit.
    """

    def __init__(
            self,
            tag_names: List[str],
            model: Type[ElementBase],
            parser: Callable[[Tag], ElementBase],
            audit_rules: Optional[List[Callable[[Any], List[AuditResult]]]] = None,
            repairs: Optional[Dict[str, RepairAction]] = None,
            possible_codes: Optional[List[str]] = None
    ):
        self.tag_names = tag_names
        self.model = model
        self.parser = parser
        self.audit_rules = audit_rules or []
        self.repairs = repairs or {}

        # --- Auto-Discovery of Finding Codes ---
        final_codes: Set[str] = set(possible_codes or [])

        for rule in self.audit_rules:
            if hasattr(rule, 'defined_codes'):
                final_codes.update(rule.defined_codes)

        unknown = set(self.repairs) - final_codes
        if unknown:
            raise ValueError(f"Repairs registered for undeclared codes: {sorted(unknown)}")

        self.codes = sorted(list(final_codes))
