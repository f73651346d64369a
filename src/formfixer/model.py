from typing import Any, Dict, List, Literal, Optional
from pydantic import BaseModel, ConfigDict, Field


class Finding(BaseModel):
    """
    A single issue reported by the form analyzer.

    Serializes to `{"type": ..., "message": ...}`; the code and field are kept
    for logging and filtering but are not part of the wire shape.
    """
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    severity: Literal["error", "warning"] = Field(alias="type", serialization_alias="type")
    message: str
    code: str = Field(default="", exclude=True)
    field: Optional[str] = Field(default=None, exclude=True)

    def to_dict(self) -> Dict[str, str]:
        return self.model_dump(by_alias=True)


class AnalysisResult(BaseModel):
    """Outcome of `analyze`: ordered findings plus the repaired markup."""
    findings: List[Finding] = Field(default_factory=list)
    repaired_html: str = ""

    @property
    def errors(self) -> List[Finding]:
        return [f for f in self.findings if f.severity == "error"]

    @property
    def warnings(self) -> List[Finding]:
        return [f for f in self.findings if f.severity == "warning"]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "report": [f.to_dict() for f in self.findings],
            "fixedHtml": self.repaired_html,
        }


class FieldSchema(BaseModel):
    type: Literal["string", "number", "boolean"]


class FormSchema(BaseModel):
    """JSON-Schema shaped description of the data a form submits."""
    type: Literal["object"] = "object"
    properties: Dict[str, FieldSchema] = Field(default_factory=dict)
    # Traversal order; duplicates are kept as observed
    required: List[str] = Field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return self.model_dump()


class AccessibilityViolation(BaseModel):
    """A single axe-core violation, trimmed to what the report needs."""
    id: str
    impact: Optional[str] = None
    description: str = ""
    help: str = ""
    help_url: str = Field(default="", alias="helpUrl", serialization_alias="helpUrl")
    tags: List[str] = Field(default_factory=list)
    nodes: List[Dict[str, Any]] = Field(default_factory=list)

    model_config = ConfigDict(populate_by_name=True, extra="ignore")


class AccessibilityResult(BaseModel):
    violations: List[AccessibilityViolation] = Field(default_factory=list)
    passes_count: int = 0
    incomplete_count: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {"violations": [v.model_dump(by_alias=True) for v in self.violations]}
