# src/formfixer/services/schema_service.py
import logging
from typing import Dict, Optional

from formfixer.dom.builder import DOMBuilder
from formfixer.dom.models import FormDocument
from formfixer.model import FieldSchema, FormSchema

logger = logging.getLogger(__name__)

# Closed lookup from input type to JSON primitive; anything unlisted is a string
JSON_TYPE_MAP: Dict[str, str] = {
    "number": "number",
    "range": "number",
    "checkbox": "boolean",
    "radio": "boolean",
}
DEFAULT_JSON_TYPE = "string"


def map_to_json_type(input_type: str) -> str:
    """Maps an input type (or the tag name of textarea/select) to a JSON Schema primitive."""
    return JSON_TYPE_MAP.get(input_type, DEFAULT_JSON_TYPE)


class SchemaService:
    """
    Derives a JSON Schema from the controls of an HTML document.

    Form boundaries are ignored: every input, textarea and select in the
    document contributes, whether or not it sits inside a <form>.
    The document is never mutated.
    """

    def __init__(self, builder: Optional[DOMBuilder] = None):
        self.builder = builder or DOMBuilder()

    def derive(self, html: str) -> FormSchema:
        return self.derive_from_document(self.builder.parse_doc(html))

    @staticmethod
    def derive_from_document(doc: FormDocument) -> FormSchema:
        schema = FormSchema()

        skipped = 0
        for control in doc.controls:
            key = control.field_key
            if not key:
                skipped += 1
                continue

            # Colliding keys overwrite the earlier property; required may list a key twice
            schema.properties[key] = FieldSchema(type=map_to_json_type(control.input_type))
            if control.is_required:
                schema.required.append(key)

        if skipped:
            logger.debug(f"Skipped {skipped} control(s) without name or id")
        return schema
