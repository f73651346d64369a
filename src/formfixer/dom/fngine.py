# src/formfixer/dom/fngine.py
import logging
from typing import List

from .models import FormDocument
from .core import ElementBase
from .registry import DOMRegistry
from ..model import Finding

logger = logging.getLogger(__name__)


class FNGINE:
    """
    Form Engine (FNGINE) for auditing and repairing the forms of a FormDocument.

    It walks forms in document order and their controls in document order,
    applies every registered audit rule to each control, and runs the repair
    bound to each code that fired. Repairs mutate the document in place.
    """

    def __init__(self, repair: bool = True):
        """Initializes the engine by discovering and loading all available audit rules."""
        DOMRegistry.discover()
        self.rules = DOMRegistry.get_all_rules()
        self.repair = repair

    def run_audit(self, doc: FormDocument) -> List[Finding]:
        """
        Runs the full rule set on every form control of a parsed document.

        Args:
            doc (FormDocument): The parsed document. Mutated when repairs are enabled.

        Returns:
            List[Finding]: Findings in traversal order (forms outer, controls inner,
            rules in registration order per control).
        """
        findings: List[Finding] = []

        for form in doc.forms:
            for control in form.controls:
                findings.extend(self._audit_node(control))

        if findings:
            logger.debug(f"Audit produced {len(findings)} finding(s) across {len(doc.forms)} form(s)")
        return findings

    def _audit_node(self, node: ElementBase) -> List[Finding]:
        found: List[Finding] = []
        for rule in self.rules:
            results = rule(node)
            if not results:
                continue

            for (code, msg, sev) in results:
                if self.repair:
                    action = DOMRegistry.get_repair(code)
                    if action:
                        action(node)

                found.append(Finding(
                    severity=sev,
                    message=msg,
                    code=code,
                    field=getattr(node, 'name', None),
                ))
        return found
