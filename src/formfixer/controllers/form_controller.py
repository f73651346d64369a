import logging
from concurrent.futures import ProcessPoolExecutor
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Union

from formfixer.dom.builder import DOMBuilder
from formfixer.dom.fngine import FNGINE
from formfixer.errors import InvalidInput
from formfixer.managers.config_manager import config_manager
from formfixer.model import AccessibilityResult, AnalysisResult, FormSchema
from formfixer.services.schema_service import SchemaService

logger = logging.getLogger(__name__)


def _worker_analyze_file(path: Union[str, Path]) -> Dict[str, Any]:
    """
    Worker function to analyze a single HTML file in a separate process.
    Failures are returned as data so one bad file never aborts the batch.
    """
    try:
        html = Path(path).read_text(encoding="utf-8")
        controller = FormController()
        result = controller.analyze(html)
        schema = controller.derive_schema(result.repaired_html)
        return {
            "path": str(path),
            **result.to_dict(),
            "schema": schema.to_dict(),
        }
    except Exception as e:
        logger.error(f"Worker failed on {path}: {e}")
        return {"error": str(e), "path": str(path)}


class FormController:
    """
    Entry point for the form core: validates payloads, then runs the analyzer,
    the schema deriver or the external accessibility audit.

    Every call parses its own document; nothing is shared between calls.
    """

    def __init__(
            self,
            builder: Optional[DOMBuilder] = None,
            schema_service: Optional[SchemaService] = None,
            accessibility_service=None
    ):
        self.builder = builder or DOMBuilder()
        self.schema_service = schema_service or SchemaService(self.builder)
        self._accessibility_service = accessibility_service

    @staticmethod
    def validate_html(html: Any) -> str:
        """Rejects absent, non-string and empty payloads before any parsing happens."""
        if html is None:
            raise InvalidInput("HTML is required.")
        if not isinstance(html, str):
            raise InvalidInput(f"HTML must be a string, got {type(html).__name__}.")
        if not html:
            raise InvalidInput("HTML is required.")
        return html

    def analyze(self, html: str) -> AnalysisResult:
        """
        Audits every form control, adds missing `required` attributes and
        returns the findings together with the repaired markup.
        """
        html = self.validate_html(html)
        doc = self.builder.parse_doc(html)
        findings = FNGINE().run_audit(doc)

        result = AnalysisResult(findings=findings, repaired_html=doc.to_html())
        logger.info(
            f"Analyzed {len(doc.forms)} form(s): "
            f"{len(result.errors)} error(s), {len(result.warnings)} warning(s)"
        )
        return result

    def derive_schema(self, html: str) -> FormSchema:
        """Builds a JSON Schema from every control in the document."""
        html = self.validate_html(html)
        schema = self.schema_service.derive(html)
        logger.info(f"Derived schema with {len(schema.properties)} propert(ies)")
        return schema

    def check_accessibility(self, html: str) -> AccessibilityResult:
        """Runs the external axe-core audit against the rendered markup."""
        html = self.validate_html(html)
        result = self.accessibility_service.check(html)
        logger.info(f"Accessibility audit found {len(result.violations)} violation(s)")
        return result

    @property
    def accessibility_service(self):
        # Playwright is only imported once an accessibility audit is requested
        if self._accessibility_service is None:
            from formfixer.services.accessibility_service import AccessibilityService
            self._accessibility_service = AccessibilityService()
        return self._accessibility_service

    def analyze_batch(
            self,
            paths: List[Union[str, Path]],
            workers: Optional[int] = None,
            progress_callback: Optional[Callable[[int, int], None]] = None
    ) -> List[Dict[str, Any]]:
        """Analyzes many HTML files in parallel. Results keep the input order."""
        workers = workers or config_manager.get_nested("batch.workers", 4)
        total = len(paths)
        results: List[Dict[str, Any]] = []

        with ProcessPoolExecutor(max_workers=workers) as executor:
            for i, result in enumerate(executor.map(_worker_analyze_file, paths)):
                if progress_callback:
                    progress_callback(i + 1, total)
                results.append(result)

        failed = sum(1 for r in results if "error" in r)
        if failed:
            logger.warning(f"{failed} of {total} file(s) could not be analyzed")
        return results
