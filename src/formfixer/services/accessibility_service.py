"""
Renders markup in headless Chromium and runs axe-core against the live DOM.

Rule evaluation is delegated entirely to axe-core; this service only drives
the browser and reshapes the response.
"""
import logging
from typing import Any, Dict, List, Optional

from axe_playwright_python.sync_playwright import Axe
from playwright.sync_api import sync_playwright, Error as PlaywrightError

from formfixer.errors import AccessibilityUnavailable
from formfixer.managers.config_manager import config_manager
from formfixer.model import AccessibilityResult, AccessibilityViolation

logger = logging.getLogger(__name__)


class AccessibilityService:

    def __init__(self, tags: Optional[List[str]] = None, timeout_ms: Optional[int] = None):
        # No tags means every axe rule runs, Level A included
        self.tags = list(tags if tags is not None else config_manager.get_nested("accessibility.tags", []))
        self.timeout_ms = timeout_ms or config_manager.get_nested("accessibility.timeout_ms", 10000)

    def build_options(self) -> Optional[Dict[str, Any]]:
        """axe.run options; None lets axe run its full rule set."""
        if not self.tags:
            return None
        return {"runOnly": {"type": "tag", "values": self.tags}}

    def check(self, html: str) -> AccessibilityResult:
        """
        Loads `html` into a fresh page, waits for the load event and runs axe.

        Raises:
            AccessibilityUnavailable: the browser could not be started or axe failed.
        """
        try:
            with sync_playwright() as p:
                browser = p.chromium.launch()
                try:
                    page = browser.new_page()
                    page.set_content(html, wait_until="load", timeout=self.timeout_ms)
                    results = Axe().run(page, options=self.build_options())
                finally:
                    browser.close()
        except PlaywrightError as e:
            logger.error(f"Accessibility audit failed: {e}")
            raise AccessibilityUnavailable(f"Accessibility analysis failed: {e}") from e

        return self.parse_response(results.response)

    @staticmethod
    def parse_response(response: dict) -> AccessibilityResult:
        """Converts a raw axe-core result object into an AccessibilityResult."""
        violations = [
            AccessibilityViolation.model_validate(v)
            for v in response.get("violations", [])
        ]
        return AccessibilityResult(
            violations=violations,
            passes_count=len(response.get("passes", [])),
            incomplete_count=len(response.get("incomplete", [])),
        )
