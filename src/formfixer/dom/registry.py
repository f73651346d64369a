# src/formfixer/dom/registry.py
import importlib
import pkgutil
import logging
from typing import Dict, List, Callable, Any, Optional, Set

from .core import ElementDefinition, RepairAction

logger = logging.getLogger(__name__)


class DOMRegistry:
    """
    Central registry for form elements, parsers, audit rules and repairs.

    Dynamically discovers and loads ElementDefinition modules from the
    'formfixer.dom.elements' package.
    """

    _parsers: Dict[str, Callable] = {}
    _audit_rules: List[Callable] = []
    _repairs: Dict[str, RepairAction] = {}
    _all_codes: Set[str] = set()
    _loaded: bool = False

    @classmethod
    def discover(cls) -> None:
        """
        Discovers and registers all element definitions found in 'formfixer.dom.elements'.

        Every module exposing a `DEFINITION` attribute (instance of `ElementDefinition`)
        contributes a parser per tag name, its audit rules in declaration order,
        its repair actions and its possible finding codes.
        """
        if cls._loaded:
            return

        try:
            import formfixer.dom.elements as elements_pkg

            # Sorted so that rule order is stable across platforms
            for _, name, _ in sorted(pkgutil.iter_modules(elements_pkg.__path__), key=lambda m: m.name):
                full_name = f"formfixer.dom.elements.{name}"
                try:
                    module = importlib.import_module(full_name)
                except Exception as e:
                    logger.error(f"Error loading module {name}: {e}")
                    continue

                defn = getattr(module, "DEFINITION", None)
                if not isinstance(defn, ElementDefinition):
                    continue

                for tag_name in defn.tag_names:
                    cls._parsers[tag_name] = defn.parser

                for rule in defn.audit_rules:
                    cls._register_rule(defn.model, rule)

                cls._repairs.update(defn.repairs)
                cls._all_codes.update(defn.codes)

                logger.debug(f"Element definition loaded: {', '.join(defn.tag_names)}")

            cls._loaded = True
        except ImportError as e:
            logger.error(f"Could not find elements package: {e}")

    @classmethod
    def _register_rule(cls, model_type: Any, rule_func: Callable) -> None:
        """
        Registers a single audit rule, wrapping it with a type check.

        Args:
            model_type: The class type this rule applies to.
            rule_func: The function executing the logic.
        """
        def wrapped(node: Any) -> Any:
            if isinstance(node, model_type):
                return rule_func(node)
            return []

        wrapped.__name__ = rule_func.__name__
        cls._audit_rules.append(wrapped)

    @classmethod
    def get_parser(cls, tag_name: str) -> Optional[Callable]:
        """Retrieves the parser function for a specific HTML tag."""
        return cls._parsers.get(tag_name)

    @classmethod
    def get_all_rules(cls) -> List[Callable]:
        """Returns a list of all registered audit rule functions."""
        return cls._audit_rules

    @classmethod
    def get_repair(cls, code: str) -> Optional[RepairAction]:
        """Returns the repair bound to a finding code, or None when the code is report-only."""
        return cls._repairs.get(code)

    @classmethod
    def get_all_possible_codes(cls) -> List[str]:
        return sorted(list(cls._all_codes))
