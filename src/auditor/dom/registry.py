# src/auditor/dom/registry.py
import importlib
import pkgutil
import logging
from typing import Dict, List, Callable, Any, Optional, Set

from .core import ElementDefinition

logger = logging.getLogger(__name__)


class DOMRegistry:
    """
    Central registry for DOM elements, parsers, and audit rules.

    Dynamically discovers and loads ElementDefinition modules from the
    'auditor.dom.elements' package to populate parsers, rules, and rule ids.
    Populated once per process and read-only afterwards.
    """

    _parsers: Dict[str, Callable] = {}
    _audit_rules: List[Callable] = []
    _document_rules: List[Callable] = []
    _all_rule_ids: Set[str] = set()
    _loaded: bool = False

    @classmethod
    def discover(cls) -> None:
        """
        Discovers and registers all element definitions found in the 'auditor.dom.elements' package.

        Modules are visited in name order so registration is deterministic. Each
        module exposing a `DEFINITION` (instance of `ElementDefinition`) contributes
        a parser for its tags, its element rules and its document rules.
        """
        if cls._loaded:
            return

        try:
            import auditor.dom.elements as elements_pkg

            module_names = sorted(name for _, name, _ in pkgutil.iter_modules(elements_pkg.__path__))
            for name in module_names:
                full_name = f"auditor.dom.elements.{name}"
                try:
                    module = importlib.import_module(full_name)
                    if hasattr(module, "DEFINITION") and isinstance(module.DEFINITION, ElementDefinition):
                        defn = module.DEFINITION

                        for tag_name in defn.tag_names:
                            cls._parsers[tag_name] = defn.parser

                        for rule in defn.audit_rules:
                            cls._register_rule(defn.model, rule)

                        cls._document_rules.extend(defn.document_rules)
                        cls._all_rule_ids.update(defn.rule_ids)

                        logger.debug(f"Element definition loaded: {', '.join(defn.tag_names)}")
                except Exception as e:
                    logger.error(f"Error loading module {name}: {e}")

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
        def wrapped(node: Any, doc: Any) -> Any:
            if isinstance(node, model_type):
                return rule_func(node, doc)
            return []

        wrapped.rule_id = getattr(rule_func, "rule_id", rule_func.__name__)
        cls._audit_rules.append(wrapped)

    @classmethod
    def get_parser(cls, tag_name: str) -> Optional[Callable]:
        """Retrieves the parser function for a specific HTML tag."""
        return cls._parsers.get(tag_name)

    @classmethod
    def get_all_rules(cls) -> List[Callable]:
        """Returns a list of all registered element rule functions."""
        return cls._audit_rules

    @classmethod
    def get_document_rules(cls) -> List[Callable]:
        """Returns a list of all registered document level rule functions."""
        return cls._document_rules

    @classmethod
    def get_all_rule_ids(cls) -> List[str]:
        """Returns every rule id registered in the system."""
        return sorted(cls._all_rule_ids)
