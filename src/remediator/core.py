# src/remediator/core.py
import importlib
import logging
import pkgutil
from typing import Callable, Dict, List, Optional

from bs4 import BeautifulSoup, Tag

logger = logging.getLogger(__name__)

# strategy(soup, targets) -> number of elements changed.
# `targets` is None when the strategy must search the whole document.
FixStrategy = Callable[[BeautifulSoup, Optional[List[Tag]]], int]


def fix_strategy(*rule_ids: str, document_wide: bool = False):
    """
    Decorator to declare which rule ids a fix function remediates.

    `document_wide` strategies always receive `targets=None`, for fixes whose
    correctness depends on the whole document (e.g. heading levels).
    """
    def decorator(func):
        func.rule_ids = tuple(rule_ids)
        func.document_wide = document_wide
        return func
    return decorator


class FixRegistry:
    """
    Static map of rule id -> fix strategy.

    Discovers modules in the 'remediator.strategies' package; each module
    exposes a `STRATEGIES` list of functions decorated with `@fix_strategy`.
    Populated once per process and read-only afterwards.
    """

    _strategies: Dict[str, FixStrategy] = {}
    _loaded: bool = False

    @classmethod
    def discover(cls) -> None:
        if cls._loaded:
            return

        try:
            import remediator.strategies as strategies_pkg

            module_names = sorted(name for _, name, _ in pkgutil.iter_modules(strategies_pkg.__path__))
            for name in module_names:
                try:
                    module = importlib.import_module(f"remediator.strategies.{name}")
                    for strategy in getattr(module, "STRATEGIES", []):
                        for rule_id in getattr(strategy, "rule_ids", ()):
                            if rule_id in cls._strategies:
                                logger.warning(f"Rule '{rule_id}' already has a fix strategy, ignoring {name}.")
                                continue
                            cls._strategies[rule_id] = strategy
                    logger.debug(f"Fix strategies loaded from {name}")
                except Exception as e:
                    logger.error(f"Error loading fix module {name}: {e}")

            cls._loaded = True
        except ImportError as e:
            logger.error(f"Could not find strategies package: {e}")

    @classmethod
    def get(cls, rule_id: str) -> Optional[FixStrategy]:
        return cls._strategies.get(rule_id)
