import logging
from typing import Optional, Tuple

from auditor.dom.builder import DOMBuilder
from auditor.dom.models import HTMLDocument
from auditor.dom.qngine import QNGINE
from auditor.model import AnalysisOptions, AnalysisResult
from auditor.services.heuristic_service import HeuristicService
from normalizer.model import CanonicalSource
from normalizer.services.normalize_service import NormalizeService
from wcagpiper.core.managers.config_manager import config_manager

logger = logging.getLogger(__name__)


class AuditController:
    """
    Orchestrates a single analysis: dialect normalization, tree construction,
    rule execution, and the regex fallback when the tree route fails.
    Holds no per-request state; one instance can serve any number of calls.
    """

    def __init__(self, normalizer: Optional[NormalizeService] = None):
        parser = config_manager.get_nested("normalizer.parser", "html.parser")
        self.normalizer = normalizer or NormalizeService(parser=parser)
        self.builder = DOMBuilder(
            parser=parser,
            snippet_max_length=config_manager.get_nested("auditor.snippet_max_length", 250),
        )
        self.engine = QNGINE()
        self.heuristics = HeuristicService()
        self.fallback_enabled = config_manager.get_nested("auditor.heuristic_fallback", True)

    def build(self, code: str, options: AnalysisOptions) -> Tuple[CanonicalSource, HTMLDocument]:
        """Normalizes the source and builds its element arena."""
        canonical = self.normalizer.normalize(code, options.format)
        return canonical, self.builder.parse_doc(canonical)

    def analyze(self, code: str, options: Optional[AnalysisOptions] = None) -> AnalysisResult:
        """
        Runs the rule battery over `code`. Never raises: when the tree route
        fails the regex heuristics answer instead (or an empty result if the
        fallback is disabled).
        """
        options = options or AnalysisOptions()
        canonical = None
        try:
            canonical, doc = self.build(code, options)
            result = self.engine.run_audit(doc, options.level)
            logger.debug(
                "Analysis (%s/%s): %d violation(s), %d pass(es).",
                options.format.value, options.level.value, len(result.violations), len(result.passes)
            )
            return result
        except Exception as e:
            logger.warning("Tree analysis failed, using heuristic fallback: %s", e, exc_info=True)

        if not self.fallback_enabled:
            return AnalysisResult()

        try:
            markup = canonical.markup if canonical is not None else (code or "")
            return self.heuristics.analyze(markup, options.level)
        except Exception as e:
            logger.error("Heuristic analysis failed: %s", e, exc_info=True)
            return AnalysisResult()
