import logging
import re
from typing import Any, Dict, Iterable, List, Optional

from bs4 import Tag
from pydantic import ValidationError

from auditor.dom.builder import DOMBuilder
from auditor.dom.models import HTMLDocument
from auditor.model import Impact, Violation
from normalizer.services.normalize_service import NormalizeService
from remediator.core import FixRegistry, FixStrategy
from remediator.model import FixOptions
from wcagpiper.core.managers.config_manager import config_manager

logger = logging.getLogger(__name__)

SNIPPET_TAG_RE = re.compile(r"\s*<([A-Za-z][\w:-]*)")


class FixController:
    """
    Applies fix strategies for a list of violations to a source document and
    re-encodes the result in the source dialect.

    `fix` never raises. If a strategy fails the remaining ones still run; if
    the document cannot be parsed at all the original text is returned.
    """

    def __init__(self, normalizer: Optional[NormalizeService] = None):
        parser = config_manager.get_nested("normalizer.parser", "html.parser")
        self.normalizer = normalizer or NormalizeService(
            parser=parser,
            indent=config_manager.get_nested("remediator.indent", 2),
            pretty=config_manager.get_nested("remediator.format_output", True),
        )
        self.builder = DOMBuilder(parser=parser)
        FixRegistry.discover()

    def fix(self, code: str, violations: Optional[Iterable[Any]], options: Optional[FixOptions] = None) -> str:
        options = options or FixOptions()
        try:
            canonical = self.normalizer.normalize(code, options.format)
            doc = self.builder.parse_doc(canonical)
        except Exception as e:
            logger.error("Could not parse source for fixing, returning it unchanged: %s", e, exc_info=True)
            return code

        if options.auto_fix:
            self.apply(doc, self.coerce(violations))

        try:
            return self.normalizer.encode(doc.soup, canonical)
        except Exception as e:
            logger.error("Re-encoding fixed source failed: %s", e, exc_info=True)
            return code

    @staticmethod
    def coerce(violations: Optional[Iterable[Any]]) -> List[Violation]:
        """
        Accepts Violation models or plain dicts in the same shape. A dict that
        fails validation but still names a rule id is kept without targets.
        """
        result = []
        for item in violations or []:
            if isinstance(item, Violation):
                result.append(item)
                continue
            try:
                result.append(Violation.model_validate(item))
            except ValidationError as e:
                rule_id = item.get("id") if isinstance(item, dict) else None
                if isinstance(rule_id, str) and rule_id:
                    logger.debug("Violation %r is incomplete, fixing it document wide.", rule_id)
                    result.append(Violation.model_construct(id=rule_id, impact=Impact.MINOR, nodes=[]))
                else:
                    logger.warning("Skipping malformed violation: %s", e.errors()[0].get("msg", e))
        return result

    def apply(self, doc: HTMLDocument, violations: List[Violation]) -> None:
        """
        Groups violations per strategy and runs each strategy once, in order
        of first appearance. Mutates `doc.soup` in place.
        """
        plan: Dict[FixStrategy, List[Violation]] = {}
        for violation in violations:
            strategy = FixRegistry.get(violation.id)
            if strategy is None:
                logger.debug("No fix strategy for '%s', skipping.", violation.id)
                continue
            plan.setdefault(strategy, []).append(violation)

        for strategy, group in plan.items():
            targets = None if strategy.document_wide else self.resolve_targets(doc, group)
            try:
                changed = strategy(doc.soup, targets)
                logger.debug(
                    "%s changed %d element(s) (%s).",
                    strategy.__name__, changed, "document wide" if targets is None else f"{len(targets)} target(s)"
                )
            except Exception as e:
                logger.error("Fix strategy %s failed: %s", strategy.__name__, e, exc_info=True)

    @staticmethod
    def resolve_targets(doc: HTMLDocument, violations: List[Violation]) -> Optional[List[Tag]]:
        """
        Maps node refs to live tags through the arena. Returns None (search the
        whole document) as soon as one node cannot be resolved or its tag name
        does not match the reported snippet.
        """
        targets: List[Tag] = []
        seen = set()
        for violation in violations:
            if not violation.nodes:
                return None
            for node in violation.nodes:
                if node.target is None or not 0 <= node.target < len(doc.tags):
                    return None
                tag = doc.tags[node.target]
                match = SNIPPET_TAG_RE.match(node.html or "")
                if match is None or match.group(1).lower() != tag.name:
                    return None
                if id(tag) not in seen:
                    seen.add(id(tag))
                    targets.append(tag)
        return targets
