# src/auditor/dom/qngine.py
from collections import defaultdict
from typing import Dict, List

from auditor.model import AnalysisResult, Level, NodeRef, Outcome, Pass, Violation
from .catalog import RULES, RULE_ORDER, tags_for
from .models import HTMLDocument
from .registry import DOMRegistry


class QNGINE:
    """
    Quality Engine (QNGINE) for auditing canonical documents.

    It walks the element arena built by the DOMBuilder, applies every
    registered element rule to every node, then runs the document rules.
    Results are emitted grouped by rule in catalog order, and in document
    order within a rule, so identical input always yields identical output.
    """

    def __init__(self):
        """Initializes the engine by discovering and loading all available audit rules."""
        DOMRegistry.discover()
        self.rules = DOMRegistry.get_all_rules()
        self.document_rules = DOMRegistry.get_document_rules()

    def run_audit(self, doc: HTMLDocument, level: Level = Level.AA) -> AnalysisResult:
        """
        Runs the full audit suite on a parsed HTMLDocument.

        Args:
            doc (HTMLDocument): The parsed document arena.
            level (Level): Conformance level; only selects the tag put on each record.

        Returns:
            AnalysisResult: violations, passes, incomplete and inapplicable records.
        """
        # rule id -> outcome -> node refs
        buckets: Dict[str, Dict[Outcome, List[NodeRef]]] = defaultdict(lambda: defaultdict(list))

        # --- Element Rules (arena order == document order) ---
        for node in doc.nodes:
            for rule in self.rules:
                for rule_id, outcome in rule(node, doc) or []:
                    buckets[rule_id][outcome].append(NodeRef(html=node.html, target=node.node_id))

        # --- Document Rules ---
        for rule in self.document_rules:
            for finding in rule(doc) or []:
                if finding.node is not None:
                    ref = NodeRef(html=finding.node.html, target=finding.node.node_id)
                else:
                    ref = NodeRef(html=finding.snippet or "")
                buckets[finding.rule_id][finding.outcome].append(ref)

        result = AnalysisResult()
        extra_rules = sorted(set(DOMRegistry.get_all_rule_ids()) - set(RULE_ORDER))
        for rule_id in RULE_ORDER + extra_rules:
            self._emit(result, rule_id, buckets.get(rule_id, {}), level)

        return result

    @staticmethod
    def _emit(result: AnalysisResult, rule_id: str, outcomes: Dict[Outcome, List[NodeRef]], level: Level) -> None:
        meta = RULES.get(rule_id)
        tags = tags_for(rule_id, level)
        description = meta.description if meta else rule_id

        if not any(outcomes.values()):
            result.inapplicable.append(Pass(id=rule_id, description=description, tags=tags))
            return

        for ref in outcomes.get(Outcome.VIOLATION, []):
            result.violations.append(Violation(
                id=rule_id,
                impact=meta.impact if meta else "minor",
                description=description,
                help=meta.help if meta else description,
                help_url=meta.help_url if meta else "",
                nodes=[ref],
                tags=tags,
            ))

        for ref in outcomes.get(Outcome.PASS, []):
            result.passes.append(Pass(
                id=rule_id,
                description=meta.pass_description if meta else description,
                nodes=[ref],
                tags=tags,
            ))

        for ref in outcomes.get(Outcome.INCOMPLETE, []):
            result.incomplete.append(Pass(id=rule_id, description=description, nodes=[ref], tags=tags))
