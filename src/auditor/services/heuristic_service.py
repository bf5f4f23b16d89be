# src/auditor/services/heuristic_service.py
import logging
import re
from typing import Dict, List

from auditor.dom.catalog import RULES, RULE_ORDER, tags_for
from auditor.dom.elements.form_control import LABEL_EXEMPT_TYPES
from auditor.model import AnalysisResult, Level, NodeRef, Pass, Violation
from normalizer.model import strip_internal_attrs

logger = logging.getLogger(__name__)

IMG_RE = re.compile(r"<img\b[^>]*>", re.I)
CONTROL_RE = re.compile(r"<(?:input|select|textarea)\b[^>]*>", re.I)
HEADING_RE = re.compile(r"<h([1-6])\b[^>]*>", re.I)
HTML_RE = re.compile(r"<html\b[^>]*>", re.I)
TITLE_RE = re.compile(r"<title\b[^>]*>(.*?)</title>", re.I | re.S)
BUTTON_RE = re.compile(r"<button\b([^>]*)>(.*?)</button>", re.I | re.S)
LINK_RE = re.compile(r"<a\b([^>]*\bhref\s*=[^>]*)>(.*?)</a>", re.I | re.S)
FOR_RE = re.compile(r"<label\b[^>]*\bfor\s*=\s*[\"']?([^\"'\s>]+)", re.I)
TAG_RE = re.compile(r"<[^>]+>")


def _attr(tag_text: str, name: str):
    match = re.search(r"(?<![\w-])" + re.escape(name) + r"\s*=\s*(\"[^\"]*\"|'[^']*'|[^\s>]+)", tag_text, re.I)
    if not match:
        return None
    return match.group(1).strip("\"'")


def _has_attr(tag_text: str, name: str) -> bool:
    return re.search(r"\s" + re.escape(name) + r"(\s|=|/?>)", tag_text, re.I) is not None


class HeuristicService:
    """
    Regex approximation of the rule battery, used when the canonical tree
    cannot be built. Reduced confidence: no node targets, and neither
    `incomplete` nor `inapplicable` is populated.
    """

    def analyze(self, markup: str, level: Level = Level.AA) -> AnalysisResult:
        markup = strip_internal_attrs(markup)
        found: Dict[str, List[str]] = {rule_id: [] for rule_id in RULE_ORDER}
        passed: Dict[str, List[str]] = {rule_id: [] for rule_id in RULE_ORDER}

        for tag in IMG_RE.findall(markup):
            (passed if _has_attr(tag, "alt") else found)["image-alt"].append(tag)

        label_targets = set(FOR_RE.findall(markup))
        for tag in CONTROL_RE.findall(markup):
            if tag.lower().startswith("<input") and (_attr(tag, "type") or "text").lower() in LABEL_EXEMPT_TYPES:
                continue
            labelled = (
                (_attr(tag, "id") or "") in label_targets
                or (_attr(tag, "aria-label") or "").strip()
                or (_attr(tag, "aria-labelledby") or "").strip()
            )
            (passed if labelled else found)["label"].append(tag)

        last_level = 0
        for match in HEADING_RE.finditer(markup):
            heading_level = int(match.group(1))
            skipped = last_level > 0 and heading_level > last_level + 1
            (found if skipped else passed)["heading-order"].append(match.group(0))
            last_level = heading_level

        html_tag = HTML_RE.search(markup)
        if html_tag is None or not (_attr(html_tag.group(0), "lang") or "").strip():
            found["html-has-lang"].append(html_tag.group(0) if html_tag else "<html>")
        else:
            passed["html-has-lang"].append(html_tag.group(0))

        title = TITLE_RE.search(markup)
        if title is None or not TAG_RE.sub("", title.group(1)).strip():
            found["document-title"].append(title.group(0) if title else "<title>")
        else:
            passed["document-title"].append(title.group(0))

        for rule_id, regex in (("button-name", BUTTON_RE), ("link-name", LINK_RE)):
            for match in regex.finditer(markup):
                text = TAG_RE.sub("", match.group(2)).strip()
                named = text or (_attr(match.group(1), "aria-label") or "").strip()
                (passed if named else found)[rule_id].append(match.group(0))

        result = AnalysisResult()
        for rule_id in RULE_ORDER:
            meta = RULES[rule_id]
            tags = tags_for(rule_id, level)
            for snippet in found[rule_id]:
                result.violations.append(Violation(
                    id=rule_id, impact=meta.impact, description=meta.description, help=meta.help,
                    help_url=meta.help_url, nodes=[NodeRef(html=snippet)], tags=tags,
                ))
            for snippet in passed[rule_id]:
                result.passes.append(Pass(
                    id=rule_id, description=meta.pass_description, nodes=[NodeRef(html=snippet)], tags=tags,
                ))

        logger.debug("Heuristic analysis found %d violation(s).", len(result.violations))
        return result
