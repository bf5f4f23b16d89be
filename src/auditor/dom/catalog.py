# src/auditor/dom/catalog.py
"""
Static metadata for the rule battery. The order of RULES is the order in
which rule results are emitted.
"""
from typing import Dict, List

from pydantic import BaseModel, Field

from auditor.model import Impact, Level

UNDERSTANDING = "https://www.w3.org/WAI/WCAG21/Understanding/"


class RuleMeta(BaseModel):
    id: str
    impact: Impact
    description: str
    help: str
    help_url: str
    pass_description: str
    criterion_tag: str
    extra_tags: List[str] = Field(default_factory=list)


RULES: Dict[str, RuleMeta] = {meta.id: meta for meta in [
    RuleMeta(
        id="image-alt",
        impact=Impact.CRITICAL,
        description="Images must have alternate text",
        help="Ensures <img> elements have alternate text or a role of none or presentation",
        help_url=UNDERSTANDING + "non-text-content.html",
        pass_description="Image has alt text",
        criterion_tag="wcag111",
        extra_tags=["section508"],
    ),
    RuleMeta(
        id="label",
        impact=Impact.SERIOUS,
        description="Form elements must have labels",
        help="Ensures every form element has a label",
        help_url=UNDERSTANDING + "labels-or-instructions.html",
        pass_description="Form element has a label",
        criterion_tag="wcag332",
        extra_tags=["section508"],
    ),
    RuleMeta(
        id="heading-order",
        impact=Impact.MODERATE,
        description="Heading levels should only increase by one",
        help="Ensures the order of headings is semantically correct",
        help_url=UNDERSTANDING + "info-and-relationships.html",
        pass_description="Heading level follows the previous heading",
        criterion_tag="wcag131",
    ),
    RuleMeta(
        id="html-has-lang",
        impact=Impact.SERIOUS,
        description="The HTML element must have a lang attribute",
        help="Ensures every HTML document has a lang attribute",
        help_url=UNDERSTANDING + "language-of-page.html",
        pass_description="HTML has lang attribute",
        criterion_tag="wcag311",
    ),
    RuleMeta(
        id="document-title",
        impact=Impact.SERIOUS,
        description="Documents must have a title element",
        help="Ensures each HTML document contains a non-empty title element",
        help_url=UNDERSTANDING + "page-titled.html",
        pass_description="Document has a non-empty title",
        criterion_tag="wcag242",
    ),
    RuleMeta(
        id="button-name",
        impact=Impact.CRITICAL,
        description="Buttons must have discernible text",
        help="Ensures buttons have discernible text",
        help_url=UNDERSTANDING + "name-role-value.html",
        pass_description="Button has discernible text",
        criterion_tag="wcag412",
        extra_tags=["section508"],
    ),
    RuleMeta(
        id="link-name",
        impact=Impact.SERIOUS,
        description="Links must have discernible text",
        help="Ensures links have discernible text",
        help_url=UNDERSTANDING + "link-purpose-in-context.html",
        pass_description="Link has discernible text",
        criterion_tag="wcag244",
        extra_tags=["section508"],
    ),
]}

RULE_ORDER: List[str] = list(RULES)


def tags_for(rule_id: str, level: Level) -> List[str]:
    """WCAG tags for a record: the requested conformance level first, then the criterion."""
    meta = RULES.get(rule_id)
    if meta is None:
        return [level.tag]
    return [level.tag, meta.criterion_tag] + list(meta.extra_tags)
