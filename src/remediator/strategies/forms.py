from typing import List, Optional, Set

from bs4 import BeautifulSoup, Tag

from auditor.dom.elements.form_control import LABEL_EXEMPT_TYPES
from ..core import fix_strategy
from ..utils.tag_utils import attr_text, candidates
from ..utils.text_utils import humanize, slugify, unique_id, usable

CONTROL_TAGS = ["input", "select", "textarea"]


def _control_type(control: Tag) -> str:
    if control.name != "input":
        return control.name
    return attr_text(control, "type").strip().lower() or "text"


def _label_targets(soup: BeautifulSoup) -> Set[str]:
    return {attr_text(label, "for").strip() for label in soup.find_all("label") if attr_text(label, "for").strip()}


def _is_labelled(control: Tag, label_targets: Set[str]) -> bool:
    control_id = attr_text(control, "id").strip()
    if control_id and control_id in label_targets:
        return True
    return any(attr_text(control, name).strip() for name in ("aria-label", "aria-labelledby"))


def _describe(control: Tag) -> str:
    """A human readable name for the control: its `name`, else its type."""
    name = attr_text(control, "name")
    return name if usable(name) else _control_type(control)


@fix_strategy("label", "label-content")
def fix_labels(soup: BeautifulSoup, targets: Optional[List[Tag]]) -> int:
    """
    A control wrapped in a <label> without `for` gets an id and the label is
    pointed at it. Any other unlabelled control gets an aria-label from its
    name or type: name="first_name" -> aria-label="First Name".
    """
    label_targets = _label_targets(soup)
    taken_ids = {attr_text(tag, "id") for tag in soup.find_all(id=True)}
    changed = 0

    for control in candidates(soup, targets, CONTROL_TAGS):
        if control.name == "input" and _control_type(control) in LABEL_EXEMPT_TYPES:
            continue
        if _is_labelled(control, label_targets):
            continue

        wrapper = control.find_parent("label")
        if wrapper is not None and not attr_text(wrapper, "for").strip():
            control_id = attr_text(control, "id").strip()
            if not control_id:
                control_id = unique_id(f"{slugify(_describe(control)) or 'field'}-input", taken_ids)
                control["id"] = control_id
                taken_ids.add(control_id)
            wrapper["for"] = control_id
            label_targets.add(control_id)
        else:
            control["aria-label"] = humanize(_describe(control))
        changed += 1

    return changed


@fix_strategy("form-field-multiple-labels", "required-field")
def fix_required_fields(soup: BeautifulSoup, targets: Optional[List[Tag]]) -> int:
    """Required fields announce it: aria-required, and '(required)' in an existing aria-label."""
    changed = 0
    for field in candidates(soup, targets, CONTROL_TAGS):
        if not field.has_attr("required"):
            continue
        before = dict(field.attrs)

        label = attr_text(field, "aria-label")
        if usable(label) and "required" not in label.lower():
            field["aria-label"] = f"{label} (required)"
        field["aria-required"] = "true"

        if field.attrs != before:
            changed += 1
    return changed


STRATEGIES = [fix_labels, fix_required_fields]
