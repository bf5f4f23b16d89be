# ============================================
# file: src/normalizer/model.py
# ============================================
from __future__ import annotations

import logging
import re
from enum import Enum
from typing import Dict, Literal, Optional

from pydantic import BaseModel, Field

logger = logging.getLogger(__name__)

PLACEHOLDER_RE = re.compile(r"__expr_\d+__")
MARKER_PREFIX = "data-wcagpiper-keep-"

# Per-element bookkeeping written by the codecs and removed again on re-encoding.
# html.parser lower-cases tag names, so the source spelling rides along on the tag.
TAG_CASE_ATTR = "data-wcagpiper-tag"
SELF_CLOSE_ATTR = "data-wcagpiper-void"
INTERNAL_ATTRS = frozenset({TAG_CASE_ATTR, SELF_CLOSE_ATTR})
INTERNAL_ATTR_RE = re.compile(
    r"\s(?:" + re.escape(TAG_CASE_ATTR) + "|" + re.escape(SELF_CLOSE_ATTR) + r")(?:=(\"[^\"]*\"|'[^']*'))?"
)


class Dialect(str, Enum):
    """Authoring syntaxes the normalizer understands."""
    HTML = "html"
    REACT = "react"
    VUE = "vue"
    ANGULAR = "angular"

    @classmethod
    def coerce(cls, value: Optional[str]) -> "Dialect":
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value or "html").strip().lower())
        except ValueError:
            logger.warning("Unknown dialect %r, treating source as html.", value)
            return cls.HTML


class Binding(BaseModel):
    """
    Original dialect text hidden behind a placeholder token or marker attribute.

    kind:
      - text:      the token stands in for the original text, wherever it appears
      - value:     the token is an attribute value; the original replaces `="token"`
      - attribute: the token (or marker) stands in for the whole original attribute
    """
    original: str
    kind: Literal["text", "value", "attribute"] = "text"


class CanonicalSource(BaseModel):
    """
    Output of the normalizer: canonical HTML plus everything needed to re-encode
    a mutated tree back into the source dialect.
    """
    dialect: Dialect = Dialect.HTML
    markup: str
    bindings: Dict[str, Binding] = Field(default_factory=dict)

    # html.parser lower-cases attribute names; this maps them back (lower -> original)
    attr_cases: Dict[str, str] = Field(default_factory=dict)

    is_fragment: bool = False

    # Vue single-file-component envelope around the template block
    leader: str = ""
    template_open: str = ""
    trailer: str = ""

    # True when the dialect codec failed and the text was taken as plain html
    degraded: bool = False


def is_placeholder(value: Optional[str]) -> bool:
    """True if the value is nothing but opaque expression placeholders."""
    if not value:
        return False
    return not PLACEHOLDER_RE.sub("", value).strip()


def contains_placeholder(value: Optional[str]) -> bool:
    return bool(value) and bool(PLACEHOLDER_RE.search(value))


def strip_internal_attrs(markup: str) -> str:
    """Removes tag case and self-closing bookkeeping from serialized markup."""
    return INTERNAL_ATTR_RE.sub("", markup or "")
