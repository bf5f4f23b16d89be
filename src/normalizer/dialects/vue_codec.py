# src/normalizer/dialects/vue_codec.py
import re
from typing import List, Optional

from normalizer.model import CanonicalSource, Dialect
from .base import Attribute, BindingTable, DialectCodec

TEMPLATE_OPEN_RE = re.compile(r"<template(?:\s[^>]*)?>", re.I)
TEMPLATE_CLOSE = "</template>"
DIRECTIVE_PREFIXES = ("v-", ":", "@", "#")


class VueCodec(DialectCodec):
    """
    Vue single-file components. Only the outermost <template> block is
    analysed; script and style blocks ride along untouched.
    """
    dialect = Dialect.VUE

    def prepare(self, source: str, table: BindingTable, result: CanonicalSource) -> str:
        markup = source
        open_match = TEMPLATE_OPEN_RE.search(source)
        close_index = source.lower().rfind(TEMPLATE_CLOSE)
        if open_match and close_index > open_match.end():
            result.leader = source[:open_match.start()]
            result.template_open = open_match.group(0)
            result.trailer = source[close_index + len(TEMPLATE_CLOSE):]
            markup = source[open_match.end():close_index]
        return table.interpolations(markup)

    def rewrite_attribute(self, name: str, value: Optional[str], raw: str,
                          table: BindingTable, result: CanonicalSource) -> List[Attribute]:
        if name.startswith(DIRECTIVE_PREFIXES):
            return [(table.marker(raw), None)]
        return [(name, value)]

    def wrap_output(self, text: str, source: CanonicalSource) -> str:
        opening = source.template_open or "<template>"
        return f"{source.leader}{opening}\n{text}\n{TEMPLATE_CLOSE}{source.trailer}"


CODEC = VueCodec()
