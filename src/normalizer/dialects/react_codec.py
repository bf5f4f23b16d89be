# src/normalizer/dialects/react_codec.py
import re
from typing import List, Optional

from normalizer.model import CanonicalSource, Dialect
from .base import Attribute, BindingTable, DialectCodec

EVENT_HANDLER_RE = re.compile(r"^on[A-Z]")

# JSX prop spelling for DOM attributes a fix may introduce or the parser lower-cased
JSX_PROP_NAMES = {
    "class": "className",
    "for": "htmlFor",
    "tabindex": "tabIndex",
    "readonly": "readOnly",
    "maxlength": "maxLength",
    "minlength": "minLength",
    "autofocus": "autoFocus",
    "autocomplete": "autoComplete",
    "colspan": "colSpan",
    "rowspan": "rowSpan",
    "srcset": "srcSet",
    "crossorigin": "crossOrigin",
    "enctype": "encType",
    "usemap": "useMap",
    "datetime": "dateTime",
    "accesskey": "accessKey",
    "contenteditable": "contentEditable",
    "spellcheck": "spellCheck",
}


def _matching_brace(text: str, start: int) -> int:
    """Index of the brace closing the one at `start`, or -1 if unbalanced."""
    depth = 0
    for i in range(start, len(text)):
        if text[i] == "{":
            depth += 1
        elif text[i] == "}":
            depth -= 1
            if depth == 0:
                return i
    return -1


class ReactCodec(DialectCodec):
    """JSX markup. Expressions are opaque; props map onto DOM attribute names."""
    dialect = Dialect.REACT

    def prepare(self, source: str, table: BindingTable, result: CanonicalSource) -> str:
        markup = source.replace("<>", "<div>").replace("</>", "</div>")
        return self._replace_expressions(markup, table)

    def _replace_expressions(self, markup: str, table: BindingTable) -> str:
        out: List[str] = []
        in_tag = False
        last_significant = ""
        i, n = 0, len(markup)

        while i < n:
            ch = markup[i]

            if ch == "{":
                end = _matching_brace(markup, i)
                if end < 0:
                    out.append(markup[i:])
                    break
                expression = markup[i:end + 1]
                if in_tag and last_significant == "=":
                    out.append('"' + table.token(expression, kind="value") + '"')
                elif in_tag:
                    # Spread props: {...rest}
                    out.append(" " + table.marker(expression) + " ")
                else:
                    out.append(table.token(expression))
                last_significant = "}"
                i = end + 1
                continue

            if in_tag and ch in "\"'":
                close = markup.find(ch, i + 1)
                close = n - 1 if close < 0 else close
                out.append(markup[i:close + 1])
                last_significant = ch
                i = close + 1
                continue

            if ch == "<" and i + 1 < n and (markup[i + 1].isalpha() or markup[i + 1] == "/"):
                in_tag = True
            elif ch == ">":
                in_tag = False

            out.append(ch)
            if not ch.isspace():
                last_significant = ch
            i += 1

        return "".join(out)

    def rewrite_attribute(self, name: str, value: Optional[str], raw: str,
                          table: BindingTable, result: CanonicalSource) -> List[Attribute]:
        if name == "className":
            return [("class", value)]
        if name == "htmlFor":
            return [("for", value)]
        if EVENT_HANDLER_RE.match(name):
            result.attr_cases[name.lower()] = name
            return [(name.lower(), value)]
        return [(name, value)]

    def attribute_name(self, name: str, source: CanonicalSource) -> str:
        if name in ("class", "for"):
            return JSX_PROP_NAMES[name]
        return source.attr_cases.get(name) or JSX_PROP_NAMES.get(name, name)


CODEC = ReactCodec()
