# src/normalizer/dialects/angular_codec.py
from typing import List, Optional

from normalizer.model import CanonicalSource, Dialect
from .base import Attribute, BindingTable, DialectCodec


class AngularCodec(DialectCodec):
    """
    Angular component templates.

    Property bindings become plain attributes and event bindings become
    `on<event>` attributes, both carrying a placeholder. Structural directives,
    template references and class/style bindings are kept aside as inert
    markers. Every rewrite is reversed when the template is re-encoded.
    """
    dialect = Dialect.ANGULAR

    def prepare(self, source: str, table: BindingTable, result: CanonicalSource) -> str:
        return table.interpolations(source)

    def rewrite_attribute(self, name: str, value: Optional[str], raw: str,
                          table: BindingTable, result: CanonicalSource) -> List[Attribute]:
        if name.startswith(("*", "#")):
            return [(table.marker(raw), None)]

        if name.startswith("[") and name.endswith("]"):
            prop = name.strip("[]()")
            if prop.startswith("attr."):
                prop = prop[len("attr."):]
            elif prop.startswith(("class.", "style.")) or not prop:
                return [(table.marker(raw), None)]
            return [(prop, '"' + table.token(raw, kind="attribute") + '"')]

        if name.startswith("(") and name.endswith(")"):
            event = name.strip("()").split(".")[0]
            if not event:
                return [(table.marker(raw), None)]
            return [("on" + event.lower(), '"' + table.token(raw, kind="attribute") + '"')]

        return [(name, value)]


CODEC = AngularCodec()
