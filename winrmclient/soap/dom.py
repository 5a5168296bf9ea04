"""A small XML document model with namespace-aware serialisation."""

from __future__ import annotations

from typing import Optional, Protocol
from xml.sax.saxutils import escape

XML_DECLARATION = '<?xml version="1.0" encoding="utf-8" ?>'
_INDENT = "  "


class NamespaceLike(Protocol):
    prefix: str
    uri: str


def _escape_attr(value: str) -> str:
    return escape(value, {'"': "&quot;"})


class Element:
    """An XML element holding attributes, raw text content and children."""

    def __init__(self, name: str) -> None:
        self.name = name
        self.namespace: Optional[NamespaceLike] = None
        self.parent: Optional[Element] = None
        self.children: list[Element] = []
        self.attributes: dict[str, str] = {}
        self.content = ""
        self._declared: list[NamespaceLike] = []

    @property
    def qualified_name(self) -> str:
        if self.namespace is not None and self.namespace.prefix:
            return f"{self.namespace.prefix}:{self.name}"
        return self.name

    def add_child(self, child: Element) -> Element:
        """Append ``child`` and make this element its parent."""
        child.parent = self
        self.children.append(child)
        return child

    def set_attr(self, name: str, value: str) -> None:
        self.attributes[name] = value

    def set_content(self, content: str) -> None:
        """Set the text content; it is written out verbatim."""
        self.content = content

    def declare_namespace(self, namespace: NamespaceLike) -> None:
        """Declare ``namespace`` on this element (once)."""
        for known in self._declared:
            if known.prefix == namespace.prefix and known.uri == namespace.uri:
                return
        self._declared.append(namespace)

    def declared_namespaces(self) -> list[NamespaceLike]:
        return list(self._declared)

    def _open_tag(self) -> str:
        parts = [self.qualified_name]
        parts.extend(f'xmlns:{ns.prefix}="{_escape_attr(ns.uri)}"' for ns in self._declared)
        parts.extend(f'{key}="{_escape_attr(value)}"' for key, value in self.attributes.items())
        return "<" + " ".join(parts)

    def _render(self, pretty: bool, depth: int) -> str:
        indent = _INDENT * depth if pretty else ""
        newline = "\n" if pretty else ""
        tag = self._open_tag()
        name = self.qualified_name
        if not self.children:
            if not self.content:
                return f"{indent}{tag}/>{newline}"
            return f"{indent}{tag}>{self.content}</{name}>{newline}"
        inner = "".join(child._render(pretty, depth + 1) for child in self.children)
        return f"{indent}{tag}>{self.content}{newline}{inner}{indent}</{name}>{newline}"

    def render(self, pretty: bool = False) -> str:
        return self._render(pretty, 0)

    def __str__(self) -> str:
        return self.render()


class Document:
    """An XML document with a single root element."""

    def __init__(self, pretty_print: bool = False) -> None:
        self.root: Optional[Element] = None
        self.pretty_print = pretty_print

    def set_root(self, element: Element) -> None:
        element.parent = None
        self.root = element

    def __str__(self) -> str:
        text = XML_DECLARATION
        if self.pretty_print:
            text += "\n"
        if self.root is not None:
            text += self.root.render(self.pretty_print)
        return text