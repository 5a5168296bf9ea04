"""A SOAP envelope made of a header and a body."""

from __future__ import annotations

from typing import Optional

from winrmclient.soap.dom import Document, Element
from winrmclient.soap.header import SoapHeader
from winrmclient.soap.namespaces import SOAP_ENV, Namespace, add_usual_namespaces


class SoapMessage:
    """A SOAP envelope document with lazily created header and body."""

    def __init__(self) -> None:
        self.document = Document()
        self.envelope = Element("Envelope")
        self.document.set_root(self.envelope)
        add_usual_namespaces(self.envelope)
        SOAP_ENV.set_to(self.envelope)
        self._header: Optional[SoapHeader] = None
        self._body: Optional[Element] = None

    def new_body(self) -> Element:
        """Append a new Body element to the envelope and return it."""
        body = Element("Body")
        self.envelope.add_child(body)
        SOAP_ENV.set_to(body)
        return body

    def create_element(self, parent: Element, name: str, namespace: Namespace) -> Element:
        element = Element(name)
        parent.add_child(element)
        namespace.set_to(element)
        return element

    def create_body_element(self, name: str, namespace: Namespace) -> Element:
        """Create ``name`` inside the body, creating the body on first use."""
        if self._body is None:
            self._body = self.new_body()
        return self.create_element(self._body, name, namespace)

    def header(self) -> SoapHeader:
        if self._header is None:
            self._header = SoapHeader(self)
        return self._header

    def __str__(self) -> str:
        return str(self.document)