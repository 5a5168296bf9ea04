"""XML namespaces used by WS-Management messages."""

from __future__ import annotations

from dataclasses import dataclass

from winrmclient.soap.dom import Element

NS_SOAP_ENV = "http://www.w3.org/2003/05/soap-envelope"
NS_ADDRESSING = "http://schemas.xmlsoap.org/ws/2004/08/addressing"
NS_CIMBINDING = "http://schemas.dmtf.org/wbem/wsman/1/cimbinding.xsd"
NS_ENUM = "http://schemas.xmlsoap.org/ws/2004/09/enumeration"
NS_TRANSFER = "http://schemas.xmlsoap.org/ws/2004/09/transfer"
NS_WSMAN_DMTF = "http://schemas.dmtf.org/wbem/wsman/1/wsman.xsd"
NS_WSMAN_MSFT = "http://schemas.microsoft.com/wbem/wsman/1/wsman.xsd"
NS_SCHEMA_INST = "http://www.w3.org/2001/XMLSchema-instance"
NS_WIN_SHELL = "http://schemas.microsoft.com/wbem/wsman/1/windows/shell"
NS_WSMAN_FAULT = "http://schemas.microsoft.com/wbem/wsman/1/wsmanfault"

NSP_SOAP_ENV = "env"
NSP_ADDRESSING = "a"
NSP_CIMBINDING = "b"
NSP_ENUM = "n"
NSP_TRANSFER = "x"
NSP_WSMAN_DMTF = "w"
NSP_WSMAN_MSFT = "p"
NSP_SCHEMA_INST = "xsi"
NSP_WIN_SHELL = "rsp"
NSP_WSMAN_FAULT = "f"


@dataclass(frozen=True)
class Namespace:
    """A prefix bound to a namespace URI."""

    prefix: str
    uri: str

    def set_to(self, element: Element) -> None:
        """Place ``element`` in this namespace, declaring it there if no ancestor does."""
        node = element
        while node is not None:
            if any(ns.uri == self.uri for ns in node.declared_namespaces()):
                break
            node = node.parent
        else:
            element.declare_namespace(self)
        element.namespace = self


SOAP_ENV = Namespace(NSP_SOAP_ENV, NS_SOAP_ENV)
ADDRESSING = Namespace(NSP_ADDRESSING, NS_ADDRESSING)
CIMBINDING = Namespace(NSP_CIMBINDING, NS_CIMBINDING)
ENUM = Namespace(NSP_ENUM, NS_ENUM)
TRANSFER = Namespace(NSP_TRANSFER, NS_TRANSFER)
WSMAN_DMTF = Namespace(NSP_WSMAN_DMTF, NS_WSMAN_DMTF)
WSMAN_MSFT = Namespace(NSP_WSMAN_MSFT, NS_WSMAN_MSFT)
SCHEMA_INST = Namespace(NSP_SCHEMA_INST, NS_SCHEMA_INST)
WIN_SHELL = Namespace(NSP_WIN_SHELL, NS_WIN_SHELL)
WSMAN_FAULT = Namespace(NSP_WSMAN_FAULT, NS_WSMAN_FAULT)

MOST_USED = (SOAP_ENV, ADDRESSING, WIN_SHELL, WSMAN_DMTF, WSMAN_MSFT)

_ALL = (
    SOAP_ENV,
    ADDRESSING,
    CIMBINDING,
    ENUM,
    TRANSFER,
    WSMAN_DMTF,
    WSMAN_MSFT,
    SCHEMA_INST,
    WIN_SHELL,
    WSMAN_FAULT,
)


def add_usual_namespaces(node: Element) -> None:
    """Declare the most used namespaces on ``node``."""
    for namespace in MOST_USED:
        node.declare_namespace(namespace)


def get_all_xpath_namespaces() -> dict[str, str]:
    """Return a prefix-to-URI map of every known namespace, for path queries."""
    return {namespace.prefix: namespace.uri for namespace in _ALL}