"""Builder for the header of a WS-Management SOAP envelope."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Iterable, Optional

from winrmclient.soap.dom import Element
from winrmclient.soap.namespaces import (
    ADDRESSING,
    SOAP_ENV,
    WSMAN_DMTF,
    WSMAN_MSFT,
    Namespace,
)

if TYPE_CHECKING:
    from winrmclient.soap.message import SoapMessage


@dataclass(frozen=True)
class HeaderOption:
    """A named option placed in the header's OptionSet."""

    key: str
    value: str


class SoapHeader:
    """Collects header fields and writes them into a message's envelope."""

    def __init__(self, message: SoapMessage) -> None:
        self.message = message
        self._to = ""
        self._reply_to = ""
        self._max_envelope_size = ""
        self._timeout = ""
        self._locale = ""
        self._id = ""
        self._action = ""
        self._shell_id = ""
        self._resource_uri = ""
        self._options: list[HeaderOption] = []

    def to(self, uri: str) -> SoapHeader:
        self._to = uri
        return self

    def reply_to(self, uri: str) -> SoapHeader:
        self._reply_to = uri
        return self

    def max_envelope_size(self, size: int) -> SoapHeader:
        self._max_envelope_size = str(size)
        return self

    def timeout(self, timeout: str) -> SoapHeader:
        self._timeout = timeout
        return self

    def message_id(self, message_id: str) -> SoapHeader:
        self._id = message_id
        return self

    def action(self, action: str) -> SoapHeader:
        self._action = action
        return self

    def locale(self, locale: str) -> SoapHeader:
        self._locale = locale
        return self

    def shell_id(self, shell_id: str) -> SoapHeader:
        self._shell_id = shell_id
        return self

    def resource_uri(self, resource_uri: str) -> SoapHeader:
        self._resource_uri = resource_uri
        return self

    def add_option(self, option: HeaderOption) -> SoapHeader:
        self._options.append(option)
        return self

    def options(self, options: Iterable[HeaderOption]) -> SoapHeader:
        self._options = list(options)
        return self

    def build(self) -> SoapMessage:
        """Write the header into the message envelope and return the message."""
        header = self._element(self.message.envelope, "Header", SOAP_ENV)

        if self._to:
            self._element(header, "To", ADDRESSING).set_content(self._to)

        if self._reply_to:
            reply_to = self._element(header, "ReplyTo", ADDRESSING)
            self._mu_element(reply_to, "Address", ADDRESSING, True).set_content(self._reply_to)

        if self._max_envelope_size:
            size = self._mu_element(header, "MaxEnvelopeSize", WSMAN_DMTF, True)
            size.set_content(self._max_envelope_size)

        if self._timeout:
            self._element(header, "OperationTimeout", WSMAN_DMTF).set_content(self._timeout)

        if self._id:
            self._element(header, "MessageID", ADDRESSING).set_content(self._id)

        if self._locale:
            locale = self._mu_element(header, "Locale", WSMAN_DMTF, False)
            locale.set_attr("xml:lang", self._locale)
            data_locale = self._mu_element(header, "DataLocale", WSMAN_MSFT, False)
            data_locale.set_attr("xml:lang", self._locale)

        if self._action:
            self._mu_element(header, "Action", ADDRESSING, True).set_content(self._action)

        if self._shell_id:
            selector_set = self._element(header, "SelectorSet", WSMAN_DMTF)
            selector = self._element(selector_set, "Selector", WSMAN_DMTF)
            selector.set_attr("Name", "ShellId")
            selector.set_content(self._shell_id)

        if self._resource_uri:
            resource = self._mu_element(header, "ResourceURI", WSMAN_DMTF, True)
            resource.set_content(self._resource_uri)

        if self._options:
            option_set = self._element(header, "OptionSet", WSMAN_DMTF)
            for option in self._options:
                entry = self._element(option_set, "Option", WSMAN_DMTF)
                entry.set_attr("Name", option.key)
                entry.set_content(option.value)

        return self.message

    @staticmethod
    def _element(parent: Optional[Element], name: str, namespace: Namespace) -> Element:
        element = Element(name)
        if parent is not None:
            parent.add_child(element)
        namespace.set_to(element)
        return element

    def _mu_element(
        self, parent: Element, name: str, namespace: Namespace, must_understand: bool
    ) -> Element:
        element = self._element(parent, name, namespace)
        element.set_attr("mustUnderstand", "true" if must_understand else "false")
        return element