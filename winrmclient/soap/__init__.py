"""SOAP envelopes, headers, namespaces and a small XML model for WS-Management."""