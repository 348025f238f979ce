"""Serialization layer package for canonical-record XML rendering."""

from iso_bridge.domain import UnsupportedMessageTypeError

from .interfaces import MESSAGE_NAMESPACES, XSI_NAMESPACE, SerializerPort
from .xml_builder import XML_DECLARATION, Iso20022XmlSerializer, SerializerConfig

__all__ = [
	"Iso20022XmlSerializer",
	"MESSAGE_NAMESPACES",
	"SerializerConfig",
	"SerializerPort",
	"UnsupportedMessageTypeError",
	"XML_DECLARATION",
	"XSI_NAMESPACE",
]
