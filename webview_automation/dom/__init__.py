"""Execution context backends."""
from webview_automation.dom.document import (
	Document,
	DomEvent,
	Element,
	InteractiveElement,
	InteractiveKind,
	classify,
)
from webview_automation.dom.soup import SoupDocument, SoupElement

__all__ = [
	'Document',
	'DomEvent',
	'Element',
	'InteractiveElement',
	'InteractiveKind',
	'classify',
	'SoupDocument',
	'SoupElement',
]
