"""Command dispatch against a document."""
from webview_automation.action.dispatcher.dispatcher import (
	CommandDispatcher,
	CommandRegistry,
	build_default_registry,
)
from webview_automation.action.dispatcher.events import EventSimulator
from webview_automation.action.dispatcher.resolver import POLL_INTERVAL_MS, ElementResolver
from webview_automation.action.dispatcher.utils import CommandContext

__all__ = [
	'CommandContext',
	'CommandDispatcher',
	'CommandRegistry',
	'ElementResolver',
	'EventSimulator',
	'POLL_INTERVAL_MS',
	'build_default_registry',
]
