"""
Utility functions and shared state for command handlers.
"""

import asyncio
import logging
from dataclasses import dataclass

from webview_automation.action.dispatcher.events import EventSimulator
from webview_automation.action.dispatcher.resolver import DEFAULT_TIMEOUT_MS, ElementResolver
from webview_automation.dom.document import Document

logger = logging.getLogger(__name__)

# Settle delays in milliseconds, giving the framework time to re-render
NAVIGATE_SETTLE_MS = 100
CLICK_SCROLL_SETTLE_MS = 50
CLICK_SETTLE_MS = 100
SCROLL_SETTLE_MS = 300
DEFAULT_WAIT_MS = 1000


@dataclass
class CommandContext:
	"""Collaborators a handler works with while executing one command."""

	document: Document
	resolver: ElementResolver
	simulator: EventSimulator
	default_timeout_ms: float = DEFAULT_TIMEOUT_MS

	@classmethod
	def for_document(cls, document: Document, default_timeout_ms: float = DEFAULT_TIMEOUT_MS) -> 'CommandContext':
		return cls(
			document=document,
			resolver=ElementResolver(document),
			simulator=EventSimulator(document),
			default_timeout_ms=default_timeout_ms,
		)


async def settle(ms: float) -> None:
	"""Suspend for a fixed delay."""
	await asyncio.sleep(ms / 1000)
