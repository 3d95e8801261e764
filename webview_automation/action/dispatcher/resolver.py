"""
Element resolution.

Every selector-based command finds its target through ElementResolver, either
by polling until the element is rendered or by a single immediate lookup.
"""

import asyncio
import logging
import time

from webview_automation.action.errors import ElementNotFoundError
from webview_automation.dom.document import Document, Element

logger = logging.getLogger(__name__)

POLL_INTERVAL_MS = 100
DEFAULT_TIMEOUT_MS = 5000


class ElementResolver:
	"""Looks up elements in a document, with or without waiting for them to appear."""

	def __init__(self, document: Document):
		self.document = document

	async def resolve(self, selector: str, timeout_ms: float = DEFAULT_TIMEOUT_MS) -> Element | None:
		"""
		Poll for selector until it matches or timeout_ms of wall-clock time has elapsed.

		The document is checked once per POLL_INTERVAL_MS. Elapsed time is measured
		on the monotonic clock, so the call returns within
		timeout_ms + POLL_INTERVAL_MS however slow each lookup is.

		Returns:
			The first matching element, or None on timeout
		"""
		start = time.monotonic()
		timeout = max(timeout_ms, 0) / 1000
		interval = POLL_INTERVAL_MS / 1000

		while True:
			element = await self.document.query_selector(selector)
			if element is not None:
				return element

			remaining = timeout - (time.monotonic() - start)
			if remaining <= 0:
				logger.debug(f'[ElementResolver] Timed out after {timeout_ms}ms waiting for {selector}')
				return None
			await asyncio.sleep(min(interval, remaining))

	async def wait_for(self, selector: str, timeout_ms: float = DEFAULT_TIMEOUT_MS) -> Element:
		"""Like resolve(), but raise ElementNotFoundError on timeout."""
		element = await self.resolve(selector, timeout_ms)
		if element is None:
			raise ElementNotFoundError(selector)
		return element

	async def resolve_or_fail(self, selector: str) -> Element:
		"""Single immediate lookup with no waiting."""
		element = await self.document.query_selector(selector)
		if element is None:
			raise ElementNotFoundError(selector)
		return element
