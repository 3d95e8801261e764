"""
Host-side screenshot mailbox.

Deliveries arrive out of band, whenever the execution context finishes a
capture. The mailbox keeps the most recent one in a single slot and lets the
request that triggered the capture wait for the delivery carrying its token.
"""

import asyncio
import logging
import time

from webview_automation.action.errors import CaptureFailedError

logger = logging.getLogger(__name__)


class CaptureMailbox:
	"""Single-slot store for the last screenshot payload delivered by the execution context."""

	def __init__(self):
		self._slot: tuple[str | None, str] | None = None
		self._changed = asyncio.Event()

	def deliver(self, data: str, token: str | None = None) -> None:
		"""Store a delivery, replacing any previous one."""
		if self._slot is not None:
			logger.debug(f'[CaptureMailbox] Replacing undelivered payload {self._slot[0]}')
		self._slot = (token, data)
		self._changed.set()

	def take(self) -> str | None:
		"""Remove and return the stored payload, if any."""
		slot, self._slot = self._slot, None
		return slot[1] if slot is not None else None

	async def wait_for(self, token: str | None, timeout_ms: float) -> str:
		"""
		Wait for the delivery matching token.

		A delivery without a token is taken to answer whoever is waiting. Deliveries
		carrying another token are stale answers to earlier requests and are dropped.

		Raises:
			CaptureFailedError: If nothing matching arrives within timeout_ms
		"""
		deadline = time.monotonic() + timeout_ms / 1000

		while True:
			if self._slot is not None:
				slot_token, data = self._slot
				self._slot = None
				if slot_token is None or token is None or slot_token == token:
					return data
				logger.debug(f'[CaptureMailbox] Dropping stale payload {slot_token} while waiting for {token}')

			self._changed.clear()
			remaining = deadline - time.monotonic()
			if remaining <= 0:
				raise CaptureFailedError(f'Screenshot not delivered within {timeout_ms:g}ms')
			try:
				await asyncio.wait_for(self._changed.wait(), remaining)
			except asyncio.TimeoutError:
				raise CaptureFailedError(f'Screenshot not delivered within {timeout_ms:g}ms') from None
