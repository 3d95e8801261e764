"""
Host runtime command surface.

HostBridge is what the execution context's transport talks to when the host
lives in the same process as the listener: it receives host commands and routes
screenshot deliveries into the CaptureMailbox.
"""

import logging
from collections.abc import MutableMapping
from typing import Any

from webview_automation.bridge.capture import SCREENSHOT_COMMAND
from webview_automation.bridge.mailbox import CaptureMailbox

logger = logging.getLogger(__name__)


class HostBridge:
	"""Receives commands invoked from the execution context."""

	def __init__(self, mailbox: CaptureMailbox):
		self.mailbox = mailbox

	async def invoke(self, command: str, payload: dict[str, Any] | None = None) -> Any:
		payload = payload or {}

		if command == SCREENSHOT_COMMAND:
			data = payload.get('data')
			if not isinstance(data, str) or not data:
				raise ValueError(f'{SCREENSHOT_COMMAND} requires a "data" string')
			self.mailbox.deliver(data, payload.get('token'))
			logger.debug(f'[HostBridge] Screenshot data received ({len(data)} chars)')
			return None

		raise ValueError(f'Unknown host command: {command}')

	def install(self, global_scope: MutableMapping[str, Any], name: str) -> None:
		"""Publish this bridge in the execution context's globals, where the fallback probe looks."""
		global_scope[name] = self
		logger.debug(f'[HostBridge] Installed as global {name}')
