"""
Screenshot capture and delivery.

A screenshot is produced in two phases. The document is rasterized and encoded
as a PNG data URL inside the execution context, then the payload is handed to
the host transport under SCREENSHOT_COMMAND together with a correlation token.
The host answers the triggering request when a delivery carrying that token
reaches its mailbox, so nothing here waits on the requester.
"""

import base64
import binascii
import logging
import uuid
from dataclasses import dataclass, field
from enum import Enum

from webview_automation.action.errors import AutomationError, CaptureFailedError
from webview_automation.bridge.capability import CapabilityHandle
from webview_automation.dom.document import Document

logger = logging.getLogger(__name__)

SCREENSHOT_COMMAND = 'automation_screenshot_data'
PNG_DATA_URL_PREFIX = 'data:image/png;base64,'
PNG_SIGNATURE = b'\x89PNG\r\n\x1a\n'


class DeliveryState(str, Enum):
	PENDING = 'Pending'
	DELIVERED = 'Delivered'
	FAILED = 'Failed'


@dataclass
class CaptureDelivery:
	"""State of one capture, from the start of rasterization to the host hand-off."""

	correlation_token: str
	payload: str | None = None
	state: DeliveryState = DeliveryState.PENDING
	error: str | None = field(default=None)

	def mark_delivered(self, payload: str) -> None:
		self._leave_pending()
		self.payload = payload
		self.state = DeliveryState.DELIVERED

	def mark_failed(self, error: str) -> None:
		self._leave_pending()
		self.error = error
		self.state = DeliveryState.FAILED

	def _leave_pending(self) -> None:
		if self.state is not DeliveryState.PENDING:
			raise RuntimeError(f'Capture {self.correlation_token} already {self.state.value}')


def new_correlation_token() -> str:
	return uuid.uuid4().hex


def encode_data_url(png: bytes) -> str:
	"""Encode PNG bytes as a data URL, refusing anything that is not a complete PNG stream."""
	if not png or not png.startswith(PNG_SIGNATURE):
		raise CaptureFailedError('Capture did not produce a PNG image')
	return PNG_DATA_URL_PREFIX + base64.b64encode(png).decode('ascii')


def decode_data_url(data_url: str) -> bytes:
	"""Decode a PNG data URL back into image bytes."""
	if not isinstance(data_url, str) or not data_url.startswith(PNG_DATA_URL_PREFIX):
		raise CaptureFailedError('Screenshot payload is not a PNG data URL')
	try:
		png = base64.b64decode(data_url[len(PNG_DATA_URL_PREFIX):], validate=True)
	except (binascii.Error, ValueError) as e:
		raise CaptureFailedError(f'Base64 decode failed: {e}') from e
	if not png.startswith(PNG_SIGNATURE):
		raise CaptureFailedError('Screenshot payload is not a PNG image')
	return png


class CaptureChannel:
	"""Captures the document and delivers the payload through the host transport."""

	def __init__(self, document: Document, handle: CapabilityHandle):
		self.document = document
		self.handle = handle

	async def capture(self) -> str:
		"""Phase 1: rasterize the document and return it as a PNG data URL."""
		try:
			png = await self.document.capture()
		except CaptureFailedError:
			raise
		except Exception as e:
			raise CaptureFailedError(f'Screenshot capture failed: {e}') from e
		return encode_data_url(png)

	async def capture_and_send(self, correlation_token: str | None = None) -> CaptureDelivery:
		"""
		Capture the document and hand it to the host, all or nothing.

		Args:
			correlation_token: Token the host is waiting on; generated when omitted

		Returns:
			The delivered CaptureDelivery

		Raises:
			CaptureFailedError: If either phase fails; nothing is delivered in that case
		"""
		delivery = CaptureDelivery(correlation_token or new_correlation_token())

		try:
			payload = await self.capture()
			await self.handle.transport(
				SCREENSHOT_COMMAND,
				{'data': payload, 'token': delivery.correlation_token},
			)
		except AutomationError as e:
			delivery.mark_failed(e.message)
			logger.error(f'[Automation] Screenshot capture failed: {e.message}')
			if isinstance(e, CaptureFailedError):
				raise
			raise CaptureFailedError(f'Screenshot capture failed: {e.message}') from e
		except Exception as e:
			delivery.mark_failed(str(e))
			logger.error(f'[Automation] Screenshot capture failed: {type(e).__name__}: {e}', exc_info=True)
			raise CaptureFailedError(f'Screenshot capture failed: {e}') from e

		delivery.mark_delivered(payload)
		logger.debug(f'[Automation] Screenshot {delivery.correlation_token} sent to host')
		return delivery
