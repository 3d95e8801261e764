"""
Automation Service

The single object external controllers talk to. It combines the command
dispatcher, the resolved host transport and the capture channel behind
execute() and capture_and_send(), and is published process-wide only once it is
fully initialized.
"""

import asyncio
import logging
from collections.abc import Mapping
from enum import Enum
from typing import Any

from webview_automation.action.command import ExecutionResult
from webview_automation.action.dispatcher import CommandContext, CommandDispatcher
from webview_automation.action.errors import AutomationError
from webview_automation.bridge.capability import (
	CapabilityBridge,
	CapabilityHandle,
	TransportProbe,
	TransportSource,
	default_probes,
)
from webview_automation.bridge.capture import CaptureChannel
from webview_automation.config import AutomationConfig, get_config
from webview_automation.dom.document import Document

logger = logging.getLogger(__name__)

# Name under which the ready service is published in the document's globals
AUTOMATION_GLOBAL = '__AUTOMATION__'


class ServiceState(str, Enum):
	UNINITIALIZED = 'Uninitialized'
	INITIALIZING = 'Initializing'
	READY = 'Ready'


class AutomationNotReadyError(RuntimeError):
	"""Raised when the service is requested before init_automation() completed."""


class AutomationService:
	"""Executes automation commands and screenshot requests against one document."""

	def __init__(self, document: Document, dispatcher: CommandDispatcher, handle: CapabilityHandle):
		self.document = document
		self.dispatcher = dispatcher
		self._capture = CaptureChannel(document, handle)
		# Result slot for hosts that can only inject scripts and read globals back;
		# execute() returns its result directly and does not write it.
		self.last_result: ExecutionResult | None = None

	@property
	def transport_source(self) -> TransportSource:
		return self._capture.handle.source

	async def execute(self, command: str, args: Mapping[str, Any] | None = None) -> ExecutionResult:
		"""Execute an automation command."""
		logger.debug(f'[Automation] Executing: {command} {dict(args or {})}')
		try:
			result = await self.dispatcher.dispatch(command, args)
		finally:
			await self.document.release()
		if result.success:
			logger.debug(f'[Automation] Result: {result.result!r}')
		else:
			logger.warning(f'[Automation] {command} failed: {result.kind.value}: {result.error}')
		return result

	async def screenshot(self) -> ExecutionResult:
		"""Capture the document and return it as a PNG data URL, without involving the host."""
		try:
			return ExecutionResult.ok(await self._capture.capture())
		except AutomationError as e:
			logger.error(f'[Automation] Screenshot capture failed: {e.message}')
			return ExecutionResult.from_error(e)

	async def capture_and_send(self, correlation_token: str | None = None) -> ExecutionResult:
		"""
		Capture the document and send it to the host.

		Args:
			correlation_token: Token the host side is waiting on, generated when omitted

		Returns:
			ExecutionResult with {'token', 'state'} on success, CaptureFailed otherwise
		"""
		try:
			delivery = await self._capture.capture_and_send(correlation_token)
		except AutomationError as e:
			return ExecutionResult.from_error(e)

		logger.info('[Automation] Screenshot sent to host')
		return ExecutionResult.ok({'token': delivery.correlation_token, 'state': delivery.state.value})


# Process-wide service state
_state = ServiceState.UNINITIALIZED
_service: AutomationService | None = None


def automation_state() -> ServiceState:
	return _state


def get_automation() -> AutomationService:
	"""
	Get the published automation service.

	Raises:
		AutomationNotReadyError: If init_automation() has not completed
	"""
	if _state is not ServiceState.READY or _service is None:
		raise AutomationNotReadyError('Automation not initialized. Call init_automation() first.')
	return _service


async def init_automation(
	document: Document,
	config: AutomationConfig | None = None,
	probes: tuple[TransportProbe, ...] | None = None,
) -> AutomationService:
	"""
	Initialize the automation service.

	Call this once when the application starts. The host transport is resolved
	before the service is published, so no caller sees a half-built service. A
	missing transport only degrades screenshots; initialization still succeeds.

	Args:
		document: Execution context the commands run against
		config: Settings, the global config when omitted
		probes: Transport probe chain, built from config when omitted

	Returns:
		The ready AutomationService
	"""
	global _state, _service

	if _state is ServiceState.READY and _service is not None:
		logger.debug('[Automation] Already initialized')
		return _service
	if _state is ServiceState.INITIALIZING:
		raise AutomationNotReadyError('Automation is already initializing')

	config = config or get_config()
	logger.info('[Automation] Initializing...')
	_state = ServiceState.INITIALIZING

	try:
		if probes is None:
			probes = default_probes(config.transport_v2_module, config.transport_v1_module, config.transport_global)
		handle = CapabilityBridge(probes, document.global_scope).resolve()

		context = CommandContext.for_document(document, default_timeout_ms=config.default_timeout_ms)
		service = AutomationService(document, CommandDispatcher(context), handle)
	except BaseException:
		_state = ServiceState.UNINITIALIZED
		raise

	document.global_scope[AUTOMATION_GLOBAL] = service
	_service = service
	_state = ServiceState.READY

	logger.info(f'[Automation] Ready. HTTP API available at http://{config.host}:{config.port}')
	return service


def init_automation_background(document: Document, config: AutomationConfig | None = None) -> asyncio.Task:
	"""Schedule init_automation() for boot code that cannot await; failures are logged."""

	def _log_failure(task: asyncio.Task) -> None:
		if not task.cancelled() and task.exception() is not None:
			logger.error(f'[Automation] Failed to initialize: {task.exception()}')

	task = asyncio.get_running_loop().create_task(init_automation(document, config))
	task.add_done_callback(_log_failure)
	return task

