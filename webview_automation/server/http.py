"""
HTTP API for external automation controllers.

Endpoints:
- GET  /automation/health      liveness probe
- POST /automation/execute     run one command: {"command": ..., "args": {...}}
- GET  /automation/screenshot  PNG of the current document

Requests are served one at a time so the execution context never runs two
commands concurrently.
"""

import asyncio
import logging
from typing import Any

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, Response
from pydantic import ValidationError

from webview_automation.action.command import ExecutionRequest, ExecutionResult
from webview_automation.action.errors import CaptureFailedError, ErrorKind
from webview_automation.bridge.capture import decode_data_url, new_correlation_token
from webview_automation.bridge.mailbox import CaptureMailbox
from webview_automation.config import AutomationConfig, get_config
from webview_automation.service import AutomationNotReadyError, AutomationService, get_automation

logger = logging.getLogger(__name__)

API_VERSION = '1.0.0'


def _error_response(message: str, status_code: int, kind: ErrorKind | None = None) -> JSONResponse:
	content: dict[str, Any] = {'success': False, 'error': message}
	if kind is not None:
		content['kind'] = kind.value
	return JSONResponse(content, status_code=status_code)


def _result_response(result: ExecutionResult, status_code: int = 200) -> JSONResponse:
	try:
		return JSONResponse(jsonable_encoder(result.to_wire()), status_code=status_code)
	except Exception as e:
		# RecursionError for self-referencing values, ValueError for NaN
		logger.warning(f'[Automation] Result is not JSON serializable: {type(e).__name__}: {e}')
		failure = ExecutionResult.fail(
			ErrorKind.EXECUTION_ERROR,
			f'Result is not JSON serializable: {str(e) or type(e).__name__}',
		)
		return JSONResponse(failure.to_wire(), status_code=status_code)


def create_app(
	mailbox: CaptureMailbox,
	config: AutomationConfig | None = None,
	service: AutomationService | None = None,
	lifespan: Any = None,
) -> FastAPI:
	"""
	Create the automation API.

	Args:
		mailbox: Host-side mailbox that screenshot deliveries arrive in
		config: Settings, the global config when omitted
		service: Service to drive; the published service is looked up per request when omitted
		lifespan: Startup/shutdown context manager passed to FastAPI

	Returns:
		FastAPI application
	"""
	config = config or get_config()
	app = FastAPI(title='Webview Automation API', version=API_VERSION, lifespan=lifespan)
	app.add_middleware(
		CORSMiddleware,
		allow_origins=['*'],
		allow_methods=['GET', 'POST', 'OPTIONS'],
		allow_headers=['Content-Type'],
	)
	lock = asyncio.Lock()

	def _service() -> AutomationService:
		return service if service is not None else get_automation()

	@app.get('/automation/health')
	async def health():
		return {'status': 'ok', 'port': config.port, 'version': API_VERSION}

	@app.post('/automation/execute')
	async def execute(request: Request):
		try:
			payload = await request.json()
		except ValueError as e:
			return _error_response(f'Invalid JSON: {e}', 400)

		try:
			execution = ExecutionRequest.model_validate(payload)
		except ValidationError as e:
			if isinstance(payload, dict) and not payload.get('command'):
				return _error_response("Missing 'command' field", 400)
			return _error_response(f'Invalid request: {e.errors()[0]["msg"]}', 400)

		try:
			automation = _service()
		except AutomationNotReadyError as e:
			return _error_response(str(e), 503)

		logger.info(f'[Automation] POST /automation/execute {execution.command}')
		async with lock:
			result = await automation.execute(execution.command, execution.args)
		return _result_response(result)

	@app.get('/automation/screenshot')
	async def screenshot():
		try:
			automation = _service()
		except AutomationNotReadyError as e:
			return _error_response(str(e), 503)

		logger.info('[Automation] GET /automation/screenshot')
		async with lock:
			try:
				png = await _capture_png(automation, mailbox, config.screenshot_timeout_ms)
			except CaptureFailedError as e:
				logger.warning(f'[Automation] Screenshot not available: {e.message}')
				return _error_response(e.message, 500, e.kind)

		return Response(content=png, media_type='image/png')

	return app


async def _capture_png(automation: AutomationService, mailbox: CaptureMailbox, timeout_ms: float) -> bytes:
	"""
	Trigger a capture and wait for its delivery to reach the mailbox.

	The capture runs as its own task and reports back through the host transport,
	so the delivery may arrive after capture_and_send() returns, before it, or not
	at all. Whichever happens first decides the response, and the other task is
	cancelled before returning.
	"""
	token = new_correlation_token()
	capture_task = asyncio.create_task(automation.capture_and_send(token))
	delivery_task = asyncio.create_task(mailbox.wait_for(token, timeout_ms))

	try:
		done, _ = await asyncio.wait({capture_task, delivery_task}, return_when=asyncio.FIRST_COMPLETED)

		if delivery_task not in done:
			result = capture_task.result()
			if not result.success:
				raise CaptureFailedError(result.error)

		# Raises CaptureFailedError on timeout
		data_url = await delivery_task
	finally:
		# Nothing may keep running in the execution context once the lock is released
		for task in (capture_task, delivery_task):
			if not task.done():
				task.cancel()
		await asyncio.wait({capture_task, delivery_task})

	return decode_data_url(data_url)
