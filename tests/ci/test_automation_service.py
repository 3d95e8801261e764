"""
Tests for the AutomationService facade and its lifecycle.
"""

import asyncio

import pytest

from webview_automation import (
	ServiceState,
	automation_state,
	get_automation,
	init_automation,
	init_automation_background,
)
from webview_automation import service as service_module
from webview_automation.action.errors import ErrorKind
from webview_automation.bridge import CaptureMailbox, HostBridge, TransportSource, decode_data_url
from webview_automation.dom import SoupDocument
from webview_automation.service import AUTOMATION_GLOBAL, AutomationNotReadyError

HOST_GLOBAL = '__WEBVIEW_HOST__'


@pytest.fixture
def mailbox():
	return CaptureMailbox()


@pytest.fixture
def hosted_document(document, mailbox):
	"""Test page whose globals carry an in-process host runtime."""
	HostBridge(mailbox).install(document.global_scope, HOST_GLOBAL)
	return document


class TestLifecycle:
	"""Tests for initialization and publication."""

	def test_not_initialized(self):
		assert automation_state() is ServiceState.UNINITIALIZED
		with pytest.raises(AutomationNotReadyError, match='Call init_automation\\(\\) first'):
			get_automation()

	async def test_init_publishes_ready_service(self, hosted_document, config):
		service = await init_automation(hosted_document, config)

		assert automation_state() is ServiceState.READY
		assert get_automation() is service
		assert hosted_document.global_scope[AUTOMATION_GLOBAL] is service
		assert service.transport_source is TransportSource.GLOBAL_FALLBACK
		assert service.last_result is None

	async def test_second_init_returns_same_service(self, hosted_document, config):
		first = await init_automation(hosted_document, config)
		second = await init_automation(hosted_document, config)

		assert second is first

	async def test_ready_is_terminal(self, hosted_document, config):
		"""Test that a ready service stays published and the module offers no teardown."""
		first = await init_automation(hosted_document, config)
		second = await init_automation(SoupDocument('<p>other</p>'), config)

		assert second is first
		assert automation_state() is ServiceState.READY
		assert not hasattr(service_module, 'reset_automation')

	async def test_init_without_transport_still_ready(self, document, config):
		"""Test that a missing host transport only degrades screenshots."""
		service = await init_automation(document, config)

		assert automation_state() is ServiceState.READY
		assert service.transport_source is TransportSource.UNAVAILABLE

		result = await service.execute('exists', {'selector': 'body'})
		assert result.success is True
		assert result.result is True

		capture = await service.capture_and_send()
		assert capture.success is False
		assert capture.kind is ErrorKind.CAPTURE_FAILED

	async def test_failed_init_resets_state(self, config):
		class BrokenDocument(SoupDocument):
			@property
			def global_scope(self):
				raise RuntimeError('no globals')

		with pytest.raises(RuntimeError):
			await init_automation(BrokenDocument('<p>x</p>'), config)

		assert automation_state() is ServiceState.UNINITIALIZED

	async def test_background_init(self, hosted_document, config):
		task = init_automation_background(hosted_document, config)
		service = await task

		assert get_automation() is service
		assert automation_state() is ServiceState.READY

	async def test_background_init_failure_is_logged(self, config, caplog):
		class BrokenDocument(SoupDocument):
			@property
			def global_scope(self):
				raise RuntimeError('no globals')

		task = init_automation_background(BrokenDocument('<p>x</p>'), config)
		with pytest.raises(RuntimeError):
			await task
		await asyncio.sleep(0)

		assert 'Failed to initialize' in caplog.text


class TestServiceOperations:
	"""Tests for execute, screenshot and capture_and_send."""

	async def test_execute_failure_is_a_result(self, hosted_document, config):
		service = await init_automation(hosted_document, config)

		result = await service.execute('click', {'selector': '#nope'})

		assert result.success is False
		assert result.kind is ErrorKind.ELEMENT_NOT_FOUND
		assert result.error == 'Element not found: #nope'

	async def test_screenshot_returns_data_url(self, hosted_document, config, fake_png):
		service = await init_automation(hosted_document, config)

		result = await service.screenshot()

		assert result.success is True
		assert decode_data_url(result.result) == fake_png

	async def test_capture_and_send_delivers_to_mailbox(self, hosted_document, mailbox, config, fake_png):
		service = await init_automation(hosted_document, config)

		result = await service.capture_and_send('req-1')

		assert result.success is True
		assert result.result == {'token': 'req-1', 'state': 'Delivered'}
		assert decode_data_url(await mailbox.wait_for('req-1', 100)) == fake_png

	async def test_execute_releases_document_after_each_command(self, config):
		releases = []

		class TrackingDocument(SoupDocument):
			async def release(self):
				releases.append(True)

		service = await init_automation(TrackingDocument('<p id="x">x</p>'), config)

		assert (await service.execute('exists', {'selector': '#x'})).result is True
		assert (await service.execute('getText', {})).kind is ErrorKind.MISSING_ARGUMENT

		assert len(releases) == 2
