"""
Pytest configuration and shared fixtures for all tests.

Every test runs against an in-memory SoupDocument, so no browser is required.
"""

import pytest

from webview_automation import service as service_module
from webview_automation.action.dispatcher import CommandContext, CommandDispatcher
from webview_automation.bridge.capture import PNG_SIGNATURE
from webview_automation.config import reload_config
from webview_automation.dom import SoupDocument

FAKE_PNG = PNG_SIGNATURE + b'\x00\x00\x00\rIHDR fake image body'

TEST_PAGE = (
	'<html><head><title>Test App</title></head><body>'
	'<div id="app">'
	'<h1 id="heading">  Hello World  </h1>'
	'<form id="login">'
	'<input type="text" id="username" name="username">'
	'<textarea id="bio">old bio</textarea>'
	'<select id="role"><option value="user">User</option><option value="admin">Admin</option></select>'
	'<input type="checkbox" id="remember">'
	'<input type="checkbox" id="terms" checked>'
	'<div id="inside-form">Inside</div>'
	'<button id="submit-btn" type="submit">Go</button>'
	'</form>'
	'<div id="orphan">Orphan</div>'
	'<a id="link" href="/docs" data-test="docs-link" class="nav primary">Docs</a>'
	'<ul id="items"><li>One</li><li> Two </li><li>Three</li></ul>'
	'</div>'
	'</body></html>'
)


def fake_rasterizer(document):
	return FAKE_PNG


@pytest.fixture(autouse=True)
def isolated_automation(monkeypatch):
	"""Fresh process-wide service state and settings for every test."""
	monkeypatch.setenv('AUTOMATION_TRANSPORT_V2_MODULE', 'tests_missing_host_core')
	monkeypatch.setenv('AUTOMATION_TRANSPORT_V1_MODULE', 'tests_missing_host_tauri')
	monkeypatch.setenv('AUTOMATION_TRANSPORT_GLOBAL', '__WEBVIEW_HOST__')
	monkeypatch.setenv('AUTOMATION_DEFAULT_TIMEOUT_MS', '500')
	monkeypatch.setenv('AUTOMATION_SCREENSHOT_TIMEOUT_MS', '300')
	monkeypatch.setattr(service_module, '_state', service_module.ServiceState.UNINITIALIZED)
	monkeypatch.setattr(service_module, '_service', None)
	reload_config()
	yield
	reload_config()


@pytest.fixture
def config():
	return reload_config()


@pytest.fixture
def fake_png():
	return FAKE_PNG


@pytest.fixture
def document():
	"""A rendered test page with a working rasterizer."""
	return SoupDocument(TEST_PAGE, url='app://localhost/', rasterizer=fake_rasterizer)


@pytest.fixture
def context(document):
	return CommandContext.for_document(document, default_timeout_ms=500)


@pytest.fixture
def dispatcher(context):
	return CommandDispatcher(context)


@pytest.fixture
def events_of(document):
	"""Return the types of dispatched events, optionally only those targeting one element id."""

	def _events_of(element_id: str | None = None) -> list[str]:
		return [
			event.type
			for event, target in document.dispatched
			if element_id is None or target.tag.get('id') == element_id
		]

	return _events_of
