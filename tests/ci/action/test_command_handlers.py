"""
Tests for the command catalog against a rendered document.

Tests cover:
- Navigation and page queries
- Interaction and input commands
- Wait semantics of selector-based commands
- Error kinds reported by each command
"""

import asyncio
import time

from webview_automation.action.errors import ErrorKind


class TestNavigationCommands:
	"""Tests for navigate, getUrl and getTitle."""

	async def test_navigate_sets_hash_without_router(self, dispatcher, document):
		result = await dispatcher.dispatch('navigate', {'path': '/settings'})

		assert result.success is True
		assert result.result is None
		assert await document.url() == 'app://localhost/#/settings'

	async def test_navigate_replaces_previous_hash(self, dispatcher):
		await dispatcher.dispatch('navigate', {'path': '/a'})
		await dispatcher.dispatch('navigate', {'path': '/b'})

		result = await dispatcher.dispatch('getUrl')
		assert result.result == 'app://localhost/#/b'

	async def test_navigate_uses_router(self, dispatcher, document):
		pushed = []

		async def router(path):
			pushed.append(path)

		document.router = router
		result = await dispatcher.dispatch('navigate', {'path': '/users/1'})

		assert result.success is True
		assert pushed == ['/users/1']
		assert await document.url() == 'app://localhost/'

	async def test_get_title(self, dispatcher):
		result = await dispatcher.dispatch('getTitle')
		assert result.result == 'Test App'


class TestClickCommand:
	"""Tests for click."""

	async def test_click_dispatches_click_and_scrolls(self, dispatcher, document):
		link = await document.query_selector('#link')
		clicks = []
		link.add_event_listener('click', lambda event, target: clicks.append(target))

		result = await dispatcher.dispatch('click', {'selector': '#link'})

		assert result.success is True
		assert clicks == [link]
		assert document.scrolled_to is link

	async def test_click_waits_for_late_element(self, dispatcher, document):
		asyncio.get_running_loop().call_later(0.2, document.render, '#app', '<button id="late">Late</button>')

		result = await dispatcher.dispatch('click', {'selector': '#late'})

		assert result.success is True

	async def test_click_missing_element(self, dispatcher):
		start = time.monotonic()
		result = await dispatcher.dispatch('click', {'selector': '#missing'})

		assert result.kind is ErrorKind.ELEMENT_NOT_FOUND
		assert result.error == 'Element not found: #missing'
		assert time.monotonic() - start >= 0.5

	async def test_click_submit_button_submits_form(self, dispatcher, document):
		form = await document.query_selector('#login')
		submits = []
		form.add_event_listener('submit', lambda event, target: submits.append(event))

		await dispatcher.dispatch('click', {'selector': '#submit-btn'})

		assert len(submits) == 1


class TestInputCommands:
	"""Tests for type, clear and getValue."""

	async def test_type_then_get_value_round_trip(self, dispatcher):
		text = 'Grüße, "quoted" <tag> & more'
		assert (await dispatcher.dispatch('type', {'selector': '#username', 'text': text})).success is True

		result = await dispatcher.dispatch('getValue', {'selector': '#username'})

		assert result.result == text

	async def test_type_into_textarea(self, dispatcher, events_of):
		await dispatcher.dispatch('type', {'selector': '#bio', 'text': 'new bio'})

		assert (await dispatcher.dispatch('getValue', {'selector': '#bio'})).result == 'new bio'
		assert events_of('bio') == ['focus', 'input', 'change']

	async def test_type_waits_for_late_input(self, dispatcher, document):
		asyncio.get_running_loop().call_later(0.15, document.render, '#app', '<input id="late-input">')

		result = await dispatcher.dispatch('type', {'selector': '#late-input', 'text': 'hi'})

		assert result.success is True

	async def test_type_into_non_input(self, dispatcher):
		result = await dispatcher.dispatch('type', {'selector': '#heading', 'text': 'x'})
		assert result.kind is ErrorKind.WRONG_ELEMENT_TYPE

	async def test_clear(self, dispatcher, events_of):
		result = await dispatcher.dispatch('clear', {'selector': '#bio'})

		assert result.success is True
		assert (await dispatcher.dispatch('getValue', {'selector': '#bio'})).result == ''
		assert events_of('bio')[-2:] == ['input', 'change']

	async def test_clear_is_immediate(self, dispatcher, document):
		asyncio.get_running_loop().call_later(0.05, document.render, '#app', '<input id="late-input">')

		result = await dispatcher.dispatch('clear', {'selector': '#late-input'})

		assert result.kind is ErrorKind.ELEMENT_NOT_FOUND

	async def test_get_value_of_select(self, dispatcher):
		result = await dispatcher.dispatch('getValue', {'selector': '#role'})
		assert result.result == 'user'

	async def test_get_value_of_non_input(self, dispatcher):
		result = await dispatcher.dispatch('getValue', {'selector': '#heading'})
		assert result.kind is ErrorKind.WRONG_ELEMENT_TYPE


class TestSelectAndCheckCommands:
	"""Tests for select, check and uncheck."""

	async def test_select_option(self, dispatcher, events_of):
		result = await dispatcher.dispatch('select', {'selector': '#role', 'value': 'admin'})

		assert result.success is True
		assert (await dispatcher.dispatch('getValue', {'selector': '#role'})).result == 'admin'
		assert events_of('role') == ['change']

	async def test_select_on_non_select(self, dispatcher):
		result = await dispatcher.dispatch('select', {'selector': '#username', 'value': 'admin'})
		assert result.kind is ErrorKind.WRONG_ELEMENT_TYPE

	async def test_check_twice_clicks_once(self, dispatcher, events_of):
		assert (await dispatcher.dispatch('check', {'selector': '#remember'})).success is True
		assert (await dispatcher.dispatch('check', {'selector': '#remember'})).success is True

		assert events_of('remember').count('click') == 1

	async def test_uncheck_checked_box(self, dispatcher, document, events_of):
		await dispatcher.dispatch('uncheck', {'selector': '#terms'})
		await dispatcher.dispatch('uncheck', {'selector': '#terms'})

		terms = await document.query_selector('#terms')
		assert await terms.is_checked() is False
		assert events_of('terms').count('click') == 1

	async def test_uncheck_unchecked_box_is_noop(self, dispatcher, events_of):
		result = await dispatcher.dispatch('uncheck', {'selector': '#remember'})

		assert result.success is True
		assert events_of('remember') == []

	async def test_check_on_text_input(self, dispatcher):
		result = await dispatcher.dispatch('check', {'selector': '#username'})
		assert result.kind is ErrorKind.WRONG_ELEMENT_TYPE


class TestQueryCommands:
	"""Tests for getText, getAttribute, exists, waitFor, getElements and getHtml."""

	async def test_get_text_is_trimmed(self, dispatcher):
		result = await dispatcher.dispatch('getText', {'selector': '#heading'})
		assert result.result == 'Hello World'

	async def test_get_text_waits_for_element(self, dispatcher, document):
		asyncio.get_running_loop().call_later(0.15, document.render, '#app', '<p id="toast"> Saved </p>')

		result = await dispatcher.dispatch('getText', {'selector': '#toast'})

		assert result.result == 'Saved'

	async def test_get_attribute(self, dispatcher):
		result = await dispatcher.dispatch('getAttribute', {'selector': '#link', 'attribute': 'data-test'})
		assert result.result == 'docs-link'

	async def test_get_attribute_class_list(self, dispatcher):
		result = await dispatcher.dispatch('getAttribute', {'selector': '#link', 'attribute': 'class'})
		assert result.result == 'nav primary'

	async def test_get_absent_attribute(self, dispatcher):
		result = await dispatcher.dispatch('getAttribute', {'selector': '#link', 'attribute': 'target'})
		assert result.success is True
		assert result.result is None

	async def test_get_attribute_missing_element(self, dispatcher):
		result = await dispatcher.dispatch('getAttribute', {'selector': '#missing', 'attribute': 'id'})
		assert result.kind is ErrorKind.ELEMENT_NOT_FOUND

	async def test_exists(self, dispatcher):
		assert (await dispatcher.dispatch('exists', {'selector': 'body'})).result is True
		assert (await dispatcher.dispatch('exists', {'selector': '#missing'})).result is False

	async def test_wait_for_times_out(self, dispatcher):
		"""Test that waitFor on a never-rendered selector returns false within [300, 400) ms."""
		start = time.monotonic()
		result = await dispatcher.dispatch('waitFor', {'selector': '#never-exists', 'timeout': 300})
		elapsed = time.monotonic() - start

		assert result.success is True
		assert result.result is False
		assert 0.3 <= elapsed < 0.4

	async def test_wait_for_late_element(self, dispatcher, document):
		asyncio.get_running_loop().call_later(0.1, document.render, '#app', '<div id="ready"></div>')

		result = await dispatcher.dispatch('waitFor', {'selector': '#ready', 'timeout': 1000})

		assert result.result is True

	async def test_wait_for_zero_timeout_uses_default(self, dispatcher):
		start = time.monotonic()
		result = await dispatcher.dispatch('waitFor', {'selector': '#never-exists', 'timeout': 0})

		assert result.result is False
		assert time.monotonic() - start >= 0.5

	async def test_wait_for_negative_timeout_checks_once(self, dispatcher):
		start = time.monotonic()
		result = await dispatcher.dispatch('waitFor', {'selector': '#never-exists', 'timeout': -1})

		assert result.success is True
		assert result.result is False
		assert time.monotonic() - start < 0.1

	async def test_wait_for_negative_timeout_finds_present_element(self, dispatcher):
		result = await dispatcher.dispatch('waitFor', {'selector': '#username', 'timeout': -1})

		assert result.result is True

	async def test_get_elements_in_document_order(self, dispatcher):
		result = await dispatcher.dispatch('getElements', {'selector': 'li'})
		assert result.result == {'count': 3, 'texts': ['One', 'Two', 'Three']}

	async def test_get_elements_no_match(self, dispatcher):
		result = await dispatcher.dispatch('getElements', {'selector': 'table'})
		assert result.result == {'count': 0, 'texts': []}

	async def test_get_html_of_element(self, dispatcher):
		result = await dispatcher.dispatch('getHtml', {'selector': '#items'})
		assert result.result == '<li>One</li><li> Two </li><li>Three</li>'

	async def test_get_html_defaults_to_body(self, dispatcher):
		result = await dispatcher.dispatch('getHtml', {})
		assert result.result.startswith('<div id="app">')


class TestFocusAndKeyCommands:
	"""Tests for focus, blur, pressKey and scrollTo."""

	async def test_focus_and_blur(self, dispatcher, document):
		await dispatcher.dispatch('focus', {'selector': '#username'})
		assert await document.active_element() is await document.query_selector('#username')

		await dispatcher.dispatch('blur', {'selector': '#username'})
		assert await document.active_element() is None

	async def test_press_key_on_selector(self, dispatcher, document):
		result = await dispatcher.dispatch('pressKey', {'key': 'Enter', 'selector': '#username'})

		assert result.success is True
		keys = [(event.type, event.key) for event, target in document.dispatched]
		assert keys == [('keydown', 'Enter'), ('keyup', 'Enter')]

	async def test_press_key_on_focused_element(self, dispatcher, document, events_of):
		await dispatcher.dispatch('focus', {'selector': '#bio'})
		await dispatcher.dispatch('pressKey', {'key': 'a'})

		assert events_of('bio') == ['focus', 'keydown', 'keyup']

	async def test_press_key_missing_selector_target(self, dispatcher):
		result = await dispatcher.dispatch('pressKey', {'key': 'Enter', 'selector': '#missing'})
		assert result.kind is ErrorKind.ELEMENT_NOT_FOUND

	async def test_scroll_to(self, dispatcher, document):
		result = await dispatcher.dispatch('scrollTo', {'selector': '#items'})

		assert result.success is True
		assert document.scrolled_to is await document.query_selector('#items')


class TestSubmitCommand:
	"""Tests for submit."""

	async def test_submit_form(self, dispatcher, document, events_of):
		result = await dispatcher.dispatch('submit', {'selector': '#login'})

		assert result.success is True
		assert events_of('login') == ['submit']

	async def test_submit_from_nested_element(self, dispatcher, events_of):
		result = await dispatcher.dispatch('submit', {'selector': '#inside-form'})

		assert result.success is True
		assert events_of('login') == ['submit']
		assert events_of('inside-form') == []

	async def test_submit_without_form(self, dispatcher, events_of):
		result = await dispatcher.dispatch('submit', {'selector': '#orphan'})

		assert result.kind is ErrorKind.NO_FORM_FOUND
		assert 'submit' not in events_of()


class TestUtilityCommands:
	"""Tests for wait and eval."""

	async def test_wait(self, dispatcher):
		start = time.monotonic()
		result = await dispatcher.dispatch('wait', {'ms': 50})

		assert result.success is True
		assert time.monotonic() - start >= 0.045

	async def test_wait_negative_returns_at_once(self, dispatcher):
		start = time.monotonic()
		result = await dispatcher.dispatch('wait', {'ms': -5})

		assert result.success is True
		assert time.monotonic() - start < 0.1

	async def test_eval_expression(self, dispatcher):
		result = await dispatcher.dispatch('eval', {'script': '6 * 7'})
		assert result.result == 42

	async def test_eval_statements_with_return(self, dispatcher):
		script = 'items = await document.query_selector_all("li")\nreturn len(items)'
		result = await dispatcher.dispatch('eval', {'script': script})
		assert result.result == 3

	async def test_eval_uses_global_scope(self, dispatcher, document):
		document.global_scope['answer'] = 41
		result = await dispatcher.dispatch('eval', {'script': 'answer + 1'})
		assert result.result == 42

	async def test_eval_error_propagates_message(self, dispatcher):
		result = await dispatcher.dispatch('eval', {'script': 'raise ValueError("bad script")'})

		assert result.success is False
		assert result.kind is ErrorKind.SCRIPT_ERROR
		assert result.error == 'bad script'
