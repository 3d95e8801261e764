"""
In-process execution context built on BeautifulSoup.

SoupDocument parses an HTML string and keeps the live state a browser would
hold next to the markup: form control values, checked flags, focus, event
listeners and the current URL. Selectors are matched with soupsieve, so the
same CSS selectors work here and in a real webview.
"""

import inspect
import logging
import textwrap
from collections import defaultdict
from collections.abc import Awaitable, Callable, MutableMapping
from typing import Any
from urllib.parse import urldefrag

import soupsieve
from bs4 import BeautifulSoup, Tag

from webview_automation.action.errors import CaptureFailedError
from webview_automation.dom.document import Document, DomEvent, Element

logger = logging.getLogger(__name__)

EventListener = Callable[[DomEvent, 'SoupElement'], Any]
Rasterizer = Callable[['SoupDocument'], bytes | Awaitable[bytes]]
Router = Callable[[str], Any]

_EVAL_FUNCTION = '__automation_eval__'
_SUBMIT_BUTTON_TYPES = ('submit', None)
_CHECKABLE_TYPES = ('checkbox', 'radio')


async def _maybe_await(value: Any) -> Any:
	if inspect.isawaitable(value):
		return await value
	return value


class SoupElement(Element):
	"""Element backed by a bs4 Tag plus the property state a browser keeps for it."""

	def __init__(self, document: 'SoupDocument', tag: Tag):
		self.document = document
		self.tag = tag
		self._listeners: dict[str, list[EventListener]] = defaultdict(list)
		self._value: str | None = None
		self._checked: bool | None = None

	def __repr__(self) -> str:
		return f'<SoupElement {self.tag.name} id={self.tag.get("id")!r}>'

	def add_event_listener(self, event_type: str, listener: EventListener) -> None:
		self._listeners[event_type].append(listener)

	async def tag_name(self) -> str:
		return self.tag.name.lower()

	async def input_type(self) -> str | None:
		if self.tag.name != 'input':
			return None
		return (self.tag.get('type') or 'text').lower()

	async def get_attribute(self, name: str) -> str | None:
		value = self.tag.get(name)
		if isinstance(value, list):
			# bs4 splits multi-valued attributes such as class
			return ' '.join(value)
		return value

	async def text_content(self) -> str:
		return self.tag.get_text()

	async def inner_html(self) -> str:
		return self.tag.decode_contents()

	async def get_value(self) -> str:
		if self._value is None:
			self._value = self._initial_value()
		return self._value

	async def set_value(self, value: str) -> None:
		if self.tag.name == 'select' and value not in self._option_values():
			value = ''
		self._value = value

	async def is_checked(self) -> bool:
		if self._checked is None:
			self._checked = self.tag.has_attr('checked')
		return self._checked

	async def click(self) -> None:
		input_type = await self.input_type()
		if input_type in _CHECKABLE_TYPES:
			checked = await self.is_checked()
			self._checked = True if input_type == 'radio' else not checked
			await self.dispatch_event(DomEvent('click', cancelable=True))
			await self.dispatch_event(DomEvent('input'))
			await self.dispatch_event(DomEvent('change'))
			return

		await self.dispatch_event(DomEvent('click', cancelable=True))
		if self._is_submit_button():
			form = await self.closest('form')
			if form is not None:
				await form.dispatch_event(DomEvent('submit', cancelable=True))

	async def focus(self) -> None:
		self.document._active = self
		await self.dispatch_event(DomEvent('focus', bubbles=False))

	async def blur(self) -> None:
		if self.document._active is self:
			self.document._active = None
		await self.dispatch_event(DomEvent('blur', bubbles=False))

	async def scroll_into_view(self, smooth: bool = False) -> None:
		self.document.scrolled_to = self

	async def dispatch_event(self, event: DomEvent) -> None:
		self.document.dispatched.append((event, self))
		for current in self._propagation_path(event):
			for listener in list(current._listeners.get(event.type, ())):
				await _maybe_await(listener(event, self))
		if event.bubbles:
			for listener in list(self.document._listeners.get(event.type, ())):
				await _maybe_await(listener(event, self))

	async def closest(self, selector: str) -> 'SoupElement | None':
		node: Any = self.tag
		while isinstance(node, Tag) and not isinstance(node, BeautifulSoup):
			if soupsieve.match(selector, node):
				return self.document.wrap(node)
			node = node.parent
		return None

	def _propagation_path(self, event: DomEvent) -> list['SoupElement']:
		path = [self]
		if not event.bubbles:
			return path
		for parent in self.tag.parents:
			if isinstance(parent, BeautifulSoup):
				break
			path.append(self.document.wrap(parent))
		return path

	def _is_submit_button(self) -> bool:
		if self.tag.name == 'button':
			return self.tag.get('type') in _SUBMIT_BUTTON_TYPES
		return self.tag.name == 'input' and self.tag.get('type') == 'submit'

	def _options(self) -> list[Tag]:
		return self.tag.find_all('option')

	def _option_values(self) -> list[str]:
		return [option.get('value', option.get_text().strip()) for option in self._options()]

	def _initial_value(self) -> str:
		if self.tag.name == 'textarea':
			return self.tag.get_text()
		if self.tag.name == 'select':
			options = self._options()
			selected = next((option for option in options if option.has_attr('selected')), None)
			if selected is None and options:
				selected = options[0]
			if selected is None:
				return ''
			return selected.get('value', selected.get_text().strip())
		if self.tag.name == 'input' and (self.tag.get('type') or '').lower() in _CHECKABLE_TYPES:
			return self.tag.get('value', 'on')
		return self.tag.get('value', '')


class SoupDocument(Document):
	"""
	A document held in memory.

	Args:
		html: Page markup. Fragments without a <body> are wrapped in one.
		url: Initial location of the document.
		rasterizer: Callable producing PNG bytes for capture().
		router: Application router; navigate() pushes through it when set.
		global_scope: Initial globals for eval scripts and host runtimes.
	"""

	def __init__(
		self,
		html: str,
		url: str = 'app://localhost/',
		rasterizer: Rasterizer | None = None,
		router: Router | None = None,
		global_scope: MutableMapping[str, Any] | None = None,
	):
		if '<body' not in html.lower():
			html = f'<html><head></head><body>{html}</body></html>'
		self.soup = BeautifulSoup(html, 'html.parser')
		self.rasterizer = rasterizer
		self.router = router
		self.dispatched: list[tuple[DomEvent, SoupElement]] = []
		self.scrolled_to: SoupElement | None = None
		self._url = url
		self._active: SoupElement | None = None
		self._elements: dict[int, SoupElement] = {}
		self._listeners: dict[str, list[EventListener]] = defaultdict(list)
		self._global_scope: MutableMapping[str, Any] = global_scope if global_scope is not None else {}
		self._global_scope.setdefault('document', self)

	@property
	def global_scope(self) -> MutableMapping[str, Any]:
		return self._global_scope

	def wrap(self, tag: Tag) -> SoupElement:
		"""Return the single SoupElement that represents tag."""
		element = self._elements.get(id(tag))
		if element is None or element.tag is not tag:
			element = SoupElement(self, tag)
			self._elements[id(tag)] = element
		return element

	def add_event_listener(self, event_type: str, listener: EventListener) -> None:
		"""Listen at document level for bubbling events."""
		self._listeners[event_type].append(listener)

	def render(self, parent_selector: str, html: str) -> None:
		"""Append markup under the first element matching parent_selector, like a late framework render."""
		parent = self.soup.select_one(parent_selector)
		if parent is None:
			raise ValueError(f'No element matches {parent_selector}')
		fragment = BeautifulSoup(html, 'html.parser')
		for node in list(fragment.contents):
			parent.append(node.extract())
		self.prune()

	def prune(self) -> int:
		"""Forget wrapped elements whose tags have left the document. Returns how many were dropped."""
		stale = [key for key, element in self._elements.items() if not self._attached(element.tag)]
		for key in stale:
			del self._elements[key]
		if self._active is not None and not self._attached(self._active.tag):
			self._active = None
		return len(stale)

	def _attached(self, tag: Tag) -> bool:
		return any(parent is self.soup for parent in tag.parents)

	def set_url(self, url: str) -> None:
		self._url = url

	async def query_selector(self, selector: str) -> SoupElement | None:
		tag = self.soup.select_one(selector)
		return self.wrap(tag) if tag is not None else None

	async def query_selector_all(self, selector: str) -> list[SoupElement]:
		return [self.wrap(tag) for tag in self.soup.select(selector)]

	async def body(self) -> SoupElement:
		return self.wrap(self.soup.body)

	async def active_element(self) -> SoupElement | None:
		return self._active

	async def title(self) -> str:
		return self.soup.title.get_text() if self.soup.title else ''

	async def url(self) -> str:
		return self._url

	async def navigate(self, path: str) -> None:
		if self.router is not None:
			await _maybe_await(self.router(path))
			return
		base, _ = urldefrag(self._url)
		self._url = f'{base}#{path}'

	async def evaluate(self, script: str) -> Any:
		try:
			code = compile(script, '<automation-eval>', 'eval')
		except SyntaxError:
			code = None

		try:
			if code is not None:
				value = eval(code, self._global_scope)
			else:
				# Statements run as the body of an async function, so `return` and `await` work
				source = f'async def {_EVAL_FUNCTION}():\n{textwrap.indent(script, chr(9))}\n'
				exec(compile(source, '<automation-eval>', 'exec'), self._global_scope)
				value = self._global_scope.pop(_EVAL_FUNCTION)()
			return await _maybe_await(value)
		finally:
			# Scripts may have removed nodes
			self.prune()

	async def release(self) -> None:
		self.prune()

	async def capture(self) -> bytes:
		if self.rasterizer is None:
			raise CaptureFailedError('No rasterizer configured for this document')
		return await _maybe_await(self.rasterizer(self))
