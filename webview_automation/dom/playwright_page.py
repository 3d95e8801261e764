"""
Live webview execution context driven through Playwright.

Desktop webviews built on Chromium (WebView2, CEF, Electron) expose a DevTools
endpoint; connect_webview() attaches to it over CDP and wraps the first page in
a PlaywrightDocument. All element work happens in the page itself, so the DOM
observes exactly the property writes and events the handlers issue.
"""

import logging
from collections.abc import MutableMapping
from typing import Any

from playwright.async_api import Browser, ElementHandle, Page, Playwright, async_playwright
from playwright.async_api import Error as PlaywrightError

from webview_automation.dom.document import Document, DomEvent, Element

logger = logging.getLogger(__name__)

# Vue apps publish themselves as window.__VUE_APP__; without a router the hash is used
_NAVIGATE_SCRIPT = '''
async (path) => {
	const app = window.__VUE_APP__;
	const router = app && app.config && app.config.globalProperties.$router;
	if (router) {
		await router.push(path);
	} else {
		window.location.hash = path;
	}
}
'''


class PlaywrightElement(Element):
	"""Element backed by a Playwright ElementHandle."""

	def __init__(self, handle: ElementHandle, document: 'PlaywrightDocument | None' = None):
		self.handle = handle
		self.document = document

	async def tag_name(self) -> str:
		return await self.handle.evaluate('el => el.tagName.toLowerCase()')

	async def input_type(self) -> str | None:
		return await self.handle.evaluate("el => el.tagName === 'INPUT' ? el.type.toLowerCase() : null")

	async def get_attribute(self, name: str) -> str | None:
		return await self.handle.get_attribute(name)

	async def text_content(self) -> str:
		return await self.handle.text_content() or ''

	async def inner_html(self) -> str:
		return await self.handle.inner_html()

	async def get_value(self) -> str:
		return await self.handle.evaluate('el => el.value')

	async def set_value(self, value: str) -> None:
		await self.handle.evaluate('(el, value) => { el.value = value }', value)

	async def is_checked(self) -> bool:
		return await self.handle.evaluate('el => !!el.checked')

	async def click(self) -> None:
		# HTMLElement.click(), not a pointer click: no actionability checks
		await self.handle.evaluate('el => el.click()')

	async def focus(self) -> None:
		await self.handle.focus()

	async def blur(self) -> None:
		await self.handle.evaluate('el => el.blur()')

	async def scroll_into_view(self, smooth: bool = False) -> None:
		behavior = 'smooth' if smooth else 'instant'
		await self.handle.evaluate(
			"(el, behavior) => el.scrollIntoView({ behavior, block: 'center' })",
			behavior,
		)

	async def dispatch_event(self, event: DomEvent) -> None:
		await self.handle.dispatch_event(event.type, event.init())

	async def closest(self, selector: str) -> 'PlaywrightElement | None':
		result = await self.handle.evaluate_handle('(el, selector) => el.closest(selector)', selector)
		element = result.as_element()
		if element is None:
			await result.dispose()
			return None
		if self.document is not None:
			return self.document.wrap(element)
		return PlaywrightElement(element)


class PlaywrightDocument(Document):
	"""Document backed by a live Playwright page."""

	def __init__(self, page: Page, global_scope: MutableMapping[str, Any] | None = None):
		self.page = page
		self._handles: list[ElementHandle] = []
		self._global_scope: MutableMapping[str, Any] = global_scope if global_scope is not None else {}

	@property
	def global_scope(self) -> MutableMapping[str, Any]:
		return self._global_scope

	def wrap(self, handle: ElementHandle) -> PlaywrightElement:
		"""Wrap a handle and hold it until the next release()."""
		self._handles.append(handle)
		return PlaywrightElement(handle, self)

	async def release(self) -> None:
		"""Dispose every element handle handed out since the last call."""
		handles, self._handles = self._handles, []
		for handle in handles:
			try:
				await handle.dispose()
			except PlaywrightError as e:
				# Handles of a page that navigated away are already gone
				logger.debug(f'[Automation] Could not dispose element handle: {e}')

	async def query_selector(self, selector: str) -> PlaywrightElement | None:
		handle = await self.page.query_selector(selector)
		return self.wrap(handle) if handle is not None else None

	async def query_selector_all(self, selector: str) -> list[PlaywrightElement]:
		return [self.wrap(handle) for handle in await self.page.query_selector_all(selector)]

	async def body(self) -> PlaywrightElement:
		handle = await self.page.query_selector('body')
		return self.wrap(handle)

	async def active_element(self) -> PlaywrightElement | None:
		result = await self.page.evaluate_handle('() => document.activeElement')
		element = result.as_element()
		if element is None:
			await result.dispose()
			return None
		return self.wrap(element)

	async def title(self) -> str:
		return await self.page.title()

	async def url(self) -> str:
		return self.page.url

	async def navigate(self, path: str) -> None:
		await self.page.evaluate(_NAVIGATE_SCRIPT, path)

	async def evaluate(self, script: str) -> Any:
		# Same shape as `new Function('return (async () => { ... })()')`: scripts use `return`
		return await self.page.evaluate(f'async () => {{ {script} }}')

	async def capture(self) -> bytes:
		return await self.page.screenshot(type='png')


class WebviewConnection:
	"""Playwright driver, CDP browser connection and the document for its first page."""

	def __init__(self, playwright: Playwright, browser: Browser, document: PlaywrightDocument):
		self.playwright = playwright
		self.browser = browser
		self.document = document

	async def close(self) -> None:
		# Closing a CDP-attached browser only disconnects; the webview keeps running
		await self.browser.close()
		await self.playwright.stop()


async def connect_webview(cdp_endpoint: str, global_scope: MutableMapping[str, Any] | None = None) -> WebviewConnection:
	"""
	Attach to a running webview over the Chrome DevTools Protocol.

	Args:
		cdp_endpoint: DevTools endpoint of the webview, e.g. http://127.0.0.1:9222
		global_scope: Globals the host runtime publishes to the execution context

	Returns:
		WebviewConnection whose document wraps the first open page
	"""
	playwright = await async_playwright().start()
	try:
		browser = await playwright.chromium.connect_over_cdp(cdp_endpoint)
		contexts = browser.contexts
		if contexts and contexts[0].pages:
			page = contexts[0].pages[0]
		else:
			context = contexts[0] if contexts else await browser.new_context()
			page = await context.new_page()
	except Exception:
		await playwright.stop()
		raise

	logger.info(f'[Automation] Attached to webview at {cdp_endpoint}: {page.url}')
	return WebviewConnection(playwright, browser, PlaywrightDocument(page, global_scope))
