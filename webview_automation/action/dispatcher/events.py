"""
Synthetic user input.

Reactive frameworks only pick up programmatic changes when they see the events
a real user would cause. EventSimulator writes the property and then fires
those events in the order a browser does.
"""

import logging

from webview_automation.dom.document import Document, DomEvent, Element, InteractiveElement

logger = logging.getLogger(__name__)


class EventSimulator:
	"""Dispatches input, change, keyboard and submit events on document elements."""

	def __init__(self, document: Document):
		self.document = document

	async def set_value(self, target: InteractiveElement, value: str) -> None:
		"""Focus the control, write its value property, then fire input and change."""
		element = target.element
		await element.focus()
		await element.set_value(value)
		await element.dispatch_event(DomEvent('input'))
		await element.dispatch_event(DomEvent('change'))

	async def select_option(self, target: InteractiveElement, value: str) -> None:
		"""Write a <select> value and fire change."""
		await target.element.set_value(value)
		await target.element.dispatch_event(DomEvent('change'))

	async def set_checked(self, target: InteractiveElement, checked: bool) -> bool:
		"""
		Bring a checkbox to the desired state with a genuine click.

		Returns:
			True if a click was issued, False if the box was already in that state
		"""
		if await target.element.is_checked() == checked:
			return False
		await target.element.click()
		return True

	async def press_key(self, key: str, target: Element | None = None) -> None:
		"""Fire keydown then keyup for key at target, the focused element or body."""
		if target is None:
			target = await self.document.active_element()
		if target is None:
			target = await self.document.body()

		await target.dispatch_event(DomEvent('keydown', key=key))
		await target.dispatch_event(DomEvent('keyup', key=key))

	async def submit(self, form: Element) -> None:
		await form.dispatch_event(DomEvent('submit', cancelable=True))
