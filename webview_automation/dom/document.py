"""
Execution context interface.

Commands never touch a concrete DOM implementation directly. They run against
the async Document/Element interface defined here, which is implemented by
SoupDocument (in-process HTML) and PlaywrightDocument (live webview page).
"""

from abc import ABC, abstractmethod
from collections.abc import MutableMapping
from dataclasses import dataclass, field
from enum import Enum
from typing import Any


@dataclass(frozen=True)
class DomEvent:
	"""A synthetic DOM event to dispatch on an element."""

	type: str
	bubbles: bool = True
	cancelable: bool = False
	key: str | None = None

	def init(self) -> dict[str, Any]:
		"""Event init dictionary as understood by the browser's event constructors."""
		event_init: dict[str, Any] = {'bubbles': self.bubbles, 'cancelable': self.cancelable}
		if self.key is not None:
			event_init['key'] = self.key
		return event_init


class Element(ABC):
	"""A node of the execution context's document."""

	@abstractmethod
	async def tag_name(self) -> str:
		"""Lower-case tag name."""

	@abstractmethod
	async def input_type(self) -> str | None:
		"""The `type` of an <input>, lower-cased, or None for other elements."""

	@abstractmethod
	async def get_attribute(self, name: str) -> str | None: ...

	@abstractmethod
	async def text_content(self) -> str: ...

	@abstractmethod
	async def inner_html(self) -> str: ...

	@abstractmethod
	async def get_value(self) -> str:
		"""Current `value` property of a form control."""

	@abstractmethod
	async def set_value(self, value: str) -> None:
		"""Assign the `value` property directly, without dispatching any event."""

	@abstractmethod
	async def is_checked(self) -> bool: ...

	@abstractmethod
	async def click(self) -> None:
		"""Programmatic click, with the browser's default activation behaviour."""

	@abstractmethod
	async def focus(self) -> None: ...

	@abstractmethod
	async def blur(self) -> None: ...

	@abstractmethod
	async def scroll_into_view(self, smooth: bool = False) -> None: ...

	@abstractmethod
	async def dispatch_event(self, event: DomEvent) -> None: ...

	@abstractmethod
	async def closest(self, selector: str) -> 'Element | None':
		"""Nearest inclusive ancestor matching selector."""


class Document(ABC):
	"""The execution context: a rendered document plus its global scope."""

	@property
	@abstractmethod
	def global_scope(self) -> MutableMapping[str, Any]:
		"""Globals visible to scripts run in the document, where host runtimes install objects."""

	@abstractmethod
	async def query_selector(self, selector: str) -> Element | None: ...

	@abstractmethod
	async def query_selector_all(self, selector: str) -> list[Element]:
		"""All matches in document order."""

	@abstractmethod
	async def body(self) -> Element: ...

	@abstractmethod
	async def active_element(self) -> Element | None: ...

	@abstractmethod
	async def title(self) -> str: ...

	@abstractmethod
	async def url(self) -> str: ...

	@abstractmethod
	async def navigate(self, path: str) -> None:
		"""Move the application to a route (router push, or location hash)."""

	@abstractmethod
	async def evaluate(self, script: str) -> Any:
		"""Run a script in the document's global scope and return its value. No sandboxing."""

	@abstractmethod
	async def capture(self) -> bytes:
		"""Rasterize the current document to PNG bytes."""

	async def release(self) -> None:
		"""Free what the elements returned since the last call hold on to. Called after every command."""
		return None


# =============================================================================
# Interactive element variant
# =============================================================================

class InteractiveKind(str, Enum):
	INPUT = 'input'
	TEXTAREA = 'textarea'
	SELECT = 'select'
	OTHER = 'other'


@dataclass(frozen=True)
class InteractiveElement:
	"""An element tagged once with the form-control kind it represents."""

	element: Element
	kind: InteractiveKind
	input_type: str | None = field(default=None)

	@property
	def is_text_entry(self) -> bool:
		return self.kind in (InteractiveKind.INPUT, InteractiveKind.TEXTAREA)

	@property
	def has_value(self) -> bool:
		return self.kind is not InteractiveKind.OTHER

	@property
	def is_checkbox(self) -> bool:
		return self.kind is InteractiveKind.INPUT and self.input_type == 'checkbox'


async def classify(element: Element) -> InteractiveElement:
	"""Resolve the interactive kind of an element."""
	tag = await element.tag_name()
	if tag == 'input':
		return InteractiveElement(element, InteractiveKind.INPUT, await element.input_type())
	if tag == 'textarea':
		return InteractiveElement(element, InteractiveKind.TEXTAREA)
	if tag == 'select':
		return InteractiveElement(element, InteractiveKind.SELECT)
	return InteractiveElement(element, InteractiveKind.OTHER)
