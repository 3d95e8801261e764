"""
Command registry and dispatcher.

The registry holds the fixed catalog of commands; the dispatcher validates a
request against the command's argument contract, runs its handler and turns
every outcome into an ExecutionResult.
"""

import logging
from collections.abc import Iterator, Mapping
from typing import Any

from pydantic import ValidationError

from webview_automation.action.command import (
	AttributeArgs,
	CommandArgs,
	CommandDescriptor,
	CommandHandler,
	EvalArgs,
	ExecutionResult,
	HtmlArgs,
	NavigateArgs,
	PressKeyArgs,
	SelectArgs,
	SelectorArgs,
	TypeArgs,
	WaitArgs,
	WaitForArgs,
)
from webview_automation.action.dispatcher.handlers import (
	input as input_handlers,
)
from webview_automation.action.dispatcher.handlers import (
	interaction as interaction_handlers,
)
from webview_automation.action.dispatcher.handlers import (
	navigation as navigation_handlers,
)
from webview_automation.action.dispatcher.handlers import (
	query as query_handlers,
)
from webview_automation.action.dispatcher.handlers import (
	scrolling as scrolling_handlers,
)
from webview_automation.action.dispatcher.handlers import (
	utility as utility_handlers,
)
from webview_automation.action.dispatcher.utils import CommandContext
from webview_automation.action.errors import (
	AutomationError,
	ErrorKind,
	InvalidArgumentError,
	MissingArgumentError,
	UnknownCommandError,
)

logger = logging.getLogger(__name__)

_MISSING_ERROR_TYPES = ('missing', 'string_too_short')


class CommandRegistry:
	"""
	Catalog of named commands.

	Commands are registered while the registry is being built; freeze() makes
	it read-only for the rest of the process.
	"""

	def __init__(self):
		self._commands: dict[str, CommandDescriptor] = {}
		self._frozen = False

	def register(
		self,
		name: str,
		handler: CommandHandler,
		args_model: type[CommandArgs] = CommandArgs,
		description: str = '',
		idempotent: bool = False,
	) -> None:
		if self._frozen:
			raise RuntimeError(f'Cannot register {name!r}: the command registry is frozen')
		if name in self._commands:
			raise ValueError(f'Command {name!r} is already registered')
		self._commands[name] = CommandDescriptor(
			name=name,
			handler=handler,
			args_model=args_model,
			description=description,
			idempotent=idempotent,
		)

	def freeze(self) -> 'CommandRegistry':
		self._frozen = True
		return self

	@property
	def frozen(self) -> bool:
		return self._frozen

	def get(self, name: str) -> CommandDescriptor | None:
		return self._commands.get(name)

	def names(self) -> list[str]:
		return list(self._commands)

	def __contains__(self, name: object) -> bool:
		return name in self._commands

	def __iter__(self) -> Iterator[CommandDescriptor]:
		return iter(self._commands.values())

	def __len__(self) -> int:
		return len(self._commands)


def build_default_registry() -> CommandRegistry:
	"""Build the frozen catalog of automation commands."""
	registry = CommandRegistry()
	register = registry.register

	# Navigation
	register('navigate', navigation_handlers.execute_navigate, NavigateArgs, 'Navigate to a route')
	register('getUrl', navigation_handlers.execute_get_url, CommandArgs, 'Current URL', idempotent=True)
	register('getTitle', navigation_handlers.execute_get_title, CommandArgs, 'Document title', idempotent=True)

	# Interaction
	register('click', interaction_handlers.execute_click, SelectorArgs, 'Click an element')
	register('check', interaction_handlers.execute_check, SelectorArgs, 'Check a checkbox', idempotent=True)
	register('uncheck', interaction_handlers.execute_uncheck, SelectorArgs, 'Uncheck a checkbox', idempotent=True)
	register('select', interaction_handlers.execute_select, SelectArgs, 'Select a dropdown option')
	register('focus', interaction_handlers.execute_focus, SelectorArgs, 'Focus an element')
	register('blur', interaction_handlers.execute_blur, SelectorArgs, 'Blur an element')
	register('submit', interaction_handlers.execute_submit, SelectorArgs, 'Submit a form')

	# Input
	register('type', input_handlers.execute_type, TypeArgs, 'Type text into an input')
	register('clear', input_handlers.execute_clear, SelectorArgs, 'Clear an input')
	register('pressKey', input_handlers.execute_press_key, PressKeyArgs, 'Press a key')

	# Queries
	register('getText', query_handlers.execute_get_text, SelectorArgs, 'Element text content', idempotent=True)
	register('getValue', query_handlers.execute_get_value, SelectorArgs, 'Form control value', idempotent=True)
	register('getAttribute', query_handlers.execute_get_attribute, AttributeArgs, 'Element attribute', idempotent=True)
	register('exists', query_handlers.execute_exists, SelectorArgs, 'Whether an element exists', idempotent=True)
	register('waitFor', query_handlers.execute_wait_for, WaitForArgs, 'Wait for an element to appear', idempotent=True)
	register('getElements', query_handlers.execute_get_elements, SelectorArgs, 'Count and texts of matches', idempotent=True)
	register('getHtml', query_handlers.execute_get_html, HtmlArgs, 'Inner HTML of an element', idempotent=True)

	# Scrolling and utilities
	register('scrollTo', scrolling_handlers.execute_scroll_to, SelectorArgs, 'Scroll an element into view')
	register('wait', utility_handlers.execute_wait, WaitArgs, 'Wait for a duration')
	register('eval', utility_handlers.execute_eval, EvalArgs, 'Evaluate a script, unsandboxed')

	return registry.freeze()


def _argument_error(error: ValidationError) -> AutomationError:
	"""Map a pydantic validation failure onto the automation error taxonomy."""
	details = error.errors()
	for detail in details:
		missing = detail['type'] in _MISSING_ERROR_TYPES or (
			detail['type'] == 'string_type' and detail.get('input') is None
		)
		if missing and detail['loc']:
			return MissingArgumentError(str(detail['loc'][0]))

	detail = details[0]
	location = '.'.join(str(part) for part in detail['loc']) or 'args'
	return InvalidArgumentError(f'Invalid {location} argument: {detail["msg"]}')


class CommandDispatcher:
	"""Dispatches named commands to their handlers against one execution context."""

	def __init__(self, context: CommandContext, registry: CommandRegistry | None = None):
		"""
		Initialize the command dispatcher.

		Args:
			context: Document, resolver and simulator the handlers operate on
			registry: Command catalog, the default catalog when omitted
		"""
		self.context = context
		self.registry = registry if registry is not None else build_default_registry()

	async def dispatch(self, command: str, args: Mapping[str, Any] | None = None) -> ExecutionResult:
		"""
		Execute a command and return its result.

		Never raises: unknown commands, invalid arguments, DOM failures and
		unexpected exceptions all come back as a failed ExecutionResult.
		"""
		logger.debug(f'[CommandDispatcher] Executing command: {command}')
		logger.debug(f'[CommandDispatcher] Command args: {args}')

		try:
			descriptor = self.registry.get(command)
			if descriptor is None:
				raise UnknownCommandError(command)

			if args is not None and not isinstance(args, Mapping):
				raise InvalidArgumentError(f'Arguments for {command} must be an object')

			try:
				parsed = descriptor.args_model.model_validate(dict(args or {}))
			except ValidationError as e:
				raise _argument_error(e) from e

			value = await descriptor.handler(self.context, parsed)

		except AutomationError as e:
			logger.debug(f'[CommandDispatcher] {command} failed: {e.kind.value}: {e.message}')
			return ExecutionResult.from_error(e)
		except Exception as e:
			logger.error(f'Command execution failed: {type(e).__name__}: {e}', exc_info=True)
			return ExecutionResult.fail(ErrorKind.EXECUTION_ERROR, f'Command execution failed: {str(e)}')

		logger.debug(f'[CommandDispatcher] Command result: {value!r}')
		return ExecutionResult.ok(value)
