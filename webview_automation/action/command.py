"""
Command primitives for the automation bridge.

This module defines the request/result envelope exchanged with external
controllers, the argument contract of every catalog command and the
CommandDescriptor entries the registry is built from.
"""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator

from webview_automation.action.errors import AutomationError, ErrorKind


class ExecutionRequest(BaseModel):
	"""A single command invocation coming from an external controller."""

	command: str = Field(..., min_length=1, description='Registered command name')
	args: dict[str, Any] = Field(default_factory=dict, description='Command-specific arguments')


class ExecutionResult(BaseModel):
	"""Tagged outcome of a command: success with a value, or failure with a kind and message."""

	success: bool = Field(..., description='Whether the command succeeded')
	result: Any = Field(default=None, description='Command return value on success')
	error: str | None = Field(default=None, description='Error message on failure')
	kind: ErrorKind | None = Field(default=None, description='Error kind on failure')

	@model_validator(mode='after')
	def check_outcome(self) -> 'ExecutionResult':
		if self.success and (self.error is not None or self.kind is not None):
			raise ValueError('A successful result cannot carry an error')
		if not self.success:
			if self.error is None or self.kind is None:
				raise ValueError('A failed result requires an error and a kind')
			if self.result is not None:
				raise ValueError('A failed result cannot carry a value')
		return self

	@classmethod
	def ok(cls, value: Any = None) -> 'ExecutionResult':
		return cls(success=True, result=value)

	@classmethod
	def fail(cls, kind: ErrorKind, message: str) -> 'ExecutionResult':
		return cls(success=False, error=message, kind=kind)

	@classmethod
	def from_error(cls, error: AutomationError) -> 'ExecutionResult':
		return cls.fail(error.kind, error.message)

	def to_wire(self) -> dict[str, Any]:
		"""JSON shape returned to external controllers."""
		if self.success:
			return {'success': True, 'result': self.result}
		return {'success': False, 'error': self.error, 'kind': self.kind.value}


# =============================================================================
# Argument contracts
# =============================================================================

class CommandArgs(BaseModel):
	"""Arguments of a command without parameters."""

	model_config = ConfigDict(extra='ignore', frozen=True)


class SelectorArgs(CommandArgs):
	selector: str = Field(..., min_length=1, description='CSS selector of the target element')


class NavigateArgs(CommandArgs):
	path: str = Field(..., min_length=1, description='Route path or hash to navigate to')


class TypeArgs(SelectorArgs):
	text: str = Field(..., description='Text to put into the element, may be empty')


class AttributeArgs(SelectorArgs):
	attribute: str = Field(..., min_length=1, description='Attribute name')


class WaitForArgs(SelectorArgs):
	timeout: float | None = Field(default=None, description='Timeout in milliseconds, falsy means default, negative checks once')


class SelectArgs(SelectorArgs):
	value: str = Field(..., description='Option value to select')


class EvalArgs(CommandArgs):
	script: str = Field(..., min_length=1, description='Script evaluated in the global scope of the document')


class HtmlArgs(CommandArgs):
	selector: str | None = Field(default=None, description='Element whose inner HTML is returned, defaults to body')


class WaitArgs(CommandArgs):
	ms: float | None = Field(default=None, description='Milliseconds to wait, falsy means 1000, negative returns at once')


class PressKeyArgs(CommandArgs):
	key: str = Field(..., min_length=1, description='Key identifier, e.g. "Enter"')
	selector: str | None = Field(default=None, description='Target element, defaults to the focused element')


CommandHandler = Callable[[Any, Any], Awaitable[Any]]


@dataclass(frozen=True)
class CommandDescriptor:
	"""Registry entry: a command name bound to its handler and argument contract."""

	name: str
	handler: CommandHandler
	args_model: type[CommandArgs] = CommandArgs
	description: str = ''
	idempotent: bool = field(default=False, compare=False)

	@property
	def required_args(self) -> tuple[str, ...]:
		return tuple(name for name, info in self.args_model.model_fields.items() if info.is_required())
