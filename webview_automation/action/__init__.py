"""Command primitives and execution."""
from webview_automation.action.command import (
	CommandArgs,
	CommandDescriptor,
	ExecutionRequest,
	ExecutionResult,
)
from webview_automation.action.dispatcher import CommandDispatcher, CommandRegistry, build_default_registry
from webview_automation.action.errors import AutomationError, ErrorKind

__all__ = [
	'AutomationError',
	'CommandArgs',
	'CommandDescriptor',
	'CommandDispatcher',
	'CommandRegistry',
	'ErrorKind',
	'ExecutionRequest',
	'ExecutionResult',
	'build_default_registry',
]
