"""
Automation error taxonomy.

Every failure a command can produce is one of these kinds. Handlers raise the
matching AutomationError subclass; the dispatcher turns it into a failed
ExecutionResult so nothing crosses the dispatch boundary as an exception.
"""

from enum import Enum


class ErrorKind(str, Enum):
	"""Kinds of failure reported in an ExecutionResult."""

	MISSING_ARGUMENT = 'MissingArgument'
	INVALID_ARGUMENT = 'InvalidArgument'
	ELEMENT_NOT_FOUND = 'ElementNotFound'
	WRONG_ELEMENT_TYPE = 'WrongElementType'
	UNKNOWN_COMMAND = 'UnknownCommand'
	TRANSPORT_UNAVAILABLE = 'TransportUnavailable'
	CAPTURE_FAILED = 'CaptureFailed'
	NO_FORM_FOUND = 'NoFormFound'
	SCRIPT_ERROR = 'ScriptError'
	EXECUTION_ERROR = 'ExecutionError'


class AutomationError(Exception):
	"""Base class for failures raised while executing a command."""

	kind: ErrorKind = ErrorKind.EXECUTION_ERROR

	def __init__(self, message: str):
		super().__init__(message)
		self.message = message


class MissingArgumentError(AutomationError):
	kind = ErrorKind.MISSING_ARGUMENT

	def __init__(self, argument: str):
		super().__init__(f'Missing {argument} argument')
		self.argument = argument


class InvalidArgumentError(AutomationError):
	kind = ErrorKind.INVALID_ARGUMENT


class ElementNotFoundError(AutomationError):
	kind = ErrorKind.ELEMENT_NOT_FOUND

	def __init__(self, selector: str):
		super().__init__(f'Element not found: {selector}')
		self.selector = selector


class WrongElementTypeError(AutomationError):
	kind = ErrorKind.WRONG_ELEMENT_TYPE

	def __init__(self, selector: str, expected: str):
		super().__init__(f'Element is not {expected}: {selector}')
		self.selector = selector
		self.expected = expected


class UnknownCommandError(AutomationError):
	kind = ErrorKind.UNKNOWN_COMMAND

	def __init__(self, command: str):
		super().__init__(f'Unknown command: {command}')
		self.command = command


class TransportUnavailableError(AutomationError):
	kind = ErrorKind.TRANSPORT_UNAVAILABLE


class CaptureFailedError(AutomationError):
	kind = ErrorKind.CAPTURE_FAILED


class NoFormFoundError(AutomationError):
	kind = ErrorKind.NO_FORM_FOUND

	def __init__(self, selector: str):
		super().__init__(f'No form found for: {selector}')
		self.selector = selector


class ScriptError(AutomationError):
	"""Raised when a script passed to the eval command fails."""

	kind = ErrorKind.SCRIPT_ERROR
