"""Automation bridge for driving desktop webview applications from external test controllers."""
from webview_automation.action import ErrorKind, ExecutionRequest, ExecutionResult
from webview_automation.service import (
	AutomationService,
	ServiceState,
	automation_state,
	get_automation,
	init_automation,
	init_automation_background,
)

__all__ = [
	'AutomationService',
	'ErrorKind',
	'ExecutionRequest',
	'ExecutionResult',
	'ServiceState',
	'automation_state',
	'get_automation',
	'init_automation',
	'init_automation_background',
]
