"""
Configuration module for webview_automation.

Provides environment-driven settings.
"""

from webview_automation.config.settings import AutomationConfig, get_config, reload_config

__all__ = [
	'AutomationConfig',
	'get_config',
	'reload_config',
]
