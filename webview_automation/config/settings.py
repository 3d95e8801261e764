"""
Automation Configuration

Centralized settings for the automation bridge, read from environment variables.
"""

import logging
import os
from typing import Any

logger = logging.getLogger(__name__)


class AutomationConfig:
	"""
	Settings for the listener, command timings and host transport probing.

	Values come from environment variables:
	- AUTOMATION_PORT=9876
	- AUTOMATION_TRANSPORT_GLOBAL=__WEBVIEW_HOST__
	- etc.
	"""

	def __init__(self):
		"""Initialize settings from environment variables."""
		# Listener
		self.host = os.getenv('AUTOMATION_HOST', '127.0.0.1')
		self.port = self._get_int('AUTOMATION_PORT', default=9876)
		self.debug = self._get_flag('AUTOMATION_DEBUG', default=False)

		# Command timings (milliseconds)
		self.default_timeout_ms = self._get_int('AUTOMATION_DEFAULT_TIMEOUT_MS', default=5000)
		self.screenshot_timeout_ms = self._get_int('AUTOMATION_SCREENSHOT_TIMEOUT_MS', default=2000)

		# Host transport probe chain
		self.transport_v2_module = os.getenv('AUTOMATION_TRANSPORT_V2_MODULE', 'webview_host.core')
		self.transport_v1_module = os.getenv('AUTOMATION_TRANSPORT_V1_MODULE', 'webview_host.tauri')
		self.transport_global = os.getenv('AUTOMATION_TRANSPORT_GLOBAL', '__WEBVIEW_HOST__')

		# Live webview
		self.cdp_endpoint = os.getenv('AUTOMATION_CDP_ENDPOINT', 'http://127.0.0.1:9222')

		logger.debug(f'Automation config loaded: {self.to_dict()}')

	def _get_flag(self, env_var: str, default: bool = False) -> bool:
		"""
		Get a boolean setting from an environment variable.

		Args:
			env_var: Environment variable name
			default: Default value if not set

		Returns:
			True if enabled, False otherwise
		"""
		value = os.getenv(env_var, str(default)).lower()
		return value in ('true', '1', 'yes', 'on', 'enabled')

	def _get_int(self, env_var: str, default: int) -> int:
		value = os.getenv(env_var)
		if value is None or value.strip() == '':
			return default
		try:
			return int(value)
		except ValueError:
			logger.warning(f'Invalid integer for {env_var}: {value!r}, using {default}')
			return default

	def to_dict(self) -> dict[str, Any]:
		"""Export settings as dictionary."""
		return {
			'host': self.host,
			'port': self.port,
			'debug': self.debug,
			'default_timeout_ms': self.default_timeout_ms,
			'screenshot_timeout_ms': self.screenshot_timeout_ms,
			'transport_v2_module': self.transport_v2_module,
			'transport_v1_module': self.transport_v1_module,
			'transport_global': self.transport_global,
			'cdp_endpoint': self.cdp_endpoint,
		}


# Global config instance
_config: AutomationConfig | None = None


def get_config() -> AutomationConfig:
	"""
	Get global automation config instance.

	Returns:
		AutomationConfig instance
	"""
	global _config
	if _config is None:
		_config = AutomationConfig()
	return _config


def reload_config() -> AutomationConfig:
	"""Reload settings from environment (useful for testing)."""
	global _config
	_config = AutomationConfig()
	return _config
