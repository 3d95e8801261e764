"""HTTP listener for external controllers."""
from webview_automation.server.http import API_VERSION, create_app

__all__ = ['API_VERSION', 'create_app']
