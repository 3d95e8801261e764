"""
Startup script for the Webview Automation Service

Attaches to the running webview over CDP, initializes the automation service
against its page and serves the HTTP API for external test controllers.
"""

import logging
import os
import sys
from contextlib import asynccontextmanager

from dotenv import load_dotenv

try:
	import uvicorn
except ImportError:
	print('Error: uvicorn not installed. Install with: uv pip install uvicorn')
	sys.exit(1)

# Load environment variables from .env.local first, then .env
# .env.local takes precedence (for local development overrides)
load_dotenv(dotenv_path='.env.local', override=False)
load_dotenv(override=False)

# Set AUTOMATION_DEBUG=true to enable debug logging
debug_mode = os.getenv('AUTOMATION_DEBUG', 'false').lower() == 'true'
root_log_level = logging.DEBUG if debug_mode else logging.INFO

logging.basicConfig(
	level=root_log_level,
	format='%(asctime)s - %(name)s - %(levelname)s - [%(filename)s:%(lineno)d] - %(message)s',
	force=True,  # Override any existing configuration
)
logger = logging.getLogger(__name__)

logging.getLogger('uvicorn').setLevel(logging.INFO)
logging.getLogger('uvicorn.access').setLevel(logging.WARNING)
logging.getLogger('fastapi').setLevel(logging.INFO)
logging.getLogger('httpcore').setLevel(logging.WARNING)
logging.getLogger('httpx').setLevel(logging.WARNING)
logging.getLogger('asyncio').setLevel(logging.WARNING)
logging.getLogger('playwright').setLevel(logging.WARNING)

from fastapi import FastAPI  # noqa: E402

from webview_automation.bridge import CaptureMailbox, HostBridge  # noqa: E402
from webview_automation.config import get_config  # noqa: E402
from webview_automation.dom.playwright_page import WebviewConnection, connect_webview  # noqa: E402
from webview_automation.server import create_app  # noqa: E402
from webview_automation.service import init_automation  # noqa: E402

config = get_config()
mailbox = CaptureMailbox()
_connection: WebviewConnection | None = None


@asynccontextmanager
async def lifespan(app: FastAPI):
	"""Attach to the webview and publish the automation service before serving requests."""
	global _connection

	global_scope: dict = {}
	HostBridge(mailbox).install(global_scope, config.transport_global)

	_connection = await connect_webview(config.cdp_endpoint, global_scope)
	await init_automation(_connection.document, config)

	yield  # Server is running

	if _connection is not None:
		try:
			await _connection.close()
		except Exception as e:
			logger.error(f'Error detaching from webview: {e}', exc_info=True)
		_connection = None


def main() -> None:
	logger.info('=' * 70)
	logger.info('Starting Webview Automation Service')
	logger.info('=' * 70)
	logger.info(f'Webview DevTools endpoint: {config.cdp_endpoint}')
	logger.info(f'Health check: http://{config.host}:{config.port}/automation/health')
	logger.info('=' * 70)

	app = create_app(mailbox, config, lifespan=lifespan)

	# Logging is configured above, so uvicorn must not install its own config
	uvicorn.run(
		app,
		host=config.host,
		port=config.port,
		log_config=None,
	)


if __name__ == '__main__':
	main()
