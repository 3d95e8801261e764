"""
Navigation command handlers.

Handles navigate, getUrl and getTitle.
"""

import logging

from webview_automation.action.command import CommandArgs, NavigateArgs
from webview_automation.action.dispatcher.utils import NAVIGATE_SETTLE_MS, CommandContext, settle

logger = logging.getLogger(__name__)


async def execute_navigate(ctx: CommandContext, args: NavigateArgs) -> None:
	"""Push a route through the application's router, falling back to the location hash."""
	logger.debug(f'[CommandDispatcher] Navigating to {args.path}')
	await ctx.document.navigate(args.path)
	await settle(NAVIGATE_SETTLE_MS)


async def execute_get_url(ctx: CommandContext, args: CommandArgs) -> str:
	return await ctx.document.url()


async def execute_get_title(ctx: CommandContext, args: CommandArgs) -> str:
	return await ctx.document.title()
