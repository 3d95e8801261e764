"""
Scrolling command handlers.

Handles scrollTo.
"""

import logging

from webview_automation.action.command import SelectorArgs
from webview_automation.action.dispatcher.utils import SCROLL_SETTLE_MS, CommandContext, settle

logger = logging.getLogger(__name__)


async def execute_scroll_to(ctx: CommandContext, args: SelectorArgs) -> None:
	"""Smooth-scroll the element to the centre of the viewport and let the animation finish."""
	element = await ctx.resolver.resolve_or_fail(args.selector)
	await element.scroll_into_view(smooth=True)
	await settle(SCROLL_SETTLE_MS)
