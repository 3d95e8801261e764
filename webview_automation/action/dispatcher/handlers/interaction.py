"""
Interaction command handlers.

Handles click, check, uncheck, select, focus, blur and submit.
"""

import logging

from webview_automation.action.command import SelectArgs, SelectorArgs
from webview_automation.action.dispatcher.utils import (
	CLICK_SCROLL_SETTLE_MS,
	CLICK_SETTLE_MS,
	CommandContext,
	settle,
)
from webview_automation.action.errors import NoFormFoundError, WrongElementTypeError
from webview_automation.dom.document import InteractiveKind, classify

logger = logging.getLogger(__name__)


async def execute_click(ctx: CommandContext, args: SelectorArgs) -> None:
	"""Wait for the element, scroll it to the centre of the viewport and click it."""
	element = await ctx.resolver.wait_for(args.selector, ctx.default_timeout_ms)

	await element.scroll_into_view(smooth=False)
	await settle(CLICK_SCROLL_SETTLE_MS)

	await element.click()
	await settle(CLICK_SETTLE_MS)


async def execute_check(ctx: CommandContext, args: SelectorArgs) -> None:
	await _set_checked(ctx, args.selector, True)


async def execute_uncheck(ctx: CommandContext, args: SelectorArgs) -> None:
	await _set_checked(ctx, args.selector, False)


async def _set_checked(ctx: CommandContext, selector: str, checked: bool) -> None:
	target = await classify(await ctx.resolver.resolve_or_fail(selector))
	if not target.is_checkbox:
		raise WrongElementTypeError(selector, 'a checkbox')

	clicked = await ctx.simulator.set_checked(target, checked)
	if not clicked:
		logger.debug(f'[CommandDispatcher] {selector} already {"checked" if checked else "unchecked"}')


async def execute_select(ctx: CommandContext, args: SelectArgs) -> None:
	target = await classify(await ctx.resolver.resolve_or_fail(args.selector))
	if target.kind is not InteractiveKind.SELECT:
		raise WrongElementTypeError(args.selector, 'a select')

	await ctx.simulator.select_option(target, args.value)


async def execute_focus(ctx: CommandContext, args: SelectorArgs) -> None:
	element = await ctx.resolver.resolve_or_fail(args.selector)
	await element.focus()


async def execute_blur(ctx: CommandContext, args: SelectorArgs) -> None:
	element = await ctx.resolver.resolve_or_fail(args.selector)
	await element.blur()


async def execute_submit(ctx: CommandContext, args: SelectorArgs) -> None:
	"""Dispatch submit on the element if it is a form, otherwise on its nearest ancestor form."""
	element = await ctx.resolver.resolve_or_fail(args.selector)

	form = await element.closest('form')
	if form is None:
		raise NoFormFoundError(args.selector)

	await ctx.simulator.submit(form)
