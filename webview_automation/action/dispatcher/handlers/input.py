"""
Input command handlers.

Handles type, clear and pressKey.
"""

import logging

from webview_automation.action.command import PressKeyArgs, SelectorArgs, TypeArgs
from webview_automation.action.dispatcher.utils import CommandContext
from webview_automation.action.errors import WrongElementTypeError
from webview_automation.dom.document import classify

logger = logging.getLogger(__name__)


async def execute_type(ctx: CommandContext, args: TypeArgs) -> None:
	"""Replace the value of an input or textarea, waiting for it to render first."""
	element = await ctx.resolver.wait_for(args.selector, ctx.default_timeout_ms)
	target = await classify(element)
	if not target.is_text_entry:
		raise WrongElementTypeError(args.selector, 'an input')

	await ctx.simulator.set_value(target, args.text)


async def execute_clear(ctx: CommandContext, args: SelectorArgs) -> None:
	target = await classify(await ctx.resolver.resolve_or_fail(args.selector))
	if not target.is_text_entry:
		raise WrongElementTypeError(args.selector, 'an input')

	await ctx.simulator.set_value(target, '')


async def execute_press_key(ctx: CommandContext, args: PressKeyArgs) -> None:
	target = None
	if args.selector:
		target = await ctx.resolver.resolve_or_fail(args.selector)

	logger.debug(f'[CommandDispatcher] Pressing key: {args.key}')
	await ctx.simulator.press_key(args.key, target)
