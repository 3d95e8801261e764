"""
Query command handlers.

Read-only commands: getText, getValue, getAttribute, exists, waitFor,
getElements and getHtml.
"""

import logging
from typing import Any

from webview_automation.action.command import AttributeArgs, HtmlArgs, SelectorArgs, WaitForArgs
from webview_automation.action.dispatcher.utils import CommandContext
from webview_automation.action.errors import WrongElementTypeError
from webview_automation.dom.document import classify

logger = logging.getLogger(__name__)

DEFAULT_HTML_SELECTOR = 'body'


async def execute_get_text(ctx: CommandContext, args: SelectorArgs) -> str:
	element = await ctx.resolver.wait_for(args.selector, ctx.default_timeout_ms)
	return (await element.text_content()).strip()


async def execute_get_value(ctx: CommandContext, args: SelectorArgs) -> str:
	target = await classify(await ctx.resolver.resolve_or_fail(args.selector))
	if not target.has_value:
		raise WrongElementTypeError(args.selector, 'an input')
	return await target.element.get_value()


async def execute_get_attribute(ctx: CommandContext, args: AttributeArgs) -> str | None:
	element = await ctx.resolver.resolve_or_fail(args.selector)
	return await element.get_attribute(args.attribute)


async def execute_exists(ctx: CommandContext, args: SelectorArgs) -> bool:
	return await ctx.document.query_selector(args.selector) is not None


async def execute_wait_for(ctx: CommandContext, args: WaitForArgs) -> bool:
	"""Wait for an element to appear; a falsy timeout means the default."""
	timeout_ms = args.timeout or ctx.default_timeout_ms
	element = await ctx.resolver.resolve(args.selector, timeout_ms)
	return element is not None


async def execute_get_elements(ctx: CommandContext, args: SelectorArgs) -> dict[str, Any]:
	elements = await ctx.document.query_selector_all(args.selector)
	texts = [(await element.text_content()).strip() for element in elements]
	return {'count': len(elements), 'texts': texts}


async def execute_get_html(ctx: CommandContext, args: HtmlArgs) -> str:
	element = await ctx.resolver.resolve_or_fail(args.selector or DEFAULT_HTML_SELECTOR)
	return await element.inner_html()
