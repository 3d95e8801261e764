"""
Utility command handlers.

Handles wait and eval.
"""

import logging
from typing import Any

from webview_automation.action.command import EvalArgs, WaitArgs
from webview_automation.action.dispatcher.utils import DEFAULT_WAIT_MS, CommandContext, settle
from webview_automation.action.errors import ScriptError

logger = logging.getLogger(__name__)


async def execute_wait(ctx: CommandContext, args: WaitArgs) -> None:
	await settle(args.ms or DEFAULT_WAIT_MS)


async def execute_eval(ctx: CommandContext, args: EvalArgs) -> Any:
	"""
	Evaluate a script in the document's global scope and return its value.

	This is an escape hatch for test authors. The script runs with the full
	privileges of the execution context; there is no sandboxing of any kind.
	"""
	try:
		return await ctx.document.evaluate(args.script)
	except Exception as e:
		raise ScriptError(str(e) or type(e).__name__) from e
