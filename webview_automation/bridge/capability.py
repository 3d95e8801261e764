"""
Host transport detection.

The execution context can call out to its owning process through one of
several transport shapes, depending on which host runtime version is present:
a modern transport module, a legacy one, or an object the host installs in the
document's global scope. CapabilityBridge probes them once, in that order, and
returns an immutable CapabilityHandle for whichever answered first.
"""

import importlib
import inspect
import logging
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from enum import Enum
from typing import Any

from webview_automation.action.errors import TransportUnavailableError

logger = logging.getLogger(__name__)

INVOKE_ATTRIBUTE = 'invoke'

Invoke = Callable[..., Any]


class TransportSource(str, Enum):
	"""Which probe produced a capability handle."""

	V2 = 'V2'
	V1 = 'V1'
	GLOBAL_FALLBACK = 'GlobalFallback'
	UNAVAILABLE = 'Unavailable'


class ProbeKind(str, Enum):
	MODULE = 'module'
	GLOBAL = 'global'


@dataclass(frozen=True)
class CapabilityHandle:
	"""A resolved host transport. Immutable and shared by every caller after resolution."""

	source: TransportSource
	invoke: Invoke | None = None
	detail: str = ''

	@property
	def available(self) -> bool:
		return self.invoke is not None

	async def transport(self, command: str, payload: dict[str, Any]) -> Any:
		"""
		Call a host command.

		Raises:
			TransportUnavailableError: On every call of a degraded handle
		"""
		if self.invoke is None:
			raise TransportUnavailableError(f'Host transport not available: {self.detail or "no probe succeeded"}')
		result = self.invoke(command, payload)
		if inspect.isawaitable(result):
			result = await result
		return result


@dataclass(frozen=True)
class TransportProbe:
	"""One step of the probe chain: a module name, or a name in the global scope."""

	source: TransportSource
	kind: ProbeKind
	target: str

	def load(self, global_scope: Mapping[str, Any]) -> Invoke | None:
		"""Return the transport's invoke callable, or None if this probe does not apply."""
		if self.kind is ProbeKind.MODULE:
			try:
				provider: Any = importlib.import_module(self.target)
			except ImportError:
				logger.debug(f'[CapabilityBridge] Module {self.target} not available')
				return None
			except Exception as e:
				logger.warning(f'[CapabilityBridge] Module {self.target} failed to import: {type(e).__name__}: {e}')
				return None
		else:
			provider = global_scope.get(self.target)
			if provider is None:
				logger.debug(f'[CapabilityBridge] Global {self.target} not installed')
				return None

		if isinstance(provider, Mapping):
			invoke = provider.get(INVOKE_ATTRIBUTE)
		else:
			invoke = getattr(provider, INVOKE_ATTRIBUTE, None)

		if not callable(invoke):
			logger.debug(f'[CapabilityBridge] {self.kind.value} {self.target} has no callable {INVOKE_ATTRIBUTE}')
			return None
		return invoke


def default_probes(v2_module: str, v1_module: str, global_name: str) -> tuple[TransportProbe, ...]:
	"""The fixed probe chain: modern module, legacy module, then the host-installed global."""
	return (
		TransportProbe(TransportSource.V2, ProbeKind.MODULE, v2_module),
		TransportProbe(TransportSource.V1, ProbeKind.MODULE, v1_module),
		TransportProbe(TransportSource.GLOBAL_FALLBACK, ProbeKind.GLOBAL, global_name),
	)


class CapabilityBridge:
	"""Resolves the host transport once and caches the handle for the life of the process."""

	def __init__(self, probes: tuple[TransportProbe, ...], global_scope: Mapping[str, Any] | None = None):
		self.probes = tuple(probes)
		self.global_scope = global_scope if global_scope is not None else {}
		self._handle: CapabilityHandle | None = None

	@property
	def handle(self) -> CapabilityHandle | None:
		return self._handle

	def resolve(self) -> CapabilityHandle:
		"""
		Run the probe chain on first call; return the cached handle afterwards.

		The first probe whose module loads and exposes a callable invoke wins and
		later probes are not attempted. When every probe fails the handle is
		degraded rather than an error, so DOM-only commands keep working.
		"""
		if self._handle is not None:
			return self._handle

		for probe in self.probes:
			invoke = probe.load(self.global_scope)
			if invoke is not None:
				logger.info(f'[Automation] Using {probe.source.value} host transport ({probe.target})')
				self._handle = CapabilityHandle(source=probe.source, invoke=invoke, detail=probe.target)
				return self._handle

		tried = ', '.join(probe.target for probe in self.probes) or 'none'
		logger.warning(f'[Automation] Host transport not available, some features may not work (tried: {tried})')
		self._handle = CapabilityHandle(source=TransportSource.UNAVAILABLE, detail=f'tried {tried}')
		return self._handle
