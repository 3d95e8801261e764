"""Host transport, screenshot capture and delivery."""
from webview_automation.bridge.capability import (
	CapabilityBridge,
	CapabilityHandle,
	ProbeKind,
	TransportProbe,
	TransportSource,
	default_probes,
)
from webview_automation.bridge.capture import (
	SCREENSHOT_COMMAND,
	CaptureChannel,
	CaptureDelivery,
	DeliveryState,
	decode_data_url,
	encode_data_url,
)
from webview_automation.bridge.host import HostBridge
from webview_automation.bridge.mailbox import CaptureMailbox

__all__ = [
	'SCREENSHOT_COMMAND',
	'CapabilityBridge',
	'CapabilityHandle',
	'CaptureChannel',
	'CaptureDelivery',
	'CaptureMailbox',
	'DeliveryState',
	'HostBridge',
	'ProbeKind',
	'TransportProbe',
	'TransportSource',
	'decode_data_url',
	'default_probes',
	'encode_data_url',
]
