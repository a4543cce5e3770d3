"""Serwer websocket udostępniający skanowanie klientom."""

from .app import create_app
from .handler import ConnectionHandler
from .protocol import MessageType, OutboundMessage, ProtocolError, parse_inbound
from .publisher import MessageSink, ProgressPublisher, WebSocketSink

__all__ = [
	"ConnectionHandler",
	"MessageSink",
	"MessageType",
	"OutboundMessage",
	"ProgressPublisher",
	"ProtocolError",
	"WebSocketSink",
	"create_app",
	"parse_inbound",
]
