"""WebSocket signaling relay: rooms, peer discovery, chat and control relay."""

__version__ = "0.1.0"
