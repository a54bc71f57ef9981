"""Drone datalink framing, telemetry messages, vehicle state and waypoint navigation."""

__version__ = "0.1.0"
__all__ = [
    "checksum",
    "datalink",
    "messages",
    "navigation",
    "registers",
    "state",
    "telemetry",
]