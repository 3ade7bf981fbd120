"""Persistent boot-time spoof of a Bluetooth adapter hardware address."""

__version__ = "0.1.0"
