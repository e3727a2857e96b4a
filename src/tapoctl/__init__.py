"""Command-line controller for TP-Link Tapo smart plugs."""

__version__ = "0.1.0"
