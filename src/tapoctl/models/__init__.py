"""Data models for tapoctl."""

from .telemetry import DeviceInfo, EnergyUsage

__all__ = ["DeviceInfo", "EnergyUsage"]
