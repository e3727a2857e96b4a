"""Text and JSON rendering of device telemetry."""

import json
from typing import Any, Dict, List, Mapping, Optional

from ..models.telemetry import DeviceInfo, EnergyUsage
from .time_format import format_duration_human_readable


def to_json(data: Any) -> str:
    """Serialize report data as indented JSON."""
    return json.dumps(data, indent=2, default=str)


def format_device_info(info: DeviceInfo) -> List[str]:
    """Render the device information report.

    Args:
        info: Device info returned by the plug client

    Returns:
        Report lines, without trailing newlines
    """
    return [
        "Device Information:",
        "",
        f"         Nick Name: {info.nickname}",
        f"              Icon: {info.avatar}",
        f"       Power State: {info.power_state}",
        f"              Type: {info.type} {info.model}",
        f"         Device ID: {info.device_id}",
        f"  Firmware Version: {info.fw_ver}",
        f"  Hardware Version: {info.hw_ver}",
        f"            Region: {info.region}",
        "",
        "Network Information:",
        "",
        f"        IP Address: {info.ip}",
        f"       MAC Address: {info.mac}",
        f"         WiFi SSID: {info.ssid}",
        f"        RSSI Level: {info.rssi}",
        f"      Signal Level: {info.signal_level}",
    ]


def format_energy_usage(usage: EnergyUsage) -> List[str]:
    """Render the power usage report with human-readable runtimes."""
    today_runtime = format_duration_human_readable(usage.today_runtime_seconds)
    month_runtime = format_duration_human_readable(usage.month_runtime_seconds)

    return [
        "Power Usage",
        "",
        f"    Current Power: {usage.current_power_watt:.3f}W",
        f"     Today Energy: {usage.today_energy_kwh:.3f}kWh",
        f"     Month Energy: {usage.month_energy_kwh:.3f}kWh",
        f"    Today Runtime: {today_runtime}",
        f"    Month Runtime: {month_runtime}",
    ]


def build_energy_metrics(
    usage: EnergyUsage, labels: Optional[Mapping[str, str]] = None
) -> Dict[str, Any]:
    """Build a Choria metric document from energy counters.

    Args:
        usage: Energy usage returned by the plug client
        labels: Labels attached to every metric

    Returns:
        Dictionary with ``labels`` and ``metrics`` keys
    """
    return {
        "labels": dict(labels or {}),
        "metrics": {
            "current_power_watt": usage.current_power_watt,
            "today_energy_kwh": usage.today_energy_kwh,
            "month_energy_kwh": usage.month_energy_kwh,
            "today_runtime_seconds": usage.today_runtime_seconds,
            "month_runtime_seconds": usage.month_runtime_seconds,
        },
    }
