"""Device telemetry data models."""

from dataclasses import dataclass, field
from typing import Any, Dict, Mapping

from ..utils.logging import get_logger

logger = get_logger(__name__)

# The device reports runtime counters in minutes
SECONDS_PER_RUNTIME_UNIT = 60


@dataclass(frozen=True)
class DeviceInfo:
    """Identity, state and network details reported by a plug."""

    device_id: str
    nickname: str
    model: str
    type: str
    device_on: bool
    avatar: str = ""
    fw_ver: str = ""
    hw_ver: str = ""
    region: str = ""
    ip: str = ""
    mac: str = ""
    ssid: str = ""
    rssi: int = 0
    signal_level: int = 0
    raw: Dict[str, Any] = field(default_factory=dict, compare=False, repr=False)

    def __post_init__(self) -> None:
        """Validate device info after initialization."""
        logger.trace(  # type: ignore[attr-defined]
            f"Validating DeviceInfo for device_id={self.device_id}"
        )

        if not self.device_id:
            logger.error("DeviceInfo validation failed: empty device_id")
            raise ValueError("device_id cannot be empty")

    @property
    def power_state(self) -> str:
        """Human-readable power state."""
        return "On" if self.device_on else "Off"

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "DeviceInfo":
        """Build from the dictionary returned by the device client."""
        return cls(
            device_id=str(data.get("device_id", "")),
            nickname=str(data.get("nickname", "")),
            model=str(data.get("model", "")),
            type=str(data.get("type", "")),
            device_on=bool(data.get("device_on", False)),
            avatar=str(data.get("avatar", "")),
            fw_ver=str(data.get("fw_ver", "")),
            hw_ver=str(data.get("hw_ver", "")),
            region=str(data.get("region", "")),
            ip=str(data.get("ip", "")),
            mac=str(data.get("mac", "")),
            ssid=str(data.get("ssid", "")),
            rssi=int(data.get("rssi", 0)),
            signal_level=int(data.get("signal_level", 0)),
            raw=dict(data),
        )


@dataclass(frozen=True)
class EnergyUsage:
    """Power and energy counters reported by an energy-monitoring plug."""

    current_power: int  # Milliwatts
    today_energy: int  # Watt-hours
    month_energy: int  # Watt-hours
    today_runtime: int  # Minutes
    month_runtime: int  # Minutes
    raw: Dict[str, Any] = field(default_factory=dict, compare=False, repr=False)

    def __post_init__(self) -> None:
        """Validate energy counters after initialization."""
        for name in (
            "current_power",
            "today_energy",
            "month_energy",
            "today_runtime",
            "month_runtime",
        ):
            value = getattr(self, name)
            if value < 0:
                logger.error(f"EnergyUsage validation failed: negative {name} {value}")
                raise ValueError(f"{name} must be non-negative")

        logger.debug(
            f"EnergyUsage validated: {self.current_power}mW, "
            f"today={self.today_energy}Wh/{self.today_runtime}min, "
            f"month={self.month_energy}Wh/{self.month_runtime}min"
        )

    @property
    def current_power_watt(self) -> float:
        return self.current_power / 1000

    @property
    def today_energy_kwh(self) -> float:
        return self.today_energy / 1000

    @property
    def month_energy_kwh(self) -> float:
        return self.month_energy / 1000

    @property
    def today_runtime_seconds(self) -> int:
        return self.today_runtime * SECONDS_PER_RUNTIME_UNIT

    @property
    def month_runtime_seconds(self) -> int:
        return self.month_runtime * SECONDS_PER_RUNTIME_UNIT

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "EnergyUsage":
        """Build from the dictionary returned by the device client."""
        return cls(
            current_power=int(data.get("current_power") or 0),
            today_energy=int(data.get("today_energy") or 0),
            month_energy=int(data.get("month_energy") or 0),
            today_runtime=int(data.get("today_runtime") or 0),
            month_runtime=int(data.get("month_runtime") or 0),
            raw=dict(data),
        )
