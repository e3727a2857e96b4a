"""Smart plug client built on the tapo library.

The tapo library owns the device protocol (handshake, encryption and
request framing) and exposes coroutines. This module wraps it in a small
synchronous API that returns tapoctl models and raises tapoctl errors.
"""

import asyncio
from typing import Any, Awaitable, Callable, TypeVar

from tapo import ApiClient

from ..config.settings import Settings
from ..exceptions import TapoCtlError
from ..models.telemetry import DeviceInfo, EnergyUsage
from .base import BaseService

T = TypeVar("T")


class PlugClientError(TapoCtlError):
    """Base exception for device client errors."""

    pass


class DeviceConnectionError(PlugClientError):
    """Raised when the client cannot connect to or log in to the device."""

    pass


class DeviceRequestError(PlugClientError):
    """Raised when the device rejects or fails a request."""

    pass


class PowerStateError(PlugClientError):
    """Raised when the device does not reach the requested power state."""

    pass


class PlugClient(BaseService):
    """Synchronous controller for a single Tapo smart plug."""

    def __init__(self, settings: Settings):
        """Initialize the plug client.

        Args:
            settings: Application settings with address and credentials

        Raises:
            ValueError: If address, username or password is missing
        """
        super().__init__(settings)

        missing = settings.missing_device_fields()
        if missing:
            raise ValueError(f"Missing device settings: {', '.join(missing)}")

        self.address: str = settings.address  # type: ignore[assignment]

    def _create_api_client(self) -> ApiClient:
        password = self.settings.password
        return ApiClient(
            self.settings.user,
            password.get_secret_value() if password else "",
            timeout_s=self.settings.timeout_seconds,
        )

    async def _connect(self) -> Any:
        client = self._create_api_client()
        try:
            return await client.p110(self.address)
        except Exception as e:
            raise DeviceConnectionError(
                f"Failed to connect to device: {e}", {"address": self.address}
            ) from e

    async def _request(self, operation: str, call: Callable[[], Awaitable[T]]) -> T:
        try:
            return await call()
        except Exception as e:
            raise DeviceRequestError(
                f"Device request {operation} failed: {e}",
                {"address": self.address, "operation": operation},
            ) from e

    def _run(self, operation: str, coro: Awaitable[T]) -> T:
        self._log_operation_start(operation, address=self.address)
        try:
            result = asyncio.run(coro)  # type: ignore[arg-type]
        except PlugClientError as e:
            self._log_operation_error(operation, e, address=self.address)
            raise
        self._log_operation_complete(operation, address=self.address)
        return result

    async def _read_device_info(self, device: Any) -> DeviceInfo:
        result = await self._request("get_device_info", device.get_device_info)
        return DeviceInfo.from_dict(result.to_dict())

    async def _set_power(self, on: bool) -> DeviceInfo:
        device = await self._connect()
        if on:
            await self._request("on", device.on)
        else:
            await self._request("off", device.off)

        info = await self._read_device_info(device)
        if info.device_on != on:
            state = "on" if on else "off"
            raise PowerStateError(
                f"device failed to power {state} for an unknown reason",
                {"address": self.address},
            )
        return info

    async def _get_device_info(self) -> DeviceInfo:
        device = await self._connect()
        return await self._read_device_info(device)

    async def _get_energy_usage(self) -> EnergyUsage:
        device = await self._connect()
        result = await self._request("get_energy_usage", device.get_energy_usage)
        return EnergyUsage.from_dict(result.to_dict())

    def power_on(self) -> DeviceInfo:
        """Turn the plug on and confirm it reports the on state.

        Returns:
            Device info read back after the command

        Raises:
            DeviceConnectionError: If the device cannot be reached
            DeviceRequestError: If a request fails
            PowerStateError: If the device is still off afterwards
        """
        return self._run("power_on", self._set_power(True))

    def power_off(self) -> DeviceInfo:
        """Turn the plug off and confirm it reports the off state."""
        return self._run("power_off", self._set_power(False))

    def get_device_info(self) -> DeviceInfo:
        """Fetch device identity, state and network details."""
        return self._run("get_device_info", self._get_device_info())

    def get_energy_usage(self) -> EnergyUsage:
        """Fetch power and energy counters."""
        return self._run("get_energy_usage", self._get_energy_usage())

