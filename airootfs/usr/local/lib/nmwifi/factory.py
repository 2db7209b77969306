"""nmwifi - Backend factory.

Factory pattern to create backend instances.
Enables dependency injection for testing.
"""

import os
from typing import List, Optional

from . import backend
from .config import MODE_ENV
from .interfaces import (
    BackendInterface,
    ConnectionDetails,
    WiFiDevice,
    WiFiNetwork,
)


class NmcliBackend(BackendInterface):
    """Wrapper for the nmcli backend functions."""

    def check_available(self) -> bool:
        return backend.check_wifi_available()

    def check_installed(self) -> bool:
        return backend.check_nmcli_installed()

    def list_devices(self) -> List[WiFiDevice]:
        return backend.list_wifi_devices()

    def get_device(self, preferred: Optional[str] = None) -> Optional[str]:
        return backend.get_wifi_device(preferred)

    def scan(self, interface: Optional[str] = None) -> List[WiFiNetwork]:
        return backend.scan_networks(interface)

    def rescan(self, interface: Optional[str] = None) -> bool:
        return backend.request_rescan(interface)

    def connect(self, network: WiFiNetwork, password: Optional[str] = None,
                interface: Optional[str] = None) -> str:
        return backend.connect_to_network(
            network.ssid,
            bssid=network.bssid,
            password=password,
            security=network.security,
            interface=interface,
        )

    def disconnect(self, interface: Optional[str] = None) -> None:
        backend.disconnect_network(interface)

    def forget(self, ssid: str) -> None:
        backend.forget_network(ssid)

    def get_active_ssid(self, interface: Optional[str] = None) -> Optional[str]:
        return backend.get_active_ssid(interface)

    def get_details(self, interface: Optional[str] = None) -> Optional[ConnectionDetails]:
        return backend.get_connection_details(interface)

    def get_saved_connections(self) -> List[str]:
        return backend.get_saved_connections()


def create_backend() -> BackendInterface:
    """Create backend instance based on environment mode.

    Environment:
        NMWIFI_MODE: 'production' (default) or 'test'

    Returns:
        Backend instance implementing WiFi operations.
    """
    mode = os.environ.get(MODE_ENV, 'production')

    if mode == 'test':
        from .mock_backend import MockWiFiBackend

        return MockWiFiBackend()

    return NmcliBackend()
