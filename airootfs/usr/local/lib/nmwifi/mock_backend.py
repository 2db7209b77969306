"""nmwifi - Mock backend for testing.

Provides an in-memory implementation of BackendInterface that simulates
NetworkManager without calling nmcli, so the terminal UI can be driven
from tests or demoed on machines without WiFi hardware.
"""

from copy import copy
from typing import Dict, List, Optional

from .interfaces import (
    BackendInterface,
    ConnectionDetails,
    NmcliError,
    WiFiDevice,
    WiFiNetwork,
    STATUS_CONNECTED,
    STATUS_PASSWORD_REQUIRED,
    STATUS_WRONG_PASSWORD,
)

MOCK_PASSWORD = 'password123'


def _default_networks() -> List[WiFiNetwork]:
    return [
        WiFiNetwork(ssid='HomeNet', bssid='AA:BB:CC:00:00:01', signal=82, security='WPA2'),
        WiFiNetwork(ssid='CoffeeShop', bssid='AA:BB:CC:00:00:02', signal=64, security=''),
        WiFiNetwork(ssid='Office-5G', bssid='AA:BB:CC:00:00:03', signal=47, security='WPA2 WPA3'),
        WiFiNetwork(ssid='Neighbour With A Really Long Network Name',
                    bssid='AA:BB:CC:00:00:04', signal=18, security='WPA1 WPA2'),
    ]


class MockWiFiBackend(BackendInterface):
    """Mock implementation for unit testing.

    Networks that need a password accept MOCK_PASSWORD; those with a saved profile
    connect without one.
    """

    def __init__(self, networks: Optional[List[WiFiNetwork]] = None,
                 devices: Optional[List[str]] = None):
        """Initialize mock state."""
        self._networks: List[WiFiNetwork] = (
            _default_networks() if networks is None else [copy(n) for n in networks]
        )
        self._devices: List[str] = ['wlan0'] if devices is None else list(devices)
        self._active: Dict[str, str] = {}   # device -> ssid
        self._saved: List[str] = []
        self.rescans = 0
        self.fail_scan: Optional[str] = None

    # -- helpers ---------------------------------------------------------

    def _device(self, interface: Optional[str]) -> Optional[str]:
        return self.get_device(interface)

    def _find(self, ssid: str) -> Optional[WiFiNetwork]:
        return next((n for n in self._networks if n.ssid == ssid), None)

    # -- BackendInterface ------------------------------------------------

    def check_available(self) -> bool:
        return bool(self._devices)

    def list_devices(self) -> List[WiFiDevice]:
        return [
            WiFiDevice(
                name=name,
                state='connected' if name in self._active else 'disconnected',
                connection=self._active.get(name, ''),
            )
            for name in self._devices
        ]

    def get_device(self, preferred: Optional[str] = None) -> Optional[str]:
        if preferred and preferred in self._devices:
            return preferred
        return self._devices[0] if self._devices else None

    def scan(self, interface: Optional[str] = None) -> List[WiFiNetwork]:
        if self.fail_scan:
            raise NmcliError(self.fail_scan)
        active = self._active.get(self._device(interface))
        networks = []
        for net in self._networks:
            item = copy(net)
            item.in_use = net.ssid == active
            networks.append(item)
        networks.sort(key=lambda n: (n.in_use, n.signal), reverse=True)
        return networks

    def rescan(self, interface: Optional[str] = None) -> bool:
        self.rescans += 1
        return True

    def connect(self, network: WiFiNetwork, password: Optional[str] = None,
                interface: Optional[str] = None) -> str:
        device = self._device(interface)
        if device is None:
            return 'No Wi-Fi device found'
        known = self._find(network.ssid)
        if known is None:
            return f'Error: No network with SSID {network.ssid!r} found.'

        if known.needs_password and network.ssid not in self._saved:
            if not password:
                return STATUS_PASSWORD_REQUIRED
            if password != MOCK_PASSWORD:
                return STATUS_WRONG_PASSWORD

        if network.ssid not in self._saved:
            self._saved.append(network.ssid)
        self._active[device] = network.ssid
        return STATUS_CONNECTED

    def disconnect(self, interface: Optional[str] = None) -> None:
        device = self._device(interface)
        if device is None:
            raise NmcliError('No Wi-Fi device found')
        if device not in self._active:
            raise NmcliError(f"Error: Device '{device}' is not active.")
        del self._active[device]

    def forget(self, ssid: str) -> None:
        if ssid not in self._saved:
            raise NmcliError(f"Error: unknown connection '{ssid}'.")
        self._saved.remove(ssid)
        for device, active in list(self._active.items()):
            if active == ssid:
                del self._active[device]

    def get_active_ssid(self, interface: Optional[str] = None) -> Optional[str]:
        return self._active.get(self._device(interface))

    def get_details(self, interface: Optional[str] = None) -> Optional[ConnectionDetails]:
        device = self._device(interface)
        ssid = self._active.get(device)
        if not ssid:
            return None
        net = self._find(ssid)
        return ConnectionDetails(
            ssid=ssid,
            bssid=net.bssid,
            signal=net.signal,
            security=net.security_label,
            ip4_address='192.168.1.50',
            ip4_subnet='255.255.255.0',
            ip4_gateway='192.168.1.1',
            ip4_dns='192.168.1.1',
            mac_address='02:00:00:00:00:01',
            connection_id=ssid,
            device=device,
        )

    def get_saved_connections(self) -> List[str]:
        return list(self._saved)
