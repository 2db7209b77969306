"""nmwifi - Data types and abstract backend interface.

Defines the records parsed out of nmcli output and the contract every
backend implements, so the terminal UI and the CLI can run against the
real nmcli wrapper or the in-memory mock.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import List, Optional


# Connect outcomes other than these are the tool's own error text
STATUS_CONNECTED = 'connected'
STATUS_PASSWORD_REQUIRED = 'password_required'
STATUS_WRONG_PASSWORD = 'wrong_password'

# Security tokens that mean nmcli expects a password argument
_PASSWORD_TOKENS = ('WPA', 'RSN', 'WEP', 'SAE', '802.1X')


class NmcliError(RuntimeError):
    """Raised when nmcli is missing, times out, or exits non-zero."""


@dataclass
class WiFiNetwork:
    """Represents a single WiFi network visible from a scan."""
    ssid: str = ''
    bssid: str = ''
    signal: int = 0
    security: str = ''
    in_use: bool = False

    @property
    def is_secured(self) -> bool:
        """Return True unless nmcli reported the network as open."""
        return self.security.strip() not in ('', '--')

    @property
    def needs_password(self) -> bool:
        """Return True when connecting requires a password argument."""
        upper = self.security.upper()
        return any(token in upper for token in _PASSWORD_TOKENS)

    @property
    def security_label(self) -> str:
        """Return the security text, or 'Open' for open networks."""
        return self.security.strip() if self.is_secured else 'Open'

    @property
    def signal_category(self) -> str:
        """Return a human-readable signal quality category."""
        if self.signal >= 80:
            return 'excellent'
        elif self.signal >= 60:
            return 'good'
        elif self.signal >= 40:
            return 'fair'
        elif self.signal >= 20:
            return 'weak'
        return 'none'

    @property
    def signal_bars(self) -> str:
        """Return a Unicode bar representation of signal strength."""
        if self.signal >= 80:
            return '████'   # full blocks
        elif self.signal >= 60:
            return '███░'
        elif self.signal >= 40:
            return '██░░'
        elif self.signal >= 20:
            return '█░░░'
        return '░░░░'


@dataclass
class WiFiDevice:
    """A wireless interface as reported by ``nmcli device status``."""
    name: str
    state: str = ''
    connection: str = ''

    @property
    def is_connected(self) -> bool:
        return self.state == 'connected'


@dataclass
class ConnectionDetails:
    """Detailed information about the active WiFi connection."""
    ssid: str = ''
    bssid: str = ''
    signal: int = 0
    security: str = ''
    ip4_address: str = ''
    ip4_gateway: str = ''
    ip4_subnet: str = ''
    ip4_dns: str = ''
    ip6_address: str = ''
    mac_address: str = ''
    connection_id: str = ''
    device: str = ''
    auto_connect: bool = True


class BackendInterface(ABC):
    """Abstract interface for WiFi backend operations."""

    @abstractmethod
    def check_available(self) -> bool:
        """Check if the tool is installed and a WiFi device exists."""

    def check_installed(self) -> bool:
        """Optional: check the external tool is on PATH (always True for mocks)."""
        return True

    @abstractmethod
    def list_devices(self) -> List[WiFiDevice]:
        """Return all WiFi devices."""

    @abstractmethod
    def get_device(self, preferred: Optional[str] = None) -> Optional[str]:
        """Return the preferred device if present, else the first one."""

    @abstractmethod
    def scan(self, interface: Optional[str] = None) -> List[WiFiNetwork]:
        """Return the current network list. Raises NmcliError."""

    @abstractmethod
    def rescan(self, interface: Optional[str] = None) -> bool:
        """Ask the tool to refresh its scan results."""

    @abstractmethod
    def connect(self, network: WiFiNetwork, password: Optional[str] = None,
                interface: Optional[str] = None) -> str:
        """Connect to a network and return a status string."""

    @abstractmethod
    def disconnect(self, interface: Optional[str] = None) -> None:
        """Disconnect the interface. Raises NmcliError."""

    @abstractmethod
    def forget(self, ssid: str) -> None:
        """Delete saved profiles for an SSID. Raises NmcliError."""

    @abstractmethod
    def get_active_ssid(self, interface: Optional[str] = None) -> Optional[str]:
        """Return the SSID the interface is connected to, if any."""

    @abstractmethod
    def get_details(self, interface: Optional[str] = None) -> Optional[ConnectionDetails]:
        """Return details of the active connection, or None."""

    @abstractmethod
    def get_saved_connections(self) -> List[str]:
        """Return the names of saved WiFi profiles."""
