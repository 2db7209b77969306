"""nmwifi - Terminal Wi-Fi manager for NetworkManager.

A curses front-end that lists, connects to and manages Wi-Fi networks
by invoking nmcli and parsing its terse output.

Usage:
    from nmwifi import scan_networks, connect_to_network

    # List networks
    networks = scan_networks()

    # Connect to a network
    status = connect_to_network("MyNetwork", password="password123",
                                security="WPA2")
"""

__version__ = "1.0.0"
__app_id__ = "nmwifi"

from .interfaces import (
    WiFiNetwork,
    WiFiDevice,
    ConnectionDetails,
    NmcliError,
    BackendInterface,
)
from .backend import (
    check_wifi_available,
    list_wifi_devices,
    get_wifi_device,
    scan_networks,
    request_rescan,
    connect_to_network,
    disconnect_network,
    forget_network,
    get_active_ssid,
    get_connection_details,
    get_saved_connections,
)
from .factory import create_backend

__all__ = [
    '__version__',
    '__app_id__',
    'WiFiNetwork',
    'WiFiDevice',
    'ConnectionDetails',
    'NmcliError',
    'BackendInterface',
    'check_wifi_available',
    'list_wifi_devices',
    'get_wifi_device',
    'scan_networks',
    'request_rescan',
    'connect_to_network',
    'disconnect_network',
    'forget_network',
    'get_active_ssid',
    'get_connection_details',
    'get_saved_connections',
    'create_backend',
]
