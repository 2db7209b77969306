"""nmwifi - Network backend using NetworkManager (nmcli).

All network operations are performed by invoking nmcli as a subprocess
in terse mode (``-t``) and parsing its colon-separated output.  Every
call is synchronous: the caller waits for nmcli to exit.
"""

import re
import shutil
import subprocess
from typing import Dict, List, Optional

from loguru import logger

from .config import COMMAND_TIMEOUT, CONNECT_TIMEOUT
from .interfaces import (
    ConnectionDetails,
    NmcliError,
    WiFiDevice,
    WiFiNetwork,
    STATUS_CONNECTED,
    STATUS_PASSWORD_REQUIRED,
    STATUS_WRONG_PASSWORD,
)


# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

NMCLI = 'nmcli'

# Fields requested from "nmcli device wifi list"; parse order depends on it
WIFI_LIST_FIELDS = 'IN-USE,SSID,BSSID,SECURITY,SIGNAL'

WIFI_CONNECTION_TYPE = '802-11-wireless'

# Fragments of nmcli errors that mean the secret was rejected or missing
_AUTH_ERROR_HINTS = ('secrets were required', 'passphrase', 'psk',
                     'authentication', 'password')


# ---------------------------------------------------------------------------
# Helper: run commands
# ---------------------------------------------------------------------------

def _redact(cmd: List[str]) -> str:
    """Render a command line for logging with the password hidden."""
    shown = []
    hide_next = False
    for arg in cmd:
        shown.append('******' if hide_next else arg)
        hide_next = arg == 'password'
    return ' '.join(shown)


def _run_command(cmd: List[str], timeout: int = COMMAND_TIMEOUT) -> subprocess.CompletedProcess:
    """Execute a command and return the CompletedProcess result.

    Args:
        cmd: Command and arguments to execute.
        timeout: Maximum seconds to wait.

    Returns:
        A subprocess.CompletedProcess instance.

    Raises:
        FileNotFoundError: If the command is not installed.
        subprocess.TimeoutExpired: If the command times out.
    """
    logger.debug(f'- Executing: {_redact(cmd)}')
    return subprocess.run(
        cmd,
        capture_output=True,
        text=True,
        timeout=timeout,
    )


def _run_nmcli(args: List[str], timeout: int = COMMAND_TIMEOUT) -> subprocess.CompletedProcess:
    """Execute an nmcli command and return the CompletedProcess result."""
    return _run_command([NMCLI] + args, timeout=timeout)


def _run_nmcli_check(args: List[str], timeout: int = COMMAND_TIMEOUT) -> str:
    """Run nmcli, raise on failure, and return stdout.

    Args:
        args: Arguments to pass after 'nmcli'.
        timeout: Maximum seconds to wait.

    Returns:
        Stdout with trailing newlines removed.  Leading whitespace is kept
        because SSIDs may start with spaces.

    Raises:
        NmcliError: If nmcli is missing, times out or exits non-zero.
    """
    try:
        result = _run_nmcli(args, timeout=timeout)
    except FileNotFoundError:
        raise NmcliError('nmcli not found') from None
    except subprocess.TimeoutExpired:
        raise NmcliError(f'nmcli timed out after {timeout}s') from None

    if result.returncode != 0:
        message = (result.stderr.strip() or result.stdout.strip()
                   or f'nmcli exited with code {result.returncode}')
        logger.warning(f'nmcli {args[0] if args else ""} failed: {message}')
        raise NmcliError(message)
    return result.stdout.rstrip('\r\n')


def _with_ifname(args: List[str], interface: Optional[str]) -> List[str]:
    if interface:
        return args + ['ifname', interface]
    return args


# ---------------------------------------------------------------------------
# Parsing helpers
# ---------------------------------------------------------------------------

def _split_nmcli_line(line: str) -> List[str]:
    """Split an nmcli terse-mode output line on unescaped colons.

    nmcli escapes literal colons in values as '\\:' and backslashes as
    '\\\\'.  This function splits only on unescaped colons and then
    unescapes the results.

    Args:
        line: A single line of nmcli -t output.

    Returns:
        A list of field values.
    """
    parts: List[str] = []
    current: List[str] = []
    i = 0
    while i < len(line):
        if line[i] == '\\' and i + 1 < len(line) and line[i + 1] in ':\\':
            current.append(line[i + 1])
            i += 2
        elif line[i] == ':':
            parts.append(''.join(current))
            current = []
            i += 1
        else:
            current.append(line[i])
            i += 1
    parts.append(''.join(current))
    return parts


def _cidr_to_netmask(cidr_str: str) -> str:
    """Convert a CIDR prefix length to a dotted-decimal subnet mask.

    Args:
        cidr_str: The prefix length as a string (e.g. '24').

    Returns:
        The subnet mask (e.g. '255.255.255.0').
    """
    try:
        cidr = int(cidr_str)
    except ValueError:
        return cidr_str
    if not 0 <= cidr <= 32:
        return cidr_str

    mask = (0xFFFFFFFF << (32 - cidr)) & 0xFFFFFFFF
    return '.'.join(str((mask >> (8 * i)) & 0xFF) for i in range(3, -1, -1))


def _parse_signal(text: str) -> int:
    try:
        return max(0, min(100, int(text.strip())))
    except ValueError:
        return 0


def parse_wifi_list(output: str) -> List[WiFiNetwork]:
    """Parse ``nmcli -t -f IN-USE,SSID,BSSID,SECURITY,SIGNAL`` output.

    Hidden networks (empty SSID) and short lines are skipped.  Access
    points sharing an SSID collapse into one record, preferring the one
    in use and otherwise the strongest signal.

    Returns:
        Networks sorted with the connected one first, then by signal.
    """
    by_ssid: Dict[str, WiFiNetwork] = {}

    for line in output.splitlines():
        parts = _split_nmcli_line(line)
        if len(parts) < 5:
            continue

        # SSIDs are not stripped; leading/trailing spaces are significant
        ssid = parts[1]
        if not ssid:
            continue

        network = WiFiNetwork(
            ssid=ssid,
            bssid=parts[2],
            security=parts[3],
            signal=_parse_signal(parts[4]),
            in_use=parts[0].strip() == '*',
        )

        seen = by_ssid.get(ssid)
        if seen is None:
            by_ssid[ssid] = network
        elif network.in_use and not seen.in_use:
            by_ssid[ssid] = network
        elif not seen.in_use and network.signal > seen.signal:
            by_ssid[ssid] = network

    networks = list(by_ssid.values())
    networks.sort(key=lambda n: (n.in_use, n.signal), reverse=True)
    return networks


def parse_device_status(output: str) -> List[WiFiDevice]:
    """Parse ``nmcli -t -f DEVICE,TYPE,STATE,CONNECTION device status``."""
    devices: List[WiFiDevice] = []
    for line in output.splitlines():
        parts = _split_nmcli_line(line)
        if len(parts) < 3 or parts[1] != 'wifi':
            continue
        connection = parts[3] if len(parts) > 3 else ''
        devices.append(WiFiDevice(
            name=parts[0],
            state=parts[2],
            connection='' if connection == '--' else connection,
        ))
    return devices


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def check_nmcli_installed() -> bool:
    """Return True if the nmcli binary is on PATH."""
    return shutil.which(NMCLI) is not None


def list_wifi_devices() -> List[WiFiDevice]:
    """Return the WiFi devices known to NetworkManager."""
    try:
        output = _run_nmcli_check(['-t', '-f', 'DEVICE,TYPE,STATE,CONNECTION',
                                   'device', 'status'])
    except NmcliError as exc:
        logger.warning(f'Unable to list devices: {exc}')
        return []
    return parse_device_status(output)


def check_wifi_available() -> bool:
    """Return True if nmcli is installed and at least one WiFi device exists."""
    if not check_nmcli_installed():
        return False
    return bool(list_wifi_devices())


def get_wifi_device(preferred: Optional[str] = None) -> Optional[str]:
    """Return the preferred WiFi device if present, else the first, or None."""
    devices = list_wifi_devices()
    names = [d.name for d in devices]
    if preferred and preferred in names:
        return preferred
    return names[0] if names else None


def scan_networks(interface: Optional[str] = None,
                  rescan: str = 'auto') -> List[WiFiNetwork]:
    """Return the networks nmcli currently sees.

    Args:
        interface: Restrict results to this device.
        rescan: Passed to ``--rescan`` ('auto', 'yes' or 'no').

    Raises:
        NmcliError: If the listing fails.
    """
    args = _with_ifname(['-t', '-f', WIFI_LIST_FIELDS, 'device', 'wifi', 'list'],
                        interface)
    output = _run_nmcli_check(args + ['--rescan', rescan])
    networks = parse_wifi_list(output)
    logger.info(f'Scan found {len(networks)} network(s)')
    return networks


def request_rescan(interface: Optional[str] = None) -> bool:
    """Ask NetworkManager to rescan.

    nmcli refuses a rescan right after a previous one; that is logged and
    reported as False but is not an error for the caller.
    """
    try:
        _run_nmcli_check(_with_ifname(['device', 'wifi', 'rescan'], interface))
        return True
    except NmcliError as exc:
        logger.info(f'Rescan not performed: {exc}')
        return False


def _connect_status(result: subprocess.CompletedProcess, password: Optional[str],
                    needs_password: bool) -> str:
    if result.returncode == 0:
        return STATUS_CONNECTED

    error = (result.stderr.strip() or result.stdout.strip()
             or 'Connection failed')
    logger.warning(f'Connect failed: {error}')

    if not password:
        if needs_password:
            return STATUS_PASSWORD_REQUIRED
        return error

    lowered = error.lower()
    if any(hint in lowered for hint in _AUTH_ERROR_HINTS):
        return STATUS_WRONG_PASSWORD
    return error


def connect_to_network(ssid: str, bssid: str = '', password: Optional[str] = None,
                       security: str = '', interface: Optional[str] = None) -> str:
    """Attempt to connect to a WiFi network.

    Without a password a saved profile is activated when one exists, so
    previously stored credentials are reused.  With a password the stale
    profile is deleted and a fresh one named after the SSID is created.

    Args:
        ssid: The network SSID.
        bssid: Access point to pin, when known.
        password: The network password (None to try saved credentials).
        security: nmcli security text of the network.
        interface: Device to connect with.

    Returns:
        'connected', 'password_required', 'wrong_password', or an error
        message.
    """
    network = WiFiNetwork(ssid=ssid, bssid=bssid, security=security)

    if password:
        try:
            _run_nmcli(['connection', 'delete', 'id', ssid])
        except (FileNotFoundError, subprocess.TimeoutExpired):
            pass

    if not password and ssid in get_saved_connections():
        args = _with_ifname(['connection', 'up', 'id', ssid], interface)
    else:
        target = bssid or ssid
        args = ['device', 'wifi', 'connect', target]
        if bssid:
            args += ['name', ssid]
        if password and network.needs_password:
            args += ['password', password]
        args = _with_ifname(args, interface)

    try:
        result = _run_nmcli(args, timeout=CONNECT_TIMEOUT)
    except FileNotFoundError:
        return 'nmcli not found'
    except subprocess.TimeoutExpired:
        return 'Connection timed out'

    status = _connect_status(result, password, network.needs_password)
    if status == STATUS_CONNECTED:
        logger.success(f'Connected to {ssid}')
    return status


def disconnect_network(interface: Optional[str] = None) -> None:
    """Disconnect the WiFi device.

    Raises:
        NmcliError: If no device exists or nmcli fails.
    """
    device = interface or get_wifi_device()
    if not device:
        raise NmcliError('No Wi-Fi device found')
    _run_nmcli_check(['device', 'disconnect', device])
    logger.info(f'Disconnected {device}')


def forget_network(ssid: str) -> None:
    """Remove the saved connection profiles of an SSID.

    NetworkManager names duplicate profiles "SSID 1", "SSID 2", ...; all
    of them are deleted.

    Raises:
        NmcliError: If deletion fails.
    """
    pattern = re.compile(re.escape(ssid) + r'( \d+)?')
    names = [n for n in get_saved_connections() if pattern.fullmatch(n)]
    if not names:
        names = [ssid]
    for name in names:
        _run_nmcli_check(['connection', 'delete', 'id', name])
        logger.info(f'Deleted profile {name}')


def get_active_ssid(interface: Optional[str] = None) -> Optional[str]:
    """Return the SSID of the currently active WiFi connection, or None."""
    args = _with_ifname(['-t', '-f', 'ACTIVE,SSID', 'device', 'wifi', 'list'],
                        interface)
    try:
        output = _run_nmcli_check(args + ['--rescan', 'no'])
    except NmcliError:
        return None

    for line in output.splitlines():
        parts = _split_nmcli_line(line)
        if len(parts) >= 2 and parts[0] == 'yes' and parts[1]:
            return parts[1]
    return None


def get_saved_connections() -> List[str]:
    """Return a list of saved WiFi connection names."""
    try:
        output = _run_nmcli_check(['-t', '-f', 'NAME,TYPE', 'connection', 'show'])
    except NmcliError:
        return []

    connections: List[str] = []
    for line in output.splitlines():
        parts = _split_nmcli_line(line)
        if len(parts) >= 2 and parts[1] == WIFI_CONNECTION_TYPE and parts[0]:
            connections.append(parts[0])
    return connections


def _apply_device_field(details: ConnectionDetails, key: str, value: str) -> None:
    # Multi-value fields come indexed, e.g. IP4.ADDRESS[1]
    field = key.split('[', 1)[0]
    if field == 'GENERAL.CONNECTION':
        details.connection_id = '' if value == '--' else value
    elif field == 'GENERAL.HWADDR':
        details.mac_address = value
    elif field == 'IP4.ADDRESS' and not details.ip4_address:
        addr, _, cidr = value.partition('/')
        details.ip4_address = addr
        details.ip4_subnet = _cidr_to_netmask(cidr) if cidr else ''
    elif field == 'IP4.GATEWAY':
        details.ip4_gateway = '' if value == '--' else value
    elif field == 'IP4.DNS':
        details.ip4_dns = ', '.join(filter(None, [details.ip4_dns, value]))
    elif field == 'IP6.ADDRESS' and not details.ip6_address:
        details.ip6_address = value


def get_connection_details(interface: Optional[str] = None) -> Optional[ConnectionDetails]:
    """Fetch detailed information about the active WiFi connection.

    Returns:
        A ConnectionDetails object, or None if there is no active
        WiFi connection.
    """
    device = interface or get_wifi_device()
    if not device:
        return None

    try:
        output = _run_nmcli_check([
            '-t', '-f',
            'GENERAL.CONNECTION,GENERAL.HWADDR,IP4.ADDRESS,IP4.GATEWAY,IP4.DNS,IP6.ADDRESS',
            'device', 'show', device,
        ])
    except NmcliError:
        return None

    details = ConnectionDetails(device=device)
    for line in output.splitlines():
        parts = _split_nmcli_line(line)
        if len(parts) < 2:
            continue
        _apply_device_field(details, parts[0], ':'.join(parts[1:]))

    if not details.connection_id:
        return None

    try:
        active = next((n for n in scan_networks(device, rescan='no') if n.in_use), None)
    except NmcliError:
        active = None
    if active:
        details.ssid = active.ssid
        details.bssid = active.bssid
        details.signal = active.signal
        details.security = active.security_label
    else:
        details.ssid = get_active_ssid(device) or details.connection_id

    try:
        value = _run_nmcli_check(['-g', 'connection.autoconnect', 'connection',
                                  'show', 'id', details.connection_id])
        details.auto_connect = value.strip() == 'yes'
    except NmcliError:
        pass

    return details
