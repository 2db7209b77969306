"""CLI entry point for nmwifi.

Without an action flag the interactive terminal mode starts; the flags
run a single query against nmcli and print the result.
"""

import argparse
import sys

from loguru import logger
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table
from rich.theme import Theme

from .. import __version__
from ..app import run
from ..factory import create_backend
from ..interfaces import NmcliError
from ..logs import setup_logging

EXIT_OK = 0
EXIT_FAILED = 1
EXIT_USAGE = 2

nord_theme = Theme(
    {
        "info": "#88C0D0",
        "warning": "bold #EBCB8B",
        "error": "bold #BF616A",
        "success": "bold #A3BE8C",
        "header": "bold #81A1C1",
    }
)

console = Console(theme=nord_theme)


def build_parser():
    parser = argparse.ArgumentParser(
        prog='nmwifi',
        description='Terminal front-end for NetworkManager Wi-Fi (nmcli).',
        epilog='Run without an action to open the interactive list.',
    )
    parser.add_argument('-i', '--interface', type=str, default=None, metavar='<iface>',
                        help='Wi-Fi interface to use (default: first Wi-Fi device)')
    action = parser.add_mutually_exclusive_group()
    action.add_argument('-s', '--status', action='store_true', default=False,
                        help='Show the current connection and exit')
    action.add_argument('-r', '--rescan', action='store_true', default=False,
                        help='Rescan, print the visible networks and exit')
    action.add_argument('-l', '--list', action='store_true', default=False,
                        help='Print the visible networks and exit')
    action.add_argument('-d', '--disconnect', action='store_true', default=False,
                        help='Disconnect the interface and exit')
    parser.add_argument('-v', '--verbose', action='store_true', default=False,
                        help='Debug/verbose output to stderr')
    parser.add_argument('--version', action='version', version=f'%(prog)s {__version__}')
    return parser


def print_networks(networks):
    """Render the network list as a table."""
    if not networks:
        console.print('No networks found', style='warning')
        return

    table = Table(title='Wi-Fi Networks', header_style='header')
    table.add_column('', width=1)
    table.add_column('SSID')
    table.add_column('Signal', justify='right')
    table.add_column('')
    table.add_column('Security')
    table.add_column('BSSID', style='dim')
    for net in networks:
        table.add_row(
            '*' if net.in_use else '',
            escape(net.ssid),
            f'{net.signal}%',
            net.signal_bars,
            escape(net.security_label),
            escape(net.bssid),
            style='success' if net.in_use else None,
        )
    console.print(table)


def print_status(device, details):
    """Render the active connection as a panel."""
    if details is None:
        console.print(f'[header]{escape(device)}[/]: not connected', style='warning')
        return

    rows = [
        ('SSID', details.ssid),
        ('BSSID', details.bssid),
        ('Signal', f'{details.signal}%' if details.signal else ''),
        ('Security', details.security),
        ('IP address', f'{details.ip4_address}/{details.ip4_subnet}'
         if details.ip4_address else ''),
        ('Gateway', details.ip4_gateway),
        ('DNS', details.ip4_dns),
        ('IPv6', details.ip6_address),
        ('MAC address', details.mac_address),
        ('Profile', details.connection_id),
        ('Auto-connect', 'yes' if details.auto_connect else 'no'),
    ]
    body = '\n'.join(f'[info]{label:<13}[/] {escape(value)}' for label, value in rows if value)
    console.print(Panel(body, title=f'Connected on {escape(details.device)}', border_style='success'))


def _resolve_interface(backend, requested):
    """Validate -i against the device list; returns (device, exit_code)."""
    names = [d.name for d in backend.list_devices()]
    if requested:
        if requested not in names:
            valid = ', '.join(names) or 'none'
            console.print(f'Invalid interface [{requested}], valid values: {valid}',
                          style='error', markup=False)
            return None, EXIT_USAGE
        return requested, EXIT_OK
    if not names:
        console.print('No Wi-Fi device found', style='error')
        return None, EXIT_FAILED
    return names[0], EXIT_OK


def main(argv=None):
    """CLI entry point."""
    args = build_parser().parse_args(argv)
    interactive = not (args.status or args.rescan or args.list or args.disconnect)
    setup_logging(verbose=args.verbose, interactive=interactive)

    backend = create_backend()
    if not backend.check_installed():
        console.print('nmcli not found. Please install NetworkManager.', style='error')
        return EXIT_FAILED

    if interactive:
        if args.interface:
            device, code = _resolve_interface(backend, args.interface)
            if device is None:
                return code
        run(backend, args.interface)
        return EXIT_OK

    device, code = _resolve_interface(backend, args.interface)
    if device is None:
        return code

    try:
        if args.status:
            details = backend.get_details(device)
            print_status(device, details)
            return EXIT_OK if details else EXIT_FAILED

        if args.disconnect:
            backend.disconnect(device)
            console.print(f'Disconnected {device}', style='success')
            return EXIT_OK

        if args.rescan:
            with console.status('Scanning...'):
                backend.rescan(device)
                networks = backend.scan(device)
        else:
            networks = backend.scan(device)
        print_networks(networks)
        return EXIT_OK
    except NmcliError as e:
        logger.debug(f'Command failed: {e}')
        console.print(f'Error: {e}', style='error', markup=False)
        return EXIT_FAILED


if __name__ == '__main__':
    sys.exit(main())
