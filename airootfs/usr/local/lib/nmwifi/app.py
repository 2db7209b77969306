"""nmwifi - Interactive terminal mode.

``WiFiTui`` holds the screen state and maps keystrokes to backend calls;
``screen.draw`` renders it.  Every backend call is synchronous: the
status bar shows a busy message, the screen is redrawn once, and the
call blocks until nmcli exits.
"""

import curses
import os
from enum import Enum
from typing import Callable, List, Optional

from loguru import logger

from .config import STATE_FILE, AppState, load_state, save_state
from .interfaces import (
    BackendInterface,
    NmcliError,
    WiFiDevice,
    WiFiNetwork,
    STATUS_CONNECTED,
    STATUS_PASSWORD_REQUIRED,
    STATUS_WRONG_PASSWORD,
)
from .screen import draw
from .theme import apply_theme
from .translations import detect_system_language, get_text


class Mode(Enum):
    PROCESSING = 'processing'
    BROWSING = 'browsing'
    PASSWORD = 'password'
    ACTION_MENU = 'action_menu'
    INTERFACE_MENU = 'interface_menu'
    MESSAGE = 'message'


# Action menu for the network in use; values are translation keys
ACTION_ITEMS = ('disconnect', 'forget', 'details', 'cancel')

# get_wch() returns str for characters and int for function keys
ENTER_KEYS = {curses.KEY_ENTER, '\n', '\r'}
ESCAPE_KEYS = {'\x1b'}
BACKSPACE_KEYS = {curses.KEY_BACKSPACE, '\x7f', '\b'}
TAB_KEYS = {'\t'}
DOWN_KEYS = {curses.KEY_DOWN, 'j'}
UP_KEYS = {curses.KEY_UP, 'k'}
QUIT_KEYS = {'q', 'Q'} | ESCAPE_KEYS


class WiFiTui:
    """State and key dispatch of the interactive Wi-Fi list."""

    def __init__(self, backend: BackendInterface, interface: Optional[str] = None,
                 state: Optional[AppState] = None, state_path: str = STATE_FILE,
                 language: Optional[str] = None,
                 redraw: Optional[Callable[[], None]] = None):
        self._backend = backend
        self._state = state or AppState()
        self._state_path = state_path
        self._lang = language or detect_system_language()
        self._redraw = redraw or (lambda: None)
        self._requested_interface = interface

        self.running = True
        self.mode = Mode.PROCESSING
        self.interface: Optional[str] = None
        self.status_message = self.t('scanning')

        self.networks: List[WiFiNetwork] = []
        self.selected: Optional[int] = None
        self.offset = 0
        self.page_size = 10

        self.target: Optional[WiFiNetwork] = None
        self.password = ''
        self.show_password = self._state.show_password
        self.prompt_error = ''

        self.action_index = 0
        self.devices: List[WiFiDevice] = []
        self.device_index = 0

        self.message = ''
        self.message_lines: List[str] = []

    # -- Translation helper ------------------------------------------------

    def t(self, key, **kwargs):
        """Return translated text for the current language."""
        return get_text(key, self._lang, **kwargs)

    # -- Selection ---------------------------------------------------------

    @property
    def selected_network(self) -> Optional[WiFiNetwork]:
        if self.selected is None:
            return None
        return self.networks[self.selected]

    def next_network(self):
        if not self.networks:
            return
        if self.selected is None or self.selected >= len(self.networks) - 1:
            self.selected = 0
        else:
            self.selected += 1

    def previous_network(self):
        if not self.networks:
            return
        if self.selected is None or self.selected == 0:
            self.selected = len(self.networks) - 1
        else:
            self.selected -= 1

    def _move_to(self, index):
        if self.networks:
            self.selected = max(0, min(index, len(self.networks) - 1))

    def _set_networks(self, networks: List[WiFiNetwork]):
        """Replace the list, keeping the selection on the same SSID if present."""
        previous = self.selected_network.ssid if self.selected_network else None
        self.networks = networks
        if not networks:
            self.selected = None
            return
        ssids = [n.ssid for n in networks]
        self.selected = ssids.index(previous) if previous in ssids else 0

    # -- Mode helpers ------------------------------------------------------

    def _busy(self, message, func, *args):
        """Show *message* in the status bar, redraw once, then run *func*."""
        self.mode = Mode.PROCESSING
        self.status_message = message
        self._redraw()
        return func(*args)

    def show_message(self, message, lines=None):
        self.mode = Mode.MESSAGE
        self.message = message
        self.message_lines = list(lines or [])

    def _save_state(self):
        self._state.interface = self.interface
        self._state.show_password = self.show_password
        save_state(self._state, self._state_path)

    # -- Backend actions ---------------------------------------------------

    def start(self):
        """Resolve the interface and run the initial scan."""
        preferred = self._requested_interface or self._state.interface
        self.interface = self._backend.get_device(preferred)
        if self._requested_interface and self.interface != self._requested_interface:
            logger.warning(f'Interface {self._requested_interface} not found, '
                           f'using {self.interface}')
        if self.interface is None:
            self.show_message(self.t('no_devices'))
            return
        self.refresh()

    def refresh(self, rescan=False) -> bool:
        """Reload the network list; on failure the previous list is kept."""
        if rescan:
            self._busy(self.t('scanning'), self._backend.rescan, self.interface)
        try:
            networks = self._busy(self.t('scanning'), self._backend.scan, self.interface)
        except NmcliError as e:
            logger.error(f'Scan failed: {e}')
            self.show_message(self.t('error', error=e))
            return False
        self._set_networks(networks)
        self.mode = Mode.BROWSING
        return True

    def connect(self, password=None):
        network = self.target
        if password:
            message = self.t('verifying')
        else:
            message = self.t('connecting', ssid=network.ssid)
        status = self._busy(message, self._backend.connect, network, password, self.interface)

        if status == STATUS_CONNECTED:
            self.password = ''
            if self.refresh():
                self.show_message(self.t('connected_to', ssid=network.ssid))
        elif status == STATUS_PASSWORD_REQUIRED:
            self.mode = Mode.PASSWORD
            self.password = ''
            self.prompt_error = ''
        elif status == STATUS_WRONG_PASSWORD:
            self.password = ''
            self.show_message(self.t('wrong_password', ssid=network.ssid))
        else:
            self.show_message(self.t('connect_failed', ssid=network.ssid, error=status))

    def disconnect(self):
        try:
            self._busy(self.t('disconnecting'), self._backend.disconnect, self.interface)
        except NmcliError as e:
            self.show_message(self.t('error', error=e))
            return
        if self.refresh():
            self.show_message(self.t('disconnected'))

    def forget(self):
        ssid = self.target.ssid
        try:
            self._busy(self.t('forgetting', ssid=ssid), self._backend.forget, ssid)
        except NmcliError as e:
            self.show_message(self.t('error', error=e))
            return
        if self.refresh():
            self.show_message(self.t('forgotten'))

    def show_details(self):
        details = self._busy(self.t('loading_details'), self._backend.get_details,
                             self.interface)
        if details is None:
            self.show_message(self.t('not_connected'))
            return
        lines = [
            f"{self.t('ssid')}: {details.ssid}",
            f"{self.t('signal')}: {details.signal}%",
            f"{self.t('security')}: {details.security}",
            f"{self.t('ip_address')}: {details.ip4_address}/{details.ip4_subnet}",
            f"{self.t('gateway')}: {details.ip4_gateway}",
            f"{self.t('dns')}: {details.ip4_dns}",
            f"{self.t('mac_address')}: {details.mac_address}",
            f"{self.t('device')}: {details.device}",
        ]
        self.show_message(self.t('details'), lines)

    def open_interface_menu(self):
        self.devices = self._busy(self.t('scanning'), self._backend.list_devices)
        if not self.devices:
            self.show_message(self.t('no_devices'))
            return
        if len(self.devices) == 1:
            self.show_message(self.t('single_device', device=self.devices[0].name))
            return
        names = [d.name for d in self.devices]
        self.device_index = names.index(self.interface) if self.interface in names else 0
        self.mode = Mode.INTERFACE_MENU

    def switch_interface(self, name):
        self.interface = name
        self._save_state()
        self.networks = []
        self.selected = None
        self.offset = 0
        if self.refresh():
            self.show_message(self.t('using_interface', device=name))

    # -- Key dispatch ------------------------------------------------------

    def handle_key(self, key) -> bool:
        """Process one key press; returns False once the user quits."""
        if key == curses.KEY_RESIZE:
            return self.running

        handler = {
            Mode.BROWSING: self._on_browsing_key,
            Mode.PASSWORD: self._on_password_key,
            Mode.ACTION_MENU: self._on_action_key,
            Mode.INTERFACE_MENU: self._on_interface_key,
            Mode.MESSAGE: self._on_message_key,
        }.get(self.mode)
        if handler:
            handler(key)
        return self.running

    def _on_browsing_key(self, key):
        if key in QUIT_KEYS:
            self.running = False
        elif key in DOWN_KEYS:
            self.next_network()
        elif key in UP_KEYS:
            self.previous_network()
        elif key in (curses.KEY_HOME, 'g'):
            self._move_to(0)
        elif key in (curses.KEY_END, 'G'):
            self._move_to(len(self.networks) - 1)
        elif key == curses.KEY_NPAGE:
            self._move_to((self.selected or 0) + self.page_size)
        elif key == curses.KEY_PPAGE:
            self._move_to((self.selected or 0) - self.page_size)
        elif key == 'r':
            self.refresh(rescan=True)
        elif key == 'i':
            self.open_interface_menu()
        elif key in ENTER_KEYS:
            network = self.selected_network
            if network is None:
                return
            self.target = network
            if network.in_use:
                self.action_index = 0
                self.mode = Mode.ACTION_MENU
            else:
                self.connect()

    def _on_password_key(self, key):
        if key in ESCAPE_KEYS:
            self.password = ''
            self.prompt_error = ''
            self.mode = Mode.BROWSING
        elif key in ENTER_KEYS:
            if not self.password:
                self.prompt_error = self.t('empty_password')
                return
            self.connect(self.password)
        elif key in TAB_KEYS:
            self.show_password = not self.show_password
            self._save_state()
        elif key in BACKSPACE_KEYS:
            self.password = self.password[:-1]
        elif isinstance(key, str) and len(key) == 1 and key.isprintable():
            self.password += key
            self.prompt_error = ''

    def _on_action_key(self, key):
        if key in ESCAPE_KEYS:
            self.mode = Mode.BROWSING
        elif key in DOWN_KEYS:
            self.action_index = (self.action_index + 1) % len(ACTION_ITEMS)
        elif key in UP_KEYS:
            self.action_index = (self.action_index - 1) % len(ACTION_ITEMS)
        elif key in ENTER_KEYS:
            action = ACTION_ITEMS[self.action_index]
            if action == 'disconnect':
                self.disconnect()
            elif action == 'forget':
                self.forget()
            elif action == 'details':
                self.show_details()
            else:
                self.mode = Mode.BROWSING

    def _on_interface_key(self, key):
        if key in ESCAPE_KEYS:
            self.mode = Mode.BROWSING
        elif key in DOWN_KEYS:
            self.device_index = (self.device_index + 1) % len(self.devices)
        elif key in UP_KEYS:
            self.device_index = (self.device_index - 1) % len(self.devices)
        elif key in ENTER_KEYS:
            self.switch_interface(self.devices[self.device_index].name)

    def _on_message_key(self, key):
        # Any key dismisses
        self.message = ''
        self.message_lines = []
        self.mode = Mode.BROWSING


# ---------------------------------------------------------------------------
# curses entry
# ---------------------------------------------------------------------------

def _curses_main(stdscr, backend, interface, state_path):
    try:
        curses.curs_set(0)
    except curses.error:
        pass
    stdscr.keypad(True)
    apply_theme()

    tui = WiFiTui(backend, interface, load_state(state_path), state_path,
                  redraw=lambda: draw(stdscr, tui))
    tui.start()

    while tui.running:
        draw(stdscr, tui)
        try:
            key = stdscr.get_wch()
        except curses.error:
            continue
        except KeyboardInterrupt:
            break
        tui.handle_key(key)


def run(backend: BackendInterface, interface: Optional[str] = None,
        state_path: str = STATE_FILE) -> None:
    """Run the interactive mode until the user quits."""
    # Esc should respond immediately instead of after curses' 1s default
    os.environ.setdefault('ESCDELAY', '25')
    logger.info('Starting interactive mode')
    curses.wrapper(_curses_main, backend, interface, state_path)
