#!/usr/bin/env python3
"""
Tests for the nmwifi interactive mode.

Drives ``WiFiTui`` key by key against the in-memory mock backend, so no
terminal, curses screen or NetworkManager is needed.  The pure
formatting helpers of ``nmwifi.screen`` are covered at the end.
"""

import curses
import json
import os
import shutil
import sys
import tempfile
import unittest
from unittest.mock import MagicMock

# ---------------------------------------------------------------------------
# Paths
# ---------------------------------------------------------------------------
REPO_DIR = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
LIB_DIR = os.path.join(REPO_DIR, "airootfs", "usr", "local", "lib")
sys.path.insert(0, LIB_DIR)

from nmwifi.app import ACTION_ITEMS, Mode, WiFiTui
from nmwifi.config import AppState
from nmwifi.interfaces import NmcliError, WiFiDevice, WiFiNetwork
from nmwifi.mock_backend import MOCK_PASSWORD, MockWiFiBackend
from nmwifi.screen import (
    adjust_offset,
    centered_rect,
    clip,
    format_network_row,
    mask_password,
    status_text,
    text_width,
    truncate_ssid,
)

LONG_SSID = 'Neighbour With A Really Long Network Name'


class TuiTestCase(unittest.TestCase):
    """Common fixture: a started TUI over the mock backend."""

    devices = None

    def setUp(self):
        self.tmpdir = tempfile.mkdtemp()
        self.state_path = os.path.join(self.tmpdir, 'nmwifi', 'state.json')
        self.backend = MockWiFiBackend(devices=self.devices)
        self.redraw = MagicMock()
        self.tui = WiFiTui(self.backend, state_path=self.state_path,
                           language='English', redraw=self.redraw)
        self.tui.start()

    def tearDown(self):
        shutil.rmtree(self.tmpdir, ignore_errors=True)

    def press(self, *keys):
        for key in keys:
            self.tui.handle_key(key)

    def type_text(self, text):
        self.press(*text)

    def select(self, ssid):
        self.tui.selected = [n.ssid for n in self.tui.networks].index(ssid)


# ═══════════════════════════════════════════════════════════════════════════
# Start-up
# ═══════════════════════════════════════════════════════════════════════════
class TestStart(TuiTestCase):
    """Verify the initial scan and interface resolution."""

    def test_browsing_after_start(self):
        self.assertEqual(self.tui.mode, Mode.BROWSING)
        self.assertEqual(self.tui.interface, 'wlan0')
        self.assertEqual(len(self.tui.networks), 4)
        self.assertEqual(self.tui.selected, 0)
        self.redraw.assert_called()

    def test_sorted_by_signal(self):
        signals = [n.signal for n in self.tui.networks]
        self.assertEqual(signals, sorted(signals, reverse=True))

    def test_no_device(self):
        tui = WiFiTui(MockWiFiBackend(devices=[]), state_path=self.state_path,
                      language='English')
        tui.start()
        self.assertEqual(tui.mode, Mode.MESSAGE)
        self.assertEqual(tui.message, 'No Wi-Fi device found')

    def test_saved_interface_used(self):
        backend = MockWiFiBackend(devices=['wlan0', 'wlan1'])
        tui = WiFiTui(backend, state=AppState(interface='wlan1'),
                      state_path=self.state_path, language='English')
        tui.start()
        self.assertEqual(tui.interface, 'wlan1')

    def test_requested_interface_wins(self):
        backend = MockWiFiBackend(devices=['wlan0', 'wlan1'])
        tui = WiFiTui(backend, interface='wlan0', state=AppState(interface='wlan1'),
                      state_path=self.state_path, language='English')
        tui.start()
        self.assertEqual(tui.interface, 'wlan0')

    def test_empty_list(self):
        tui = WiFiTui(MockWiFiBackend(networks=[]), state_path=self.state_path,
                      language='English')
        tui.start()
        self.assertEqual(tui.mode, Mode.BROWSING)
        self.assertIsNone(tui.selected)
        self.assertIsNone(tui.selected_network)


# ═══════════════════════════════════════════════════════════════════════════
# Browsing
# ═══════════════════════════════════════════════════════════════════════════
class TestNavigation(TuiTestCase):
    """Verify list navigation keys."""

    def test_down_and_up(self):
        self.press(curses.KEY_DOWN)
        self.assertEqual(self.tui.selected, 1)
        self.press('j')
        self.assertEqual(self.tui.selected, 2)
        self.press(curses.KEY_UP, 'k')
        self.assertEqual(self.tui.selected, 0)

    def test_wraps_around(self):
        self.press(curses.KEY_UP)
        self.assertEqual(self.tui.selected, 3)
        self.press(curses.KEY_DOWN)
        self.assertEqual(self.tui.selected, 0)

    def test_home_end(self):
        self.press('G')
        self.assertEqual(self.tui.selected, 3)
        self.press(curses.KEY_HOME)
        self.assertEqual(self.tui.selected, 0)
        self.press(curses.KEY_END)
        self.assertEqual(self.tui.selected, 3)
        self.press('g')
        self.assertEqual(self.tui.selected, 0)

    def test_page_keys_clamp(self):
        self.tui.page_size = 2
        self.press(curses.KEY_NPAGE)
        self.assertEqual(self.tui.selected, 2)
        self.press(curses.KEY_NPAGE)
        self.assertEqual(self.tui.selected, 3)
        self.press(curses.KEY_PPAGE, curses.KEY_PPAGE)
        self.assertEqual(self.tui.selected, 0)

    def test_navigation_on_empty_list(self):
        self.tui._set_networks([])
        self.press(curses.KEY_DOWN, curses.KEY_UP, '\n')
        self.assertIsNone(self.tui.selected)
        self.assertEqual(self.tui.mode, Mode.BROWSING)

    def test_resize_ignored(self):
        self.press(curses.KEY_RESIZE)
        self.assertEqual(self.tui.mode, Mode.BROWSING)
        self.assertEqual(self.tui.selected, 0)

    def test_quit(self):
        self.assertFalse(self.tui.handle_key('q'))
        self.assertFalse(self.tui.running)

    def test_escape_quits(self):
        self.press('\x1b')
        self.assertFalse(self.tui.running)


class TestRefresh(TuiTestCase):
    """Verify rescan and scan-failure handling."""

    def test_rescan_key(self):
        self.press('r')
        self.assertEqual(self.backend.rescans, 1)
        self.assertEqual(self.tui.mode, Mode.BROWSING)

    def test_selection_kept_by_ssid(self):
        self.select('Office-5G')
        self.press('r')
        self.assertEqual(self.tui.selected_network.ssid, 'Office-5G')

    def test_scan_failure_keeps_list(self):
        before = list(self.tui.networks)
        self.backend.fail_scan = 'NetworkManager is not running.'
        self.press('r')
        self.assertEqual(self.tui.mode, Mode.MESSAGE)
        self.assertEqual(self.tui.message, 'Error: NetworkManager is not running.')
        self.assertEqual(self.tui.networks, before)

    def test_busy_message_shown_before_call(self):
        seen = []
        self.redraw.side_effect = lambda: seen.append((self.tui.mode, self.tui.status_message))
        self.press('r')
        self.assertIn((Mode.PROCESSING, 'Scanning...'), seen)


# ═══════════════════════════════════════════════════════════════════════════
# Connecting
# ═══════════════════════════════════════════════════════════════════════════
class TestConnect(TuiTestCase):
    """Verify the connect flow including the password prompt."""

    def test_open_network(self):
        self.select('CoffeeShop')
        self.press('\n')
        self.assertEqual(self.tui.mode, Mode.MESSAGE)
        self.assertEqual(self.tui.message, 'Connected to CoffeeShop')
        self.assertTrue(self.tui.networks[0].in_use)
        self.assertEqual(self.tui.networks[0].ssid, 'CoffeeShop')

    def test_secured_network_prompts(self):
        self.select('HomeNet')
        self.press(curses.KEY_ENTER)
        self.assertEqual(self.tui.mode, Mode.PASSWORD)
        self.assertEqual(self.tui.target.ssid, 'HomeNet')
        self.assertEqual(self.tui.password, '')

    def test_password_connects(self):
        self.select('HomeNet')
        self.press('\n')
        self.type_text(MOCK_PASSWORD)
        self.assertEqual(self.tui.password, MOCK_PASSWORD)
        self.press('\n')
        self.assertEqual(self.tui.mode, Mode.MESSAGE)
        self.assertEqual(self.tui.message, 'Connected to HomeNet')
        self.assertEqual(self.tui.password, '')
        self.assertEqual(self.backend.get_active_ssid('wlan0'), 'HomeNet')

    def test_wrong_password(self):
        self.select('HomeNet')
        self.press('\n')
        self.type_text('nope1234')
        self.press('\r')
        self.assertEqual(self.tui.mode, Mode.MESSAGE)
        self.assertEqual(self.tui.message, 'Wrong password for HomeNet')
        self.assertEqual(self.tui.password, '')
        self.assertIsNone(self.backend.get_active_ssid('wlan0'))

    def test_empty_password_rejected(self):
        self.select('HomeNet')
        self.press('\n', '\n')
        self.assertEqual(self.tui.mode, Mode.PASSWORD)
        self.assertEqual(self.tui.prompt_error, 'Password cannot be empty')
        self.press('x')
        self.assertEqual(self.tui.prompt_error, '')

    def test_backspace(self):
        self.select('HomeNet')
        self.press('\n')
        self.type_text('abc')
        self.press(curses.KEY_BACKSPACE)
        self.assertEqual(self.tui.password, 'ab')
        self.press('\x7f', '\b', '\x7f')
        self.assertEqual(self.tui.password, '')

    def test_control_keys_not_typed(self):
        self.select('HomeNet')
        self.press('\n')
        self.press(curses.KEY_LEFT, '\x01', 'a')
        self.assertEqual(self.tui.password, 'a')

    def test_escape_cancels(self):
        self.select('HomeNet')
        self.press('\n')
        self.type_text('secret')
        self.press('\x1b')
        self.assertEqual(self.tui.mode, Mode.BROWSING)
        self.assertEqual(self.tui.password, '')
        self.assertTrue(self.tui.running)

    def test_tab_toggles_and_persists(self):
        self.select('HomeNet')
        self.press('\n')
        self.assertFalse(self.tui.show_password)
        self.press('\t')
        self.assertTrue(self.tui.show_password)
        with open(self.state_path, encoding='utf-8') as f:
            data = json.load(f)
        self.assertTrue(data['show_password'])
        self.assertEqual(data['interface'], 'wlan0')

    def test_saved_profile_connects_without_prompt(self):
        self.select('HomeNet')
        self.press('\n')
        self.type_text(MOCK_PASSWORD)
        self.press('\n')
        self.backend.disconnect('wlan0')
        self.press('x', 'r')
        self.select('HomeNet')
        self.press('\n')
        self.assertEqual(self.tui.message, 'Connected to HomeNet')

    def test_generic_failure(self):
        backend = MagicMock()
        backend.get_device.return_value = 'wlan0'
        backend.scan.return_value = [WiFiNetwork(ssid='Gone', security='WPA2', signal=50)]
        backend.connect.return_value = "Error: No network with SSID 'Gone' found."
        tui = WiFiTui(backend, state_path=self.state_path, language='English')
        tui.start()
        tui.handle_key('\n')
        self.assertEqual(tui.mode, Mode.MESSAGE)
        self.assertEqual(tui.message,
                         "Failed to connect to Gone: Error: No network with SSID 'Gone' found.")
        backend.connect.assert_called_once_with(tui.networks[0], None, 'wlan0')


# ═══════════════════════════════════════════════════════════════════════════
# Action menu
# ═══════════════════════════════════════════════════════════════════════════
class TestActionMenu(TuiTestCase):
    """Verify the menu offered for the network in use."""

    def setUp(self):
        super().setUp()
        self.select('CoffeeShop')
        self.press('\n', 'x')
        self.assertTrue(self.tui.networks[0].in_use)
        self.tui.selected = 0
        self.press('\n')

    def test_menu_opens(self):
        self.assertEqual(self.tui.mode, Mode.ACTION_MENU)
        self.assertEqual(self.tui.action_index, 0)
        self.assertEqual(self.tui.target.ssid, 'CoffeeShop')

    def test_menu_wraps(self):
        self.press(curses.KEY_UP)
        self.assertEqual(ACTION_ITEMS[self.tui.action_index], 'cancel')
        self.press('j')
        self.assertEqual(ACTION_ITEMS[self.tui.action_index], 'disconnect')

    def test_disconnect(self):
        self.press('\n')
        self.assertEqual(self.tui.mode, Mode.MESSAGE)
        self.assertEqual(self.tui.message, 'Disconnected')
        self.assertIsNone(self.backend.get_active_ssid('wlan0'))
        self.assertFalse(any(n.in_use for n in self.tui.networks))

    def test_forget(self):
        self.press(curses.KEY_DOWN, '\n')
        self.assertEqual(self.tui.message, 'Network forgotten')
        self.assertEqual(self.backend.get_saved_connections(), [])

    def test_forget_failure(self):
        self.backend.forget('CoffeeShop')
        self.press(curses.KEY_DOWN, '\n')
        self.assertEqual(self.tui.mode, Mode.MESSAGE)
        self.assertEqual(self.tui.message, "Error: Error: unknown connection 'CoffeeShop'.")

    def test_details(self):
        self.press(curses.KEY_DOWN, curses.KEY_DOWN, '\n')
        self.assertEqual(self.tui.mode, Mode.MESSAGE)
        self.assertEqual(self.tui.message, 'Details')
        self.assertEqual(len(self.tui.message_lines), 8)
        self.assertEqual(self.tui.message_lines[0], 'SSID: CoffeeShop')
        self.assertIn('IP address: 192.168.1.50/255.255.255.0', self.tui.message_lines)
        self.press(' ')
        self.assertEqual(self.tui.mode, Mode.BROWSING)
        self.assertEqual(self.tui.message_lines, [])

    def test_cancel(self):
        self.press('k', '\n')
        self.assertEqual(self.tui.mode, Mode.BROWSING)
        self.assertEqual(self.backend.get_active_ssid('wlan0'), 'CoffeeShop')

    def test_escape(self):
        self.press('\x1b')
        self.assertEqual(self.tui.mode, Mode.BROWSING)
        self.assertTrue(self.tui.running)


class TestDetailsFailure(TuiTestCase):

    def test_details_without_connection(self):
        self.tui.target = self.tui.networks[0]
        self.tui.show_details()
        self.assertEqual(self.tui.mode, Mode.MESSAGE)
        self.assertEqual(self.tui.message, 'Not connected')


# ═══════════════════════════════════════════════════════════════════════════
# Interface menu
# ═══════════════════════════════════════════════════════════════════════════
class TestInterfaceMenu(TuiTestCase):
    """Verify interface selection with several devices."""

    devices = ['wlan0', 'wlan1']

    def test_switch(self):
        self.press('i')
        self.assertEqual(self.tui.mode, Mode.INTERFACE_MENU)
        self.assertEqual(self.tui.device_index, 0)
        self.press(curses.KEY_DOWN, '\n')
        self.assertEqual(self.tui.interface, 'wlan1')
        self.assertEqual(self.tui.mode, Mode.MESSAGE)
        self.assertEqual(self.tui.message, 'Using interface wlan1')
        with open(self.state_path, encoding='utf-8') as f:
            self.assertEqual(json.load(f)['interface'], 'wlan1')

    def test_menu_wraps(self):
        self.press('i', curses.KEY_UP)
        self.assertEqual(self.tui.device_index, 1)
        self.press('j')
        self.assertEqual(self.tui.device_index, 0)

    def test_escape(self):
        self.press('i', '\x1b')
        self.assertEqual(self.tui.mode, Mode.BROWSING)
        self.assertEqual(self.tui.interface, 'wlan0')


class TestSingleInterface(TuiTestCase):

    def test_single_device_message(self):
        self.press('i')
        self.assertEqual(self.tui.mode, Mode.MESSAGE)
        self.assertEqual(self.tui.message, 'Only one Wi-Fi device available: wlan0')


# ═══════════════════════════════════════════════════════════════════════════
# Screen helpers
# ═══════════════════════════════════════════════════════════════════════════
class TestTruncateSsid(unittest.TestCase):

    def test_short_unchanged(self):
        self.assertEqual(truncate_ssid('HomeNet'), 'HomeNet')

    def test_exact_limit_unchanged(self):
        self.assertEqual(truncate_ssid('x' * 25), 'x' * 25)

    def test_long_truncated(self):
        result = truncate_ssid(LONG_SSID)
        self.assertEqual(len(result), 25)
        self.assertTrue(result.endswith('...'))
        self.assertEqual(result, LONG_SSID[:22] + '...')

    def test_wide_chars_truncated_by_columns(self):
        ssid = '無線' * 10
        result = truncate_ssid(ssid)
        self.assertEqual(result, '無線' * 5 + '無...')
        self.assertLessEqual(text_width(result), 25)

    def test_wide_chars_within_limit(self):
        self.assertEqual(truncate_ssid('無線' * 6), '無線' * 6)


class TestFormatNetworkRow(unittest.TestCase):

    def test_columns(self):
        row = format_network_row(WiFiNetwork(ssid='HomeNet', signal=82, security='WPA2'))
        self.assertTrue(row.startswith('  ████ HomeNet'))
        self.assertIn(' 82% WPA2', row)

    def test_in_use_marker(self):
        row = format_network_row(WiFiNetwork(ssid='Cafe', signal=5, in_use=True))
        self.assertTrue(row.startswith('* ░░░░ Cafe'))
        self.assertTrue(row.endswith('  5% Open'))

    def test_rows_align(self):
        a = format_network_row(WiFiNetwork(ssid='A', signal=50, security='WPA2'))
        b = format_network_row(WiFiNetwork(ssid=LONG_SSID, signal=50, security='WPA2'))
        self.assertEqual(a.index('50%'), b.index('50%'))

    def test_wide_rows_align(self):
        a = format_network_row(WiFiNetwork(ssid='A', signal=50, security='WPA2'))
        b = format_network_row(WiFiNetwork(ssid='無線' * 13, signal=50, security='WPA2'))
        self.assertEqual(text_width(a[:a.index('50%')]), text_width(b[:b.index('50%')]))

    def test_security_clipped(self):
        row = format_network_row(WiFiNetwork(ssid='A', signal=50,
                                             security='WPA1 WPA2 802.1X'))
        self.assertTrue(row.endswith('WPA1 WPA2 80'))


class TestStatusText(TuiTestCase):

    def test_browsing_help(self):
        self.select('HomeNet')
        self.assertEqual(status_text(self.tui),
                         ' r: Rescan | i: Interface | Enter: Connect | q: Quit ')

    def test_full_ssid_for_truncated(self):
        self.select(LONG_SSID)
        self.assertTrue(status_text(self.tui).startswith(f' Full SSID: {LONG_SSID} | '))

    def test_password_hint(self):
        self.select('HomeNet')
        self.press('\n')
        self.assertIn('Tab: Show/Hide', status_text(self.tui))

    def test_message(self):
        self.tui.show_message('Disconnected')
        self.assertEqual(status_text(self.tui), ' Disconnected (Press any key)')

    def test_processing(self):
        self.tui.mode = Mode.PROCESSING
        self.tui.status_message = 'Scanning...'
        self.assertEqual(status_text(self.tui), ' Scanning... ')


class TestLayoutHelpers(unittest.TestCase):

    def test_centered_rect(self):
        self.assertEqual(centered_rect(60, 20, 50, 100), (20, 20, 10, 60))

    def test_centered_rect_minimum(self):
        y, x, h, w = centered_rect(40, 25, 12, 40, min_h=6, min_w=24)
        self.assertEqual((h, w), (6, 24))
        self.assertEqual((y, x), (3, 8))

    def test_centered_rect_clamped_to_screen(self):
        _, _, h, w = centered_rect(60, 20, 5, 20, min_h=10, min_w=40)
        self.assertEqual((h, w), (5, 20))

    def test_adjust_offset(self):
        self.assertEqual(adjust_offset(0, 0, 5), 0)
        self.assertEqual(adjust_offset(7, 0, 5), 3)
        self.assertEqual(adjust_offset(2, 3, 5), 2)
        self.assertEqual(adjust_offset(5, 3, 5), 3)
        self.assertEqual(adjust_offset(None, 4, 5), 0)

    def test_clip_wide_chars(self):
        self.assertEqual(text_width('無線'), 4)
        self.assertEqual(clip('無線LAN', 3), '無')
        self.assertEqual(clip('abc', 10), 'abc')
        self.assertEqual(clip('abc', 0), '')

    def test_mask_password(self):
        self.assertEqual(mask_password('secret', False), '******')
        self.assertEqual(mask_password('secret', True), 'secret')


class TestMockBackend(unittest.TestCase):
    """Verify the mock backend behaves like nmcli for the UI."""

    def setUp(self):
        self.backend = MockWiFiBackend(devices=['wlan0', 'wlan1'])

    def test_devices(self):
        self.assertTrue(self.backend.check_available())
        self.assertTrue(self.backend.check_installed())
        self.assertEqual([d.name for d in self.backend.list_devices()], ['wlan0', 'wlan1'])
        self.assertEqual(self.backend.get_device('wlan9'), 'wlan0')

    def test_connect_marks_device(self):
        net = WiFiNetwork(ssid='CoffeeShop')
        self.assertEqual(self.backend.connect(net, interface='wlan1'), 'connected')
        devices = {d.name: d for d in self.backend.list_devices()}
        self.assertEqual(devices['wlan1'], WiFiDevice('wlan1', 'connected', 'CoffeeShop'))
        self.assertFalse(devices['wlan0'].is_connected)

    def test_unknown_network(self):
        status = self.backend.connect(WiFiNetwork(ssid='Ghost'))
        self.assertIn('Ghost', status)

    def test_disconnect_inactive_raises(self):
        with self.assertRaises(NmcliError):
            self.backend.disconnect('wlan0')

    def test_forget_clears_active(self):
        self.backend.connect(WiFiNetwork(ssid='HomeNet'), MOCK_PASSWORD)
        self.backend.forget('HomeNet')
        self.assertIsNone(self.backend.get_active_ssid())
        self.assertIsNone(self.backend.get_details())


if __name__ == '__main__':
    unittest.main()
