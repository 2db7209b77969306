"""nmwifi - curses rendering.

Draws the network list, the status bar and the popups (password prompt,
action menu, interface menu, connection details) for a ``WiFiTui``.
The formatting helpers at the top are pure and used by tests.
"""

import curses
import unicodedata

from .config import (
    MAX_SSID_DISPLAY_LEN,
    MENU_HEIGHT_PERCENT,
    MENU_WIDTH_PERCENT,
    POPUP_HEIGHT_PERCENT,
    POPUP_WIDTH_PERCENT,
    SECURITY_COLUMN_WIDTH,
)
from .theme import (
    PAIR_ACTIVE,
    PAIR_DANGER,
    PAIR_MESSAGE,
    PAIR_POPUP,
    PAIR_PROCESSING,
    PAIR_SELECTED,
    PAIR_STATUS,
    PAIR_TITLE,
    attr,
)

MIN_HEIGHT = 5
MIN_WIDTH = 20


# ---------------------------------------------------------------------------
# Formatting helpers
# ---------------------------------------------------------------------------

def char_width(ch):
    """Terminal columns taken by one character (2 for wide CJK glyphs)."""
    return 2 if unicodedata.east_asian_width(ch) in ('W', 'F') else 1


def text_width(text):
    return sum(char_width(ch) for ch in text)


def clip(text, width):
    """Cut *text* so it occupies at most *width* terminal columns."""
    if width <= 0:
        return ''
    used = 0
    for i, ch in enumerate(text):
        used += char_width(ch)
        if used > width:
            return text[:i]
    return text


def truncate_ssid(ssid, limit=MAX_SSID_DISPLAY_LEN):
    """Shorten SSIDs wider than *limit* columns, ending in '...'."""
    if is_truncated(ssid, limit) and limit > 3:
        return clip(ssid, limit - 3) + '...'
    return ssid


def is_truncated(ssid, limit=MAX_SSID_DISPLAY_LEN):
    return text_width(ssid) > limit


def format_network_row(network):
    """One list row: in-use marker, bars, SSID, signal and security."""
    marker = '*' if network.in_use else ' '
    name = truncate_ssid(network.ssid)
    padding = ' ' * max(0, MAX_SSID_DISPLAY_LEN - text_width(name))
    security = network.security_label[:SECURITY_COLUMN_WIDTH]
    return f'{marker} {network.signal_bars} {name}{padding} {network.signal:>3}% {security}'


def mask_password(password, visible):
    return password if visible else '*' * len(password)


def status_text(tui):
    """Status bar content for the current mode."""
    from .app import Mode

    if tui.mode == Mode.PROCESSING:
        return f' {tui.status_message} '
    if tui.mode == Mode.MESSAGE:
        return f' {tui.message} {tui.t("press_any_key")}'
    if tui.mode == Mode.PASSWORD:
        return f' {tui.t("password_hint")} '
    if tui.mode == Mode.ACTION_MENU:
        return f' {tui.t("select_action")} '
    if tui.mode == Mode.INTERFACE_MENU:
        return f' {tui.t("interface_hint")} '

    network = tui.selected_network
    if network is not None and is_truncated(network.ssid):
        return f' {tui.t("full_ssid", ssid=network.ssid)} | {tui.t("help_browse")} '
    return f' {tui.t("help_browse")} '


def centered_rect(percent_x, percent_y, height, width, min_h=0, min_w=0):
    """Return (y, x, h, w) of a box centered in a height x width area."""
    h = min(height, max(min_h, height * percent_y // 100))
    w = min(width, max(min_w, width * percent_x // 100))
    return (height - h) // 2, (width - w) // 2, h, w


def adjust_offset(selected, offset, visible):
    """Scroll offset that keeps *selected* inside a window of *visible* rows."""
    if selected is None or visible <= 0:
        return 0
    if selected < offset:
        return selected
    if selected >= offset + visible:
        return selected - visible + 1
    return offset


# ---------------------------------------------------------------------------
# Drawing
# ---------------------------------------------------------------------------

def _put(win, y, x, text, attribute=0):
    """Write clipped text; the last column is never touched."""
    h, w = win.getmaxyx()
    if y < 0 or y >= h or x >= w - 1:
        return
    win.addstr(y, x, clip(text, w - x - 1), attribute)


def _popup(title, height, width, percent_x, percent_y, min_h, min_w):
    y, x, h, w = centered_rect(percent_x, percent_y, height, width, min_h, min_w)
    win = curses.newwin(h, w, y, x)
    win.erase()
    win.attrset(attr(PAIR_POPUP))
    win.box()
    win.attrset(0)
    _put(win, 0, 2, f' {title} ', attr(PAIR_POPUP, curses.A_BOLD))
    return win


def _draw_network_list(stdscr, tui, height, width):
    from .app import Mode

    win = stdscr.derwin(height, width, 0, 0)
    win.box()
    title = tui.t('title')
    if tui.interface:
        title = f'{title} ({tui.interface})'
    _put(win, 0, 2, f' {title} ', attr(PAIR_TITLE, curses.A_BOLD))

    visible = height - 2
    tui.page_size = max(1, visible)
    tui.offset = adjust_offset(tui.selected, tui.offset, visible)

    if not tui.networks and tui.mode != Mode.PROCESSING:
        _put(win, 1, 2, tui.t('no_networks'), curses.A_DIM)
        return

    rows = tui.networks[tui.offset:tui.offset + visible]
    for i, network in enumerate(rows):
        index = tui.offset + i
        line = format_network_row(network).ljust(width - 2)
        if index == tui.selected:
            attribute = attr(PAIR_SELECTED, curses.A_BOLD)
        elif network.in_use:
            attribute = attr(PAIR_ACTIVE)
        else:
            attribute = 0
        _put(win, 1 + i, 1, line, attribute)


def _draw_status_bar(stdscr, tui, y, width):
    from .app import Mode

    pair = {
        Mode.PROCESSING: PAIR_PROCESSING,
        Mode.MESSAGE: PAIR_MESSAGE,
    }.get(tui.mode, PAIR_STATUS)
    text = status_text(tui)
    text += ' ' * max(0, width - 1 - text_width(text))
    _put(stdscr, y, 0, text, attr(pair))


def _draw_password_popup(tui, height, width):
    win = _popup(tui.t('connect_to', ssid=truncate_ssid(tui.target.ssid)),
                 height, width, POPUP_WIDTH_PERCENT, POPUP_HEIGHT_PERCENT, 6, 30)
    field = mask_password(tui.password, tui.show_password)
    _put(win, 1, 2, f"{tui.t('password')}: {field}", attr(PAIR_POPUP))
    if tui.prompt_error:
        _put(win, 3, 2, tui.prompt_error, attr(PAIR_DANGER))
    else:
        _put(win, 3, 2, tui.t('password_hint'), curses.A_DIM)
    win.noutrefresh()


def _draw_menu_popup(title, items, current, highlight, height, width):
    win = _popup(title, height, width, MENU_WIDTH_PERCENT, MENU_HEIGHT_PERCENT,
                 len(items) + 2, 24)
    for i, label in enumerate(items):
        _put(win, 1 + i, 2, f' {label} '.ljust(win.getmaxyx()[1] - 4),
             attr(highlight) if i == current else 0)
    win.noutrefresh()


def _draw_details_popup(tui, height, width):
    lines = tui.message_lines
    win = _popup(tui.message, height, width, POPUP_WIDTH_PERCENT, 0,
                 len(lines) + 2, 40)
    for i, line in enumerate(lines):
        _put(win, 1 + i, 2, line)
    win.noutrefresh()


def draw(stdscr, tui):
    """Render the full screen for the current state of *tui*."""
    from .app import ACTION_ITEMS, Mode

    stdscr.erase()
    height, width = stdscr.getmaxyx()
    if height < MIN_HEIGHT or width < MIN_WIDTH:
        _put(stdscr, 0, 0, 'Terminal too small')
        stdscr.refresh()
        return

    _draw_network_list(stdscr, tui, height - 1, width)
    _draw_status_bar(stdscr, tui, height - 1, width)
    stdscr.noutrefresh()

    if tui.mode == Mode.PASSWORD and tui.target is not None:
        _draw_password_popup(tui, height, width)
    elif tui.mode == Mode.ACTION_MENU and tui.target is not None:
        _draw_menu_popup(truncate_ssid(tui.target.ssid),
                         [tui.t(item) for item in ACTION_ITEMS],
                         tui.action_index, PAIR_DANGER, height, width)
    elif tui.mode == Mode.INTERFACE_MENU:
        items = [f'{d.name}  {d.state} {d.connection}'.rstrip() for d in tui.devices]
        _draw_menu_popup(tui.t('select_interface'), items, tui.device_index,
                         PAIR_SELECTED, height, width)
    elif tui.mode == Mode.MESSAGE and tui.message_lines:
        _draw_details_popup(tui, height, width)

    curses.doupdate()
