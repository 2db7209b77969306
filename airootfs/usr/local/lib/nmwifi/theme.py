"""nmwifi - Nord theme for curses.

Maps the Nord color palette onto curses color pairs.  Terminals that can
redefine colors get the exact palette in extra color slots (the base 16
are left alone); others get the closest basic colors.  The terminal's
own background is kept in both cases.
"""

import curses

# Nord Color Palette
NORD_POLAR_NIGHT = {
    'nord0': '#2E3440',
    'nord1': '#3B4252',
    'nord2': '#434C5E',
    'nord3': '#4C566A',
}

NORD_SNOW_STORM = {
    'nord4': '#D8DEE9',
    'nord5': '#E5E9F0',
    'nord6': '#ECEFF4',
}

NORD_FROST = {
    'nord7': '#8FBCBB',
    'nord8': '#88C0D0',
    'nord9': '#81A1C1',
    'nord10': '#5E81AC',
}

NORD_AURORA = {
    'nord11': '#BF616A',
    'nord12': '#D08770',
    'nord13': '#EBCB8B',
    'nord14': '#A3BE8C',
    'nord15': '#B48EAD',
}

# Convenient flat access
NORD = {**NORD_POLAR_NIGHT, **NORD_SNOW_STORM, **NORD_FROST, **NORD_AURORA}

# Closest basic color for each Nord entry used below
_BASIC_FALLBACK = {
    'nord1': curses.COLOR_BLACK,
    'nord3': curses.COLOR_BLACK,
    'nord6': curses.COLOR_WHITE,
    'nord8': curses.COLOR_CYAN,
    'nord10': curses.COLOR_BLUE,
    'nord11': curses.COLOR_RED,
    'nord13': curses.COLOR_YELLOW,
    'nord14': curses.COLOR_GREEN,
}

# First color slot used for custom definitions
_CUSTOM_BASE = 16

# Color pair numbers
PAIR_TITLE = 1
PAIR_ACTIVE = 2
PAIR_SELECTED = 3
PAIR_STATUS = 4
PAIR_PROCESSING = 5
PAIR_MESSAGE = 6
PAIR_POPUP = 7
PAIR_DANGER = 8

# (pair, foreground, background); None keeps the terminal default
_PAIRS = (
    (PAIR_TITLE, 'nord8', None),
    (PAIR_ACTIVE, 'nord14', None),
    (PAIR_SELECTED, 'nord6', 'nord3'),
    (PAIR_STATUS, 'nord1', 'nord6'),
    (PAIR_PROCESSING, 'nord1', 'nord13'),
    (PAIR_MESSAGE, 'nord6', 'nord10'),
    (PAIR_POPUP, 'nord13', None),
    (PAIR_DANGER, 'nord6', 'nord11'),
)


def _hex_to_curses_rgb(hex_color):
    """Convert a hex color string to curses (r, g, b) in the 0-1000 range."""
    h = hex_color.lstrip('#')
    return tuple(int(h[i:i + 2], 16) * 1000 // 255 for i in (0, 2, 4))


def _can_use_custom_colors():
    return (curses.can_change_color()
            and curses.COLORS >= _CUSTOM_BASE + len(_BASIC_FALLBACK))


def apply_theme():
    """Initialise curses colors and the Nord color pairs.

    Must be called after ``curses.initscr`` (e.g. inside
    ``curses.wrapper``).  Does nothing on monochrome terminals.
    """
    if not curses.has_colors():
        return

    curses.start_color()
    curses.use_default_colors()

    slots = {}
    if _can_use_custom_colors():
        for offset, name in enumerate(sorted(_BASIC_FALLBACK)):
            slot = _CUSTOM_BASE + offset
            curses.init_color(slot, *_hex_to_curses_rgb(NORD[name]))
            slots[name] = slot
    else:
        slots = dict(_BASIC_FALLBACK)

    for pair, fg, bg in _PAIRS:
        curses.init_pair(pair, slots[fg], -1 if bg is None else slots[bg])


def attr(pair, extra=0):
    """Return the attribute for a color pair, or just *extra* without colors."""
    if curses.has_colors():
        return curses.color_pair(pair) | extra
    if pair in (PAIR_SELECTED, PAIR_STATUS, PAIR_PROCESSING, PAIR_MESSAGE, PAIR_DANGER):
        return curses.A_REVERSE | extra
    return extra
