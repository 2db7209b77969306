"""Configuration constants and persisted state for nmwifi."""

import json
import os
from dataclasses import asdict, dataclass
from typing import Optional

from loguru import logger

# --- Display ---
MAX_SSID_DISPLAY_LEN = 25   # Longer SSIDs are truncated with "..."
SECURITY_COLUMN_WIDTH = 12
POPUP_WIDTH_PERCENT = 60
POPUP_HEIGHT_PERCENT = 20
MENU_WIDTH_PERCENT = 40
MENU_HEIGHT_PERCENT = 25

# --- Timeouts (seconds) ---
COMMAND_TIMEOUT = 30
CONNECT_TIMEOUT = 45

# --- Environment ---
MODE_ENV = 'NMWIFI_MODE'            # 'production' (default) or 'test'
LOG_LEVEL_ENV = 'NMWIFI_LOG_LEVEL'  # overrides the stderr sink level

# --- Paths ---
CONFIG_DIR = os.path.join(
    os.environ.get('XDG_CONFIG_HOME', os.path.expanduser('~/.config')),
    'nmwifi',
)
STATE_FILE = os.path.join(CONFIG_DIR, 'state.json')

LOG_DIR = os.path.join(
    os.environ.get('XDG_STATE_HOME', os.path.expanduser('~/.local/state')),
    'nmwifi',
)
LOG_FILE = os.path.join(LOG_DIR, 'nmwifi.log')
LOG_ROTATION = '1 MB'
LOG_RETENTION = 3


# --- State Persistence ---

@dataclass
class AppState:
    """Preferences remembered between runs."""
    interface: Optional[str] = None
    show_password: bool = False


def load_state(path: str = STATE_FILE) -> AppState:
    """Read the saved state, falling back to defaults if unreadable."""
    if not os.path.isfile(path):
        return AppState()
    try:
        with open(path, 'r', encoding='utf-8') as f:
            data = json.load(f)
        return AppState(
            interface=data.get('interface') or None,
            show_password=bool(data.get('show_password', False)),
        )
    except (OSError, ValueError, AttributeError) as e:
        logger.warning(f'Ignoring unreadable state file {path}: {e}')
        return AppState()


def save_state(state: AppState, path: str = STATE_FILE) -> None:
    """Persist the state; failures are logged, not raised."""
    try:
        os.makedirs(os.path.dirname(path), exist_ok=True)
        with open(path, 'w', encoding='utf-8') as f:
            json.dump(asdict(state), f, indent=2)
    except OSError as e:
        logger.error(f'Failed to save state: {e}')
