"""Roseboard core library: message generator, timers and dashboard state.

Public API re-exports for convenient imports:
    from roseboard import generate, Timer, Dashboard, ...
"""

__version__ = "0.1.0"

# Configuration & workspace
from roseboard.config import AppConfig, configure_logging, load_config
from roseboard.workspace import (
    workspace_root,
    config_path,
    store_dir,
    prefs_path,
    get_config,
    get_timezone,
    now_local,
    today_key,
    yesterday_key,
)

# Daily message
from roseboard.affirmation import (
    date_seed,
    pick_indices,
    generate,
    format_date_key,
)

# Timers
from roseboard.timer import (
    Timer,
    TimerConfig,
    TimerState,
    Presentation,
    pomodoro_config,
    countdown_config,
    format_hms,
)

# Models
from roseboard.models import Task, Settings, UserRecord, Identity

# Ports & adapters
from roseboard.store import DocumentStore, FileDocumentStore, StoreError
from roseboard.local_prefs import LocalPrefs
from roseboard.auth import AuthProvider, CredentialAuth

# State
from roseboard.tasks import TaskList, validate_task_input, is_non_essential
from roseboard.stats import Statistics, next_streak
from roseboard.settings import HeaderSettings, Theme
from roseboard.eod import EveningMessage, FALLBACK_MESSAGE
from roseboard.dashboard import Dashboard
