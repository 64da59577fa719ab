from .app_controller import AppController
from .controller_mode import NEUTRAL_INPUT, AppMode, TickInput
from .errors import AlreadyRunningError, EmptyCatalogError, KillError, LaunchError, LauncherError
from .input_debouncer import InputDebouncer, NavIntent, debounce
from .process_supervisor import ChildHandle, ProcessSupervisor
from .selection import SelectionState

__all__ = [
    "AppController",
    "AppMode",
    "TickInput",
    "NEUTRAL_INPUT",
    "AlreadyRunningError",
    "EmptyCatalogError",
    "KillError",
    "LaunchError",
    "LauncherError",
    "InputDebouncer",
    "NavIntent",
    "debounce",
    "ChildHandle",
    "ProcessSupervisor",
    "SelectionState",
]
