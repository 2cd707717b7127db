"""Keyboard shortcut mapping."""

from dataclasses import dataclass
from enum import StrEnum


class ShortcutAction(StrEnum):
    ADD_EMPLOYEE = "add_employee"
    FOCUS_SEARCH = "focus_search"
    SHOW_DASHBOARD = "show_dashboard"
    SHOW_EMPLOYEES = "show_employees"
    SHOW_SEARCH = "show_search"
    SHOW_REPORTS = "show_reports"
    ESCAPE = "escape"
    SHOW_HELP = "show_help"


SHORTCUT_HELP = [
    "Ctrl/Cmd + N: Add new employee",
    "Ctrl/Cmd + K: Focus search",
    "Ctrl/Cmd + Shift + D: Go to Dashboard",
    "Ctrl/Cmd + Shift + E: Go to Employees",
    "Ctrl/Cmd + Shift + S: Go to Search",
    "Ctrl/Cmd + Shift + R: Go to Reports",
    "Escape: Close modal or clear search",
    "Ctrl/Cmd + /: Show this help",
]

# Targets where keystrokes belong to the field being edited
TEXT_INPUT_TARGETS = frozenset({"input", "textarea", "select"})

_SECTION_KEYS = {
    "d": ShortcutAction.SHOW_DASHBOARD,
    "e": ShortcutAction.SHOW_EMPLOYEES,
    "s": ShortcutAction.SHOW_SEARCH,
    "r": ShortcutAction.SHOW_REPORTS,
}


@dataclass(frozen=True)
class KeyEvent:
    key: str
    ctrl: bool = False
    meta: bool = False
    shift: bool = False
    target: str = "body"


def resolve_shortcut(event: KeyEvent) -> ShortcutAction | None:
    """Map a key press to an action, or None when it is not a shortcut."""
    if event.target.lower() in TEXT_INPUT_TARGETS:
        return None

    key = event.key.lower()
    cmd_or_ctrl = event.ctrl or event.meta

    if key == "escape":
        return ShortcutAction.ESCAPE
    if not cmd_or_ctrl:
        return None
    if event.shift:
        return _SECTION_KEYS.get(key)
    if key == "n":
        return ShortcutAction.ADD_EMPLOYEE
    if key == "k":
        return ShortcutAction.FOCUS_SEARCH
    if key == "/":
        return ShortcutAction.SHOW_HELP
    return None
