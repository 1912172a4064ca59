"""Terminal UI colours."""
from typing import Dict, Optional

from prompt_toolkit.styles import Style

from .models import Priority
from .logs import get_logger

log = get_logger("theme")

DEFAULT_THEME: Dict[str, str] = {
    "frame.border": "#5a6169",
    "frame.label": "#5f87ff bold",
    "cursor": "#00d7d7 bold",
    "selected": "bold",
    "check.done": "#5f87ff bold",
    "priority.low": "#5fd75f",
    "priority.medium": "#d7d75f",
    "priority.high": "#ff5f5f",
    "prompt": "bg:#d0d0d0 #000000",
    "status": "#a7b0ba",
    "status.error": "#ff5f5f bold",
    "empty": "#6f757d italic",
}

PRIORITY_STYLES: Dict[Priority, str] = {
    Priority.NONE: "",
    Priority.LOW: "class:priority.low",
    Priority.MEDIUM: "class:priority.medium",
    Priority.HIGH: "class:priority.high",
}

def get_theme_palette(overrides: Optional[Dict[str, str]] = None) -> Dict[str, str]:
    """Default palette with user overrides applied."""
    palette = dict(DEFAULT_THEME)
    if overrides:
        palette.update(overrides)
    return palette

def build_style(overrides: Optional[Dict[str, str]] = None) -> Style:
    """Build Style object, dropping overrides prompt_toolkit cannot parse."""
    try:
        return Style.from_dict(get_theme_palette(overrides))
    except (ValueError, AssertionError) as e:
        log.warning(f"Ignoring theme overrides: {e}")
        return Style.from_dict(get_theme_palette())
