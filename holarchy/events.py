# holarchy/events.py
import logging
from typing import Dict, Optional

logger = logging.getLogger(__name__)

# ANSI colors
CYAN = "\033[96m"
GREEN = "\033[92m"
YELLOW = "\033[93m"
RED = "\033[91m"
RESET = "\033[0m"

_EVENT_COLORS = {
    "EMERGENCE": GREEN,
    "TREE": CYAN,
    "PRUNE": YELLOW,
    "RESET": RED,
}


def log_event(event_type: str, message: str, details: Optional[Dict] = None):
    """Emit a streaming log event."""
    color = _EVENT_COLORS.get(event_type, RESET)
    logger.info(f"{color}[{event_type}] {message}{RESET}")
    if details:
        logger.info(f"{color}      └─ {details}{RESET}")
