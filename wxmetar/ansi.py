"""ANSI escape sequences used for terminal output."""

BOLD_RED = "\033[1;31m"
BOLD_GREEN = "\033[1;32m"
BOLD_YELLOW = "\033[1;33m"
BOLD_BLUE = "\033[1;34m"
BOLD_MAGENTA = "\033[1;35m"
RESET = "\033[0m"


def colorize(text: str, color: str) -> str:
    """Wrap text in a color and a reset."""
    return f"{color}{text}{RESET}"
