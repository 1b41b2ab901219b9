"""Terminal colours for the console client."""
GREEN = "\033[32m"
CYAN = "\033[36m"
YELLOW = "\033[33m"
RESET = "\033[0m"


def paint(text: str, colour: str) -> str:
    return f"{colour}{text}{RESET}"
