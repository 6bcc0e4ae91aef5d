"""Auto-detect the flavor of a REST document."""

import re
from pathlib import Path

from rest_parser.config import get_settings
from rest_parser.flavor import RestFlavor

# system variables and script blocks only one of the clients understands
JETBRAINS_HINTS = re.compile(r"\{\{\s*\$(?:uuid|random\.|isoTimestamp|env\.)|^>\s*\{%", re.MULTILINE)
VSCODE_HINTS = re.compile(r"\{\{\s*\$(?:guid|randomInt|processEnv|dotenv|datetime|localDatetime)")


def detect_flavor(file_path: Path, text: str | None = None) -> RestFlavor:
    """Detect the flavor of a REST file.

    The extension decides (``.rest`` is VSCode, ``.http`` is JetBrains).
    For other extensions the content is checked for client-specific
    system variables, then the configured default flavor applies.
    """
    flavor = RestFlavor.from_path(file_path)
    if flavor is not None:
        return flavor

    if text is not None:
        if JETBRAINS_HINTS.search(text):
            return RestFlavor.JETBRAINS
        if VSCODE_HINTS.search(text):
            return RestFlavor.VSCODE

    return RestFlavor(get_settings().default_flavor)
