"""REST file dialects and the grammar tokens that differ between them."""

import re
from dataclasses import dataclass
from enum import Enum
from pathlib import Path


class RestFlavor(str, Enum):
    """The two supported dialects."""

    VSCODE = "vscode"  # VSCode REST Client, .rest
    JETBRAINS = "jetbrains"  # JetBrains HTTP Client, .http

    @classmethod
    def from_path(cls, path: str | Path) -> "RestFlavor | None":
        """Pick the flavor from a file extension, None when it is unknown."""
        suffix = Path(path).suffix.lower()
        for flavor in cls:
            if suffix in rules_for(flavor).extensions:
                return flavor
        return None

    @property
    def rules(self) -> "FlavorRules":
        return rules_for(self)


@dataclass(frozen=True)
class FlavorRules:
    """Grammar tokens for one flavor.

    The segmenter and the line parsers only ever read these, so dialect
    differences live here and nowhere else.
    """

    flavor: RestFlavor
    extensions: tuple[str, ...]
    comment_prefixes: tuple[str, ...] = ("#", "//")
    separator: re.Pattern = re.compile(r"^#{3,}[ \t]*(?P<name>.*?)[ \t]*$")
    name_keyword: str = "name"
    markers: frozenset[str] = frozenset()
    plaintext_basic_auth: bool = False
    bare_url_request: bool = True
    default_method: str = "GET"

    def is_comment(self, line: str) -> bool:
        return line.lstrip().startswith(self.comment_prefixes)

    def strip_comment(self, line: str) -> str | None:
        """Return the comment text after its prefix, or None when not a comment."""
        stripped = line.lstrip()
        for prefix in self.comment_prefixes:
            if stripped.startswith(prefix):
                return stripped[len(prefix):]
        return None


VSCODE_RULES = FlavorRules(
    flavor=RestFlavor.VSCODE,
    extensions=(".rest",),
    markers=frozenset({"no-log", "no-cookie-jar", "no-redirect", "note", "prompt"}),
    plaintext_basic_auth=True,
)

JETBRAINS_RULES = FlavorRules(
    flavor=RestFlavor.JETBRAINS,
    extensions=(".http",),
    markers=frozenset({
        "no-log",
        "no-cookie-jar",
        "no-redirect",
        "no-auto-encoding",
        "timeout",
        "connection-timeout",
    }),
)

_RULES = {
    RestFlavor.VSCODE: VSCODE_RULES,
    RestFlavor.JETBRAINS: JETBRAINS_RULES,
}


def rules_for(flavor: RestFlavor | str) -> FlavorRules:
    """Return the grammar tokens for *flavor* (enum member or its value)."""
    return _RULES[RestFlavor(flavor)]
