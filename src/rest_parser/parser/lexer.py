"""Line-level directives inside a block.

Recognised before the request line and among the headers:

- ``@NAME = VALUE``       variable declaration
- ``# @name NAME``        request name (also ``// @name``, ``# @name=NAME``)
- ``# @keyword [params]`` command, e.g. ``# @no-log`` or ``# @timeout 300``
- ``#`` / ``//`` lines    comments, dropped

Everything after the first blank line that follows the request line is
body and is passed through untouched.
"""

import re
from dataclasses import dataclass, field
from enum import Enum

from rest_parser.flavor import FlavorRules
from rest_parser.log import get_logger
from rest_parser.parser.base import Command
from rest_parser.parser.segment import Block, SourceLine
from rest_parser.template import NAME, parse_template
from rest_parser.variables import VariableDeclaration

logger = get_logger(__name__)

VARIABLE_ASSIGNMENT = re.compile(r"^@(?P<name>" + NAME + r")\s*=\s*(?P<value>.*?)\s*$")
ANNOTATION = re.compile(r"^\s*@(?P<keyword>[^\s=]+)(?:\s*=\s*|\s+)?(?P<params>.*?)\s*$")


class LineKind(str, Enum):
    BLANK = "blank"
    COMMENT = "comment"
    NAME = "name"
    COMMAND = "command"
    VARIABLE = "variable"
    CONTENT = "content"


@dataclass(frozen=True)
class Line:
    """A classified source line, the lexer's token."""

    kind: LineKind
    source: SourceLine
    key: str | None = None
    value: str | None = None


@dataclass
class ScannedBlock:
    """A block with its directives pulled out.

    ``head`` holds the request line and header lines; ``body`` holds the
    raw lines after the blank line that ends the headers.
    """

    index: int
    name: str | None
    start_line: int
    commands: list[Command] = field(default_factory=list)
    declarations: list[VariableDeclaration] = field(default_factory=list)
    head: list[SourceLine] = field(default_factory=list)
    body: list[SourceLine] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not self.head


def classify(source: SourceLine, rules: FlavorRules) -> Line:
    """Classify a line outside the body."""
    text = source.text.strip()
    if not text:
        return Line(LineKind.BLANK, source)

    comment = rules.strip_comment(text)
    if comment is not None:
        match = ANNOTATION.match(comment)
        if not match:
            return Line(LineKind.COMMENT, source)
        keyword = match.group("keyword")
        params = match.group("params") or None
        if keyword == rules.name_keyword:
            if not params:
                return Line(LineKind.COMMENT, source)
            # the name is the first word
            return Line(LineKind.NAME, source, key=keyword, value=params.split()[0])
        return Line(LineKind.COMMAND, source, key=keyword, value=params)

    match = VARIABLE_ASSIGNMENT.match(text)
    if match:
        return Line(LineKind.VARIABLE, source, key=match.group("name"), value=match.group("value"))

    return Line(LineKind.CONTENT, source)


def scan_block(block: Block, rules: FlavorRules) -> ScannedBlock:
    """Pull directives out of *block* and split the rest into head and body."""
    scanned = ScannedBlock(index=block.index, name=block.name, start_line=block.start_line)
    in_body = False

    for source in block.lines:
        if in_body:
            scanned.body.append(source)
            continue

        line = classify(source, rules)
        if line.kind is LineKind.BLANK:
            # the first blank line after the request line ends the headers
            in_body = bool(scanned.head)
        elif line.kind is LineKind.NAME:
            scanned.name = line.value
        elif line.kind is LineKind.COMMAND:
            if line.key not in rules.markers:
                logger.debug("Line %d: unknown command @%s kept as metadata", source.number, line.key)
            scanned.commands.append(Command(name=line.key, params=line.value))
        elif line.kind is LineKind.VARIABLE:
            scanned.declarations.append(
                VariableDeclaration(name=line.key, value=parse_template(line.value), line=source.number)
            )
        elif line.kind is LineKind.CONTENT:
            scanned.head.append(source)

    return scanned
