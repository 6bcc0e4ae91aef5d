"""Split a REST document into blocks on ``###`` separator lines."""

from dataclasses import dataclass, field

from rest_parser.flavor import FlavorRules
from rest_parser.log import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class SourceLine:
    number: int  # 1-based
    text: str


@dataclass
class Block:
    """The lines between two separators.

    Block 0 is the preamble before the first separator. It normally only
    declares variables, but a document without separators keeps its only
    request there.
    """

    index: int
    name: str | None = None
    start_line: int = 1
    lines: list[SourceLine] = field(default_factory=list)


def segment(text: str, rules: FlavorRules) -> tuple[Block, list[Block]]:
    """Return the preamble block and the request blocks, in document order."""
    preamble = Block(index=0)
    blocks: list[Block] = []
    current = preamble

    for number, line in enumerate(text.splitlines(), start=1):
        match = rules.separator.match(line.strip())
        if match:
            name = (match.group("name") or "").strip() or None
            current = Block(index=len(blocks) + 1, name=name, start_line=number)
            blocks.append(current)
            continue
        current.lines.append(SourceLine(number=number, text=line))

    logger.debug("Segmented document into %d request blocks", len(blocks))
    return preamble, blocks
