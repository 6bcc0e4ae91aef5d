"""Turn a scanned block into a RestRequest."""

import re

from rest_parser.errors import MalformedRequestLine
from rest_parser.flavor import FlavorRules
from rest_parser.log import get_logger
from rest_parser.parser.base import (
    Body,
    FileReferenceBody,
    Header,
    InlineBody,
    ResponseTarget,
    RestRequest,
)
from rest_parser.parser.headers import TOKEN, is_authorization, parse_authorization, parse_header_line
from rest_parser.parser.lexer import ScannedBlock
from rest_parser.parser.segment import SourceLine
from rest_parser.template import VARIABLE_PATTERN, parse_template

logger = get_logger(__name__)

METHOD = re.compile(TOKEN)
VERSION_SUFFIX = re.compile(r"\s+(?P<version>HTTP/\d+(?:\.\d+)?)$")
BARE_URL = re.compile(r"^(?:[A-Za-z][A-Za-z0-9+.\-]*://|/|\{\{)")

FILE_REFERENCE = re.compile(r"^<(?P<at>@(?P<encoding>[\w\-]+)?)?\s+(?P<path>\S.*?)\s*$")
RESPONSE_TARGET = re.compile(r"^>>(?P<overwrite>!)?\s*(?P<path>\S.*?)\s*$")


def parse_request(block: ScannedBlock, rules: FlavorRules) -> RestRequest:
    """Build a request from *block*. Raises MalformedRequestLine."""
    if block.is_empty:
        raise MalformedRequestLine("block has no request line", block.start_line)

    request_line, *rest = block.head
    method, url, version = parse_request_line(request_line, rules)

    headers: list[Header] = []
    body_lines = list(block.body)
    for position, source in enumerate(rest):
        text = source.text.strip()
        if not headers and text.startswith(("?", "&")):
            url += text
            continue
        header = parse_header_line(text)
        if header is None:
            # no blank line between headers and body
            body_lines = rest[position:] + body_lines
            break
        headers.append(header)

    auth, auth_error = None, None
    for header in headers:
        if is_authorization(header):
            auth, auth_error = parse_authorization(header.value, rules)
            break

    body, target, handler = parse_body(body_lines)

    return RestRequest(
        name=block.name,
        method=method,
        url=parse_template(url),
        version=version,
        headers=tuple(headers),
        auth=auth,
        auth_error=auth_error,
        body=body,
        commands=tuple(block.commands),
        response_target=target,
        response_handler=handler,
        line=request_line.number,
    )


def parse_request_line(source: SourceLine, rules: FlavorRules) -> tuple[str, str, str | None]:
    """Split ``METHOD URL [HTTP/x.y]`` into its parts."""
    text = source.text.strip()
    version = None
    match = VERSION_SUFFIX.search(text)
    if match:
        version = match.group("version")
        text = text[:match.start()]

    parts = text.split(None, 1)
    if len(parts) == 2 and METHOD.fullmatch(parts[0]) and not _has_space(parts[1].strip()):
        return parts[0], parts[1].strip(), version
    if rules.bare_url_request and BARE_URL.match(text) and not _has_space(text):
        return rules.default_method, text, version
    raise MalformedRequestLine(f"not a request line: {source.text.strip()!r}", source.number)


def _has_space(url: str) -> bool:
    # whitespace is only allowed inside {{ ... }}
    return bool(re.search(r"\s", VARIABLE_PATTERN.sub("", url)))


def parse_body(lines: list[SourceLine]) -> tuple[Body | None, ResponseTarget | None, str | None]:
    """Split body lines into the body proper and the response directives.

    ``> handler`` and ``>> target`` lines only count when they form the
    trailing run of the block; earlier ``>`` lines are body text.
    """
    handler: list[str] = []
    target = None
    tail: int | None = None
    in_script = False

    for position, source in enumerate(lines):
        text = source.text.strip()
        if in_script:
            handler.append(source.text)
            in_script = "%}" not in text
            continue
        if not text:
            continue
        match = RESPONSE_TARGET.match(text)
        if match or text.startswith("> "):
            if tail is None:
                tail = position
            if match:
                target = ResponseTarget(path=parse_template(match.group("path")), overwrite=bool(match.group("overwrite")))
            else:
                handler.append(text)
                script = text.partition("{%")[2]
                in_script = "{%" in text and "%}" not in script
            continue
        # content after a directive: everything so far was body text
        tail, handler, target = None, [], None

    content = [source.text for source in lines[:tail]]
    while content and not content[-1].strip():
        content.pop()
    while content and not content[0].strip():
        content.pop(0)

    return _make_body(content), target, "\n".join(handler) or None


def _make_body(content: list[str]) -> Body | None:
    if not content:
        return None
    match = FILE_REFERENCE.match(content[0].strip())
    if match:
        if len(content) > 1:
            logger.debug("Ignoring %d lines after file reference %r", len(content) - 1, content[0])
        return FileReferenceBody(
            path=parse_template(match.group("path")),
            process_variables=bool(match.group("at")),
            encoding=match.group("encoding"),
        )
    return InlineBody(text=parse_template("\n".join(content)))
