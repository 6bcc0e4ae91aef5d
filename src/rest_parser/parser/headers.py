"""Header lines and the structured ``Authorization`` header."""

import base64
import binascii
import re

from rest_parser.errors import MalformedAuthHeader
from rest_parser.flavor import FlavorRules
from rest_parser.log import get_logger
from rest_parser.parser.base import Authorization, BasicAuth, BearerAuth, Header
from rest_parser.template import VARIABLE_PATTERN, Template, parse_template

logger = get_logger(__name__)

AUTHORIZATION_HEADER = "authorization"

TOKEN = r"[!#$%&'*+.^_`|~0-9A-Za-z-]+"
HEADER_LINE = re.compile(r"^(?P<name>" + TOKEN + r")\s*:\s*(?P<value>.*?)\s*$")


def parse_header_line(text: str) -> Header | None:
    """Parse ``Name: value``; returns None when *text* is not a header."""
    match = HEADER_LINE.match(text.strip())
    if not match:
        return None
    return Header(name=match.group("name"), value=parse_template(match.group("value")))


def decode_authorization(value: str, plaintext_basic: bool = False) -> Authorization:
    """Decode a rendered ``Authorization`` value.

    ``Basic`` takes base64 of ``user:password``; with *plaintext_basic*
    the credentials may also be written out as ``user:password`` or
    ``user password``. Raises MalformedAuthHeader for anything else.
    """
    auth = _parse(parse_template(value.strip()), plaintext_basic)
    if auth is None:
        raise MalformedAuthHeader("Basic credentials still contain unresolved variables")
    return auth


def parse_authorization(value: Template, rules: FlavorRules) -> tuple[Authorization | None, str | None]:
    """Structure an Authorization header without failing the request.

    Returns ``(auth, error)``. A templated Basic payload that cannot be
    split into credentials yields ``(None, None)``: it can only be decoded
    after rendering, with decode_authorization().
    """
    try:
        return _parse(value, rules.plaintext_basic_auth), None
    except MalformedAuthHeader as exc:
        logger.warning("Unparsable Authorization header %r: %s", value.raw, exc.message)
        return None, exc.message


def _parse(value: Template, plaintext_basic: bool) -> Authorization | None:
    scheme, _, payload = value.raw.strip().partition(" ")
    payload = payload.strip()

    if scheme.lower() == "bearer":
        if not payload:
            raise MalformedAuthHeader("Bearer token is empty")
        return BearerAuth(token=parse_template(payload))

    if scheme.lower() == "basic":
        if not payload:
            raise MalformedAuthHeader("Basic credentials are empty")
        templated = not parse_template(payload).is_static
        if templated or plaintext_basic and _has_separator(payload):
            if not _has_separator(payload):
                return None
            return _split_credentials(payload)
        return _decode_basic(payload)

    raise MalformedAuthHeader(f"unsupported authorization scheme {scheme!r}")


def _has_separator(payload: str) -> bool:
    return _separator_index(payload) is not None


def _separator_index(credentials: str) -> int | None:
    """Index of the ':' (or else the first space) outside variable references."""
    masked = VARIABLE_PATTERN.sub(lambda m: "x" * len(m.group(0)), credentials)
    if ":" in masked:
        return masked.index(":")
    space = re.search(r"\s", masked)
    return space.start() if space else None


def _split_credentials(credentials: str) -> BasicAuth:
    index = _separator_index(credentials)
    if index is None:
        return BasicAuth(username=parse_template(credentials))
    username, password = credentials[:index], credentials[index + 1:].strip()
    return BasicAuth(username=parse_template(username.strip()), password=parse_template(password))


def _decode_basic(encoded: str) -> BasicAuth:
    try:
        decoded = base64.b64decode(encoded, validate=True).decode("utf-8")
    except (binascii.Error, UnicodeDecodeError) as exc:
        raise MalformedAuthHeader(f"Basic credentials are not valid base64: {exc}") from exc
    # base64-decoded credentials are only ever split on ':'
    if ":" not in decoded:
        return BasicAuth(username=parse_template(decoded))
    username, password = decoded.split(":", 1)
    return BasicAuth(username=parse_template(username), password=parse_template(password))


def is_authorization(header: Header) -> bool:
    return header.name.lower() == AUTHORIZATION_HEADER
