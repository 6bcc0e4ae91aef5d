"""Parse REST documents and work with the result.

``.rest`` files come from the VSCode REST Client, ``.http`` files from
the JetBrains HTTP Client. Both describe a list of HTTP requests
separated by ``###`` lines::

    @HOST = http://httpbin.org

    ### SimpleGet
    GET {{HOST}}/get HTTP/1.1

Parsing never raises for bad content: a request block that cannot be
parsed is recorded in ``RestFormat.failures`` and the rest of the
document is still returned.
"""

from collections.abc import Callable, Mapping
from pathlib import Path

from rest_parser.config import get_settings
from rest_parser.errors import FileReferenceUnreadable, MalformedRequestLine
from rest_parser.flavor import RestFlavor, rules_for
from rest_parser.log import get_logger
from rest_parser.parser.base import (
    BlockFailure,
    FileReferenceBody,
    QueryParameter,
    RestFormat,
    RestRequest,
)
from rest_parser.parser.detect import detect_flavor
from rest_parser.parser.lexer import scan_block
from rest_parser.parser.request import parse_request
from rest_parser.parser.segment import segment
from rest_parser.template import Template, parse_template, render, render_report
from rest_parser.variables import VariableDeclaration, VariableEnvironment

__all__ = [
    "build_url",
    "extract_query_parameters",
    "load_body",
    "parse",
    "parse_file",
    "parse_template",
    "render",
    "render_report",
    "url_base",
]

logger = get_logger(__name__)

ByteSource = Callable[[str], bytes]


def parse(text: str, flavor: RestFlavor | str = RestFlavor.VSCODE) -> RestFormat:
    """Parse the text of a REST document."""
    flavor = RestFlavor(flavor)
    rules = rules_for(flavor)
    preamble, blocks = segment(text, rules)

    declarations: list[VariableDeclaration] = []
    requests: list[RestRequest] = []
    failures: list[BlockFailure] = []

    for block in [preamble, *blocks]:
        scanned = scan_block(block, rules)
        declarations.extend(scanned.declarations)
        if scanned.is_empty:
            if block.index:
                logger.debug("Skipping empty block %d at line %d", block.index, block.start_line)
            continue
        try:
            requests.append(parse_request(scanned, rules))
        except MalformedRequestLine as exc:
            logger.warning("Skipping block %d: %s", block.index, exc)
            failures.append(
                BlockFailure(
                    index=block.index,
                    line=exc.line,
                    name=scanned.name,
                    kind=exc.kind,
                    message=exc.message,
                )
            )

    return RestFormat(
        flavor=flavor,
        variables=VariableEnvironment(declarations),
        requests=tuple(requests),
        failures=tuple(failures),
    )


def parse_file(
    path: str | Path,
    flavor: RestFlavor | str | None = None,
    encoding: str | None = None,
) -> RestFormat:
    """Read *path* and parse it; the flavor defaults to the file extension."""
    path = Path(path)
    settings = get_settings()
    text = path.read_text(encoding=encoding or settings.encoding)
    if flavor is None:
        flavor = detect_flavor(path, text)
    logger.debug("Parsing %s as %s", path, RestFlavor(flavor).value)
    return parse(text, flavor)


def _as_template(url: Template | str) -> Template:
    return url if isinstance(url, Template) else parse_template(url)


def extract_query_parameters(
    url: Template | str,
    variables: Mapping[str, Template] | None = None,
) -> tuple[QueryParameter, ...]:
    """Split the query string of *url* into ordered name/value pairs.

    Values stay templated unless *variables* are given, in which case the
    URL is rendered first. A pair without ``=`` gets an empty value.
    """
    url = _as_template(url)
    raw = render(url, variables) if variables is not None else url.raw
    _, sep, query = raw.partition("?")
    if not sep:
        return ()
    query = query.partition("#")[0]

    parameters = []
    for pair in query.split("&"):
        if not pair:
            continue
        name, _, value = pair.partition("=")
        parameters.append(QueryParameter(name=name, value=parse_template(value)))
    return tuple(parameters)


def url_base(url: Template | str) -> Template:
    """*url* without its query string."""
    return parse_template(_as_template(url).raw.partition("?")[0])


def build_url(url: Template | str, parameters: tuple[QueryParameter, ...] | list[QueryParameter]) -> Template:
    """Rebuild a URL from the base of *url* and *parameters*."""
    base = url_base(url).raw
    if not parameters:
        return parse_template(base)
    query = "&".join(f"{p.name}={p.value.raw}" for p in parameters)
    return parse_template(f"{base}?{query}")


def load_body(
    request: RestRequest,
    variables: Mapping[str, Template] | None = None,
    *,
    base_dir: str | Path | None = None,
    reader: ByteSource | None = None,
) -> str | None:
    """Materialise the body of *request*.

    Inline bodies are rendered. File references are resolved through
    *reader* (by default, a file read relative to *base_dir*); the content
    is rendered as well when the reference was written ``<@ path``.
    Raises FileReferenceUnreadable when the content cannot be supplied.
    """
    body = request.body
    if body is None:
        return None
    if not isinstance(body, FileReferenceBody):
        return render(body.text, variables)

    path = render(body.path, variables)
    if reader is None:
        root = Path(base_dir) if base_dir is not None else Path.cwd()

        def reader(name: str) -> bytes:
            return (root / name).read_bytes()

    encoding = body.encoding or get_settings().encoding
    try:
        content = reader(path).decode(encoding)
    except (OSError, LookupError, UnicodeDecodeError) as exc:
        raise FileReferenceUnreadable(path, str(exc), request.line) from exc

    if body.process_variables:
        return render(parse_template(content), variables)
    return content
