"""Error kinds raised or recorded by the parser and the renderer."""


class RestParserError(Exception):
    """Base class for every error produced by rest_parser."""

    def __init__(self, message: str, line: int | None = None):
        super().__init__(message)
        self.message = message
        self.line = line

    def __str__(self) -> str:
        if self.line is None:
            return self.message
        return f"line {self.line}: {self.message}"


class ParseError(RestParserError):
    """A problem found while reading the document."""

    kind = "parse_error"


class MalformedRequestLine(ParseError):
    kind = "malformed_request_line"


class MalformedAuthHeader(ParseError):
    kind = "malformed_auth_header"


class FileReferenceUnreadable(ParseError):
    """A body file reference could not be supplied by the byte source."""

    kind = "file_reference_unreadable"

    def __init__(self, path: str, reason: str, line: int | None = None):
        super().__init__(f"cannot read {path!r}: {reason}", line)
        self.path = path


class RenderError(RestParserError):
    """A problem found while rendering a template."""

    kind = "render_error"


class UnresolvedVariable(RenderError):
    kind = "unresolved_variable"

    def __init__(self, name: str):
        super().__init__(f"variable {name!r} is not defined")
        self.name = name


class TemplateRecursionExceeded(RenderError):
    kind = "template_recursion_exceeded"

    def __init__(self, name: str, depth: int):
        super().__init__(f"variable {name!r} nests deeper than {depth} levels")
        self.name = name
        self.depth = depth
