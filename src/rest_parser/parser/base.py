"""Data models for parsed REST documents.

Everything here is frozen: a parse produces values, and nothing mutates
them afterwards. Templated fields hold Template objects, not rendered
text. Rendering happens later, against whichever variables the caller
chooses.
"""

from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, Field

from rest_parser.flavor import RestFlavor
from rest_parser.template import Template
from rest_parser.variables import VariableEnvironment


class Header(BaseModel):
    """A single request header. The name is stored as written."""

    model_config = ConfigDict(frozen=True)

    name: str
    value: Template


class BasicAuth(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["basic"] = "basic"
    username: Template
    password: Template | None = None  # None when the credentials had no ':'


class BearerAuth(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["bearer"] = "bearer"
    token: Template


Authorization = Annotated[BasicAuth | BearerAuth, Field(discriminator="kind")]


class InlineBody(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["inline"] = "inline"
    text: Template


class FileReferenceBody(BaseModel):
    """``< path`` (sent as is) or ``<@ path`` (rendered as a template first)."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["file"] = "file"
    path: Template
    process_variables: bool = False
    encoding: str | None = None


Body = Annotated[InlineBody | FileReferenceBody, Field(discriminator="kind")]


class ResponseTarget(BaseModel):
    """``>> path`` after the body: where a client should save the response."""

    model_config = ConfigDict(frozen=True)

    path: Template
    overwrite: bool = False


class Command(BaseModel):
    """A ``# @keyword [params]`` line such as ``# @timeout 300``."""

    model_config = ConfigDict(frozen=True)

    name: str
    params: str | None = None


class QueryParameter(BaseModel):
    """One ``name=value`` pair from a URL's query string."""

    model_config = ConfigDict(frozen=True)

    name: str
    value: Template


class RestRequest(BaseModel):
    """One HTTP request description."""

    model_config = ConfigDict(frozen=True)

    name: str | None = None
    method: str
    url: Template
    version: str | None = None
    headers: tuple[Header, ...] = ()
    auth: Authorization | None = None
    auth_error: str | None = None
    body: Body | None = None
    commands: tuple[Command, ...] = ()
    response_target: ResponseTarget | None = None
    response_handler: str | None = None
    line: int | None = None

    def header(self, name: str) -> Template | None:
        """First header called *name*, compared case-insensitively."""
        values = self.header_values(name)
        return values[0] if values else None

    def header_values(self, name: str) -> tuple[Template, ...]:
        wanted = name.lower()
        return tuple(h.value for h in self.headers if h.name.lower() == wanted)

    def command(self, name: str) -> Command | None:
        for cmd in self.commands:
            if cmd.name == name:
                return cmd
        return None

    @property
    def no_log(self) -> bool:
        return self.command("no-log") is not None

    @property
    def no_cookie_jar(self) -> bool:
        return self.command("no-cookie-jar") is not None


class BlockFailure(BaseModel):
    """A request block that could not be parsed."""

    model_config = ConfigDict(frozen=True)

    index: int  # position of the block in the document, 0 is the preamble
    line: int | None
    name: str | None
    kind: str
    message: str


class RestFormat(BaseModel):
    """The result of parsing one REST document."""

    model_config = ConfigDict(frozen=True)

    flavor: RestFlavor
    variables: VariableEnvironment
    requests: tuple[RestRequest, ...] = ()
    failures: tuple[BlockFailure, ...] = ()

    @property
    def ok(self) -> bool:
        return not self.failures

    @property
    def names(self) -> tuple[str, ...]:
        return tuple(r.name for r in self.requests if r.name)

    def get(self, name: str) -> RestRequest | None:
        """First request called *name*."""
        for request in self.requests:
            if request.name == name:
                return request
        return None
