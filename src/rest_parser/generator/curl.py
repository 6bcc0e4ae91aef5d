"""curl generator: renders parsed requests as curl command lines."""

import re
import shlex
from collections.abc import Mapping
from pathlib import Path

from rest_parser.format import load_body
from rest_parser.log import get_logger
from rest_parser.parser.base import BasicAuth, FileReferenceBody, RestFormat, RestRequest
from rest_parser.parser.headers import is_authorization
from rest_parser.template import LiteralText, Template, render

logger = get_logger(__name__)

HTTP_VERSION_FLAGS = {
    "HTTP/1.0": "--http1.0",
    "HTTP/1.1": "--http1.1",
    "HTTP/2": "--http2",
    "HTTP/2.0": "--http2",
    "HTTP/3": "--http3",
}

_SHELL_UNSAFE = re.compile(r"[^A-Za-z0-9_]")


class CurlGenerator:
    """Renders RestRequest objects as curl commands.

    With ``resolve=True`` every template is rendered against *variables*.
    With ``resolve=False`` references become shell variables (``"$HOST"``)
    and each command is prefixed with the variable assignments.
    """

    def __init__(
        self,
        variables: Mapping[str, Template] | None = None,
        resolve: bool = True,
        base_dir: str | Path | None = None,
    ):
        self.variables = variables or {}
        self.resolve = resolve
        self.base_dir = base_dir

    def generate(self, document: RestFormat, name: str | None = None) -> list[tuple[str, str]]:
        """Return ``(request name, command)`` pairs, optionally for one name only."""
        commands = []
        for index, request in enumerate(document.requests, start=1):
            if name is not None and request.name != name:
                continue
            commands.append((request.name or f"Request {index}", self.render_request(request)))
        return commands

    def render_request(self, request: RestRequest) -> str:
        parts = ["curl", "-X", request.method, self._quote(request.url)]

        flag = HTTP_VERSION_FLAGS.get(request.version or "")
        if flag:
            parts.append(flag)

        basic = request.auth if isinstance(request.auth, BasicAuth) else None
        for header in request.headers:
            if basic is not None and is_authorization(header):
                continue
            parts += ["-H", self._quote(Template(parts=(LiteralText(text=f"{header.name}: "),) + header.value.parts))]
        if basic is not None:
            credentials = basic.username.parts
            if basic.password is not None:
                credentials += (LiteralText(text=":"),) + basic.password.parts
            parts += ["-u", self._quote(Template(parts=credentials))]

        parts += self._body_args(request)

        if request.response_target is not None:
            parts += ["-o", self._quote(request.response_target.path)]

        command = " ".join(parts)
        if self.resolve:
            return command
        return f"{self._assignments()}{command}"

    def _body_args(self, request: RestRequest) -> list[str]:
        body = request.body
        if body is None:
            return []
        if not isinstance(body, FileReferenceBody):
            return ["--data-raw", self._quote(body.text)]
        if body.process_variables and self.resolve:
            content = load_body(request, self.variables, base_dir=self.base_dir)
            return ["--data-raw", shlex.quote(content)]
        if body.process_variables:
            logger.debug("Sending %s without rendering its variables", body.path.raw)
        return ["--data-binary", self._quote(Template(parts=(LiteralText(text="@"),) + body.path.parts))]

    def _quote(self, template: Template) -> str:
        if self.resolve:
            return shlex.quote(render(template, self.variables))
        return _shell_string(template)

    def _assignments(self) -> str:
        return "".join(
            f"{shell_name(name)}={_shell_string(value)}; " for name, value in self.variables.items()
        )


def shell_name(name: str) -> str:
    """A variable name usable in POSIX shells."""
    return _SHELL_UNSAFE.sub("_", name.lstrip("$"))


def _shell_string(template: Template) -> str:
    out = []
    for part in template.parts:
        if isinstance(part, LiteralText):
            out.append(re.sub(r'(["\\$`])', r"\\\1", part.text))
        else:
            out.append("${" + shell_name(part.name) + "}")
    return '"' + "".join(out) + '"'
