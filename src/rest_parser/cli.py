"""CLI entry point for rest-parser."""

import json
from pathlib import Path

import click
import yaml

from rest_parser.config import get_settings
from rest_parser.errors import RenderError, RestParserError
from rest_parser.flavor import RestFlavor
from rest_parser.format import parse_file
from rest_parser.generator.curl import CurlGenerator
from rest_parser.log import setup_logging
from rest_parser.parser.base import BasicAuth, BearerAuth, FileReferenceBody, RestFormat, RestRequest
from rest_parser.variables import VariableEnvironment

FLAVOR_CHOICES = ["auto"] + [flavor.value for flavor in RestFlavor]


def _load(path: Path, flavor: str) -> RestFormat:
    """Parse a REST file with an explicit or detected flavor."""
    return parse_file(path, None if flavor == "auto" else flavor)


def _parse_vars(pairs: tuple[str, ...]) -> dict[str, str]:
    values = {}
    for pair in pairs:
        name, sep, value = pair.partition("=")
        if not sep or not name:
            raise click.BadParameter(f"expected NAME=VALUE, got {pair!r}", param_hint="--var")
        values[name] = value
    return values


def _describe_request(request: RestRequest) -> dict:
    auth = None
    if isinstance(request.auth, BasicAuth):
        auth = {
            "kind": "basic",
            "username": request.auth.username.raw,
            "password": request.auth.password.raw if request.auth.password is not None else None,
        }
    elif isinstance(request.auth, BearerAuth):
        auth = {"kind": "bearer", "token": request.auth.token.raw}

    body = None
    if isinstance(request.body, FileReferenceBody):
        body = {"file": request.body.path.raw, "process_variables": request.body.process_variables}
    elif request.body is not None:
        body = request.body.text.raw

    return {
        "name": request.name,
        "line": request.line,
        "method": request.method,
        "url": request.url.raw,
        "version": request.version,
        "headers": [{h.name: h.value.raw} for h in request.headers],
        "auth": auth,
        "auth_error": request.auth_error,
        "body": body,
        "commands": {c.name: c.params for c in request.commands},
        "response_target": request.response_target.path.raw if request.response_target else None,
    }


def _describe(document: RestFormat) -> dict:
    return {
        "flavor": document.flavor.value,
        "variables": document.variables.raw_values(),
        "requests": [_describe_request(r) for r in document.requests],
        "failures": [f.model_dump() for f in document.failures],
    }


def _report_failures(document: RestFormat, strict: bool) -> None:
    for failure in document.failures:
        click.echo(f"Block {failure.index} (line {failure.line}): {failure.message}", err=True)
    if strict and document.failures:
        click.get_current_context().exit(1)


@click.group()
@click.option("--log-level", default=None, help="Logging level (default: REST_PARSER_LOG_LEVEL or WARNING).")
def main(log_level: str | None):
    """rest-parser: inspect VSCode .rest and JetBrains .http files."""
    setup_logging(log_level or get_settings().log_level)


@main.command()
@click.argument("file_path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--flavor", default="auto", type=click.Choice(FLAVOR_CHOICES), help="Document flavor.")
@click.option("--format", "fmt", default="json", type=click.Choice(["json", "yaml"]), help="Output format.")
@click.option("--strict", is_flag=True, help="Exit with status 1 if any request block failed to parse.")
def show(file_path: Path, flavor: str, fmt: str, strict: bool):
    """Print the parsed structure of a REST file."""
    document = _load(file_path, flavor)
    data = _describe(document)
    if fmt == "yaml":
        click.echo(yaml.safe_dump(data, sort_keys=False, allow_unicode=True), nl=False)
    else:
        click.echo(json.dumps(data, indent=2, ensure_ascii=False))
    _report_failures(document, strict)


@main.command("vars")
@click.argument("file_path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--flavor", default="auto", type=click.Choice(FLAVOR_CHOICES), help="Document flavor.")
@click.option("--var", "overrides", multiple=True, help="Override a variable, NAME=VALUE. Repeatable.")
def show_vars(file_path: Path, flavor: str, overrides: tuple[str, ...]):
    """Print every variable with its rendered value."""
    document = _load(file_path, flavor)
    variables: VariableEnvironment = document.variables.merged(_parse_vars(overrides))
    for name, value in variables.items():
        try:
            rendered = value.render(variables)
        except RenderError as exc:
            rendered = f"<error: {exc}>"
        click.echo(f"{name} = {rendered}")


@main.command()
@click.argument("file_path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--flavor", default="auto", type=click.Choice(FLAVOR_CHOICES), help="Document flavor.")
@click.option("--name", default=None, help="Only the request with this name.")
@click.option("--var", "overrides", multiple=True, help="Override a variable, NAME=VALUE. Repeatable.")
@click.option("--resolve/--no-resolve", default=True, help="Render variables, or emit them as shell variables.")
@click.option("--strict", is_flag=True, help="Exit with status 1 if any request block failed to parse.")
def curl(file_path: Path, flavor: str, name: str | None, overrides: tuple[str, ...], resolve: bool, strict: bool):
    """Print a curl command for each request."""
    document = _load(file_path, flavor)
    variables = document.variables.merged(_parse_vars(overrides))
    generator = CurlGenerator(variables, resolve=resolve, base_dir=file_path.parent)

    try:
        commands = generator.generate(document, name=name)
    except RestParserError as exc:
        raise click.ClickException(str(exc)) from exc

    if name is not None and not commands:
        raise click.ClickException(f"no request named {name!r}")

    for request_name, command in commands:
        click.echo(f"# {request_name}")
        click.echo(command)
        click.echo()
    _report_failures(document, strict)
