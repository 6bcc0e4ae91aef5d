"""Templated strings: literal text interleaved with ``{{VARIABLE}}`` references.

A template never fails to parse. Anything between ``{{`` and ``}}`` that
is not a valid identifier stays literal text, so real-world documents with
stray braces still load.
"""

import re
from collections.abc import Mapping
from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, Field, model_validator

from rest_parser.config import get_settings
from rest_parser.errors import TemplateRecursionExceeded, UnresolvedVariable

VARIABLE_START = "{{"
VARIABLE_END = "}}"

NAME = r"[A-Za-z_][A-Za-z0-9_.\-]*"
IDENTIFIER = r"\$?" + NAME  # a leading $ marks a dynamic variable such as {{$uuid}}
VARIABLE_PATTERN = re.compile(r"\{\{\s*(" + IDENTIFIER + r")\s*\}\}")


class LiteralText(BaseModel):
    """Plain text copied to the output unchanged."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["literal"] = "literal"
    text: str

    @property
    def raw(self) -> str:
        return self.text


class VariableReference(BaseModel):
    """A ``{{name}}`` placeholder."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["variable"] = "variable"
    name: str
    raw: str = ""  # as written, e.g. "{{ host }}"

    @model_validator(mode="before")
    @classmethod
    def _default_raw(cls, data):
        if isinstance(data, dict) and not data.get("raw") and "name" in data:
            data = {**data, "raw": marker(data["name"])}
        return data


TemplatePart = Annotated[LiteralText | VariableReference, Field(discriminator="kind")]


def marker(name: str) -> str:
    """Canonical form of a reference, also used to mark unresolved ones."""
    return f"{VARIABLE_START}{name}{VARIABLE_END}"


class RenderReport(BaseModel):
    """Rendered text plus the names that could not be resolved."""

    model_config = ConfigDict(frozen=True)

    text: str
    unresolved: tuple[str, ...] = ()

    @property
    def complete(self) -> bool:
        return not self.unresolved


class Template(BaseModel):
    """An ordered sequence of literal and variable parts."""

    model_config = ConfigDict(frozen=True)

    parts: tuple[TemplatePart, ...] = ()

    @classmethod
    def parse(cls, raw: str) -> "Template":
        return parse_template(raw)

    @property
    def raw(self) -> str:
        return "".join(part.raw for part in self.parts)

    @property
    def is_static(self) -> bool:
        return not any(isinstance(part, VariableReference) for part in self.parts)

    @property
    def variable_names(self) -> tuple[str, ...]:
        """Referenced names, first occurrence order, without duplicates."""
        names: dict[str, None] = {}
        for part in self.parts:
            if isinstance(part, VariableReference):
                names.setdefault(part.name)
        return tuple(names)

    def render(
        self,
        variables: Mapping[str, "Template"] | None = None,
        *,
        strict: bool = False,
        max_depth: int | None = None,
    ) -> str:
        return render(self, variables, strict=strict, max_depth=max_depth)

    def render_report(
        self,
        variables: Mapping[str, "Template"] | None = None,
        *,
        max_depth: int | None = None,
    ) -> RenderReport:
        return render_report(self, variables, max_depth=max_depth)

    def __str__(self) -> str:
        return self.raw


def parse_template(raw: str) -> Template:
    """Split *raw* into literal and variable parts."""
    parts: list[LiteralText | VariableReference] = []
    position = 0
    for match in VARIABLE_PATTERN.finditer(raw):
        if match.start() > position:
            parts.append(LiteralText(text=raw[position:match.start()]))
        parts.append(VariableReference(name=match.group(1), raw=match.group(0)))
        position = match.end()
    if position < len(raw):
        parts.append(LiteralText(text=raw[position:]))
    return Template(parts=tuple(parts))


def render(
    template: Template,
    variables: Mapping[str, Template] | None = None,
    *,
    strict: bool = False,
    max_depth: int | None = None,
) -> str:
    """Render *template* against *variables*.

    Unknown names are written back as ``{{NAME}}`` unless *strict* is set,
    in which case UnresolvedVariable is raised. Variable values are
    rendered recursively; nesting deeper than *max_depth* raises
    TemplateRecursionExceeded. *max_depth* defaults to the configured
    ``max_render_depth`` and must be at least 1.
    """
    depth = _depth_bound(max_depth)
    return _render(template, variables or {}, depth, 0, [], strict)


def render_report(
    template: Template,
    variables: Mapping[str, Template] | None = None,
    *,
    max_depth: int | None = None,
) -> RenderReport:
    """Render leniently and report which names were left unresolved."""
    depth = _depth_bound(max_depth)
    unresolved: list[str] = []
    text = _render(template, variables or {}, depth, 0, unresolved, False)
    return RenderReport(text=text, unresolved=tuple(dict.fromkeys(unresolved)))


def _render(
    template: Template,
    variables: Mapping[str, Template],
    max_depth: int,
    level: int,
    unresolved: list[str],
    strict: bool,
) -> str:
    out: list[str] = []
    for part in template.parts:
        if isinstance(part, LiteralText):
            out.append(part.text)
            continue
        value = variables.get(part.name)
        if value is None:
            if strict:
                raise UnresolvedVariable(part.name)
            unresolved.append(part.name)
            out.append(marker(part.name))
            continue
        if level >= max_depth:
            raise TemplateRecursionExceeded(part.name, max_depth)
        out.append(_render(value, variables, max_depth, level + 1, unresolved, strict))
    return "".join(out)


def _depth_bound(max_depth: int | None) -> int:
    if max_depth is None:
        return get_settings().max_render_depth
    if max_depth < 1:
        raise ValueError(f"max_depth must be at least 1, got {max_depth}")
    return max_depth
