"""The variable environment built from ``@NAME = VALUE`` declarations."""

from collections.abc import Iterable, Iterator, Mapping

from pydantic import BaseModel, ConfigDict, GetCoreSchemaHandler
from pydantic_core import core_schema

from rest_parser.template import Template, parse_template


class VariableDeclaration(BaseModel):
    """One ``@NAME = VALUE`` line as it appeared in the document."""

    model_config = ConfigDict(frozen=True)

    name: str
    value: Template
    line: int | None = None


class VariableEnvironment(Mapping[str, Template]):
    """Read-only name -> Template mapping.

    Later declarations of the same name win. Every declaration, duplicates
    included, stays available in ``declarations`` for diagnostics.
    """

    def __init__(self, declarations: Iterable[VariableDeclaration] = ()):
        self._declarations = tuple(declarations)
        self._values: dict[str, Template] = {}
        for declaration in self._declarations:
            self._values[declaration.name] = declaration.value

    @classmethod
    def from_values(cls, values: Mapping[str, str | Template]) -> "VariableEnvironment":
        """Build an environment from plain strings (parsed as templates) or templates."""
        return cls(
            VariableDeclaration(
                name=name,
                value=value if isinstance(value, Template) else parse_template(value),
            )
            for name, value in values.items()
        )

    @classmethod
    def __get_pydantic_core_schema__(cls, source_type, handler: GetCoreSchemaHandler) -> core_schema.CoreSchema:
        return core_schema.is_instance_schema(cls)

    @property
    def declarations(self) -> tuple[VariableDeclaration, ...]:
        return self._declarations

    def merged(self, overrides: Mapping[str, str | Template]) -> "VariableEnvironment":
        """Return a new environment where *overrides* take precedence."""
        if not isinstance(overrides, VariableEnvironment):
            overrides = VariableEnvironment.from_values(overrides)
        return VariableEnvironment(self._declarations + overrides.declarations)

    def raw_values(self) -> dict[str, str]:
        return {name: value.raw for name, value in self._values.items()}

    def __getitem__(self, name: str) -> Template:
        return self._values[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._values)

    def __len__(self) -> int:
        return len(self._values)

    def __repr__(self) -> str:
        return f"VariableEnvironment({self.raw_values()!r})"
