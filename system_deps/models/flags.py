"""Build directives emitted for the invoking build step."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

DEFAULT_DIRECTIVE_PREFIX = "system-deps"


class DirectiveKind(Enum):
    """Directive kinds and their textual form after the prefix."""

    INCLUDE_PATH = "include="
    SEARCH_NATIVE = "link-search=native="
    SEARCH_FRAMEWORK = "link-search=framework="
    LIB = "link-lib="
    LIB_FRAMEWORK = "link-lib=framework="


@dataclass(frozen=True)
class BuildDirective:
    kind: DirectiveKind
    payload: str

    def render(self, prefix: str = DEFAULT_DIRECTIVE_PREFIX) -> str:
        return f"{prefix}:{self.kind.value}{self.payload}"


@dataclass
class BuildFlags:
    """Ordered collection of directives."""

    directives: list[BuildDirective] = field(default_factory=list)

    def add(self, kind: DirectiveKind, payload: str) -> None:
        self.directives.append(BuildDirective(kind, payload))

    def lines(self, prefix: str = DEFAULT_DIRECTIVE_PREFIX) -> list[str]:
        return [d.render(prefix) for d in self.directives]

    def render(self, prefix: str = DEFAULT_DIRECTIVE_PREFIX) -> str:
        """All directives, one per line, each newline-terminated."""
        return "".join(line + "\n" for line in self.lines(prefix))

    def __len__(self) -> int:
        return len(self.directives)

    def __iter__(self):
        return iter(self.directives)
