"""Collection of the type names declared in typeshare generated bindings."""

from __future__ import annotations

import re
from collections.abc import Iterable
from dataclasses import dataclass

from rpc_stub_generator.rpc_types import BUILTIN_TYPESCRIPT_TYPES, PREAMBLE_TYPES

DECLARATION_PATTERN = re.compile(r"export (?:interface|type) (?P<name>\w+) (?:\{|=)")


def get_bindings(content: str) -> list[str]:
    """Find the names of all exported interfaces and types in a bindings file.

    Args:
        content (str): The content of a bindings file.

    Returns:
        list[str]: The declared names, in file order.
    """
    return [match.group("name") for match in DECLARATION_PATTERN.finditer(content)]


@dataclass(frozen=True)
class BindingCatalog:
    """The deduplicated names of all types declared in the bindings, in first seen order."""

    names: tuple[str, ...] = ()

    @classmethod
    def from_names(cls, names: Iterable[str]) -> BindingCatalog:
        return cls(tuple(dict.fromkeys(names)))

    def __contains__(self, name: object) -> bool:
        return name in self.names

    def __len__(self) -> int:
        return len(self.names)

    def knows_type(self, type_text: str) -> bool:
        """Whether a (TypeScript) type is declared in the bindings or needs no declaration.

        Generic types are accepted if any of their single-level arguments is a known binding,
        e.g. `ParamsForCreate<PatientForCreate>`.

        Args:
            type_text (str): The type to check.

        Returns:
            bool: True if the type is known.
        """
        if type_text in BUILTIN_TYPESCRIPT_TYPES or type_text in PREAMBLE_TYPES:
            return True

        return any(name == type_text or f"<{name}>" in type_text for name in self.names + BUILTIN_TYPESCRIPT_TYPES)
