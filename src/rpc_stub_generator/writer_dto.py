"""Data transfer objects passed between the extraction steps and the client writer."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import override

from rpc_stub_generator.rpc_types import CommonFnsRole


@dataclass
class Param:
    """A single handler parameter, as written in the Rust source.

    Attributes:
        name: Parameter name (e.g. "params")
        type_text: Raw Rust type of the parameter (e.g. "ParamsIded")
    """

    name: str
    type_text: str


@dataclass
class HandlerParams:
    """Parameters and result type of a handler signature.

    A handler whose signature could not be found has no parameters and an empty result.
    """

    params: list[Param] = field(default_factory=list)
    result_type_text: str = ""

    @property
    def is_empty(self) -> bool:
        return not self.params


@dataclass
class CommonFnsDeclaration:
    """The role to type mapping declared by one `generate_common_rpc_fns!` invocation.

    Attributes:
        roles: Mapping from role name (e.g. "Entity") to the Rust type name.
    """

    roles: dict[str, str] = field(default_factory=dict)

    def get(self, role: str) -> str | None:
        """Return the type declared for `role`, or None if the role is absent."""
        return self.roles.get(role)

    @property
    def entity(self) -> str | None:
        return self.get(CommonFnsRole.ENTITY)

    def __bool__(self) -> bool:
        return bool(self.roles)


@dataclass
class HandlerDescriptor:
    """Everything the writer needs to know about a single RPC handler.

    Attributes:
        name: Handler name, which is also the JSON-RPC method name
        entity_tag: Entity the handler is grouped under, derived from its file name
        params: Ordered handler parameters, without framework-injected ones
        result_type_text: Raw Rust result type
    """

    name: str
    entity_tag: str
    params: list[Param]
    result_type_text: str

    @classmethod
    def from_handler_params(cls, name: str, entity_tag: str, handler_params: HandlerParams) -> HandlerDescriptor:
        """Create a descriptor from a resolved signature."""
        return cls(
            name=name,
            entity_tag=entity_tag,
            params=list(handler_params.params),
            result_type_text=handler_params.result_type_text,
        )

    @property
    def is_renderable(self) -> bool:
        """A handler without parameters cannot be called through the generated client."""
        return bool(self.params)

    @property
    def first_param(self) -> Param:
        return self.params[0]


class ClientModuleCollection:
    """Rendered client functions, grouped by entity tag in the order the tags were first seen.

    Attributes:
        modules: Mapping from entity tag to the rendered functions of that entity
    """

    modules: dict[str, list[str]]

    def __init__(self):
        """Initialize empty collection."""
        self.modules = {}

    def add_function(self, entity_tag: str, function: str) -> None:
        """Add a rendered client function.

        Args:
            entity_tag: The entity the function belongs to
            function: The rendered function text
        """
        self.modules.setdefault(entity_tag, []).append(function)

    def has_functions(self) -> bool:
        """Check if any client function was added."""
        return len(self.modules) > 0

    @override
    def __repr__(self) -> str:
        """Return a readable representation for debugging."""
        return (
            f"ClientModuleCollection("
            f"entities={len(self.modules)}, "
            f"functions={sum(len(functions) for functions in self.modules.values())})"
        )
