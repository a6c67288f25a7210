"""Type definitions that are common to rpc-router handlers and their TypeScript clients."""

from __future__ import annotations

from dataclasses import dataclass

RUST_TYPE_TO_TYPESCRIPT = {
    "Vec<": "Array<",
    "i64": "string",
    "()": "null",
}

# Types that need no declaration in the generated bindings.
BUILTIN_TYPESCRIPT_TYPES = ("null", "string", "String")

# Types declared by the preamble of the generated client.
PREAMBLE_TYPES = (
    "ListOptions",
    "DataRpcResult",
    "RpcResult",
    "RpcError",
    "ParamsIded",
    "ParamsForCreate",
    "ParamsForUpdate",
    "ParamsList",
)

DATA_RPC_RESULT = "DataRpcResult"
NULL_TYPE = "null"


class ParamShape:
    """How the parameters of a handler are bundled into the request body."""

    CREATED = "Created"
    UPDATED = "Updated"
    LISTED = "Listed"
    IDENTIFIED = "Identified"
    UNCLASSIFIED = "Unclassified"


# Checked in order, the first marker found in the raw parameter type decides the shape.
PARAM_SHAPE_MARKERS = (
    ("ParamsForCreate", ParamShape.CREATED),
    ("ParamsForUpdate", ParamShape.UPDATED),
    ("ParamsList", ParamShape.LISTED),
    ("ParamsIded", ParamShape.IDENTIFIED),
)


class CommonFnsRole:
    """Roles of the `generate_common_rpc_fns!` invocation."""

    ENTITY = "Entity"
    FOR_CREATE = "ForCreate"
    FOR_UPDATE = "ForUpdate"
    FILTER = "Filter"


@dataclass(frozen=True)
class HandlerKind:
    """A handler generated by `generate_common_rpc_fns!`, identified by its name template.

    Attributes:
        name: Short name of the kind (e.g. "get").
        name_template: Template of the handler name, `{suffix}` is the snake_case entity name.
        param_template: Template of the parameter type, `{model}` is the type of `role`.
        shape: The request body shape of the synthesized parameter.
        role: The common fns role the parameter type is built from, if any.
        returns_list: Whether the handler returns a list of entities.
    """

    name: str
    name_template: str
    param_template: str
    shape: str
    role: str | None
    returns_list: bool = False

    def handler_name(self, suffix: str) -> str:
        """The handler name for an entity with the given snake_case suffix."""
        return self.name_template.format(suffix=suffix)

    def param_type(self, model_type: str | None) -> str:
        """The synthesized parameter type for this kind."""
        return self.param_template.format(model=model_type)

    def result_type(self, entity_type: str) -> str:
        """The synthesized result type for this kind."""
        payload = f"Vec<{entity_type}>" if self.returns_list else entity_type
        return f"Result<{DATA_RPC_RESULT}<{payload}>>"


HANDLER_KINDS = (
    HandlerKind("get", "get_{suffix}", "ParamsIded", ParamShape.IDENTIFIED, None),
    HandlerKind("create", "create_{suffix}", "ParamsForCreate<{model}>", ParamShape.CREATED, CommonFnsRole.FOR_CREATE),
    HandlerKind("delete", "delete_{suffix}", "ParamsIded", ParamShape.IDENTIFIED, None),
    HandlerKind("update", "update_{suffix}", "ParamsForUpdate<{model}>", ParamShape.UPDATED, CommonFnsRole.FOR_UPDATE),
    HandlerKind(
        "list", "list_{suffix}s", "ParamsList<{model}>", ParamShape.LISTED, CommonFnsRole.FILTER, returns_list=True
    ),
)
