"""Discovery of handler names through the two rpc-router authoring conventions.

Explicit convention: every handler is written by hand and registered with `.into_dyn()`,
its signature carries the parameter and result types.

Declarative convention: `generate_common_rpc_fns!` generates the CRUD handlers of an entity
from a handful of type names, and `router_builder!` lists the handlers that are exposed.
The generated handlers have no signature in the source, so their types are synthesized from
the handler name and the declared roles.
"""

from __future__ import annotations

import logging
import re

from rpc_stub_generator.helper import camel_to_snake, split_top_level, strip_line_comments
from rpc_stub_generator.rpc_types import HANDLER_KINDS, CommonFnsRole, HandlerKind
from rpc_stub_generator.writer_dto import CommonFnsDeclaration, HandlerParams, Param

logger = logging.getLogger(__name__)

INTO_DYN_PATTERN = re.compile(r"(?P<name>\w+)\s*\.into_dyn\(\)")
ROUTER_BUILDER_PATTERN = re.compile(r"router_builder!\((?P<args>[\s\S]*?)\)")
COMMON_RPC_FNS_PATTERN = re.compile(r"generate_common_rpc_fns!\((?P<args>[\s\S]*?)\)")
ROLE_PATTERN = re.compile(r"^\s+(?P<role>\w+):\s+(?P<model_type>\w+),?\s*$", re.MULTILINE)

SYNTHESIZED_PARAM_NAME = "params"


class RpcFnsResolutionError(Exception):
    """Raised when the declarative handlers of a file cannot be resolved."""

    def __init__(self, path: str, message: str):
        self.path = path
        super().__init__(f"{path}: {message}")


class CommonRpcFnsMissingError(RpcFnsResolutionError):
    """Raised when routes need `generate_common_rpc_fns!` but the file has none."""

    def __init__(self, path: str, handler_names: list[str]):
        super().__init__(path, f"no generate_common_rpc_fns! declaration for routes {', '.join(handler_names)}")


class RoleMissingError(RpcFnsResolutionError):
    """Raised when a role needed by a declared route is absent from `generate_common_rpc_fns!`."""

    role: str = ""

    def __init__(self, path: str, handler_name: str | None = None):
        needed_by = f" (needed by '{handler_name}')" if handler_name else ""
        super().__init__(path, f"{self.role} missing from generate_common_rpc_fns!{needed_by}")


class EntityMissingError(RoleMissingError):
    role = CommonFnsRole.ENTITY


class ForCreateMissingError(RoleMissingError):
    role = CommonFnsRole.FOR_CREATE


class ForUpdateMissingError(RoleMissingError):
    role = CommonFnsRole.FOR_UPDATE


class FilterMissingError(RoleMissingError):
    role = CommonFnsRole.FILTER


ROLE_MISSING_ERRORS: dict[str, type[RoleMissingError]] = {
    error.role: error
    for error in (EntityMissingError, ForCreateMissingError, ForUpdateMissingError, FilterMissingError)
}


def get_handler_names_manual(content: str) -> list[str]:
    """Find the handlers registered with `.into_dyn()`, in file order.

    Args:
        content (str): The content of the handler file.

    Returns:
        list[str]: The handler names.
    """
    return [match.group("name") for match in INTO_DYN_PATTERN.finditer(content)]


def get_route_builder_fns(content: str) -> list[str]:
    """Find the handler names listed by the first `router_builder!` invocation.

    Commented out lines are ignored.

    Args:
        content (str): The content of the handler file.

    Returns:
        list[str]: The route names, in declaration order.
    """
    match = ROUTER_BUILDER_PATTERN.search(strip_line_comments(content))
    if match is None:
        return []

    return split_top_level(match.group("args"))


def get_common_rpc_fns(content: str) -> CommonFnsDeclaration:
    """Parse the `role: Type` lines of the first `generate_common_rpc_fns!` invocation.

    Args:
        content (str): The content of the handler file.

    Returns:
        CommonFnsDeclaration: The declared roles, empty if there is no invocation.
    """
    declaration = CommonFnsDeclaration()

    match = COMMON_RPC_FNS_PATTERN.search(strip_line_comments(content))
    if match is None:
        return declaration

    for role_match in ROLE_PATTERN.finditer(match.group("args")):
        declaration.roles[role_match.group("role")] = role_match.group("model_type")

    return declaration


def match_handler_kind(handler_name: str, entity_type: str) -> HandlerKind | None:
    """Find the generated handler kind whose name template produces `handler_name`.

    Args:
        handler_name (str): The route name.
        entity_type (str): The PascalCase entity type, e.g. `MedicalRecord`.

    Returns:
        HandlerKind | None: The matching kind, or None if the name follows no template.
    """
    suffix = camel_to_snake(entity_type)
    for kind in HANDLER_KINDS:
        if kind.handler_name(suffix) == handler_name:
            return kind

    return None


def get_handlers_from_route_builder(
    path: str,
    handler_names: list[str],
    declaration: CommonFnsDeclaration,
) -> list[tuple[str, HandlerParams]]:
    """Synthesize the parameters and result types of the generated handlers of a file.

    Args:
        path (str): The path of the handler file, for error reporting.
        handler_names (list[str]): Route names without a hand-written signature.
        declaration (CommonFnsDeclaration): The roles declared in the same file.

    Raises:
        CommonRpcFnsMissingError: If there are routes but no declaration.
        RoleMissingError: If a role needed by one of the routes is not declared.

    Returns:
        list[tuple[str, HandlerParams]]: Handler name and synthesized signature, in route order.
    """
    if not handler_names:
        return []

    if not declaration:
        raise CommonRpcFnsMissingError(path, handler_names)

    entity_type = declaration.entity
    if entity_type is None:
        raise EntityMissingError(path)

    handlers: list[tuple[str, HandlerParams]] = []
    for handler_name in handler_names:
        kind = match_handler_kind(handler_name, entity_type)

        if kind is None:
            logger.warning(
                f"Handler: {handler_name}, Error: Cannot match handler. Ignoring as it might be a function defined "
                "outside of the generate_common_rpc_fns macro."
            )
            continue

        model_type = None
        if kind.role is not None:
            model_type = declaration.get(kind.role)
            if model_type is None:
                raise ROLE_MISSING_ERRORS[kind.role](path, handler_name)

        logger.debug(f"Resolved route '{handler_name}' as generated '{kind.name}' handler ({kind.shape})")
        handlers.append(
            (
                handler_name,
                HandlerParams(
                    params=[Param(name=SYNTHESIZED_PARAM_NAME, type_text=kind.param_type(model_type))],
                    result_type_text=kind.result_type(entity_type),
                ),
            )
        )

    return handlers
