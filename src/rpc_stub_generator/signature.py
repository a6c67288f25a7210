"""Resolution of handler parameters and result types from `async fn` signatures."""

from __future__ import annotations

import logging
import re

from rpc_stub_generator.helper import split_top_level
from rpc_stub_generator.writer_dto import HandlerParams, Param

logger = logging.getLogger(__name__)

# Parameters that rpc-router injects into every handler, they never travel over the wire.
INJECTED_PARAM_PATTERN = re.compile(r"\s*\b_?(?:ctx: Ctx|mm: ModelManager)\b\s*,?")

PARAM_NAME_SEPARATOR = ": "


def _signature_pattern(handler_name: str) -> re.Pattern[str]:
    # The parameter list ends at the first `)` followed by `->`, so `()` and tuples inside it are kept.
    # It never crosses a `{`, which keeps a signature without result type from reaching the next function.
    return re.compile(
        rf"async fn {re.escape(handler_name)}\((?P<params>[^{{]*?)\)\s*->\s*(?P<result>[^{{]*?)\s*\{{",
        re.DOTALL,
    )


def strip_injected_params(params_text: str) -> str:
    """Remove the context and model manager parameters from a parameter list.

    Args:
        params_text (str): The text between the parentheses of a signature.

    Returns:
        str: The remaining parameter text.
    """
    return INJECTED_PARAM_PATTERN.sub("", params_text.strip()).strip()


def parse_params(params_text: str, depth_aware: bool = False) -> list[Param]:
    """Split a parameter list into named parameters.

    Pieces without a `name: Type` separator (e.g. `self`) are ignored.

    Args:
        params_text (str): Parameter text without injected parameters.
        depth_aware (bool): Passed on to `split_top_level`.

    Returns:
        list[Param]: The parameters in declaration order.
    """
    params = []
    for piece in split_top_level(params_text, depth_aware=depth_aware):
        if PARAM_NAME_SEPARATOR not in piece:
            logger.debug(f"Ignoring parameter without type: '{piece}'")
            continue

        name, type_text = piece.split(PARAM_NAME_SEPARATOR, 1)
        params.append(Param(name=name.strip(), type_text=type_text.strip()))

    return params


def has_signature(content: str, handler_name: str) -> bool:
    """Whether `content` defines an `async fn` with exactly this name."""
    return _signature_pattern(handler_name).search(content) is not None


def get_handler_params(content: str, handler_name: str, depth_aware: bool = False) -> HandlerParams:
    """Find the signature of a handler and extract its parameters and result type.

    Args:
        content (str): The content of the handler file.
        handler_name (str): The exact name of the handler function.
        depth_aware (bool): Whether commas inside generic arguments are kept together.

    Returns:
        HandlerParams: The parameters and result type, empty if no signature was found.
    """
    match = _signature_pattern(handler_name).search(content)
    if match is None:
        logger.debug(f"No signature found for handler '{handler_name}'")
        return HandlerParams()

    params_text = strip_injected_params(match.group("params"))

    return HandlerParams(
        params=parse_params(params_text, depth_aware=depth_aware),
        result_type_text=match.group("result").strip(),
    )
