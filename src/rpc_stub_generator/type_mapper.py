"""Mapping of Rust types to their TypeScript counterparts, and classification of parameter shapes."""

from __future__ import annotations

import re

from rpc_stub_generator.rpc_types import (
    DATA_RPC_RESULT,
    NULL_TYPE,
    PARAM_SHAPE_MARKERS,
    RUST_TYPE_TO_TYPESCRIPT,
    ParamShape,
)

RETURN_PAYLOAD_PATTERN = re.compile(rf"<{DATA_RPC_RESULT}<(?P<payload>.*)>>")


def map_type(type_text: str) -> str:
    """Rewrite the Rust idioms of a type to TypeScript.

    Collections become arrays, 64 bit integers become strings (JSON numbers lose precision)
    and the unit type becomes null. The rewrites do not overlap, so their order does not matter.

    Args:
        type_text (str): The Rust type.

    Returns:
        str: The TypeScript type.
    """
    for rust_type, typescript_type in RUST_TYPE_TO_TYPESCRIPT.items():
        type_text = type_text.replace(rust_type, typescript_type)

    return type_text


def map_return_payload(result_type_text: str) -> str:
    """The TypeScript type of the data a handler returns.

    Only results of the form `Result<DataRpcResult<T>>` carry data, everything else maps to null.

    Args:
        result_type_text (str): The Rust result type of the handler.

    Returns:
        str: The mapped payload type `T`, or "null".
    """
    match = RETURN_PAYLOAD_PATTERN.search(result_type_text)
    if match is None:
        return NULL_TYPE

    return map_type(match.group("payload"))


def classify_param(type_text: str) -> str:
    """Classify the raw Rust parameter type into a `ParamShape`.

    Args:
        type_text (str): The Rust parameter type, before mapping.

    Returns:
        str: One of the `ParamShape` values.
    """
    for marker, shape in PARAM_SHAPE_MARKERS:
        if marker in type_text:
            return shape

    return ParamShape.UNCLASSIFIED
