"""Calling discovered endpoints and rendering what comes back."""

from anyapi.invocation.advisor import Advisory, ApiFailure, advise, extract_error_message
from anyapi.invocation.executor import RequestExecutor
from anyapi.invocation.formatting import (
    ArrayResult,
    EmptyResult,
    ObjectResult,
    ScalarResult,
    classify_response,
    describe_capabilities,
    format_response,
    summarize_object,
)
from anyapi.invocation.payloads import PAYLOAD_SHAPES, find_shape, shape_payload

__all__ = [
    "Advisory",
    "ApiFailure",
    "ArrayResult",
    "EmptyResult",
    "ObjectResult",
    "PAYLOAD_SHAPES",
    "RequestExecutor",
    "ScalarResult",
    "advise",
    "classify_response",
    "describe_capabilities",
    "extract_error_message",
    "find_shape",
    "format_response",
    "shape_payload",
    "summarize_object",
]
