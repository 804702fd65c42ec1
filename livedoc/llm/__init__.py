"""Generation service client."""

from .client import (
    ClientError,
    GenerationClient,
    GenerationError,
    InvalidResponseError,
    RetriesExhaustedError,
    RetryPolicy,
    TransientError,
)

__all__ = [
    "ClientError",
    "GenerationClient",
    "GenerationError",
    "InvalidResponseError",
    "RetriesExhaustedError",
    "RetryPolicy",
    "TransientError",
]
