"""Fluent HTTP request builder and response wrapper."""

from ._client import Client
from ._config import Config
from ._response import Response
from ._retry import RetryPolicy, run_with_retries
from ._transport import HttpxExecutor, RequestExecutor
from ._utils import Attachment, AuthDirective, RequestDescriptor, setup_logging
from ._utils.constants import (
    BODY_FORMAT_FORM,
    BODY_FORMAT_JSON,
    BODY_FORMAT_MULTIPART,
    BODY_FORMAT_RAW,
)
from .models import (
    AttachmentError,
    Collection,
    FluentHttpError,
    ImmutableAccessError,
    RequestError,
    TransportError,
)

__all__ = [
    "Attachment",
    "AttachmentError",
    "AuthDirective",
    "BODY_FORMAT_FORM",
    "BODY_FORMAT_JSON",
    "BODY_FORMAT_MULTIPART",
    "BODY_FORMAT_RAW",
    "Client",
    "Collection",
    "Config",
    "FluentHttpError",
    "HttpxExecutor",
    "ImmutableAccessError",
    "RequestDescriptor",
    "RequestError",
    "RequestExecutor",
    "Response",
    "RetryPolicy",
    "TransportError",
    "run_with_retries",
    "setup_logging",
]
