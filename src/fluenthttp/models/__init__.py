from .collection import Collection
from .errors import (
    AttachmentError,
    FluentHttpError,
    ImmutableAccessError,
    RequestError,
    TransportError,
)

__all__ = [
    "Collection",
    "AttachmentError",
    "FluentHttpError",
    "ImmutableAccessError",
    "RequestError",
    "TransportError",
]
