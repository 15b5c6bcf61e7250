"""Request body encoding for the supported body formats."""

import json
import os
import uuid
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Iterable, Mapping, NamedTuple, Optional, Union
import httpx
from pydantic import BaseModel

from ..models.errors import AttachmentError
from ._url import encode_fields, normalize_fields
from .constants import (
    BODY_FORMAT_FORM,
    BODY_FORMAT_JSON,
    BODY_FORMAT_MULTIPART,
    BODY_FORMAT_RAW,
    CONTENT_TYPE_FORM,
    CONTENT_TYPE_JSON,
    CONTENT_TYPE_MULTIPART,
    CONTENT_TYPE_OCTET_STREAM,
)

# Only used to drive httpx's multipart encoder; never contacted.
_ENCODER_URL = "http://multipart.invalid/"


@dataclass(frozen=True)
class Attachment:
    """A file part queued for a multipart request.

    ``contents`` may be bytes, a filesystem path, a readable stream, or a
    plain string that does not name an existing file.
    """

    name: str
    contents: Any
    filename: Optional[str] = None


class EncodedBody(NamedTuple):
    content: bytes
    content_type: Optional[str] = None


def encode_body(
    body_format: str,
    payload: Any,
    files: Iterable[Attachment] = (),
    raw_body: Union[str, bytes, None] = None,
) -> EncodedBody:
    """Encode ``payload`` according to ``body_format``.

    Args:
        body_format: One of ``body``, ``json``, ``form_params`` or ``multipart``.
        payload: The verb payload. For ``body`` a str/bytes payload wins over
            ``raw_body``.
        files: Attachments, only read for ``multipart``.
        raw_body: Payload stored by ``Client.with_body``.

    Returns:
        The encoded bytes and the content type they require, if any.

    Raises:
        AttachmentError: An attachment could not be read.
        ValueError: ``body_format`` is not recognised.
    """
    if body_format == BODY_FORMAT_RAW:
        content = payload if isinstance(payload, (str, bytes)) else raw_body
        return EncodedBody(_to_bytes(content if content is not None else b""))

    if body_format == BODY_FORMAT_JSON:
        return EncodedBody(
            json.dumps(_jsonable(payload)).encode("utf-8"), CONTENT_TYPE_JSON
        )

    if body_format == BODY_FORMAT_FORM:
        fields = _jsonable(payload) or {}
        return EncodedBody(
            encode_fields(fields).encode("utf-8"), CONTENT_TYPE_FORM
        )

    if body_format == BODY_FORMAT_MULTIPART:
        return _encode_multipart(_jsonable(payload) or {}, files)

    raise ValueError(f"Unsupported body format '{body_format}'")


def _encode_multipart(
    fields: Mapping[str, Any], files: Iterable[Attachment]
) -> EncodedBody:
    parts: list[tuple[str, tuple[Optional[str], Any, Optional[str]]]] = []

    # A part with no filename and no content type renders as a plain field.
    for key, value in normalize_fields(fields).items():
        values = value if isinstance(value, list) else [value]
        for item in values:
            parts.append((key, (None, _to_bytes(item), None)))

    for attachment in files:
        content, filename = read_attachment(attachment)
        parts.append(
            (attachment.name, (filename, content, CONTENT_TYPE_OCTET_STREAM))
        )

    if not parts:
        return EncodedBody(b"", CONTENT_TYPE_MULTIPART)

    request = httpx.Request("POST", _ENCODER_URL, files=parts)
    return EncodedBody(request.read(), request.headers.get("Content-Type"))


def read_attachment(attachment: Attachment) -> tuple[bytes, str]:
    """Resolve an attachment's contents and filename.

    Paths are opened, read in full and closed here; streams are drained.
    """
    source = attachment.contents
    filename = attachment.filename

    if isinstance(source, (bytes, bytearray, memoryview)):
        return bytes(source), filename or _generated_filename()

    if hasattr(source, "read"):
        try:
            data = source.read()
        except (OSError, ValueError) as e:
            raise AttachmentError(attachment.name, source, str(e)) from e
        name = getattr(source, "name", None)
        if not filename and isinstance(name, str) and name:
            filename = os.path.basename(name)
        return _to_bytes(data), filename or _generated_filename()

    if isinstance(source, os.PathLike) or (
        isinstance(source, str) and os.path.isfile(source)
    ):
        path = Path(source)
        try:
            with path.open("rb") as handle:
                data = handle.read()
        except OSError as e:
            raise AttachmentError(attachment.name, source, str(e)) from e
        return data, filename or path.name

    if isinstance(source, str):
        return source.encode("utf-8"), filename or _generated_filename()

    raise AttachmentError(
        attachment.name, source, f"unsupported source type {type(source).__name__}"
    )


def _jsonable(payload: Any) -> Any:
    if isinstance(payload, BaseModel):
        return payload.model_dump(mode="json")
    return payload


def _to_bytes(data: Union[str, bytes, bytearray, None]) -> bytes:
    if data is None:
        return b""
    if isinstance(data, str):
        return data.encode("utf-8")
    return bytes(data)


def _generated_filename() -> str:
    return f"upload_{uuid.uuid4().hex[:12]}"
