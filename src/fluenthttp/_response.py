import io
import json
from types import SimpleNamespace
from typing import Any, Callable, Mapping, Optional, Union

from .models.collection import Collection
from .models.errors import ImmutableAccessError, RequestError

Condition = Union[bool, Callable[["Response"], bool]]

_UNDECODED = object()


class Response:
    """The result of one HTTP exchange.

    Holds the status code, the headers as received and the raw body. A status
    of ``0`` is reserved for "no response obtained": it is only produced when
    the transport failed and is never returned by a live exchange.

    The decoded JSON document is computed on first access and cached. A body
    that is not valid JSON decodes to an empty document instead of raising.

    Keyed access reads from the decoded document and is read-only:

    ```python
    response = client.get("/users/1")
    response["name"]          # same as response.get("name")
    "email" in response       # same as response.has("email")
    response["name"] = "x"    # raises ImmutableAccessError
    ```
    """

    def __init__(
        self,
        status: int,
        headers: Optional[Mapping[str, str]] = None,
        body: Union[str, bytes, None] = b"",
    ) -> None:
        self._status = int(status)
        self._headers = dict(headers or {})
        if body is None:
            body = b""
        self._content = body.encode("utf-8") if isinstance(body, str) else bytes(body)
        self._decoded: Any = _UNDECODED

    @classmethod
    def synthetic(cls) -> "Response":
        """Stand-in for an exchange that produced no response at all."""
        return cls(0, {}, b"")

    # Body access

    @property
    def content(self) -> bytes:
        return self._content

    def body(self) -> str:
        return self._content.decode("utf-8", errors="replace")

    def _decode(self) -> Any:
        if self._decoded is _UNDECODED:
            try:
                decoded = json.loads(self._content)
            except ValueError:
                decoded = {}
            if not isinstance(decoded, (dict, list)):
                decoded = {}
            self._decoded = decoded
        return self._decoded

    def json(self, key: Any = None, default: Any = None) -> Any:
        """Return the decoded body, or the value stored under ``key``.

        Args:
            key: Optional key (or list index) to look up.
            default: Returned when ``key`` is absent.
        """
        decoded = self._decode()
        if key is None:
            return decoded
        return _lookup(decoded, key, default)

    def object(self) -> Any:
        """Decode the body into attribute-style objects.

        Independent of the ``json()`` cache; an undecodable body yields an
        empty ``SimpleNamespace``.
        """
        try:
            decoded = json.loads(
                self._content, object_hook=lambda d: SimpleNamespace(**d)
            )
        except (ValueError, TypeError):
            return SimpleNamespace()
        if decoded is None:
            return SimpleNamespace()
        return decoded

    def collect(self, key: Any = None) -> Collection:
        decoded = self._decode()
        if key is not None and _has(decoded, key):
            value = _lookup(decoded, key)
            if isinstance(value, (dict, list)):
                return Collection(value)
            return Collection([value])
        return Collection(decoded)

    def resource(self) -> io.BytesIO:
        """Return the body as a readable stream positioned at the start."""
        return io.BytesIO(self._content)

    # Status and headers

    def status(self) -> int:
        return self._status

    def headers(self) -> dict[str, str]:
        return dict(self._headers)

    def header(self, name: str) -> str:
        normalized = name.lower()
        for key, value in self._headers.items():
            if key.lower() == normalized:
                return value
        return ""

    def successful(self) -> bool:
        return 200 <= self._status < 300

    def redirect(self) -> bool:
        return 300 <= self._status < 400

    def failed(self) -> bool:
        return self._status >= 400

    def client_error(self) -> bool:
        return 400 <= self._status < 500

    def server_error(self) -> bool:
        return self._status >= 500

    def ok(self) -> bool:
        return self._status == 200

    def created(self) -> bool:
        return self._status == 201

    def accepted(self) -> bool:
        return self._status == 202

    def no_content(self) -> bool:
        return self._status == 204

    def moved_permanently(self) -> bool:
        return self._status == 301

    def found(self) -> bool:
        return self._status == 302

    def bad_request(self) -> bool:
        return self._status == 400

    def unauthorized(self) -> bool:
        return self._status == 401

    def payment_required(self) -> bool:
        return self._status == 402

    def forbidden(self) -> bool:
        return self._status == 403

    def not_found(self) -> bool:
        return self._status == 404

    def request_timeout(self) -> bool:
        return self._status == 408

    def conflict(self) -> bool:
        return self._status == 409

    def unprocessable_entity(self) -> bool:
        return self._status == 422

    def too_many_requests(self) -> bool:
        return self._status == 429

    def internal_server_error(self) -> bool:
        return self._status == 500

    # Error helpers

    def on_error(self, callback: Callable[["Response"], Any]) -> "Response":
        """Call ``callback(self)`` if the response failed, then return self."""
        if self.failed():
            callback(self)
        return self

    def throw(
        self, callback: Optional[Callable[["Response"], Any]] = None
    ) -> "Response":
        """Raise ``RequestError`` if the response failed (status >= 400).

        Args:
            callback: Called with this response just before raising.

        Raises:
            RequestError: The response failed.
        """
        if self.failed():
            if callback is not None:
                callback(self)
            raise RequestError(
                f"HTTP request failed with status {self._status}",
                self._status,
                self,
            )
        return self

    def throw_if(self, condition: Condition) -> "Response":
        """Raise ``RequestError`` if the response failed and ``condition`` holds.

        A callable condition is always called with this response, whether or
        not the response failed.
        """
        should_throw = self._evaluate(condition)
        if self.failed() and should_throw:
            raise RequestError(
                f"HTTP request failed with status {self._status}.", self._status, self
            )
        return self

    def throw_unless(self, condition: Condition) -> "Response":
        should_throw = self._evaluate(condition)
        if self.failed() and not should_throw:
            raise RequestError(
                f"HTTP request failed with status {self._status}.", self._status, self
            )
        return self

    def throw_if_status(self, code: int) -> "Response":
        if self._status == code:
            raise RequestError(f"HTTP request returned status {code}.", code, self)
        return self

    def throw_unless_status(self, code: int) -> "Response":
        if self._status != code:
            raise RequestError(
                f"Expected status {code} but received {self._status}.",
                self._status,
                self,
            )
        return self

    def _evaluate(self, condition: Condition) -> bool:
        if callable(condition):
            return bool(condition(self))
        return bool(condition)

    # Read-only keyed access

    def get(self, key: Any, default: Any = None) -> Any:
        return _lookup(self._decode(), key, default)

    def has(self, key: Any) -> bool:
        return _has(self._decode(), key)

    def __getitem__(self, key: Any) -> Any:
        return self.get(key)

    def __contains__(self, key: object) -> bool:
        return self.has(key)

    def __setitem__(self, key: Any, value: Any) -> None:
        raise ImmutableAccessError()

    def __delitem__(self, key: Any) -> None:
        raise ImmutableAccessError()

    def __repr__(self) -> str:
        return f"<Response [{self._status}]>"


def _has(document: Any, key: Any) -> bool:
    if isinstance(document, dict):
        return key in document
    if isinstance(document, list) and isinstance(key, int):
        return -len(document) <= key < len(document)
    return False


def _lookup(document: Any, key: Any, default: Any = None) -> Any:
    if not _has(document, key):
        return default
    value = document[key]
    return default if value is None else value
