from logging import getLogger
from typing import Any, Iterable, Mapping, Optional, Sequence, Union

from ._config import Config
from ._response import Response
from ._retry import RetryPolicy, RetryPredicate, run_with_retries
from ._transport import HttpxExecutor, RequestExecutor
from ._utils import (
    Attachment,
    AuthDirective,
    RequestDescriptor,
    apply_auth,
    build_url,
    encode_body,
    expand_url,
    masked_headers,
    merge_query,
    setup_logging,
)
from ._utils._url import QueryInput
from ._utils.constants import (
    AUTH_BASIC,
    AUTH_DIGEST,
    AUTH_NTLM,
    BODY_FORMAT_FORM,
    BODY_FORMAT_JSON,
    BODY_FORMAT_MULTIPART,
    BODY_FORMAT_RAW,
    BODY_FORMATS,
    CONTENT_TYPE_FORM,
    CONTENT_TYPE_JSON,
    HEADER_ACCEPT,
    HEADER_AUTHORIZATION,
    HEADER_CONTENT_TYPE,
    LOGGER_NAME,
)

Timeout = Union[int, float]


class Client:
    """Fluent HTTP request builder.

    Configuration methods mutate this instance and return it, so calls can be
    chained. A verb call (``get``, ``post``, ...) turns the accumulated
    configuration into one request, executes it with the configured retry
    policy, and returns a ``Response``. Configuration is carried over to every
    later call on the same instance, so use one client per logical call
    chain. Instances are not safe to share between threads.

    Transport failures never raise: they come back as a ``Response`` with
    status ``0``. Use ``Response.throw()`` and friends to opt into exceptions.

    Examples:
        ```python
        from fluenthttp import Client

        response = (
            Client()
            .base_url("https://api.example.com")
            .with_token("secret")
            .with_url_parameters({"user": 42})
            .retry(3, 100, lambda response, error: error is not None)
            .get("/users/{user}", {"expand": "teams"})
        )

        response.throw().json("name")
        ```
    """

    def __init__(
        self,
        *,
        config: Optional[Config] = None,
        executor: Optional[RequestExecutor] = None,
    ) -> None:
        self._logger = getLogger(LOGGER_NAME)
        self._config = config or Config()
        self._executor: RequestExecutor = executor or HttpxExecutor()

        self._url_parameters: dict[str, Any] = {}
        self._query_parameters: dict[str, Any] = {}
        self._raw_body: Union[str, bytes, None] = None
        self._files: list[Attachment] = []
        self._headers: dict[str, Any] = {}
        self._auth: Optional[AuthDirective] = None
        self._timeout: Optional[Timeout] = self._config.timeout
        self._connect_timeout: Optional[Timeout] = self._config.connect_timeout
        self._retry_policy: Optional[RetryPolicy] = None
        self._base_url: str = self._config.base_url
        self._body_format: str = BODY_FORMAT_JSON

        if self._config.debug:
            setup_logging(debug=True)

        self.as_json()
        self.with_headers(self._config.headers)

    @classmethod
    def from_env(cls, *, executor: Optional[RequestExecutor] = None) -> "Client":
        return cls(config=Config.from_env(), executor=executor)

    # URL and query

    def with_url_parameters(self, parameters: Mapping[str, Any]) -> "Client":
        """Set the values substituted into ``{name}`` / ``{+name}`` placeholders."""
        self._url_parameters = dict(parameters)
        return self

    def with_query_parameters(self, parameters: Mapping[str, Any]) -> "Client":
        """Replace the builder-level query parameters.

        Values embedded in the request URL or passed to ``get``/``head``
        override these.
        """
        self._query_parameters = dict(parameters)
        return self

    def base_url(self, url: str) -> "Client":
        self._base_url = url
        return self

    # Body format

    def body_format(self, body_format: str) -> "Client":
        if body_format not in BODY_FORMATS:
            raise ValueError(
                f"Unsupported body format '{body_format}', expected one of {BODY_FORMATS}"
            )
        self._body_format = body_format
        return self

    def as_json(self) -> "Client":
        return self.body_format(BODY_FORMAT_JSON).content_type(CONTENT_TYPE_JSON)

    def as_form(self) -> "Client":
        return self.body_format(BODY_FORMAT_FORM).content_type(CONTENT_TYPE_FORM)

    def as_multipart(self) -> "Client":
        """Send payloads as multipart/form-data.

        The ``Content-Type`` header, boundary included, is set per request.
        """
        return self.body_format(BODY_FORMAT_MULTIPART)

    def with_body(
        self, content: Union[str, bytes], content_type: str = CONTENT_TYPE_JSON
    ) -> "Client":
        """Send ``content`` verbatim as the request body.

        Args:
            content: The pre-encoded body.
            content_type: MIME type for the ``Content-Type`` header.
        """
        self.body_format(BODY_FORMAT_RAW)
        self._raw_body = content
        return self.content_type(content_type)

    def attach(
        self,
        name: Union[str, Sequence[Any], Mapping[str, Any]],
        contents: Any = None,
        filename: Optional[str] = None,
    ) -> "Client":
        """Queue a file for a multipart request.

        Args:
            name: The form field name, or the whole attachment given either as
                a ``[name, contents, filename]`` sequence or as a mapping with
                ``name``, ``contents`` and optional ``filename`` keys.
            contents: Bytes, a filesystem path, a readable stream, or text.
            filename: Filename sent with the part.
        """
        if isinstance(name, Mapping):
            name, contents, filename = (
                name["name"],
                name["contents"],
                name.get("filename"),
            )
        elif not isinstance(name, str):
            name, contents, filename = (list(name) + [None, None])[:3]

        self._files.append(Attachment(str(name), contents, filename))
        return self

    def attach_multiple(self, files: Iterable[Any]) -> "Client":
        for file in files:
            if isinstance(file, Mapping):
                if "name" in file and "contents" in file:
                    self.attach(file)
            elif isinstance(file, (list, tuple)):
                self.attach(file)
        return self

    # Headers

    def with_headers(self, headers: Mapping[str, Any]) -> "Client":
        """Merge ``headers`` into the current headers, overwriting on collision."""
        self._headers.update(headers)
        return self

    def with_header(self, name: str, value: Any) -> "Client":
        return self.with_headers({name: value})

    def replace_headers(self, headers: Mapping[str, Any]) -> "Client":
        self._headers = dict(headers)
        return self

    def content_type(self, content_type: str) -> "Client":
        self._headers[HEADER_CONTENT_TYPE] = content_type
        return self

    def accept(self, content_type: str) -> "Client":
        self._headers[HEADER_ACCEPT] = content_type
        return self

    def accept_json(self) -> "Client":
        return self.accept(CONTENT_TYPE_JSON)

    def header(self, name: str) -> Optional[Any]:
        """Look up a configured header regardless of its casing."""
        normalized = name.lower()
        for key, value in self._headers.items():
            if key.lower() == normalized:
                return value
        return None

    # Auth

    def with_basic_auth(self, username: str, password: str) -> "Client":
        self._auth = AuthDirective(username, password, AUTH_BASIC)
        return self

    def with_digest_auth(self, username: str, password: str) -> "Client":
        self._auth = AuthDirective(username, password, AUTH_DIGEST)
        return self

    def with_ntlm_auth(self, username: str, password: str) -> "Client":
        self._auth = AuthDirective(username, password, AUTH_NTLM)
        return self

    def with_token(self, token: str, type: str = "Bearer") -> "Client":
        """Set the ``Authorization`` header to ``"{type} {token}"``."""
        self._headers[HEADER_AUTHORIZATION] = f"{type.strip()} {token.strip()}"
        return self

    # Timeouts and retries

    def timeout(self, seconds: Timeout) -> "Client":
        if seconds < 0:
            raise ValueError("Timeout must be non-negative")
        self._timeout = seconds
        return self

    def connect_timeout(self, seconds: Timeout) -> "Client":
        if seconds < 0:
            raise ValueError("Connect timeout must be non-negative")
        self._connect_timeout = seconds
        return self

    def retry(
        self,
        times: Union[int, Sequence[int]],
        sleep_milliseconds: Any = 0,
        when: Optional[RetryPredicate] = None,
        throw: bool = True,
    ) -> "Client":
        """Configure retries for subsequent requests.

        Args:
            times: Total attempts, or an ``(attempts, delay)`` pair.
            sleep_milliseconds: Delay between attempts. A callable is accepted
                and treated as no delay.
            when: ``when(response, error)`` returning True to try again. Only
                failed responses (status >= 400) and transport errors are
                offered to it.
            throw: Stored on the policy; responses are still returned, never
                raised, when attempts run out.

        Examples:
            ```python
            client.retry(3, 100, lambda response, error: response.status() == 503)
            client.retry((5, 250))
            ```
        """
        if isinstance(times, (list, tuple)):
            attempts, delay = times
        else:
            attempts = times
            delay = 0 if callable(sleep_milliseconds) else sleep_milliseconds

        if attempts < 1:
            raise ValueError("retry() requires at least one attempt")

        self._retry_policy = RetryPolicy(
            times=attempts, delay=delay, when=when, throw=throw
        )
        return self

    # Verbs

    def get(self, url: str, query: QueryInput = None) -> Response:
        return self.send("GET", url, {} if query is None else {"query": query})

    def head(self, url: str, query: QueryInput = None) -> Response:
        return self.send("HEAD", url, {} if query is None else {"query": query})

    def post(self, url: str, data: Any = None) -> Response:
        return self.send("POST", url, {self._body_format: _payload(data)})

    def put(self, url: str, data: Any = None) -> Response:
        return self.send("PUT", url, {self._body_format: _payload(data)})

    def patch(self, url: str, data: Any = None) -> Response:
        return self.send("PATCH", url, {self._body_format: _payload(data)})

    def delete(self, url: str, data: Any = None) -> Response:
        return self.send("DELETE", url, {self._body_format: data} if data else {})

    def send(
        self, method: str, url: str, options: Optional[dict[str, Any]] = None
    ) -> Response:
        """Build, execute and retry a single request.

        Args:
            method: HTTP method.
            url: Absolute URL or a path relative to the base URL.
            options: Per-call options. ``query`` holds the inline query; the key
                named after the current body format holds the payload. The
                merged query is written back to ``options["query"]``.

        Returns:
            The final ``Response``. Transport failures produce status 0.

        Raises:
            AttachmentError: A multipart attachment could not be read. Raised
                before any network activity.
        """
        options = options if options is not None else {}
        descriptor = self._build_descriptor(method.upper(), url, options)

        self._logger.debug(f"Request: {descriptor.method} {descriptor.url}")
        self._logger.debug(f"HEADERS: {masked_headers(descriptor.headers)}")

        return run_with_retries(
            lambda: self._executor.execute(descriptor), self._retry_policy
        )

    def _build_descriptor(
        self, method: str, url: str, options: dict[str, Any]
    ) -> RequestDescriptor:
        expanded = expand_url(self._base_url, url, self._url_parameters)
        clean_url, query = merge_query(
            expanded, self._query_parameters, options.get("query")
        )
        options["query"] = query

        headers = dict(self._headers)
        body: Optional[bytes] = None

        if method not in ("GET", "HEAD") and options.get(self._body_format) is not None:
            encoded = encode_body(
                self._body_format,
                options[self._body_format],
                self._files,
                self._raw_body,
            )
            body = encoded.content
            if encoded.content_type is not None:
                self._apply_content_type(headers, encoded.content_type)

        return RequestDescriptor(
            method=method,
            url=build_url(clean_url, query),
            headers=[f"{name}: {value}" for name, value in headers.items()],
            body=body,
            auth=apply_auth(self._auth),
            timeout=self._timeout,
            connect_timeout=self._connect_timeout,
        )

    def _apply_content_type(self, headers: dict[str, Any], content_type: str) -> None:
        existing = [k for k in headers if k.lower() == HEADER_CONTENT_TYPE.lower()]
        if self._body_format == BODY_FORMAT_MULTIPART:
            for key in existing:
                del headers[key]
            headers[HEADER_CONTENT_TYPE] = content_type
        elif not existing:
            headers[HEADER_CONTENT_TYPE] = content_type


def _payload(data: Any) -> Any:
    return {} if data is None else data
