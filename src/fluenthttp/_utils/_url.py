"""URL assembly for outgoing requests.

Combines the base URL, URI template placeholders and the three query sources
(builder-level, embedded in the URL, passed to the verb call) into the final
request URL.
"""

from typing import Any, Mapping, Optional, Union
from urllib.parse import parse_qsl, urlencode

QueryInput = Union[Mapping[str, Any], str, None]

_ABSOLUTE_PREFIXES = ("http://", "https://")


def is_absolute(url: str) -> bool:
    return url.lower().startswith(_ABSOLUTE_PREFIXES)


def parse_query(query: QueryInput) -> dict[str, Any]:
    """Normalize a query given as a mapping or a pre-encoded string.

    Repeated keys in a query string keep their last value.
    """
    if query is None:
        return {}
    if isinstance(query, str):
        return dict(parse_qsl(query.lstrip("?"), keep_blank_values=True))
    if isinstance(query, Mapping):
        return dict(query)
    return {}


def expand_url(base_url: str, url: str, url_parameters: Mapping[str, Any]) -> str:
    """Join ``url`` onto ``base_url`` and substitute template placeholders.

    Both ``{name}`` and ``{+name}`` are replaced by ``str(value)``; no
    reserved-character escaping is applied to either form. Placeholders with
    no matching parameter are left untouched.

    Args:
        base_url: Prefix for relative URLs. May be empty.
        url: Absolute URL, or a path relative to ``base_url``.
        url_parameters: Template variables.

    Returns:
        The expanded URL, possibly still carrying an embedded query string.
    """
    if is_absolute(url):
        raw_url = url
    else:
        raw_url = base_url.rstrip("/") + "/" + url.lstrip("/")

    for key, value in url_parameters.items():
        replacement = str(value)
        raw_url = raw_url.replace("{" + str(key) + "}", replacement)
        raw_url = raw_url.replace("{+" + str(key) + "}", replacement)

    return raw_url


def merge_query(
    url: str,
    stored_query: Mapping[str, Any],
    inline_query: QueryInput = None,
) -> tuple[str, dict[str, Any]]:
    """Split the embedded query off ``url`` and merge every query source.

    Precedence, lowest first: ``stored_query``, the query embedded in
    ``url``, then ``inline_query``.

    Returns:
        A ``(url_without_query, merged_query)`` tuple.
    """
    url_query = parse_query(inline_query)

    if "?" in url:
        url, embedded = url.split("?", 1)
        url_query = {**parse_query(embedded), **url_query}

    return url, {**stored_query, **url_query}


def resolve_url(
    base_url: str,
    url: str,
    url_parameters: Mapping[str, Any],
    stored_query: Mapping[str, Any],
    inline_query: QueryInput = None,
) -> str:
    expanded = expand_url(base_url, url, url_parameters)
    clean_url, query = merge_query(expanded, stored_query, inline_query)
    return build_url(clean_url, query)


def build_url(url: str, query: Optional[Mapping[str, Any]]) -> str:
    encoded = encode_fields(query or {})
    if not encoded:
        return url
    return f"{url}?{encoded}"


def form_scalar(value: Any) -> Union[str, bytes, None]:
    """Text form of a scalar for query, form and multipart encoding.

    Booleans become ``1``/``0``. ``None`` maps to ``None``, which drops the
    field.
    """
    if value is None:
        return None
    if isinstance(value, bool):
        return "1" if value else "0"
    if isinstance(value, (str, bytes)):
        return value
    return str(value)


def normalize_fields(fields: Mapping[Any, Any]) -> dict[str, Any]:
    """Apply ``form_scalar`` to every value, keeping lists as lists."""
    normalized: dict[str, Any] = {}
    for key, value in fields.items():
        if isinstance(value, (list, tuple)):
            items = [form_scalar(item) for item in value]
            items = [item for item in items if item is not None]
            if items:
                normalized[str(key)] = items
            continue
        scalar = form_scalar(value)
        if scalar is not None:
            normalized[str(key)] = scalar
    return normalized


def encode_fields(fields: Mapping[Any, Any]) -> str:
    return urlencode(normalize_fields(fields), doseq=True)
