from ._auth import AuthDirective, apply_auth, to_httpx_auth
from ._body import Attachment, EncodedBody, encode_body, read_attachment
from ._logs import masked_headers, setup_logging
from ._request_spec import RequestDescriptor
from ._url import build_url, expand_url, merge_query, parse_query, resolve_url

__all__ = [
    "Attachment",
    "AuthDirective",
    "EncodedBody",
    "RequestDescriptor",
    "apply_auth",
    "build_url",
    "encode_body",
    "expand_url",
    "masked_headers",
    "merge_query",
    "parse_query",
    "read_attachment",
    "resolve_url",
    "setup_logging",
    "to_httpx_auth",
]
