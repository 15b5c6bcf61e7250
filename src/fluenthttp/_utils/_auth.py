from dataclasses import dataclass
from typing import Optional

import httpx
from httpx_ntlm import HttpNtlmAuth

from .constants import AUTH_BASIC, AUTH_DIGEST, AUTH_NTLM

AUTH_SCHEMES = (AUTH_BASIC, AUTH_DIGEST, AUTH_NTLM)


@dataclass(frozen=True)
class AuthDirective:
    """Credentials plus the negotiation scheme the executor should use."""

    username: str
    password: str
    scheme: str = AUTH_BASIC

    def __post_init__(self) -> None:
        if self.scheme not in AUTH_SCHEMES:
            raise ValueError(
                f"Unsupported auth scheme '{self.scheme}', expected one of {AUTH_SCHEMES}"
            )

    def __repr__(self) -> str:
        return f"AuthDirective(username={self.username!r}, password='***', scheme={self.scheme!r})"


def apply_auth(auth: Optional[AuthDirective]) -> Optional[AuthDirective]:
    """Return the directive for the configured credentials, if any.

    Tokens set with ``Client.with_token`` already live in the
    ``Authorization`` header and never reach this function.
    """
    return auth


def to_httpx_auth(directive: Optional[AuthDirective]) -> Optional[httpx.Auth]:
    if directive is None:
        return None
    if directive.scheme == AUTH_DIGEST:
        return httpx.DigestAuth(directive.username, directive.password)
    if directive.scheme == AUTH_NTLM:
        return HttpNtlmAuth(directive.username, directive.password)
    return httpx.BasicAuth(directive.username, directive.password)
