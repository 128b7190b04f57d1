"""URI reference components (RFC 3986)."""

import re
from dataclasses import dataclass, field
from typing import Any

COMPONENTS = ("scheme", "authority", "path", "query", "fragment")

# authority = [ userinfo "@" ] host [ ":" port ]
AUTHORITY_PATTERN = re.compile(r"^(([^@]+)@)?(([^:]*)(:(.*))?)", re.DOTALL)
# userinfo = username [ ":" password ]
USERINFO_PATTERN = re.compile(r"^([^:]*)(:(.*))?", re.DOTALL)


@dataclass(frozen=True, slots=True)
class UriComponents:
    """The five components of a URI reference plus derived fields.

    Absent components are ``""``. ``defined`` names the components whose
    separator was present, which keeps ``"/search?"`` distinct from
    ``"/search"``. When not given it is derived from the non-empty components.
    """

    scheme: str = ""
    authority: str = ""
    path: str = ""
    query: str = ""
    fragment: str = ""
    defined: frozenset[str] = field(default=None)  # type: ignore[assignment]

    def __post_init__(self) -> None:
        if self.defined is None:
            derived = frozenset(name for name in COMPONENTS if getattr(self, name))
            object.__setattr__(self, "defined", derived | {"path"})
        else:
            object.__setattr__(self, "defined", frozenset(self.defined) | {"path"})

    def is_defined(self, name: str) -> bool:
        return name in self.defined

    def recompose(self, strict: bool = False) -> str:
        """Recompose the reference string.

        Non-strict mode omits every empty optional component. Strict mode
        follows RFC 3986 section 5.3 and keeps separators of defined-but-empty
        components, so it reproduces the decoded source exactly.
        """

        def present(name: str) -> bool:
            return self.is_defined(name) if strict else bool(getattr(self, name))

        result = ""
        if present("scheme"):
            result += f"{self.scheme}:"
        if present("authority"):
            result += f"//{self.authority}"
        result += self.path
        if present("query"):
            result += f"?{self.query}"
        if present("fragment"):
            result += f"#{self.fragment}"
        return result

    # RFC 3986 authority subcomponents

    @property
    def _authority_match(self) -> re.Match[str]:
        return AUTHORITY_PATTERN.match(self.authority)  # type: ignore[return-value]

    @property
    def userinfo(self) -> str:
        return self._authority_match.group(2) or ""

    @property
    def host(self) -> str:
        return self._authority_match.group(3) or ""

    @property
    def hostname(self) -> str:
        return self._authority_match.group(4) or ""

    @property
    def port(self) -> str:
        return self._authority_match.group(6) or ""

    @property
    def username(self) -> str:
        return USERINFO_PATTERN.match(self.userinfo).group(1) or ""  # type: ignore[union-attr]

    @property
    def password(self) -> str:
        return USERINFO_PATTERN.match(self.userinfo).group(3) or ""  # type: ignore[union-attr]

    @property
    def origin(self) -> str:
        return f"{self.scheme}://{self.host}" if self.scheme and self.host else ""

    # Browser URL aliases

    @property
    def href(self) -> str:
        return self.recompose(strict=True)

    @property
    def protocol(self) -> str:
        return f"{self.scheme}:" if self.is_defined("scheme") else ""

    @property
    def pathname(self) -> str:
        return self.path

    @property
    def search(self) -> str:
        return f"?{self.query}" if self.is_defined("query") else ""

    @property
    def hash(self) -> str:
        return f"#{self.fragment}" if self.is_defined("fragment") else ""

    @property
    def auth(self) -> str:
        return self.userinfo

    def as_dict(self) -> dict[str, Any]:
        """All RFC 3986 fields and browser aliases as a plain dict."""
        names = (
            *COMPONENTS, "userinfo", "href", "protocol", "pathname", "search", "hash",
            "auth", "host", "hostname", "port", "username", "password", "origin",
        )
        return {name: getattr(self, name) for name in names}
