"""URI reference codec (RFC 3986).

Decoding uses the regular expression of RFC 3986 Appendix B::

    ^(([^:/?#]+):)?(//([^/?#]*))?([^?#]*)(\\?([^#]*))?(#(.*))?
     12            3  4          5       6  7        8 9

    scheme = $2, authority = $4, path = $5, query = $7, fragment = $9

A group that did not participate in the match is an absent component; a
group that matched the empty string is a present-but-empty one.
"""

import re
from collections.abc import Mapping
from typing import Any

from beartype import beartype

from hypermedia.models.uri import COMPONENTS, UriComponents

URI_PATTERN = re.compile(r"^(([^:/?#]+):)?(//([^/?#]*))?([^?#]*)(\?([^#]*))?(#(.*))?", re.DOTALL)

_GROUPS = {"scheme": 2, "authority": 4, "path": 5, "query": 7, "fragment": 9}


def decode(uri: str) -> UriComponents:
    """Split a URI reference into its components. Non-strings decode as ``""``."""
    uri = uri if isinstance(uri, str) else ""
    match = URI_PATTERN.match(uri)
    captures = {name: match.group(group) for name, group in _GROUPS.items()}  # type: ignore[union-attr]
    return UriComponents(
        **{name: value or "" for name, value in captures.items()},
        defined=frozenset(name for name, value in captures.items() if value is not None),
    )


def encode(components: UriComponents | Mapping[str, Any], strict: bool = False) -> str:
    """Recompose a URI reference string.

    By default every empty optional component is omitted, so absent and empty
    are treated alike. ``strict=True`` keeps the separators of defined-but-empty
    components, which makes ``encode(decode(s), strict=True) == s``.
    """
    match components:
        case UriComponents():
            pass
        case Mapping():
            components = UriComponents(**{name: str(components.get(name) or "") for name in COMPONENTS})
        case _:
            components = UriComponents()
    return components.recompose(strict=strict)


def remove_dot_segments(path: str) -> str:
    """Interpret and remove "." and ".." segments (RFC 3986 section 5.2.4)."""
    output: list[str] = []
    while path:
        if path.startswith("../"):
            path = path[3:]
        elif path.startswith("./"):
            path = path[2:]
        elif path.startswith("/./"):
            path = path[2:]
        elif path == "/.":
            path = "/"
        elif path.startswith("/../"):
            path = path[3:]
            if output:
                output.pop()
        elif path == "/..":
            path = "/"
            if output:
                output.pop()
        elif path in (".", ".."):
            path = ""
        else:
            start = 1 if path.startswith("/") else 0
            end = path.find("/", start)
            end = len(path) if end == -1 else end
            output.append(path[:end])
            path = path[end:]
    return "".join(output)


def _merge(base: UriComponents, reference_path: str) -> str:
    # RFC 3986 section 5.2.3
    if base.is_defined("authority") and not base.path:
        return f"/{reference_path}"
    head, slash, _ = base.path.rpartition("/")
    return f"{head}{slash}{reference_path}"


@beartype
def resolve(base: str, reference: str) -> str:
    """Resolve ``reference`` against the absolute URI ``base`` (RFC 3986 section 5.2.2)."""
    b, r = decode(base), decode(reference)

    def defined(components: UriComponents, name: str) -> bool:
        return components.is_defined(name)

    if defined(r, "scheme"):
        scheme, authority, path, query = r.scheme, r.authority, remove_dot_segments(r.path), r.query
        has_authority, has_query = defined(r, "authority"), defined(r, "query")
    else:
        scheme = b.scheme
        if defined(r, "authority"):
            authority, path, query = r.authority, remove_dot_segments(r.path), r.query
            has_authority, has_query = True, defined(r, "query")
        else:
            authority, has_authority = b.authority, defined(b, "authority")
            if not r.path:
                path = b.path
                query, has_query = (r.query, True) if defined(r, "query") else (b.query, defined(b, "query"))
            else:
                path = remove_dot_segments(r.path if r.path.startswith("/") else _merge(b, r.path))
                query, has_query = r.query, defined(r, "query")

    defined_names = {"path"}
    if scheme:
        defined_names.add("scheme")
    if has_authority:
        defined_names.add("authority")
    if has_query:
        defined_names.add("query")
    if defined(r, "fragment"):
        defined_names.add("fragment")

    target = UriComponents(
        scheme=scheme,
        authority=authority,
        path=path,
        query=query,
        fragment=r.fragment,
        defined=frozenset(defined_names),
    )
    return target.recompose(strict=True)
