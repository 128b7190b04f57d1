"""multipart/nav-data envelope.

A nav-data body carries hypermedia next to an unmodified representation::

    content-type: multipart/nav-data; boundary="<b>"

    --<b>
    content-type:application/naval+json

    [{"rel":"self","method":"GET","uri":"/"}]
    --<b>
    content-type:application/json

    {"original":"payload"}
    --<b>--

Only ``content-*`` header fields describe a representation, so wrapping moves
them from the message onto the data part and unwrapping moves them back. A
data part without ``content-type`` is ``text/plain; charset=US-ASCII``
(RFC 2046 section 5.1).
"""

import random
import re
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from beartype import beartype

from hypermedia.codecs import boundary as boundaries
from hypermedia.codecs import multipart, naval
from hypermedia.core.logger import LogIcon, logger
from hypermedia.models.core import CONTENT_TYPE, BodyPart, MediaType

CONTENT_PREFIX = "content-"

NAV_DATA_PATTERN = re.compile(r'^multipart/nav-data\s*;\s*boundary=(?:"([^"]+)"|([^";\s]+))', re.IGNORECASE)


@dataclass
class NavDataMessage:
    """Representation headers, body and affordances taken out of a nav-data body."""

    headers: dict[str, str] = field(default_factory=dict)
    body: str = ""
    affordances: list[Any] = field(default_factory=list)


def _is_representation_header(name: str) -> bool:
    return name.lower().startswith(CONTENT_PREFIX)


def parse_boundary(content_type: str | None) -> str | None:
    """Extract the boundary of a ``multipart/nav-data`` content-type value."""
    if not isinstance(content_type, str):
        return None
    match = NAV_DATA_PATTERN.match(content_type.strip())
    if not match:
        return None
    quoted, token = match.groups()
    return (quoted or token).rstrip(" ")


@beartype
def wrap(
    headers: Mapping[str, Any],
    body: str,
    affordances: list[Any],
    boundary: str | None = None,
    rng: random.Random | None = None,
) -> tuple[dict[str, Any], str]:
    """Wrap a representation and its affordances into a nav-data body.

    Returns the new message headers and body. Representation headers are
    moved onto the data part, which is only added when ``body`` is non-empty.
    """
    boundary = boundary or boundaries.generate(rng)
    message_headers: dict[str, Any] = {}
    data_headers: dict[str, str] = {CONTENT_TYPE: MediaType.TEXT_PLAIN.value}

    for name, value in headers.items():
        if _is_representation_header(name):
            data_headers[name.lower()] = str(value)
        else:
            message_headers[name.lower()] = value

    parts = [BodyPart({CONTENT_TYPE: MediaType.NAVAL.value}, naval.encode(affordances))]
    if body:
        parts.append(BodyPart(data_headers, body))

    message_headers[CONTENT_TYPE] = f'{MediaType.NAV_DATA.value}; boundary="{boundary}"'
    logger.debug("Wrapped nav-data body", icon=LogIcon.NAVIGATION, parts=len(parts), affordances=len(affordances))
    return message_headers, multipart.encode(parts, boundary, rng=rng)


def _restore_representation(part: BodyPart, rng: random.Random | None) -> tuple[dict[str, str], str]:
    """Headers and text body of a data part.

    A multipart representation was split by the decoder; encode it again under
    a fresh boundary advertised on its content-type.
    """
    headers = {name: value for name, value in part.headers.items() if _is_representation_header(name)}
    if not part.is_nested:
        return headers, part.content or ""

    nested_boundary = boundaries.generate(rng)
    content_type = headers.get(CONTENT_TYPE, MediaType.MULTIPART_MIXED.value)
    headers[CONTENT_TYPE] = f'{content_type}; boundary="{nested_boundary}"'
    return headers, multipart.encode(part.content, nested_boundary, rng=rng)


def unwrap(headers: Mapping[str, Any], body: str, rng: random.Random | None = None) -> NavDataMessage:
    """Split a nav-data body into representation and affordances.

    Messages that are not nav-data pass through untouched, without
    affordances.
    """
    headers = {str(name).lower(): value for name, value in headers.items()}
    boundary = parse_boundary(headers.get(CONTENT_TYPE))
    if boundary is None:
        return NavDataMessage(headers=headers, body=body if isinstance(body, str) else "")

    message = NavDataMessage(headers={name: value for name, value in headers.items() if name != CONTENT_TYPE})
    for part in multipart.decode(body, boundary):
        if part.content_type == MediaType.NAVAL:
            message.affordances = naval.decode(part.content if isinstance(part.content, str) else "")
            continue
        representation_headers, message.body = _restore_representation(part, rng)
        message.headers[CONTENT_TYPE] = MediaType.TEXT_PLAIN.value
        message.headers.update(representation_headers)

    logger.debug("Unwrapped nav-data body", icon=LogIcon.NAVIGATION, affordances=len(message.affordances))
    return message
