"""Multipart body codec (RFC 2046 section 5.1), restricted to what nav-data needs.

Encoded form::

    multipart-body = "--" boundary CRLF body-part
                     *(CRLF "--" boundary CRLF body-part)
                     CRLF "--" boundary "--"
    body-part      = *(field-name ":" field-body CRLF) [CRLF *OCTET]

No preamble, no epilogue and no transfer encodings. A body part whose content
is a list is itself a multipart body; its boundary is generated at encode time
and advertised on its ``content-type`` header.

The decoder mirrors the encoder exactly, so everything produced here decodes
losslessly. Input from other MIME producers is decoded best-effort: anything
that does not tokenize yields fewer parts, never an exception.
"""

import random
import re
from collections.abc import Iterable, Mapping
from typing import Any

from hypermedia.codecs import boundary as boundaries
from hypermedia.codecs.boundary import BCHARS
from hypermedia.core.exceptions import InvalidBoundaryError, NestingTooDeepError
from hypermedia.core.logger import LogIcon, logger
from hypermedia.core.settings import NESTING_DEPTH_CEILING
from hypermedia.core.settings import settings as st
from hypermedia.models.core import CONTENT_TYPE, BodyPart, Content, DecoderState, MediaType, coerce_part

CRLF = "\r\n"
DASHES = "--"
WSP = (" ", "\t")
BOUNDARY_PARAMETER = "boundary="

STALE_BOUNDARY_PATTERN = re.compile(r'\s*;\s*boundary=("[^"]*"|[^;]*)', re.IGNORECASE)


def _is_field_name_char(char: str) -> bool:
    # field-name = 1*<any CHAR, excluding CTLs, SPACE, and ":">
    return " " < char <= "~" and char != ":"


def check_depth(depth: int, max_depth: int | None = None) -> None:
    """Raise NestingTooDeepError when ``depth`` exceeds the nesting limit.

    An explicit ``max_depth`` must lie between 0 and NESTING_DEPTH_CEILING.
    """
    if max_depth is not None and not 0 <= max_depth <= NESTING_DEPTH_CEILING:
        raise ValueError(f"max_depth must be between 0 and {NESTING_DEPTH_CEILING}, got {max_depth}")
    limit = st.MAX_NESTING_DEPTH if max_depth is None else max_depth
    if depth > limit:
        logger.error("Multipart nesting limit exceeded", icon=LogIcon.EXHAUSTION, depth=depth, limit=limit)
        raise NestingTooDeepError(depth, limit)


# -----------------------------------------------------------------------------
# Encoding
# -----------------------------------------------------------------------------


def _attach_boundary(headers: dict[str, str], boundary: str) -> dict[str, str]:
    """Advertise a nested boundary on the content-type header."""
    content_type = headers.get(CONTENT_TYPE)
    if content_type is None:
        logger.warning("Nested body part has no content-type, using multipart/mixed", icon=LogIcon.MULTIPART)
        content_type = MediaType.MULTIPART_MIXED.value
    elif STALE_BOUNDARY_PATTERN.search(content_type):
        logger.warning("Replacing boundary parameter of nested body part", icon=LogIcon.BOUNDARY)
        content_type = STALE_BOUNDARY_PATTERN.sub("", content_type)
    headers[CONTENT_TYPE] = f'{content_type}; boundary="{boundary}"'
    return headers


def _nested_boundary(enclosing: tuple[str, ...], rng: random.Random | None) -> str:
    """Generate a boundary no enclosing delimiter is a prefix of."""
    while True:
        candidate = boundaries.generate(rng)
        if not candidate.startswith(enclosing):
            return candidate


def encode_part(
    part: BodyPart | Mapping[str, Any],
    *,
    rng: random.Random | None = None,
    depth: int = 0,
    max_depth: int | None = None,
    enclosing: tuple[str, ...] = (),
) -> str:
    """Encode one body part: header fields, then a blank line and the content.

    Parts without content encode to their header fields only, so an empty part
    is the empty string. Anything that is not a part or a mapping counts as an
    empty part. ``enclosing`` lists the boundaries of the bodies this part sits
    in; a nested boundary never starts with one of them.
    """
    part = coerce_part(part)
    headers = dict(part.headers)

    if not part.is_nested:
        encoded = "".join(f"{name}:{value}{CRLF}" for name, value in headers.items())
        return encoded + CRLF + part.content if part.content else encoded

    nested_boundary = _nested_boundary(enclosing, rng)
    headers = _attach_boundary(headers, nested_boundary)
    encoded = "".join(f"{name}:{value}{CRLF}" for name, value in headers.items())
    nested = encode(
        part.content,
        nested_boundary,
        rng=rng,
        depth=depth + 1,
        max_depth=max_depth,
        enclosing=enclosing,
    )
    return encoded + CRLF + nested


def encode(
    parts: Iterable[BodyPart | Mapping[str, Any]],
    boundary: str,
    *,
    rng: random.Random | None = None,
    depth: int = 0,
    max_depth: int | None = None,
    enclosing: tuple[str, ...] = (),
) -> str:
    """Encode body parts into a multipart body delimited by ``boundary``.

    An empty sequence still produces a well-formed body,
    ``--boundary\\r\\n\\r\\n--boundary--``.
    """
    if reason := boundaries.validate(boundary):
        raise InvalidBoundaryError(boundary, reason)
    check_depth(depth, max_depth)

    if isinstance(parts, (str, bytes, Mapping)) or not isinstance(parts, Iterable):
        parts = []

    delimiter = DASHES + boundary
    enclosing = (*enclosing, boundary)
    body = f"{CRLF}{delimiter}{CRLF}".join(
        encode_part(part, rng=rng, depth=depth, max_depth=max_depth, enclosing=enclosing) for part in parts
    )
    return f"{delimiter}{CRLF}{body}{CRLF}{delimiter}{DASHES}"


# -----------------------------------------------------------------------------
# Decoding
# -----------------------------------------------------------------------------


class MultipartDecoder:
    """Single left-to-right tokenizer over one multipart body.

    The scan is an explicit state machine driven by an index cursor:

    - SEEK_BOUNDARY: find ``--boundary``; ``--boundary--`` ends the scan.
    - HEADER_NAME: read a field name up to ``:``, or a blank line.
    - HEADER_BODY: read a field body up to CRLF, unfolding CRLF + WSP.
    - HEADER_PARAMETER: after ``;``, capture ``boundary=`` as the nested
      boundary of the part, otherwise keep the ``;`` as field content.
    - BODY: read content up to ``CRLF--boundary`` without consuming it, and
      recurse when a nested boundary was captured.
    """

    def __init__(self, text: str, boundary: str, *, depth: int = 0, max_depth: int | None = None) -> None:
        self._text = text
        self._end = len(text)
        self._delimiter = DASHES + boundary
        self._terminator = CRLF + self._delimiter
        self._depth = depth
        self._max_depth = max_depth

        self._pos = 0
        self._state = DecoderState.SEEK_BOUNDARY
        self._parts: list[BodyPart] = []

        # Scratch for the part being tokenized
        self._part = BodyPart()
        self._field_name = ""
        self._field_body: list[str] = []
        self._parameter_start = 0
        self._nested_boundary = ""

    @property
    def state(self) -> DecoderState:
        return self._state

    def decode(self) -> list[BodyPart]:
        check_depth(self._depth, self._max_depth)
        while self._state is not DecoderState.DONE:
            match self._state:
                case DecoderState.SEEK_BOUNDARY:
                    self._seek_boundary()
                case DecoderState.HEADER_NAME:
                    self._header_name()
                case DecoderState.HEADER_BODY:
                    self._header_body()
                case DecoderState.HEADER_PARAMETER:
                    self._header_parameter()
                case DecoderState.BODY:
                    self._body()
        return self._parts

    def _begin_part(self) -> None:
        self._part = BodyPart()
        self._nested_boundary = ""

    def _end_part(self, content: Content, next_state: DecoderState) -> None:
        self._part.content = content
        self._parts.append(self._part)
        self._state = next_state

    def _seek_boundary(self) -> None:
        text = self._text
        index = text.find(self._delimiter, self._pos)
        if index == -1:
            self._state = DecoderState.DONE
            return

        pos = index + len(self._delimiter)
        if text.startswith(DASHES, pos):
            self._state = DecoderState.DONE
            return

        while pos < self._end and text[pos] in WSP:
            pos += 1
        if text.startswith(CRLF, pos):
            pos += len(CRLF)

        self._pos = pos
        self._begin_part()
        self._state = DecoderState.HEADER_NAME

    def _header_name(self) -> None:
        text, pos = self._text, self._pos
        if pos >= self._end:
            self._end_part(None, DecoderState.DONE)
            return
        if text.startswith(CRLF, pos):
            self._state = DecoderState.BODY
            return

        start = pos
        while pos < self._end and _is_field_name_char(text[pos]):
            pos += 1

        if pos > start and text.startswith(":", pos):
            self._field_name = text[start:pos].lower()
            self._field_body = []
            self._pos = pos + 1
            self._state = DecoderState.HEADER_BODY
            return

        # Not a header line: keep what was read and rescan from the line start
        self._pos = start
        self._end_part(None, DecoderState.SEEK_BOUNDARY)

    def _header_body(self) -> None:
        text, pos = self._text, self._pos
        while pos < self._end:
            char = text[pos]
            if char == ";":
                self._parameter_start = pos
                self._state = DecoderState.HEADER_PARAMETER
                return
            if text.startswith(CRLF, pos):
                if text[pos + 2:pos + 3] in WSP:
                    # Folded field: drop the CRLF, keep the whitespace
                    pos += len(CRLF)
                    continue
                self._part.headers[self._field_name] = "".join(self._field_body)
                self._pos = pos + len(CRLF)
                self._state = DecoderState.HEADER_NAME
                return
            self._field_body.append(char)
            pos += 1

        # Input ended inside an unterminated field, which is dropped
        self._end_part(None, DecoderState.DONE)

    def _header_parameter(self) -> None:
        text = self._text
        pos = self._parameter_start + 1
        while pos < self._end and text[pos] in WSP:
            pos += 1

        if text.startswith(BOUNDARY_PARAMETER, pos):
            pos += len(BOUNDARY_PARAMETER)
            chars: list[str] = []
            while pos < self._end and (text[pos] in BCHARS or text[pos] == '"'):
                if text[pos] != '"':
                    chars.append(text[pos])
                pos += 1
            nested_boundary = "".join(chars).rstrip(" ")
            if nested_boundary:
                self._nested_boundary = nested_boundary
                self._pos = pos
                self._state = DecoderState.HEADER_BODY
                return

        # Any other parameter stays verbatim in the field body
        self._field_body.append(";")
        self._pos = self._parameter_start + 1
        self._state = DecoderState.HEADER_BODY

    def _body(self) -> None:
        text, pos = self._text, self._pos
        if text.startswith(self._terminator, pos):
            # The blank line is the CRLF of the next delimiter: empty content
            raw = ""
        else:
            start = pos + len(CRLF)
            end = text.find(self._terminator, start)
            if end == -1:
                end = self._end
            raw, pos = text[start:end], end

        self._pos = pos
        if self._nested_boundary:
            nested = MultipartDecoder(raw, self._nested_boundary, depth=self._depth + 1, max_depth=self._max_depth)
            self._end_part(nested.decode(), DecoderState.SEEK_BOUNDARY)
        else:
            self._end_part(raw, DecoderState.SEEK_BOUNDARY)


def decode(
    text: str | bytes, boundary: str, *, depth: int = 0, max_depth: int | None = None
) -> list[BodyPart]:
    """Decode a multipart body into its body parts.

    Byte buffers are read as UTF-8; undecodable bytes survive as surrogate
    escapes, so ``content.encode("utf-8", "surrogateescape")`` restores them.
    Input without a recognizable ``--boundary`` yields an empty list. A
    missing boundary is a caller error and raises InvalidBoundaryError.
    """
    if not isinstance(boundary, str) or not boundary:
        raise InvalidBoundaryError(boundary, "a boundary is required to decode a multipart body")
    if isinstance(text, (bytes, bytearray, memoryview)):
        text = bytes(text).decode("utf-8", errors="surrogateescape")
    if not isinstance(text, str):
        return []

    parts = MultipartDecoder(text, boundary, depth=depth, max_depth=max_depth).decode()
    if not parts and text:
        logger.debug("No multipart delimiter found", icon=LogIcon.DETECTION, boundary=boundary)
    return parts
