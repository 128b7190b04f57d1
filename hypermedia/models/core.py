"""Core models for multipart bodies and their media types."""

from collections.abc import Iterator, Mapping
from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any, Self, TypeAlias

BODY_FIELD = "body"
CONTENT_TYPE = "content-type"


class MediaType(StrEnum):
    """Media types produced and consumed by the nav-data protocol."""

    NAV_DATA = "multipart/nav-data"
    NAVAL = "application/naval+json"
    MULTIPART_MIXED = "multipart/mixed"
    TEXT_PLAIN = "text/plain; charset=US-ASCII"


class DecoderState(StrEnum):
    """States of the multipart tokenizer."""

    SEEK_BOUNDARY = "seek_boundary"
    HEADER_NAME = "header_name"
    HEADER_BODY = "header_body"
    HEADER_PARAMETER = "header_parameter"
    BODY = "body"
    DONE = "done"


Content: TypeAlias = str | list["BodyPart"] | None


@dataclass(slots=True)
class BodyPart:
    """One header block plus its content inside a multipart body.

    ``content`` is flat text, a nested list of body parts, or ``None`` when the
    part carries headers only. Header names are case-insensitive and stored
    lower-cased, in insertion order.
    """

    headers: dict[str, str] = field(default_factory=dict)
    content: Content = None

    def __post_init__(self) -> None:
        self.headers = {str(name).lower(): str(value) for name, value in self.headers.items()}

    @property
    def is_nested(self) -> bool:
        return isinstance(self.content, list)

    @property
    def content_type(self) -> str | None:
        return self.headers.get(CONTENT_TYPE)

    def __iter__(self) -> Iterator[tuple[str, str]]:
        return iter(self.headers.items())

    def get(self, name: str, default: str | None = None) -> str | None:
        """Get a header value by case-insensitive field name."""
        return self.headers.get(name.lower(), default)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Self:
        """Build a part from its plain-dict form.

        The ``body`` key (any case) holds the content; a list body is converted
        recursively. Every other key is a header field.
        """
        headers: dict[str, str] = {}
        content: Content = None
        for name, value in data.items():
            if str(name).lower() != BODY_FIELD:
                headers[name] = value
                continue
            match value:
                case list():
                    content = [coerce_part(item) for item in value]
                case None:
                    content = None
                case _:
                    content = str(value)
        return cls(headers=headers, content=content)

    def to_dict(self) -> dict[str, Any]:
        """Return the plain-dict form, ``body`` last."""
        data: dict[str, Any] = dict(self.headers)
        match self.content:
            case list():
                data[BODY_FIELD] = [part.to_dict() for part in self.content]
            case None:
                pass
            case _:
                data[BODY_FIELD] = self.content
        return data


def coerce_part(value: Any) -> BodyPart:
    """Accept a BodyPart or its dict form; anything else becomes an empty part."""
    match value:
        case BodyPart():
            return value
        case Mapping():
            return BodyPart.from_dict(value)
        case _:
            return BodyPart()
