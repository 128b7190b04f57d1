"""hypermedia - multipart/nav-data, NavAL and URI codecs."""

from hypermedia.codecs import boundary, multipart, naval, navdata, uri
from hypermedia.core.exceptions import CodecError, InvalidBoundaryError, NestingTooDeepError
from hypermedia.models.core import BodyPart, DecoderState, MediaType
from hypermedia.models.naval import Affordance, Control
from hypermedia.models.uri import UriComponents

__all__ = [
    "Affordance",
    "BodyPart",
    "CodecError",
    "Control",
    "DecoderState",
    "InvalidBoundaryError",
    "MediaType",
    "NestingTooDeepError",
    "UriComponents",
    "boundary",
    "multipart",
    "naval",
    "navdata",
    "uri",
]
