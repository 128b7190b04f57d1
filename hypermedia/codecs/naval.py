"""NavAL (JSON Navigation Application Language) codec.

A NavAL document is a JSON array of affordances::

    [
      {"rel": "self", "method": "GET", "uri": "/"},
      {"rel": "item", "method": "DELETE", "uri": "/dogs/{dog}"}
    ]

NavAL only carries hypermedia controls; application data travels next to it
in a multipart/nav-data body.
"""

from collections.abc import Iterable
from typing import Any

import orjson
from pydantic import BaseModel, ValidationError

from hypermedia.core.logger import LogIcon, logger
from hypermedia.core.settings import settings as st
from hypermedia.models.naval import Affordance


def _default(value: Any) -> Any:
    if isinstance(value, BaseModel):
        return value.model_dump(exclude_none=True)
    raise TypeError(f"Type is not NavAL serializable: {type(value).__name__}")


def encode(affordances: list[Any], pretty: bool | None = None) -> str:
    """Serialize affordances to a NavAL document. Never raises.

    Non-lists and documents JSON cannot represent become ``[]``. Non-string
    object keys are written as strings.
    """
    if not isinstance(affordances, list):
        affordances = []
    pretty = st.NAVAL_PRETTY if pretty is None else pretty
    option = orjson.OPT_NON_STR_KEYS | (orjson.OPT_INDENT_2 if pretty else 0)
    try:
        return orjson.dumps(affordances, default=_default, option=option).decode()
    except orjson.JSONEncodeError as ex:
        logger.warning("Unserializable NavAL document", icon=LogIcon.JSON, error=str(ex))
        return "[]"


def decode(naval: str | bytes) -> list[Any]:
    """Parse a NavAL document. Never raises: bad input yields ``[]``."""
    try:
        decoded = orjson.loads(naval)
    except (orjson.JSONDecodeError, TypeError) as ex:
        logger.warning("Malformed NavAL document", icon=LogIcon.JSON, error=str(ex))
        return []
    return decoded if isinstance(decoded, list) else []


def load(naval: str | bytes) -> list[Affordance]:
    """Parse a NavAL document into validated affordances.

    Entries that are not valid affordances are skipped.
    """
    affordances: list[Affordance] = []
    for index, entry in enumerate(decode(naval)):
        try:
            affordances.append(Affordance.model_validate(entry))
        except ValidationError as ex:
            logger.warning("Skipping invalid affordance", icon=LogIcon.VALIDATION, index=index, errors=ex.error_count())
    return affordances


def find(affordances: Iterable[Any], key: str) -> Any | None:
    """Return the first affordance whose ``rel`` or ``id`` equals ``key``."""
    for affordance in affordances:
        match affordance:
            case Affordance() if key in (affordance.rel, affordance.id):
                return affordance
            case dict() if key in (affordance.get("rel"), affordance.get("id")):
                return affordance
    return None
