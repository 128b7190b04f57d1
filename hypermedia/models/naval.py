"""NavAL affordance models."""

from typing import Any, Self

from pydantic import BaseModel, ConfigDict, model_validator


class Control(BaseModel):
    """Form control describing one input of an affordance body."""

    model_config = ConfigDict(extra="allow")

    name: str
    title: str | None = None
    value: Any = None
    type: str | None = None


class Affordance(BaseModel):
    """Hypermedia action: method plus URI, with optional headers and form controls.

    Clients look affordances up by ``rel``; server-side definitions may use
    ``id`` instead. At least one of the two must be present.
    """

    model_config = ConfigDict(extra="allow")

    id: str | None = None
    title: str | None = None
    rel: str | None = None
    method: str
    uri: str
    headers: dict[str, str] | None = None
    body: list[Control] | None = None

    @model_validator(mode="after")
    def _require_key(self) -> Self:
        if not (self.rel or self.id):
            raise ValueError("an affordance needs a 'rel' or an 'id'")
        return self

    @property
    def key(self) -> str:
        """Lookup key: ``rel`` when present, otherwise ``id``."""
        return self.rel or self.id or ""

    def to_naval(self) -> dict[str, Any]:
        """Dump to the NavAL wire shape, dropping unset optional fields."""
        return self.model_dump(exclude_none=True)
