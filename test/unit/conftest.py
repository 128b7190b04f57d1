"""Test fixtures for hypermedia unit tests."""

import random
from dataclasses import dataclass, field

import pytest

from hypermedia.codecs import boundary as boundaries
from hypermedia.models.core import BodyPart


# -----------------------------------------------------------------------------
# Mock HTTP message
# -----------------------------------------------------------------------------


@dataclass
class MockMessage:
    """Transport-agnostic stand-in for an HTTP response."""

    headers: dict = field(default_factory=dict)
    body: str = ""


# -----------------------------------------------------------------------------
# Randomness fixtures
# -----------------------------------------------------------------------------


@pytest.fixture
def rng() -> random.Random:
    """Seeded random source for reproducible boundaries."""
    return random.Random(2046)


@pytest.fixture
def boundary(rng: random.Random) -> str:
    """A generated 70-character boundary."""
    return boundaries.generate(rng)


# -----------------------------------------------------------------------------
# Payload fixtures
# -----------------------------------------------------------------------------


@pytest.fixture
def affordances() -> list[dict]:
    """NavAL affordances covering the optional fields."""
    return [
        {"rel": "self", "method": "GET", "uri": "/"},
        {
            "title": "Create a Note.",
            "rel": "createNote",
            "method": "PUT",
            "uri": "/notes/{note}",
            "headers": {"content-type": "application/json"},
            "body": [{"name": "title", "title": "Title of the Note.", "value": "Buy bread.", "type": "text"}],
        },
    ]


@pytest.fixture
def make_part():
    """Factory fixture to create body parts."""

    def _make(content=None, **headers: str) -> BodyPart:
        return BodyPart({name.replace("_", "-"): value for name, value in headers.items()}, content)

    return _make


@pytest.fixture
def make_message():
    """Factory fixture to create mock HTTP messages."""

    def _make(body: str = "", **headers: str) -> MockMessage:
        return MockMessage(headers={name.replace("_", "-"): value for name, value in headers.items()}, body=body)

    return _make
