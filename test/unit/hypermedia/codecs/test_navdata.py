"""Tests for the multipart/nav-data envelope."""

import random

import pytest
from beartype.roar import BeartypeCallHintParamViolation

from hypermedia.codecs import multipart, navdata
from hypermedia.models.core import MediaType


# -----------------------------------------------------------------------------
# parse_boundary Tests
# -----------------------------------------------------------------------------


class TestParseBoundary:
    """Tests for navdata.parse_boundary."""

    @pytest.mark.parametrize(
        ("content_type", "expected"),
        [
            ('multipart/nav-data; boundary="a b:c"', "a b:c"),
            ("multipart/nav-data;boundary=token", "token"),
            ('Multipart/Nav-Data; boundary="x"; charset=utf-8', "x"),
            ("  multipart/nav-data ; boundary=spaced  ", "spaced"),
        ],
    )
    def test_nav_data(self, content_type: str, expected: str) -> None:
        """Verify the boundary is extracted from quoted and token forms."""
        assert navdata.parse_boundary(content_type) == expected

    @pytest.mark.parametrize(
        "content_type",
        [None, "", "application/json", 'multipart/mixed; boundary="x"', "multipart/nav-data"],
    )
    def test_not_nav_data(self, content_type) -> None:
        """Verify other media types have no nav-data boundary."""
        assert navdata.parse_boundary(content_type) is None


# -----------------------------------------------------------------------------
# wrap Tests
# -----------------------------------------------------------------------------


class TestWrap:
    """Tests for navdata.wrap."""

    def test_moves_representation_headers(self, affordances: list[dict], rng: random.Random) -> None:
        """Verify content-* headers move onto the data part."""
        headers, body = navdata.wrap(
            {"Content-Type": "application/json", "Content-Language": "en", "X-Request-Id": "42"},
            '{"a":1}',
            affordances,
            boundary="B",
            rng=rng,
        )

        assert headers == {"x-request-id": "42", "content-type": 'multipart/nav-data; boundary="B"'}
        naval_part, data_part = multipart.decode(body, "B")
        assert naval_part.content_type == MediaType.NAVAL
        assert data_part.headers == {"content-type": "application/json", "content-language": "en"}
        assert data_part.content == '{"a":1}'

    def test_naval_part_first(self, affordances: list[dict]) -> None:
        """Verify the NavAL part leads the body."""
        _, body = navdata.wrap({}, "text", affordances, boundary="B")

        assert body.startswith("--B\r\ncontent-type:application/naval+json\r\n\r\n[")

    def test_default_data_content_type(self) -> None:
        """Verify data without content-type is declared as US-ASCII text."""
        _, body = navdata.wrap({}, "hello", [], boundary="B")

        assert multipart.decode(body, "B")[1].content_type == MediaType.TEXT_PLAIN

    def test_empty_body_has_no_data_part(self, affordances: list[dict]) -> None:
        """Verify an empty representation adds no data part."""
        _, body = navdata.wrap({"content-type": "text/plain"}, "", affordances, boundary="B")

        assert len(multipart.decode(body, "B")) == 1

    def test_generated_boundary(self, rng: random.Random) -> None:
        """Verify a boundary is generated when none is given."""
        headers, body = navdata.wrap({}, "x", [], rng=rng)

        boundary = navdata.parse_boundary(headers["content-type"])
        assert len(boundary) == 70
        assert body.startswith(f"--{boundary}\r\n")

    def test_rejects_non_string_body(self) -> None:
        """Verify the body must be text."""
        with pytest.raises(BeartypeCallHintParamViolation):
            navdata.wrap({}, b"bytes", [])


# -----------------------------------------------------------------------------
# unwrap Tests
# -----------------------------------------------------------------------------


class TestUnwrap:
    """Tests for navdata.unwrap."""

    def test_round_trip(self, affordances: list[dict], rng: random.Random) -> None:
        """Verify wrap then unwrap restores headers, body and affordances."""
        original = {"content-type": "application/json; charset=utf-8", "x-request-id": "42"}

        headers, body = navdata.wrap(original, '{"a":1}', affordances, rng=rng)
        message = navdata.unwrap(headers, body)

        assert message.headers == original
        assert message.body == '{"a":1}'
        assert message.affordances == affordances

    def test_passthrough(self, make_message) -> None:
        """Verify messages that are not nav-data are returned unchanged."""
        response = make_message('{"a":1}', content_type="application/json")

        message = navdata.unwrap(response.headers, response.body)

        assert message.headers == {"content-type": "application/json"}
        assert message.body == '{"a":1}'
        assert message.affordances == []

    def test_affordances_only(self, affordances: list[dict]) -> None:
        """Verify a body without data part yields an empty representation."""
        headers, body = navdata.wrap({"x-trace": "1"}, "", affordances, boundary="B")

        message = navdata.unwrap(headers, body)

        assert message.headers == {"x-trace": "1"}
        assert message.body == ""
        assert message.affordances == affordances

    def test_default_content_type(self) -> None:
        """Verify a data part without content-type is plain US-ASCII text."""
        body = multipart.encode([{"content-type": MediaType.NAVAL.value, "body": "[]"}, {"body": "hi"}], "B")

        message = navdata.unwrap({"content-type": 'multipart/nav-data; boundary="B"'}, body)

        assert message.headers == {"content-type": MediaType.TEXT_PLAIN.value}
        assert message.body == "hi"

    def test_malformed_naval(self) -> None:
        """Verify an unreadable NavAL part yields no affordances."""
        body = multipart.encode([{"content-type": MediaType.NAVAL.value, "body": "{oops"}], "B")

        message = navdata.unwrap({"content-type": 'multipart/nav-data; boundary="B"'}, body)

        assert message.affordances == []

    def test_multipart_representation(self, rng: random.Random) -> None:
        """Verify a multipart data part is re-encoded under a fresh boundary."""
        parts = [
            {"content-type": MediaType.NAVAL.value, "body": "[]"},
            {"content-type": "multipart/mixed", "body": [{"body": "one"}, {"body": "two"}]},
        ]
        body = multipart.encode(parts, "B", rng=rng)

        message = navdata.unwrap({"content-type": 'multipart/nav-data; boundary="B"'}, body, rng=rng)

        content_type = message.headers["content-type"]
        assert content_type.startswith('multipart/mixed; boundary="')
        nested_boundary = content_type.split('boundary="', 1)[1].rstrip('"')
        assert [part.content for part in multipart.decode(message.body, nested_boundary)] == ["one", "two"]
