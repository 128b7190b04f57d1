"""Tests for the NavAL codec."""

import orjson
import pytest

from hypermedia.codecs import naval
from hypermedia.models.naval import Affordance


# -----------------------------------------------------------------------------
# encode Tests
# -----------------------------------------------------------------------------


class TestEncode:
    """Tests for naval.encode."""

    def test_compact_output(self) -> None:
        """Verify affordances serialize to compact JSON."""
        encoded = naval.encode([{"rel": "self", "method": "GET", "uri": "/"}])

        assert encoded == '[{"rel":"self","method":"GET","uri":"/"}]'

    def test_pretty_output(self, affordances: list[dict]) -> None:
        """Verify pretty output is indented but equivalent."""
        encoded = naval.encode(affordances, pretty=True)

        assert "\n  " in encoded
        assert orjson.loads(encoded) == affordances

    def test_pretty_from_settings(self, monkeypatch) -> None:
        """Verify NAVAL_PRETTY switches the default output."""
        monkeypatch.setattr(naval.st, "NAVAL_PRETTY", True)

        assert "\n" in naval.encode([{"rel": "self", "method": "GET", "uri": "/"}])

    @pytest.mark.parametrize("value", [None, {"rel": "self"}, "[]", 3])
    def test_non_list(self, value) -> None:
        """Verify non-list input encodes as an empty document."""
        assert naval.encode(value) == "[]"

    def test_non_string_keys(self) -> None:
        """Verify non-string object keys are written as strings."""
        encoded = naval.encode([{"rel": "a", "method": "GET", "uri": "/", "headers": {1: "x"}}])

        assert orjson.loads(encoded)[0]["headers"] == {"1": "x"}

    @pytest.mark.parametrize(
        "affordance",
        [
            {"rel": "a", "method": "GET", "uri": "/", "n": 2**70},
            {"rel": "a", "method": "GET", "uri": "/", "tags": {"x", "y"}},
            {"rel": "a", "method": "GET", "uri": "/", "body": [object()]},
        ],
    )
    def test_unserializable(self, affordance: dict) -> None:
        """Verify values JSON cannot represent yield an empty document."""
        assert naval.encode([affordance]) == "[]"
        assert naval.encode([affordance], pretty=True) == "[]"

    def test_affordance_models(self) -> None:
        """Verify models are dumped without unset fields."""
        encoded = naval.encode([Affordance(rel="self", method="GET", uri="/")])

        assert encoded == '[{"rel":"self","method":"GET","uri":"/"}]'


# -----------------------------------------------------------------------------
# decode Tests
# -----------------------------------------------------------------------------


class TestDecode:
    """Tests for naval.decode."""

    def test_round_trip(self, affordances: list[dict]) -> None:
        """Verify decode restores the encoded affordances."""
        assert naval.decode(naval.encode(affordances)) == affordances

    def test_bytes_input(self) -> None:
        """Verify bytes are accepted."""
        assert naval.decode(b'[{"rel":"self","method":"GET","uri":"/"}]')[0]["rel"] == "self"

    @pytest.mark.parametrize("value", ["", "{not json", "[1,", None, 12])
    def test_malformed(self, value) -> None:
        """Verify malformed documents yield an empty list."""
        assert naval.decode(value) == []

    @pytest.mark.parametrize("value", ["{}", '"text"', "null", "1"])
    def test_non_array(self, value: str) -> None:
        """Verify JSON that is not an array yields an empty list."""
        assert naval.decode(value) == []


# -----------------------------------------------------------------------------
# load and find Tests
# -----------------------------------------------------------------------------


class TestLoad:
    """Tests for naval.load and naval.find."""

    def test_load_validates(self, affordances: list[dict]) -> None:
        """Verify entries become Affordance models with their controls."""
        loaded = naval.load(naval.encode(affordances))

        assert [affordance.key for affordance in loaded] == ["self", "createNote"]
        assert loaded[1].body[0].value == "Buy bread."

    def test_load_skips_invalid(self) -> None:
        """Verify invalid entries are dropped and valid ones kept."""
        document = '[{"method":"GET","uri":"/"},"junk",{"id":"home","method":"GET","uri":"/"}]'

        loaded = naval.load(document)

        assert [affordance.key for affordance in loaded] == ["home"]

    def test_find_dicts(self, affordances: list[dict]) -> None:
        """Verify lookup by rel on plain dicts."""
        assert naval.find(affordances, "createNote")["method"] == "PUT"
        assert naval.find(affordances, "missing") is None

    def test_find_models(self) -> None:
        """Verify lookup by rel or id on models."""
        loaded = naval.load('[{"id":"home","method":"GET","uri":"/"},{"rel":"next","method":"GET","uri":"/2"}]')

        assert naval.find(loaded, "home").uri == "/"
        assert naval.find(loaded, "next").uri == "/2"
