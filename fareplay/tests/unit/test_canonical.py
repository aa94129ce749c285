"""
Unit tests for canonical payload serialization.
"""
import pytest

from fareplay.core.errors import CanonicalizationError
from fareplay.core.signing import canonical_string, canonicalize, to_json_compatible
from fareplay.schemas import CasinoStatus, HeartbeatMetrics


class TestCanonicalize:
    """Test byte-stable canonical form."""

    def test_key_order_does_not_matter(self):
        """Same content in different insertion order gives identical bytes."""
        first = canonicalize({"timestamp": 1000, "status": "online"})
        second = canonicalize({"status": "online", "timestamp": 1000})

        assert first == second
        assert first == b'{"status":"online","timestamp":1000}'

    def test_nested_objects_are_sorted(self):
        """Keys are sorted at every nesting level."""
        payload = {"z": {"y": 1, "x": [{"b": 2, "a": 1}]}, "a": None}

        assert canonical_string(payload) == '{"a":null,"z":{"x":[{"a":1,"b":2}],"y":1}}'

    def test_signature_excluded(self):
        """The top-level signature field is never part of the signed bytes."""
        unsigned = {"status": "online", "timestamp": 1000}
        signed = {**unsigned, "signature": "abc"}

        assert canonicalize(signed) == canonicalize(unsigned)

    def test_nested_signature_kept(self):
        """Only the top-level signature is stripped."""
        assert canonical_string({"inner": {"signature": "x"}}) == '{"inner":{"signature":"x"}}'

    def test_non_ascii_emitted_literally(self):
        assert canonicalize({"name": "Café 🎲"}) == '{"name":"Café 🎲"}'.encode("utf-8")

    def test_sorted_by_utf8_bytes(self):
        """Astral characters sort after BMP private-use characters (UTF-8 order, not UTF-16)."""
        payload = {"\U0001F600": 1, "\ue000": 2}

        assert canonical_string(payload) == '{"\ue000":2,"\U0001F600":1}'

    def test_integral_floats_render_as_ints(self):
        assert canonical_string({"a": 1.0, "b": 1.5, "c": -0.0}) == '{"a":1,"b":1.5,"c":0}'

    def test_enum_and_tuple_values(self):
        payload = {"status": CasinoStatus.MAINTENANCE, "games": ("dice", "slots")}

        assert canonical_string(payload) == '{"games":["dice","slots"],"status":"maintenance"}'

    def test_pydantic_model_value(self):
        """Models render as their camelCase dump without None values."""
        payload = {"metrics": HeartbeatMetrics(active_players=3, total_bets24h=10)}

        assert canonical_string(payload) == '{"metrics":{"activePlayers":3,"totalBets24h":10}}'

    def test_deterministic(self):
        payload = {"b": [1, 2, {"d": "x", "c": True}], "a": {"f": 0.25}}

        assert len({canonicalize(payload) for _ in range(10)}) == 1


class TestCanonicalizeRejects:
    """Values with no canonical form raise CanonicalizationError."""

    @pytest.mark.parametrize("value", [float("nan"), float("inf"), float("-inf")])
    def test_non_finite_numbers(self, value):
        with pytest.raises(CanonicalizationError):
            canonicalize({"value": value})

    def test_non_string_keys(self):
        with pytest.raises(CanonicalizationError, match="Non-string key"):
            canonicalize({"nested": {1: "one"}})

    def test_unsupported_types(self):
        with pytest.raises(CanonicalizationError, match="not JSON-compatible"):
            canonicalize({"tags": {"a", "b"}})

    def test_payload_must_be_mapping(self):
        with pytest.raises(CanonicalizationError):
            canonicalize(["not", "a", "mapping"])

    def test_deeply_nested_payload(self):
        nested = {}
        for _ in range(5000):
            nested = {"child": nested}

        with pytest.raises(CanonicalizationError, match="nested too deeply"):
            canonicalize({"a": nested})
        with pytest.raises(CanonicalizationError):
            to_json_compatible(nested)

    def test_is_value_error(self):
        """Callers catching ValueError also catch canonicalization failures."""
        with pytest.raises(ValueError):
            canonicalize({"value": float("nan")})


class TestToJsonCompatible:

    def test_normalizes_nested_values(self):
        result = to_json_compatible({"status": CasinoStatus.ONLINE, "values": (1.0, 2.5)})

        assert result == {"status": "online", "values": [1, 2.5]}
        assert isinstance(result["values"][0], int)
