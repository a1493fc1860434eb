"""Tests for composite codecs: sequence, alias, array and xor."""

from __future__ import annotations

import pytest

from bitschema import Configuration, Serializer
from bitschema.codec.types import Array, Xor
from bitschema.exceptions import ConfigurationError, DeserializationError, SerializationError


class TestSequence:
    """Test sequence codec."""

    def test_record_roundtrip(self, serializer: Serializer) -> None:
        """Test components are written in declaration order."""
        data, bits = serializer.serialize("stability_kpi", {"resync_kpi": 1, "reboot_kpi": 2})

        assert bits == 8
        assert data == b"\x12"
        assert serializer.deserialize("stability_kpi", data) == {
            "stability_kpi": {"resync_kpi": 1, "reboot_kpi": 2}
        }

    def test_positional_values(self, serializer: Serializer) -> None:
        """Test a list supplies components by position."""
        by_name, _ = serializer.serialize("stability_kpi", {"reboot_kpi": 2, "resync_kpi": 1})
        by_position, _ = serializer.serialize("stability_kpi", [1, 2])

        assert by_name == by_position

    def test_missing_component(self, serializer: Serializer) -> None:
        """Test a missing component is an error."""
        with pytest.raises(SerializationError, match="Missing key reboot_kpi"):
            serializer.serialize("stability_kpi", {"resync_kpi": 1})

    def test_wrong_positional_count(self, serializer: Serializer) -> None:
        """Test positional lists must match the component count."""
        with pytest.raises(SerializationError, match="positional"):
            serializer.serialize("stability_kpi", [1])

    def test_decode_omits_component_statics(self, serializer: Serializer) -> None:
        """Test component static fields stay out of the decoded record."""
        data, _ = serializer.serialize("stability_kpi", {"resync_kpi": 3, "reboot_kpi": 9})
        decoded = serializer.deserialize("stability_kpi", data)

        assert "alarm" not in decoded["stability_kpi"]

    def test_speed_and_altitude(self) -> None:
        """Test a sequence's width is the sum of its components."""
        configuration = Configuration.parse(
            "0x01 speed INTEGER(5)\n"
            "0x02 altitude INTEGER(9)\n"
            "0x03 position SEQUENCE(speed;altitude)\n"
        )
        serializer = Serializer(configuration)

        data, bits = serializer.serialize("position", {"speed": 17, "altitude": 400})

        assert bits == 14
        assert serializer.deserialize("position", data) == {
            "position": {"speed": 17, "altitude": 400}
        }


class TestAlias:
    """Test alias codec."""

    def test_alias_matches_target(self, serializer: Serializer) -> None:
        """Test alias encodes exactly like its target."""
        alias_data, alias_bits = serializer.serialize("adding_child", "0xA1B2C3D4E5F6")
        target_data, target_bits = serializer.serialize("device_mac", "0xA1B2C3D4E5F6")

        assert alias_bits == target_bits == 48
        assert alias_data == target_data

    def test_alias_decode_adds_statics(self, serializer: Serializer) -> None:
        """Test the alias's own static fields are injected."""
        data, _ = serializer.serialize("adding_child", "0xA1B2C3D4E5F6")

        assert serializer.deserialize("adding_child", data) == {
            "adding_child": "0xA1B2C3D4E5F6",
            "signal": True,
        }


class TestArray:
    """Test counted array codec."""

    def test_homogeneous(self, serializer: Serializer) -> None:
        """Test count prefix followed by elements."""
        value = ["0x1234", "0x5678", "0x9ABC"]
        data, bits = serializer.serialize("modules", value)

        assert bits == 51
        assert data[0] == 0b01100010
        assert serializer.deserialize("modules", data) == {"modules": value}

    def test_empty(self, serializer: Serializer) -> None:
        """Test empty array is only its count."""
        data, bits = serializer.serialize("modules", [])

        assert bits == 3
        assert serializer.deserialize("modules", data) == {"modules": []}

    def test_too_many_items(self, serializer: Serializer) -> None:
        """Test count must fit the length bits."""
        with pytest.raises(SerializationError, match="at most 7"):
            serializer.serialize("modules", ["0x0000"] * 8)

    def test_not_a_list(self, serializer: Serializer) -> None:
        """Test array value must be a list."""
        with pytest.raises(SerializationError, match="expects a list"):
            serializer.serialize("modules", "0x1234")

    def test_record_elements(self, serializer: Serializer) -> None:
        """Test several names make each element a record."""
        value = [
            {"log_category": "warn", "log_level": "high"},
            {"log_category": "error", "log_level": "low"},
        ]
        data, bits = serializer.serialize("logs", value)

        assert bits == 10
        assert serializer.deserialize("logs", data) == {"logs": value}

    def test_record_elements_positional(self, serializer: Serializer) -> None:
        """Test record elements may be given positionally."""
        by_name, _ = serializer.serialize("logs", [{"log_category": "debug", "log_level": "medium"}])
        by_position, _ = serializer.serialize("logs", [["debug", "medium"]])

        assert by_name == by_position

    def test_properties(self) -> None:
        """Test derived properties."""
        assert Array(3, ("module_code",)).max_items == 7
        assert Array(3, ("module_code",)).is_homogeneous
        assert not Array(2, ("log_category", "log_level")).is_homogeneous


class TestXor:
    """Test tagged union codec."""

    def test_selects_option(self, serializer: Serializer) -> None:
        """Test selector is the option index."""
        long_data, long_bits = serializer.serialize("device_index", {"index_long": 300})
        short_data, short_bits = serializer.serialize("device_index", {"index_short": 5})

        assert long_bits == 1 + 9
        assert short_bits == 1 + 4
        assert short_data == b"\x28"  # 0 0101 000
        assert serializer.deserialize("device_index", long_data) == {
            "device_index": {"index_long": 300}
        }
        assert serializer.deserialize("device_index", short_data) == {
            "device_index": {"index_short": 5}
        }

    def test_exactly_one_option(self, serializer: Serializer) -> None:
        """Test zero or several active options are rejected."""
        with pytest.raises(SerializationError, match="exactly one"):
            serializer.serialize("device_index", {"index_short": 1, "index_long": 2})

        with pytest.raises(SerializationError, match="exactly one"):
            serializer.serialize("device_index", {})

    def test_none_values_are_inactive(self, serializer: Serializer) -> None:
        """Test options set to None do not count."""
        data, bits = serializer.serialize("device_index", {"index_short": None, "index_long": 7})

        assert bits == 10
        assert serializer.deserialize("device_index", data) == {"device_index": {"index_long": 7}}

    def test_wildcard(self, configuration: Configuration, serializer: Serializer) -> None:
        """Test XOR(*) offers every other definition."""
        codec = configuration.definition("wildcard").codec
        others = [d.name for d in configuration.definitions if d.name != "wildcard"]

        assert isinstance(codec, Xor)
        assert list(codec.options) == others
        assert len(others) == 23
        assert codec.width == 5

        data, bits = serializer.serialize("wildcard", {"flag": True})
        assert bits == 5 + 1
        assert serializer.deserialize("wildcard", data) == {"wildcard": {"flag": True}}

    def test_explicit_selectors(self) -> None:
        """Test XOR with pinned selector values."""
        configuration = Configuration.parse(
            "0x01 short INTEGER(4)\n"
            "0x02 long INTEGER(9)\n"
            "0x03 choice XOR(4;[0x01:short;0x02:long])\n"
        )
        serializer = Serializer(configuration)
        codec = configuration.definition("choice").codec

        assert codec.width == 4
        assert codec.selector_for("short") == 1
        assert codec.selector_for("long") == 2

        data, bits = serializer.serialize("choice", {"long": 300})
        assert bits == 4 + 9
        assert data[0] >> 4 == 2
        assert serializer.deserialize("choice", data) == {"choice": {"long": 300}}

    def test_unknown_selector(self) -> None:
        """Test decoding a selector with no option fails."""
        configuration = Configuration.parse(
            "0x01 short INTEGER(4)\n"
            "0x02 long INTEGER(9)\n"
            "0x03 choice XOR(4;[0x01:short;0x02:long])\n"
        )

        with pytest.raises(DeserializationError, match="Unknown xor selector"):
            Serializer(configuration).deserialize("choice", b"\x30\x00")

    def test_selector_validation(self) -> None:
        """Test explicit selectors must fit and be distinct."""
        with pytest.raises(ConfigurationError, match="exceeds"):
            Xor(("a", "b"), bit_length=1, selectors=(1, 2))
        with pytest.raises(ConfigurationError, match="duplicate"):
            Xor(("a", "b"), bit_length=4, selectors=(1, 1))
        with pytest.raises(ConfigurationError, match="cannot index"):
            Xor(("a", "b", "c"), bit_length=1)
