"""Property-based tests using hypothesis."""

from __future__ import annotations

from hypothesis import given
from hypothesis import strategies as st

from bitschema import Configuration, Serializer
from bitschema.codec import BitReader, BitWriter

SCHEMA = """\
nb_bit_key_binary=5
0x01 level SYMBOL(low;medium;high)
0x02 depth INTEGER(12)
0x03 voltage FLOAT(10;0.0;25.0)
0x04 flag BOOLEAN
0x05 serial HEXA(3)
0x06 readings ARRAY(4;depth)
0x07 bundle SEQUENCE(depth;flag;message)
"""

CONFIGURATION = Configuration.parse(SCHEMA)
SERIALIZER = Serializer(CONFIGURATION)

fragments = st.one_of(
    st.builds(lambda v: {"level": v}, st.sampled_from(["low", "medium", "high"])),
    st.builds(lambda v: {"depth": v}, st.integers(min_value=0, max_value=4095)),
    st.builds(lambda v: {"flag": v}, st.booleans()),
    st.builds(lambda v: {"serial": "0x" + v.hex().upper()}, st.binary(min_size=3, max_size=3)),
    st.builds(
        lambda v: {"readings": v},
        st.lists(st.integers(min_value=0, max_value=4095), max_size=15),
    ),
)


class TestBitPackProperties:
    """Property-based tests for bit I/O."""

    @given(
        fields=st.lists(
            st.integers(min_value=1, max_value=64).flatmap(
                lambda width: st.tuples(
                    st.just(width), st.integers(min_value=0, max_value=(1 << width) - 1)
                )
            ),
            max_size=20,
        )
    )
    def test_write_read_roundtrip(self, fields: list[tuple[int, int]]) -> None:
        """Test any sequence of fixed-width values reads back unchanged."""
        writer = BitWriter()
        for width, value in fields:
            writer.write_bits(value, width)

        assert writer.size == sum(width for width, _ in fields)
        assert len(writer.to_bytes()) == (writer.size + 7) // 8

        reader = BitReader(writer.to_bytes())
        assert [reader.read_bits(width) for width, _ in fields] == [value for _, value in fields]


class TestCodecProperties:
    """Property-based tests for codecs."""

    @given(value=st.integers(min_value=0, max_value=4095))
    def test_integer_roundtrip(self, value: int) -> None:
        """Test integers are exact."""
        data, bits = SERIALIZER.serialize("depth", value)

        assert bits == 12
        assert SERIALIZER.deserialize("depth", data) == {"depth": value}

    @given(value=st.floats(min_value=0.0, max_value=25.0, allow_nan=False))
    def test_float_error_bound(self, value: float) -> None:
        """Test float error stays within half a quantization step."""
        data, _ = SERIALIZER.serialize("voltage", value)
        decoded = SERIALIZER.deserialize("voltage", data)["voltage"]

        step = 25.0 / 1023
        assert abs(decoded - value) <= step / 2 + 1e-9

    @given(message=st.lists(fragments, max_size=10))
    def test_message_roundtrip(self, message: list[dict]) -> None:
        """Test messages of fixed-width fragments round-trip."""
        data, _ = SERIALIZER.serialize(message)

        assert SERIALIZER.deserialize(data) == message

    @given(
        depth=st.integers(min_value=0, max_value=4095),
        flag=st.booleans(),
        inner=st.lists(fragments, max_size=5),
        trailer=st.lists(fragments, max_size=3),
    )
    def test_embedded_message_roundtrip(
        self, depth: int, flag: bool, inner: list[dict], trailer: list[dict]
    ) -> None:
        """Test embedded messages round-trip wherever they appear."""
        message = [{"bundle": {"depth": depth, "flag": flag, "message": inner}}] + trailer
        data, _ = SERIALIZER.serialize(message)

        assert SERIALIZER.deserialize(data) == message
