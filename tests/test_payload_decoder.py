"""
Tests for the Create event payload decoder.
"""
import base64
import struct

import pytest

from errors import MalformedPayload
from payload_decoder import (
    CREATE_MARKER,
    decode_creation_event,
    encode_creation_event,
    extract_payload,
    is_creation_event,
)

from conftest import key, make_event


class TestDecode:
    """Tests for decode_creation_event."""

    def test_decodes_fields_in_order(self):
        data = (
            struct.pack("<I", 4) + b"Pepe"
            + struct.pack("<I", 4) + b"PEPE"
            + struct.pack("<I", 10) + b"https://x/"
            + bytes(key(7)) + bytes(key(8)) + bytes(key(9))
        )

        event = decode_creation_event(data)

        assert event.name == "Pepe"
        assert event.symbol == "PEPE"
        assert event.uri == "https://x/"
        assert event.mint == key(7)
        assert event.bonding_curve == key(8)
        assert event.creator == key(9)

    @pytest.mark.parametrize("name,symbol,uri", [
        ("PepeCoin", "PEPE2", "https://example.com/meta.json"),
        ("", "", ""),
        ("🐸 Frog", "FRÖG", "ipfs://bafy/1.json"),
    ])
    def test_round_trip(self, name, symbol, uri):
        event = make_event(name, symbol, uri)

        assert decode_creation_event(encode_creation_event(event)) == event

    def test_ignores_trailing_bytes(self):
        event = make_event()

        assert decode_creation_event(encode_creation_event(event) + b"\x00\x01") == event

    def test_every_truncation_is_malformed(self):
        """A short buffer never yields a partial event."""
        data = encode_creation_event(make_event())

        for cut in range(len(data)):
            with pytest.raises(MalformedPayload):
                decode_creation_event(data[:cut])

    def test_length_larger_than_buffer_is_malformed(self):
        data = struct.pack("<I", 0xFFFF) + b"abc"

        with pytest.raises(MalformedPayload):
            decode_creation_event(data)

    def test_invalid_utf8_is_malformed(self):
        data = encode_creation_event(make_event(name="ok!!"))
        data = data.replace(b"ok!!", b"\xff\xfe!!", 1)

        with pytest.raises(MalformedPayload):
            decode_creation_event(data)


class TestLogLines:
    """Tests for creation marker detection and payload extraction."""

    def test_marker_must_match_whole_line(self):
        assert is_creation_event(["x", CREATE_MARKER])
        assert not is_creation_event(["Program log: Instruction: Buy"])
        assert not is_creation_event([CREATE_MARKER + "V2"])

    def test_extracts_base64_payload(self):
        raw = encode_creation_event(make_event())
        lines = [CREATE_MARKER, "Program data: " + base64.b64encode(raw).decode()]

        assert extract_payload(lines) == raw

    def test_missing_data_line_is_malformed(self):
        with pytest.raises(MalformedPayload):
            extract_payload([CREATE_MARKER])

    def test_bad_base64_is_malformed(self):
        with pytest.raises(MalformedPayload):
            extract_payload([CREATE_MARKER, "Program data: not*base64!"])
