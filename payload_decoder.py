# Filename: payload_decoder.py
"""
Decoder for the pump.fun Create event payload.

Layout (little-endian, no padding):
    u32 name_len   | name bytes (UTF-8)
    u32 symbol_len | symbol bytes (UTF-8)
    u32 uri_len    | uri bytes (UTF-8)
    32 bytes mint | 32 bytes bonding curve | 32 bytes creator
"""

import base64
import binascii
import struct
from typing import List, Sequence

from solders.pubkey import Pubkey

from errors import MalformedPayload
from models import CreationEvent

CREATE_MARKER = "Program log: Instruction: Create"
DATA_PREFIX = "Program data: "
PUMP_PROGRAM_ID = "6EF8rrecthR5Dkzon8NQtEhJk8u5EDiyo3G81TpKyz5J"

PUBKEY_LEN = 32
_U32 = struct.Struct("<I")


class _Reader:
    def __init__(self, data: bytes):
        self.data = data
        self.offset = 0

    def remaining(self) -> int:
        return len(self.data) - self.offset

    def take(self, size: int, field_name: str) -> bytes:
        if size > self.remaining():
            raise MalformedPayload(
                f"{field_name} needs {size} bytes",
                {"offset": self.offset, "remaining": self.remaining()},
            )
        chunk = self.data[self.offset:self.offset + size]
        self.offset += size
        return chunk

    def read_u32(self, field_name: str) -> int:
        return _U32.unpack(self.take(_U32.size, field_name))[0]

    def read_string(self, field_name: str) -> str:
        length = self.read_u32(f"{field_name} length")
        raw = self.take(length, field_name)
        try:
            return raw.decode("utf-8")
        except UnicodeDecodeError as e:
            raise MalformedPayload(f"{field_name} is not valid UTF-8", {"reason": e.reason}) from e

    def read_pubkey(self, field_name: str) -> Pubkey:
        return Pubkey.from_bytes(self.take(PUBKEY_LEN, field_name))


def decode_creation_event(data: bytes) -> CreationEvent:
    reader = _Reader(bytes(data))
    return CreationEvent(
        name=reader.read_string("name"),
        symbol=reader.read_string("symbol"),
        uri=reader.read_string("uri"),
        mint=reader.read_pubkey("mint"),
        bonding_curve=reader.read_pubkey("bonding_curve"),
        creator=reader.read_pubkey("creator"),
    )


def encode_creation_event(event: CreationEvent) -> bytes:
    """Inverse of decode_creation_event. Used to build replay fixtures."""
    parts = []
    for text in (event.name, event.symbol, event.uri):
        raw = text.encode("utf-8")
        parts.append(_U32.pack(len(raw)))
        parts.append(raw)
    for key in (event.mint, event.bonding_curve, event.creator):
        parts.append(bytes(key))
    return b"".join(parts)


def is_creation_event(log_lines: Sequence[str]) -> bool:
    return any(line == CREATE_MARKER for line in log_lines)


def extract_payload(log_lines: Sequence[str]) -> bytes:
    for line in log_lines:
        if line.startswith(DATA_PREFIX):
            encoded = line[len(DATA_PREFIX):].strip()
            try:
                return base64.b64decode(encoded, validate=True)
            except (binascii.Error, ValueError) as e:
                raise MalformedPayload("payload is not valid base64") from e
    raise MalformedPayload("no program data line in creation logs")


def creation_log_lines(event: CreationEvent, program_id: str = PUMP_PROGRAM_ID) -> List[str]:
    """Log lines as the program emits them for one Create instruction."""
    payload = base64.b64encode(encode_creation_event(event)).decode("ascii")
    return [
        f"Program {program_id} invoke [1]",
        CREATE_MARKER,
        f"{DATA_PREFIX}{payload}",
        f"Program {program_id} success",
    ]
