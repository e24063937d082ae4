"""Wire format and shared game data for the lobby protocol.

Every packet on the wire is a fixed-size frame of ``MAXNAME`` bytes whose
first byte is the message type.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum

MAXNAME = 12
MAXPLAYERS = 4
BUFFERSIZE = 32
HOST_INDEX = 0

_HOST_SUFFIX = " (HOST)"


class GameState(IntEnum):
    """Screens and phases the game moves through."""

    MENU = 0
    ENTER_IP = 1
    LOBBY = 2
    ONGOING = 3
    GAME_OVER = 4


class MessageType(IntEnum):
    """First byte of every frame."""

    NAME = 1
    READY = 2
    START_GAME = 3


@dataclass
class ClientData:
    """What the server knows about one connected player."""

    player_name: str = ""
    is_ready: bool = False


def _fit(text: str, limit: int) -> bytes:
    """Encode ``text`` as UTF-8, cut to ``limit`` bytes on a character boundary."""
    raw = text.encode("utf-8")[:limit]
    return raw.decode("utf-8", errors="ignore").encode("utf-8")


def _frame(kind: int, payload: bytes = b"") -> bytes:
    return bytes([kind]) + payload[: MAXNAME - 1].ljust(MAXNAME - 1, b"\0")


def encode_name_packet(name: str) -> bytes:
    """Build a name frame; the name is cut to ``MAXNAME - 1`` bytes."""
    return _frame(MessageType.NAME, _fit(name, MAXNAME - 1))


def encode_ready_packet(index: int) -> bytes:
    """Build a ready frame carrying a player index."""
    if not 0 <= index <= 0xFF:
        raise ValueError(f"player index out of range: {index}")
    return _frame(MessageType.READY, bytes([index]))


def encode_start_packet() -> bytes:
    """Build the frame that starts the game."""
    return _frame(MessageType.START_GAME)


def host_display_name(name: str) -> str:
    """Return the host's name with the host marker, cut to fit a frame."""
    return _fit(name + _HOST_SUFFIX, MAXNAME - 1).decode("utf-8")


def decode_name(packet: bytes) -> str:
    """Read the NUL-terminated name carried after the type byte."""
    payload = bytes(packet[1:MAXNAME]).split(b"\0", 1)[0]
    return payload.decode("utf-8", errors="replace")


def split_packets(data: bytes) -> tuple[list[bytes], bytes]:
    """Split ``data`` into whole frames; return them with the leftover bytes."""
    whole = len(data) - len(data) % MAXNAME
    frames = [bytes(data[start:start + MAXNAME]) for start in range(0, whole, MAXNAME)]
    return frames, bytes(data[whole:])