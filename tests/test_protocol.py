import pytest

from typerace.protocol import (
    MAXNAME,
    ClientData,
    MessageType,
    decode_name,
    encode_name_packet,
    encode_ready_packet,
    encode_start_packet,
    host_display_name,
    split_packets,
)


def test_name_packet_layout():
    assert encode_name_packet("bob") == b"\x01bob" + b"\x00" * 8


def test_ready_packet_layout():
    assert encode_ready_packet(2) == b"\x02\x02" + b"\x00" * 10


def test_start_packet_layout():
    assert encode_start_packet() == b"\x03" + b"\x00" * 11


@pytest.mark.parametrize("name", ["a", "alice", "12345678901"])
def test_name_round_trip(name):
    packet = encode_name_packet(name)
    assert len(packet) == MAXNAME
    assert packet[0] == MessageType.NAME
    assert decode_name(packet) == name


def test_long_name_is_cut_to_frame():
    packet = encode_name_packet("x" * 40)
    assert len(packet) == MAXNAME
    assert decode_name(packet) == "x" * (MAXNAME - 1)


def test_multibyte_name_is_cut_on_character_boundary():
    name = "\u00e9" * 10
    decoded = decode_name(encode_name_packet(name))
    assert name.startswith(decoded)
    assert len(decoded.encode("utf-8")) <= MAXNAME - 1


def test_host_display_name_short_name():
    assert host_display_name("Bob") == "Bob (HOST)"


def test_host_display_name_is_truncated():
    shown = host_display_name("abcdefghij")
    assert len(shown.encode("utf-8")) == MAXNAME - 1
    assert shown.startswith("abcdefghij")


def test_host_display_name_fits_name_packet():
    shown = host_display_name("alice")
    assert decode_name(encode_name_packet(shown)) == shown


def test_ready_packet_carries_index():
    for index in range(4):
        packet = encode_ready_packet(index)
        assert packet[0] == MessageType.READY
        assert packet[1] == index
        assert len(packet) == MAXNAME


@pytest.mark.parametrize("index", [-1, 256])
def test_ready_packet_rejects_bad_index(index):
    with pytest.raises(ValueError):
        encode_ready_packet(index)


def test_split_packets_keeps_remainder():
    first = encode_name_packet("ann")
    second = encode_ready_packet(1)
    frames, rest = split_packets(first + second + b"\x01\x02")
    assert frames == [first, second]
    assert rest == b"\x01\x02"


def test_split_packets_short_input():
    frames, rest = split_packets(b"\x01ab")
    assert frames == []
    assert rest == b"\x01ab"


def test_split_then_rejoin_is_identity():
    data = encode_name_packet("zed") * 3 + b"\x03"
    frames, rest = split_packets(data)
    assert b"".join(frames) + rest == data


def test_client_data_defaults():
    data = ClientData()
    assert data.player_name == ""
    assert data.is_ready is False