import pytest

from pgtypes.append import append_bytes
from pgtypes.flags import Flag
from pgtypes.hexcodec import HexEncoder, hex_decoder


@pytest.mark.parametrize("payload", [b"hello", b"\x00\x01\xfe\xff", bytes(range(256))])
def test_round_trip(payload):
    enc = HexEncoder()
    assert enc.write(payload) == len(payload)
    enc.close()
    assert hex_decoder(enc.getvalue()).read() == payload


@pytest.mark.parametrize("flags", [0, Flag.QUOTE, Flag.ARRAY, Flag.QUOTE | Flag.ARRAY])
def test_matches_append_bytes(flags):
    payload = b"\x10\x20\x30"
    enc = HexEncoder(flags)
    enc.write(payload)
    enc.close()
    assert enc.getvalue() == append_bytes(payload, flags)


def test_multiple_writes_concatenate():
    enc = HexEncoder(Flag.QUOTE)
    enc.write(b"ab")
    enc.write(b"cd")
    enc.close()
    single = HexEncoder(Flag.QUOTE)
    single.write(b"abcd")
    single.close()
    assert enc.getvalue() == single.getvalue()


def test_empty_encoder_is_null():
    with HexEncoder(Flag.QUOTE) as enc:
        pass
    assert enc.getvalue() == "NULL"


def test_write_after_close_fails():
    enc = HexEncoder()
    enc.close()
    with pytest.raises(ValueError):
        enc.write(b"x")


def test_decoder_empty():
    assert hex_decoder(b"").read() == b""
    assert hex_decoder(None).read() == b""


@pytest.mark.parametrize("data", [b"ab", b"\\yab", b"\\", b"\\xzz", b"\\xabc"])
def test_decoder_errors(data):
    with pytest.raises(ValueError):
        hex_decoder(data)