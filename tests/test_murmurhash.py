import pytest

from gnbnet.murmurhash import murmurhash_hash


def test_empty_input_hashes_to_zero():
    assert murmurhash_hash(b"") == 0


@pytest.mark.parametrize(
    "data",
    [b"a", b"ab", b"abc", b"abcd", b"abcde", b"hello world", bytes(range(256))],
)
def test_result_is_32_bit_and_deterministic(data):
    first = murmurhash_hash(data)
    assert 0 <= first <= 0xFFFFFFFF
    assert murmurhash_hash(data) == first


def test_bytes_like_inputs_agree():
    data = b"gnb-node-1001"
    expected = murmurhash_hash(data)
    assert murmurhash_hash(bytearray(data)) == expected
    assert murmurhash_hash(memoryview(data)) == expected


def test_every_tail_length_contributes():
    samples = [b"\x00" * n for n in range(1, 9)]
    hashes = {murmurhash_hash(s) for s in samples}
    assert len(hashes) == len(samples)


def test_tail_bytes_change_the_hash():
    variants = [b"abcd" + tail for tail in (b"x", b"xy", b"xyz", b"xyw", b"wyz")]
    hashes = {murmurhash_hash(v) for v in variants}
    assert len(hashes) == len(variants)


def test_str_is_rejected():
    with pytest.raises(TypeError):
        murmurhash_hash("text")