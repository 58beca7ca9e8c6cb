from ethbridge.hexdata import parse_hash, parse_quantity
from ethbridge.work import Work


def test_without_number_has_three_items():
    work = Work(bytes([1]) * 32, bytes([2]) * 32, bytes([3]) * 32)
    out = work.to_json()
    assert len(out) == 3
    assert [parse_hash(x, 32) for x in out] == [work.pow_hash, work.seed_hash, work.target]


def test_with_number_appends_quantity():
    work = Work(number=5)
    out = work.to_json()
    assert len(out) == 4
    assert out[3] == "0x5"
    assert parse_quantity(out[3]) == work.number


def test_default_is_zero_hashes():
    out = Work().to_json()
    assert out[0] == "0x" + "00" * 32
    assert out[0] == out[1] == out[2]