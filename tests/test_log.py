from ethbridge.hexdata import Bytes, parse_hash, parse_quantity
from ethbridge.log import Log


def _log():
    return Log(
        address=bytes([0x10]) + bytes(19),
        topics=[bytes([0x20]) + bytes(31), bytes([0x30]) + bytes(31)],
        data=b"\x01\x02",
        block_hash=bytes([0xAA]) * 32,
        block_number=7,
        transaction_index=3,
    )


def test_json_keys_are_camel_case():
    assert set(_log().to_json()) == {
        "address",
        "topics",
        "data",
        "blockHash",
        "blockNumber",
        "transactionHash",
        "transactionIndex",
        "logIndex",
        "transactionLogIndex",
        "removed",
    }


def test_values_round_trip():
    log = _log()
    out = log.to_json()
    assert parse_hash(out["address"], 20) == log.address
    assert [parse_hash(t, 32) for t in out["topics"]] == list(log.topics)
    assert Bytes.from_json(out["data"]) == log.data
    assert parse_hash(out["blockHash"], 32) == log.block_hash
    assert parse_quantity(out["blockNumber"]) == log.block_number
    assert parse_quantity(out["transactionIndex"]) == log.transaction_index


def test_missing_values_are_null():
    out = _log().to_json()
    assert out["transactionHash"] is None
    assert out["logIndex"] is None
    assert out["removed"] is False


def test_logs_are_hashable_and_comparable():
    assert _log() == _log()
    assert len({_log(), _log()}) == 1
    assert isinstance(_log().topics, tuple) and len(_log().topics) == 2