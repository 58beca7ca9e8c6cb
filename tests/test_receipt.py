from ethbridge.bloom import Bloom
from ethbridge.hexdata import format_hash, format_quantity
from ethbridge.log import Log
from ethbridge.receipt import Receipt


def test_unknown_root_and_status_are_omitted():
    out = Receipt().to_json()
    assert "root" not in out
    assert "status" not in out
    assert out["transactionHash"] is None
    assert out["logs"] == []


def test_root_and_status_present_when_known():
    root = bytes([7]) * 32
    out = Receipt(state_root=root, status_code=1).to_json()
    assert out["root"] == format_hash(root)
    assert out["status"] == format_quantity(1)
    keys = list(out)
    assert keys.index("logs") < keys.index("root") < keys.index("logsBloom")
    assert keys.index("logsBloom") < keys.index("status") < keys.index("effectiveGasPrice")


def test_logs_bloom_serialised_in_full():
    bloom = Bloom.from_input(b"topic")
    out = Receipt(logs_bloom=bloom).to_json()
    assert out["logsBloom"] == format_hash(bytes(bloom))
    assert len(out["logsBloom"]) == 514


def test_logs_and_quantities():
    log = Log(address=bytes(20), topics=[bytes(32)])
    receipt = Receipt(
        logs=[log],
        cumulative_gas_used=42,
        gas_used=21,
        effective_gas_price=3,
        from_=bytes([1]) * 20,
    )
    out = receipt.to_json()
    assert out["logs"] == [log.to_json()]
    assert out["cumulativeGasUsed"] == format_quantity(42)
    assert out["gasUsed"] == format_quantity(21)
    assert out["effectiveGasPrice"] == format_quantity(3)
    assert out["from"] == format_hash(bytes([1]) * 20)
    assert out["to"] is None