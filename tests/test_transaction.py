import pytest

from ethbridge.call_request import AccessListItem
from ethbridge.hexdata import Bytes, format_hash, format_quantity
from ethbridge.transaction import (
    LocalStatus,
    LocalTransactionStatus,
    RichRawTransaction,
    Transaction,
)


def test_default_omits_optional_fee_fields():
    out = Transaction().to_json()
    for key in ("gasPrice", "maxFeePerGas", "maxPriorityFeePerGas", "type"):
        assert key not in out
    assert out["blockHash"] is None
    assert out["accessList"] is None
    assert out["input"] == Bytes().to_json()


def test_fee_fields_present_when_set():
    tx = Transaction(gas_price=7, max_fee_per_gas=9, max_priority_fee_per_gas=3, transaction_type=2)
    out = tx.to_json()
    assert out["gasPrice"] == format_quantity(7)
    assert out["maxFeePerGas"] == format_quantity(9)
    assert out["maxPriorityFeePerGas"] == format_quantity(3)
    assert out["type"] == format_quantity(2)


def test_field_order_and_values():
    h = bytes(range(32))
    item = AccessListItem(bytes(20), (bytes(32),))
    tx = Transaction(hash=h, to=bytes(20), access_list=[item], raw=b"\x01")
    out = tx.to_json()
    keys = list(out)
    assert keys[0] == "hash"
    assert keys.index("from") < keys.index("gas") < keys.index("accessList")
    assert out["hash"] == format_hash(h)
    assert out["accessList"] == [item.to_json()]
    assert out["raw"] == Bytes(b"\x01").to_json()


def test_pending_status():
    assert LocalTransactionStatus(LocalStatus.PENDING).to_json() == {"status": "pending"}


def test_mined_status_carries_transaction():
    tx = Transaction(nonce=1)
    out = LocalTransactionStatus(LocalStatus.MINED, tx).to_json()
    assert out == {"status": "mined", "transaction": tx.to_json()}


def test_rejected_status():
    tx = Transaction()
    out = LocalTransactionStatus(LocalStatus.REJECTED, tx, error="too low").to_json()
    assert list(out) == ["status", "transaction", "error"]
    assert out["error"] == "too low"


def test_replaced_status_order():
    tx = Transaction()
    h = bytes([5]) * 32
    out = LocalTransactionStatus(LocalStatus.REPLACED, tx, gas_price=10, hash=h).to_json()
    assert list(out) == ["status", "transaction", "hash", "gasPrice"]
    assert out["hash"] == format_hash(h)
    assert out["gasPrice"] == format_quantity(10)


@pytest.mark.parametrize(
    "kwargs",
    [
        {"status": LocalStatus.MINED},
        {"status": LocalStatus.FUTURE, "transaction": Transaction()},
        {"status": LocalStatus.REJECTED, "transaction": Transaction()},
        {"status": LocalStatus.REPLACED, "transaction": Transaction(), "gas_price": 1},
    ],
)
def test_invalid_status_combinations(kwargs):
    with pytest.raises(ValueError):
        LocalTransactionStatus(**kwargs)


def test_rich_raw_transaction():
    tx = Transaction(nonce=4)
    rich = RichRawTransaction(b"\xaa\xbb", tx)
    out = rich.to_json()
    assert list(out) == ["raw", "tx"]
    assert out["raw"] == Bytes(b"\xaa\xbb").to_json()
    assert out["tx"] == tx.to_json()