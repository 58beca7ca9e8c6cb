import pytest

from ethbridge.call_request import AccessListItem
from ethbridge.hexdata import Bytes
from ethbridge.transaction_request import (
    EIP1559TransactionMessage,
    EIP2930TransactionMessage,
    LegacyTransactionMessage,
    TransactionRequest,
)

ADDR = bytes([0x11]) * 20
ITEM = AccessListItem(ADDR, (bytes(32),))


def test_legacy_message():
    req = TransactionRequest(gas_price=5, gas=21000, value=3, data=Bytes(b"\x01"))
    msg = req.to_message()
    assert msg == LegacyTransactionMessage(
        nonce=0, gas_price=5, gas_limit=21000, value=3, input=b"\x01", to=None, chain_id=None
    )


def test_legacy_keeps_recipient():
    msg = TransactionRequest(gas_price=1, to=ADDR).to_message()
    assert isinstance(msg, LegacyTransactionMessage)
    assert msg.to == ADDR


def test_access_list_gives_eip2930():
    msg = TransactionRequest(access_list=(ITEM,)).to_message()
    assert msg == EIP2930TransactionMessage(gas_price=0, access_list=(ITEM,), chain_id=0)


def test_gas_price_with_access_list_gives_eip2930():
    msg = TransactionRequest(gas_price=8, access_list=(ITEM,)).to_message()
    assert isinstance(msg, EIP2930TransactionMessage)
    assert msg.gas_price == 8


def test_max_fee_gives_eip1559():
    req = TransactionRequest(max_fee_per_gas=9, max_priority_fee_per_gas=2, access_list=(ITEM,))
    msg = req.to_message()
    assert msg == EIP1559TransactionMessage(
        max_fee_per_gas=9, max_priority_fee_per_gas=2, access_list=(ITEM,)
    )


def test_empty_request_gives_eip1559_defaults():
    assert TransactionRequest().to_message() == EIP1559TransactionMessage()


def test_gas_price_and_max_fee_gives_none():
    assert TransactionRequest(gas_price=1, max_fee_per_gas=2).to_message() is None


def test_json_round_trip():
    raw = {
        "from": "0x" + "11" * 20,
        "to": None,
        "gasPrice": "0x5",
        "maxFeePerGas": None,
        "maxPriorityFeePerGas": None,
        "gas": "0x5208",
        "value": "0x0",
        "data": "0xdead",
        "nonce": "0x1",
        "accessList": [ITEM.to_json()],
        "type": "0x1",
    }
    req = TransactionRequest.from_json(raw)
    assert req.to_json() == raw
    assert TransactionRequest.from_json(req.to_json()) == req


def test_default_serialises_all_null():
    out = TransactionRequest().to_json()
    assert set(out) == {
        "from", "to", "gasPrice", "maxFeePerGas", "maxPriorityFeePerGas",
        "gas", "value", "data", "nonce", "accessList", "type",
    }
    assert all(v is None for v in out.values())


def test_unknown_field_rejected():
    with pytest.raises(ValueError):
        TransactionRequest.from_json({"gasLimit": "0x1"})


def test_bad_quantity_rejected():
    with pytest.raises(ValueError):
        TransactionRequest.from_json({"gas": "21000"})