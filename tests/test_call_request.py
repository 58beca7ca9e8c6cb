import pytest

from ethbridge.call_request import AccessListItem, CallRequest
from ethbridge.hexdata import Bytes

ADDR = "0x" + "11" * 20
KEY = "0x" + "22" * 32


def test_call_request_full_parse():
    req = CallRequest.from_json(
        {
            "from": ADDR,
            "to": ADDR,
            "gasPrice": "0x10",
            "gas": "0x5208",
            "value": "0x1",
            "data": "0xabcd",
            "nonce": "0x2",
            "type": "0x2",
            "accessList": [{"address": ADDR, "storageKeys": [KEY]}],
        }
    )
    assert req.from_ == bytes.fromhex("11" * 20)
    assert req.to == bytes.fromhex("11" * 20)
    assert req.gas_price == 0x10
    assert req.gas == 0x5208
    assert req.value == 1
    assert req.data == Bytes(bytes.fromhex("abcd"))
    assert req.nonce == 2
    assert req.transaction_type == 2
    assert req.access_list[0].storage_keys == (bytes.fromhex("22" * 32),)
    assert req.max_fee_per_gas is None


def test_empty_object_is_default():
    assert CallRequest.from_json({}) == CallRequest()


def test_null_fields_are_none():
    assert CallRequest.from_json({"to": None, "gas": None}) == CallRequest()


def test_unknown_field_rejected():
    with pytest.raises(ValueError):
        CallRequest.from_json({"input": "0x"})


def test_address_needs_prefix():
    with pytest.raises(ValueError):
        CallRequest.from_json({"to": "11" * 20})


def test_non_object_rejected():
    with pytest.raises(ValueError):
        CallRequest.from_json([ADDR])


def test_access_list_item_round_trip():
    raw = {"address": ADDR, "storageKeys": [KEY, KEY]}
    item = AccessListItem.from_json(raw)
    assert item.to_json() == raw
    assert AccessListItem.from_json(item.to_json()) == item


def test_access_list_item_missing_keys():
    with pytest.raises(ValueError):
        AccessListItem.from_json({"address": ADDR})