import pytest

from ethbridge.block_number import BlockTag
from ethbridge.bloom import Bloom
from ethbridge.filter import (
    Filter,
    FilterChanges,
    FilteredParams,
    FilterKind,
    FilterPoolItem,
    Variadic,
    VariadicValue,
    parse_variadic,
)
from ethbridge.hexdata import format_hash
from ethbridge.log import Log


def h160(prefix):
    return bytes.fromhex(prefix + "00" * 19)


def h256(prefix):
    return bytes.fromhex(prefix + "00" * 31)


ADDRESS1 = h160("10")
ADDRESS2 = h160("20")
T1, T2, T3, T4, T5 = (h256(p) for p in ("10", "20", "30", "40", "50"))


def block_bloom():
    bloom = Bloom()
    bloom.accrue(ADDRESS1)
    bloom.accrue(T1)
    bloom.accrue(T2)
    return bloom


def conditional_topics(first, second, third):
    head = None if first is None else VariadicValue.single(VariadicValue.single(first))
    return VariadicValue.multiple([head, VariadicValue.multiple([second, third])])


def fix_conditional(first, second, third):
    outer = []
    outer.append(None if first is None else VariadicValue.single(first))
    outer.append(VariadicValue.multiple([second, third]))
    return VariadicValue.multiple(outer)


def topics_bloom_for(filt):
    topics_input = FilteredParams(filt).flat_topics if filt.topics is not None else None
    return FilteredParams.topics_bloom_filter(topics_input)


def test_bloom_filter_should_match_by_address():
    filt = Filter(address=VariadicValue.single(ADDRESS1))
    address_bloom = FilteredParams.addresses_bloom_filter(filt.address)
    assert FilteredParams.address_in_bloom(block_bloom(), address_bloom)


def test_bloom_filter_should_not_match_by_address():
    filt = Filter(address=VariadicValue.single(ADDRESS2))
    address_bloom = FilteredParams.addresses_bloom_filter(filt.address)
    assert not FilteredParams.address_in_bloom(block_bloom(), address_bloom)


def test_bloom_filter_should_match_by_topic():
    filt = Filter(topics=fix_conditional(T1, T2, T3))
    assert FilteredParams.topics_in_bloom(block_bloom(), topics_bloom_for(filt))


def test_bloom_filter_should_not_match_by_topic():
    filt = Filter(topics=fix_conditional(T1, T4, T5))
    assert not FilteredParams.topics_in_bloom(block_bloom(), topics_bloom_for(filt))


def test_bloom_filter_should_match_by_empty_topic():
    filt = Filter(topics=VariadicValue.multiple([]))
    assert FilteredParams.topics_in_bloom(block_bloom(), topics_bloom_for(filt))


def test_bloom_filter_should_match_combined():
    filt = Filter(address=VariadicValue.single(ADDRESS1), topics=fix_conditional(T1, T2, T3))
    address_bloom = FilteredParams.addresses_bloom_filter(filt.address)
    matches = FilteredParams.address_in_bloom(
        block_bloom(), address_bloom
    ) and FilteredParams.topics_in_bloom(block_bloom(), topics_bloom_for(filt))
    assert matches


def test_bloom_filter_should_not_match_combined():
    filt = Filter(address=VariadicValue.single(ADDRESS2), topics=fix_conditional(T1, T2, T3))
    address_bloom = FilteredParams.addresses_bloom_filter(filt.address)
    matches = FilteredParams.address_in_bloom(
        block_bloom(), address_bloom
    ) and FilteredParams.topics_in_bloom(block_bloom(), topics_bloom_for(filt))
    assert not matches


def test_bloom_filter_should_match_wildcards_by_topic():
    filt = Filter(topics=fix_conditional(None, T2, T3))
    assert FilteredParams.topics_in_bloom(block_bloom(), topics_bloom_for(filt))


def test_bloom_filter_should_not_match_wildcards_by_topic():
    filt = Filter(topics=fix_conditional(None, T4, T5))
    assert not FilteredParams.topics_in_bloom(block_bloom(), topics_bloom_for(filt))


def test_flatten_is_cartesian_product():
    params = FilteredParams(Filter(topics=fix_conditional(T1, T2, T3)))
    assert params.flat_topics == [
        VariadicValue.multiple([T1, T2]),
        VariadicValue.multiple([T1, T3]),
    ]


def test_no_filter_has_no_flat_topics():
    assert FilteredParams().flat_topics == []
    assert FilteredParams.addresses_bloom_filter(None) == []
    assert FilteredParams.topics_bloom_filter(None) == []


def test_empty_address_list_is_wildcard():
    blooms = FilteredParams.addresses_bloom_filter(VariadicValue.multiple([]))
    assert blooms == [None]
    assert FilteredParams.address_in_bloom(Bloom(), blooms)


def test_parse_variadic_shapes():
    assert parse_variadic(None, int) == VariadicValue.null()
    assert parse_variadic(5, int) == VariadicValue.single(5)
    assert parse_variadic([1, 2], int) == VariadicValue(Variadic.MULTIPLE, (1, 2))


def test_parse_variadic_rejects_bad_value():
    with pytest.raises(ValueError, match="Invalid variadic value type"):
        parse_variadic(["0x12", {"a": 1}], lambda v: bytes.fromhex(v[2:]))


def test_filter_from_json():
    filt = Filter.from_json(
        {
            "fromBlock": "0x1",
            "toBlock": "latest",
            "address": format_hash(ADDRESS1),
            "topics": [format_hash(T1), [format_hash(T2), format_hash(T3)]],
        }
    )
    assert filt.from_block == 1
    assert filt.to_block is BlockTag.LATEST
    assert filt.address == VariadicValue.single(ADDRESS1)
    assert filt.topics == fix_conditional(T1, T2, T3)


def test_filter_from_json_plain_list_is_single_sequence():
    filt = Filter.from_json({"topics": [format_hash(T1), format_hash(T2)]})
    assert filt.topics == VariadicValue.single(VariadicValue.multiple([T1, T2]))
    assert FilteredParams(filt).flat_topics == [VariadicValue.multiple([T1, T2])]


def test_filter_from_json_null_fields():
    filt = Filter.from_json({"topics": None, "address": None})
    assert filt.topics is None
    assert filt.address is None


def test_filter_from_json_unknown_field():
    with pytest.raises(ValueError):
        Filter.from_json({"fromBlok": "0x1"})


def make_log(address=ADDRESS1, topics=(T1, T2)):
    return Log(address=address, topics=topics)


def test_filter_topics_matches_conditional():
    params = FilteredParams(Filter(topics=fix_conditional(T1, T2, T3)))
    assert params.filter_topics(make_log())
    assert not params.filter_topics(make_log(topics=(T1, T4)))


def test_filter_topics_wildcard_position():
    params = FilteredParams(Filter.from_json({"topics": [None, format_hash(T2)]}))
    assert params.filter_topics(make_log())
    assert not params.filter_topics(make_log(topics=(T1, T3)))


def test_filter_topics_longer_than_log():
    params = FilteredParams(
        Filter.from_json({"topics": [[format_hash(T1)], [format_hash(T2)], [format_hash(T3)]]})
    )
    assert not params.filter_topics(make_log())


def test_filter_topics_without_topics_matches():
    assert FilteredParams(Filter()).filter_topics(make_log())


def test_replace_fills_wildcards_from_log():
    params = FilteredParams(Filter())
    assert params.replace(make_log(), VariadicValue.multiple([None, T3])) == [T1, T3]
    assert params.replace(make_log(), VariadicValue.single(T4)) == [T4]
    assert params.replace(make_log(), VariadicValue.null()) is None


def test_filter_address():
    single = FilteredParams(Filter(address=VariadicValue.single(ADDRESS1)))
    assert single.filter_address(make_log())
    assert not single.filter_address(make_log(address=ADDRESS2))
    many = FilteredParams(Filter(address=VariadicValue.multiple([ADDRESS2])))
    assert many.filter_address(make_log(address=ADDRESS2))
    assert not many.filter_address(make_log())


def test_filter_block_range():
    params = FilteredParams(Filter(from_block=5, to_block=10))
    assert params.filter_block_range(7)
    assert not params.filter_block_range(4)
    assert not params.filter_block_range(11)
    assert not FilteredParams(Filter(to_block=BlockTag.EARLIEST)).filter_block_range(0)


def test_filter_block_range_needs_filter():
    with pytest.raises(ValueError):
        FilteredParams().filter_block_range(1)


def test_filter_block_hash():
    params = FilteredParams(Filter(block_hash=T1))
    assert params.filter_block_hash(T1)
    assert not params.filter_block_hash(T2)
    assert FilteredParams(Filter()).filter_block_hash(T2)


def test_filter_changes_to_json():
    assert FilterChanges().to_json() == []
    assert FilterChanges(hashes=[T1]).to_json() == [format_hash(T1)]
    log = make_log()
    assert FilterChanges(logs=[log]).to_json() == [log.to_json()]


def test_filter_changes_cannot_hold_both():
    with pytest.raises(ValueError):
        FilterChanges(logs=[], hashes=[])


def test_filter_pool_item_log_needs_filter():
    with pytest.raises(ValueError):
        FilterPoolItem(last_poll=BlockTag.LATEST, filter_type=FilterKind.LOG, at_block=3)
    item = FilterPoolItem(
        last_poll=3, filter_type=FilterKind.LOG, at_block=3, filter=Filter(from_block=1)
    )
    assert item.filter.from_block == 1