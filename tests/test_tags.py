# tests/test_tags.py
from conftest import RECEIVER, SENDER, TOKEN
from sf_subgraph.addresses import RelevantAddresses
from sf_subgraph.entities import stream_period_handler
from sf_subgraph.tags import GENERAL, CacheTag, TagKind, provide_tags


def test_specific_tags_then_general():
    relevant = RelevantAddresses(tokens=(TOKEN,), accounts=(SENDER, RECEIVER))

    tags = provide_tags(137, relevant, TagKind.STREAM)

    assert tags == [
        CacheTag(137, TagKind.STREAM, TOKEN),
        CacheTag(137, TagKind.STREAM, SENDER),
        CacheTag(137, TagKind.STREAM, RECEIVER),
        CacheTag(137, TagKind.STREAM, GENERAL),
    ]


def test_no_addresses_gives_exactly_one_general_tag():
    tags = provide_tags(5, RelevantAddresses(), TagKind.TOKEN)

    assert tags == [CacheTag.general(5, TagKind.TOKEN)]
    assert tags[0].is_general


def test_address_in_both_buckets_is_tagged_once():
    relevant = RelevantAddresses(tokens=(TOKEN,), accounts=(TOKEN, SENDER))

    tags = provide_tags(1, relevant, TagKind.EVENT)

    assert len(tags) == len(set(tags)) == 3


def test_idempotent():
    relevant = RelevantAddresses(tokens=(TOKEN,), accounts=(SENDER,))

    assert provide_tags(1, relevant, TagKind.INDEX) == provide_tags(1, relevant, TagKind.INDEX)


def test_tags_are_chain_scoped():
    relevant = RelevantAddresses(accounts=(SENDER,))

    mainnet = set(provide_tags(1, relevant, TagKind.STREAM))
    polygon = set(provide_tags(137, relevant, TagKind.STREAM))

    assert mainnet.isdisjoint(polygon)


def test_tag_ids():
    assert CacheTag.general(137, TagKind.STREAM).id == "137"
    assert CacheTag(137, TagKind.STREAM, SENDER).id == f"137_{SENDER}"


def test_unconstrained_list_query_tags():
    relevant = stream_period_handler.get_relevant_addresses_from_filter(None)

    tags = provide_tags(100, relevant, TagKind.STREAM)

    assert relevant.tokens == () and relevant.accounts == ()
    assert tags == [CacheTag(100, TagKind.STREAM, GENERAL)]


def test_filter_scenario_tags():
    relevant = stream_period_handler.get_relevant_addresses_from_filter(
        {"sender": "0xa", "receiver_in": ["0xb", "0xc"]}
    )

    tags = provide_tags(137, relevant, TagKind.STREAM)

    assert {t.address for t in tags} == {"0xa", "0xb", "0xc", GENERAL}
