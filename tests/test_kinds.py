from tg_update_router.core import (
    AMBIGUOUS_KINDS,
    GENERIC_KINDS,
    MEDIA_KINDS,
    WITNESS_FIELDS,
    UpdateFamily,
    UpdateKind,
    kind_from_name,
    kinds_for,
)


def test_every_kind_has_a_witness_field() -> None:
    assert set(WITNESS_FIELDS) == set(UpdateKind)
    assert all(kind.witness == WITNESS_FIELDS[kind] for kind in UpdateKind)


def test_families_partition_the_taxonomy() -> None:
    generic = set(kinds_for(UpdateFamily.GENERIC))
    message = set(kinds_for(UpdateFamily.MESSAGE))

    assert generic == GENERIC_KINDS
    assert generic.isdisjoint(message)
    assert generic | message == set(UpdateKind)


def test_ambiguous_kinds_are_message_rooted() -> None:
    assert AMBIGUOUS_KINDS == {
        UpdateKind.COMMAND,
        UpdateKind.PRIVATE_MESSAGE,
        UpdateKind.GROUP_MESSAGE,
        UpdateKind.SUPERGROUP_MESSAGE,
    }
    assert all(kind.family is UpdateFamily.MESSAGE for kind in AMBIGUOUS_KINDS)
    assert UpdateKind.COMMAND.is_ambiguous
    assert not UpdateKind.PHOTO.is_ambiguous


def test_witness_names_follow_bot_api_spelling() -> None:
    assert UpdateKind.CHAT_MEMBER_UPDATED.witness == "chat_member"
    assert UpdateKind.FORWARDED.witness == "forward_origin"
    assert UpdateKind.PRE_CHECKOUT_QUERY.witness == "pre_checkout_query"


def test_media_kinds_keep_declared_order() -> None:
    assert MEDIA_KINDS[0] is UpdateKind.POLL
    assert MEDIA_KINDS[-1] is UpdateKind.SUPERGROUP_MESSAGE
    assert len(set(MEDIA_KINDS)) == len(MEDIA_KINDS)


def test_kind_from_name_accepts_member_names_and_values() -> None:
    assert kind_from_name("photo") is UpdateKind.PHOTO
    assert kind_from_name("  CALLBACK_QUERY ") is UpdateKind.CALLBACK_QUERY
    assert kind_from_name("private_message") is UpdateKind.PRIVATE_MESSAGE
    assert kind_from_name("not_a_kind") is None
