import pytest
from fakes import online_session

from authme.session.types import AccountType, Credentials, StatusSnapshot, group_properties


def test_account_type_parse() -> None:
    assert AccountType.parse("LEGACY") is AccountType.LEGACY
    assert AccountType.parse("msa") is AccountType.MICROSOFT
    assert AccountType.parse("Microsoft") is AccountType.MICROSOFT
    with pytest.raises(ValueError):
        AccountType.parse("guest")


def test_session_repr_hides_token() -> None:
    session = online_session(token="very-secret")
    assert "very-secret" not in repr(session)
    assert "Alice" in repr(session)


def test_session_properties_are_read_only() -> None:
    session = online_session()
    with pytest.raises(TypeError):
        session.extra_properties["new"] = ("x",)


def test_identity_key_tracks_token() -> None:
    assert online_session(token="a").identity_key != online_session(token="b").identity_key
    assert online_session(token="a").identity_key == online_session(token="a").identity_key


def test_credentials_repr_hides_password() -> None:
    assert "hunter2" not in repr(Credentials("alice", "hunter2"))


def test_snapshot_freshness_is_strict() -> None:
    snapshot = StatusSnapshot(checked_at_ms=1000)
    assert snapshot.is_fresh(1000 + 59_999, 60_000)
    assert not snapshot.is_fresh(1000 + 60_000, 60_000)


def test_group_properties_skips_unnamed() -> None:
    assert group_properties([{"value": "x"}, {"name": "a", "value": "1"}]) == {"a": ["1"]}
