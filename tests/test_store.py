"""Tests for the record store and its access policy."""
import pytest

from portfolio.core.errors import RemoteCallError
from portfolio.core.store import BAD_REQUEST, NOT_FOUND, POLICY_VIOLATION


def _skill(store, owner, name, proficiency=3):
    return store.insert('skills', {'user_id': owner, 'name': name, 'proficiency': proficiency}, identity=owner).data


def test_insert_returns_row_with_id_and_timestamp(store):
    row = _skill(store, "u1", "Go", 4)

    assert row['id']
    assert row['user_id'] == "u1"
    assert row['created_at']


def test_insert_for_another_owner_is_rejected(store):
    result = store.insert('skills', {'user_id': "u2", 'name': "Go"}, identity="u1")

    assert result.error.code == POLICY_VIOLATION
    assert result.error.message == 'new row violates row-level security policy for table "skills"'
    assert store.select('skills').data == []


def test_insert_without_identity_is_rejected(store):
    result = store.insert('projects', {'user_id': "u1", 'title': "Site"}, identity=None)
    assert result.error.code == POLICY_VIOLATION


def test_select_filters_and_orders(store):
    _skill(store, "u1", "Python", 5)
    _skill(store, "u1", "Go", 4)
    _skill(store, "u2", "Rust", 2)

    rows = store.select('skills', {'user_id': "u1"}, order_by='name').data
    assert [row['name'] for row in rows] == ["Go", "Python"]

    rows = store.select('skills', {'user_id': "u1"}, order_by='proficiency', descending=True).data
    assert [row['name'] for row in rows] == ["Python", "Go"]


def test_created_at_order_follows_insert_order(store):
    for title in ("first", "second", "third"):
        store.insert('projects', {'user_id': "u1", 'title': title}, identity="u1")

    rows = store.select('projects', {'user_id': "u1"}, order_by='created_at', descending=True).data
    assert [row['title'] for row in rows] == ["third", "second", "first"]


def test_unknown_column_is_a_bad_request(store):
    result = store.select('skills', {'colour': "blue"})
    assert result.error.code == BAD_REQUEST

    result = store.select('skills', order_by='colour')
    assert result.error.code == BAD_REQUEST


def test_select_one_not_found(store):
    result = store.select_one('profiles', {'id': "missing"})

    assert result.error.code == NOT_FOUND
    with pytest.raises(RemoteCallError) as exc:
        result.raise_for_error()
    assert exc.value.code == NOT_FOUND


def test_update_only_touches_own_rows(store):
    row = _skill(store, "u1", "Go", 4)

    result = store.update('skills', {'id': row['id']}, {'proficiency': 1}, identity="u2")
    assert result.ok
    assert result.data == []
    assert store.select_one('skills', {'id': row['id']}).data['proficiency'] == 4

    result = store.update('skills', {'id': row['id']}, {'proficiency': 5}, identity="u1")
    assert [r['proficiency'] for r in result.data] == [5]


def test_update_cannot_move_rows_to_another_owner(store):
    row = _skill(store, "u1", "Go")

    result = store.update('skills', {'id': row['id']}, {'user_id': "u2"}, identity="u1")
    assert result.error.code == POLICY_VIOLATION


def test_profile_update_refreshes_updated_at(store, user):
    before = store.select_one('profiles', {'id': user.id}).data

    updated = store.update('profiles', {'id': user.id}, {'headline': "Analyst"}, identity=user.id).data[0]

    assert updated['headline'] == "Analyst"
    assert updated['updated_at'] != before['updated_at']


def test_delete_only_own_rows(store):
    row = _skill(store, "u1", "Go")

    assert store.delete('skills', {'id': row['id']}, identity="u2").data == []
    assert len(store.select('skills').data) == 1

    assert store.delete('skills', {'id': row['id']}, identity="u1").data == [row['id']]
    assert store.select('skills').data == []


def test_delete_missing_row_is_not_an_error(store):
    result = store.delete('projects', {'id': "nope"}, identity="u1")
    assert result.ok
    assert result.data == []


def test_tech_stack_round_trips_as_list(store):
    row = store.insert('projects', {'user_id': "u1", 'title': "Site", 'tech_stack': ["a", "b"]}, identity="u1").data
    assert store.select_one('projects', {'id': row['id']}).data['tech_stack'] == ["a", "b"]
