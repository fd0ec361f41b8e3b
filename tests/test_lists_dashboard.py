"""Tests for the entity lists and the dashboard."""
from unittest.mock import Mock

import pytest

from portfolio.core.errors import RemoteCallError, SessionRequiredError
from portfolio.core.store import RecordStore, StoreError, StoreResult
from portfolio.features.dashboard import Dashboard, DashboardTab
from portfolio.features.lists import ProjectsList, SkillsList
from portfolio.features.session import SessionContext


def _project(store, owner, title):
    return store.insert('projects', {'user_id': owner, 'title': title}, identity=owner).data


def _skill(store, owner, name, proficiency=3):
    return store.insert('skills', {'user_id': owner, 'name': name, 'proficiency': proficiency}, identity=owner).data


class TestProjectsList:
    def test_newest_first_and_owner_only(self, store, user):
        _project(store, user.id, "Older")
        _project(store, user.id, "Newer")
        _project(store, "someone-else", "Theirs")

        items = ProjectsList(store, user.id).fetch()

        assert [p.title for p in items] == ["Newer", "Older"]

    def test_delete_refreshes(self, store, user):
        row = _project(store, user.id, "Doomed")
        projects = ProjectsList(store, user.id)
        projects.fetch()

        notification = projects.delete(row['id'])

        assert notification.title == "Project deleted"
        assert not notification.is_error
        assert projects.items == []

    def test_delete_failure_keeps_items(self, store, user):
        _project(store, user.id, "Kept")
        projects = ProjectsList(store, user.id)
        projects.fetch()
        projects.store = Mock(spec=RecordStore)
        projects.store.delete.return_value = StoreResult(error=StoreError(message="permission denied"))

        notification = projects.delete("any")

        assert notification.is_error
        assert notification.title == "Error deleting project"
        assert notification.description == "permission denied"
        assert [p.title for p in projects.items] == ["Kept"]

    def test_delete_succeeds_when_refresh_fails(self):
        store = Mock(spec=RecordStore)
        store.delete.return_value = StoreResult(data=["p1"])
        store.select.return_value = StoreResult(error=StoreError(message="timeout"))

        notification = ProjectsList(store, "u1").delete("p1")

        assert not notification.is_error
        assert notification.title == "Project deleted"

    def test_add_form_success_refreshes_list(self, store, user):
        projects = ProjectsList(store, user.id)

        result = projects.add_form().submit({'title': "Fresh", 'tech_stack': "Python"})

        assert result.ok
        assert [p.title for p in projects.items] == ["Fresh"]
        assert projects.items[0].tech_stack == ["Python"]

    def test_fetch_error_raises(self):
        store = Mock(spec=RecordStore)
        store.select.return_value = StoreResult(error=StoreError(message="timeout"))

        with pytest.raises(RemoteCallError):
            ProjectsList(store, "u1").fetch()


class TestSkillsList:
    def test_alphabetical(self, store, user):
        for name in ("Python", "Go", "Rust"):
            _skill(store, user.id, name)

        assert [s.name for s in SkillsList(store, user.id).fetch()] == ["Go", "Python", "Rust"]

    def test_duplicate_names_are_kept(self, store, user):
        _skill(store, user.id, "Go", 2)
        _skill(store, user.id, "Go", 5)

        assert len(SkillsList(store, user.id).fetch()) == 2

    def test_delete(self, store, user):
        row = _skill(store, user.id, "Go")
        skills = SkillsList(store, user.id)

        assert skills.delete(row['id']).title == "Skill deleted"
        assert skills.items == []

    def test_stale_fetch_is_discarded(self, store, user, context):
        _skill(store, user.id, "Go")
        skills = SkillsList(store, user.id)
        guard = context.guard()

        context.sign_out()
        skills.fetch(guard)

        assert skills.items == []


class TestDashboard:
    def test_redirects_before_any_fetch(self, provider):
        store = Mock(spec=RecordStore)
        dashboard = Dashboard(SessionContext(provider, None), store)

        with pytest.raises(SessionRequiredError) as exc:
            dashboard.mount()

        assert exc.value.redirect_to == "/auth"
        store.select.assert_not_called()

    def test_mount_loads_both_lists(self, store, user, context):
        _project(store, user.id, "Site")
        _skill(store, user.id, "Go", 4)

        dashboard = Dashboard(context, store).mount()
        data = dashboard.to_dict()

        assert data['active_tab'] == "projects"
        assert data['tabs'] == ["projects", "skills"]
        assert [p['title'] for p in data['projects']] == ["Site"]
        assert [s['name'] for s in data['skills']] == ["Go"]
        dashboard.unmount()

    def test_select_tab(self, store, context):
        dashboard = Dashboard(context, store).mount()

        assert dashboard.select_tab("skills") == DashboardTab.SKILLS
        with pytest.raises(ValueError):
            dashboard.select_tab("settings")

    def test_sign_out_while_mounted_redirects(self, store, context):
        dashboard = Dashboard(context, store).mount()

        context.sign_out()

        assert dashboard.redirect_to == "/auth"

    def test_unmount_stops_listening(self, store, context):
        dashboard = Dashboard(context, store).mount()
        dashboard.unmount()

        context.sign_out()

        assert dashboard.redirect_to is None
        assert not dashboard.mounted
