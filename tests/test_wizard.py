"""Tests for the wizard orchestration and step registry."""
from datetime import datetime, timedelta, timezone
from unittest.mock import Mock

import pytest

from portfolio.core.errors import WizardCompleteError, WizardStepError
from portfolio.core.store import RecordStore, StoreError, StoreResult
from portfolio.features.wizard import STEP_REGISTRY, StepId, Wizard, WizardRegistry
from portfolio.features.wizard.steps import check_registry


@pytest.fixture
def wizard(store, user):
    return Wizard(store, user.id)


def test_registry_covers_every_step():
    assert set(STEP_REGISTRY) == set(StepId)
    check_registry()


def test_incomplete_registry_is_detected():
    partial = {k: v for k, v in STEP_REGISTRY.items() if k != StepId.SKILLS}
    with pytest.raises(RuntimeError, match="skills"):
        check_registry(partial)


def test_profile_step_renders_stored_values(wizard):
    body = wizard.render()

    assert body['values']['full_name'] == "Ada Lovelace"
    assert body['skippable'] is False


def test_successful_submit_advances(wizard, store, user):
    outcome = wizard.submit({'full_name': "Ada King", 'headline': "Analyst"})

    assert outcome.ok
    assert wizard.sequencer.current_step.id == "projects"
    assert store.select_one('profiles', {'id': user.id}).data['headline'] == "Analyst"


def test_invalid_submit_stays_on_step(wizard):
    outcome = wizard.submit({'full_name': "A"})

    assert not outcome.ok
    assert outcome.errors == {'full_name': "Name must be at least 2 characters"}
    assert wizard.sequencer.index == 0


def test_store_failure_stays_on_step_and_can_be_retried():
    store = Mock(spec=RecordStore)
    store.insert.return_value = StoreResult(error=StoreError(message="db unavailable"))
    wizard = Wizard(store, "u1")
    wizard.skip()

    outcome = wizard.submit({'title': "Portfolio Site"})

    assert not outcome.ok
    assert outcome.notification.description == "db unavailable"
    assert wizard.sequencer.current_step.id == "projects"

    store.insert.return_value = StoreResult(data={'id': "p1", 'user_id': "u1", 'title': "Portfolio Site"})
    assert wizard.submit({'title': "Portfolio Site"}).ok
    assert wizard.sequencer.current_step.id == "skills"


def test_skill_step_rejects_bad_proficiency_without_store_call():
    store = Mock(spec=RecordStore)
    wizard = Wizard(store, "u1")
    wizard.skip()
    wizard.skip()

    outcome = wizard.submit({'name': "Go", 'proficiency': "eleven"})

    assert 'proficiency' in outcome.errors
    store.insert.assert_not_called()


def test_resume_step_generates_and_completes(wizard, store, user):
    store.insert('skills', {'user_id': user.id, 'name': "Go", 'proficiency': 4}, identity=user.id)
    for _ in range(3):
        wizard.skip()

    outcome = wizard.submit({'objective': "Build reliable systems"})

    assert outcome.ok
    assert "Go (4/5)" in outcome.document
    assert "Build reliable systems" in outcome.document
    assert outcome.filename == "ada-lovelace.html"
    assert wizard.is_complete
    assert wizard.last_notification.title == "Portfolio complete!"


def test_complete_only_from_last_step(wizard):
    with pytest.raises(WizardStepError):
        wizard.complete()

    for _ in range(3):
        wizard.advance()
    state = wizard.complete()

    assert state['complete'] is True
    assert state['result_url'] == f"/portfolio/{wizard.identity}"


def test_completed_wizard_refuses_edits(wizard):
    for _ in range(4):
        wizard.skip()

    assert wizard.render()['action']['url'] == f"/portfolio/{wizard.identity}"
    for action in (wizard.advance, wizard.skip, wizard.retreat, wizard.complete):
        with pytest.raises(WizardCompleteError):
            action()
    with pytest.raises(WizardCompleteError):
        wizard.submit({'full_name': "Ada"})


def test_result_url_only_when_complete(wizard):
    assert wizard.result_url() is None


def test_retreat_keeps_data(wizard):
    wizard.submit({'full_name': "Ada King"})
    wizard.retreat()

    assert wizard.sequencer.current_step.id == "profile"
    assert wizard.render()['values']['full_name'] == "Ada King"


class TestWizardRegistry:
    def test_one_wizard_per_identity(self, provider, store):
        registry = WizardRegistry(provider, store)

        assert registry.get("u1") is registry.get("u1")
        assert registry.get("u1") is not registry.get("u2")

    def test_sign_out_discards_wizard(self, provider, store, user, auth_session):
        registry = WizardRegistry(provider, store)
        registry.get(user.id).skip()

        provider.sign_out(auth_session.access_token)

        assert user.id not in registry
        assert registry.get(user.id).sequencer.index == 0

    def test_close_unsubscribes(self, provider, store, user, auth_session):
        registry = WizardRegistry(provider, store)
        registry.close()
        registry.get(user.id)

        provider.sign_out(auth_session.access_token)

        assert user.id in registry

    def test_expired_sessions_are_evicted(self, provider, store):
        registry = WizardRegistry(provider, store)
        now = datetime.now(timezone.utc)
        registry.get("u1", expires_at=now - timedelta(seconds=1)).skip()
        registry.get("u2", expires_at=now + timedelta(minutes=5))

        registry.get("u3")

        assert "u1" not in registry
        assert "u2" in registry
        assert len(registry) == 2

    def test_current_identity_is_kept_when_refreshed(self, provider, store):
        registry = WizardRegistry(provider, store)
        now = datetime.now(timezone.utc)
        wizard = registry.get("u1", expires_at=now - timedelta(seconds=1))

        assert registry.get("u1", expires_at=now + timedelta(minutes=5)) is wizard
