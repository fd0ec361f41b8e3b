"""Tests for the identity provider, session context and auth gate."""
from unittest.mock import Mock

import pytest

from portfolio.core.auth import SessionEvent
from portfolio.core.errors import SessionRequiredError
from portfolio.features.session import AuthGate, SessionContext, require_identity

TEST_EMAIL = "ada@example.com"
TEST_PASSWORD = "secret1"


class TestIdentityProvider:
    def test_sign_up_seeds_profile_without_session(self, provider, store):
        result = provider.sign_up("grace@example.com", "hopper1", {'full_name': "Grace Hopper"})

        assert result.error is None
        assert result.session is None
        profile = store.select_one('profiles', {'id': result.user.id}).data
        assert profile['full_name'] == "Grace Hopper"
        assert profile['email'] == "grace@example.com"

    def test_duplicate_email(self, provider, user):
        result = provider.sign_up(TEST_EMAIL, "another1")
        assert result.error.message == "User already registered"

    @pytest.mark.parametrize("email,password", [
        ("not-an-email", "secret1"),
        ("grace@example.com", "short"),
    ])
    def test_sign_up_validates_credentials(self, provider, email, password):
        result = provider.sign_up(email, password)
        assert result.error.code == "validation_failed"

    def test_wrong_password(self, provider, user):
        result = provider.sign_in_with_password(TEST_EMAIL, "wrong-password")
        assert result.session is None
        assert result.error.message == "Invalid login credentials"

    def test_sign_in_issues_session(self, provider, user):
        result = provider.sign_in_with_password(TEST_EMAIL, TEST_PASSWORD)

        session = provider.get_session(result.session.access_token)
        assert session.user.id == user.id
        assert session.user.email == TEST_EMAIL

    def test_sign_out_revokes_token(self, provider, auth_session):
        provider.sign_out(auth_session.access_token)
        assert provider.get_session(auth_session.access_token) is None

    @pytest.mark.parametrize("token", [None, "", "garbage"])
    def test_bad_tokens_have_no_session(self, provider, token):
        assert provider.get_session(token) is None

    def test_events_and_unsubscribe(self, provider, user):
        events = []
        unsubscribe = provider.on_session_change(lambda event, session: events.append(event))

        session = provider.sign_in_with_password(TEST_EMAIL, TEST_PASSWORD).session
        provider.sign_out(session.access_token)
        unsubscribe()
        provider.sign_in_with_password(TEST_EMAIL, TEST_PASSWORD)

        assert events == [SessionEvent.SIGNED_IN, SessionEvent.SIGNED_OUT]

    def test_failing_listener_does_not_block_others(self, provider, user):
        seen = Mock()
        provider.on_session_change(Mock(side_effect=RuntimeError("boom")))
        provider.on_session_change(seen)

        provider.sign_in_with_password(TEST_EMAIL, TEST_PASSWORD)

        seen.assert_called_once()


class TestSessionContext:
    def test_identity_from_token(self, context, user):
        assert context.is_authenticated
        assert context.identity == user.id

    def test_anonymous_context(self, provider):
        context = SessionContext(provider, None)
        assert context.identity is None
        assert not context.is_authenticated

    def test_sign_out_notifies_subscribers(self, context):
        listener = Mock()
        context.subscribe(listener)

        context.sign_out()

        listener.assert_called_once_with(None)
        assert context.session is None

    def test_unsubscribed_listener_is_not_called(self, context):
        listener = Mock()
        unsubscribe = context.subscribe(listener)
        unsubscribe()

        context.sign_out()

        listener.assert_not_called()

    def test_sign_out_elsewhere_reaches_this_context(self, provider, context, auth_session):
        listener = Mock()
        context.subscribe(listener)

        provider.sign_out(auth_session.access_token)

        assert context.session is None
        listener.assert_called_once_with(None)

    def test_sign_in_adopts_new_session(self, provider, user):
        context = SessionContext(provider, None)
        generation = context.generation

        context.sign_in(TEST_EMAIL, TEST_PASSWORD)

        assert context.identity == user.id
        assert context.generation == generation + 1

    def test_guard_rejects_after_identity_change(self, context):
        guard = context.guard()
        assert guard.accept()

        context.sign_out()

        assert not guard.accept()

    def test_cancelled_guard(self, context):
        guard = context.guard()
        guard.cancel()
        assert guard.cancelled
        assert not guard.accept()


class TestAuthGate:
    def test_requires_session(self, provider):
        with pytest.raises(SessionRequiredError) as exc:
            AuthGate().require(SessionContext(provider, None))
        assert exc.value.redirect_to == "/auth"

    def test_returns_identity(self, context, user):
        assert require_identity(context) == user.id
