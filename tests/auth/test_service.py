"""Tests for local registration and login.

Uses a real in-memory SQLite store; tokens are checked with the same
service that issued them.
"""

from datetime import timedelta

import pytest

from accounts_core.auth import passwords, service
from accounts_core.auth.schemas import RegisterRequest
from accounts_core.auth.token import TokenService
from accounts_core.outcomes import Failure, FailureKind, Ok
from accounts_core.schemas import AuthProvider
from accounts_core.utils import isodatetime


@pytest.fixture
def tokens():
    return TokenService("service-test-secret", timedelta(hours=1))


def _register(core, tokens, email="ada@example.com", password="secret1", full_name="Ada Lovelace"):
    data = RegisterRequest(email=email, password=password, fullName=full_name)
    return service.register(core, data, passwords.hash_password(password), tokens)


# ============================================================================
# Registration
# ============================================================================


class TestRegister:

    def test_creates_local_account(self, core, tokens):
        """Registration stores a LOCAL account with a hashed password."""
        outcome = _register(core, tokens)

        assert isinstance(outcome, Ok)
        account = outcome.value.account
        assert account.email == "ada@example.com"
        assert account.full_name == "Ada Lovelace"
        assert account.auth_provider == AuthProvider.LOCAL
        assert account.provider_subject is None
        assert account.password_hash and account.password_hash != "secret1"
        assert core.account.get_by_id(account.id) == account

    def test_timestamps_equal_and_current(self, core, tokens):
        """created_at and updated_at start equal and current."""
        before = isodatetime.to_datetime(isodatetime.now())
        account = _register(core, tokens).value.account

        assert account.created_at == account.updated_at
        assert isodatetime.to_datetime(account.created_at) >= before

    def test_token_subject_is_email(self, core, tokens):
        """The issued token names the account email."""
        result = _register(core, tokens).value

        validated = tokens.validate(result.token)
        assert isinstance(validated, Ok)
        assert validated.value.sub == "ada@example.com"

    def test_duplicate_email(self, core, tokens):
        """A second registration for the same email is DUPLICATE_ACCOUNT."""
        _register(core, tokens)
        outcome = _register(core, tokens, password="another1", full_name="Someone Else")

        assert isinstance(outcome, Failure)
        assert outcome.kind == FailureKind.DUPLICATE_ACCOUNT
        assert outcome.message == "Email address already in use"
        assert core.account.count() == 1

    def test_duplicate_email_different_case(self, core, tokens):
        """Emails differing only in case are duplicates."""
        _register(core, tokens)
        outcome = _register(core, tokens, email="ADA@Example.com")

        assert outcome.kind == FailureKind.DUPLICATE_ACCOUNT
        assert core.account.count() == 1

    def test_duplicate_of_google_account(self, core, tokens, google_account):
        """A Google-linked email cannot be registered locally."""
        outcome = _register(core, tokens, email=google_account.email)
        assert outcome.kind == FailureKind.DUPLICATE_ACCOUNT

    def test_unique_constraint_race_is_duplicate(self, core, tokens, monkeypatch):
        """A concurrent insert that wins after the pre-check still yields DUPLICATE_ACCOUNT."""
        _register(core, tokens)
        monkeypatch.setattr(type(core.account), "exists_by_email", lambda self, email: False)

        outcome = _register(core, tokens)

        assert isinstance(outcome, Failure)
        assert outcome.kind == FailureKind.DUPLICATE_ACCOUNT
        assert core.account.count() == 1


# ============================================================================
# Login
# ============================================================================


class TestAuthenticate:

    def test_valid_credentials(self, core, local_account):
        """Matching credentials return the account."""
        account, password = local_account
        assert service.authenticate(core, account.email, password) == account

    def test_email_lookup_is_case_insensitive(self, core, local_account):
        """Login email lookup ignores case."""
        account, password = local_account
        assert service.authenticate(core, "ADA@EXAMPLE.COM", password) == account

    def test_unknown_email(self, core):
        """An unknown email does not authenticate."""
        assert service.authenticate(core, "nobody@example.com", "whatever") is None

    def test_wrong_password(self, core, local_account):
        """A wrong password does not authenticate."""
        account, _password = local_account
        assert service.authenticate(core, account.email, "WrongPass") is None

    def test_google_account_cannot_use_password(self, core, google_account):
        """Google-linked accounts never authenticate with a password."""
        assert service.authenticate(core, google_account.email, "anything") is None


class TestLogin:

    def test_register_then_login(self, core, tokens):
        """A registered account can log in straight away."""
        _register(core, tokens, email="bob@example.com", password="pa55word")

        outcome = service.login(core, "bob@example.com", "pa55word", tokens)

        assert isinstance(outcome, Ok)
        assert tokens.validate(outcome.value.token).value.sub == "bob@example.com"

    def test_login_returns_account(self, core, tokens, local_account):
        """A successful login returns the account."""
        account, password = local_account
        outcome = service.login(core, account.email, password, tokens)
        assert outcome.value.account == account

    def test_wrong_password_and_unknown_email_identical(self, core, tokens, local_account):
        """Wrong password and unknown email fail identically."""
        account, _password = local_account

        wrong_password = service.login(core, account.email, "WrongPass", tokens)
        unknown_email = service.login(core, "nobody@example.com", "WrongPass", tokens)

        assert isinstance(wrong_password, Failure)
        assert wrong_password == unknown_email
        assert wrong_password.kind == FailureKind.INVALID_CREDENTIALS
        assert wrong_password.message == "Invalid email or password"
        assert wrong_password.details == {}

    def test_google_account_login_identical_failure(self, core, tokens, google_account, local_account):
        """A Google-linked account fails like a wrong password."""
        account, _password = local_account
        google = service.login(core, google_account.email, "anything", tokens)
        wrong_password = service.login(core, account.email, "anything", tokens)
        assert google == wrong_password

    def test_login_does_not_mutate_account(self, core, tokens, local_account):
        """Logging in leaves the stored account unchanged."""
        account, password = local_account
        service.login(core, account.email, password, tokens)
        assert core.account.get_by_id(account.id) == account


def test_register_uses_default_token_service(core):
    """Without an explicit service, tokens come from settings."""
    from accounts_core.auth.token import validate_access_token

    outcome = service.register(
        core,
        RegisterRequest(email="carol@example.com", password="secret1", fullName="Carol"),
        passwords.hash_password("secret1"),
    )
    assert validate_access_token(outcome.value.token).value.sub == "carol@example.com"
