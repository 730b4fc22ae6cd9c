"""Tests for registration, login and sessions."""

import json
import tempfile
from decimal import Decimal
from pathlib import Path

import pytest

from futuresim.auth.accounts import DEFAULT_STARTING_BALANCE, AccountService
from futuresim.auth.passwords import hash_password, verify_password
from futuresim.auth.sessions import SessionRegistry
from futuresim.db.store import LedgerStore
from futuresim.errors import AccountExists, InvalidCredentials, SessionExpired


@pytest.fixture
def temp_dir():
    """Create a temporary directory for testing."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def service(temp_dir: Path) -> AccountService:
    return AccountService(LedgerStore(temp_dir))


class TestPasswords:
    def test_verify_matching_password(self):
        encoded = hash_password("s3cret", iterations=1000)
        assert verify_password("s3cret", encoded)
        assert not verify_password("wrong", encoded)

    def test_salts_differ(self):
        assert hash_password("same", iterations=1000) != hash_password("same", iterations=1000)

    @pytest.mark.parametrize("encoded", [None, "", "garbage", "md5$1$00$00", "pbkdf2_sha256$x$00$00"])
    def test_malformed_hash_never_verifies(self, encoded):
        assert not verify_password("anything", encoded)


class TestRegistration:
    def test_new_account_gets_starting_balance(self, service: AccountService, temp_dir: Path):
        account = service.register("alice", "pw")

        assert account.balance == DEFAULT_STARTING_BALANCE
        assert account.holdings == {}
        assert account.history == []
        stored = LedgerStore(temp_dir).get_account("alice")
        assert stored.balance == Decimal("1000000")
        assert "pw" not in stored.password_hash

    def test_custom_starting_balance(self, temp_dir: Path):
        service = AccountService(LedgerStore(temp_dir), starting_balance=Decimal("2500.50"))
        assert service.register("bob", "pw").balance == Decimal("2500.50")

    def test_duplicate_username(self, service: AccountService):
        service.register("alice", "pw")
        with pytest.raises(AccountExists):
            service.register("alice", "other")

    @pytest.mark.parametrize("username,password", [("", "pw"), ("  ", "pw"), ("alice", "")])
    def test_missing_fields(self, service: AccountService, username: str, password: str):
        with pytest.raises(InvalidCredentials):
            service.register(username, password)


class TestLogin:
    def test_login_issues_resolvable_token(self, service: AccountService):
        service.register("alice", "pw")

        token = service.login("alice", "pw")

        assert len(token) == 48
        assert service.resolve(token) == "alice"

    def test_wrong_password(self, service: AccountService):
        service.register("alice", "pw")
        with pytest.raises(InvalidCredentials):
            service.login("alice", "nope")

    def test_unknown_user(self, service: AccountService):
        with pytest.raises(InvalidCredentials):
            service.login("ghost", "pw")

    def test_second_login_evicts_first(self, service: AccountService):
        service.register("alice", "pw")
        first = service.login("alice", "pw")

        second = service.login("alice", "pw")

        assert service.resolve(second) == "alice"
        with pytest.raises(SessionExpired):
            service.resolve(first)

    def test_logout_invalidates_token(self, service: AccountService):
        service.register("alice", "pw")
        token = service.login("alice", "pw")

        service.logout(token)

        with pytest.raises(SessionExpired):
            service.resolve(token)

    def test_logout_of_unknown_token_is_ignored(self, service: AccountService):
        service.logout("not-a-token")
        service.logout(None)


class TestSessionRegistry:
    def test_sessions_persist_to_file(self, temp_dir: Path):
        path = temp_dir / "sessions.json"
        token = SessionRegistry(path).create("alice")

        reloaded = SessionRegistry(path)

        assert reloaded.resolve(token) == "alice"

    def test_evicted_token_stays_evicted_after_reload(self, temp_dir: Path):
        path = temp_dir / "sessions.json"
        registry = SessionRegistry(path)
        old = registry.create("alice")
        registry.create("alice")

        with pytest.raises(SessionExpired):
            SessionRegistry(path).resolve(old)

    def test_unreadable_file_starts_empty(self, temp_dir: Path):
        path = temp_dir / "sessions.json"
        path.write_text("{broken")

        registry = SessionRegistry(path)

        with pytest.raises(SessionExpired):
            registry.resolve("anything")

    def test_clearing_old_token_keeps_new_session(self):
        registry = SessionRegistry()
        old = registry.create("alice")
        new = registry.create("alice")

        registry.clear(old)

        assert registry.resolve(new) == "alice"

    def test_sessions_are_per_user(self):
        registry = SessionRegistry()
        a = registry.create("alice")
        b = registry.create("bob")

        assert registry.resolve(a) == "alice"
        assert registry.resolve(b) == "bob"

    def test_file_layout(self, temp_dir: Path):
        path = temp_dir / "sessions.json"
        token = SessionRegistry(path).create("alice")

        data = json.loads(path.read_text())

        assert data["sessions"][token]["username"] == "alice"
