import httpx
import pytest
from unittest.mock import AsyncMock, MagicMock
from ...cli import commands
from ...cli.api import ApiClient, ApiRequestError
from ...cli.credentials import CredentialStore
from ...cli.main import build_parser, main


@pytest.fixture(autouse=True)
def clean_env(monkeypatch, tmp_path):
    monkeypatch.delenv("LYNXPROMPT_TOKEN", raising=False)
    monkeypatch.delenv("LYNXPROMPT_API_URL", raising=False)
    monkeypatch.setenv("LYNXPROMPT_CONFIG_DIR", str(tmp_path / "config"))


@pytest.fixture
def store():
    return CredentialStore()


USER = {"id": "u1", "email": "ada@example.com", "name": "Ada", "plan": "PRO"}


class TestLogout:
    """Tests for the logout command"""

    def test_not_logged_in(self, store, capsys):
        exit_code = commands.logout(store)

        assert exit_code == 0
        assert capsys.readouterr().out == "You are not currently logged in.\n"
        assert not store.config_path.exists()

    def test_not_logged_in_leaves_config_untouched(self, store, capsys):
        store.set_user(USER)
        before = store.config_path.read_text(encoding="utf-8")
        assert "apiUrl" in before and "token" not in before

        exit_code = commands.logout(store)

        assert exit_code == 0
        assert capsys.readouterr().out == "You are not currently logged in.\n"
        assert store.config_path.read_text(encoding="utf-8") == before

    def test_logged_in(self, store, capsys):
        store.set_token("lp_abc")
        store.set_user(USER)

        exit_code = commands.logout(store)

        assert exit_code == 0
        assert capsys.readouterr().out == "✓ Logged out from ada@example.com\n  Removed stored credentials\n"
        assert store.get_token() is None
        assert store.get_user() is None

    def test_logged_in_without_cached_user(self, store, capsys):
        store.set_token("lp_abc")

        commands.logout(store)

        assert "✓ Logged out from unknown" in capsys.readouterr().out

    def test_clear_failure_propagates(self, capsys):
        store = MagicMock()
        store.is_authenticated.return_value = True
        store.get_user.return_value = USER
        store.clear_token.side_effect = PermissionError("read-only")

        with pytest.raises(PermissionError):
            commands.logout(store)

    def test_main_dispatches_logout(self, capsys):
        assert main(["logout"]) == 0
        assert "not currently logged in" in capsys.readouterr().out


class TestLogin:
    """Tests for the login command"""

    @pytest.fixture
    def client(self):
        client = MagicMock()
        client.init_cli_session = AsyncMock(return_value={
            "session_id": "s" * 64,
            "auth_url": "https://lynxprompt.com/auth/signin?cli_session=" + "s" * 64,
            "expires_at": "2025-01-01T00:05:00Z",
        })
        return client

    @pytest.mark.asyncio
    async def test_already_logged_in(self, store, client, capsys):
        store.set_token("lp_abc")

        exit_code = await commands.login(store, client)

        assert exit_code == 0
        assert "You are already logged in" in capsys.readouterr().out
        client.init_cli_session.assert_not_called()

    @pytest.mark.asyncio
    async def test_stores_credentials_on_completion(self, store, client):
        client.poll_cli_session = AsyncMock(side_effect=[
            {"status": "pending"},
            {"status": "completed", "token": "lp_new", "user": USER},
        ])
        opened = []

        exit_code = await commands.login(
            store, client,
            open_browser=lambda url: opened.append(url) or True,
            sleep=AsyncMock(),
        )

        assert exit_code == 0
        assert opened == [client.init_cli_session.return_value["auth_url"]]
        assert store.get_token() == "lp_new"
        assert store.get_user() == USER

    @pytest.mark.asyncio
    async def test_expired_session(self, store, client, capsys):
        client.poll_cli_session = AsyncMock(return_value={"status": "expired"})

        exit_code = await commands.login(store, client, open_browser=lambda url: True, sleep=AsyncMock())

        assert exit_code == 1
        assert "expired" in capsys.readouterr().err
        assert store.get_token() is None

    @pytest.mark.asyncio
    async def test_times_out(self, store, client, capsys):
        client.poll_cli_session = AsyncMock(return_value={"status": "pending"})
        ticks = iter([0, 1, 2, 400])

        exit_code = await commands.login(
            store, client,
            open_browser=lambda url: True,
            sleep=AsyncMock(),
            clock=lambda: next(ticks),
        )

        assert exit_code == 1
        assert "timed out" in capsys.readouterr().err
        assert client.poll_cli_session.await_count == 2

    @pytest.mark.asyncio
    async def test_init_failure(self, store, client, capsys):
        client.init_cli_session = AsyncMock(side_effect=ApiRequestError("Service unavailable", 503))

        exit_code = await commands.login(store, client, open_browser=lambda url: True, sleep=AsyncMock())

        assert exit_code == 1
        err = capsys.readouterr().err
        assert "Error: Service unavailable" in err
        assert "temporarily unavailable" in err


class TestWhoami:
    """Tests for the whoami command against a mocked HTTP transport"""

    ACCOUNT = {
        "user": {
            "id": "u1",
            "email": "ada@example.com",
            "name": "Ada",
            "display_name": "ada.dev",
            "persona": None,
            "skill_level": None,
            "subscription": {"plan": "MAX", "status": "active", "interval": "yearly",
                             "current_period_end": "2026-01-01T00:00:00Z"},
            "stats": {"blueprints_count": 3},
            "created_at": "2024-06-01T12:00:00Z",
        }
    }

    def client_for(self, store, status_code, body):
        def handler(request: httpx.Request) -> httpx.Response:
            assert request.url.path == "/api/v1/user"
            assert request.headers["Authorization"] == "Bearer lp_abc"
            return httpx.Response(status_code, json=body)

        return ApiClient(store, transport=httpx.MockTransport(handler))

    @pytest.mark.asyncio
    async def test_not_logged_in(self, store, capsys):
        exit_code = await commands.whoami(store, MagicMock())

        assert exit_code == 1
        assert "Not logged in. Run 'lynxprompt login' to authenticate." in capsys.readouterr().out

    @pytest.mark.asyncio
    async def test_prints_account_and_refreshes_cache(self, store, capsys):
        store.set_token("lp_abc")

        exit_code = await commands.whoami(store, self.client_for(store, 200, self.ACCOUNT))

        assert exit_code == 0
        out = capsys.readouterr().out
        assert "ada@example.com" in out
        assert "MAX" in out
        assert "Blueprints:   3" in out
        assert "Member since: 2024-06-01" in out
        assert store.get_user() == {"id": "u1", "email": "ada@example.com", "name": "Ada", "plan": "MAX"}

    @pytest.mark.asyncio
    async def test_expired_session(self, store, capsys):
        store.set_token("lp_abc")
        body = {"detail": {"error": "Token expired", "message": "Your API token has expired."}}

        exit_code = await commands.whoami(store, self.client_for(store, 401, body))

        assert exit_code == 1
        assert "Your session has expired" in capsys.readouterr().err


class TestParser:

    def test_requires_a_command(self):
        with pytest.raises(SystemExit):
            build_parser().parse_args([])

    def test_known_commands(self):
        for command in ("login", "logout", "whoami"):
            assert build_parser().parse_args([command]).command == command
