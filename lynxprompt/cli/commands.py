"""
Credential commands: login, logout and whoami.

Each command prints to stdout/stderr and returns the process exit code.
"""
import asyncio
import sys
import time
import webbrowser
from datetime import datetime
from typing import Awaitable, Callable, Optional

from .api import ApiClient, ApiRequestError
from .credentials import CredentialStore

POLL_INTERVAL_S = 2
LOGIN_TIMEOUT_S = 5 * 60

PLAN_BADGES = {"FREE": "Free", "PRO": "Pro", "MAX": "Max", "TEAMS": "Teams"}


def _error(message: str) -> None:
    print(message, file=sys.stderr)


def logout(store: CredentialStore) -> int:
    if not store.is_authenticated():
        print("You are not currently logged in.")
        return 0

    user = store.get_user() or {}
    email = user.get("email") or "unknown"

    store.clear_token()

    print(f"✓ Logged out from {email}")
    print("  Removed stored credentials")
    return 0


def _print_welcome(user: dict) -> None:
    plan = (user.get("plan") or "FREE").upper()
    email = user.get("email") or ""
    name = user.get("name") or email.split("@")[0]

    print()
    print("Welcome to LynxPrompt CLI!")
    print(f"  User: {name}")
    print(f"  Plan: {PLAN_BADGES.get(plan, PLAN_BADGES['FREE'])}")
    print()
    print("Token stored. Run 'lynxprompt --help' to see all commands.")


async def login(
    store: CredentialStore,
    client: ApiClient,
    *,
    open_browser: Callable[[str], bool] = webbrowser.open,
    sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    clock: Callable[[], float] = time.monotonic,
    timeout_s: float = LOGIN_TIMEOUT_S,
) -> int:
    if store.is_authenticated():
        print("You are already logged in. Use 'lynxprompt logout' first to switch accounts.")
        return 0

    try:
        session = await client.init_cli_session()
    except ApiRequestError as e:
        _error("Failed to initialize authentication")
        _error(f"Error: {e.message}")
        if e.status_code == 503:
            _error("The server may be temporarily unavailable. Please try again later.")
        return 1
    except Exception:
        _error("Failed to initialize authentication")
        _error("Make sure you have internet connectivity and try again.")
        return 1

    print()
    print("Opening browser to authenticate...")
    print(f"   {session['auth_url']}")
    print()
    if not open_browser(session["auth_url"]):
        print("Could not open browser automatically. Please open the URL above manually.")

    print("Waiting for authentication...")
    started = clock()
    while clock() - started < timeout_s:
        await sleep(POLL_INTERVAL_S)

        try:
            result = await client.poll_cli_session(session["session_id"])
        except ApiRequestError as e:
            # A completed session hands out its token once; a lost response cannot be retried
            if e.status_code == 404:
                _error("Authentication session not found. Please try again.")
                return 1
            continue
        except Exception:
            continue

        status = result.get("status")
        if status == "completed" and result.get("token") and result.get("user"):
            store.set_token(result["token"])
            store.set_user(result["user"])
            print("Authentication successful!")
            _print_welcome(result["user"])
            return 0

        if status == "expired":
            _error("Authentication session expired. Please try again.")
            return 1

    _error("Authentication timed out. Please try again.")
    return 1


def _format_date(value: Optional[str]) -> str:
    if not value:
        return ""
    try:
        return datetime.fromisoformat(value.replace("Z", "+00:00")).date().isoformat()
    except ValueError:
        return value


async def whoami(store: CredentialStore, client: ApiClient) -> int:
    if not store.is_authenticated():
        print("Not logged in. Run 'lynxprompt login' to authenticate.")
        return 1

    try:
        response = await client.get_user()
    except ApiRequestError as e:
        _error("Failed to fetch user info")
        if e.status_code == 401:
            _error("Your session has expired. Please run 'lynxprompt login' again.")
        else:
            _error(f"Error: {e.message}")
        return 1
    except Exception:
        _error("Failed to fetch user info")
        _error("An unexpected error occurred.")
        return 1

    user = response["user"]
    subscription = user.get("subscription") or {}
    store.set_user({
        "id": user["id"],
        "email": user.get("email"),
        "name": user.get("name"),
        "plan": subscription.get("plan"),
    })

    print()
    print("LynxPrompt Account")
    print()
    print(f"  Email:        {user.get('email')}")
    if user.get("name"):
        print(f"  Name:         {user['name']}")
    if user.get("display_name"):
        print(f"  Display:      {user['display_name']}")
    print(f"  Plan:         {subscription.get('plan')}")
    if subscription.get("status"):
        print(f"  Status:       {subscription['status']}")
    if subscription.get("current_period_end"):
        print(f"  Renews:       {_format_date(subscription['current_period_end'])}")
    print()
    print(f"  Blueprints:   {(user.get('stats') or {}).get('blueprints_count', 0)}")
    print(f"  Member since: {_format_date(user.get('created_at'))}")
    print()
    return 0
