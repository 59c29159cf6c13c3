"""
Local credential store for the command line client.

Credentials are kept in a JSON file, ``~/.config/lynxprompt/config.json`` by
default. ``LYNXPROMPT_CONFIG_DIR`` moves the file; ``LYNXPROMPT_TOKEN`` and
``LYNXPROMPT_API_URL`` override the stored token and API URL.
"""
import json
import os
from pathlib import Path
from typing import Any, Dict, Optional

DEFAULT_API_URL = "https://lynxprompt.com"
CONFIG_FILE_NAME = "config.json"


def default_config_dir() -> Path:
    override = os.environ.get("LYNXPROMPT_CONFIG_DIR")
    if override:
        return Path(override)
    base = os.environ.get("XDG_CONFIG_HOME") or Path.home() / ".config"
    return Path(base) / "lynxprompt"


class CredentialStore:

    def __init__(self, config_dir: Optional[Path] = None):
        self.config_dir = Path(config_dir) if config_dir is not None else default_config_dir()

    @property
    def config_path(self) -> Path:
        return self.config_dir / CONFIG_FILE_NAME

    def _load(self) -> Dict[str, Any]:
        if not self.config_path.exists():
            return {"apiUrl": DEFAULT_API_URL}
        with self.config_path.open("r", encoding="utf-8") as f:
            data = json.load(f)
        data.setdefault("apiUrl", DEFAULT_API_URL)
        return data

    def _save(self, data: Dict[str, Any]) -> None:
        self.config_dir.mkdir(parents=True, exist_ok=True)
        tmp_path = self.config_path.with_suffix(".tmp")
        with tmp_path.open("w", encoding="utf-8") as f:
            json.dump(data, f, indent=2)
        # The file holds a bearer token
        os.chmod(tmp_path, 0o600)
        os.replace(tmp_path, self.config_path)

    def get_token(self) -> Optional[str]:
        return os.environ.get("LYNXPROMPT_TOKEN") or self._load().get("token")

    def set_token(self, token: str) -> None:
        data = self._load()
        data["token"] = token
        self._save(data)

    def clear_token(self) -> None:
        """Remove the token and the cached user together."""
        data = self._load()
        data.pop("token", None)
        data.pop("user", None)
        self._save(data)

    def get_user(self) -> Optional[Dict[str, Any]]:
        return self._load().get("user")

    def set_user(self, user: Dict[str, Any]) -> None:
        data = self._load()
        data["user"] = {
            "id": user.get("id"),
            "email": user.get("email"),
            "name": user.get("name"),
            "plan": user.get("plan"),
        }
        self._save(data)

    def get_api_url(self) -> str:
        return os.environ.get("LYNXPROMPT_API_URL") or self._load()["apiUrl"]

    def is_authenticated(self) -> bool:
        return bool(self.get_token())
