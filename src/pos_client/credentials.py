"""Credential stores for access and refresh tokens."""

import json
import logging
import os
import tempfile
from pathlib import Path

from .config import Config
from .exceptions import ConfigError
from .protocols import CredentialStore

logger = logging.getLogger("pos-client.credentials")


class MemoryCredentialStore:
    """Process-local store; every instance starts empty."""

    def __init__(self, access: str | None = None, refresh: str | None = None):
        self._access = access
        self._refresh = refresh

    def get_access(self) -> str | None:
        return self._access

    def set_access(self, token: str) -> None:
        self._access = token

    def get_refresh(self) -> str | None:
        return self._refresh

    def set_refresh(self, token: str) -> None:
        self._refresh = token

    def clear_all(self) -> None:
        self._access = None
        self._refresh = None


class FileCredentialStore:
    """JSON-file store keyed like the browser storage of the web frontend.

    Other keys in the file are preserved; ``clear_all`` only removes the two
    token keys.
    """

    def __init__(
        self,
        path: str | Path,
        *,
        access_key: str = "pos.accessToken",
        refresh_key: str = "pos.refreshToken",
    ):
        self._path = Path(os.path.expanduser(str(path)))
        self._access_key = access_key
        self._refresh_key = refresh_key

    @property
    def path(self) -> Path:
        return self._path

    def get_access(self) -> str | None:
        return self._read_all().get(self._access_key)

    def set_access(self, token: str) -> None:
        self._update({self._access_key: token})

    def get_refresh(self) -> str | None:
        return self._read_all().get(self._refresh_key)

    def set_refresh(self, token: str) -> None:
        self._update({self._refresh_key: token})

    def clear_all(self) -> None:
        payload = self._read_all()
        if self._access_key not in payload and self._refresh_key not in payload:
            return
        payload.pop(self._access_key, None)
        payload.pop(self._refresh_key, None)
        self._write_all(payload)
        logger.debug(f"Cleared credentials in {self._path}")

    def _update(self, values: dict[str, str]) -> None:
        payload = self._read_all()
        payload.update(values)
        self._write_all(payload)

    def _read_all(self) -> dict:
        if not self._path.exists():
            return {}

        try:
            raw = json.loads(self._path.read_text(encoding="utf-8"))
        except json.JSONDecodeError as e:
            raise ConfigError(
                f"Invalid JSON in credentials file: {self._path}",
                errors=[f"JSON error: {e.msg}"],
                suggestions=["Fix or delete the credentials file and sign in again"],
                context={"credentials_path": str(self._path)},
            ) from e
        except OSError as e:
            raise ConfigError(
                f"Credentials file not readable: {self._path}",
                suggestions=["Check file permissions"],
                context={"credentials_path": str(self._path)},
            ) from e

        if not isinstance(raw, dict):
            raise ConfigError(
                f"Credentials file is invalid: {self._path}",
                errors=["Expected a top-level JSON object"],
                suggestions=["Fix or delete the credentials file and sign in again"],
                context={"credentials_path": str(self._path)},
            )
        return raw

    def _write_all(self, payload: dict) -> None:
        try:
            self._write_atomic(payload)
        except OSError as e:
            raise ConfigError(
                f"Credentials file not writable: {self._path}",
                errors=[str(e)],
                suggestions=["Check file permissions and free disk space"],
                context={"credentials_path": str(self._path)},
            ) from e

    def _write_atomic(self, payload: dict) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)

        fd, tmp_name = tempfile.mkstemp(
            prefix=f"{self._path.name}.",
            suffix=".tmp",
            dir=self._path.parent,
        )
        tmp_path = Path(tmp_name)

        try:
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                json.dump(payload, handle, indent=2, sort_keys=True)
            os.replace(tmp_path, self._path)
        finally:
            if tmp_path.exists():
                tmp_path.unlink()


def create_credential_store(config: Config) -> CredentialStore:
    """Build the credential store selected by ``config.credential_store``."""
    if config.credential_store == "file":
        logger.debug(f"Using file credential store at {config.credentials_file}")
        return FileCredentialStore(
            config.credentials_file,
            access_key=config.access_token_key,
            refresh_key=config.refresh_token_key,
        )
    return MemoryCredentialStore()
