"""
Authentication session state.

AuthSession is an explicit value passed by reference to the clients that
need a bearer token, with a defined lifecycle:

- load on init from a persistent key-value store;
- write through to the store on login and register;
- clear on logout.
"""

import json
import logging
from pathlib import Path
from typing import Any

import httpx
from pydantic import AliasChoices, BaseModel, ConfigDict, Field, ValidationError

from edhforge.config import settings
from edhforge.models.failure import AuthError
from edhforge.services.http import build_client, response_message

logger = logging.getLogger(__name__)

USER_KEY = "user"


class UserRecord(BaseModel):
    """A logged-in user as returned by the backend."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    id: str | None = Field(default=None, validation_alias=AliasChoices("id", "_id"))
    username: str | None = None
    email: str | None = None
    token: str


class KeyValueStore:
    """
    Tiny persistent string-keyed store backed by a JSON file.

    Writes replace the file atomically; a missing or corrupt file reads as empty.
    """

    def __init__(self, path: Path | None = None) -> None:
        self.path = path or settings.session_store_path

    def _read(self) -> dict[str, Any]:
        if not self.path.exists():
            return {}
        try:
            with open(self.path, encoding="utf-8") as f:
                data = json.load(f)
        except (json.JSONDecodeError, OSError) as e:
            logger.warning("Ignoring unreadable session store %s: %s", self.path, e)
            return {}
        return data if isinstance(data, dict) else {}

    def _write(self, data: dict[str, Any]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        # Swap in a fully written sibling file
        tmp_path = self.path.with_name(self.path.name + ".tmp")
        try:
            with open(tmp_path, "w", encoding="utf-8") as f:
                json.dump(data, f, indent=2, sort_keys=True)
            tmp_path.replace(self.path)
        except BaseException:
            tmp_path.unlink(missing_ok=True)
            raise

    def get(self, key: str) -> Any | None:
        return self._read().get(key)

    def set(self, key: str, value: Any) -> None:
        data = self._read()
        data[key] = value
        self._write(data)

    def delete(self, key: str) -> None:
        data = self._read()
        if key in data:
            del data[key]
            self._write(data)


class AuthSession:
    """
    The current user, if any.

    Usage:
        auth = AuthSession(KeyValueStore())
        await auth.login("me@example.com", "secret")
        decks = DeckPersistenceClient(auth=auth)
    """

    def __init__(
        self,
        store: KeyValueStore | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self.store = store or KeyValueStore()
        self._client = client
        self._user: UserRecord | None = None
        self._load()

    def _load(self) -> None:
        stored = self.store.get(USER_KEY)
        if stored is None:
            return
        try:
            self._user = UserRecord.model_validate(stored)
        except ValidationError:
            logger.warning("Discarding malformed stored user")
            self.store.delete(USER_KEY)

    @property
    def user(self) -> UserRecord | None:
        return self._user

    @property
    def token(self) -> str | None:
        return self._user.token if self._user is not None else None

    @property
    def is_authenticated(self) -> bool:
        return self._user is not None

    def auth_headers(self) -> dict[str, str]:
        """Authorization header for the current user, empty when logged out."""
        if self.token is None:
            return {}
        return {"Authorization": f"Bearer {self.token}"}

    async def login(self, email: str, password: str) -> UserRecord:
        """Log in and persist the returned user."""
        return await self._authenticate("/users/login", {"email": email, "password": password})

    async def register(self, username: str, email: str, password: str) -> UserRecord:
        """Register a new account and persist the returned user."""
        return await self._authenticate(
            "/users/register",
            {"username": username, "email": email, "password": password},
        )

    def logout(self) -> None:
        """Forget the current user, in memory and in the store."""
        self._user = None
        self.store.delete(USER_KEY)
        logger.info("Logged out")

    async def _authenticate(self, path: str, body: dict[str, str]) -> UserRecord:
        client = self._client or build_client(settings.backend_url)
        try:
            response = await client.post(path, json=body)
            response.raise_for_status()
            user = UserRecord.model_validate(response.json())
        except httpx.HTTPStatusError as e:
            message = response_message(e.response)
            logger.warning("Authentication failed: %s", message)
            raise AuthError(message, status_code=e.response.status_code) from e
        except httpx.RequestError as e:
            raise AuthError(f"Authentication service unavailable: {e}") from e
        except (ValueError, ValidationError) as e:
            raise AuthError("Authentication service returned an unexpected response.") from e
        finally:
            if self._client is None:
                await client.aclose()

        self._user = user
        self.store.set(USER_KEY, user.model_dump(mode="json"))
        logger.info("Authenticated %s", user.email or user.username)
        return user
