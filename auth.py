"""
Authentication against the hosted identity backend.

SupabaseAuthProvider talks to the GoTrue REST API with requests; AuthContext
keeps the current session, persists it in a key-value store and notifies
listeners when it changes.
"""
from __future__ import annotations

import json
import logging
import random
import time
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional

import requests

from presets import KeyValueStore

logger = logging.getLogger(__name__)

SESSION_KEY = "auth-session"


# ===== DATA MODELS =====

class AuthError(Exception):
    """Failure reported by the identity provider or the network."""

    def __init__(self, message: str, status: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.status = status


@dataclass(frozen=True)
class User:
    id: str
    email: str


@dataclass(frozen=True)
class Session:
    """An authenticated session."""
    access_token: str
    refresh_token: str
    expires_at: float  # epoch seconds
    user: User

    @property
    def expired(self) -> bool:
        return time.time() >= self.expires_at

    def to_dict(self) -> Dict[str, Any]:
        return {
            'access_token': self.access_token,
            'refresh_token': self.refresh_token,
            'expires_at': self.expires_at,
            'user': {'id': self.user.id, 'email': self.user.email},
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Session":
        user = data.get('user') or {}
        return cls(
            access_token=data['access_token'],
            refresh_token=data['refresh_token'],
            expires_at=float(data['expires_at']),
            user=User(id=user.get('id', ''), email=user.get('email', '')),
        )


@dataclass(frozen=True)
class AuthResult:
    """Outcome of an auth call: a session (possibly None) or an error."""
    session: Optional[Session] = None
    error: Optional[AuthError] = None

    @property
    def ok(self) -> bool:
        return self.error is None


# ===== PROVIDER =====

class SupabaseAuthProvider:
    """Client for the Supabase GoTrue authentication API."""

    def __init__(self, url: str, anon_key: str, timeout: float = 10):
        if not url or not anon_key:
            raise ValueError(f"Missing Supabase configuration. URL: {bool(url)}, Key: {bool(anon_key)}")
        self.base_url = url.rstrip('/') + "/auth/v1"
        self.timeout = timeout
        self.headers = {
            'apikey': anon_key,
            'Authorization': f"Bearer {anon_key}",
            'Content-Type': 'application/json',
            'User-Agent': 'Createosaur/1.0',
        }

    def _post_with_retry(
        self,
        path: str,
        payload: Dict[str, Any],
        params: Optional[Dict[str, str]] = None,
        access_token: Optional[str] = None,
        max_retries: int = 3,
    ) -> Dict[str, Any]:
        """
        POST to the auth API with exponential backoff on rate limiting.

        Returns:
            Decoded JSON body (empty dict for empty responses)

        Raises:
            AuthError: On any HTTP error, network failure or bad body
        """
        headers = dict(self.headers)
        if access_token:
            headers['Authorization'] = f"Bearer {access_token}"

        url = f"{self.base_url}/{path}"
        for attempt in range(max_retries + 1):
            try:
                response = requests.post(url, headers=headers, params=params, json=payload, timeout=self.timeout)
            except requests.RequestException as e:
                if attempt < max_retries:
                    time.sleep(2 ** attempt + random.uniform(0, 1))
                    continue
                raise AuthError(f"Network error: {e}") from e

            if response.status_code == 429 and attempt < max_retries:
                retry_after = response.headers.get('Retry-After')
                try:
                    wait_time = float(retry_after) if retry_after else 2 ** attempt + random.uniform(0, 1)
                except ValueError:
                    wait_time = 2 ** attempt
                time.sleep(wait_time)
                continue

            if response.status_code >= 400:
                raise AuthError(self._error_message(response), status=response.status_code)

            if not response.content:
                return {}
            try:
                return response.json()
            except ValueError as e:
                raise AuthError(f"Invalid response from auth server: {e}", status=response.status_code) from e

        raise AuthError("Rate limited by auth server", status=429)

    @staticmethod
    def _error_message(response: requests.Response) -> str:
        try:
            body = response.json()
        except ValueError:
            return f"Auth request failed with status {response.status_code}"
        for key in ('error_description', 'msg', 'message', 'error'):
            if body.get(key):
                return str(body[key])
        return f"Auth request failed with status {response.status_code}"

    @staticmethod
    def _parse_session(data: Dict[str, Any]) -> Optional[Session]:
        """Build a Session from a token response; None when no token was issued."""
        if not data.get('access_token'):
            return None
        user = data.get('user') or {}
        expires_at = data.get('expires_at') or time.time() + float(data.get('expires_in', 3600))
        return Session(
            access_token=data['access_token'],
            refresh_token=data.get('refresh_token', ''),
            expires_at=float(expires_at),
            user=User(id=user.get('id', ''), email=user.get('email', '')),
        )

    def sign_up(self, email: str, password: str) -> Optional[Session]:
        """Register; returns None when email confirmation is pending."""
        data = self._post_with_retry('signup', {'email': email, 'password': password})
        return self._parse_session(data)

    def sign_in(self, email: str, password: str) -> Session:
        data = self._post_with_retry('token', {'email': email, 'password': password},
                                     params={'grant_type': 'password'})
        session = self._parse_session(data)
        if session is None:
            raise AuthError("Sign-in response did not include a session")
        return session

    def refresh(self, refresh_token: str) -> Session:
        data = self._post_with_retry('token', {'refresh_token': refresh_token},
                                     params={'grant_type': 'refresh_token'})
        session = self._parse_session(data)
        if session is None:
            raise AuthError("Refresh response did not include a session")
        return session

    def sign_out(self, access_token: str) -> None:
        self._post_with_retry('logout', {}, access_token=access_token)

    def reset_password(self, email: str) -> None:
        self._post_with_retry('recover', {'email': email})


# ===== CONTEXT =====

SessionListener = Callable[[str, Optional[Session]], None]


class AuthContext:
    """
    Current user session with persistence and change notifications.

    Events passed to listeners: INITIAL_SESSION, SIGNED_IN, SIGNED_OUT,
    TOKEN_REFRESHED.
    """

    def __init__(self, provider: SupabaseAuthProvider, store: KeyValueStore, key: str = SESSION_KEY):
        self.provider = provider
        self.store = store
        self.key = key
        self.session: Optional[Session] = None
        self._listeners: List[SessionListener] = []

    @property
    def user(self) -> Optional[User]:
        return self.session.user if self.session else None

    def on_session_change(self, callback: SessionListener) -> Callable[[], None]:
        """
        Register a listener.

        Returns:
            A function that unsubscribes the listener
        """
        self._listeners.append(callback)

        def unsubscribe() -> None:
            if callback in self._listeners:
                self._listeners.remove(callback)

        return unsubscribe

    def _set_session(self, event: str, session: Optional[Session]) -> None:
        self.session = session
        try:
            if session is None:
                self.store.delete(self.key)
            else:
                self.store.set(self.key, json.dumps(session.to_dict()))
        except OSError as e:
            # The in-memory session stays current for this process
            logger.error(f"Failed to persist auth session: {e}")

        logger.info(f"Auth state change: {event} (user: {session.user.id if session else None})")
        for listener in list(self._listeners):
            try:
                listener(event, session)
            except Exception:
                logger.exception(f"Auth listener failed handling {event}")

    def restore_session(self) -> Optional[Session]:
        """
        Reload the persisted session, refreshing it when expired.

        Returns:
            The restored session, or None if there is none or it is no
            longer valid
        """
        raw = self.store.get(self.key)
        if not raw:
            self._set_session('INITIAL_SESSION', None)
            return None

        try:
            session = Session.from_dict(json.loads(raw))
        except (ValueError, KeyError, TypeError) as e:
            logger.warning(f"Auth session error: {e}")
            self._set_session('INITIAL_SESSION', None)
            return None

        if not session.expired:
            self._set_session('INITIAL_SESSION', session)
            return session

        try:
            refreshed = self.provider.refresh(session.refresh_token)
        except AuthError as e:
            logger.warning(f"Could not refresh stored session: {e.message}")
            self._set_session('SIGNED_OUT', None)
            return None

        self._set_session('TOKEN_REFRESHED', refreshed)
        return refreshed

    def sign_up(self, email: str, password: str) -> AuthResult:
        try:
            session = self.provider.sign_up(email, password)
        except AuthError as e:
            return AuthResult(error=e)
        if session is not None:
            self._set_session('SIGNED_IN', session)
        return AuthResult(session=session)

    def sign_in(self, email: str, password: str) -> AuthResult:
        try:
            session = self.provider.sign_in(email, password)
        except AuthError as e:
            return AuthResult(error=e)
        self._set_session('SIGNED_IN', session)
        return AuthResult(session=session)

    def sign_out(self) -> AuthResult:
        """Sign out; the local session is cleared even if the server call fails."""
        error = None
        if self.session is not None:
            try:
                self.provider.sign_out(self.session.access_token)
            except AuthError as e:
                logger.warning(f"Server sign-out failed: {e.message}")
                error = e
        self._set_session('SIGNED_OUT', None)
        return AuthResult(error=error)

    def reset_password(self, email: str) -> AuthResult:
        try:
            self.provider.reset_password(email)
        except AuthError as e:
            return AuthResult(error=e)
        return AuthResult()
