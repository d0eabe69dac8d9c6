"""Identity service client: token validation and credential login."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional
from uuid import UUID, uuid4

from ..errors import (
    AuthenticationError,
    AuthenticationUnavailableError,
    AuthError,
    InvalidCredentialsError,
)
from ..logging_config import get_logger
from ..session.types import AccountType, Session, Status, ValidationResult, group_properties
from ..utils.hashing import parse_account_id
from .transport import HttpResponse, Transport

logger = get_logger(__name__)

AGENT = {"name": "Minecraft", "version": 1}


class IdentityClient(ABC):
    """Remote operations needed to check and obtain sessions."""

    @abstractmethod
    def validate(self, session: Session) -> ValidationResult:
        """Return VALID/INVALID for ``session``. Never raises :class:`AuthError`."""

    @abstractmethod
    def authenticate(self, username: str, password: str) -> Session:
        """Exchange credentials for a fresh session or raise :class:`AuthError`."""


class UserAuthentication:
    """Holds credentials and the token/profile obtained from one login.

    ``log_out`` drops everything it holds so the credentials and token do not
    outlive the login call.
    """

    def __init__(self, client: "YggdrasilIdentityClient") -> None:
        self._client = client
        self.username: Optional[str] = None
        self.password: Optional[str] = None
        self.access_token: Optional[str] = None
        self.selected_profile: Optional[Dict[str, Any]] = None
        self.user_properties: List[Dict[str, str]] = []

    @property
    def logged_in(self) -> bool:
        return self.access_token is not None

    def log_in(self) -> None:
        if not self.username:
            raise InvalidCredentialsError("Invalid username")
        if not self.password:
            raise InvalidCredentialsError("Invalid password")

        body = self._client.auth_request(
            "authenticate",
            {
                "agent": AGENT,
                "username": self.username,
                "password": self.password,
                "clientToken": self._client.client_token,
                "requestUser": True,
            },
        )
        token = body.get("accessToken")
        if not token:
            raise AuthenticationError("Server did not return an access token")
        profile = body.get("selectedProfile")
        if not isinstance(profile, dict) or "id" not in profile:
            raise AuthenticationError("Server did not select a profile for this account")

        user = body.get("user") or {}
        self.access_token = token
        self.selected_profile = profile
        self.user_properties = list(user.get("properties") or [])

    def log_out(self) -> None:
        self.password = None
        self.access_token = None
        self.selected_profile = None
        self.user_properties = []


class YggdrasilIdentityClient(IdentityClient):
    """Yggdrasil auth/session server client over a blocking :class:`Transport`."""

    def __init__(
        self,
        transport: Transport,
        *,
        auth_server_url: str,
        session_server_url: str,
        client_token: str,
    ) -> None:
        self.transport = transport
        self.auth_server_url = auth_server_url.rstrip("/")
        self.session_server_url = session_server_url.rstrip("/")
        self.client_token = client_token

    def validate(self, session: Session) -> ValidationResult:
        server_id = str(uuid4())
        try:
            self.join_server(session, server_id)
            joined = self.has_joined_server(session.display_name, server_id)
        except AuthError as exc:
            logger.warning("Unable to validate the session", username=session.display_name, error=str(exc))
            return ValidationResult(Status.INVALID, str(exc))

        if joined:
            logger.info("Session validated.", username=session.display_name)
            return ValidationResult(Status.VALID, "ok")
        logger.info("Session invalidated.", username=session.display_name)
        return ValidationResult(Status.INVALID, "not_joined")

    def authenticate(self, username: str, password: str) -> Session:
        auth = UserAuthentication(self)
        auth.username = username
        auth.password = password
        try:
            auth.log_in()
            profile = auth.selected_profile or {}
            account_type = AccountType.LEGACY if profile.get("legacy") else AccountType.MOJANG
            return Session(
                display_name=str(profile.get("name", username)),
                account_id=self._profile_id(profile),
                auth_token=str(auth.access_token),
                account_type=account_type,
                extra_properties=group_properties(auth.user_properties),
            )
        finally:
            auth.log_out()

    def join_server(self, session: Session, server_id: str) -> None:
        """Announce that ``session`` is joining ``server_id``."""
        resp = self.transport.request(
            "POST",
            f"{self.session_server_url}/session/minecraft/join",
            payload={
                "accessToken": session.auth_token,
                "selectedProfile": session.account_id_hex,
                "serverId": server_id,
            },
        )
        self._raise_for_status(resp)

    def has_joined_server(self, username: str, server_id: str) -> bool:
        """Return True when the service confirms the join for ``server_id``."""
        resp = self.transport.request(
            "GET",
            f"{self.session_server_url}/session/minecraft/hasJoined",
            query={"username": username, "serverId": server_id},
        )
        self._raise_for_status(resp)
        return resp.status == 200 and bool(resp.body and resp.body.get("id"))

    def auth_request(self, endpoint: str, payload: Dict[str, Any]) -> Dict[str, Any]:
        """POST ``payload`` to an auth server endpoint and return the decoded body."""
        resp = self.transport.request("POST", f"{self.auth_server_url}/{endpoint}", payload=payload)
        self._raise_for_status(resp)
        if resp.body is None:
            raise AuthenticationError(f"Empty response from {endpoint}")
        return resp.body

    @staticmethod
    def _profile_id(profile: Dict[str, Any]) -> UUID:
        try:
            return parse_account_id(str(profile["id"]))
        except (KeyError, ValueError) as exc:
            raise AuthenticationError(f"Malformed profile id: {profile.get('id')!r}") from exc

    @staticmethod
    def _raise_for_status(resp: HttpResponse) -> None:
        if resp.status < 400:
            return
        body = resp.body or {}
        error_name = str(body.get("error", ""))
        message = str(body.get("errorMessage") or error_name or f"HTTP {resp.status}")
        if resp.status >= 500:
            raise AuthenticationUnavailableError(message)
        if error_name == "ForbiddenOperationException" and "invalid credentials" in message.lower():
            raise InvalidCredentialsError(message)
        raise AuthenticationError(message)
