from __future__ import annotations

from typing import Optional

import structlog
from werkzeug.security import check_password_hash

from ..audit.model import ClientInfo
from ..audit.service import AuditService
from ..core.constants import DEFAULT_TOKEN_HOURS
from ..core.enums import AuditAction
from ..core.exceptions import AuthenticationError, ValidationError
from ..users.model import AuthUser
from ..users.repository import GroupRepository, RoleRepository, UserRepository
from .tokens import decode_token, issue_token

logger = structlog.get_logger(__name__)


class AuthService:
    """Use case: login/logout and resolving the caller behind a token."""

    def __init__(
        self,
        users: UserRepository,
        groups: GroupRepository,
        roles: RoleRepository,
        audit: AuditService,
        *,
        jwt_secret: str,
        expires_hours: int = DEFAULT_TOKEN_HOURS,
    ):
        self._users = users
        self._groups = groups
        self._roles = roles
        self._audit = audit
        self._jwt_secret = jwt_secret
        self._expires_hours = expires_hours

    @property
    def expires_hours(self) -> int:
        return self._expires_hours

    def get_auth_user(self, user_id: int) -> AuthUser:
        user = self._users.get_by_id(int(user_id))
        if not user or not user.is_active:
            raise AuthenticationError("Unauthorized")
        group = self._groups.get_by_id(user.group_id)
        role = self._roles.get_by_id(user.role_id) if user.role_id else None
        return AuthUser.from_user(user, group=group, role=role)

    def authenticate_token(self, token: Optional[str]) -> AuthUser:
        if not token:
            raise AuthenticationError("Unauthorized")
        payload = decode_token(token, secret=self._jwt_secret)
        if not payload or payload.get("userId") is None:
            raise AuthenticationError("Unauthorized")
        return self.get_auth_user(int(payload["userId"]))

    def login(self, username: str, password: str, *, client: Optional[ClientInfo] = None) -> tuple[AuthUser, str]:
        if not username or not password:
            raise ValidationError("Username and password are required")

        user = self._users.get_by_username(username)
        if not user or not user.is_active:
            raise AuthenticationError("Invalid credentials")

        try:
            ok = check_password_hash(user.password_hash, password)
        except ValueError:
            # e.g. placeholder or corrupted hashes
            ok = False
        if not ok:
            logger.info("login_failed", username=username)
            raise AuthenticationError("Invalid credentials")

        self._users.touch_last_login(user.id)
        self._audit.log(
            user_id=user.id,
            action=AuditAction.LOGIN,
            table_name="users",
            record_id=user.id,
            client=client,
        )
        auth_user = self.get_auth_user(user.id)
        token = issue_token(auth_user, secret=self._jwt_secret, expires_hours=self._expires_hours)
        logger.info("login_succeeded", user_id=user.id)
        return auth_user, token

    def logout(self, token: Optional[str], *, client: Optional[ClientInfo] = None) -> None:
        payload = decode_token(token, secret=self._jwt_secret) if token else None
        if not payload or payload.get("userId") is None:
            return
        self._audit.log(
            user_id=int(payload["userId"]),
            action=AuditAction.LOGOUT,
            table_name="users",
            record_id=int(payload["userId"]),
            client=client,
        )
