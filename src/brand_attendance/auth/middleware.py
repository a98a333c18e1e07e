from __future__ import annotations

from functools import wraps
from typing import Callable

from flask import g, jsonify, request

from ..audit.model import ClientInfo
from ..core.exceptions import AuthenticationError
from ..users.model import AuthUser
from .service import AuthService
from .tokens import token_from_request


def client_info() -> ClientInfo:
    forwarded = request.headers.get("X-Forwarded-For")
    if forwarded:
        ip_address = forwarded.split(",")[0].strip()
    else:
        ip_address = request.headers.get("X-Real-IP") or "unknown"
    return ClientInfo(ip_address=ip_address, user_agent=request.headers.get("User-Agent") or "unknown")


def current_user() -> AuthUser:
    return g.auth_user


def make_jwt_required(auth_service: AuthService) -> Callable:
    """Build the decorator that loads ``g.auth_user`` or answers 401."""

    def jwt_required(view):
        @wraps(view)
        def wrapper(*args, **kwargs):
            try:
                g.auth_user = auth_service.authenticate_token(token_from_request(request))
            except AuthenticationError:
                return jsonify({"error": "Unauthorized"}), 401
            return view(*args, **kwargs)

        return wrapper

    return jwt_required
