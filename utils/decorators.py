from __future__ import annotations
from functools import wraps
from flask import request, g, abort, current_app
from models import storage
from models.member import Member
from services.exceptions import TokenError
from services.member_service import ROLE_ADMIN
from utils.security import ACCESS, TokenCodec


def jwt_required():
    """Require a valid access token; loads the member into g.current_member."""
    def decorator(fn):
        @wraps(fn)
        def wrapper(*args, **kwargs):
            auth = request.headers.get("Authorization", "")
            if not auth.startswith("Bearer "):
                abort(401, description="Missing or invalid Authorization header")
            token = auth.split(" ", 1)[1].strip()
            codec = TokenCodec.from_config(current_app.config)
            try:
                claims = codec.decode_with_kind(token, ACCESS)
            except TokenError as e:
                abort(401, description=str(e))

            try:
                member_id = int(claims.get("id"))
            except (TypeError, ValueError):
                abort(401, description="Invalid token subject")
            member = storage.get(Member, member_id)
            if not member:
                abort(401, description="Member not found")
            g.current_member = member
            g.current_authorities = claims.get("authorities", [])
            return fn(*args, **kwargs)

        return wrapper

    return decorator


def self_or_admin_required(param: str = "member_id"):
    """
    Allow access if the token belongs to the member named by the route
    parameter, or carries ROLE_ADMIN. Otherwise 403.
    """
    def decorator(fn):
        @wraps(fn)
        @jwt_required()
        def wrapper(*args, **kwargs):
            is_self = g.current_member.id == kwargs.get(param)
            if not is_self and ROLE_ADMIN not in set(g.current_authorities or []):
                abort(403, description="Insufficient role")
            return fn(*args, **kwargs)

        return wrapper

    return decorator
