"""
Authentication blueprint:
- POST /auth/login
- POST /auth/refresh
- POST /auth/logout
- POST /auth/find-login-id
- POST /auth/temp-password

The implementation:
- Uses argon2 for password hashing (via utils.security)
- Issues short-lived access tokens and longer-lived refresh tokens (JWTs, HS256 by default)
- Keeps the current refresh token on the member row; /auth/refresh only accepts that exact token
"""
from __future__ import annotations

from flask import Blueprint, request, jsonify, g, current_app

from models.schemas.member import (
    FindLoginIdSchema,
    LoginSchema,
    MemberOutSchema,
    RefreshSchema,
    TempPasswordSchema,
)
from utils.decorators import jwt_required
from . import get_member_service

bp = Blueprint("auth", __name__)

login_schema = LoginSchema()
refresh_schema = RefreshSchema()
find_login_id_schema = FindLoginIdSchema()
temp_password_schema = TempPasswordSchema()
member_out_schema = MemberOutSchema()


def _expires_in(days_key: str) -> int:
    return int(float(current_app.config[days_key]) * 24 * 60 * 60)


@bp.post("/auth/login")
def login():
    """
    Login: return the member profile, access_token and refresh_token
    ---
    tags:
      - Auth
    consumes:
      - application/json
    parameters:
      -  in: body
         name: body
         schema:
           type: object
           properties:
             login_id: { type: string }
             password: { type: string }
    responses:
      200:
        description: OK (returns tokens)
      401:
        description: Wrong password
      404:
        description: Unknown login id
    """
    data = login_schema.load(request.get_json(silent=True) or {})

    service = get_member_service()
    result = service.login(data["login_id"], data["password"])

    access_token = service.generate_access_token(result.id, result.login_id)
    refresh_token = service.generate_refresh_token(result.id, result.login_id)
    service.set_refresh_token(result.id, refresh_token)

    return jsonify(
        {
            "data": member_out_schema.dump(result),
            "access_token": access_token,
            "refresh_token": refresh_token,
            "token_type": "bearer",
            "expires_in": _expires_in("ACCESS_TOKEN_EXPIRE_DAYS"),
        }
    ), 200


@bp.post("/auth/refresh")
def refresh():
    """
    Exchange the stored refresh token for a new access token
    ---
    tags:
      - Auth
    consumes:
      - application/json
    parameters:
      -  in: body
         name: body
         schema:
           type: object
           properties:
             refresh_token: { type: string }
    responses:
      200:
        description: OK (returns a new access token)
      401:
        description: Token not whitelisted, expired or invalid
    """
    data = refresh_schema.load(request.get_json(silent=True) or {})
    access_token = get_member_service().refresh_access_token(data["refresh_token"])
    return jsonify(
        {
            "access_token": access_token,
            "token_type": "bearer",
            "expires_in": _expires_in("ACCESS_TOKEN_EXPIRE_DAYS"),
        }
    ), 200


@bp.post("/auth/logout")
@jwt_required()
def logout():
    """
    Logout: clears the member's stored refresh token
    ---
    tags:
      - Auth
    security:
      - Bearer: []
    responses:
      204:
        description: ""
      401:
        description: Unauthorized
    """
    get_member_service().set_refresh_token(g.current_member.id, None)
    return ("", 204)


@bp.post("/auth/find-login-id")
def find_login_id():
    """
    Look up a login id by email
    ---
    tags:
      - Auth
    consumes:
      - application/json
    parameters:
      -  in: body
         name: body
         schema:
           type: object
           properties:
             email: { type: string }
    responses:
      200: { description: OK }
      404: { description: No member with that email }
    """
    data = find_login_id_schema.load(request.get_json(silent=True) or {})
    login_id = get_member_service().find_login_id_by_email(data["email"])
    return jsonify({"data": {"login_id": login_id}}), 200


@bp.post("/auth/temp-password")
def temp_password():
    """
    Replace the password with a random temporary one and hand it to the delivery hook
    ---
    tags:
      - Auth
    consumes:
      - application/json
    parameters:
      -  in: body
         name: body
         schema:
           type: object
           properties:
             login_id: { type: string }
             email: { type: string }
    responses:
      202: { description: Accepted, password sent out of band }
      404: { description: No member matches login id and email }
    """
    data = temp_password_schema.load(request.get_json(silent=True) or {})
    password = get_member_service().issue_temporary_password(data["login_id"], data["email"])
    # The plaintext only leaves through the delivery hook, never in the response
    current_app.extensions["send_temp_password"](data["login_id"], data["email"], password)
    return jsonify({"data": {"status": "sent"}}), 202
