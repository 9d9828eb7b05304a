"""
Members blueprint:
- POST   /members                  register
- GET    /members/<id>             read profile (access token)
- PUT    /members/<id>             update profile (self or admin)
- DELETE /members/<id>             delete member (self or admin)
- POST   /members/<id>/image       upload profile image (self or admin)
- GET    /me                       current member
"""
from __future__ import annotations

from flask import Blueprint, request, jsonify, g, abort

from models.schemas.member import MemberCreateSchema, MemberUpdateSchema, MemberOutSchema
from utils.decorators import jwt_required, self_or_admin_required
from . import get_member_service

bp = Blueprint("members", __name__)

member_create_schema = MemberCreateSchema()
member_update_schema = MemberUpdateSchema()
member_out_schema = MemberOutSchema()


@bp.post("/members")
def register():
    """
    Register a new member.
    ---
    tags:
      - Members
    consumes:
      - application/json
    parameters:
      - in: body
        name: body
        schema:
          type: object
          properties:
            login_id: { type: string }
            password: { type: string }
            name: { type: string }
            email: { type: string }
    responses:
      201:
        description: Created
      409:
        description: Login id already registered
      422:
        description: Validation error
    """
    payload = request.get_json(silent=True) or {}
    data = member_create_schema.load(payload)
    member = get_member_service().create(
        login_id=data["login_id"],
        password=data["password"],
        name=data.get("name"),
        email=data["email"],
    )
    return jsonify({"data": member_out_schema.dump(member)}), 201


@bp.get("/members/<int:member_id>")
@jwt_required()
def read_member(member_id: int):
    """
    Read a member profile
    ---
    tags:
      - Members
    security:
      - Bearer: []
    parameters:
      - in: path
        name: member_id
        type: integer
        required: true
    responses:
      200: { description: OK }
      401: { description: Unauthorized }
      404: { description: Member not found }
    """
    member = get_member_service().read(member_id)
    return jsonify({"data": member_out_schema.dump(member)}), 200


@bp.put("/members/<int:member_id>")
@self_or_admin_required()
def update_member(member_id: int):
    """
    Update a member profile; omitted fields keep their value.
    ---
    tags:
      - Members
    security:
      - Bearer: []
    consumes:
      - application/json
    parameters:
      - in: path
        name: member_id
        type: integer
        required: true
      - in: body
        name: body
        schema:
          type: object
          properties:
            login_id: { type: string }
            password: { type: string }
            name: { type: string }
            email: { type: string }
    responses:
      200: { description: OK }
      403: { description: Forbidden }
      422: { description: Validation error }
    """
    payload = request.get_json(silent=True) or {}
    data = member_update_schema.load(payload)
    member = get_member_service().update(member_id, **data)
    return jsonify({"data": member_out_schema.dump(member)}), 200


@bp.delete("/members/<int:member_id>")
@self_or_admin_required()
def delete_member(member_id: int):
    """
    Delete a member
    ---
    tags:
      - Members
    security:
      - Bearer: []
    parameters:
      - in: path
        name: member_id
        type: integer
        required: true
    responses:
      204: { description: Deleted }
      403: { description: Forbidden }
    """
    get_member_service().delete(member_id)
    return ("", 204)


@bp.post("/members/<int:member_id>/image")
@self_or_admin_required()
def change_image(member_id: int):
    """
    Upload a profile image (multipart field "image")
    ---
    tags:
      - Members
    security:
      - Bearer: []
    consumes:
      - multipart/form-data
    parameters:
      - in: path
        name: member_id
        type: integer
        required: true
      - in: formData
        name: image
        type: file
        required: true
    responses:
      200: { description: OK }
      422: { description: Missing image file }
    """
    image = request.files.get("image")
    if image is None or not image.filename:
        abort(422, description="image file is required")
    member = get_member_service().change_image(member_id, image)
    return jsonify({"data": member_out_schema.dump(member)}), 200


@bp.get("/me")
@jwt_required()
def me():
    """
    Get current member info.
    ---
    tags:
      - Members
    security:
      - Bearer: []
    responses:
      200:
        description: OK
      401:
        description: Unauthorized
    """
    return jsonify({"data": member_out_schema.dump(g.current_member)}), 200
