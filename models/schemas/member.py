from marshmallow import Schema, fields, pre_load, validates, validate, ValidationError

from services.member_service import RESERVED_LOGIN_IDS

_login_id_rules = [
    validate.Length(min=1, max=50),
    validate.NoneOf(RESERVED_LOGIN_IDS, error="Login id is reserved."),
]


def _norm_email(v):
    return v.strip().lower() if isinstance(v, str) else v


class _EmailNormalizingSchema(Schema):
    @pre_load
    def normalize(self, data, **kwargs):
        if isinstance(data, dict) and data.get("email"):
            data = dict(data)
            data["email"] = _norm_email(data["email"])
        return data


class MemberCreateSchema(_EmailNormalizingSchema):
    login_id = fields.String(required=True, validate=_login_id_rules)
    password = fields.String(required=True, load_only=True)
    name = fields.String(allow_none=True, validate=validate.Length(max=100))
    email = fields.Email(required=True)

    @validates("password")
    def validate_password(self, value, **kwargs):
        if len(value) < 8:
            raise ValidationError("Password must be at least 8 characters long.")


class MemberUpdateSchema(_EmailNormalizingSchema):
    # No image field: the image only changes through POST /members/<id>/image
    login_id = fields.String(allow_none=True, validate=_login_id_rules)
    password = fields.String(allow_none=True, load_only=True)
    name = fields.String(allow_none=True, validate=validate.Length(max=100))
    email = fields.Email(allow_none=True)

    @validates("password")
    def validate_password(self, value, **kwargs):
        if value is not None and len(value) < 8:
            raise ValidationError("Password must be at least 8 characters long.")


class MemberOutSchema(Schema):
    id = fields.Integer()
    login_id = fields.String()
    name = fields.String(allow_none=True)
    image = fields.String(allow_none=True)
    email = fields.String(allow_none=True)


class LoginSchema(Schema):
    login_id = fields.String(required=True)
    password = fields.String(required=True, load_only=True)


class RefreshSchema(Schema):
    refresh_token = fields.String(required=True)


class FindLoginIdSchema(_EmailNormalizingSchema):
    email = fields.Email(required=True)


class TempPasswordSchema(_EmailNormalizingSchema):
    login_id = fields.String(required=True)
    email = fields.Email(required=True)
