from marshmallow import Schema, fields, pre_load, validate

from models.schemas.common import username_field


def _strip(v):
    # Email is case-sensitive as stored; only surrounding whitespace goes
    return v.strip() if isinstance(v, str) else v


class UserCreateSchema(Schema):
    email = fields.Email(required=True, validate=validate.Length(max=255))
    password = fields.String(required=True, load_only=True, validate=validate.Length(min=8, max=100))
    # Looser than a profile update: any 3-100 characters, and "" means no username
    username = fields.String(validate=validate.Length(min=3, max=100), allow_none=True, load_default=None)

    @pre_load
    def normalize(self, data, **kwargs):
        if isinstance(data, dict):
            if "email" in data:
                data = dict(data, email=_strip(data["email"]))
            if data.get("username") == "":
                data = dict(data, username=None)
        return data


class UserLoginSchema(Schema):
    email = fields.Email(required=True, validate=validate.Length(max=255))
    password = fields.String(required=True, load_only=True, validate=validate.Length(min=1))

    @pre_load
    def normalize(self, data, **kwargs):
        if isinstance(data, dict) and "email" in data:
            data = dict(data, email=_strip(data["email"]))
        return data


class UserUpdateSchema(Schema):
    username = username_field()


class RefreshTokenSchema(Schema):
    refresh_token = fields.String(required=True, validate=validate.Length(min=1))


class UserOutSchema(Schema):
    id = fields.String()
    email = fields.String()
    username = fields.String(allow_none=True)
    created_at = fields.DateTime(allow_none=True)
    updated_at = fields.DateTime(allow_none=True)
