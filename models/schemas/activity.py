from marshmallow import Schema, fields, validate

from models.activity import CostLevel

_positive = validate.Range(min=1)


class ActivityCreateSchema(Schema):
    title = fields.String(required=True, validate=validate.Length(min=3, max=255))
    description = fields.String(required=True, validate=validate.Length(min=10))
    type = fields.String(required=True, validate=validate.Length(min=1, max=100))
    participants_min = fields.Integer(allow_none=True, validate=_positive)
    participants_max = fields.Integer(allow_none=True, validate=_positive)
    cost_level = fields.Enum(CostLevel, by_value=True)
    duration_min = fields.Integer(allow_none=True, validate=_positive)
    duration_max = fields.Integer(allow_none=True, validate=_positive)


class ActivityUpdateSchema(Schema):
    # All optional, but validate if present
    title = fields.String(validate=validate.Length(min=3, max=255))
    description = fields.String(validate=validate.Length(min=10))
    type = fields.String(validate=validate.Length(min=1, max=100))
    participants_min = fields.Integer(allow_none=True, validate=_positive)
    participants_max = fields.Integer(allow_none=True, validate=_positive)
    cost_level = fields.Enum(CostLevel, by_value=True)
    duration_min = fields.Integer(allow_none=True, validate=_positive)
    duration_max = fields.Integer(allow_none=True, validate=_positive)


class ActivityOutSchema(Schema):
    id = fields.String()
    user_id = fields.String()
    title = fields.String()
    description = fields.String()
    type = fields.String()
    participants_min = fields.Integer(allow_none=True)
    participants_max = fields.Integer(allow_none=True)
    cost_level = fields.Enum(CostLevel, by_value=True)
    duration_min = fields.Integer(allow_none=True)
    duration_max = fields.Integer(allow_none=True)
    contributor_name = fields.String(allow_none=True)
    created_at = fields.DateTime()
    updated_at = fields.DateTime()
