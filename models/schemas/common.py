from marshmallow import EXCLUDE, Schema, fields, validate

MAX_LIMIT = 100

SORT_FIELDS = ("created_at", "title")
SORT_ORDERS = ("ASC", "DESC")

USERNAME_PATTERN = r"^[a-zA-Z0-9_]+$"


def username_field(**kwargs):
    return fields.String(
        validate=[
            validate.Length(min=3, max=30),
            validate.Regexp(
                USERNAME_PATTERN,
                error="Username can only contain letters, numbers, and underscores.",
            ),
        ],
        **kwargs,
    )


class ActivityQuerySchema(Schema):
    """Query string for activity listings: pagination, type filter and sort."""

    class Meta:
        unknown = EXCLUDE

    page = fields.Integer(load_default=1, validate=validate.Range(min=1))
    limit = fields.Integer(load_default=10, validate=validate.Range(min=1, max=MAX_LIMIT))
    type = fields.String(load_default=None)
    sort_by = fields.String(load_default="created_at", validate=validate.OneOf(SORT_FIELDS))
    sort_order = fields.String(load_default="DESC", validate=validate.OneOf(SORT_ORDERS))

