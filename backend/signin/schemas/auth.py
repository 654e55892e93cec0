"""Authentication-related Marshmallow schemas."""

from __future__ import annotations

from marshmallow import Schema, fields, validate


class LoginSchema(Schema):
    """Input payload for a login attempt."""

    method = fields.String(required=True, validate=validate.Length(min=1, max=32))
    credential = fields.String(required=True, validate=validate.Length(min=1, max=8192))


class RefreshTokenSchema(Schema):
    """Refresh token as handed to the client, including the raw client string."""

    id = fields.String(required=True)
    user_id = fields.Integer(required=True)
    application = fields.String(required=True)
    platform = fields.String(required=True)
    user_agent = fields.String(required=True)
    created_at = fields.DateTime(required=True)
    expires_at = fields.DateTime(required=True)


class AccessTokenSchema(Schema):
    id = fields.String(required=True)
    user_id = fields.Integer(required=True)
    refresh_token_id = fields.String(required=True)
    created_at = fields.DateTime(required=True)
    expires_at = fields.DateTime(required=True)


class UserProfileSchema(Schema):
    """Public profile of the user the tokens were issued to."""

    id = fields.Integer(required=True)
    name = fields.String(required=True)
    username = fields.String(required=True)
    email = fields.Email(required=True)
    picture = fields.String(allow_none=True)


class TokenResponseSchema(Schema):
    """Response payload of a completed login."""

    access_token = fields.Nested(AccessTokenSchema, required=True)
    refresh_token = fields.Nested(RefreshTokenSchema, required=True)
    user = fields.Nested(UserProfileSchema, required=True)
    expires_in = fields.Integer(required=True)
    token_type = fields.String(required=True, data_key="type")


class IdentitySchema(Schema):
    """Verified identity returned when no user is linked to it yet."""

    subject = fields.String(required=True)
    email = fields.String(allow_none=True)
    name = fields.String(allow_none=True)
    picture = fields.String(allow_none=True)


class NotProvisionedSchema(Schema):
    status = fields.Constant("not_provisioned")
    identity = fields.Nested(IdentitySchema, required=True)
