import secrets
from dataclasses import dataclass
from functools import wraps
from typing import Optional

import jwt
from flask import current_app, g, request
from pydantic.alias_generators import to_snake

from errors import AuthInvalid, AuthRequired, UniquenessConflict
from storage import get_storage
from utils import logger


@dataclass(frozen=True)
class Identity:
    """What the identity provider vouches for about the caller."""
    uid: str
    email: Optional[str] = None
    display_name: Optional[str] = None
    photo_url: Optional[str] = None
    phone_number: Optional[str] = None


class TokenVerifier:
    def verify(self, token):
        """Return an ``Identity`` or raise ``AuthInvalid``."""
        raise NotImplementedError


class JWTTokenVerifier(TokenVerifier):
    """Verifies provider-issued JWTs (ID tokens) with PyJWT."""

    def __init__(self, key, algorithms=("HS256",), audience=None, issuer=None):
        self.key = key
        self.algorithms = list(algorithms)
        self.audience = audience
        self.issuer = issuer

    def verify(self, token):
        try:
            claims = jwt.decode(
                token,
                self.key,
                algorithms=self.algorithms,
                audience=self.audience,
                issuer=self.issuer,
                options={"require": ["sub"]},
            )
        except jwt.ExpiredSignatureError:
            raise AuthInvalid("Authentication token expired")
        except jwt.InvalidTokenError as exc:
            logger.warning(f"Rejected authentication token: {exc}")
            raise AuthInvalid()

        return Identity(
            uid=claims["sub"],
            email=claims.get("email"),
            display_name=claims.get("name"),
            photo_url=claims.get("picture"),
            phone_number=claims.get("phone_number"),
        )


def verifier_from_config(config):
    key = config.get("AUTH_TOKEN_PUBLIC_KEY") or config.get("AUTH_TOKEN_SECRET")
    return JWTTokenVerifier(
        key,
        algorithms=config.get("AUTH_TOKEN_ALGORITHMS", ["HS256"]),
        audience=config.get("AUTH_TOKEN_AUDIENCE"),
        issuer=config.get("AUTH_TOKEN_ISSUER"),
    )


def get_verifier():
    return current_app.extensions["token_verifier"]


def _available_username(storage, email):
    base = email.split("@")[0][:70] or "user"
    if storage.get_user_by_username(base) is None:
        return base
    return f"{base}-{secrets.token_hex(3)}"


def find_or_create_user(storage, identity):
    """Return the database user for ``identity``, creating it on first sight.

    Identities without an email have no database user. Safe to call twice for
    the same new identity: the loser of a creation race reads the winner's row.
    """
    if not identity.email:
        return None

    user = storage.get_user_by_email(identity.email)
    if user is None:
        try:
            user = storage.create_user(
                username=_available_username(storage, identity.email),
                email=identity.email,
                password="",
                display_name=identity.display_name,
                photo_url=identity.photo_url,
                phone_number=identity.phone_number,
                verified=True,
            )
            logger.info(f"Provisioned user {user['id']} for {identity.email}")
        except UniquenessConflict:
            user = storage.get_user_by_email(identity.email)
            if user is None:
                raise
    elif not user["verified"]:
        user = storage.update_user_verification(user["id"], True)

    return user


def token_required(f):
    @wraps(f)
    def decorated(*args, **kwargs):
        header = request.headers.get("Authorization")
        if not header:
            logger.warning(f"Missing Authorization header on {request.method} {request.path}")
            raise AuthRequired("Authentication required")

        scheme, _, token = header.partition(" ")
        token = token.strip()
        if scheme.lower() != "bearer" or not token:
            raise AuthRequired("Authentication token required")

        identity = get_verifier().verify(token)
        g.identity = identity
        g.current_user = find_or_create_user(get_storage(), identity)
        return f(*args, **kwargs)
    return decorated


def current_user_id():
    user = g.get("current_user")
    return user["id"] if user else None


def payload_with_owner(field):
    """Request JSON with ``field`` defaulted to the authenticated user's id."""
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        return data
    user_id = current_user_id()
    if user_id is not None and data.get(field) is None and data.get(to_snake(field)) is None:
        data = {**data, field: user_id}
    return data
