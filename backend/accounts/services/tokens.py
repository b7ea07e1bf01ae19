from __future__ import annotations

import hashlib

from django.conf import settings
from django.contrib.auth import get_user_model
from rest_framework_simplejwt.exceptions import TokenError
from rest_framework_simplejwt.settings import api_settings
from rest_framework_simplejwt.tokens import Token

User = get_user_model()


class InvalidScopedToken(Exception):
    """The link token is malformed, expired, of the wrong scope or already spent."""


class EmailVerificationToken(Token):
    token_type = "verify"
    lifetime = settings.EMAIL_VERIFICATION_TOKEN_LIFETIME


class PasswordResetToken(Token):
    token_type = "reset"
    lifetime = settings.PASSWORD_RESET_TOKEN_LIFETIME


def _password_fingerprint(user) -> str:
    # Changes whenever the password hash changes, so a reset link works once.
    return hashlib.sha256(user.password.encode("utf-8")).hexdigest()[:16]


def issue_verification_token(user) -> str:
    token = EmailVerificationToken.for_user(user)
    token["email"] = user.email
    return str(token)


def issue_password_reset_token(user) -> str:
    token = PasswordResetToken.for_user(user)
    token["pwd"] = _password_fingerprint(user)
    return str(token)


def _load_user(token_class, raw_token: str):
    try:
        token = token_class(raw_token)
    except TokenError as exc:
        raise InvalidScopedToken(str(exc)) from exc

    user_id = token.get(api_settings.USER_ID_CLAIM)
    try:
        user = User.objects.get(**{api_settings.USER_ID_FIELD: user_id})
    except User.DoesNotExist as exc:
        raise InvalidScopedToken("User not found") from exc
    return token, user


def user_from_verification_token(raw_token: str):
    token, user = _load_user(EmailVerificationToken, raw_token)
    if token.get("email") != user.email:
        raise InvalidScopedToken("Email changed since the link was issued")
    return user


def user_from_password_reset_token(raw_token: str):
    token, user = _load_user(PasswordResetToken, raw_token)
    if token.get("pwd") != _password_fingerprint(user):
        raise InvalidScopedToken("Reset link already used")
    return user
