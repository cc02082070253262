"""Admin authentication: credential check, signed cookie token, route gate."""

from __future__ import annotations

from typing import Optional

from flask import current_app
from flask_login import UserMixin
from itsdangerous import BadSignature, SignatureExpired, URLSafeTimedSerializer

from athenas import app, bcrypt, login_manager

TOKEN_SALT = 'athenas-auth-token'


class CredentialVerifier:
    """Decides whether a username/password pair may open the dashboard."""

    def verify(self, username: str, password: str) -> bool:
        raise NotImplementedError


class StaticCredentialVerifier(CredentialVerifier):
    """A single configured admin account checked against a bcrypt hash."""

    def __init__(self, username: str, password_hash: str):
        self.username = username
        self.password_hash = password_hash

    def verify(self, username: str, password: str) -> bool:
        if not username or not password:
            return False
        if username.strip().lower() != self.username.lower():
            return False
        return bcrypt.check_password_hash(self.password_hash, password)


def _build_default_verifier(flask_app) -> StaticCredentialVerifier:
    username = flask_app.config.get('ADMIN_USERNAME') or 'admin'
    password_hash = flask_app.config.get('ADMIN_PASSWORD_HASH')
    if not password_hash:
        password = flask_app.config.get('ADMIN_PASSWORD')
        if not password:
            password = 'admin123'
            flask_app.logger.warning(
                "ADMIN_PASSWORD is not set; using the fallback password for '%s'. Change it immediately.",
                username,
            )
        password_hash = bcrypt.generate_password_hash(password).decode('utf-8')
    return StaticCredentialVerifier(username, password_hash)


def get_credential_verifier() -> CredentialVerifier:
    verifier = current_app.extensions.get('credential_verifier')
    if verifier is None:
        verifier = _build_default_verifier(current_app)
        current_app.extensions['credential_verifier'] = verifier
    return verifier


def set_credential_verifier(verifier: CredentialVerifier, flask_app=None) -> None:
    (flask_app or app).extensions['credential_verifier'] = verifier


def _serializer() -> URLSafeTimedSerializer:
    return URLSafeTimedSerializer(current_app.config['SECRET_KEY'], salt=TOKEN_SALT)


def generate_token(username: str, role: str = 'admin') -> str:
    return _serializer().dumps({'username': username, 'role': role})


def verify_token(token: Optional[str]) -> Optional[dict]:
    """Return the token payload, or None when it is missing, forged or expired."""
    if not token:
        return None
    max_age = current_app.config['AUTH_TOKEN_MAX_AGE'].total_seconds()
    try:
        payload = _serializer().loads(token, max_age=max_age)
    except SignatureExpired:
        current_app.logger.info("Rejected expired auth token.")
        return None
    except BadSignature:
        current_app.logger.warning("Rejected auth token with a bad signature.")
        return None
    if not isinstance(payload, dict) or not payload.get('username'):
        return None
    return payload


class AdminUser(UserMixin):
    def __init__(self, username: str, role: str = 'admin'):
        self.id = username
        self.username = username
        self.role = role

    def to_dict(self) -> dict:
        return {'username': self.username, 'role': self.role}


@login_manager.request_loader
def load_user_from_request(req):
    payload = verify_token(req.cookies.get(current_app.config['AUTH_COOKIE_NAME']))
    if payload is None:
        return None
    return AdminUser(payload['username'], payload.get('role', 'admin'))


def set_auth_cookie(response, token: str):
    response.set_cookie(
        current_app.config['AUTH_COOKIE_NAME'],
        token,
        max_age=int(current_app.config['AUTH_TOKEN_MAX_AGE'].total_seconds()),
        httponly=True,
        secure=current_app.config['AUTH_COOKIE_SECURE'],
        samesite='Lax',
        path='/',
    )
    return response


def clear_auth_cookie(response):
    response.delete_cookie(current_app.config['AUTH_COOKIE_NAME'], path='/')
    return response
