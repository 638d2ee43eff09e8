"""Module: identity.

Thin wrapper over the Firebase Admin SDK. Route code only talks to
``IdentityGateway`` so tests can swap in a fake.
"""

import logging
from dataclasses import dataclass, field
from typing import Any

import firebase_admin
from firebase_admin import auth, credentials, exceptions

from sos911.core.config import Settings

logger = logging.getLogger(__name__)

FIREBASE_APP_NAME = "sos911"


@dataclass
class IdentityClaims:
    uid: str
    email: str | None = None
    name: str | None = None
    phone_number: str | None = None
    picture: str | None = None
    email_verified: bool = False
    raw: dict[str, Any] = field(default_factory=dict)


class IdentityError(Exception):
    def __init__(self, code: str, message: str):
        super().__init__(message)
        self.code = code
        self.message = message


class InvalidTokenError(IdentityError):
    pass


class IdentityGateway:
    """Operations the backend needs from the identity provider."""

    def verify_id_token(self, token: str) -> IdentityClaims:
        raise NotImplementedError

    def create_user(
        self,
        email: str,
        password: str,
        display_name: str,
        phone_number: str | None = None,
        photo_url: str | None = None,
    ) -> str:
        raise NotImplementedError

    def delete_user(self, uid: str) -> None:
        raise NotImplementedError

    def get_uid_by_email(self, email: str) -> str | None:
        raise NotImplementedError

    def get_user(self, uid: str) -> IdentityClaims | None:
        raise NotImplementedError

    def create_custom_token(self, uid: str) -> str:
        raise NotImplementedError

    def generate_email_verification_link(self, email: str) -> str:
        raise NotImplementedError


def _claims_from_token(decoded: dict[str, Any]) -> IdentityClaims:
    return IdentityClaims(
        uid=decoded["uid"],
        email=decoded.get("email"),
        name=decoded.get("name"),
        phone_number=decoded.get("phone_number"),
        picture=decoded.get("picture"),
        email_verified=bool(decoded.get("email_verified", False)),
        raw=decoded,
    )


class FirebaseIdentityGateway(IdentityGateway):
    def __init__(self, settings: Settings):
        self._settings = settings
        self._app: firebase_admin.App | None = None

    def _get_app(self) -> firebase_admin.App:
        if self._app is not None:
            return self._app
        try:
            self._app = firebase_admin.get_app(FIREBASE_APP_NAME)
        except ValueError:
            private_key = (self._settings.firebase_private_key or "").replace("\\n", "\n")
            cert = credentials.Certificate(
                {
                    "type": "service_account",
                    "project_id": self._settings.firebase_project_id,
                    "client_email": self._settings.firebase_client_email,
                    "private_key": private_key,
                    "token_uri": "https://oauth2.googleapis.com/token",
                }
            )
            self._app = firebase_admin.initialize_app(
                cert,
                {"projectId": self._settings.firebase_project_id},
                name=FIREBASE_APP_NAME,
            )
        return self._app

    def verify_id_token(self, token: str) -> IdentityClaims:
        try:
            decoded = auth.verify_id_token(token, app=self._get_app())
        except auth.ExpiredIdTokenError as exc:
            raise InvalidTokenError("auth/id-token-expired", "Token has expired, please sign in again") from exc
        except auth.RevokedIdTokenError as exc:
            raise InvalidTokenError("auth/id-token-revoked", "Token has been revoked, please sign in again") from exc
        except (auth.InvalidIdTokenError, ValueError) as exc:
            raise InvalidTokenError("auth/invalid-id-token", "Invalid or expired token") from exc
        return _claims_from_token(decoded)

    def create_user(
        self,
        email: str,
        password: str,
        display_name: str,
        phone_number: str | None = None,
        photo_url: str | None = None,
    ) -> str:
        kwargs: dict[str, Any] = {"email": email, "password": password, "display_name": display_name}
        if phone_number:
            kwargs["phone_number"] = phone_number
        if photo_url:
            kwargs["photo_url"] = photo_url

        try:
            record = auth.create_user(app=self._get_app(), **kwargs)
        except auth.EmailAlreadyExistsError as exc:
            raise IdentityError("auth/email-already-exists", "An account with this email already exists") from exc
        except auth.PhoneNumberAlreadyExistsError as exc:
            raise IdentityError("auth/phone-number-already-exists", "An account with this phone number already exists") from exc
        except ValueError as exc:
            # The SDK validates email, password and phone shape locally.
            raise IdentityError("auth/invalid-argument", str(exc)) from exc
        except exceptions.FirebaseError as exc:
            raise IdentityError("auth/internal-error", "Failed to create user account") from exc
        return record.uid

    def delete_user(self, uid: str) -> None:
        try:
            auth.delete_user(uid, app=self._get_app())
        except exceptions.FirebaseError as exc:
            raise IdentityError("auth/internal-error", "Failed to delete user account") from exc

    def get_uid_by_email(self, email: str) -> str | None:
        try:
            return auth.get_user_by_email(email, app=self._get_app()).uid
        except auth.UserNotFoundError:
            return None
        except exceptions.FirebaseError as exc:
            raise IdentityError("auth/internal-error", "Identity lookup failed") from exc

    def get_user(self, uid: str) -> IdentityClaims | None:
        try:
            record = auth.get_user(uid, app=self._get_app())
        except auth.UserNotFoundError:
            return None
        except exceptions.FirebaseError as exc:
            raise IdentityError("auth/internal-error", "Identity lookup failed") from exc
        return IdentityClaims(
            uid=record.uid,
            email=record.email,
            name=record.display_name,
            phone_number=record.phone_number,
            picture=record.photo_url,
            email_verified=record.email_verified,
        )

    def create_custom_token(self, uid: str) -> str:
        token = auth.create_custom_token(uid, app=self._get_app())
        return token.decode("utf-8") if isinstance(token, bytes) else token

    def generate_email_verification_link(self, email: str) -> str:
        try:
            return auth.generate_email_verification_link(email, app=self._get_app())
        except exceptions.FirebaseError as exc:
            raise IdentityError("auth/internal-error", "Failed to generate email verification link") from exc
