"""
Identity provider clients
Verify bearer tokens and look up user profiles with an external identity provider.

Two implementations share the same contract:
- FirebaseIdentityProvider: Firebase Authentication ID tokens, profiles in Firestore
- JWTIdentityProvider: locally signed JWTs, profiles in the MongoDB users collection
"""

import asyncio
from abc import ABC, abstractmethod
from typing import Any, Dict, Optional

import firebase_admin
import jwt
from firebase_admin import auth, credentials, exceptions as firebase_exceptions, firestore_async
from google.api_core.exceptions import GoogleAPIError
from google.auth.exceptions import GoogleAuthError
from motor.motor_asyncio import AsyncIOMotorCollection
from pymongo.errors import PyMongoError

from app.core.config import Config
from app.core.errors import IdentityProviderUnavailable, InvalidCredential
from app.core.logger import logger


class IdentityProvider(ABC):
    """Contract for identity provider clients"""

    name = "identity-provider"

    @abstractmethod
    async def verify_token(self, token: str) -> Dict[str, Any]:
        """
        Verify a bearer token.

        Returns:
            Verified claims, always including the subject under "uid"

        Raises:
            InvalidCredential: token malformed, expired or failing verification
            IdentityProviderUnavailable: provider could not be reached
        """
        pass

    @abstractmethod
    async def get_profile(self, uid: str) -> Optional[Dict[str, Any]]:
        """
        Read the stored profile of a verified subject.

        Returns:
            Profile attributes, or None when the subject has no profile

        Raises:
            IdentityProviderUnavailable: profile store could not be read
        """
        pass


class FirebaseIdentityProvider(IdentityProvider):
    """Firebase Authentication with user profiles kept in Firestore"""

    name = "firebase"

    def __init__(
        self,
        firebase_app: firebase_admin.App,
        firestore_client,
        users_collection: str = "users",
        check_revoked: bool = False,
    ):
        self.app = firebase_app
        self.firestore = firestore_client
        self.users_collection = users_collection
        self.check_revoked = check_revoked

    @classmethod
    def from_credentials(
        cls,
        credentials_path: str,
        users_collection: str = "users",
        check_revoked: bool = False,
    ) -> "FirebaseIdentityProvider":
        """Initialize the Firebase Admin SDK from a service account file"""
        try:
            firebase_app = firebase_admin.get_app()
        except ValueError:
            firebase_app = firebase_admin.initialize_app(credentials.Certificate(credentials_path))

        logger.info(
            "Firebase Admin SDK initialized",
            metadata={"event": "identity_provider_init", "provider": cls.name, "project_id": firebase_app.project_id}
        )
        return cls(firebase_app, firestore_async.client(firebase_app), users_collection, check_revoked)

    async def verify_token(self, token: str) -> Dict[str, Any]:
        try:
            # The Admin SDK verifies synchronously and may fetch signing certificates
            return await asyncio.to_thread(
                auth.verify_id_token, token, app=self.app, check_revoked=self.check_revoked
            )
        except (auth.InvalidIdTokenError, auth.UserDisabledError, ValueError) as e:
            raise InvalidCredential(str(e))
        except firebase_exceptions.FirebaseError as e:
            logger.error("Firebase token verification failed", error=e, metadata={"event": "identity_provider_error"})
            raise IdentityProviderUnavailable(error=e)

    async def get_profile(self, uid: str) -> Optional[Dict[str, Any]]:
        try:
            snapshot = await self.firestore.collection(self.users_collection).document(uid).get()
        except (GoogleAPIError, GoogleAuthError) as e:
            logger.error("Firestore profile lookup failed", user_id=uid, error=e, metadata={"event": "identity_provider_error"})
            raise IdentityProviderUnavailable("Failed to fetch user profile", error=e)

        return snapshot.to_dict() if snapshot.exists else None


class JWTIdentityProvider(IdentityProvider):
    """Locally signed JWTs with user profiles kept in MongoDB"""

    name = "jwt"

    SUBJECT_CLAIMS = ("uid", "sub", "user_id", "id")

    def __init__(self, secret: str, algorithm: str, users: AsyncIOMotorCollection):
        self.secret = secret
        self.algorithm = algorithm
        self.users = users

    async def verify_token(self, token: str) -> Dict[str, Any]:
        try:
            payload = jwt.decode(token, self.secret, algorithms=[self.algorithm])
        except jwt.ExpiredSignatureError:
            raise InvalidCredential("Token has expired")
        except jwt.InvalidTokenError as e:
            raise InvalidCredential(f"Invalid token: {e}")

        uid = next((str(payload[claim]) for claim in self.SUBJECT_CLAIMS if payload.get(claim)), None)
        if not uid:
            raise InvalidCredential("Token has no subject identifier")

        return {**payload, "uid": uid}

    async def get_profile(self, uid: str) -> Optional[Dict[str, Any]]:
        try:
            return await self.users.find_one({"_id": uid})
        except PyMongoError as e:
            logger.error("User profile lookup failed", user_id=uid, error=e, metadata={"event": "identity_provider_error"})
            raise IdentityProviderUnavailable("Failed to fetch user profile", error=e)


def build_identity_provider(settings: Config, database) -> IdentityProvider:
    """Create the identity provider selected by IDENTITY_PROVIDER"""
    provider = settings.identity_provider.lower()

    if provider == FirebaseIdentityProvider.name:
        return FirebaseIdentityProvider.from_credentials(
            settings.firebase_credentials,
            users_collection=settings.users_collection,
            check_revoked=settings.firebase_check_revoked,
        )

    if provider == JWTIdentityProvider.name:
        return JWTIdentityProvider(settings.jwt_secret, settings.jwt_algorithm, database.users)

    raise ValueError(f"Unsupported identity provider: {settings.identity_provider}")
