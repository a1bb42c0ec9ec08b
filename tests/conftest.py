"""Shared test fixtures"""
from types import SimpleNamespace
from typing import Any, Dict, Optional

import pytest
from bson import ObjectId
from fastapi.testclient import TestClient

from app.clients.identity_provider import IdentityProvider
from app.core.errors import InvalidCredential
from app.dependencies.auth import get_identity_verifier
from app.dependencies.product import get_product_repository
from app.repositories.product import ProductRepository
from app.services.identity import IdentityVerifier
from main import app


ADMIN_TOKEN = "admin-token"
USER_TOKEN = "user-token"
NO_PROFILE_TOKEN = "no-profile-token"


class FakeCursor:
    """Cursor over a snapshot of documents, mirroring Motor's find().sort().to_list()"""

    def __init__(self, docs):
        self.docs = docs

    def sort(self, key, direction):
        self.docs = sorted(self.docs, key=lambda doc: doc[key], reverse=direction < 0)
        return self

    async def to_list(self, length=None):
        return [dict(doc) for doc in self.docs]


class InMemoryCollection:
    """Products collection kept in a dict, recording every call made to it"""

    name = "products"

    def __init__(self):
        self.docs: Dict[ObjectId, dict] = {}
        self.calls = []

    def find(self, query):
        self.calls.append(("find", query))
        return FakeCursor(list(self.docs.values()))

    async def insert_one(self, doc):
        self.calls.append(("insert_one", doc))
        doc["_id"] = ObjectId()
        self.docs[doc["_id"]] = dict(doc)
        return SimpleNamespace(inserted_id=doc["_id"])

    async def delete_one(self, query):
        self.calls.append(("delete_one", query))
        removed = self.docs.pop(query["_id"], None)
        return SimpleNamespace(deleted_count=1 if removed else 0)


class FakeIdentityProvider(IdentityProvider):
    """Identity provider answering from fixed token and profile tables"""

    name = "fake"

    def __init__(self, tokens: Dict[str, str], profiles: Dict[str, Dict[str, Any]]):
        self.tokens = tokens
        self.profiles = profiles
        self.calls = []

    async def verify_token(self, token: str) -> Dict[str, Any]:
        self.calls.append(("verify_token", token))
        if token not in self.tokens:
            raise InvalidCredential("Decoding Firebase ID token failed")
        uid = self.tokens[token]
        return {"uid": uid, "sub": uid, "email": f"{uid}@example.com"}

    async def get_profile(self, uid: str) -> Optional[Dict[str, Any]]:
        self.calls.append(("get_profile", uid))
        return self.profiles.get(uid)


@pytest.fixture
def product_collection():
    """In-memory products collection"""
    return InMemoryCollection()


@pytest.fixture
def identity_provider():
    """Provider knowing an admin, a regular user and a user without profile"""
    return FakeIdentityProvider(
        tokens={
            ADMIN_TOKEN: "admin-uid",
            USER_TOKEN: "user-uid",
            NO_PROFILE_TOKEN: "ghost-uid",
        },
        profiles={
            "admin-uid": {"role": "admin", "name": "Ada"},
            "user-uid": {"role": "customer"},
        },
    )


@pytest.fixture
def client(product_collection, identity_provider):
    """TestClient wired to the in-memory store and fake identity provider"""
    verifier = IdentityVerifier(identity_provider, timeout=1.0)
    repository = ProductRepository(product_collection, timeout=1.0)

    app.dependency_overrides[get_identity_verifier] = lambda: verifier
    app.dependency_overrides[get_product_repository] = lambda: repository
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def admin_headers():
    return {"Authorization": f"Bearer {ADMIN_TOKEN}"}


@pytest.fixture
def user_headers():
    return {"Authorization": f"Bearer {USER_TOKEN}"}


@pytest.fixture
def pen():
    """Sample product payload"""
    return {
        "name": "Pen",
        "price": 2.5,
        "description": "Blue pen",
        "imageUrl": "http://x/img.png",
    }
