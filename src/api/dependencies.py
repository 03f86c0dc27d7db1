from fastapi import HTTPException

from adapter.identity.firebase import FirebaseIdentityVerifier
from adapter.identity.firebase_app import get_firebase_app
from adapter.mongodb.connection import get_mongodb_client, DATABASE_NAME
from adapter.mongodb.user_repository import MongoUserRepository
from port.identity_verifier import IdentityTokenVerifier
from port.user_repository import UserRepository


def _get_db():
    """Get MongoDB database, raising 503 if unavailable."""
    client = get_mongodb_client()
    if client is None:
        raise HTTPException(status_code=503, detail="Database unavailable")
    return client[DATABASE_NAME]


def get_user_repo() -> UserRepository:
    return MongoUserRepository(_get_db())


def get_identity_verifier() -> IdentityTokenVerifier:
    return FirebaseIdentityVerifier(get_firebase_app())
