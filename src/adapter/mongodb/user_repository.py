"""MongoDB implementation of UserRepository."""

import uuid
from datetime import datetime, timezone
from logging import getLogger

from pymongo import ReturnDocument
from pymongo.database import Database
from pymongo.errors import DuplicateKeyError, PyMongoError

from adapter.mongodb.connection import USERS_COLLECTION_NAME
from domain.model.errors import DuplicateUserError, StoreUnavailableError
from domain.model.user import User, UserProfile

logger = getLogger(__name__)

PROFILE_FIELDS = ('bio', 'location', 'website', 'date_of_birth')


class MongoUserRepository:
    def __init__(self, db: Database):
        self.collection = db[USERS_COLLECTION_NAME]

    def ensure_indexes(self) -> bool:
        """Create indexes for users collection."""
        from adapter.mongodb.indexes import create_index_safe

        try:
            # Phone and anonymous sign-ins have no email; only set emails must be unique
            create_index_safe(
                self.collection,
                [('email', 1)],
                'idx_users_email',
                unique=True,
                partialFilterExpression={'email': {'$type': 'string'}},
            )
            # Local accounts have no federated_id, so uniqueness only applies when set
            create_index_safe(
                self.collection,
                [('federated_id', 1)],
                'idx_users_federated_id',
                unique=True,
                partialFilterExpression={'federated_id': {'$type': 'string'}},
            )
            create_index_safe(self.collection, [('created_at', -1)], 'idx_users_created_at')
            return True
        except PyMongoError as e:
            logger.error("Failed to create users indexes", extra={"error": str(e)})
            return False

    def _to_domain(self, doc: dict) -> User:
        """Convert MongoDB document to User domain model."""
        profile = doc.get('profile') or {}
        return User(
            id=doc['_id'],
            display_name=doc['display_name'],
            email=doc.get('email'),
            created_at=doc['created_at'],
            updated_at=doc['updated_at'],
            last_login=doc.get('last_login'),
            password_hash=doc.get('password_hash'),
            provider=doc.get('provider', 'email'),
            federated_id=doc.get('federated_id'),
            photo_url=doc.get('photo_url'),
            email_verified=doc.get('email_verified', False),
            is_active=doc.get('is_active', True),
            profile=UserProfile(**{k: profile.get(k) for k in PROFILE_FIELDS}),
        )

    def _find_one(self, query: dict, log_context: dict) -> User | None:
        try:
            doc = self.collection.find_one(query)
        except PyMongoError as e:
            logger.error("Failed to look up user", extra={**log_context, "error": str(e)})
            raise StoreUnavailableError("User store unavailable") from e
        return self._to_domain(doc) if doc else None

    def create(
        self,
        email: str | None,
        display_name: str,
        password_hash: str | None = None,
        provider: str = 'email',
        federated_id: str | None = None,
        photo_url: str | None = None,
        email_verified: bool = False,
    ) -> User:
        """Create a new user and return the User object."""
        user_id = uuid.uuid4().hex
        now = datetime.now(timezone.utc)
        user_doc = {
            '_id': user_id,
            'display_name': display_name,
            'provider': provider,
            'photo_url': photo_url,
            'email_verified': email_verified,
            'is_active': True,
            'profile': {},
            'created_at': now,
            'updated_at': now,
        }
        # Absent rather than null so the partial unique indexes skip them
        if email is not None:
            user_doc['email'] = email
        if password_hash is not None:
            user_doc['password_hash'] = password_hash
        if federated_id is not None:
            user_doc['federated_id'] = federated_id

        try:
            self.collection.insert_one(user_doc)
        except DuplicateKeyError as e:
            logger.warning(
                "User creation failed: duplicate key",
                extra={"email": email, "federatedId": federated_id},
            )
            raise DuplicateUserError("User already exists") from e
        except PyMongoError as e:
            logger.error("Failed to create user", extra={"email": email, "error": str(e)})
            raise StoreUnavailableError("User store unavailable") from e

        logger.info("User created", extra={"userId": user_id, "email": email, "provider": provider})
        return self._to_domain(user_doc)

    def get_by_email(self, email: str) -> User | None:
        """Find a user by email. Return User or None if not found."""
        return self._find_one({'email': email}, {"email": email})

    def get_by_id(self, user_id: str) -> User | None:
        """Find a user by ID. Return User or None if not found."""
        return self._find_one({'_id': user_id}, {"userId": user_id})

    def get_by_federated_id(self, federated_id: str) -> User | None:
        return self._find_one({'federated_id': federated_id}, {"federatedId": federated_id})

    def update_profile(
        self,
        user_id: str,
        display_name: str | None = None,
        profile: UserProfile | None = None,
    ) -> User | None:
        """Apply allow-listed updates and return the updated user.

        Profile keys are set one by one (``profile.bio`` etc.) so that keys
        not present in the update keep their stored value.
        """
        now = datetime.now(timezone.utc)
        updates: dict = {'updated_at': now}
        if display_name is not None:
            updates['display_name'] = display_name
        if profile is not None:
            for key in PROFILE_FIELDS:
                value = getattr(profile, key)
                if value is not None:
                    updates[f'profile.{key}'] = value

        try:
            doc = self.collection.find_one_and_update(
                {'_id': user_id},
                {'$set': updates},
                return_document=ReturnDocument.AFTER,
            )
        except PyMongoError as e:
            logger.error("Failed to update user profile", extra={"userId": user_id, "error": str(e)})
            raise StoreUnavailableError("User store unavailable") from e

        if not doc:
            return None
        logger.info("User profile updated", extra={"userId": user_id, "fields": sorted(updates)})
        return self._to_domain(doc)

    def delete(self, user_id: str) -> bool:
        try:
            result = self.collection.delete_one({'_id': user_id})
        except PyMongoError as e:
            logger.error("Failed to delete user", extra={"userId": user_id, "error": str(e)})
            raise StoreUnavailableError("User store unavailable") from e
        return result.deleted_count > 0

    def update_last_login(self, user_id: str) -> datetime | None:
        """Update the last login timestamp for a user.

        A failed write is logged and reported as None; callers do not fail
        the login because of it.
        """
        try:
            now = datetime.now(timezone.utc)
            result = self.collection.update_one(
                {'_id': user_id},
                {'$set': {'last_login': now, 'updated_at': now}}
            )
            if result.matched_count > 0:
                logger.debug("Updated last_login", extra={"userId": user_id})
                return now
            return None
        except PyMongoError as e:
            logger.error("Failed to update last_login", extra={"userId": user_id, "error": str(e)})
            return None
