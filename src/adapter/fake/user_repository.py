"""In-memory implementation of UserRepository for testing."""

import threading
import uuid
from dataclasses import fields, replace
from datetime import datetime, timezone

from domain.model.errors import DuplicateUserError
from domain.model.user import User, UserProfile


class FakeUserRepository:
    def __init__(self):
        self.store: dict[str, User] = {}
        self._lock = threading.Lock()

    # ── write operations ─────────────────────────────────────

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
        # Mirrors the unique indexes on email and federated_id
        with self._lock:
            for u in self.store.values():
                if (email and u.email == email) or (federated_id and u.federated_id == federated_id):
                    raise DuplicateUserError("User already exists")

            user_id = uuid.uuid4().hex
            now = datetime.now(timezone.utc)
            user = User(
                id=user_id,
                display_name=display_name,
                email=email,
                created_at=now,
                updated_at=now,
                password_hash=password_hash,
                provider=provider,
                federated_id=federated_id,
                photo_url=photo_url,
                email_verified=email_verified,
            )
            self.store[user_id] = user
            return user

    def update_profile(
        self,
        user_id: str,
        display_name: str | None = None,
        profile: UserProfile | None = None,
    ) -> User | None:
        user = self.store.get(user_id)
        if not user:
            return None

        if display_name is not None:
            user.display_name = display_name
        if profile is not None:
            changes = {
                f.name: getattr(profile, f.name)
                for f in fields(UserProfile)
                if getattr(profile, f.name) is not None
            }
            user.profile = replace(user.profile, **changes)
        user.updated_at = datetime.now(timezone.utc)
        return user

    def delete(self, user_id: str) -> bool:
        return self.store.pop(user_id, None) is not None

    def update_last_login(self, user_id: str) -> datetime | None:
        user = self.store.get(user_id)
        if not user:
            return None

        now = datetime.now(timezone.utc)
        user.last_login = now
        user.updated_at = now
        return now

    # ── read operations ──────────────────────────────────────

    def get_by_email(self, email: str) -> User | None:
        for user in self.store.values():
            if email and user.email == email:
                return user
        return None

    def get_by_id(self, user_id: str) -> User | None:
        return self.store.get(user_id)

    def get_by_federated_id(self, federated_id: str) -> User | None:
        for user in self.store.values():
            if user.federated_id == federated_id:
                return user
        return None
