"""
User accounts and the current-user session.

The session is the single "currentUser" record in the store, mirroring a
one-tab client: whoever logged in last is the acting user.
"""

import logging
from typing import List, Optional

from barter_exchange.common import generate_id, utcnow
from barter_exchange.error_handling.errors import (
    DuplicateUserError,
    InvalidCredentialsError,
    NotAuthenticatedError,
    UserNotFoundError,
)
from barter_exchange.models import LoginData, ProfileUpdate, SignupData, StoredUser, User
from barter_exchange.store import KeyValueStore, load_model, load_model_list, save_model, save_model_list
from barter_exchange.store.records import CURRENT_USER_KEY, USERS_KEY
from barter_exchange.trust import TrustScoreEngine

logger = logging.getLogger(__name__)


class UserDirectory:
    """Signup, login and profile management"""

    def __init__(self, store: KeyValueStore, trust_engine: Optional[TrustScoreEngine] = None):
        self.store = store
        self.trust_engine = trust_engine or TrustScoreEngine(store)

    def _users(self) -> List[StoredUser]:
        return load_model_list(self.store, USERS_KEY, StoredUser)

    def signup(self, data: SignupData) -> User:
        """
        Register a user and make them the current user.

        Raises:
            DuplicateUserError: If the email is already registered
        """
        users = self._users()
        email = data.email.strip().lower()
        if any(u.email.lower() == email for u in users):
            raise DuplicateUserError(f"User with email {email} already exists")

        stored = StoredUser(
            id=generate_id(),
            email=email,
            name=data.name,
            password=data.password,
            created_at=utcnow(),
        )
        users.append(stored)
        save_model_list(self.store, USERS_KEY, users)

        user = stored.public()
        save_model(self.store, CURRENT_USER_KEY, user)
        # Materialize default stats so the new user shows up with a score
        self.trust_engine.stats.get_stats(user.id)

        logger.info(f"Signed up user {user.id}")
        return user

    def login(self, data: LoginData) -> User:
        """
        Make the matching user current.

        Raises:
            InvalidCredentialsError: If no user matches email and password
        """
        email = data.email.strip().lower()
        for stored in self._users():
            if stored.email.lower() == email and stored.password == data.password:
                user = stored.public()
                save_model(self.store, CURRENT_USER_KEY, user)
                logger.info(f"User {user.id} logged in")
                return user
        raise InvalidCredentialsError("Invalid email or password")

    def logout(self) -> None:
        self.store.delete_record(CURRENT_USER_KEY)

    def current_user(self) -> Optional[User]:
        return load_model(self.store, CURRENT_USER_KEY, User)

    def require_current_user(self) -> User:
        user = self.current_user()
        if user is None:
            raise NotAuthenticatedError("Not authenticated")
        return user

    def find_user(self, user_id: str) -> Optional[User]:
        for stored in self._users():
            if stored.id == user_id:
                return stored.public()
        return None

    def user_by_id(self, user_id: str) -> User:
        user = self.find_user(user_id)
        if user is None:
            raise UserNotFoundError(user_id)
        return user

    def complete_profile(self, user_id: str, profile: ProfileUpdate) -> User:
        """
        Fill in profile fields and mark the profile complete.

        A phone number marks the phone verification; an address together
        with a city marks the address verification.

        Raises:
            UserNotFoundError: If user_id is unknown
        """
        users = self._users()
        for index, stored in enumerate(users):
            if stored.id == user_id:
                break
        else:
            raise UserNotFoundError(user_id)

        changes = profile.model_dump(exclude_unset=True)
        updated = stored.model_copy(update={**changes, "is_profile_complete": True})
        users[index] = updated
        save_model_list(self.store, USERS_KEY, users)

        user = updated.public()
        current = self.current_user()
        if current is not None and current.id == user_id:
            save_model(self.store, CURRENT_USER_KEY, user)

        if profile.phone:
            self.trust_engine.set_verification(user_id, "phone", True)
        if profile.address and profile.city:
            self.trust_engine.set_verification(user_id, "address", True)

        logger.info(f"Completed profile for user {user_id}")
        return user
