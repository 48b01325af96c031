"""Authentication service for password hashing and the user credential store."""

from datetime import datetime
from typing import Optional
import bcrypt
from bson import ObjectId
from bson.errors import InvalidId
from pymongo import ReturnDocument
from pymongo.errors import DuplicateKeyError

from config.logging_utils import log_debug, log_error
from models.preferences import WebsitePreferences
from models.user import check_password


DEFAULT_BCRYPT_ROUNDS = 10


class CredentialStoreError(Exception):
    """Base exception for credential store errors."""
    pass


class DuplicateEmailError(CredentialStoreError):
    """Raised when registering an email that already exists."""
    pass


class CredentialValidationError(CredentialStoreError):
    """Raised when an email or password fails the store's own checks."""
    pass


def hash_password(password: str, rounds: int = DEFAULT_BCRYPT_ROUNDS) -> str:
    """Hash a password using bcrypt."""
    password_bytes = password.encode('utf-8')
    salt = bcrypt.gensalt(rounds=rounds)
    hashed = bcrypt.hashpw(password_bytes, salt)
    return hashed.decode('utf-8')


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a password against its hash."""
    password_bytes = plain_password.encode('utf-8')
    hashed_bytes = hashed_password.encode('utf-8')
    try:
        return bcrypt.checkpw(password_bytes, hashed_bytes)
    except ValueError:
        # Over-long candidate or a corrupt stored hash never matches.
        return False


def normalize_email(email: str) -> str:
    return email.strip().lower()


def _object_id(user_id: str) -> Optional[ObjectId]:
    try:
        return ObjectId(user_id)
    except (InvalidId, TypeError):
        return None


class UserStore:
    """Persists users with salted password hashes in the users collection."""

    def __init__(self, collection, bcrypt_rounds: int = DEFAULT_BCRYPT_ROUNDS):
        self.collection = collection
        self.bcrypt_rounds = bcrypt_rounds

    async def create_indexes(self) -> None:
        """Create unique index on email field for fast lookups."""
        await self.collection.create_index("email", unique=True)

    async def find_by_email(self, email: str) -> Optional[dict]:
        """Get a user from database by email."""
        return await self.collection.find_one({"email": normalize_email(email)})

    async def get_by_id(self, user_id: str) -> Optional[dict]:
        """Get a user from database by ID."""
        oid = _object_id(user_id)
        if oid is None:
            return None
        return await self.collection.find_one({"_id": oid})

    async def create(
        self,
        email: str,
        password: str,
        preferences: Optional[WebsitePreferences] = None
    ) -> dict:
        """
        Create a new user in the database.

        The plaintext password is hashed before the document is built; only the
        hash is stored. Raises DuplicateEmailError if the email is taken and
        CredentialValidationError if the email or password is unusable.
        """
        email = normalize_email(email)
        if not email:
            raise CredentialValidationError("Email is required")
        try:
            check_password(password)
        except ValueError as e:
            raise CredentialValidationError(str(e))

        if await self.find_by_email(email):
            raise DuplicateEmailError("User already exists")

        now = datetime.utcnow()
        user_doc = {
            "email": email,
            "password_hash": hash_password(password, self.bcrypt_rounds),
            "website_preferences": (preferences or WebsitePreferences()).model_dump(),
            "description": None,
            "created_at": now,
            "updated_at": now
        }

        try:
            result = await self.collection.insert_one(user_doc)
        except DuplicateKeyError:
            # Lost a race with a concurrent registration for the same email.
            raise DuplicateEmailError("User already exists")

        user_doc["_id"] = result.inserted_id
        log_debug(f"Created user id={result.inserted_id}", prefix="USER")
        return user_doc

    def verify_password(self, user: dict, password: str) -> bool:
        """Check a plaintext password against the user's stored hash."""
        hashed = user.get("password_hash")
        if not hashed:
            log_error(f"User id={user.get('_id')} has no password hash", prefix="USER")
            return False
        return verify_password(password, hashed)

    async def authenticate(self, email: str, password: str) -> Optional[dict]:
        """Authenticate a user with email and password."""
        user = await self.find_by_email(email)
        if not user:
            return None
        if not self.verify_password(user, password):
            return None
        return user

    async def _update(self, user_id: str, fields: dict) -> Optional[dict]:
        oid = _object_id(user_id)
        if oid is None:
            return None
        fields["updated_at"] = datetime.utcnow()
        return await self.collection.find_one_and_update(
            {"_id": oid},
            {"$set": fields},
            return_document=ReturnDocument.AFTER
        )

    async def update_preferences(self, user_id: str, preferences: dict) -> Optional[dict]:
        """Overwrite only the supplied preference fields and return the updated user."""
        fields = {f"website_preferences.{key}": value for key, value in preferences.items()}
        return await self._update(user_id, fields)

    async def update_description(self, user_id: str, description: str) -> Optional[dict]:
        """Set the profile description and return the updated user."""
        return await self._update(user_id, {"description": description})

    async def change_password(self, user_id: str, new_password: str) -> bool:
        """Hash and store a new password. Returns False if the user does not exist."""
        try:
            check_password(new_password)
        except ValueError as e:
            raise CredentialValidationError(str(e))
        updated = await self._update(
            user_id,
            {"password_hash": hash_password(new_password, self.bcrypt_rounds)}
        )
        return updated is not None
