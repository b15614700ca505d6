"""
Auth Service

Registration, login, admin login and admin bootstrap. Passwords are
hashed with bcrypt; identities are carried in HS256 JWTs whose payload is
{"user": {"id", "role"}}.

Usage:
    service = AuthService(db, jwt_secret=settings.jwt_secret)
    token = service.register("Ada", "ada@example.com", "secret1")
"""

import logging
from datetime import timedelta
from typing import Any, Dict, Optional

import bcrypt
import jwt
from pymongo.database import Database
from pymongo.errors import DuplicateKeyError

from src.common.database import USERS
from src.common.error_handling import (
    BadRequestError,
    ConfigurationError,
    NotFoundError,
    RequestValidationFailed,
)
from src.common.utils import maybe_object_id, utcnow

logger = logging.getLogger(__name__)

BCRYPT_ROUNDS = 10
JWT_ALGORITHM = "HS256"

USER_TOKEN_TTL = timedelta(days=5)
ADMIN_TOKEN_TTL = timedelta(days=1)


def hash_password(password: str) -> str:
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt(rounds=BCRYPT_ROUNDS)).decode("utf-8")


def check_password(password: str, hashed: Optional[str]) -> bool:
    """Compare a plaintext password against a stored bcrypt hash."""
    if not hashed:
        return False
    try:
        return bcrypt.checkpw(password.encode("utf-8"), hashed.encode("utf-8"))
    except ValueError:
        # Stored value is not a bcrypt hash
        logger.warning("Stored password hash is malformed")
        return False


def issue_token(user_id: str, role: str, secret: str, ttl: timedelta) -> str:
    """Sign a token embedding {id, role} that expires after ttl."""
    now = utcnow()
    payload = {
        "user": {"id": str(user_id), "role": role},
        "iat": now,
        "exp": now + ttl,
    }
    return jwt.encode(payload, secret, algorithm=JWT_ALGORITHM)


def decode_token(token: str, secret: str) -> Dict[str, str]:
    """
    Verify a token and return its {id, role} identity.

    Raises:
        jwt.InvalidTokenError: On bad signature, expiry or payload shape
    """
    payload = jwt.decode(token, secret, algorithms=[JWT_ALGORITHM])
    user = payload.get("user")
    if not isinstance(user, dict) or not user.get("id"):
        raise jwt.InvalidTokenError("Token payload has no user id")
    return {"id": str(user["id"]), "role": user.get("role") or "user"}


class AuthService:
    """
    Account operations over the users collection.

    Collections used:
        - users: unique index on email
    """

    def __init__(
        self,
        db: Database,
        jwt_secret: Optional[str],
        user_token_ttl: timedelta = USER_TOKEN_TTL,
        admin_token_ttl: timedelta = ADMIN_TOKEN_TTL,
    ):
        self.db = db
        self.users = db[USERS]
        self.jwt_secret = jwt_secret
        self.user_token_ttl = user_token_ttl
        self.admin_token_ttl = admin_token_ttl

    def _require_secret(self) -> str:
        if not self.jwt_secret:
            logger.error("JWT_SECRET is not configured; cannot issue tokens")
            raise ConfigurationError("Server configuration error")
        return self.jwt_secret

    def register(self, name: str, email: str, password: str) -> str:
        """
        Create a user account and return a signed token.

        Raises:
            RequestValidationFailed: If the email is already registered
        """
        secret = self._require_secret()

        if self.users.find_one({"email": email}, {"_id": 1}):
            raise RequestValidationFailed.single("User already exists")

        now = utcnow()
        user = {
            "name": name,
            "email": email,
            "password": hash_password(password),
            "role": "user",
            "date": now,
            "createdAt": now,
        }
        try:
            result = self.users.insert_one(user)
        except DuplicateKeyError:
            # Lost a race with a concurrent registration
            raise RequestValidationFailed.single("User already exists")

        logger.info(f"Registered user {result.inserted_id}")
        return issue_token(str(result.inserted_id), "user", secret, self.user_token_ttl)

    def login(self, email: str, password: str) -> str:
        """
        Verify credentials and return a signed token.

        Unknown email and wrong password produce the same error.
        """
        secret = self._require_secret()

        user = self.users.find_one({"email": email})
        if not user or not check_password(password, user.get("password")):
            raise RequestValidationFailed.single("Invalid Credentials")

        return issue_token(str(user["_id"]), user.get("role", "user"), secret, self.user_token_ttl)

    def admin_login(self, email: str, password: str) -> str:
        """Like login, restricted to admin accounts and with a shorter expiry."""
        secret = self._require_secret()

        admin = self.users.find_one({"email": email, "role": "admin"})
        if not admin or not check_password(password, admin.get("password")):
            raise BadRequestError("Invalid credentials")

        return issue_token(str(admin["_id"]), "admin", secret, self.admin_token_ttl)

    def get_profile(self, user_id: str) -> Dict[str, Any]:
        """Stored user without the password hash."""
        oid = maybe_object_id(user_id)
        user = self.users.find_one({"_id": oid}, {"password": 0}) if oid else None
        if not user:
            raise NotFoundError("User not found")
        return user

    def ensure_admin(self, email: Optional[str], password: Optional[str]) -> bool:
        """
        Create the bootstrap admin if no account uses its email.

        Runs as one atomic upsert. An existing account with the same email
        is left untouched whatever its role.

        Returns:
            True if an admin account was created
        """
        if not email or not password:
            logger.warning("ADMIN_ID/ADMIN_PASSWORD not set; skipping admin bootstrap")
            return False

        now = utcnow()
        result = self.users.update_one(
            {"email": email.strip().lower()},
            {"$setOnInsert": {
                "name": "Admin",
                "email": email.strip().lower(),
                "password": hash_password(password),
                "role": "admin",
                "date": now,
                "createdAt": now,
            }},
            upsert=True,
        )
        if result.upserted_id is not None:
            logger.info("Admin user created")
            return True
        logger.info("Admin user already exists")
        return False
