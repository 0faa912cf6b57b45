"""
Authentication for the Mood Journal service.

Accounts live in the key-value store next to the mood entries:
``user:<email>`` holds the account record (including its password hash) and
``user_id:<id>`` maps an id back to the email. Access tokens are HS256 JWTs
whose subject is the user id.
"""

import hashlib
import json
import logging
import uuid
from datetime import datetime, timedelta, timezone

import bcrypt
from email_validator import EmailNotValidError, validate_email
from jose import JWTError, jwt
from starlette.concurrency import run_in_threadpool

from .errors import Unauthorized, ValidationError
from .models import User
from .store import KeyValueStore

logger = logging.getLogger(__name__)


def _pre_hash_password(password: str) -> bytes:
    """SHA-256 the password first so bcrypt's 72-byte input limit never applies."""
    return hashlib.sha256(password.encode("utf-8")).digest()


def hash_password(password: str) -> str:
    return bcrypt.hashpw(_pre_hash_password(password), bcrypt.gensalt()).decode("utf-8")


def verify_password(password: str, hashed: str) -> bool:
    return bcrypt.checkpw(_pre_hash_password(password), hashed.encode("utf-8"))


class AuthProvider:
    """
    Issues and validates bearer tokens for user accounts.

    New accounts are confirmed immediately: the service has no email server
    to send a confirmation link through.
    """

    def __init__(
        self,
        store: KeyValueStore,
        secret_key: str,
        algorithm: str = "HS256",
        token_ttl: timedelta = timedelta(days=7),
    ) -> None:
        self._store = store
        self._secret_key = secret_key
        self._algorithm = algorithm
        self._token_ttl = token_ttl

    async def create_user(self, email: str, password: str, name: str = "") -> User:
        """
        Register a new account.

        Raises:
            ValidationError: If email or password is empty, the email is
                malformed, or the email is taken
        """
        email = (email or "").strip().lower()
        if not email or not password:
            raise ValidationError("Email and password are required")
        try:
            validate_email(email, check_deliverability=False)
        except EmailNotValidError as e:
            raise ValidationError(f"Invalid email address: {e}")

        if await self._store.get(f"user:{email}") is not None:
            raise ValidationError(
                "A user with this email address has already been registered"
            )

        now = datetime.now(timezone.utc)
        user = User(
            id=str(uuid.uuid4()),
            email=email,
            name=name or "",
            created_at=now,
            email_confirmed_at=now,
        )
        record = user.model_dump(mode="json")
        record["password_hash"] = await run_in_threadpool(hash_password, password)

        await self._store.set(f"user:{email}", json.dumps(record))
        await self._store.set(f"user_id:{user.id}", email)
        logger.info("Registered user %s", user.id)
        return user

    async def sign_in(self, email: str, password: str) -> tuple[str, User]:
        """
        Check a password and issue an access token.

        Returns:
            The access token and the signed-in user

        Raises:
            Unauthorized: On an unknown email or a wrong password
        """
        record = await self._load_record((email or "").strip().lower())
        valid = record is not None and await run_in_threadpool(
            verify_password, password or "", record["password_hash"]
        )
        if not valid:
            logger.warning("Failed sign-in attempt")
            raise Unauthorized("Invalid login credentials")

        user = User.model_validate(record)
        return self.issue_token(user), user

    def issue_token(self, user: User) -> str:
        expire = datetime.now(timezone.utc) + self._token_ttl
        claims = {"sub": user.id, "email": user.email, "exp": expire}
        return jwt.encode(claims, self._secret_key, algorithm=self._algorithm)

    async def get_user(self, token: str | None) -> User:
        """
        Resolve a bearer token to its user.

        Raises:
            Unauthorized: If the token is missing, invalid, expired, or names
                an unknown user
        """
        if not token:
            raise Unauthorized("Unauthorized")
        try:
            claims = jwt.decode(token, self._secret_key, algorithms=[self._algorithm])
        except JWTError:
            raise Unauthorized("Unauthorized")

        user_id = claims.get("sub")
        email = await self._store.get(f"user_id:{user_id}") if user_id else None
        record = await self._load_record(email) if email else None
        if record is None:
            raise Unauthorized("Unauthorized")
        return User.model_validate(record)

    async def _load_record(self, email: str) -> dict | None:
        raw = await self._store.get(f"user:{email}")
        return json.loads(raw) if raw else None
