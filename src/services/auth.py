"""Authentication service for JWT and password handling."""

import logging
from datetime import UTC, datetime, timedelta

from jose import JWTError, jwt
from passlib.context import CryptContext
from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from src.errors import AuthenticationError, ConflictError, NotFoundError
from src.models.post import Post
from src.models.user import User
from src.services.identity import RequestIdentity
from src.services.policy import can_mutate_profile, enforce

logger = logging.getLogger(__name__)

INVALID_CREDENTIALS = "Invalid email or password"


def normalize_email(email: str) -> str:
    """Emails are stored and compared lowercase."""
    return email.strip().lower()


class CredentialHasher:
    """One-way password hashing with per-call random salts (bcrypt)."""

    def __init__(self, rounds: int = 12):
        self.pwd_context = CryptContext(
            schemes=["bcrypt"], deprecated="auto", bcrypt__rounds=rounds
        )
        # Verified against when the email is unknown, so login timing does not
        # reveal whether an account exists.
        self._dummy_hash = self.pwd_context.hash("dummy-password-for-timing")

    def hash(self, password: str) -> str:
        """Hash a password."""
        return self.pwd_context.hash(password)

    def verify(self, plain_password: str, hashed_password: str | None) -> bool:
        """Verify a password against its hash. Malformed hashes never match."""
        if not hashed_password:
            return False
        try:
            return self.pwd_context.verify(plain_password, hashed_password)
        except (ValueError, TypeError):
            logger.warning("Stored password hash could not be identified")
            return False

    def verify_dummy(self, plain_password: str) -> bool:
        """Spend the same CPU as a real verification; always False."""
        self.pwd_context.verify(plain_password, self._dummy_hash)
        return False


class TokenService:
    """Issues and verifies signed, expiring bearer tokens."""

    def __init__(self, secret: str, algorithm: str = "HS256", expires_in: timedelta | None = None):
        if not secret:
            raise ValueError("A signing secret is required")
        self.secret = secret
        self.algorithm = algorithm
        self.expires_in = expires_in or timedelta(days=7)

    def issue(self, user_id: int, now: datetime | None = None) -> str:
        """Create a JWT access token for a user."""
        issued_at = now or datetime.now(UTC)
        to_encode = {
            "sub": str(user_id),
            "iat": issued_at,
            "exp": issued_at + self.expires_in,
        }
        return jwt.encode(to_encode, self.secret, algorithm=self.algorithm)

    def verify(self, token: str) -> int | None:
        """Return the subject user id, or None for any invalid token.

        Malformed tokens, bad signatures, expired tokens and bad subjects all
        collapse into None.
        """
        try:
            payload = jwt.decode(token, self.secret, algorithms=[self.algorithm])
        except JWTError:
            return None

        subject = payload.get("sub")
        if subject is None:
            return None
        try:
            return int(subject)
        except (TypeError, ValueError):
            return None


class AuthService:
    """Signup, login and profile operations over the user store."""

    def __init__(self, db: Session, hasher: CredentialHasher, tokens: TokenService):
        self.db = db
        self.hasher = hasher
        self.tokens = tokens

    def find_user_by_email(self, email: str) -> User | None:
        """Get a user by email."""
        return self.db.query(User).filter(User.email == normalize_email(email)).first()

    def find_user_by_id(self, user_id: int) -> User | None:
        return self.db.query(User).filter(User.id == user_id).first()

    def count_posts_by_author(self, user_id: int) -> int:
        count = self.db.query(func.count(Post.id)).filter(Post.author_id == user_id).scalar()
        return count or 0

    def create_user(self, email: str, name: str, password_hash: str) -> User:
        """Insert a user; the unique constraint on email decides conflicts."""
        user = User(email=normalize_email(email), name=name.strip(), password_hash=password_hash)
        self.db.add(user)
        try:
            self.db.commit()
        except IntegrityError as e:
            self.db.rollback()
            raise ConflictError("User with this email already exists") from e
        self.db.refresh(user)
        return user

    def signup(self, email: str, name: str, password: str) -> tuple[User, str]:
        """Register a user and return it with a fresh token."""
        # Fast path only; create_user still handles the race via the constraint
        if self.find_user_by_email(email):
            raise ConflictError("User with this email already exists")

        user = self.create_user(email, name, self.hasher.hash(password))
        logger.info(f"Created user {user.id}")
        return user, self.tokens.issue(user.id)

    def login(self, email: str, password: str) -> tuple[User, str]:
        """Authenticate by email and password.

        Unknown email and wrong password raise the same error.
        """
        user = self.find_user_by_email(email)
        if user is None:
            self.hasher.verify_dummy(password)
            raise AuthenticationError(INVALID_CREDENTIALS)
        if not self.hasher.verify(password, user.password_hash):
            logger.info(f"Failed login for user {user.id}")
            raise AuthenticationError(INVALID_CREDENTIALS)
        return user, self.tokens.issue(user.id)

    def get_profile(self, user_id: int) -> tuple[User, int]:
        """Return the user and their post count."""
        user = self.find_user_by_id(user_id)
        if user is None:
            raise NotFoundError("User not found")
        return user, self.count_posts_by_author(user.id)

    def update_profile(
        self,
        identity: RequestIdentity,
        user_id: int,
        name: str | None = None,
        email: str | None = None,
    ) -> User:
        """Update name and/or email; a new email must not belong to anyone else."""
        enforce(can_mutate_profile(user_id, identity))
        user = self.find_user_by_id(user_id)
        if user is None:
            raise NotFoundError("User not found")

        if email is not None:
            new_email = normalize_email(email)
            existing = self.find_user_by_email(new_email)
            if existing and existing.id != user.id:
                raise ConflictError("Email already in use")
            user.email = new_email
        if name is not None:
            user.name = name.strip()

        try:
            self.db.commit()
        except IntegrityError as e:
            self.db.rollback()
            raise ConflictError("Email already in use") from e
        self.db.refresh(user)
        return user

    def delete_account(self, identity: RequestIdentity, user_id: int) -> None:
        """Delete the user and, through the cascade, all of their posts."""
        enforce(can_mutate_profile(user_id, identity))
        user = self.find_user_by_id(user_id)
        if user is None:
            raise NotFoundError("User not found")
        self.db.delete(user)
        self.db.commit()
        logger.info(f"Deleted user {user_id} and their posts")
