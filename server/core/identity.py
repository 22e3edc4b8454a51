# server/core/identity.py

import logging
from datetime import timedelta
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from config import Settings
from core.errors import ConflictError, InvalidCredentialsError, NotFoundError
from core.security import create_access_token, get_password_hash, verify_password
from models.user import User


logger = logging.getLogger("auction.identity")


def find_user_by_email(db: Session, email: str) -> User | None:
    return db.query(User).filter(User.email == email).first()


def signup(db: Session, username: str, email: str, password: str) -> User:
    """
    Registers a new user, storing only a bcrypt hash of the password.
    Raises ConflictError when the email is already taken.
    """
    if find_user_by_email(db, email):
        raise ConflictError("User already exists")

    new_user = User(username=username, email=email, hashed_password=get_password_hash(password))
    db.add(new_user)
    try:
        db.commit()
    except IntegrityError:
        # Lost a race with a concurrent signup for the same email
        db.rollback()
        raise ConflictError("User already exists")

    logger.info("Registered user id=%s", new_user.id)
    return new_user


def signin(db: Session, settings: Settings, email: str, password: str) -> str:
    """
    Checks the credentials and returns a signed token whose subject is the user id.
    """
    user = find_user_by_email(db, email)
    if not user:
        raise NotFoundError("User not found")
    if not verify_password(password, user.hashed_password):
        raise InvalidCredentialsError("Invalid credentials")

    logger.debug("Issuing token for user id=%s", user.id)
    return create_access_token(
        data={"sub": str(user.id)},
        secret_key=settings.jwt_secret_key,
        algorithm=settings.algorithm,
        expires_delta=timedelta(minutes=settings.access_token_expire_minutes)
    )
