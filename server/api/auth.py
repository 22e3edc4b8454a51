# server/api/auth.py

import logging
from pydantic import BaseModel
from fastapi import APIRouter, HTTPException, Request, status, Depends
from fastapi.responses import JSONResponse
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.orm import Session

from config import Settings
from core import identity
from core.errors import AuctionHouseError, NotFoundError
from core.security import decode_access_token
from database import get_db


logger = logging.getLogger("auction.api")

router = APIRouter()


class SignupRequest(BaseModel):
    username: str
    email: str
    password: str


class SigninRequest(BaseModel):
    email: str
    password: str


class User(BaseModel):
    userId: str


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


# -------------------------------
# Token Verification
# -------------------------------

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="signin", auto_error=False)

def get_current_user(
    token: str | None = Depends(oauth2_scheme),
    settings: Settings = Depends(get_settings)
) -> str:
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"}
    )
    if not token:
        raise credentials_exception
    user_id = decode_access_token(token, settings.jwt_secret_key, settings.algorithm)
    if user_id is None:
        raise credentials_exception
    return user_id


def require_auth_if_enabled(
    token: str | None = Depends(oauth2_scheme),
    settings: Settings = Depends(get_settings)
) -> str | None:
    """
    Guards mutating endpoints when REQUIRE_AUTH is on; a no-op otherwise.
    """
    if not settings.require_auth:
        return None
    return get_current_user(token, settings)


# -------------------------------
# Authentication Endpoints
# -------------------------------

@router.post("/signup", status_code=status.HTTP_201_CREATED)
def signup(req: SignupRequest, db: Session = Depends(get_db)):
    try:
        identity.signup(db, req.username, req.email, req.password)
        return {"message": "User created successfully"}
    except AuctionHouseError as e:
        return JSONResponse(status_code=e.status_code, content={"message": e.message})
    except Exception as e:
        logger.exception("Signup failed")
        return JSONResponse(status_code=500, content={"message": "Error creating user", "error": str(e)})


@router.post("/signin")
def signin(req: SigninRequest, db: Session = Depends(get_db), settings: Settings = Depends(get_settings)):
    try:
        token = identity.signin(db, settings, req.email, req.password)
        return {"message": "Signin successful", "token": token}
    except NotFoundError as e:
        # Unknown email is reported as a bad request, not a missing resource
        return JSONResponse(status_code=400, content={"message": e.message})
    except AuctionHouseError as e:
        return JSONResponse(status_code=e.status_code, content={"message": e.message})
    except Exception as e:
        logger.exception("Signin failed")
        return JSONResponse(status_code=500, content={"message": "Error signing in", "error": str(e)})


@router.get("/users/me", response_model=User)
def read_users_me(current_user: str = Depends(get_current_user)):
    return {"userId": current_user}
