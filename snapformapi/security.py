import datetime
import logging
from typing import Annotated, Literal, Optional

from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer
from jose import ExpiredSignatureError, JWTError, jwt
from passlib.context import CryptContext
from snapformapi.config import config
from snapformapi.database import as_dict, database, user_table
from snapformapi.models.user import User
logging.getLogger('passlib').setLevel(logging.ERROR)
logger = logging.getLogger(__name__)

ALGORITHM = "HS256"
TokenType = Literal["access"]

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/auth/token")
# same scheme, but anonymous callers get None instead of a 401
optional_oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/auth/token", auto_error=False)
pwd_context = CryptContext(schemes=["bcrypt"])


def credentials_exception(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def create_access_token(user_id: int) -> str:
    logger.debug("Issuing access token", extra={"user_id": user_id})
    now = datetime.datetime.now(datetime.timezone.utc)
    claims = {
        "sub": str(user_id),
        "type": "access",
        "exp": now + datetime.timedelta(minutes=config.ACCESS_TOKEN_EXPIRE_MINUTES),
    }
    return jwt.encode(claims, key=config.SECRET_KEY, algorithm=ALGORITHM)


def get_subject_for_token_type(token: str, type: TokenType) -> str:
    try:
        claims = jwt.decode(token, config.SECRET_KEY, algorithms=[ALGORITHM])
    except ExpiredSignatureError as e:
        raise credentials_exception("Token has expired") from e
    except JWTError as e:
        raise credentials_exception("Invalid token") from e

    subject = claims.get("sub")
    if subject is None:
        raise credentials_exception("Token is missing 'sub' field")
    if claims.get("type") != type:
        raise credentials_exception(f"Token has incorrect type, expected '{type}'")
    return subject


def get_password_hash(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: Optional[str]) -> bool:
    # accounts without a hash (the seeded system user) never match
    if not hashed_password:
        return False
    return pwd_context.verify(plain_password, hashed_password)


async def _fetch_user(condition) -> Optional[User]:
    row = await database.fetch_one(user_table.select().where(condition))
    return User(**as_dict(row, user_table)) if row else None


async def get_user(email: str) -> Optional[User]:
    return await _fetch_user(user_table.c.email == email)


async def get_user_by_id(user_id: int) -> Optional[User]:
    return await _fetch_user(user_table.c.id == user_id)


async def authenticate_user(email: str, password: str) -> User:
    logger.debug("Authenticating user", extra={"email": email})
    user = await get_user(email)
    if user is None or not verify_password(password, user.password_hash):
        raise credentials_exception("Invalid email or password")
    return user


async def get_current_user(token: Annotated[str, Depends(oauth2_scheme)]) -> User:
    subject = get_subject_for_token_type(token, "access")
    if not subject.isdigit():
        raise credentials_exception("Invalid token")
    user = await get_user_by_id(int(subject))
    if user is None:
        raise credentials_exception("Could not find user for this token")
    return user


async def get_optional_user(
    token: Annotated[Optional[str], Depends(optional_oauth2_scheme)]
) -> Optional[User]:
    if not token:
        return None
    return await get_current_user(token)
