import logging
from typing import Annotated

import sqlalchemy
from fastapi import APIRouter, HTTPException, status, Depends
from snapformapi.models.user import (
    PasswordChangeIn,
    ProfileUpdateIn,
    Token,
    User,
    UserIn,
    UserRegisterIn,
)
from snapformapi.security import (
    authenticate_user,
    create_access_token,
    get_password_hash,
    get_user,
    get_user_by_id,
    get_current_user,
    verify_password,
)
from snapformapi.database import database, user_table

logger = logging.getLogger(__name__)
router = APIRouter()
profile_router = APIRouter()


@router.post("/register", status_code=201)
async def register(user: UserRegisterIn):
    if await get_user(user.email) is not None:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="A user with that email already exists",
        )
    query = user_table.insert().values(
        email=user.email,
        name=user.name,
        password_hash=get_password_hash(user.password),
    )

    logger.debug(query)

    user_id = await database.execute(query)
    return {"detail": "User created", "id": user_id}


@router.post("/token", response_model=Token, status_code=200)
async def login(user: UserIn):
    user = await authenticate_user(user.email, user.password)
    return {"access_token": create_access_token(user.id), "token_type": "bearer"}


@profile_router.get("", status_code=200)
async def get_profile(current_user: Annotated[User, Depends(get_current_user)]):
    user = await get_user_by_id(current_user.id)
    if user is None:
        raise HTTPException(status_code=404, detail="User not found")
    return {"user": {**user.model_dump(by_alias=True), "role": "user"}}


@profile_router.patch("/update", status_code=200)
async def update_profile(
    profile: ProfileUpdateIn,
    current_user: Annotated[User, Depends(get_current_user)],
):
    if profile.email != current_user.email:
        existing_user = await get_user(profile.email)
        if existing_user and existing_user.id != current_user.id:
            raise HTTPException(status_code=409, detail="Email already in use")

    query = (
        user_table.update()
        .where(user_table.c.id == current_user.id)
        .values(name=profile.name, email=profile.email, updated_at=sqlalchemy.func.now())
    )
    logger.debug(query)
    await database.execute(query)

    user = await get_user_by_id(current_user.id)
    return {
        "user": {**user.model_dump(by_alias=True), "role": "user"},
        "message": "Profile updated successfully",
    }


@profile_router.patch("/password", status_code=200)
async def change_password(
    passwords: PasswordChangeIn,
    current_user: Annotated[User, Depends(get_current_user)],
):
    if not verify_password(passwords.current_password, current_user.password_hash):
        raise HTTPException(status_code=400, detail="Current password is incorrect")

    query = (
        user_table.update()
        .where(user_table.c.id == current_user.id)
        .values(password_hash=get_password_hash(passwords.new_password), updated_at=sqlalchemy.func.now())
    )
    await database.execute(query)
    return {"message": "Password updated successfully"}
