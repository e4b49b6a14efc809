"""
Request identity and project ownership.

Escriba does no authentication of its own: the fronting auth provider
forwards the signed-in user as ``X-User-Id`` (plus optional
``X-User-Email`` / ``X-User-Name``).  A local ``users`` row is created the
first time an id is seen so projects have an owner to reference.
"""
from __future__ import annotations

import logging
from typing import Optional

from fastapi import Depends, Header, HTTPException, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from escriba.database import get_db
from escriba.models.database_models import Project, User

logger = logging.getLogger(__name__)


async def get_current_user_id(
    x_user_id: str = Header(..., alias="X-User-Id"),
) -> str:
    """Caller's user id.  A missing header is a 422; a blank one is a 401."""
    user_id = x_user_id.strip()
    if not user_id:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Cabeçalho X-User-Id em branco.",
        )
    return user_id


async def get_or_create_user(
    user_id: str = Depends(get_current_user_id),
    x_user_email: Optional[str] = Header(None, alias="X-User-Email"),
    x_user_name: Optional[str] = Header(None, alias="X-User-Name"),
    db: AsyncSession = Depends(get_db),
) -> User:
    """
    Local user row for the caller, created on first sight.  The display
    name follows whatever the auth provider currently sends.
    """
    user = await db.get(User, user_id)

    if user is None:
        user = User(
            id=user_id,
            email=x_user_email or f"{user_id}@escriba.local",
            name=x_user_name,
        )
        db.add(user)
        await db.flush()
        logger.info("Registered user id=%s email=%s", user_id, user.email)
    elif x_user_name and x_user_name != user.name:
        user.name = x_user_name
        await db.flush()

    return user


async def get_authorized_project(
    project_id: int,
    user_id: str = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
) -> Project:
    """
    The project named in the path, if the caller owns it.

    Someone else's project is reported as missing (404).
    """
    project = (
        await db.execute(
            select(Project).where(Project.id == project_id, Project.user_id == user_id)
        )
    ).scalar_one_or_none()

    if project is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Projeto {project_id} não encontrado.",
        )
    return project
