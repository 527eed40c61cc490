"""Eval config (settings page) endpoints."""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from evalpulse.auth.middleware import CurrentUserDep
from evalpulse.database import get_db
from evalpulse.schemas.config import EvalConfigOut, EvalConfigUpdate
from evalpulse.storage.repositories import get_config_for_user, update_config

logger = logging.getLogger(__name__)

router = APIRouter()


async def _require_config(db: AsyncSession, user_id: str):
    config = await get_config_for_user(db, user_id)
    if not config:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="No evaluation config found",
        )
    return config


@router.get("/config", response_model=EvalConfigOut)
async def get_config(
    user: CurrentUserDep,
    db: Annotated[AsyncSession, Depends(get_db)],
):
    return await _require_config(db, str(user.user_id))


@router.put("/config", response_model=EvalConfigOut)
async def put_config(
    body: EvalConfigUpdate,
    user: CurrentUserDep,
    db: Annotated[AsyncSession, Depends(get_db)],
):
    """Partial update. Configs are created at provisioning, never here."""
    config = await _require_config(db, str(user.user_id))
    changes = body.model_dump(exclude_none=True)
    if not changes:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail="No fields to update",
        )
    config = await update_config(db, config, changes)
    logger.info("Updated eval config for user %s: %s", user.user_id, sorted(changes))
    return config
