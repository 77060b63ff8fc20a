import logging
from typing import Optional

from fastapi import Depends, HTTPException, Request
from google.cloud import storage
from pymongo.asynchronous.database import AsyncDatabase

import config
from paths import StaticPaths
from services.comment_submission import CommentSubmissionService

logger = logging.getLogger('uvicorn.error')


async def get_database(request: Request) -> AsyncDatabase:
    if not hasattr(request.app.state, 'db') or request.app.state.db is None:
        logger.error("Database client not initialized or unavailable.")
        raise HTTPException(status_code=503, detail="Database service unavailable")
    return request.app.state.db


async def get_gcs_client(request: Request) -> Optional[storage.Client]:
    # Pages still render without images when storage is unavailable
    gcs_client = getattr(request.app.state, 'gcs_client', None)
    if gcs_client is None:
        logger.debug("GCS client not initialized; image URLs will be omitted.")
    return gcs_client


async def get_static_paths(request: Request) -> StaticPaths:
    if getattr(request.app.state, 'paths', None) is None:
        request.app.state.paths = StaticPaths(fallback=config.PATHS_FALLBACK)
    return request.app.state.paths


async def get_comment_service(
    db: AsyncDatabase = Depends(get_database),
) -> CommentSubmissionService:
    return CommentSubmissionService(db)
