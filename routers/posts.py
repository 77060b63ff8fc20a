import logging
from functools import partial
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException
from google.cloud import storage
from pymongo.asynchronous.database import AsyncDatabase

from dependencies import get_database, get_gcs_client, get_static_paths
from domain.errors import PostNotFound
from domain.posts import PostDetail, PostSlugs, PostSummary
from paths import StaticPaths
from services import content_queries

logger = logging.getLogger('uvicorn.error')

router = APIRouter(
    prefix="/posts",
    tags=["posts"]
)


@router.get("/", response_model=List[PostSummary])
async def get_all_posts(
    db: AsyncDatabase = Depends(get_database),
    gcs: Optional[storage.Client] = Depends(get_gcs_client),
):
    try:
        return await content_queries.list_posts(db, gcs)
    except Exception as e:
        logger.exception(f"Error retrieving post listing: {e}")
        raise HTTPException(status_code=500, detail="Internal server error while fetching posts")


@router.get("/slugs", response_model=PostSlugs)
async def get_post_slugs(
    db: AsyncDatabase = Depends(get_database),
    paths: StaticPaths = Depends(get_static_paths),
):
    try:
        slugs = await content_queries.list_post_slugs(db)
    except Exception as e:
        logger.exception(f"Error enumerating post slugs: {e}")
        raise HTTPException(status_code=500, detail="Internal server error while fetching post slugs")
    paths.replace(slugs)
    return PostSlugs(slugs=slugs)


@router.get("/{slug}", response_model=PostDetail)
async def get_post_by_slug(
    slug: str,
    db: AsyncDatabase = Depends(get_database),
    gcs: Optional[storage.Client] = Depends(get_gcs_client),
    paths: StaticPaths = Depends(get_static_paths),
):
    try:
        return await paths.resolve(slug, partial(content_queries.get_post_by_slug, db, gcs=gcs))
    except PostNotFound:
        raise HTTPException(status_code=404, detail=f"Post with slug {slug} not found")
    except HTTPException as http_exc:
        raise http_exc
    except Exception as e:
        logger.exception(f"Error retrieving post {slug}: {e}")
        raise HTTPException(status_code=500, detail="Internal server error while fetching post")
