import logging
from typing import Any, Dict, Iterable, List, Optional

from google.cloud import storage
from pymongo import DESCENDING
from pymongo.asynchronous.database import AsyncDatabase

import config
from domain.comments import Comment, ModerationStatus, PublicComment, VISIBLE_STATUSES
from domain.errors import PostNotFound
from domain.posts import AuthorSummary, PostDetail, PostSummary
from services.images import image_url

logger = logging.getLogger('uvicorn.error')

UNKNOWN_AUTHOR = "Unknown author"

# Only what the listing shows; bodies can be large
SUMMARY_PROJECTION = {"title": 1, "description": 1, "slug": 1, "author": 1, "mainImage": 1, "createdAt": 1}


async def _fetch_authors(
    db: AsyncDatabase,
    author_ids: Iterable[Any],
    gcs: Optional[storage.Client] = None,
) -> Dict[str, AuthorSummary]:
    unique_ids = list({str(author_id): author_id for author_id in author_ids if author_id}.values())
    if not unique_ids:
        return {}
    authors = {}
    async for doc in db[config.AUTHORS_COLLECTION].find({"_id": {"$in": unique_ids}}, {"name": 1, "image": 1}):
        authors[str(doc["_id"])] = AuthorSummary(
            name=doc.get("name") or UNKNOWN_AUTHOR,
            imageUrl=image_url(gcs, doc.get("image")),
        )
    missing = {str(author_id) for author_id in unique_ids} - authors.keys()
    if missing:
        logger.warning(f"Author documents referenced by posts do not exist: {sorted(missing)}")
    return authors


def _summary_fields(
    doc: Dict[str, Any],
    authors: Dict[str, AuthorSummary],
    gcs: Optional[storage.Client],
) -> Dict[str, Any]:
    return {
        "id": str(doc["_id"]),
        "title": doc["title"],
        "description": doc.get("description", ""),
        "slug": doc["slug"],
        "author": authors.get(str(doc.get("author")), AuthorSummary(name=UNKNOWN_AUTHOR)),
        "mainImageUrl": image_url(gcs, doc.get("mainImage")),
    }


async def list_posts(db: AsyncDatabase, gcs: Optional[storage.Client] = None) -> List[PostSummary]:
    """All posts, newest first, each with a summary of its author."""
    post_docs = [
        doc async for doc in db[config.POSTS_COLLECTION].find({}, SUMMARY_PROJECTION).sort("createdAt", DESCENDING)
    ]
    authors = await _fetch_authors(db, (doc.get("author") for doc in post_docs), gcs)

    summaries = []
    for doc in post_docs:
        try:
            summaries.append(PostSummary(**_summary_fields(doc, authors, gcs)))
        except Exception as validation_error:
            logger.error(f"Data validation error for post doc {doc.get('_id')}: {validation_error}. Data: {doc}")
            continue
    return summaries


async def list_post_slugs(db: AsyncDatabase) -> List[str]:
    slugs = []
    async for doc in db[config.POSTS_COLLECTION].find({}, {"slug": 1}):
        if doc.get("slug"):
            slugs.append(doc["slug"])
        else:
            logger.error(f"Post doc {doc['_id']} has no slug; it cannot be routed to.")
    return slugs


async def get_approved_comments(db: AsyncDatabase, post_id: Any) -> List[PublicComment]:
    """
    Comments on ``post_id`` that a moderator has approved.

    ``post_id`` is the post's ``_id`` as stored, which is also the form
    comments reference it by. The approval filter is part of the store query so unapproved comments are
    never read into this process. Order is whatever the store returns.
    """
    comments_filter = {
        "post": post_id,
        "approved": ModerationStatus.APPROVED.approved_flag,
    }
    approved = []
    async for doc in db[config.COMMENTS_COLLECTION].find(comments_filter, {"email": 0}):
        try:
            comment = Comment.from_document(doc)
        except Exception as validation_error:
            logger.error(f"Data validation error for comment {doc.get('_id')} on post {post_id}: {validation_error}")
            continue
        if comment.post_id != str(post_id) or comment.status not in VISIBLE_STATUSES:
            logger.error(f"Store returned comment {comment.id} outside the approved filter for post {post_id}; dropped.")
            continue
        approved.append(PublicComment.from_comment(comment))
    return approved


async def get_post_by_slug(
    db: AsyncDatabase,
    slug: str,
    gcs: Optional[storage.Client] = None,
) -> PostDetail:
    doc = await db[config.POSTS_COLLECTION].find_one({"slug": slug})
    if doc is None:
        logger.warning(f"Post document with slug {slug} not found.")
        raise PostNotFound(slug)

    authors = await _fetch_authors(db, [doc.get("author")], gcs)
    comments = await get_approved_comments(db, doc["_id"])
    return PostDetail(
        **_summary_fields(doc, authors, gcs),
        created_at=doc.get("createdAt"),
        body=doc.get("body") or [],
        comments=comments,
    )
