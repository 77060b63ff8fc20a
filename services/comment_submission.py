import asyncio
import datetime
import logging
from typing import Any

from pymongo.asynchronous.database import AsyncDatabase

import config
from database import document_id_candidates
from domain.comments import ModerationStatus, SubmissionReceipt
from domain.errors import SubmissionInvalid, WriteFailed

logger = logging.getLogger('uvicorn.error')


class CommentSubmissionService:
    """
    Persists reader comments in an unapproved state.

    Each call is a single insert; nothing is retried, queued or deduplicated.
    Resubmitting after a failure creates a new comment. Approval happens
    outside this service, directly against the store.
    """

    def __init__(self, db: AsyncDatabase, timeout: float = config.COMMENT_WRITE_TIMEOUT_SECONDS):
        self.db = db
        self.timeout = timeout

    @staticmethod
    def build_document(post_ref: Any, name: str, email: str, comment: str) -> dict:
        return {
            "post": post_ref,
            "name": name,
            "email": email,
            "comment": comment,
            "approved": ModerationStatus.UNAPPROVED.approved_flag,
            "createdAt": datetime.datetime.now(datetime.timezone.utc),
        }

    async def _stored_post_ref(self, post_id: str) -> Any:
        # The reference must have the same type as the post's own _id
        post = await self.db[config.POSTS_COLLECTION].find_one(
            {"_id": {"$in": document_id_candidates(post_id)}}, {"_id": 1}
        )
        if post is None:
            # Existence is the store's concern; keep the id as received
            logger.warning(f"Comment submitted for unknown post '{post_id}'")
            return post_id
        return post["_id"]

    async def _write(self, post_id: str, name: str, email: str, comment: str):
        post_ref = await self._stored_post_ref(post_id)
        comment_doc = self.build_document(post_ref, name, email, comment)
        return await self.db[config.COMMENTS_COLLECTION].insert_one(comment_doc)

    async def submit(self, post_id: str, name: str, email: str, comment: str) -> SubmissionReceipt:
        if not post_id or not post_id.strip():
            raise SubmissionInvalid("A comment must reference the post it belongs to.")

        try:
            result = await asyncio.wait_for(self._write(post_id, name, email, comment), timeout=self.timeout)
        except asyncio.TimeoutError as e:
            logger.error(f"Comment write for post '{post_id}' timed out after {self.timeout}s")
            raise WriteFailed(post_id, e) from e
        except Exception as e:
            logger.exception(f"Error creating comment on post '{post_id}': {e}")
            raise WriteFailed(post_id, e) from e

        logger.info(f"Created unapproved comment '{result.inserted_id}' on post '{post_id}'")
        return SubmissionReceipt()
