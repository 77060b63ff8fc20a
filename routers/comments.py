import logging

from fastapi import APIRouter, Depends, HTTPException

from dependencies import get_comment_service
from domain.comments import CommentSubmission, SubmissionReceipt
from domain.errors import SubmissionInvalid, WriteFailed
from services.comment_submission import CommentSubmissionService

logger = logging.getLogger('uvicorn.error')

router = APIRouter(
    prefix="/api",
    tags=["comments"]
)


@router.post("/createComment", response_model=SubmissionReceipt)
async def create_comment(
    submission: CommentSubmission,
    service: CommentSubmissionService = Depends(get_comment_service),
):
    """
    Accepts a reader comment for moderation.

    Field shape is checked by ``CommentSubmission`` before anything is
    written. The response never carries the new comment's id; it only shows
    up under its post after a moderator approves it.
    """
    try:
        return await service.submit(
            post_id=submission.post_id,
            name=submission.name,
            email=submission.email,
            comment=submission.comment,
        )
    except SubmissionInvalid as e:
        raise HTTPException(status_code=400, detail=str(e))
    except WriteFailed:
        raise HTTPException(status_code=500, detail="Couldn't submit comment")
