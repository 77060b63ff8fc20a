from enum import Enum
from typing import Any, Optional
import datetime
import re

from pydantic import BaseModel, Field, field_validator

# Loose shape check; deliverability is not our concern
EMAIL_PATTERN = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


class ModerationStatus(str, Enum):
    """Moderation state of a comment.

    The store keeps a boolean ``approved`` flag that only a moderator flips,
    outside this service. Everything here reasons about the tagged status so
    the read filter is expressed in terms of visible statuses, not a bare bool.
    """
    UNAPPROVED = "unapproved"
    APPROVED = "approved"

    @classmethod
    def from_document(cls, data: dict[str, Any]) -> "ModerationStatus":
        return cls.APPROVED if data.get("approved") is True else cls.UNAPPROVED

    @property
    def approved_flag(self) -> bool:
        return self is ModerationStatus.APPROVED


VISIBLE_STATUSES = frozenset({ModerationStatus.APPROVED})


class CommentSubmission(BaseModel):
    """Request body of the comment form: ``{_id, name, email, comment}``."""
    post_id: str = Field(alias="_id", min_length=1)
    name: str = Field(min_length=1)
    email: str = Field(min_length=1)
    comment: str = Field(min_length=1)

    model_config = {"populate_by_name": True}

    @field_validator("post_id", "name", "comment")
    @classmethod
    def not_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("must not be blank")
        return value

    @field_validator("email")
    @classmethod
    def looks_like_email(cls, value: str) -> str:
        value = value.strip()
        if not EMAIL_PATTERN.match(value):
            raise ValueError("must be an email address")
        return value


class Comment(BaseModel):
    id: str = Field(alias="_id")
    post_id: str
    name: str
    email: str
    comment: str
    status: ModerationStatus = ModerationStatus.UNAPPROVED
    created_at: Optional[datetime.datetime] = Field(default=None, alias="_createdAt")

    model_config = {"populate_by_name": True}

    @classmethod
    def from_document(cls, data: dict[str, Any]) -> "Comment":
        return cls(
            id=str(data["_id"]),
            post_id=str(data["post"]),
            name=data["name"],
            email=data.get("email", ""),
            comment=data["comment"],
            status=ModerationStatus.from_document(data),
            created_at=data.get("createdAt"),
        )


class PublicComment(BaseModel):
    """What readers see of an approved comment. The submitter's email stays private."""
    id: str = Field(alias="_id")
    name: str
    comment: str
    created_at: Optional[datetime.datetime] = Field(default=None, alias="_createdAt")

    model_config = {"populate_by_name": True}

    @classmethod
    def from_comment(cls, comment: Comment) -> "PublicComment":
        return cls(id=comment.id, name=comment.name, comment=comment.comment, created_at=comment.created_at)


class SubmissionReceipt(BaseModel):
    message: str = "Comment submitted"
