from pydantic import BaseModel, Field, computed_field
from typing import Any, List, Optional
import datetime

from domain.comments import PublicComment


class AuthorSummary(BaseModel):
    name: str
    imageUrl: Optional[str] = Field(default=None)


class PostSummary(BaseModel):
    id: str = Field(alias="_id")
    title: str
    description: str
    slug: str
    author: AuthorSummary
    mainImageUrl: Optional[str] = Field(default=None)

    model_config = {"populate_by_name": True}


class PostDetail(PostSummary):
    created_at: Optional[datetime.datetime] = Field(default=None, alias="_createdAt")
    body: List[dict[str, Any]] = Field(default_factory=list)
    comments: List[PublicComment] = Field(default_factory=list)

    @computed_field
    @property
    def hasComments(self) -> bool:
        # A single approved comment is enough to show the section
        return len(self.comments) >= 1


class PostSlugs(BaseModel):
    slugs: List[str]
