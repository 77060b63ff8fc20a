class ContentError(Exception):
    """Base class for failures talking to the content store."""


class SubmissionInvalid(ContentError):
    """A comment submission reached the service without a usable shape."""


class WriteFailed(ContentError):
    """The content store rejected or could not complete a comment write."""

    def __init__(self, post_id: str, cause: BaseException | None = None):
        self.post_id = post_id
        self.cause = cause
        super().__init__(f"Comment write for post '{post_id}' failed: {cause!r}")


class PostNotFound(ContentError):
    def __init__(self, slug: str):
        self.slug = slug
        super().__init__(f"Post with slug '{slug}' not found")
