"""Exception types raised by BlogDesk."""

from __future__ import annotations


class BlogDeskError(Exception):
    """Base class for all BlogDesk errors."""


# ── Import failures (abort the whole batch) ─────────────────────────


class ImportFailure(BlogDeskError):
    """A keyword import could not run at all."""


class ReadFailure(ImportFailure):
    """The source file could not be read."""


class HeaderNotFound(ImportFailure):
    def __init__(self, message: str = "Could not find header row with 'Keyword' column"):
        super().__init__(message)


class EmptyFile(ImportFailure):
    def __init__(self, message: str = "CSV file has no data rows"):
        super().__init__(message)


# ── Validation ──────────────────────────────────────────────────────


class ValidationError(BlogDeskError):
    """Field validation failed.

    ``errors`` maps a field name to a list of messages, e.g.
    ``{"keyword": ["can't be blank"]}``.
    """

    def __init__(self, errors: dict[str, list[str]]):
        self.errors = errors
        super().__init__(self.describe())

    def describe(self) -> str:
        parts = []
        for name, messages in self.errors.items():
            for message in messages:
                parts.append(f"{name} {message}")
        return ", ".join(parts)


class KeywordValidationError(ValidationError):
    pass


class PostValidationError(ValidationError):
    pass


class AuthorValidationError(ValidationError):
    pass


class ScreenshotValidationError(ValidationError):
    pass


# ── Store ───────────────────────────────────────────────────────────


class DuplicateKeyword(BlogDeskError):
    def __init__(self, keyword: str):
        self.keyword = keyword
        super().__init__(f"Keyword already exists: {keyword}")


class DuplicateSlug(BlogDeskError):
    def __init__(self, slug: str):
        self.slug = slug
        super().__init__(f"A post with slug '{slug}' already exists")


class NotFound(BlogDeskError):
    pass


class KeywordNotFound(NotFound):
    def __init__(self, keyword_id: int):
        self.keyword_id = keyword_id
        super().__init__(f"Keyword not found: {keyword_id}")


# ── AI generators ───────────────────────────────────────────────────


class GenerationError(BlogDeskError):
    """A generator call failed; the message is safe to show to a user.

    ``retryable`` marks failures worth another attempt (rate limits,
    overload, server errors, timeouts).
    """

    def __init__(self, message: str, retryable: bool = False):
        self.retryable = retryable
        super().__init__(message)
