"""Data models for BlogDesk."""

from dataclasses import asdict, dataclass, field
from decimal import Decimal
from typing import Optional


@dataclass
class KeywordRecord:
    keyword: str
    monthly_searches: Optional[int] = 0
    competition: Optional[str] = None
    competition_index: Optional[int] = None  # 0-100
    three_month_change: Optional[str] = None
    yoy_change: Optional[str] = None
    top_bid_low: Optional[Decimal] = None
    top_bid_high: Optional[Decimal] = None
    category: Optional[str] = None
    intent: Optional[str] = None
    is_question: Optional[bool] = None
    is_branded: Optional[bool] = None
    audience: Optional[str] = None
    blog_score: int = 0
    suggested_topics: list[str] = field(default_factory=list)
    notes: Optional[str] = None
    id: Optional[int] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None

    def to_dict(self) -> dict:
        """Plain dict with decimals rendered as strings (JSON friendly)."""
        data = asdict(self)
        for name in ("top_bid_low", "top_bid_high"):
            if data[name] is not None:
                data[name] = str(data[name])
        return data


@dataclass
class RawKeywordRow:
    """One parsed data row of a keyword planner export."""

    keyword: Optional[str]
    monthly_searches: Optional[int] = None
    competition: Optional[str] = None
    competition_index: Optional[int] = None
    three_month_change: Optional[str] = None
    yoy_change: Optional[str] = None
    top_bid_low: Optional[Decimal] = None
    top_bid_high: Optional[Decimal] = None
    # Set when the line itself could not be split into cells
    error: Optional[str] = None

    def to_fields(self) -> dict:
        return asdict(self)


@dataclass
class ImportResult:
    imported: int = 0
    skipped: int = 0
    errors: list[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {"imported": self.imported, "skipped": self.skipped, "errors": list(self.errors)}


@dataclass
class Author:
    name: str
    email: str
    avatar_url: Optional[str] = None
    bio: Optional[str] = None
    external_id: Optional[str] = None
    id: Optional[int] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None


@dataclass
class Post:
    title: str
    slug: str
    content_markdown: str
    user_id: int
    content_html: Optional[str] = None
    excerpt: Optional[str] = None
    status: str = "draft"  # "draft" or "published"
    featured_image_url: Optional[str] = None
    featured_image_alt: Optional[str] = None
    meta_title: Optional[str] = None
    meta_description: Optional[str] = None
    canonical_url: Optional[str] = None
    published_at: Optional[str] = None
    id: Optional[int] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None


@dataclass
class FeatureScreenshot:
    feature_key: str
    url: str
    storage_key: str
    position: int = 0
    alt_text: Optional[str] = None
    caption: Optional[str] = None
    step_description: Optional[str] = None
    id: Optional[int] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None
