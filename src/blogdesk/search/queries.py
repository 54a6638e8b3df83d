"""Read-side keyword queries: listings, topic picks and aggregates."""

from __future__ import annotations

from blogdesk.keywords.classifier import AUDIENCES
from blogdesk.search.filters import KeywordFilters
from blogdesk.storage.database import Database
from blogdesk.storage.models import KeywordRecord
from blogdesk.storage.repository import row_to_keyword

# Keywords worth writing about: scored, unbranded, with some real volume
BLOG_TOPIC_WHERE = "blog_score > 0 AND is_branded = 0 AND monthly_searches >= 100"


def _select(db: Database, where: str = "", params: tuple | list = (),
            order: str = "monthly_searches DESC", limit: int | None = None,
            offset: int = 0) -> list[KeywordRecord]:
    sql = "SELECT * FROM blog_keywords"
    if where:
        sql += f" WHERE {where}"
    sql += f" ORDER BY {order}, id"
    params = list(params)
    if limit is not None:
        sql += " LIMIT ? OFFSET ?"
        params.extend([limit, offset])
    rows = db.conn.execute(sql, params).fetchall()
    return [row_to_keyword(r) for r in rows]


# ── Listings ───────────────────────────────────────────────────────


def list_keywords(db: Database) -> list[KeywordRecord]:
    return _select(db)


def list_keywords_by_category(db: Database, category: str) -> list[KeywordRecord]:
    return _select(db, "category = ?", (category,))


def list_keywords_by_intent(db: Database, intent: str) -> list[KeywordRecord]:
    return _select(db, "intent = ?", (intent,))


def list_keywords_by_audience(db: Database, audience: str) -> list[KeywordRecord]:
    return _select(
        db, "audience = ?", (audience,),
        order="blog_score DESC, monthly_searches DESC",
    )


def top_keywords(db: Database, limit: int = 50) -> list[KeywordRecord]:
    """Highest-volume keywords that have any recorded searches."""
    return _select(db, "monthly_searches > 0", limit=limit)


def question_keywords(db: Database) -> list[KeywordRecord]:
    """Question-style keywords, good material for FAQ posts."""
    return _select(db, "is_question = 1")


def search_keywords(db: Database, text: str) -> list[KeywordRecord]:
    """Case-insensitive substring match on the keyword text."""
    return _select(db, "keyword LIKE ?", (f"%{text}%",))


def list_keywords_filtered(
    db: Database, filters: KeywordFilters | None = None
) -> list[KeywordRecord]:
    if filters is None:
        filters = KeywordFilters()
    where, params = filters.to_sql_clauses()
    return _select(
        db, where, params,
        order=filters.order_clause(),
        limit=filters.limit,
        offset=filters.offset,
    )


# ── Blog topics ────────────────────────────────────────────────────


def blog_topic_keywords(db: Database, limit: int = 20) -> list[KeywordRecord]:
    return _select(
        db, BLOG_TOPIC_WHERE,
        order="blog_score DESC, monthly_searches DESC",
        limit=limit,
    )


def blog_topics_by_audience(
    db: Database, limit_per_audience: int = 5
) -> dict[str, list[KeywordRecord]]:
    """Best blog topics per audience. Audiences with none are left out."""
    grouped = {}
    for audience in AUDIENCES:
        keywords = _select(
            db, f"audience = ? AND {BLOG_TOPIC_WHERE}", (audience,),
            order="blog_score DESC, monthly_searches DESC",
            limit=limit_per_audience,
        )
        if keywords:
            grouped[audience] = keywords
    return grouped


# ── Aggregates ─────────────────────────────────────────────────────


def stats_by_category(db: Database) -> list[dict]:
    rows = db.conn.execute(
        """SELECT category, COUNT(id) AS count,
                  COALESCE(SUM(monthly_searches), 0) AS total_searches
           FROM blog_keywords
           GROUP BY category
           ORDER BY total_searches DESC"""
    ).fetchall()
    return [dict(r) for r in rows]


def stats_by_intent(db: Database) -> list[dict]:
    rows = db.conn.execute(
        """SELECT intent, COUNT(id) AS count,
                  COALESCE(SUM(monthly_searches), 0) AS total_searches
           FROM blog_keywords
           GROUP BY intent
           ORDER BY total_searches DESC"""
    ).fetchall()
    return [dict(r) for r in rows]


def stats_by_audience(db: Database) -> list[dict]:
    rows = db.conn.execute(
        """SELECT audience, COUNT(id) AS count,
                  COALESCE(SUM(monthly_searches), 0) AS total_searches,
                  AVG(blog_score) AS avg_blog_score
           FROM blog_keywords
           WHERE audience IS NOT NULL
           GROUP BY audience
           ORDER BY total_searches DESC"""
    ).fetchall()
    return [dict(r) for r in rows]


def count_keywords(db: Database) -> int:
    return db.conn.execute("SELECT COUNT(*) FROM blog_keywords").fetchone()[0]


def total_search_volume(db: Database) -> int:
    row = db.conn.execute(
        "SELECT COALESCE(SUM(monthly_searches), 0) FROM blog_keywords"
    ).fetchone()
    return row[0]
