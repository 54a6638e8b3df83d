"""Filter and sort options for keyword listings."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

SORT_FIELDS = {
    "keyword",
    "monthly_searches",
    "blog_score",
    "competition",
    "audience",
    "intent",
}
DEFAULT_ORDER = "monthly_searches DESC"


@dataclass
class KeywordFilters:
    search: Optional[str] = None
    category: Optional[str] = None
    intent: Optional[str] = None
    audience: Optional[str] = None
    sort_by: str = "monthly_searches"
    sort_dir: str = "desc"
    limit: int = 50
    offset: int = 0

    def to_sql_clauses(self) -> tuple[str, list]:
        """Return (WHERE clause, parameters) for the keyword table.

        The clause is empty when no filter is set.
        """
        clauses = []
        params = []

        if self.search:
            # LIKE is case-insensitive for ASCII in SQLite
            clauses.append("keyword LIKE ?")
            params.append(f"%{self.search}%")

        if self.category is not None:
            clauses.append("category = ?")
            params.append(self.category)

        if self.intent is not None:
            clauses.append("intent = ?")
            params.append(self.intent)

        if self.audience is not None:
            clauses.append("audience = ?")
            params.append(self.audience)

        return " AND ".join(clauses) if clauses else "", params

    def order_clause(self) -> str:
        """ORDER BY expression; unknown fields or directions use the default."""
        direction = (self.sort_dir or "").lower()
        if self.sort_by not in SORT_FIELDS or direction not in ("asc", "desc"):
            return DEFAULT_ORDER
        return f"{self.sort_by} {direction.upper()}"
