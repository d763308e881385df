# =============================================================
# 🧱 MODELS — Bookmark Manager data shapes (SQLModel)
# =============================================================

from datetime import datetime, timezone
from typing import Optional

from pydantic import ConfigDict
from sqlmodel import SQLModel, Field


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


# -------------------------------------------------------------
# 🗂️ Category
# -------------------------------------------------------------
class Category(SQLModel):
    model_config = ConfigDict(extra="allow")

    id: int
    name: str
    createdAt: datetime = Field(default_factory=utc_now)


class CategoryCreate(SQLModel):
    name: Optional[str] = None


class CategoryRef(SQLModel):
    id: int
    name: str


class CategoryRead(Category):
    bookmarkCount: int = 0


# -------------------------------------------------------------
# 🔖 Bookmark
# -------------------------------------------------------------
class Bookmark(SQLModel):
    model_config = ConfigDict(extra="allow")

    id: int
    title: str
    url: str
    description: Optional[str] = ""
    categoryId: Optional[int] = None
    createdAt: datetime = Field(default_factory=utc_now)
    updatedAt: datetime = Field(default_factory=utc_now)


class BookmarkCreate(SQLModel):
    title: Optional[str] = None
    url: Optional[str] = None
    description: Optional[str] = None
    categoryId: Optional[int] = None


class BookmarkUpdate(SQLModel):
    """Partial update: only the fields present in the request body apply."""
    title: Optional[str] = None
    url: Optional[str] = None
    description: Optional[str] = None
    categoryId: Optional[int] = None


class BookmarkRead(Bookmark):
    category: Optional[CategoryRef] = None


# -------------------------------------------------------------
# 📄 Persisted document
# -------------------------------------------------------------
RECORD_TYPES = {"bookmarks": Bookmark, "categories": Category}


def _int_id(record) -> Optional[int]:
    value = record.get("id") if isinstance(record, dict) else None
    if isinstance(value, int) and not isinstance(value, bool):
        return value
    return None


class Document:
    """
    The whole data file. Records that fit the models are parsed; the rest are
    kept verbatim in ``unparsed`` and written back untouched, together with
    any top-level keys other than ``bookmarks`` and ``categories``.
    """

    def __init__(self, bookmarks=None, categories=None, unparsed=None, extra=None):
        self.bookmarks = list(bookmarks or [])
        self.categories = list(categories or [])
        self.unparsed = unparsed or {key: [] for key in RECORD_TYPES}
        self.extra = dict(extra or {})

    @classmethod
    def from_dict(cls, raw) -> "Document":
        if not isinstance(raw, dict):
            raise ValueError("data file must hold a JSON object")

        document = cls(extra={k: v for k, v in raw.items() if k not in RECORD_TYPES})
        for key, model in RECORD_TYPES.items():
            records = raw.get(key, [])
            if not isinstance(records, list):
                raise ValueError(f"'{key}' must be a list")
            for record in records:
                if not isinstance(record, dict):
                    document.unparsed[key].append(record)
                    continue
                try:
                    getattr(document, key).append(model.model_validate(record))
                except ValueError:
                    document.unparsed[key].append(record)
        return document

    def to_dict(self) -> dict:
        data = dict(self.extra)
        for key in RECORD_TYPES:
            parsed = [r.model_dump(mode="json") for r in getattr(self, key)]
            data[key] = parsed + self.unparsed[key]
        return data

    def next_id(self, key: str) -> int:
        """max(existing ids) + 1 over parsed and unparsed records, or 1 when empty."""
        ids = [r.id for r in getattr(self, key)]
        ids += [i for i in map(_int_id, self.unparsed[key]) if i is not None]
        return max(ids, default=0) + 1

    def category_names(self):
        names = [c.name for c in self.categories]
        names += [
            r["name"] for r in self.unparsed["categories"]
            if isinstance(r, dict) and isinstance(r.get("name"), str)
        ]
        return names

    def unlink_category(self, category_id: int) -> int:
        count = 0
        for bookmark in self.bookmarks:
            if bookmark.categoryId == category_id:
                bookmark.categoryId = None
                count += 1
        for record in self.unparsed["bookmarks"]:
            if isinstance(record, dict) and record.get("categoryId") == category_id:
                record["categoryId"] = None
                count += 1
        return count
