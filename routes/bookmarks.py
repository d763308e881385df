# =============================================================
# 🔖 ROUTES BOOKMARKS — CRUD over the bookmark list
# =============================================================

import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException

from database import JsonStore, get_store
from models import (
    Bookmark,
    BookmarkCreate,
    BookmarkRead,
    BookmarkUpdate,
    CategoryRef,
    utc_now,
)
from validation import validate_new_bookmark, validate_url

logger = logging.getLogger("uvicorn")

router = APIRouter(prefix="/bookmarks", tags=["Bookmarks"])


def _matches_search(bookmark: Bookmark, query: str) -> bool:
    query = query.lower()
    return query in bookmark.title.lower() or (
        bool(bookmark.description) and query in bookmark.description.lower()
    )


def _parse_category(category: str):
    try:
        return int(category)
    except ValueError:
        return None


# -------------------------------------------------------------
# 📖 LIST (filters: category, search)
# -------------------------------------------------------------
@router.get("")
def list_bookmarks(
    category: Optional[str] = None,
    search: Optional[str] = None,
    store: JsonStore = Depends(get_store),
):
    """
    Returns every bookmark, optionally narrowed to one category and/or a
    case-insensitive text match on title or description.
    """
    try:
        data = store.snapshot()
        bookmarks = data.bookmarks

        if category:
            category_id = _parse_category(category)
            bookmarks = [b for b in bookmarks if category_id is not None and b.categoryId == category_id]

        if search:
            bookmarks = [b for b in bookmarks if _matches_search(b, search)]

        names = {c.id: c.name for c in data.categories}
        result = []
        for b in bookmarks:
            fields = b.model_dump()
            fields["category"] = (
                CategoryRef(id=b.categoryId, name=names[b.categoryId]) if b.categoryId in names else None
            )
            result.append(BookmarkRead(**fields))
        return {"bookmarks": result}
    except Exception as e:
        logger.error(f"❌ Error fetching bookmarks: {e}")
        raise HTTPException(status_code=500, detail="Failed to fetch bookmarks")


# -------------------------------------------------------------
# ➕ CREATE
# -------------------------------------------------------------
@router.post("", response_model=Bookmark, status_code=201)
def create_bookmark(
    payload: Optional[BookmarkCreate] = None,
    store: JsonStore = Depends(get_store),
):
    if payload is None:
        payload = BookmarkCreate()
    check = validate_new_bookmark(payload.title, payload.url)
    if not check.valid:
        raise HTTPException(status_code=400, detail=check.reason)

    try:
        with store.transaction() as data:
            now = utc_now()
            bookmark = Bookmark(
                id=data.next_id("bookmarks"),
                title=payload.title,
                url=payload.url,
                description=payload.description or "",
                categoryId=payload.categoryId or None,
                createdAt=now,
                updatedAt=now,
            )
            data.bookmarks.append(bookmark)
        logger.info(f"✅ Bookmark {bookmark.id} created")
        return bookmark
    except Exception as e:
        logger.error(f"❌ Error creating bookmark: {e}")
        raise HTTPException(status_code=500, detail="Failed to create bookmark")


# -------------------------------------------------------------
# ✏️ UPDATE (partial)
# -------------------------------------------------------------
@router.put("/{bookmark_id}", response_model=Bookmark)
def update_bookmark(
    bookmark_id: int,
    payload: Optional[BookmarkUpdate] = None,
    store: JsonStore = Depends(get_store),
):
    """
    Applies only the fields present in the body. Empty title/url keep the
    stored value; description and categoryId store an explicit ""/null as is.
    """
    if payload is None:
        payload = BookmarkUpdate()
    if payload.url:
        check = validate_url(payload.url)
        if not check.valid:
            raise HTTPException(status_code=400, detail=check.reason)

    provided = payload.model_fields_set
    try:
        with store.transaction() as data:
            index = next((i for i, b in enumerate(data.bookmarks) if b.id == bookmark_id), None)
            if index is None:
                raise HTTPException(status_code=404, detail="Bookmark not found")

            current = data.bookmarks[index]
            updated = current.model_copy(
                update={
                    "title": payload.title or current.title,
                    "url": payload.url or current.url,
                    "description": payload.description if "description" in provided else current.description,
                    "categoryId": payload.categoryId if "categoryId" in provided else current.categoryId,
                    "updatedAt": utc_now(),
                }
            )
            data.bookmarks[index] = updated
        return updated
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"❌ Error updating bookmark {bookmark_id}: {e}")
        raise HTTPException(status_code=500, detail="Failed to update bookmark")


# -------------------------------------------------------------
# ❌ DELETE
# -------------------------------------------------------------
@router.delete("/{bookmark_id}")
def delete_bookmark(bookmark_id: int, store: JsonStore = Depends(get_store)):
    try:
        with store.transaction() as data:
            index = next((i for i, b in enumerate(data.bookmarks) if b.id == bookmark_id), None)
            if index is None:
                raise HTTPException(status_code=404, detail="Bookmark not found")
            del data.bookmarks[index]
        return {"message": "Bookmark deleted successfully"}
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"❌ Error deleting bookmark {bookmark_id}: {e}")
        raise HTTPException(status_code=500, detail="Failed to delete bookmark")
