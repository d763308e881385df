# =============================================================
# 🗂️ ROUTES CATEGORIES — Listing, creation & cascade delete
# =============================================================

import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException

from database import JsonStore, get_store
from models import Category, CategoryCreate, CategoryRead, utc_now
from validation import validate_category_name

logger = logging.getLogger("uvicorn")

router = APIRouter(prefix="/categories", tags=["Categories"])


@router.get("")
def list_categories(store: JsonStore = Depends(get_store)):
    """Every category with the number of bookmarks currently filed under it."""
    try:
        data = store.snapshot()
        categories = []
        for c in data.categories:
            fields = c.model_dump()
            fields["bookmarkCount"] = sum(1 for b in data.bookmarks if b.categoryId == c.id)
            categories.append(CategoryRead(**fields))
        return {"categories": categories}
    except Exception as e:
        logger.error(f"❌ Error fetching categories: {e}")
        raise HTTPException(status_code=500, detail="Failed to fetch categories")


@router.post("", response_model=Category, status_code=201)
def create_category(
    payload: Optional[CategoryCreate] = None,
    store: JsonStore = Depends(get_store),
):
    if payload is None:
        payload = CategoryCreate()
    try:
        with store.transaction() as data:
            check = validate_category_name(payload.name, data.category_names())
            if not check.valid:
                raise HTTPException(status_code=400, detail=check.reason)

            category = Category(
                id=data.next_id("categories"),
                name=payload.name.strip(),
                createdAt=utc_now(),
            )
            data.categories.append(category)
        logger.info(f"✅ Category {category.id} '{category.name}' created")
        return category
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"❌ Error creating category: {e}")
        raise HTTPException(status_code=500, detail="Failed to create category")


@router.delete("/{category_id}")
def delete_category(category_id: int, store: JsonStore = Depends(get_store)):
    """
    Removes the category. Bookmarks filed under it are kept and moved back to
    uncategorized (categoryId = null).
    """
    try:
        with store.transaction() as data:
            index = next((i for i, c in enumerate(data.categories) if c.id == category_id), None)
            if index is None:
                raise HTTPException(status_code=404, detail="Category not found")

            data.unlink_category(category_id)
            del data.categories[index]
        return {"message": "Category deleted successfully"}
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"❌ Error deleting category {category_id}: {e}")
        raise HTTPException(status_code=500, detail="Failed to delete category")
