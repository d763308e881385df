# =============================================================
# 🖥️ CLIENT — API wrapper & UI state controller
# =============================================================
"""
Client side of the bookmark manager.

``BookmarkApiClient`` speaks to the REST API; ``BookmarkManager`` keeps the
state a front-end needs (lists, filters, modal, toast, confirmation dialog)
and re-fetches from the server after every change instead of patching its
local lists.
"""

import logging
import os
from typing import Callable, Optional

import requests
from dotenv import load_dotenv

from validation import form_category_id, validate_bookmark_form

load_dotenv()

logger = logging.getLogger(__name__)

API_URL = os.getenv("BOOKMARKS_API_URL", "http://localhost:5000/api")
REQUEST_TIMEOUT = 10


class ApiError(Exception):
    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


# -------------------------------------------------------------
# 🌐 REST wrapper
# -------------------------------------------------------------
class BookmarkApiClient:
    def __init__(self, base_url: str = API_URL, session=None, timeout: float = REQUEST_TIMEOUT):
        self.base_url = base_url.rstrip("/")
        self.session = session or requests.Session()
        self.timeout = timeout

    def _request(self, method: str, path: str, **kwargs):
        try:
            response = self.session.request(
                method, f"{self.base_url}{path}", timeout=self.timeout, **kwargs
            )
        except requests.RequestException as e:
            logger.error(f"❌ {method} {path} failed: {e}")
            raise ApiError(str(e)) from e

        try:
            data = response.json()
        except ValueError:
            data = {}

        if response.status_code >= 400:
            message = data.get("error") if isinstance(data, dict) else None
            raise ApiError(message or f"HTTP {response.status_code}", response.status_code)
        return data

    def list_bookmarks(self, category: Optional[int] = None, search: str = ""):
        params = {}
        if category:
            params["category"] = category
        if search:
            params["search"] = search
        return self._request("GET", "/bookmarks", params=params)["bookmarks"]

    def create_bookmark(self, data: dict):
        return self._request("POST", "/bookmarks", json=data)

    def update_bookmark(self, bookmark_id: int, data: dict):
        return self._request("PUT", f"/bookmarks/{bookmark_id}", json=data)

    def delete_bookmark(self, bookmark_id: int):
        return self._request("DELETE", f"/bookmarks/{bookmark_id}")

    def list_categories(self):
        return self._request("GET", "/categories")["categories"]

    def create_category(self, name: str):
        return self._request("POST", "/categories", json={"name": name})

    def delete_category(self, category_id: int):
        return self._request("DELETE", f"/categories/{category_id}")


# -------------------------------------------------------------
# 🧠 UI state controller
# -------------------------------------------------------------
class BookmarkManager:
    def __init__(self, api: Optional[BookmarkApiClient] = None):
        self.api = api or BookmarkApiClient()
        self.bookmarks = []
        self.categories = []
        self.selected_category = None
        self.search_query = ""
        self.loading = False

        self.modal_open = False
        self.editing_bookmark = None
        self.toast = None
        self.confirm_dialog = None

    # --- overlays -------------------------------------------------------
    def show_toast(self, message: str, type: str = "success"):
        self.toast = {"message": message, "type": type}

    def dismiss_toast(self):
        self.toast = None

    def open_add_modal(self):
        self.editing_bookmark = None
        self.modal_open = True

    def open_edit_modal(self, bookmark: dict):
        self.editing_bookmark = bookmark
        self.modal_open = True

    def close_modal(self):
        self.modal_open = False
        self.editing_bookmark = None

    def _ask(self, title: str, message: str, on_confirm: Callable[[], None]):
        self.confirm_dialog = {"title": title, "message": message, "on_confirm": on_confirm}

    def confirm(self):
        dialog, self.confirm_dialog = self.confirm_dialog, None
        if dialog:
            dialog["on_confirm"]()

    def cancel(self):
        self.confirm_dialog = None

    # --- fetching -------------------------------------------------------
    def fetch_bookmarks(self):
        try:
            self.bookmarks = self.api.list_bookmarks(self.selected_category, self.search_query)
        except ApiError as e:
            logger.error(f"Error fetching bookmarks: {e.message}")
            self.show_toast("Failed to load bookmarks", "error")

    def fetch_categories(self):
        try:
            self.categories = self.api.list_categories()
        except ApiError as e:
            logger.error(f"Error fetching categories: {e.message}")

    def load(self):
        self.loading = True
        try:
            self.fetch_bookmarks()
            self.fetch_categories()
        finally:
            self.loading = False

    def select_category(self, category_id: Optional[int]):
        self.selected_category = category_id
        self.fetch_bookmarks()

    def set_search(self, query: str):
        self.search_query = query
        self.fetch_bookmarks()

    # --- mutations ------------------------------------------------------
    def submit_bookmark(self, form: dict) -> dict:
        """
        Validates the form and sends it as a create or an update depending on
        whether a bookmark is being edited. Returns the field errors (empty
        when the form was submitted).
        """
        errors = validate_bookmark_form(form)
        if errors:
            return errors

        data = {
            "title": form.get("title", ""),
            "url": form.get("url", ""),
            "description": form.get("description", ""),
            "categoryId": form_category_id(form.get("categoryId")),
        }

        editing = self.editing_bookmark
        try:
            if editing:
                self.api.update_bookmark(editing["id"], data)
            else:
                self.api.create_bookmark(data)
        except ApiError as e:
            fallback = "Failed to update bookmark" if editing else "Failed to add bookmark"
            self.show_toast(e.message if e.status_code else fallback, "error")
            return {}

        self.fetch_bookmarks()
        self.close_modal()
        self.show_toast("Bookmark updated successfully!" if editing else "Bookmark added successfully!")
        return {}

    def add_category(self, name: str):
        try:
            self.api.create_category(name)
        except ApiError as e:
            self.show_toast(e.message if e.status_code else "Failed to add category", "error")
            return
        self.fetch_categories()
        self.show_toast("Category added successfully!")

    def request_delete_bookmark(self, bookmark_id: int):
        self._ask(
            "Delete Bookmark",
            "Are you sure you want to delete this bookmark? This action cannot be undone.",
            lambda: self._delete_bookmark(bookmark_id),
        )

    def _delete_bookmark(self, bookmark_id: int):
        try:
            self.api.delete_bookmark(bookmark_id)
        except ApiError:
            self.show_toast("Failed to delete bookmark", "error")
            return
        self.fetch_bookmarks()
        self.show_toast("Bookmark deleted successfully!")

    def request_delete_category(self, category_id: int):
        self._ask(
            "Delete Category",
            "Bookmarks in this category will be moved to Uncategorized. Continue?",
            lambda: self._delete_category(category_id),
        )

    def _delete_category(self, category_id: int):
        try:
            self.api.delete_category(category_id)
        except ApiError:
            self.show_toast("Failed to delete category", "error")
            return
        if self.selected_category == category_id:
            self.selected_category = None
        self.fetch_categories()
        self.fetch_bookmarks()
        self.show_toast("Category deleted successfully!")
