import json
import tempfile
import unittest
from pathlib import Path

from fastapi.testclient import TestClient

from database import JsonStore, get_store
from main import app


class BookmarksApiTests(unittest.TestCase):
    def setUp(self):
        self.temp_dir = tempfile.TemporaryDirectory()
        self.data_path = Path(self.temp_dir.name) / "data.json"
        self.store = JsonStore(str(self.data_path))
        app.dependency_overrides[get_store] = lambda: self.store
        self.addCleanup(app.dependency_overrides.clear)
        self.client = TestClient(app)

    def tearDown(self):
        self.temp_dir.cleanup()

    def _create(self, **fields):
        payload = {"title": "GitHub", "url": "https://github.com"}
        payload.update(fields)
        response = self.client.post("/api/bookmarks", json=payload)
        self.assertEqual(response.status_code, 201, response.text)
        return response.json()

    def _stored(self):
        return json.loads(self.data_path.read_text(encoding="utf-8"))

    def test_create_assigns_next_id_and_defaults(self):
        first = self._create()
        second = self._create(title="Docs", url="https://docs.python.org")

        self.assertEqual(first["id"], 1)
        self.assertEqual(second["id"], 2)
        self.assertEqual(second["description"], "")
        self.assertIsNone(second["categoryId"])
        self.assertEqual(second["createdAt"], second["updatedAt"])
        self.assertEqual([b["id"] for b in self._stored()["bookmarks"]], [1, 2])

    def test_create_uses_max_id_plus_one(self):
        self._create()
        self._create()
        self._create()
        self.client.delete("/api/bookmarks/2")

        created = self._create(title="After gap")

        self.assertEqual(created["id"], 4)

    def test_create_rejects_invalid_url_without_writing(self):
        self._create()
        before = self.data_path.read_text(encoding="utf-8")

        response = self.client.post("/api/bookmarks", json={"title": "Bad", "url": "not-a-url"})

        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json(), {"error": "Invalid URL format"})
        self.assertEqual(self.data_path.read_text(encoding="utf-8"), before)

    def test_create_requires_title_and_url(self):
        response = self.client.post("/api/bookmarks", json={"url": "https://example.com"})

        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()["error"], "Title and URL are required")
        self.assertFalse(self.data_path.exists())

    def test_list_filters_by_search_case_insensitively(self):
        self._create(title="GitHub", url="https://github.com")
        self._create(title="Docs", url="https://docs.example.com", description="Uses GIT workflows")
        self._create(title="News", url="https://news.example.com")

        response = self.client.get("/api/bookmarks", params={"search": "git"})

        self.assertEqual(response.status_code, 200)
        titles = [b["title"] for b in response.json()["bookmarks"]]
        self.assertEqual(titles, ["GitHub", "Docs"])

    def test_list_filters_by_category_and_joins_category(self):
        category = self.client.post("/api/categories", json={"name": "Dev"}).json()
        self._create(title="GitHub", categoryId=category["id"])
        self._create(title="Gitlab", url="https://gitlab.com")

        response = self.client.get("/api/bookmarks", params={"category": category["id"], "search": "git"})

        bookmarks = response.json()["bookmarks"]
        self.assertEqual(len(bookmarks), 1)
        self.assertEqual(bookmarks[0]["category"], {"id": category["id"], "name": "Dev"})

    def test_list_with_unknown_category_reference_has_null_category(self):
        self._create(categoryId=42)

        bookmarks = self.client.get("/api/bookmarks").json()["bookmarks"]

        self.assertEqual(bookmarks[0]["categoryId"], 42)
        self.assertIsNone(bookmarks[0]["category"])

    def test_list_with_non_numeric_category_matches_nothing(self):
        self._create()

        response = self.client.get("/api/bookmarks", params={"category": "abc"})

        self.assertEqual(response.json(), {"bookmarks": []})

    def test_update_with_empty_description_only_clears_description(self):
        created = self._create(description="keep me?", categoryId=3)

        response = self.client.put(f"/api/bookmarks/{created['id']}", json={"description": ""})

        self.assertEqual(response.status_code, 200)
        updated = response.json()
        self.assertEqual(updated["description"], "")
        self.assertEqual(updated["title"], created["title"])
        self.assertEqual(updated["url"], created["url"])
        self.assertEqual(updated["categoryId"], 3)
        self.assertEqual(updated["createdAt"], created["createdAt"])

    def test_update_honors_explicit_null_category(self):
        created = self._create(categoryId=3)

        updated = self.client.put(f"/api/bookmarks/{created['id']}", json={"categoryId": None}).json()

        self.assertIsNone(updated["categoryId"])

    def test_update_empty_title_keeps_previous(self):
        created = self._create()

        updated = self.client.put(f"/api/bookmarks/{created['id']}", json={"title": ""}).json()

        self.assertEqual(updated["title"], "GitHub")

    def test_update_rejects_invalid_url(self):
        created = self._create()

        response = self.client.put(f"/api/bookmarks/{created['id']}", json={"url": "nope"})

        self.assertEqual(response.status_code, 400)
        self.assertEqual(self._stored()["bookmarks"][0]["url"], "https://github.com")

    def test_update_and_delete_missing_bookmark_return_404(self):
        put = self.client.put("/api/bookmarks/99", json={"title": "x"})
        delete = self.client.delete("/api/bookmarks/99")

        self.assertEqual(put.status_code, 404)
        self.assertEqual(put.json(), {"error": "Bookmark not found"})
        self.assertEqual(delete.status_code, 404)

    def test_delete_removes_bookmark(self):
        created = self._create()

        response = self.client.delete(f"/api/bookmarks/{created['id']}")

        self.assertEqual(response.json(), {"message": "Bookmark deleted successfully"})
        self.assertEqual(self.client.get("/api/bookmarks").json(), {"bookmarks": []})

    def test_malformed_body_is_reported_as_400(self):
        response = self.client.post("/api/bookmarks", json={"title": "x", "url": "https://a.b", "categoryId": "abc"})

        self.assertEqual(response.status_code, 400)
        self.assertIn("error", response.json())

    def test_corrupt_file_reads_as_empty(self):
        self.data_path.write_text("{ not json", encoding="utf-8")

        response = self.client.get("/api/bookmarks")

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json(), {"bookmarks": []})

    def test_null_description_record_survives_other_writes(self):
        self.data_path.write_text(
            json.dumps(
                {
                    "bookmarks": [
                        {"id": 1, "title": "A", "url": "https://a.example", "description": None, "categoryId": None},
                        {"id": 2, "title": "B", "url": "https://b.example", "description": "git", "categoryId": None},
                    ],
                    "categories": [],
                }
            ),
            encoding="utf-8",
        )

        listed = self.client.get("/api/bookmarks").json()["bookmarks"]
        created = self.client.post("/api/categories", json={"name": "Work"})

        self.assertEqual([b["id"] for b in listed], [1, 2])
        self.assertEqual(created.status_code, 201)
        stored = self._stored()
        self.assertEqual([b["id"] for b in stored["bookmarks"]], [1, 2])
        self.assertIsNone(stored["bookmarks"][0]["description"])
        self.assertEqual([c["name"] for c in stored["categories"]], ["Work"])

    def test_unknown_fields_are_kept_through_mutations(self):
        self.data_path.write_text(
            json.dumps(
                {
                    "meta": {"v": 1},
                    "bookmarks": [{"id": 1, "title": "A", "url": "https://a.example", "favorite": True}],
                    "categories": [],
                }
            ),
            encoding="utf-8",
        )

        self.client.post("/api/categories", json={"name": "Work"})
        updated = self.client.put("/api/bookmarks/1", json={"title": "A2"}).json()

        stored = self._stored()
        self.assertEqual(stored["meta"], {"v": 1})
        self.assertTrue(stored["bookmarks"][0]["favorite"])
        self.assertTrue(updated["favorite"])
        self.assertEqual(updated["title"], "A2")

    def test_update_with_null_description_stores_null(self):
        created = self._create(description="old")

        updated = self.client.put(f"/api/bookmarks/{created['id']}", json={"description": None}).json()

        self.assertIsNone(updated["description"])
        self.assertIsNone(self._stored()["bookmarks"][0]["description"])

    def test_create_without_body_reports_required_fields(self):
        response = self.client.post("/api/bookmarks")

        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json(), {"error": "Title and URL are required"})


if __name__ == "__main__":
    unittest.main()
