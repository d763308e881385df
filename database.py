# =============================================================
# 🗄️ DATABASE — JSON document store (bookmarks + categories)
# =============================================================
import json
import logging
import os
import threading
from contextlib import contextmanager

from dotenv import load_dotenv

from models import Document

# Load variables from .env
load_dotenv()

logger = logging.getLogger("uvicorn")

DEFAULT_DATA_FILE = os.path.join(os.path.dirname(os.path.abspath(__file__)), "data.json")
DATA_FILE = os.getenv("DATA_FILE", DEFAULT_DATA_FILE)


class JsonStore:
    """Whole-document accessor for the JSON data file.

    ``load`` and ``save`` always work on the complete document. Handlers that
    mutate state go through ``transaction`` so that two requests cannot both
    read the pre-mutation document and overwrite each other's change.
    """

    def __init__(self, path: str):
        self.path = path
        self._lock = threading.RLock()

    def load(self) -> Document:
        """
        Reads the whole file. An unreadable file, invalid JSON or a wrong
        top-level shape gives an empty document; single records that do not
        fit the models are carried along as-is.
        """
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                document = Document.from_dict(json.load(f))
        except Exception as e:
            logger.warning(f"⚠️ Could not read {self.path}, using empty data: {e}")
            return Document()

        for key, records in document.unparsed.items():
            if records:
                logger.warning(f"⚠️ {len(records)} {key} record(s) in {self.path} kept unparsed")
        return document

    def save(self, document: Document) -> None:
        try:
            with open(self.path, "w", encoding="utf-8") as f:
                json.dump(document.to_dict(), f, indent=2, ensure_ascii=False)
        except Exception as e:
            logger.error(f"❌ Error writing {self.path}: {e}")
            raise

    @contextmanager
    def transaction(self):
        """Load, yield for mutation, then save if the block did not raise."""
        with self._lock:
            document = self.load()
            yield document
            self.save(document)

    def snapshot(self) -> Document:
        with self._lock:
            return self.load()


store = JsonStore(DATA_FILE)


def init_db(target: JsonStore = None) -> None:
    """Create the data file with an empty document if it does not exist yet."""
    target = target or store
    directory = os.path.dirname(os.path.abspath(target.path))
    os.makedirs(directory, exist_ok=True)
    if not os.path.exists(target.path):
        target.save(Document())
        logger.info(f"✅ Created empty data file at {target.path}")
    else:
        logger.info(f"✅ Using data file {target.path}")


def get_store() -> JsonStore:
    return store
