import atexit
import copy
import logging
import os
import pickle
import threading
import uuid
from contextlib import contextmanager
from pathlib import Path

from app.exceptions import DuplicateKeyError, InvalidIdError
from app.utils.constants import Role
from app.utils.dates import utcnow, to_iso

logger = logging.getLogger(__name__)

# ---- Paths ----
BASE_DIR = Path(__file__).resolve().parents[2]
DEFAULT_DATA_PATH = BASE_DIR / "data.pkl"

COLLECTIONS = ("users", "cars", "rentals")


def check_id(value) -> str:
    """Return the canonical id string, or raise InvalidIdError for malformed ids."""
    try:
        return str(uuid.UUID(str(value)))
    except (TypeError, ValueError, AttributeError):
        raise InvalidIdError(value)


class Store:
    """
    File-backed document store. Each collection is a dict of id -> document.
    Every write happens under a re-entrant lock; inside `transaction()` writes
    are deferred and rolled back together if the block raises.
    """

    _inst = None
    _inst_lock = threading.Lock()
    _atexit_registered = False

    def __init__(self, path: str | os.PathLike | None = None, autosave: bool = True):
        self.path = str(path or DEFAULT_DATA_PATH)
        self.users: dict[str, dict] = {}
        self.cars: dict[str, dict] = {}
        self.rentals: dict[str, dict] = {}
        self._rw = threading.RLock()
        self._tx_depth = 0
        self._undo: list[tuple] = []

        logger.info("[Store] Using file: %s", self.path)
        self._load()

        # Automatically save on exit (skipped in test environments)
        if autosave and not Store._atexit_registered:
            atexit.register(self.save)
            Store._atexit_registered = True

    # ---------- Singleton ----------
    @classmethod
    def instance(cls, path: str | os.PathLike | None = None):
        """Return the global singleton instance of Store."""
        with cls._inst_lock:
            if cls._inst is None:
                cls._inst = Store(path or DEFAULT_DATA_PATH)
        return cls._inst

    @classmethod
    def configure(cls, path: str | os.PathLike | None = None, autosave: bool = True):
        """Replace the singleton with a store bound to `path` (used by create_app)."""
        with cls._inst_lock:
            if cls._inst is None or cls._inst.path != str(path or DEFAULT_DATA_PATH):
                cls._inst = Store(path, autosave=autosave)
        return cls._inst

    # ---------- Persistence ----------
    def _load(self):
        """Load data from the pickle file, or start empty if unavailable or invalid."""
        if not os.path.exists(self.path):
            return
        try:
            with open(self.path, "rb") as f:
                data = pickle.load(f)
        except (OSError, pickle.UnpicklingError, EOFError,
                ImportError, AttributeError, ValueError, TypeError) as e:
            # Unreadable file or pickled classes that no longer exist
            self._backup(f"load failed: {e}")
            return

        if isinstance(data, dict) and all(k in data for k in COLLECTIONS):
            self.users = data.get("users") or {}
            self.cars = data.get("cars") or {}
            self.rentals = data.get("rentals") or {}
            logger.info("[Store] Loaded: users=%d, cars=%d, rentals=%d",
                        len(self.users), len(self.cars), len(self.rentals))
        else:
            self._backup(f"incompatible store ({type(data).__name__})")

    def _backup(self, reason: str):
        """Move the current file aside to `<path>.bak` so the next save cannot overwrite it."""
        bak = self.path + ".bak"
        try:
            os.replace(self.path, bak)
            logger.warning("[Store] %s; backed up to %s. Starting empty.", reason, bak)
        except OSError as e:
            logger.error("[Store] Backup failed: %s", e)

    def _dump(self):
        """Write the in-memory data to the pickle file safely (atomic replace)."""
        os.makedirs(os.path.dirname(self.path) or ".", exist_ok=True)
        tmp = self.path + ".tmp"
        payload = {name: getattr(self, name) for name in COLLECTIONS}
        with open(tmp, "wb") as f:
            pickle.dump(payload, f, protocol=pickle.HIGHEST_PROTOCOL)
            f.flush()
            os.fsync(f.fileno())
        os.replace(tmp, self.path)

    def _commit(self):
        """Persist now, unless a transaction will do it on exit."""
        if self._tx_depth == 0:
            self._dump()

    def save(self):
        """Thread-safe save method."""
        with self._rw:
            logger.info("[Store] Saving to %s ...", self.path)
            self._dump()

    def clear(self):
        with self._rw:
            for name in COLLECTIONS:
                docs = getattr(self, name)
                for doc_id, doc in docs.items():
                    self._journal(name, doc_id, doc)
                docs.clear()
            self._commit()

    # ---------- Transactions ----------
    def _journal(self, collection: str, doc_id: str, before: dict | None):
        """
        Inside a transaction, remember the state of one document before a write.
        `before` is None when the document did not exist yet.
        """
        if self._tx_depth:
            self._undo.append((collection, doc_id, before))

    def _rollback(self):
        """Replay the journal backwards, restoring every touched document."""
        for collection, doc_id, before in reversed(self._undo):
            docs = getattr(self, collection)
            if before is None:
                docs.pop(doc_id, None)
                continue
            current = docs.get(doc_id)
            if current is None:
                docs[doc_id] = before
            else:
                # restore in place so dicts already handed out stay consistent
                current.clear()
                current.update(before)
        self._undo = []

    @contextmanager
    def transaction(self):
        """
        All-or-nothing block. Holds the store lock for its whole duration;
        on exception every document written inside it is restored to its
        state at entry. Nested use joins the outer transaction.
        """
        with self._rw:
            outermost = self._tx_depth == 0
            if outermost:
                self._undo = []
            self._tx_depth += 1
            try:
                yield self
            except BaseException:
                if outermost:
                    self._rollback()
                    logger.debug("[Store] Transaction rolled back")
                raise
            finally:
                self._tx_depth -= 1
            if outermost:
                self._undo = []
                self._dump()

    # ---------- Generic helpers ----------
    def _insert(self, collection: str, id_field: str, doc: dict) -> dict:
        with self._rw:
            new_id = str(uuid.uuid4())
            now = to_iso(utcnow())
            doc = dict(doc)
            doc[id_field] = new_id
            doc.setdefault("created_at", now)
            doc.setdefault("updated_at", now)
            self._journal(collection, new_id, None)
            getattr(self, collection)[new_id] = doc
            self._commit()
            return doc

    def _update(self, collection: str, doc_id: str, updates: dict) -> dict | None:
        with self._rw:
            docs = getattr(self, collection)
            key = check_id(doc_id)
            doc = docs.get(key)
            if doc is None:
                return None
            self._journal(collection, key, copy.deepcopy(doc))
            doc.update(updates)
            doc["updated_at"] = to_iso(utcnow())
            self._commit()
            return doc

    def _delete(self, collection: str, doc_id: str) -> bool:
        with self._rw:
            docs = getattr(self, collection)
            key = check_id(doc_id)
            if key not in docs:
                return False
            self._journal(collection, key, docs.pop(key))
            self._commit()
            return True

    # ---------- Users ----------
    def email_taken(self, email: str, exclude_id: str | None = None) -> bool:
        """Return True if another user already has this email (case-insensitive)."""
        needle = (email or "").strip().lower()
        return any(u.get("email") == needle and u.get("user_id") != exclude_id
                   for u in self.all_users())

    def find_user_by_email(self, email: str) -> dict | None:
        needle = (email or "").strip().lower()
        for u in self.all_users():
            if u.get("email") == needle:
                return u
        return None

    def all_users(self) -> list[dict]:
        """Snapshot of the users collection, safe to iterate while others write."""
        with self._rw:
            return list(self.users.values())

    def get_user(self, user_id: str) -> dict | None:
        return self.users.get(check_id(user_id))

    def create_user(self, doc: dict) -> dict:
        """Insert a user; the email index is unique."""
        with self._rw:
            if self.email_taken(doc.get("email")):
                raise DuplicateKeyError("email")
            return self._insert("users", "user_id", doc)

    def update_user(self, user_id: str, updates: dict) -> dict | None:
        with self._rw:
            if "email" in updates and self.email_taken(updates["email"], exclude_id=check_id(user_id)):
                raise DuplicateKeyError("email")
            return self._update("users", user_id, updates)

    def delete_user(self, user_id: str) -> bool:
        return self._delete("users", user_id)

    def has_admin(self) -> bool:
        return any(u.get("role") == Role.ADMIN for u in self.all_users())

    # ---------- Cars ----------
    def all_cars(self) -> list[dict]:
        with self._rw:
            return list(self.cars.values())

    def create_car(self, doc: dict) -> dict:
        return self._insert("cars", "car_id", doc)

    def get_car(self, car_id: str) -> dict | None:
        return self.cars.get(check_id(car_id))

    def update_car(self, car_id: str, updates: dict) -> dict | None:
        return self._update("cars", car_id, updates)

    def delete_car(self, car_id: str) -> bool:
        return self._delete("cars", car_id)

    def set_car_availability(self, car_id: str, available: bool, expected: bool | None = None) -> bool:
        """
        Conditional update of a car's availability flag.
        With `expected` set, the write only happens when the current flag equals it.
        Returns True if a document was matched and written.
        """
        with self._rw:
            key = check_id(car_id)
            car = self.cars.get(key)
            if car is None:
                return False
            if expected is not None and bool(car.get("available")) != expected:
                return False
            self._journal("cars", key, copy.deepcopy(car))
            car["available"] = available
            car["updated_at"] = to_iso(utcnow())
            self._commit()
            return True

    # ---------- Rentals ----------
    def create_rental(self, doc: dict) -> dict:
        return self._insert("rentals", "rental_id", doc)

    def get_rental(self, rental_id: str) -> dict | None:
        return self.rentals.get(check_id(rental_id))

    def update_rental(self, rental_id: str, updates: dict) -> dict | None:
        return self._update("rentals", rental_id, updates)

    def all_rentals(self) -> list[dict]:
        with self._rw:
            return list(self.rentals.values())

    def rentals_for_car(self, car_id: str) -> list[dict]:
        return [r for r in self.all_rentals() if r.get("car_id") == car_id]

    def rentals_for_user(self, user_id: str) -> list[dict]:
        return [r for r in self.all_rentals() if r.get("user_id") == user_id]
