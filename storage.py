# storage.py
import json
import os
import uuid
from typing import Callable, Iterator, List, Optional, Sequence

from filelock import FileLock

from config import STORAGE_KEY
from logger import get_logger
from models import Transaction, TransactionDraft

logger = get_logger(__name__)


class KeyValueFile:
    """
    A JSON object on disk mapping slot keys to string values.

    Reads never raise: a missing or unreadable file behaves as an empty slot.
    Writes rewrite the whole file under a file lock.
    """

    def __init__(self, path: str, lock_timeout: float = 5):
        self.path = path
        self._lock = FileLock(path + ".lock", timeout=lock_timeout)

    def _read_all(self) -> dict:
        if not os.path.exists(self.path) or os.path.getsize(self.path) == 0:
            return {}
        try:
            with open(self.path, encoding="utf-8") as fh:
                data = json.load(fh)
        except (OSError, ValueError) as e:
            logger.warning(f"Could not read {self.path}: {e}")
            return {}
        if not isinstance(data, dict):
            logger.warning(f"Ignoring {self.path}: expected a JSON object")
            return {}
        return data

    def get(self, key: str) -> Optional[str]:
        with self._lock:
            value = self._read_all().get(key)
        return value if isinstance(value, str) else None

    def set(self, key: str, value: str) -> None:
        with self._lock:
            data = self._read_all()
            data[key] = value
            tmp_path = self.path + ".tmp"
            with open(tmp_path, "w", encoding="utf-8") as fh:
                json.dump(data, fh, ensure_ascii=False, indent=2)
            os.replace(tmp_path, self.path)


def _new_id() -> str:
    return str(uuid.uuid4())


def serialize_transactions(txs: Sequence[Transaction]) -> str:
    return json.dumps([t.to_dict() for t in txs], ensure_ascii=False, allow_nan=False)


def deserialize_transactions(raw: Optional[str]) -> List[Transaction]:
    """Parse a persisted snapshot; anything unusable degrades to fewer (or no) records."""
    if not raw:
        return []
    try:
        records = json.loads(raw)
    except ValueError as e:
        logger.warning(f"Stored transactions are not valid JSON, starting empty: {e}")
        return []
    if not isinstance(records, list):
        logger.warning("Stored transactions are not a list, starting empty")
        return []
    txs = []
    seen = set()
    for rec in records:
        try:
            tx = Transaction.from_dict(rec)
        except (KeyError, TypeError, ValueError) as e:
            logger.warning(f"Skipping malformed stored transaction {rec!r}: {e}")
            continue
        if tx.id in seen:
            logger.warning(f"Skipping duplicate stored transaction id {tx.id}")
            continue
        seen.add(tx.id)
        txs.append(tx)
    return txs


class TransactionStore:
    """
    Newest-first sequence of transactions mirrored to one key-value slot.

    Every mutation rewrites the full sequence to the slot.
    """

    def __init__(self, backend: KeyValueFile, key: str = STORAGE_KEY,
                 id_factory: Callable[[], str] = _new_id):
        self.backend = backend
        self.key = key
        self._id_factory = id_factory
        self._txs: List[Transaction] = []

    def load_initial(self) -> List[Transaction]:
        try:
            raw = self.backend.get(self.key)
        except Exception as e:
            # e.g. lock timeout; the store still starts up
            logger.warning(f"Could not open storage slot {self.key!r}: {e}")
            raw = None
        self._txs = deserialize_transactions(raw)
        logger.info(f"Loaded {len(self._txs)} transactions from slot {self.key!r}")
        return list(self._txs)

    @property
    def transactions(self) -> tuple:
        return tuple(self._txs)

    def __len__(self) -> int:
        return len(self._txs)

    def __iter__(self) -> Iterator[Transaction]:
        return iter(tuple(self._txs))

    def get(self, tx_id: str) -> Optional[Transaction]:
        return next((t for t in self._txs if t.id == tx_id), None)

    def _fresh_id(self) -> str:
        taken = {t.id for t in self._txs}
        tx_id = self._id_factory()
        while tx_id in taken:
            tx_id = self._id_factory()
        return tx_id

    def add(self, draft: TransactionDraft) -> Transaction:
        tx = draft.to_transaction(self._fresh_id())
        self._commit([tx] + self._txs)
        logger.info(f"Added transaction {tx.id}: {tx}")
        return tx

    def remove(self, tx_id: str) -> None:
        remaining = [t for t in self._txs if t.id != tx_id]
        if len(remaining) == len(self._txs):
            logger.debug(f"remove: no transaction with id {tx_id}")
        self._commit(remaining)

    def _commit(self, txs: List[Transaction]) -> None:
        # memory only changes once the slot write went through
        self.backend.set(self.key, serialize_transactions(txs))
        self._txs = txs


def open_store(path: str, key: str = STORAGE_KEY) -> TransactionStore:
    store = TransactionStore(KeyValueFile(path), key=key)
    store.load_initial()
    return store


def sorted_by_date(txs: Sequence[Transaction]) -> List[Transaction]:
    """History order: newest date first, store order kept among equal dates."""
    return sorted(txs, key=lambda t: t.date, reverse=True)
