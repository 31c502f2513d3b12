"""Local data store for accounts, bills, debts, goals and settings.

All collections live in one JSON document keyed the same way the browser
version keyed its local storage.  Reads and writes are whole-collection:
callers load a collection, change it in memory and save it back.
"""

from __future__ import annotations

import json
import logging
import random
import string
import time
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Sequence, TypeVar

from . import config
from .errors import StorageError
from .models import Account, Bill, Debt, SavingsGoal, StewardshipSettings

logger = logging.getLogger(__name__)

T = TypeVar('T')

STORAGE_KEYS = {
    'accounts': 'expense-tracker-accounts',
    'bills': 'expense-tracker-bills',
    'debts': 'expense-tracker-debts',
    'goals': 'expense-tracker-savings-goals',
    'settings': 'stewardship-settings',
}


def generate_id(prefix: str) -> str:
    """Create an identifier like ``bill_1723593600000_k3j9x0a1b``."""
    millis = int(time.time() * 1000)
    suffix = ''.join(random.choices(string.ascii_lowercase + string.digits, k=9))
    return f"{prefix}_{millis}_{suffix}"


class StewardshipStore:
    """Handles reading and writing the planner's data file."""

    def __init__(self, path: Optional[Path] = None):
        """Initialize the store.

        Args:
            path: Optional custom location of the JSON document.
                  Defaults to STORE_PATH from config.
        """
        self.path = Path(path) if path is not None else config.STORE_PATH

    def _read(self) -> Dict[str, Any]:
        if not self.path.exists():
            return {}
        try:
            with self.path.open('r', encoding='utf-8') as handle:
                data = json.load(handle)
        except (json.JSONDecodeError, OSError) as e:
            logger.warning("Could not read data store %s: %s", self.path, e)
            return {}
        if not isinstance(data, dict):
            logger.warning("Ignoring data store %s: expected a JSON object", self.path)
            return {}
        return data

    def _write(self, data: Dict[str, Any]) -> None:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with self.path.open('w', encoding='utf-8') as handle:
                json.dump(data, handle, indent=2, sort_keys=True)
        except OSError as e:
            raise StorageError(f"Failed to save data store to {self.path}: {e}") from e

    def _load_collection(self, name: str, factory: Callable[[Dict[str, Any]], T]) -> List[T]:
        entries = self._read().get(STORAGE_KEYS[name]) or []
        if not isinstance(entries, list):
            logger.warning("Ignoring %s in %s: expected a list", name, self.path)
            return []
        items: List[T] = []
        for entry in entries:
            try:
                items.append(factory(entry))
            except (KeyError, TypeError, ValueError) as e:
                logger.warning("Skipping malformed %s entry %r: %s", name, entry, e)
        return items

    def _save_collection(self, name: str, items: Sequence[Any]) -> None:
        data = self._read()
        data[STORAGE_KEYS[name]] = [item.to_dict() for item in items]
        self._write(data)

    def load_accounts(self) -> List[Account]:
        return self._load_collection('accounts', Account.from_dict)

    def save_accounts(self, accounts: Sequence[Account]) -> None:
        self._save_collection('accounts', accounts)

    def load_bills(self) -> List[Bill]:
        return self._load_collection('bills', Bill.from_dict)

    def save_bills(self, bills: Sequence[Bill]) -> None:
        self._save_collection('bills', bills)

    def load_debts(self) -> List[Debt]:
        return self._load_collection('debts', Debt.from_dict)

    def save_debts(self, debts: Sequence[Debt]) -> None:
        self._save_collection('debts', debts)

    def load_goals(self) -> List[SavingsGoal]:
        return self._load_collection('goals', SavingsGoal.from_dict)

    def save_goals(self, goals: Sequence[SavingsGoal]) -> None:
        self._save_collection('goals', goals)

    def load_settings(self) -> Optional[StewardshipSettings]:
        """Return the saved settings, or ``None`` when none are stored."""
        raw = self._read().get(STORAGE_KEYS['settings'])
        if not isinstance(raw, dict):
            return None
        try:
            return StewardshipSettings.from_dict(raw)
        except (TypeError, ValueError) as e:
            logger.warning("Ignoring malformed settings in %s: %s", self.path, e)
            return None

    def save_settings(self, settings: StewardshipSettings) -> None:
        data = self._read()
        data[STORAGE_KEYS['settings']] = settings.to_dict()
        self._write(data)

    def snapshot(self) -> Dict[str, Any]:
        """Load every collection at once."""
        return {
            'accounts': self.load_accounts(),
            'bills': self.load_bills(),
            'debts': self.load_debts(),
            'goals': self.load_goals(),
            'settings': self.load_settings(),
        }

    def clear(self) -> None:
        """Remove all stored data; a missing file is ignored."""
        if not self.path.exists():
            return
        try:
            self.path.unlink()
        except OSError as e:
            raise StorageError(f"Failed to delete data store {self.path}: {e}") from e
