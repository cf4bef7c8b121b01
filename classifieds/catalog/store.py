"""
Catalog store: boards of listings keyed by group name.

A ``Catalog`` wraps a storage backend. Every public method takes the
catalog lock, loads what it needs, works on the in-memory copy and,
for writes, persists the result before releasing the lock. If anything
raises inside that window nothing is written, so each call is
all-or-nothing.

Lookups are linear scans in stored order and return the first listing
with a matching ``post_id``. Post ids are not unique, so a board may
hold several listings with the same id.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from typing import Dict, List, Optional

from pydantic import ValidationError

from ..errors import AuthorizationError, CategoryMismatchError, StorageError
from ..storage import Storage
from .schemas import ItemInfo


logger = logging.getLogger(__name__)

INDEX_KEY = "dlist"


def board_key(group: str) -> str:
    """Storage key of a board's listing sequence, namespaced by group name."""
    return f"{INDEX_KEY}:{group}"


@dataclass(frozen=True)
class CallContext:
    """Facts about the current call supplied by the host, not by the caller.

    ``caller_id`` is the identity executing the call. ``attached_deposit``
    is the value transferred along with a write; the catalog records it
    in the log and never checks it.
    """

    caller_id: str
    attached_deposit: int = 0


def _find(items: List[ItemInfo], post_id: int) -> Optional[int]:
    """Position of the first listing with ``post_id``.

    Parameters
    ----------
    items : List[ItemInfo]
        Board contents in stored order.
    post_id : int
        The post id to look for.

    Returns
    -------
    Optional[int]
        Index of the first match, or ``None`` when no listing matches.
    """
    for position, item in enumerate(items):
        if item.post_id == post_id:
            return position
    return None


class Catalog:
    """Boards of listings persisted through a ``Storage`` backend.

    Construct one per process and share it. Each public method holds
    the catalog lock for its whole load, change and persist cycle.
    """

    def __init__(self, storage: Storage) -> None:
        self.storage = storage
        self._lock = threading.Lock()

    # -- persistence hooks -------------------------------------------------

    def _load_index(self) -> Dict[str, str]:
        return self.storage.read(INDEX_KEY) or {}

    def _load_board(self, group: str) -> Optional[List[ItemInfo]]:
        """Load one board's listings from storage.

        Parameters
        ----------
        group : str
            The board name.

        Returns
        -------
        Optional[List[ItemInfo]]
            The listings in stored order, or ``None`` when the board has
            never been written. A stored document that cannot be read as
            a listing raises ``StorageError``.
        """
        key = self._load_index().get(group)
        if key is None:
            return None
        try:
            return [ItemInfo.model_validate(doc) for doc in self.storage.read(key) or []]
        except ValidationError as exc:
            raise StorageError(f"stored listing is invalid: {exc}", key) from exc

    def _save_board(self, group: str, items: List[ItemInfo]) -> None:
        """Persist one board, registering it in the index if it is new.

        Parameters
        ----------
        group : str
            The board name.
        items : List[ItemInfo]
            The complete listing sequence to store for the board.
        """
        index = self._load_index()
        key = index.get(group, board_key(group))
        self.storage.write(key, [item.model_dump(mode="json") for item in items])
        # Index last: a board written without its index entry stays invisible.
        if group not in index:
            index[group] = key
            self.storage.write(INDEX_KEY, index)
            logger.info("Created board %r", group)

    @staticmethod
    def _authorize(account_id: str, ctx: CallContext) -> None:
        # Only checks that callers name themselves; ``creator`` is not consulted.
        if ctx.caller_id != account_id:
            logger.warning(
                "Rejected delete: account %r is not caller %r", account_id, ctx.caller_id
            )
            raise AuthorizationError(account_id, ctx.caller_id)

    # -- reads -------------------------------------------------------------

    def groups(self) -> List[str]:
        """Names of every board ever written to, in creation order."""
        with self._lock:
            return list(self._load_index())

    def get_item(self, group: str, post_id: int) -> Optional[ItemInfo]:
        """Return the first listing on ``group`` with ``post_id``.

        Parameters
        ----------
        group : str
            The board name.
        post_id : int
            The post id to look up.

        Returns
        -------
        Optional[ItemInfo]
            The first match in stored order. ``None`` both when the board
            does not exist and when no listing on it matches.
        """
        with self._lock:
            items = self._load_board(group)
            if items is None:
                return None
            position = _find(items, post_id)
            return None if position is None else items[position]

    def get_items(self, group: str) -> List[ItemInfo]:
        """Return every listing on ``group`` in stored order.

        Parameters
        ----------
        group : str
            The board name.

        Returns
        -------
        List[ItemInfo]
            A fresh list; empty when the board does not exist.
        """
        with self._lock:
            return self._load_board(group) or []

    # -- writes ------------------------------------------------------------

    def set_items(
        self, group: str, listing: ItemInfo, ctx: Optional[CallContext] = None
    ) -> None:
        """Append ``listing`` to the board, creating the board if needed.

        No check is made against existing post ids, and the attached
        deposit is accepted whatever its amount.

        Parameters
        ----------
        group : str
            The board name.
        listing : ItemInfo
            The listing to file. When it carries ``details``, its
            category must name that payload or ``CategoryMismatchError``
            is raised and nothing is written.
        ctx : Optional[CallContext]
            Host facts for the call, logged only.
        """
        with self._lock:
            if not listing.category_matches_details:
                raise CategoryMismatchError(listing.category, listing.details.kind)
            if ctx is not None:
                logger.debug(
                    "set_items on %r from %r with deposit %d",
                    group, ctx.caller_id, ctx.attached_deposit,
                )
            items = self._load_board(group) or []
            items.append(listing)
            self._save_board(group, items)
            logger.info("Added post %d to %r (%d listings)", listing.post_id, group, len(items))

    def remove_items(
        self, group: str, account_id: str, post_id: int, ctx: CallContext
    ) -> Optional[ItemInfo]:
        """Remove the first listing with ``post_id`` and return it.

        The last listing on the board takes the removed one's place, so
        the order of what remains is not preserved.

        Parameters
        ----------
        group : str
            The board name.
        account_id : str
            Must equal ``ctx.caller_id``; otherwise ``AuthorizationError``
            is raised before any state is read or written.
        post_id : int
            The post id to remove.
        ctx : CallContext
            Host facts for the call, supplying the caller identity.

        Returns
        -------
        Optional[ItemInfo]
            The removed listing, or ``None`` when the board or post id
            does not exist.
        """
        with self._lock:
            self._authorize(account_id, ctx)
            items = self._load_board(group)
            if items is None:
                return None
            removed = None
            position = _find(items, post_id)
            if position is not None:
                removed = items[position]
                items[position] = items[-1]
                items.pop()
                logger.info("Removed post %d from %r", post_id, group)
            self._save_board(group, items)
            return removed

    def remove_item_stable(
        self, group: str, account_id: str, post_id: int, ctx: CallContext
    ) -> Optional[ItemInfo]:
        """Like ``remove_items`` but keeps the remaining listings in order."""
        with self._lock:
            self._authorize(account_id, ctx)
            items = self._load_board(group)
            if items is None:
                return None
            position = _find(items, post_id)
            if position is None:
                return None
            removed = items.pop(position)
            self._save_board(group, items)
            logger.info("Removed post %d from %r, order kept", post_id, group)
            return removed
