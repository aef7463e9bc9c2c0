"""Transactions repository adapters.

Transactions form parent/child trees through ``parent_id``. A child may be
stored before its parent exists; it is attached once the parent arrives.

Complexity of the in-memory adapter:

* insert: O(depth of the new record's ancestor chain); forward references
  are resolved through an index keyed by the awaited parent id instead of a
  full table scan.
* get: O(1).
* ids_for_type: O(size of the bucket), returns a snapshot copy.
* sum: O(size of the subtree), recomputed on every call.
"""

from __future__ import annotations

import logging
import math
import threading
from typing import Protocol

from backend.repositories.rw_lock import ReadWriteLock
from shared.models import ROOT_PARENT_ID, InsertRejection, Transaction


logger = logging.getLogger(__name__)


class TransactionsRepository(Protocol):
    def add(self, transaction: Transaction) -> InsertRejection | None:
        """Store a new transaction, or return why it was refused."""

    def insert(self, transaction: Transaction) -> bool:
        """Store a new transaction and report whether it was accepted."""

    def get(self, transaction_id: int) -> Transaction | None:
        """Return the transaction stored under ``transaction_id``."""

    def ids_for_type(self, transaction_type: str | None) -> frozenset[int]:
        """Return ids of every transaction inserted with ``transaction_type``."""

    def sum(self, transaction_id: int) -> float:
        """Return the amount of a transaction plus all of its descendants."""

    def count(self) -> int:
        """Return the number of stored transactions."""


def _type_key(transaction_type: str | None) -> str:
    return transaction_type or ""


class InMemoryTransactionsRepository:
    """Thread-safe in-process transaction store.

    Inserts are serialized by ``_insert_lock`` so the existence check, the
    cycle checks and the put act as one conditional insert. Children sets are
    only mutated under the write side of ``_links`` and only read under its
    read side, so a sum never sees a half-linked tree. Amounts are finite
    (enforced by ``Transaction``), so ``sum`` always returns a number.
    """

    def __init__(self) -> None:
        self._transactions: dict[int, Transaction] = {}
        self._ids_by_type: dict[str, set[int]] = {}
        # awaited parent id -> ids of stored children whose parent is missing
        self._awaiting_parent: dict[int, set[int]] = {}
        self._insert_lock = threading.Lock()
        self._links = ReadWriteLock()
        self._types_lock = threading.Lock()

    def add(self, transaction: Transaction) -> InsertRejection | None:
        record = transaction.model_copy(update={"children": set()})

        with self._insert_lock:
            if record.id in self._transactions:
                return InsertRejection.DUPLICATE_ID

            parent = None
            if record.parent_id != ROOT_PARENT_ID:
                parent = self._transactions.get(record.parent_id)
            if parent is not None and parent.parent_id == record.id:
                return InsertRejection.DIRECT_CYCLE

            if record.parent_id == record.id:
                return InsertRejection.SELF_PARENT

            if self._closes_cycle(record):
                return InsertRejection.ANCESTOR_CYCLE

            self._transactions[record.id] = record

            with self._links.write_locked():
                if parent is not None:
                    parent.children.add(record.id)
                elif record.parent_id != ROOT_PARENT_ID:
                    self._awaiting_parent.setdefault(record.parent_id, set()).add(record.id)

                orphans = self._awaiting_parent.pop(record.id, None)
                if orphans:
                    record.children.update(orphans)
                    logger.debug(
                        "transaction_forward_references_resolved transaction_id=%s children=%s",
                        record.id,
                        sorted(orphans),
                    )

            with self._types_lock:
                self._ids_by_type.setdefault(_type_key(record.type), set()).add(record.id)

        return None

    def insert(self, transaction: Transaction) -> bool:
        return self.add(transaction) is None

    def _closes_cycle(self, record: Transaction) -> bool:
        """Return whether following parents up from ``record`` leads back to it.

        The stored graph is acyclic, so any cycle the new record would create
        must pass through the record itself.
        """
        ancestor_id = record.parent_id
        while ancestor_id != ROOT_PARENT_ID:
            if ancestor_id == record.id:
                return True
            ancestor = self._transactions.get(ancestor_id)
            if ancestor is None:
                return False
            ancestor_id = ancestor.parent_id
        return False

    def get(self, transaction_id: int) -> Transaction | None:
        record = self._transactions.get(transaction_id)
        if record is None:
            return None

        with self._links.read_locked():
            children = set(record.children)
        return record.model_copy(update={"children": children})

    def ids_for_type(self, transaction_type: str | None) -> frozenset[int]:
        with self._types_lock:
            return frozenset(self._ids_by_type.get(_type_key(transaction_type), ()))

    def sum(self, transaction_id: int) -> float:
        root = self._transactions.get(transaction_id)
        if root is None:
            return 0.0

        amounts: list[float] = []
        with self._links.read_locked():
            pending = [root]
            while pending:
                record = pending.pop()
                amounts.append(record.amount)
                pending.extend(self._transactions[child_id] for child_id in record.children)

        try:
            return math.fsum(amounts)
        except OverflowError:
            # finite amounts whose exact total exceeds the float range
            total = 0.0
            for amount in amounts:
                total += amount
            return total

    def count(self) -> int:
        return len(self._transactions)
