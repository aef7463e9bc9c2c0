"""Composition root for backend services."""

from __future__ import annotations

from backend.repositories.transactions_repository import InMemoryTransactionsRepository
from backend.services.transaction_service import TransactionService


def build_transaction_service() -> TransactionService:
    """Build the transaction service over a fresh in-memory store.

    Each call returns an independent store; the HTTP app builds exactly one
    per process.
    """

    return TransactionService(transactions_repository=InMemoryTransactionsRepository())
