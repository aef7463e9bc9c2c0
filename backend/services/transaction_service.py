"""Transaction service.

Contract boundary over the transactions repository: rejections and missing
records come back as ``ToolError`` values, never as exceptions.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from backend.repositories.transactions_repository import TransactionsRepository
from shared.models import (
    INSERT_STATUS_OK,
    InsertRejection,
    InsertStatus,
    SumResult,
    ToolError,
    ToolErrorCode,
    TransactionPayload,
    TransactionView,
)


logger = logging.getLogger(__name__)


_REJECTION_MESSAGES: dict[InsertRejection, str] = {
    InsertRejection.DUPLICATE_ID: "Transaction {id} already exists; updates are not supported.",
    InsertRejection.SELF_PARENT: "Transaction {id} cannot be its own parent.",
    InsertRejection.DIRECT_CYCLE: "Parent transaction {parent_id} already has transaction {id} as parent.",
    InsertRejection.ANCESTOR_CYCLE: "Parent transaction {parent_id} descends from transaction {id}.",
}


@dataclass(slots=True)
class TransactionService:
    transactions_repository: TransactionsRepository

    def insert_transaction(
        self,
        transaction_id: int,
        payload: TransactionPayload,
    ) -> InsertStatus | ToolError:
        transaction = payload.to_transaction(transaction_id)
        rejection = self.transactions_repository.add(transaction)

        if rejection is not None:
            message = _REJECTION_MESSAGES[rejection].format(
                id=transaction.id,
                parent_id=transaction.parent_id,
            )
            logger.warning(
                "transaction_insert_rejected transaction_id=%s parent_id=%s code=%s",
                transaction.id,
                transaction.parent_id,
                rejection.value,
            )
            return ToolError(
                code=rejection.error_code,
                message=message,
                details={"transaction_id": transaction.id, "parent_id": transaction.parent_id},
            )

        logger.info(
            "transaction_inserted transaction_id=%s parent_id=%s type=%s",
            transaction.id,
            transaction.parent_id,
            transaction.type,
        )
        return InsertStatus(status=INSERT_STATUS_OK)

    def get_transaction(self, transaction_id: int) -> TransactionView | ToolError:
        transaction = self.transactions_repository.get(transaction_id)
        if transaction is None:
            logger.debug("transaction_not_found transaction_id=%s", transaction_id)
            return ToolError(
                code=ToolErrorCode.NOT_FOUND,
                message=f"Transaction {transaction_id} not found.",
                details={"transaction_id": transaction_id},
            )
        return TransactionView.from_transaction(transaction)

    def transaction_ids_for_type(self, transaction_type: str) -> list[int]:
        """Return ids sharing ``transaction_type`` in ascending order."""

        return sorted(self.transactions_repository.ids_for_type(transaction_type))

    def transaction_sum(self, transaction_id: int) -> SumResult:
        return SumResult(sum=self.transactions_repository.sum(transaction_id))

    def transaction_count(self) -> int:
        return self.transactions_repository.count()
