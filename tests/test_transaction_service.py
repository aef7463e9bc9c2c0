"""Contract tests for the transaction service boundary."""

from __future__ import annotations

import logging

from backend.factory import build_transaction_service
from shared.models import (
    INSERT_STATUS_OK,
    InsertStatus,
    SumResult,
    ToolError,
    ToolErrorCode,
    TransactionPayload,
    TransactionView,
)


def test_insert_transaction_returns_ok_status() -> None:
    service = build_transaction_service()

    result = service.insert_transaction(10, TransactionPayload(amount=10000, type="cars"))

    assert result == InsertStatus(status=INSERT_STATUS_OK)
    assert service.transaction_count() == 1


def test_insert_transaction_maps_duplicate_to_tool_error(caplog) -> None:
    service = build_transaction_service()
    service.insert_transaction(10, TransactionPayload(amount=1, type="cars"))

    with caplog.at_level(logging.WARNING):
        result = service.insert_transaction(10, TransactionPayload(amount=2, type="cars"))

    assert isinstance(result, ToolError)
    assert result.code == ToolErrorCode.DUPLICATE_ID
    assert result.details == {"transaction_id": 10, "parent_id": 0}
    assert "transaction_insert_rejected transaction_id=10" in caplog.text


def test_insert_transaction_maps_self_parent_and_cycles() -> None:
    service = build_transaction_service()

    self_parent = service.insert_transaction(3, TransactionPayload(amount=1, parent_id=3))
    service.insert_transaction(1, TransactionPayload(amount=1, parent_id=2))
    direct_cycle = service.insert_transaction(2, TransactionPayload(amount=1, parent_id=1))

    assert isinstance(self_parent, ToolError)
    assert self_parent.code == ToolErrorCode.SELF_PARENT
    assert isinstance(direct_cycle, ToolError)
    assert direct_cycle.code == ToolErrorCode.DIRECT_CYCLE
    assert direct_cycle.message == "Parent transaction 1 already has transaction 2 as parent."


def test_get_transaction_returns_view_or_not_found() -> None:
    service = build_transaction_service()
    service.insert_transaction(5, TransactionPayload(amount=7.5, type="keys", parent_id=4))

    found = service.get_transaction(5)
    missing = service.get_transaction(6)

    assert found == TransactionView(amount=7.5, type="keys", parent_id=4)
    assert isinstance(missing, ToolError)
    assert missing.code == ToolErrorCode.NOT_FOUND


def test_transaction_ids_for_type_are_sorted() -> None:
    service = build_transaction_service()
    for transaction_id in (30, 10, 20):
        service.insert_transaction(transaction_id, TransactionPayload(amount=1, type="cars"))

    assert service.transaction_ids_for_type("cars") == [10, 20, 30]
    assert service.transaction_ids_for_type("boats") == []


def test_transaction_sum_wraps_repository_sum() -> None:
    service = build_transaction_service()
    service.insert_transaction(10, TransactionPayload(amount=10000, type="cars"))
    service.insert_transaction(11, TransactionPayload(amount=15000, type="shopping", parent_id=10))

    assert service.transaction_sum(10) == SumResult(sum=25000)
    assert service.transaction_sum(99) == SumResult(sum=0)


def test_payload_treats_null_parent_as_root() -> None:
    payload = TransactionPayload.model_validate({"amount": 1.0, "type": "cars", "parent_id": None})

    assert payload.parent_id == 0
    assert payload.to_transaction(4).is_root
