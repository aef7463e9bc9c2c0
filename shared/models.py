"""Pydantic contracts shared across the store, the service and the HTTP API."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, field_validator


ROOT_PARENT_ID = 0
INSERT_STATUS_OK = "OK"
INSERT_STATUS_REJECTED = "Bad Request"


class ToolErrorCode(str, Enum):
    """Stable error codes for service contracts across layers."""

    VALIDATION_ERROR = "VALIDATION_ERROR"
    NOT_FOUND = "NOT_FOUND"
    DUPLICATE_ID = "DUPLICATE_ID"
    SELF_PARENT = "SELF_PARENT"
    DIRECT_CYCLE = "DIRECT_CYCLE"
    ANCESTOR_CYCLE = "ANCESTOR_CYCLE"


class InsertRejection(str, Enum):
    """Reasons the store refuses an insert. Each leaves the store untouched."""

    DUPLICATE_ID = "DUPLICATE_ID"
    SELF_PARENT = "SELF_PARENT"
    DIRECT_CYCLE = "DIRECT_CYCLE"
    ANCESTOR_CYCLE = "ANCESTOR_CYCLE"

    @property
    def error_code(self) -> ToolErrorCode:
        return ToolErrorCode(self.value)


class Transaction(BaseModel):
    """A stored transaction record.

    ``children`` holds the ids of records naming this one as parent. It is
    owned by the store and only ever grows. ``amount`` must be finite.
    """

    model_config = ConfigDict(extra="forbid", allow_inf_nan=False)

    id: int
    amount: float
    type: str | None = None
    parent_id: int = ROOT_PARENT_ID
    children: set[int] = Field(default_factory=set)

    @property
    def is_root(self) -> bool:
        return self.parent_id == ROOT_PARENT_ID


class TransactionPayload(BaseModel):
    """Body of ``PUT /transactionservice/transaction/{id}``."""

    model_config = ConfigDict(extra="forbid", allow_inf_nan=False)

    amount: float
    type: str | None = None
    parent_id: int = ROOT_PARENT_ID

    @field_validator("parent_id", mode="before")
    @classmethod
    def default_missing_parent(cls, value: object) -> object:
        if value is None:
            return ROOT_PARENT_ID
        return value

    def to_transaction(self, transaction_id: int) -> Transaction:
        return Transaction(
            id=transaction_id,
            amount=self.amount,
            type=self.type,
            parent_id=self.parent_id,
        )


class TransactionView(BaseModel):
    model_config = ConfigDict(extra="forbid", allow_inf_nan=False)

    amount: float
    type: str | None = None
    parent_id: int = ROOT_PARENT_ID

    @classmethod
    def from_transaction(cls, transaction: Transaction) -> TransactionView:
        return cls(
            amount=transaction.amount,
            type=transaction.type,
            parent_id=transaction.parent_id,
        )


class InsertStatus(BaseModel):
    model_config = ConfigDict(extra="forbid")

    status: str
    code: ToolErrorCode | None = None
    message: str | None = None


class SumResult(BaseModel):
    model_config = ConfigDict(extra="forbid")

    sum: float


class ToolError(BaseModel):
    model_config = ConfigDict(extra="forbid")

    code: ToolErrorCode
    message: str
    details: dict[str, object] | None = None
