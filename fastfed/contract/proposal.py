"""A contract awaiting acceptance by the other party."""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from enum import Enum
from typing import Optional

from pydantic import field_validator

from ..constants import (
    CONTRACT,
    CONTRACT_PROPOSAL,
    CONTRACT_PROPOSAL_CLOSURE_DATE,
    CONTRACT_PROPOSAL_EXPIRATION_DATE,
    CONTRACT_PROPOSAL_STATUS,
)
from ..errors import ErrorAccumulator, InvalidChangeError
from ..json_object import JsonObject, JsonObjectBuilder
from ..metadata.base import Metadata
from .models import Contract

logger = logging.getLogger(__name__)


class ContractProposalStatus(str, Enum):
    PENDING = "Pending"
    ACCEPTED = "Accepted"
    CANCELLED = "Cancelled"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _as_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Treat naive datetimes as UTC."""
    if value is not None and value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


class ContractProposal(Metadata):
    """Pending -> Accepted or Pending -> Cancelled.

    Closing a proposal stamps ``closure_date`` and clears ``expiration_date``.
    """

    contract: Optional[Contract] = None
    expiration_date: Optional[datetime] = None
    status: ContractProposalStatus = ContractProposalStatus.PENDING
    closure_date: Optional[datetime] = None

    @field_validator("expiration_date", "closure_date")
    @classmethod
    def _ensure_utc(cls, v: Optional[datetime]) -> Optional[datetime]:
        return _as_utc(v)

    @classmethod
    def for_contract(cls, contract: Contract, expiration_date: datetime) -> "ContractProposal":
        return cls(
            contract.configuration,
            contract=contract,
            expiration_date=expiration_date,
            status=ContractProposalStatus.PENDING,
        )

    def is_expired(self, now: Optional[datetime] = None) -> bool:
        if self.status is not ContractProposalStatus.PENDING or self.expiration_date is None:
            return False
        return (_as_utc(now) or _utcnow()) >= self.expiration_date

    def accept(self, now: Optional[datetime] = None) -> None:
        self._close(ContractProposalStatus.ACCEPTED, now)

    def cancel(self, now: Optional[datetime] = None) -> None:
        self._close(ContractProposalStatus.CANCELLED, now)

    def _close(self, status: ContractProposalStatus, now: Optional[datetime]) -> None:
        if self.status is not ContractProposalStatus.PENDING:
            raise InvalidChangeError(
                f"Cannot move contract proposal from {self.status.value} to {status.value}"
            )
        self.status = status
        self.closure_date = _as_utc(now) or _utcnow()
        self.expiration_date = None
        logger.info(f"Contract proposal {status.value.lower()} at {self.closure_date.isoformat()}")

    # ------------------------------------------------------------------
    def to_json(self) -> JsonObject:
        builder = JsonObjectBuilder(CONTRACT_PROPOSAL)
        if self.contract is not None:
            builder.put_all(self.contract.to_json())
        builder.put(CONTRACT_PROPOSAL_EXPIRATION_DATE, self.expiration_date)
        builder.put(CONTRACT_PROPOSAL_STATUS, self.status)
        builder.put(CONTRACT_PROPOSAL_CLOSURE_DATE, self.closure_date)
        return builder.build()

    def hydrate_from_json(self, json: Optional[JsonObject]) -> None:
        if json is None:
            return
        json = json.unwrap_object_if_needed(CONTRACT_PROPOSAL)
        super().hydrate_from_json(json)
        self.contract = self.hydrate_child(json, CONTRACT, Contract)
        self.expiration_date = json.get_datetime(CONTRACT_PROPOSAL_EXPIRATION_DATE)
        self.closure_date = json.get_datetime(CONTRACT_PROPOSAL_CLOSURE_DATE)

        status = json.get_string(CONTRACT_PROPOSAL_STATUS)
        if status is None:
            self.status = ContractProposalStatus.PENDING
            return
        try:
            self.status = ContractProposalStatus(status)
        except ValueError:
            json.errors.add(
                f'Invalid value for "{json.fully_qualified_name(CONTRACT_PROPOSAL_STATUS)}" '
                f'(received: "{status}")'
            )

    def validate(self, errors: ErrorAccumulator) -> None:
        self.validate_required_object(errors, CONTRACT, self.contract)
        if self.contract is not None:
            self.contract.validate(errors)
        if self.status is ContractProposalStatus.PENDING:
            self.validate_required_object(
                errors, CONTRACT_PROPOSAL_EXPIRATION_DATE, self.expiration_date
            )
        else:
            self.validate_required_object(
                errors, CONTRACT_PROPOSAL_CLOSURE_DATE, self.closure_date
            )
