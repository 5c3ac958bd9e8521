import json
from datetime import datetime, timedelta, timezone

import pytest

from fastfed.contract import ContractProposal, ContractProposalStatus
from fastfed.errors import InvalidChangeError, InvalidMetadataError

EXPIRATION = datetime(2030, 1, 1, tzinfo=timezone.utc)


@pytest.fixture
def proposal(contract):
    return ContractProposal.for_contract(contract, EXPIRATION)


def test_new_proposal_is_pending(proposal, contract):
    assert proposal.status is ContractProposalStatus.PENDING
    assert proposal.contract is contract
    assert proposal.closure_date is None


def test_expiry(proposal):
    assert not proposal.is_expired(EXPIRATION - timedelta(seconds=1))
    assert proposal.is_expired(EXPIRATION)


def test_accept(proposal):
    closed_at = datetime(2029, 6, 1, tzinfo=timezone.utc)

    proposal.accept(closed_at)

    assert proposal.status is ContractProposalStatus.ACCEPTED
    assert proposal.closure_date == closed_at
    assert proposal.expiration_date is None
    assert not proposal.is_expired(EXPIRATION + timedelta(days=1))


def test_naive_datetimes_are_treated_as_utc(config, contract):
    proposal = ContractProposal.for_contract(contract, datetime(2030, 1, 1))

    assert proposal.expiration_date == EXPIRATION
    assert proposal.expiration_date.tzinfo is not None
    assert not proposal.is_expired(datetime(2029, 12, 31))
    assert proposal.is_expired(datetime(2031, 1, 1))

    document = proposal.to_json().to_dict()
    assert document["contract_proposal"]["expiration_date"] == int(EXPIRATION.timestamp())

    proposal.accept(datetime(2029, 6, 1))
    assert proposal.closure_date == datetime(2029, 6, 1, tzinfo=timezone.utc)


def test_cancel(proposal):
    proposal.cancel()

    assert proposal.status is ContractProposalStatus.CANCELLED
    assert proposal.closure_date is not None


def test_closed_proposal_cannot_change(proposal):
    proposal.cancel()

    with pytest.raises(InvalidChangeError):
        proposal.accept()


def test_round_trip(config, proposal):
    document = proposal.to_json().to_dict()

    assert document["contract_proposal"]["status"] == "Pending"
    assert document["contract_proposal"]["expiration_date"] == int(EXPIRATION.timestamp())

    restored = ContractProposal.from_json(config, json.dumps(document))
    assert restored == proposal


def test_pending_proposal_requires_expiration(config, proposal):
    document = proposal.to_json().to_dict()
    del document["contract_proposal"]["expiration_date"]

    with pytest.raises(InvalidMetadataError) as exc_info:
        ContractProposal.from_json(config, json.dumps(document))

    assert exc_info.value.errors.errors == [
        'Missing value for "contract_proposal.expiration_date"'
    ]


def test_closed_proposal_requires_closure_date(config, proposal):
    proposal.accept()
    document = proposal.to_json().to_dict()
    del document["contract_proposal"]["closure_date"]

    with pytest.raises(InvalidMetadataError) as exc_info:
        ContractProposal.from_json(config, json.dumps(document))

    assert exc_info.value.errors.errors == ['Missing value for "contract_proposal.closure_date"']


def test_unknown_status(config, proposal):
    document = proposal.to_json().to_dict()
    document["contract_proposal"]["status"] = "Archived"

    with pytest.raises(InvalidMetadataError) as exc_info:
        ContractProposal.from_json(config, json.dumps(document))

    assert exc_info.value.errors.errors == [
        'Invalid value for "contract_proposal.status" (received: "Archived")'
    ]
