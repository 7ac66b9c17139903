"""
Tests for JSON Schema Contract Validators

Комплексное тестирование JSON Schema валидаторов:
- Валидность самих схем
- Валидация правильных данных
- Детекция нарушений required полей
- Детекция нарушений constraints (pattern / const / minimum / null identity)
- Интеграция с Pydantic моделями
"""

import json

import pytest
from jsonschema import ValidationError

from nft_ledger.core.contracts import (
    ApprovalEventValidator,
    LedgerSnapshotValidator,
    SchemaLoader,
    TransferEventValidator,
    validate_approval_event,
    validate_event,
    validate_ledger_snapshot,
    validate_transfer_event,
)
from nft_ledger.core.domain import (
    NULL_IDENTITY,
    ApprovalEvent,
    TransferEvent,
    event_to_dict,
    identity_from_int,
)

ALICE = identity_from_int(0xA11CE)
BOB = identity_from_int(0xB0B)


# =============================================================================
# FIXTURES - VALID DATA SAMPLES
# =============================================================================


@pytest.fixture
def valid_transfer_event():
    """Валидный transfer_event."""
    return {
        "event_type": "Transfer",
        "from": ALICE,
        "to": BOB,
        "token_id": 42,
        "sequence": 3,
    }


@pytest.fixture
def valid_approval_event():
    """Валидный approval_event."""
    return {
        "event_type": "Approval",
        "owner": ALICE,
        "approved": BOB,
        "token_id": 42,
    }


@pytest.fixture
def valid_ledger_snapshot():
    """Валидный ledger_snapshot."""
    return {
        "name": "NonFungibleToken",
        "symbol": "NFT",
        "administrator": ALICE,
        "tokens": [
            {"token_id": 1, "owner": BOB, "approved": None},
            {"token_id": 2, "owner": BOB, "approved": ALICE},
        ],
        "balances": {BOB: 2},
        "total_supply": 2,
        "event_count": 3,
    }


# =============================================================================
# SCHEMA LOADER
# =============================================================================


class TestSchemaLoader:
    """Тесты загрузчика схем."""

    @pytest.mark.parametrize("schema_name", ["transfer_event", "approval_event", "ledger_snapshot"])
    def test_schemas_load(self, schema_name):
        schema = SchemaLoader().load_schema(schema_name)
        assert schema["$schema"] == "https://json-schema.org/draft/2020-12/schema"

    def test_schema_cached(self):
        loader = SchemaLoader()
        assert loader.load_schema("transfer_event") is loader.load_schema("transfer_event")

    def test_missing_schema(self):
        with pytest.raises(FileNotFoundError):
            SchemaLoader().load_schema("does_not_exist")

    def test_missing_directory(self, tmp_path):
        with pytest.raises(RuntimeError):
            SchemaLoader(tmp_path / "nope")

    def test_invalid_schema_rejected(self, tmp_path):
        (tmp_path / "broken.json").write_text(json.dumps({"type": 12}), encoding="utf-8")
        with pytest.raises(ValueError):
            SchemaLoader(tmp_path).load_schema("broken")


# =============================================================================
# TRANSFER EVENT
# =============================================================================


class TestTransferEventContract:
    """Тесты transfer_event контракта."""

    def test_valid(self, valid_transfer_event):
        validate_transfer_event(valid_transfer_event)

    def test_mint_from_null_valid(self, valid_transfer_event):
        valid_transfer_event["from"] = NULL_IDENTITY
        validate_transfer_event(valid_transfer_event)

    def test_to_null_invalid(self, valid_transfer_event):
        valid_transfer_event["to"] = NULL_IDENTITY
        with pytest.raises(ValidationError):
            validate_transfer_event(valid_transfer_event)

    @pytest.mark.parametrize("field", ["event_type", "from", "to", "token_id"])
    def test_required_fields(self, valid_transfer_event, field):
        del valid_transfer_event[field]
        assert not TransferEventValidator().is_valid(valid_transfer_event)

    def test_negative_token_id(self, valid_transfer_event):
        valid_transfer_event["token_id"] = -1
        with pytest.raises(ValidationError):
            validate_transfer_event(valid_transfer_event)

    def test_uppercase_address_invalid(self, valid_transfer_event):
        valid_transfer_event["to"] = BOB.upper()
        with pytest.raises(ValidationError):
            validate_transfer_event(valid_transfer_event)

    def test_additional_properties_rejected(self, valid_transfer_event):
        valid_transfer_event["value"] = 1
        with pytest.raises(ValidationError):
            validate_transfer_event(valid_transfer_event)

    def test_iter_errors_reports_all(self, valid_transfer_event):
        valid_transfer_event["token_id"] = -1
        valid_transfer_event["to"] = NULL_IDENTITY
        errors = list(TransferEventValidator().iter_errors(valid_transfer_event))
        assert len(errors) == 2

    def test_large_token_id(self, valid_transfer_event):
        valid_transfer_event["token_id"] = 2**256 - 1
        validate_transfer_event(valid_transfer_event)


# =============================================================================
# APPROVAL EVENT
# =============================================================================


class TestApprovalEventContract:
    """Тесты approval_event контракта."""

    def test_valid(self, valid_approval_event):
        validate_approval_event(valid_approval_event)

    def test_approved_null_invalid(self, valid_approval_event):
        valid_approval_event["approved"] = NULL_IDENTITY
        with pytest.raises(ValidationError):
            validate_approval_event(valid_approval_event)

    def test_wrong_event_type(self, valid_approval_event):
        valid_approval_event["event_type"] = "Transfer"
        assert not ApprovalEventValidator().is_valid(valid_approval_event)


# =============================================================================
# LEDGER SNAPSHOT
# =============================================================================


class TestLedgerSnapshotContract:
    """Тесты ledger_snapshot контракта."""

    def test_valid(self, valid_ledger_snapshot):
        validate_ledger_snapshot(valid_ledger_snapshot)

    def test_null_administrator_allowed(self, valid_ledger_snapshot):
        valid_ledger_snapshot["administrator"] = None
        validate_ledger_snapshot(valid_ledger_snapshot)

    def test_zero_balance_rejected(self, valid_ledger_snapshot):
        valid_ledger_snapshot["balances"][ALICE] = 0
        assert not LedgerSnapshotValidator().is_valid(valid_ledger_snapshot)

    def test_null_owner_rejected(self, valid_ledger_snapshot):
        valid_ledger_snapshot["tokens"][0]["owner"] = NULL_IDENTITY
        with pytest.raises(ValidationError):
            validate_ledger_snapshot(valid_ledger_snapshot)


# =============================================================================
# DISPATCH + PYDANTIC INTEGRATION
# =============================================================================


class TestEventDispatch:
    """Тесты validate_event и совместимости с Pydantic моделями."""

    def test_dispatch(self, valid_transfer_event, valid_approval_event):
        validate_event(valid_transfer_event)
        validate_event(valid_approval_event)

    def test_unknown_event_type(self):
        with pytest.raises(ValidationError):
            validate_event({"event_type": "Burn"})

    def test_pydantic_transfer_conforms(self):
        validate_event(event_to_dict(TransferEvent(from_=NULL_IDENTITY, to=BOB, token_id=1)))

    def test_pydantic_approval_conforms(self):
        validate_event(event_to_dict(ApprovalEvent(owner=ALICE, approved=BOB, token_id=1, sequence=0)))
