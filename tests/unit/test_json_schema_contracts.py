"""
Tests for JSON Schema Contract Validators

Комплексное тестирование JSON Schema валидаторов:
- Валидность самих схем
- Валидация правильных событий
- Детекция нарушений required полей, типов и constraints
- Интеграция с Pydantic моделями и EventLog
"""

import json

import pytest
from jsonschema import ValidationError

from src.core.contracts import (
    AdminChangeEventValidator,
    PriceQuoteValidator,
    RegistryChangeEventValidator,
    SchemaLoader,
    SwapEventValidator,
    validate_admin_change_event,
    validate_model,
    validate_price_quote,
    validate_registry_change_event,
    validate_swap_event,
)
from src.core.domain import PriceQuote, RegistryChangeEvent, SwapEvent, SwapKind
from src.core.events import EventLog


# =============================================================================
# FIXTURES - VALID DATA SAMPLES
# =============================================================================


@pytest.fixture
def valid_swap_event():
    """Валидный swap_event."""
    return {
        "initiator": "alice",
        "kind": "buy_with_native",
        "asset_in": "NATIVE",
        "amount_in": 30_000_000_000_000_000,
        "asset_out": "EXT",
        "amount_out": 10**24,
        "block": 7,
    }


@pytest.fixture
def valid_registry_change():
    """Валидный registry_change_event."""
    return {
        "asset_id": "MPT",
        "old_rate": None,
        "new_rate": 100 * 10**18,
        "supported": True,
        "changed_by": "owner",
        "block": 1,
    }


@pytest.fixture
def valid_admin_change():
    return {
        "action": "transfer_admin",
        "old_value": "owner",
        "new_value": "ops",
        "changed_by": "owner",
        "block": 2,
    }


@pytest.fixture
def valid_price_quote():
    return {"price": 30_000_000_000, "decimals": 8, "updated_at": 1_700_000_000, "round_id": 1}


# =============================================================================
# SCHEMA LOADER
# =============================================================================


class TestSchemaLoader:
    """Тесты загрузчика схем"""

    @pytest.mark.parametrize(
        "schema_name",
        ["swap_event", "registry_change_event", "admin_change_event", "price_quote"],
    )
    def test_all_schemas_load(self, schema_name):
        schema = SchemaLoader().load_schema(schema_name)
        assert schema["$schema"].endswith("2020-12/schema")
        assert schema["type"] == "object"

    def test_cache(self):
        loader = SchemaLoader()
        assert loader.load_schema("swap_event") is loader.load_schema("swap_event")

    def test_missing_schema(self):
        with pytest.raises(FileNotFoundError):
            SchemaLoader().load_schema("does_not_exist")

    def test_invalid_schema(self, tmp_path):
        (tmp_path / "broken.json").write_text(json.dumps({"type": 12}), encoding="utf-8")
        with pytest.raises(ValueError, match="Invalid JSON Schema"):
            SchemaLoader(tmp_path).load_schema("broken")

    def test_missing_directory(self, tmp_path):
        with pytest.raises(RuntimeError):
            SchemaLoader(tmp_path / "nope")


# =============================================================================
# SWAP EVENT
# =============================================================================


class TestSwapEventContract:
    """Тесты swap_event контракта"""

    def test_valid(self, valid_swap_event):
        validate_swap_event(valid_swap_event)
        assert SwapEventValidator().is_valid(valid_swap_event)

    def test_missing_required(self, valid_swap_event):
        del valid_swap_event["amount_out"]
        with pytest.raises(ValidationError):
            validate_swap_event(valid_swap_event)

    def test_unknown_kind(self, valid_swap_event):
        valid_swap_event["kind"] = "swap_everything"
        with pytest.raises(ValidationError):
            validate_swap_event(valid_swap_event)

    def test_zero_amount_in(self, valid_swap_event):
        valid_swap_event["amount_in"] = 0
        with pytest.raises(ValidationError):
            validate_swap_event(valid_swap_event)

    def test_string_amount(self, valid_swap_event):
        valid_swap_event["amount_out"] = "1000"
        with pytest.raises(ValidationError):
            validate_swap_event(valid_swap_event)

    def test_additional_properties(self, valid_swap_event):
        valid_swap_event["note"] = "hi"
        with pytest.raises(ValidationError):
            validate_swap_event(valid_swap_event)

    def test_iter_errors_reports_all(self, valid_swap_event):
        valid_swap_event["amount_in"] = -1
        valid_swap_event["block"] = -1
        errors = list(SwapEventValidator().iter_errors(valid_swap_event))
        assert len(errors) == 2

    def test_pydantic_model_matches_schema(self):
        event = SwapEvent(
            initiator="alice",
            kind=SwapKind.SELL_FOR_ASSET,
            asset_in="EXT",
            amount_in=10**18,
            asset_out="MPT",
            amount_out=100 * 10**18,
            block=3,
        )
        validate_model(event)


# =============================================================================
# REGISTRY / ADMIN / QUOTE
# =============================================================================


class TestRegistryChangeContract:
    """Тесты registry_change_event контракта"""

    def test_valid(self, valid_registry_change):
        validate_registry_change_event(valid_registry_change)

    def test_supported_requires_positive_rate(self, valid_registry_change):
        valid_registry_change["new_rate"] = 0
        with pytest.raises(ValidationError):
            validate_registry_change_event(valid_registry_change)

    def test_removed_entry_keeps_rate(self, valid_registry_change):
        valid_registry_change["supported"] = False
        valid_registry_change["old_rate"] = 100
        validate_registry_change_event(valid_registry_change)
        assert RegistryChangeEventValidator().is_valid(valid_registry_change)

    def test_pydantic_model_matches_schema(self):
        validate_model(
            RegistryChangeEvent(
                asset_id="MPT", new_rate=5, supported=True, changed_by="owner", block=1
            )
        )


class TestAdminChangeContract:
    def test_valid(self, valid_admin_change):
        validate_admin_change_event(valid_admin_change)

    def test_unknown_action(self, valid_admin_change):
        valid_admin_change["action"] = "self_destruct"
        assert not AdminChangeEventValidator().is_valid(valid_admin_change)


class TestPriceQuoteContract:
    def test_valid(self, valid_price_quote):
        validate_price_quote(valid_price_quote)

    def test_decimals_bound(self, valid_price_quote):
        valid_price_quote["decimals"] = 256
        assert not PriceQuoteValidator().is_valid(valid_price_quote)

    def test_pydantic_model_matches_schema(self):
        validate_model(PriceQuote(price=1, decimals=8, updated_at=0, round_id=3))


# =============================================================================
# EVENT LOG
# =============================================================================


class TestEventLog:
    """Тесты журнала событий"""

    def _event(self, block: int) -> RegistryChangeEvent:
        return RegistryChangeEvent(
            asset_id="MPT", new_rate=1, supported=True, changed_by="owner", block=block
        )

    def test_publish_increments_height(self):
        log = EventLog()
        assert log.height == 0
        assert log.next_block() == 1
        assert log.publish(self._event(1)) == 1
        assert log.height == 1
        assert len(log) == 1
        assert log.last().block == 1

    def test_block_mismatch_rejected(self):
        log = EventLog()
        with pytest.raises(ValueError, match="expected 1"):
            log.publish(self._event(5))
        assert len(log) == 0

    def test_subscribers_notified(self):
        log = EventLog()
        received = []
        log.subscribe(received.append)
        log.publish(self._event(1))
        assert received == [log.last()]

    def test_filter_by_type(self):
        log = EventLog()
        log.publish(self._event(1))
        assert log.events(RegistryChangeEvent) == log.events()
        assert log.swaps() == []

    def test_schema_violation_blocks_publish(self):
        """Событие, не прошедшее схему, не попадает в журнал"""
        log = EventLog()
        bad = RegistryChangeEvent.model_construct(
            asset_id="MPT", old_rate=None, new_rate=0, supported=True, changed_by="owner", block=1
        )
        with pytest.raises(ValidationError):
            log.publish(bad)
        assert len(log) == 0
        assert log.height == 0

    def test_validation_can_be_disabled(self):
        log = EventLog(validate=False)
        bad = RegistryChangeEvent.model_construct(
            asset_id="MPT", old_rate=None, new_rate=0, supported=True, changed_by="owner", block=1
        )
        log.publish(bad)
        assert len(log) == 1

    def test_failing_subscriber_does_not_undo_event(self):
        """Ошибка подписчика логируется, событие остаётся, остальные подписчики уведомлены"""
        log = EventLog()
        received = []

        def broken(event):
            raise RuntimeError("indexer down")

        log.subscribe(broken)
        log.subscribe(received.append)

        assert log.publish(self._event(1)) == 1
        assert len(log) == 1
        assert received == [log.last()]

    def test_append_does_not_notify(self):
        log = EventLog()
        received = []
        log.subscribe(received.append)

        log.append(self._event(1))
        assert received == []
        assert log.height == 1

        log.notify(log.last())
        assert received == [log.last()]
