"""
Tests for JSON Schema Contract Validators

Комплексное тестирование JSON Schema валидаторов:
- Валидность самих схем
- Валидация правильных данных
- Детекция нарушений типов, pattern и additionalProperties
- Условие error ↔ outcome в отчёте battery
"""

import pytest
from jsonschema import Draft202012Validator, ValidationError

from src.core.contracts import (
    BatteryReportValidator,
    CollateralOptsValidator,
    SchemaLoader,
    validate_battery_report,
    validate_collateral_opts,
)
from src.core.domain.address import ZERO_ADDRESS


# =============================================================================
# SCHEMA VALIDITY
# =============================================================================


class TestSchemaValidity:
    @pytest.mark.parametrize("schema_name", ["collateral_opts", "battery_report"])
    def test_schema_is_valid_draft_2020_12(self, schema_name):
        schema = SchemaLoader().load_schema(schema_name)
        Draft202012Validator.check_schema(schema)

    def test_missing_schema(self):
        with pytest.raises(FileNotFoundError):
            SchemaLoader().load_schema("does_not_exist")

    def test_loader_caches(self):
        loader = SchemaLoader()
        assert loader.load_schema("battery_report") is loader.load_schema("battery_report")


# =============================================================================
# COLLATERAL OPTS
# =============================================================================


class TestCollateralOptsSchema:
    def test_empty_overrides_valid(self):
        validate_collateral_opts({})

    def test_partial_overrides_valid(self):
        validate_collateral_opts({"oracle_timeout": 0, "erc20": ZERO_ADDRESS, "target_name": ""})

    def test_unknown_field(self):
        with pytest.raises(ValidationError):
            validate_collateral_opts({"oracle_timeuot": 0})

    def test_negative_uint(self):
        with pytest.raises(ValidationError):
            validate_collateral_opts({"delay_until_default": -1})

    def test_bad_address(self):
        with pytest.raises(ValidationError):
            validate_collateral_opts({"chainlink_feed": "0xdead"})

    def test_string_number_rejected(self):
        assert not CollateralOptsValidator().is_valid({"max_trade_volume": "1000"})


# =============================================================================
# BATTERY REPORT
# =============================================================================


class TestBatteryReportSchema:
    def _report(self, **result):
        return {"collateral_name": "LidoStakedETH", "results": [result]}

    def test_passed_result(self):
        validate_battery_report(
            self._report(group="mint", name="mints", outcome="PASSED", error=None)
        )

    def test_failed_needs_error_string(self):
        with pytest.raises(ValidationError):
            validate_battery_report(
                self._report(group="mint", name="mints", outcome="FAILED", error=None)
            )

    def test_skipped_must_not_carry_error(self):
        with pytest.raises(ValidationError):
            validate_battery_report(
                self._report(group="rewards", name="claims", outcome="SKIPPED", error="x")
            )

    def test_unknown_outcome(self):
        errors = list(
            BatteryReportValidator().iter_errors(
                self._report(group="mint", name="mints", outcome="MAYBE", error=None)
            )
        )
        assert errors

    def test_empty_name_rejected(self):
        with pytest.raises(ValidationError):
            validate_battery_report({"collateral_name": "", "results": []})
