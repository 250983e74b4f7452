"""
Contract Validation Module

Валидация JSON контрактов harness (overrides конфигурации, отчёты battery).
"""

from .validators import (
    BatteryReportValidator,
    CollateralOptsValidator,
    ContractValidator,
    SchemaLoader,
    validate_battery_report,
    validate_collateral_opts,
)

__all__ = [
    # Classes
    "SchemaLoader",
    "ContractValidator",
    "CollateralOptsValidator",
    "BatteryReportValidator",
    # Functions
    "validate_collateral_opts",
    "validate_battery_report",
]
