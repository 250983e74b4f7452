"""
Core — fixed-point math, domain models, errors and JSON contracts.

Не зависит от симулированной сети: только чистые функции и модели данных,
которые используют chain, mocks, collateral и plugins.
"""
