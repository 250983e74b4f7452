"""
Address — адреса аккаунтов и контрактов

Адрес хранится как lowercase hex строка "0x" + 40 символов.
Сравнения адресов выполняются только после normalize_address.
"""

import re
from typing import Final

ZERO_ADDRESS: Final[str] = "0x" + "0" * 40

_ADDRESS_RE = re.compile(r"^0x[0-9a-fA-F]{40}$")


def normalize_address(address: str) -> str:
    """
    Приведение адреса к каноническому виду (lowercase).

    Raises:
        ValueError: если строка не является адресом
    """
    if not isinstance(address, str) or not _ADDRESS_RE.match(address):
        raise ValueError(f"invalid address: {address!r}")
    return address.lower()


def is_zero_address(address: str) -> bool:
    return normalize_address(address) == ZERO_ADDRESS
