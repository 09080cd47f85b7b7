"""Field types shared by the event and service models.

Amounts cross the HTTP boundary as decimal strings so clients never lose
precision on 256-bit values; accounts are lowercase hex addresses.
"""

import hashlib
import re
from typing import Annotated, Any

from pydantic import BeforeValidator, Field

from amm_pool.constants import UINT256_MAX
from amm_pool.errors import InvalidAddress

_HEX_ADDRESS = re.compile(r"0x[0-9a-fA-F]{40}")


def validate_uint256(value: Any) -> str:
    """Coerce an int or decimal string into a canonical uint256 string.

    Raises:
        ValueError: For bools, non-integers, negatives and values above 2^256-1
    """
    if isinstance(value, bool) or not isinstance(value, int | str):
        raise ValueError(f"Uint256 must be string or int, got {type(value).__name__}")
    try:
        parsed = int(value)
    except ValueError as err:
        raise ValueError(f"Uint256 must be a decimal integer string: '{value}'") from err

    if not 0 <= parsed <= UINT256_MAX:
        raise ValueError(f"Uint256 out of range [0, 2^256-1]: {value}")
    return str(parsed)


def _lowercase(value: Any) -> Any:
    return value.lower() if isinstance(value, str) else value


# Account address, stored lowercase
Address = Annotated[
    str,
    BeforeValidator(_lowercase),
    Field(pattern=r"^0x[a-f0-9]{40}$"),
]

# Token amount in minimal units, carried as a decimal string
Uint256 = Annotated[
    str,
    BeforeValidator(validate_uint256),
    Field(description="256-bit unsigned integer as decimal string"),
]


def is_valid_address(address: str) -> bool:
    """True for a 0x-prefixed, 40-hex-digit string (any case)."""
    return isinstance(address, str) and _HEX_ADDRESS.fullmatch(address) is not None


def normalize_address(address: str, *, validate: bool = False) -> str:
    """Lowercase an address and make sure it carries the 0x prefix.

    Ledgers key balances by the normalized form, so mixed-case input from
    clients lands on the same account.

    Raises:
        ValueError: If validate=True and the result is not a valid address
    """
    normalized = address.lower()
    if not normalized.startswith("0x"):
        normalized = f"0x{normalized}"
    if validate and not is_valid_address(normalized):
        raise ValueError(f"Invalid address: {address}")
    return normalized


def require_address(address: Any) -> str:
    """Normalize an account passed to a pool or router entry point.

    Raises:
        InvalidAddress: If `address` is not a string or not a valid address
    """
    if not isinstance(address, str) or not is_valid_address(address.lower()):
        raise InvalidAddress(f"Invalid address: {address!r}")
    return address.lower()


def derive_address(label: str) -> str:
    """Deterministic address for a well-known account (pool, router, treasury).

    address = "0x" + sha256("amm-pool:" || label)[:20 bytes]
    """
    digest = hashlib.sha256(f"amm-pool:{label}".encode()).hexdigest()
    return "0x" + digest[:40]
