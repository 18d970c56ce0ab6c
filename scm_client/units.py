"""
Conversion of user supplied amounts to wei.
"""
import re
from decimal import Decimal, Inexact, localcontext

from web3 import Web3

from .exceptions import AmountParseError

MAX_UINT256 = 2**256 - 1

_AMOUNT_RE = re.compile(r"^(?:\d+(?:\.\d*)?|\.\d+)$")


def parse_amount(amount: str, unit: str) -> int:
    """
    Convert a decimal amount in the given unit to an integer amount of wei

    Args:
        amount: Non-negative decimal string, e.g. "1.5"
        unit: Unit name known to web3, e.g. "ether" or "gwei" (case-insensitive)

    Returns:
        Amount in wei

    Raises:
        AmountParseError: If the amount is malformed, the unit unknown, or the
            amount has more fractional digits than the unit can represent
    """
    amount = amount.strip()
    if not _AMOUNT_RE.match(amount):
        raise AmountParseError(f"Malformed amount: '{amount}'")

    try:
        multiplier = Web3.to_wei(1, unit)
    except (ValueError, AttributeError) as e:
        raise AmountParseError(f"Unknown unit '{unit}': {e}") from e

    with localcontext() as ctx:
        # wide enough for the amount times any unit multiplier; rounding is trapped
        ctx.prec = len(amount) + 80
        ctx.traps[Inexact] = True
        try:
            wei = Decimal(amount) * multiplier
        except Inexact as e:
            raise AmountParseError(f"Amount {amount} {unit} can't be converted to wei exactly") from e
        if wei != wei.to_integral_value():
            raise AmountParseError(f"Amount {amount} {unit} is not a whole number of wei")

    wei = int(wei)
    if wei > MAX_UINT256:
        raise AmountParseError(f"Amount {amount} {unit} exceeds the uint256 range")
    return wei
