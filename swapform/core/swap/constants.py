"""Constants and user-facing copy for the swap form engine."""

from __future__ import annotations

from decimal import Decimal
from typing import Dict

# Quantum for derived amounts written back into a field
AMOUNT_QUANTUM = Decimal("0.00000001")

# Receipts display fewer digits than the fields
RECEIPT_DECIMALS = 4

# Returned for pairs whose target price is missing or not positive
UNAVAILABLE_RATE = Decimal("0")

MESSAGES: Dict[str, str] = {
    'empty_amount': 'Please enter an amount to swap.',
    'not_a_number': 'Amount must be a valid number.',
    'non_positive': 'Amount must be greater than zero.',
    'exceeds_balance': 'Amount must not exceed the balance of {max_balance} {symbol}.',
    'rate_unavailable': 'Cannot calculate exchange rate for this token pair.',
    'identical_assets': 'Cannot swap two identical currencies.',
    'in_flight': 'A swap is already being processed.',
    'field_locked': 'The receive amount cannot be edited while a swap is processing.',
    'unknown_asset': 'Unknown token: {symbol}.',
    'settlement_failed': 'Swap failed: {reason}',
    'settlement_success': 'Swap successful! You received {amount} {symbol}',
}

__all__ = [
    'AMOUNT_QUANTUM',
    'RECEIPT_DECIMALS',
    'UNAVAILABLE_RATE',
    'MESSAGES',
]
