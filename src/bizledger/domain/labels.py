"""Display labels and icons for domain enumerations.

Every table is closed over its enum and every lookup has a fallback, so an
unknown or future value still renders.
"""

from typing import Optional

from bizledger.domain.entities import (
    AustralianState,
    CostType,
    PaymentMethod,
    TransactionCategory,
    TransactionType,
)

FALLBACK_LABEL = "Other"
FALLBACK_ICON = "circle"

CATEGORY_LABELS: dict[TransactionCategory, str] = {
    TransactionCategory.CLIENT_PAYMENT: "Client Payment",
    TransactionCategory.INVESTMENT: "Investment",
    TransactionCategory.GST: "GST",
    TransactionCategory.TAX: "Tax",
    TransactionCategory.MARKETING: "Marketing",
    TransactionCategory.FRANCHISE_FEE: "Franchise Fee",
    TransactionCategory.OTHER: "Other",
}

TRANSACTION_TYPE_LABELS: dict[TransactionType, str] = {
    TransactionType.INFLOW: "Inflow",
    TransactionType.OUTFLOW: "Outflow",
}

PAYMENT_METHOD_LABELS: dict[PaymentMethod, str] = {
    PaymentMethod.CREDIT_DEBIT_CARD: "Credit / Debit Card",
    PaymentMethod.CASH_IN_HAND: "Cash in Hand",
    PaymentMethod.BANK_TRANSFER_BUSINESS: "Bank Transfer -> Business Account",
    PaymentMethod.BANK_TRANSFER_PERSONAL: "Bank Transfer -> Personal Account",
}

STATE_LABELS: dict[AustralianState, str] = {
    AustralianState.NSW: "New South Wales",
    AustralianState.VIC: "Victoria",
    AustralianState.QLD: "Queensland",
    AustralianState.WA: "Western Australia",
    AustralianState.SA: "South Australia",
    AustralianState.TAS: "Tasmania",
    AustralianState.NT: "Northern Territory",
    AustralianState.ACT: "Australian Capital Territory",
}

COST_TYPE_LABELS: dict[CostType, str] = {
    CostType.FIXED: "Fixed",
    CostType.VARIABLE: "Variable",
}

# Financial summary metric -> icon name
SUMMARY_CARD_ICONS: dict[str, str] = {
    "total_income": "trending-up",
    "total_expenses": "trending-down",
    "total_profit": "dollar-sign",
    "total_gst_collected": "receipt",
    "total_gst_payable": "file-text",
}


def _lookup(table: dict, value, fallback: str) -> str:
    key = getattr(value, "value", value)
    for member, label in table.items():
        if member.value == key:
            return label
    return fallback


def category_label(category, custom_category: Optional[str] = None) -> str:
    """Return the display label for a transaction category.

    A custom name wins for OTHER. Unknown values fall back to
    ``FALLBACK_LABEL``.
    """
    if custom_category and category == TransactionCategory.OTHER:
        return custom_category
    return _lookup(CATEGORY_LABELS, category, FALLBACK_LABEL)


def transaction_type_label(transaction_type) -> str:
    """Return the display label for a transaction direction."""
    return _lookup(TRANSACTION_TYPE_LABELS, transaction_type, FALLBACK_LABEL)


def payment_method_label(payment_method) -> str:
    """Return the display label for a payment method."""
    return _lookup(PAYMENT_METHOD_LABELS, payment_method, FALLBACK_LABEL)


def state_label(state) -> str:
    """Return the full name of an Australian state or territory."""
    return _lookup(STATE_LABELS, state, FALLBACK_LABEL)


def cost_type_label(cost_type) -> str:
    """Return the display label for a cost type."""
    return _lookup(COST_TYPE_LABELS, cost_type, FALLBACK_LABEL)


def summary_card_icon(metric: str) -> str:
    """Return the icon name for a financial summary metric."""
    return SUMMARY_CARD_ICONS.get(metric, FALLBACK_ICON)
