"""GST calculation rules.

Australian GST is a flat 10% on eligible transactions. Whether GST applies
is decided by payment method, except for transfers into a personal bank
account where the user decides. All GST amounts are rounded to cents with
ROUND_HALF_UP through ``round_currency`` so that the create and update paths
always agree.
"""

import logging
from dataclasses import dataclass
from decimal import Decimal, ROUND_HALF_UP
from typing import Callable, Optional

from bizledger.domain.entities import PaymentMethod, Transaction

logger = logging.getLogger(__name__)

GST_RATE = Decimal("0.10")
CENTS = Decimal("0.01")
ZERO = Decimal("0.00")

# Payment methods with a fixed GST decision. Anything not listed here
# defers to the user's selection.
GST_POLICY: dict[PaymentMethod, bool] = {
    PaymentMethod.CREDIT_DEBIT_CARD: True,
    PaymentMethod.BANK_TRANSFER_BUSINESS: True,
    PaymentMethod.CASH_IN_HAND: False,
}


@dataclass(frozen=True)
class GstResult:
    """GST amount and whether it was applied."""

    gst_amount: Decimal
    gst_applied: bool


@dataclass(frozen=True)
class GstDerivation:
    """Complete set of amount fields to store on a transaction."""

    amount_net: Decimal
    gst_amount: Decimal
    gst_applied: bool
    amount_gross: Decimal


@dataclass(frozen=True)
class GstUpdate:
    """Fields of an update payload that take part in GST recomputation.

    ``None`` means the field was not part of the update.
    """

    amount_net: Optional[Decimal] = None
    payment_method: Optional[PaymentMethod] = None
    gst_applied: Optional[bool] = None


def round_currency(amount: Decimal) -> Decimal:
    """Round an amount to cents, half up."""
    return Decimal(amount).quantize(CENTS, rounding=ROUND_HALF_UP)


def gst_for(amount_net: Decimal, gst_applied: bool) -> Decimal:
    """Return the GST owed on a net amount when applied, else zero."""
    if not gst_applied:
        return ZERO
    return round_currency(Decimal(amount_net) * GST_RATE)


def calculate_gst(
    amount_net: Decimal,
    payment_method: PaymentMethod,
    user_selected_gst: Optional[bool] = None,
) -> GstResult:
    """Calculate GST from the payment method policy.

    Args:
        amount_net: Amount excluding GST
        payment_method: Payment method of the transaction
        user_selected_gst: User's choice, only consulted for personal bank
            transfers. Omitted means GST is not applied.

    Returns:
        GstResult with the GST amount and applicability
    """
    gst_applied = GST_POLICY.get(payment_method)
    if gst_applied is None:
        gst_applied = user_selected_gst is True
    return GstResult(gst_amount=gst_for(amount_net, gst_applied), gst_applied=gst_applied)


def calculate_gross_amount(amount_net: Decimal, gst_amount: Decimal) -> Decimal:
    """Return the gross amount (net + GST)."""
    return amount_net + gst_amount


def derive_gst_on_create(
    amount_net: Decimal,
    payment_method: PaymentMethod,
    gst_applied: Optional[bool] = None,
) -> GstDerivation:
    """Derive stored amount fields for a new transaction.

    An explicit ``gst_applied`` flag overrides the payment method policy.
    Without it the policy decides from the payment method alone.
    """
    if gst_applied is not None:
        result = GstResult(gst_amount=gst_for(amount_net, gst_applied), gst_applied=gst_applied)
        logger.debug("GST on create: explicit flag %s", gst_applied)
    else:
        result = calculate_gst(amount_net, payment_method)
        logger.debug("GST on create: policy for %s", payment_method.value)

    return GstDerivation(
        amount_net=amount_net,
        gst_amount=result.gst_amount,
        gst_applied=result.gst_applied,
        amount_gross=calculate_gross_amount(amount_net, result.gst_amount),
    )


UpdateRule = Callable[[Transaction, GstUpdate, Decimal], Optional[GstResult]]


def _explicit_flag(existing: Transaction, update: GstUpdate, amount_net: Decimal) -> Optional[GstResult]:
    if update.gst_applied is None:
        return None
    return GstResult(gst_amount=gst_for(amount_net, update.gst_applied), gst_applied=update.gst_applied)


def _payment_method_changed(
    existing: Transaction, update: GstUpdate, amount_net: Decimal
) -> Optional[GstResult]:
    if update.payment_method is None:
        return None
    return calculate_gst(amount_net, update.payment_method)


def _carry_forward(existing: Transaction, update: GstUpdate, amount_net: Decimal) -> Optional[GstResult]:
    # Keeps the stored GST even when amount_net changed.
    return GstResult(gst_amount=existing.gst_amount, gst_applied=existing.gst_applied)


# Evaluated in order; the first rule returning a result wins.
UPDATE_RULES: tuple[tuple[str, UpdateRule], ...] = (
    ("explicit_flag", _explicit_flag),
    ("payment_method_changed", _payment_method_changed),
    ("carry_forward", _carry_forward),
)


def derive_gst_on_update(existing: Transaction, update: GstUpdate) -> Optional[GstDerivation]:
    """Derive stored amount fields for an updated transaction.

    GST is only reconsidered when the update carries ``amount_net`` or
    ``payment_method``. In that case the first matching rule of
    ``UPDATE_RULES`` decides:

    1. an explicit ``gst_applied`` flag is trusted,
    2. a supplied payment method reruns the policy,
    3. otherwise the stored GST amount and flag are carried forward.

    Args:
        existing: Transaction as currently stored
        update: GST-relevant fields of the update payload

    Returns:
        New amount fields, or None when GST fields must be left untouched
    """
    if update.amount_net is None and update.payment_method is None:
        return None

    amount_net = update.amount_net if update.amount_net is not None else existing.amount_net

    for name, rule in UPDATE_RULES:
        result = rule(existing, update, amount_net)
        if result is not None:
            logger.debug("GST on update for transaction %s: rule %s", existing.id, name)
            break

    return GstDerivation(
        amount_net=amount_net,
        gst_amount=result.gst_amount,
        gst_applied=result.gst_applied,
        amount_gross=calculate_gross_amount(amount_net, result.gst_amount),
    )
