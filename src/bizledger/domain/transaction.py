"""Transaction domain service."""

import logging
from datetime import date
from decimal import Decimal
from typing import Any, Callable, Iterable, Optional, Sequence

from bizledger.database.base import Database
from bizledger.domain.entities import (
    CATEGORIES_BY_TYPE,
    FinancialSummary,
    PaymentMethod,
    Transaction as TransactionEntity,
    TransactionCategory,
    TransactionFilters,
    TransactionType,
)
from bizledger.domain.errors import (
    NotFoundError,
    ValidationError,
    category_not_allowed,
    missing_required_fields,
    transaction_not_found,
)
from bizledger.domain.gst import (
    GstDerivation,
    GstUpdate,
    calculate_gross_amount,
    calculate_gst,
    derive_gst_on_create,
    derive_gst_on_update,
    round_currency,
)
from bizledger.domain.subscriptions import Channel, Subscription
from bizledger.domain.summary import calculate_financial_summary

logger = logging.getLogger(__name__)


def _coerce_enum(enum_cls, value, field_name: str):
    if value is None or isinstance(value, enum_cls):
        return value
    try:
        return enum_cls(str(value).strip().upper())
    except ValueError:
        allowed = ", ".join(member.value for member in enum_cls)
        raise ValidationError(f"Invalid {field_name} '{value}'. Expected one of: {allowed}")


def _coerce_amount(value, field_name: str = "amount_net") -> Decimal:
    try:
        amount = Decimal(str(value))
    except ArithmeticError:
        raise ValidationError(f"Invalid {field_name} '{value}'")
    if not amount.is_finite():
        raise ValidationError(f"Invalid {field_name} '{value}'")
    # Stored in whole cents; GST is derived from the rounded amount
    amount = round_currency(amount)
    if amount <= 0:
        raise ValidationError(f"{field_name} must be greater than zero")
    return amount


def _blank_to_none(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    value = value.strip()
    return value or None


def _coerce_client_id(value) -> Optional[int]:
    """Return the client id as an int; an empty string clears it."""
    if isinstance(value, int):
        return value
    text = str(value).strip()
    if not text:
        return None
    try:
        return int(text)
    except ValueError:
        raise ValidationError(f"Invalid client_id '{value}'")


def validate_category(
    transaction_type: TransactionType,
    category: TransactionCategory,
    custom_category: Optional[str],
) -> Optional[str]:
    """Check the category against its direction and normalise the custom name.

    Returns:
        The custom category to store (None unless category is OTHER)

    Raises:
        ValidationError: If the category is not allowed for the type, or
            OTHER is used without a custom name
    """
    if category not in CATEGORIES_BY_TYPE[transaction_type]:
        raise ValidationError(category_not_allowed(category.value, transaction_type.value))
    if category == TransactionCategory.OTHER:
        custom_category = _blank_to_none(custom_category)
        if custom_category is None:
            raise ValidationError("A custom category name is required when category is OTHER")
        return custom_category
    return None


def matches_search(txn: TransactionEntity, search: Optional[str]) -> bool:
    """Case-insensitive match on description, client name and category."""
    if not search:
        return True
    needle = search.lower()
    haystacks = (txn.description, txn.client_name, txn.category.value, txn.custom_category)
    return any(text and needle in text.lower() for text in haystacks)


def filter_transactions(
    transactions: Iterable[TransactionEntity], filters: Optional[TransactionFilters]
) -> list[TransactionEntity]:
    """Apply TransactionFilters to an in-memory transaction set."""
    if filters is None:
        return list(transactions)

    results = []
    for txn in transactions:
        if filters.start_date is not None and txn.date < filters.start_date:
            continue
        if filters.end_date is not None and txn.date > filters.end_date:
            continue
        if filters.type is not None and txn.type != filters.type:
            continue
        if filters.category is not None and txn.category != filters.category:
            continue
        if filters.payment_method is not None and txn.payment_method != filters.payment_method:
            continue
        if not matches_search(txn, filters.search):
            continue
        results.append(txn)
    return results


class TransactionService:
    """Service for managing transactions."""

    def __init__(self, db: Database, channel: Optional[Channel[TransactionEntity]] = None):
        """Initialize transaction service.

        Args:
            db: Database instance
            channel: Optional change channel; the full transaction set is
                published to it after every change
        """
        self.db = db
        self.channel = channel if channel is not None else Channel("transactions")

    def create_transaction(
        self,
        type: TransactionType | str,
        category: TransactionCategory | str,
        amount_net: Decimal,
        payment_method: PaymentMethod | str,
        date: date,
        created_by: str,
        custom_category: Optional[str] = None,
        gst_applied: Optional[bool] = None,
        user_selected_gst: Optional[bool] = None,
        description: Optional[str] = None,
        client_id: Optional[int] = None,
        client_name: Optional[str] = None,
        created_by_name: Optional[str] = None,
    ) -> int:
        """Create a transaction.

        GST is derived from the payment method unless ``gst_applied`` is
        given. ``user_selected_gst`` carries an interactive choice for
        personal bank transfers and is ignored for other methods.

        Args:
            type: INFLOW or OUTFLOW
            category: Category valid for the type
            amount_net: Amount excluding GST, must be positive
            payment_method: Payment method
            date: Business-effective date
            created_by: User creating the record
            custom_category: Required name when category is OTHER
            gst_applied: Optional explicit override of the GST policy
            user_selected_gst: Optional user choice for personal transfers
            description: Optional description
            client_id: Optional client reference (not enforced)
            client_name: Optional client name snapshot
            created_by_name: Optional display name of the creator

        Returns:
            Transaction ID

        Raises:
            ValidationError: If a required field is missing or invalid
        """
        missing = [
            name
            for name, value in (
                ("type", type),
                ("category", category),
                ("amount_net", amount_net),
                ("payment_method", payment_method),
                ("date", date),
                ("created_by", created_by),
            )
            if value is None or value == ""
        ]
        if missing:
            raise ValidationError(missing_required_fields(missing))

        txn_type = _coerce_enum(TransactionType, type, "type")
        txn_category = _coerce_enum(TransactionCategory, category, "category")
        method = _coerce_enum(PaymentMethod, payment_method, "payment_method")
        amount = _coerce_amount(amount_net)
        custom = validate_category(txn_type, txn_category, custom_category)

        if gst_applied is None and user_selected_gst is not None:
            result = calculate_gst(amount, method, user_selected_gst)
            derivation = GstDerivation(
                amount_net=amount,
                gst_amount=result.gst_amount,
                gst_applied=result.gst_applied,
                amount_gross=calculate_gross_amount(amount, result.gst_amount),
            )
        else:
            derivation = derive_gst_on_create(amount, method, gst_applied)

        transaction_id = self.db.create_transaction(
            type=txn_type,
            category=txn_category,
            amount_net=derivation.amount_net,
            gst_amount=derivation.gst_amount,
            amount_gross=derivation.amount_gross,
            payment_method=method,
            gst_applied=derivation.gst_applied,
            date=date,
            created_by=created_by,
            custom_category=custom,
            description=description,
            client_id=client_id,
            client_name=_blank_to_none(client_name),
            created_by_name=created_by_name,
        )
        logger.info(
            "Created transaction %s: %s %s net=%s gst=%s",
            transaction_id,
            txn_type.value,
            txn_category.value,
            derivation.amount_net,
            derivation.gst_amount,
        )
        self._publish()
        return transaction_id

    def get_transaction(self, transaction_id: int) -> Optional[TransactionEntity]:
        """Get transaction by ID.

        Returns:
            Transaction entity or None if not found
        """
        return self.db.get_transaction(transaction_id)

    def require_transaction(self, transaction_id: int) -> TransactionEntity:
        """Get transaction by ID or raise NotFoundError."""
        txn = self.db.get_transaction(transaction_id)
        if txn is None:
            raise NotFoundError(transaction_not_found(transaction_id))
        return txn

    def update_transaction(
        self,
        transaction_id: int,
        updated_by: str,
        type: Optional[TransactionType | str] = None,
        category: Optional[TransactionCategory | str] = None,
        custom_category: Optional[str] = None,
        amount_net: Optional[Decimal] = None,
        payment_method: Optional[PaymentMethod | str] = None,
        gst_applied: Optional[bool] = None,
        description: Optional[str] = None,
        client_id: Optional[int | str] = None,
        client_name: Optional[str] = None,
        date: Optional[date] = None,
        updated_by_name: Optional[str] = None,
    ) -> TransactionEntity:
        """Update the fields that are provided.

        ``None`` leaves a field unchanged. An empty string clears
        ``custom_category``, ``client_id`` and ``client_name``. GST fields
        are only reconsidered when ``amount_net`` or ``payment_method`` is
        provided; see ``derive_gst_on_update``.

        Returns:
            The updated transaction

        Raises:
            NotFoundError: If the transaction doesn't exist
            ValidationError: If a provided field is invalid
        """
        if not updated_by:
            raise ValidationError(missing_required_fields(["updated_by"]))

        existing = self.require_transaction(transaction_id)
        fields: dict[str, Any] = {"updated_by": updated_by}
        if updated_by_name:
            fields["updated_by_name"] = updated_by_name

        new_type = _coerce_enum(TransactionType, type, "type")
        new_category = _coerce_enum(TransactionCategory, category, "category")
        new_method = _coerce_enum(PaymentMethod, payment_method, "payment_method")
        new_amount = _coerce_amount(amount_net) if amount_net is not None else None

        if new_type is not None or new_category is not None or custom_category is not None:
            effective_custom = existing.custom_category if custom_category is None else custom_category
            stored_custom = validate_category(
                new_type or existing.type,
                new_category or existing.category,
                effective_custom,
            )
            if new_type is not None:
                fields["type"] = new_type
            if new_category is not None:
                fields["category"] = new_category
            fields["custom_category"] = stored_custom

        derivation = derive_gst_on_update(
            existing,
            GstUpdate(amount_net=new_amount, payment_method=new_method, gst_applied=gst_applied),
        )
        if derivation is not None:
            fields["amount_net"] = derivation.amount_net
            fields["gst_amount"] = derivation.gst_amount
            fields["amount_gross"] = derivation.amount_gross
            fields["gst_applied"] = derivation.gst_applied
        if new_method is not None:
            fields["payment_method"] = new_method

        if description is not None:
            fields["description"] = description
        if client_id is not None:
            fields["client_id"] = _coerce_client_id(client_id)
        if client_name is not None:
            fields["client_name"] = _blank_to_none(client_name)
        if date is not None:
            fields["date"] = date

        if not self.db.update_transaction(transaction_id, fields):
            raise NotFoundError(transaction_not_found(transaction_id))

        logger.info("Updated transaction %s: %s", transaction_id, ", ".join(sorted(fields)))
        self._publish()
        return self.require_transaction(transaction_id)

    def delete_transaction(self, transaction_id: int) -> None:
        """Delete a transaction.

        Raises:
            NotFoundError: If the transaction doesn't exist
        """
        if not self.db.delete_transaction(transaction_id):
            raise NotFoundError(transaction_not_found(transaction_id))
        logger.info("Deleted transaction %s", transaction_id)
        self._publish()

    def list_transactions(self, filters: Optional[TransactionFilters] = None) -> list[TransactionEntity]:
        """List transactions, newest first.

        Date, type, category and payment method filters run in the
        database; the free-text search runs over the results.
        """
        filters = filters or TransactionFilters()
        transactions = self.db.list_transactions(
            start_date=filters.start_date,
            end_date=filters.end_date,
            type=filters.type,
            category=filters.category,
            payment_method=filters.payment_method,
        )
        return [txn for txn in transactions if matches_search(txn, filters.search)]

    def get_financial_summary(self, filters: Optional[TransactionFilters] = None) -> FinancialSummary:
        """Summarise the transactions matching ``filters``."""
        return calculate_financial_summary(self.list_transactions(filters))

    def subscribe(
        self,
        callback: Callable[[Sequence[TransactionEntity]], None],
        filters: Optional[TransactionFilters] = None,
    ) -> Subscription:
        """Receive the current transaction set now and after every change.

        Returns:
            Subscription handle; call ``unsubscribe()`` to stop
        """

        def deliver(transactions: Sequence[TransactionEntity]) -> None:
            callback(filter_transactions(transactions, filters))

        subscription = self.channel.subscribe(deliver)
        subscription.deliver(self.db.list_transactions())
        return subscription

    def _publish(self) -> None:
        if self.channel.subscriber_count:
            self.channel.publish(self.db.list_transactions())
