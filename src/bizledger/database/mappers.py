"""Mapper functions to convert between domain models and SQLAlchemy models.

This layer isolates the conversion logic. Stored amounts are handed over
as-is; GST is never recomputed on read.
"""

from decimal import Decimal
from typing import Optional

from bizledger.domain import entities as domain
from bizledger.database.models import (
    Client as ORMClient,
    Transaction as ORMTransaction,
    Cost as ORMCost,
)


def _decimal(value) -> Optional[Decimal]:
    if value is None:
        return None
    return Decimal(value)


def client_to_domain(orm_client: ORMClient) -> domain.Client:
    """Convert SQLAlchemy Client model to domain Client entity."""
    return domain.Client(
        id=orm_client.id,
        first_name=orm_client.first_name,
        last_name=orm_client.last_name,
        email=orm_client.email,
        phone_number=orm_client.phone_number,
        suburb=orm_client.suburb,
        post_code=orm_client.post_code,
        state=domain.AustralianState(orm_client.state),
        services_purchased=tuple(orm_client.services_purchased or ()),
        created_at=orm_client.created_at,
        updated_at=orm_client.updated_at,
        created_by=orm_client.created_by,
        created_by_name=orm_client.created_by_name,
        updated_by=orm_client.updated_by,
        updated_by_name=orm_client.updated_by_name,
    )


def transaction_to_domain(orm_transaction: ORMTransaction) -> domain.Transaction:
    """Convert SQLAlchemy Transaction model to domain Transaction entity."""
    return domain.Transaction(
        id=orm_transaction.id,
        type=domain.TransactionType(orm_transaction.type),
        category=domain.TransactionCategory(orm_transaction.category),
        custom_category=orm_transaction.custom_category,
        amount_net=_decimal(orm_transaction.amount_net),
        gst_amount=_decimal(orm_transaction.gst_amount),
        amount_gross=_decimal(orm_transaction.amount_gross),
        payment_method=domain.PaymentMethod(orm_transaction.payment_method),
        gst_applied=bool(orm_transaction.gst_applied),
        description=orm_transaction.description,
        client_id=orm_transaction.client_id,
        client_name=orm_transaction.client_name,
        date=orm_transaction.date,
        created_at=orm_transaction.created_at,
        updated_at=orm_transaction.updated_at,
        created_by=orm_transaction.created_by,
        created_by_name=orm_transaction.created_by_name,
        updated_by=orm_transaction.updated_by,
        updated_by_name=orm_transaction.updated_by_name,
    )


def cost_to_domain(orm_cost: ORMCost) -> domain.Cost:
    """Convert SQLAlchemy Cost model to domain Cost entity."""
    return domain.Cost(
        id=orm_cost.id,
        name=orm_cost.name,
        cost_type=domain.CostType(orm_cost.cost_type),
        amount=_decimal(orm_cost.amount),
        actual_volume=_decimal(orm_cost.actual_volume),
        created_at=orm_cost.created_at,
    )
