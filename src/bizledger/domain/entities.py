"""Domain model entities for bizledger.

These are pure data classes representing business concepts, independent of
database schema. Enumerations use ``str`` mixins so their values round-trip
through the database and the CLI unchanged.
"""

from dataclasses import dataclass, field
from datetime import datetime, date
from decimal import Decimal
from enum import Enum
from typing import Optional


class TransactionType(str, Enum):
    """Direction of a transaction."""

    INFLOW = "INFLOW"
    OUTFLOW = "OUTFLOW"


class TransactionCategory(str, Enum):
    """Transaction categories across both directions."""

    CLIENT_PAYMENT = "CLIENT_PAYMENT"
    INVESTMENT = "INVESTMENT"
    GST = "GST"
    TAX = "TAX"
    MARKETING = "MARKETING"
    FRANCHISE_FEE = "FRANCHISE_FEE"
    OTHER = "OTHER"


INFLOW_CATEGORIES = frozenset(
    {
        TransactionCategory.CLIENT_PAYMENT,
        TransactionCategory.INVESTMENT,
        TransactionCategory.OTHER,
    }
)

OUTFLOW_CATEGORIES = frozenset(
    {
        TransactionCategory.GST,
        TransactionCategory.TAX,
        TransactionCategory.MARKETING,
        TransactionCategory.FRANCHISE_FEE,
        TransactionCategory.OTHER,
    }
)

CATEGORIES_BY_TYPE = {
    TransactionType.INFLOW: INFLOW_CATEGORIES,
    TransactionType.OUTFLOW: OUTFLOW_CATEGORIES,
}


class PaymentMethod(str, Enum):
    """How money moved for a transaction."""

    CREDIT_DEBIT_CARD = "CREDIT_DEBIT_CARD"
    CASH_IN_HAND = "CASH_IN_HAND"
    BANK_TRANSFER_BUSINESS = "BANK_TRANSFER_BUSINESS"
    BANK_TRANSFER_PERSONAL = "BANK_TRANSFER_PERSONAL"


class AustralianState(str, Enum):
    """Australian states and territories."""

    NSW = "NSW"
    VIC = "VIC"
    QLD = "QLD"
    WA = "WA"
    SA = "SA"
    TAS = "TAS"
    NT = "NT"
    ACT = "ACT"


class CostType(str, Enum):
    """Cost behaviour used by unit economics."""

    FIXED = "fixed"
    VARIABLE = "variable"


@dataclass(frozen=True)
class Client:
    """Client domain entity."""

    id: int
    first_name: str
    last_name: str
    email: str
    phone_number: str
    suburb: str
    post_code: str
    state: AustralianState
    services_purchased: tuple[str, ...]
    created_at: datetime
    updated_at: datetime
    created_by: str
    created_by_name: Optional[str] = None
    updated_by: Optional[str] = None
    updated_by_name: Optional[str] = None

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()


@dataclass(frozen=True)
class Transaction:
    """Transaction domain entity.

    ``gst_amount`` and ``amount_gross`` are stored values and are never
    recomputed on read.
    """

    id: int
    type: TransactionType
    category: TransactionCategory
    amount_net: Decimal
    gst_amount: Decimal
    amount_gross: Decimal
    payment_method: PaymentMethod
    gst_applied: bool
    date: date
    created_at: datetime
    updated_at: datetime
    created_by: str
    custom_category: Optional[str] = None
    description: Optional[str] = None
    client_id: Optional[int] = None
    client_name: Optional[str] = None
    created_by_name: Optional[str] = None
    updated_by: Optional[str] = None
    updated_by_name: Optional[str] = None

    @property
    def effective_category(self) -> str:
        """Custom category name for OTHER, otherwise the category value."""
        if self.category == TransactionCategory.OTHER and self.custom_category:
            return self.custom_category
        return self.category.value


@dataclass(frozen=True)
class Cost:
    """Fixed or variable cost record."""

    id: int
    name: str
    cost_type: CostType
    amount: Decimal
    actual_volume: Optional[Decimal]
    created_at: datetime


@dataclass(frozen=True)
class TransactionFilters:
    """Filters accepted when listing transactions."""

    start_date: Optional[date] = None
    end_date: Optional[date] = None
    type: Optional[TransactionType] = None
    category: Optional[TransactionCategory] = None
    payment_method: Optional[PaymentMethod] = None
    search: Optional[str] = None


@dataclass(frozen=True)
class ClientFilters:
    """Filters accepted when listing clients."""

    state: Optional[AustralianState] = None
    service: Optional[str] = None
    search: Optional[str] = None


@dataclass(frozen=True)
class FinancialSummary:
    """Totals derived from a set of transactions. Not persisted."""

    total_income: Decimal = Decimal("0")
    total_expenses: Decimal = Decimal("0")
    total_profit: Decimal = Decimal("0")
    total_gst_collected: Decimal = Decimal("0")
    total_gst_payable: Decimal = Decimal("0")


@dataclass(frozen=True)
class UnitEconomicsSummary:
    """Headline unit-economics metrics."""

    contribution_margin_ratio: Decimal
    break_even_point_units: int
    break_even_point_revenue: Decimal
    customer_ltv: Decimal
    cac: Decimal
    contribution_margin_growth: Decimal = Decimal("0")
    ltv_growth: Decimal = Decimal("0")
    cac_growth: Decimal = Decimal("0")


@dataclass(frozen=True)
class CVPPoint:
    """One point of the cost-volume-profit series."""

    units: int
    fixed_cost: Decimal
    total_cost: Decimal
    revenue: Decimal


@dataclass(frozen=True)
class BreakdownSlice:
    """One slice of the contribution margin breakdown."""

    name: str
    value: Decimal
    color: str


@dataclass(frozen=True)
class ProductProfitability:
    """Revenue and estimated margin for one inflow category."""

    name: str
    revenue: Decimal
    margin: Decimal


@dataclass(frozen=True)
class UnitEconomicsData:
    """Bundle produced by the unit-economics derivation."""

    summary: UnitEconomicsSummary
    cvp_analysis: tuple[CVPPoint, ...] = field(default_factory=tuple)
    contribution_margin_breakdown: tuple[BreakdownSlice, ...] = field(
        default_factory=tuple
    )
    product_profitability: tuple[ProductProfitability, ...] = field(
        default_factory=tuple
    )
