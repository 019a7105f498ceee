"""
VestLab kind constants for every tagged field in the data model.
"""


class GrantType:
    PURCHASE = "purchase"  # Bought with a purchase loan, vests on a schedule
    FREE = "free"  # Extra shares with a purchase, vest at end of period
    CATCH_UP = "catch_up"  # Extra shares with a purchase, vest annually
    BONUS = "bonus"  # Annual bonus taken as stock

    LABELS = {
        PURCHASE: "Purchase",
        FREE: "Free",
        CATCH_UP: "Catch-up",
        BONUS: "Bonus",
    }

    @classmethod
    def all_kinds(cls) -> list[str]:
        return [cls.PURCHASE, cls.FREE, cls.CATCH_UP, cls.BONUS]


class TaxTreatment:
    INCOME = "income"  # Ordinary income at vest
    CAPITAL_GAINS = "capital_gains"  # Capital gain over grant price at vest
    NONE = "none"  # Already taxed (e.g. at purchase)

    LABELS = {
        INCOME: "Income",
        CAPITAL_GAINS: "Capital Gains",
        NONE: "None",
    }

    @classmethod
    def all_kinds(cls) -> list[str]:
        return [cls.INCOME, cls.CAPITAL_GAINS, cls.NONE]


class LoanType:
    PURCHASE = "purchase"  # Funds a share purchase
    TAX = "tax"  # Funds the tax bill of a vesting event
    INTEREST = "interest"  # Crystallised interest of a parent loan

    LABELS = {
        PURCHASE: "Purchase",
        TAX: "Tax",
        INTEREST: "Interest",
    }

    @classmethod
    def all_kinds(cls) -> list[str]:
        return [cls.PURCHASE, cls.TAX, cls.INTEREST]


class LoanStatus:
    """
    Loan lifecycle status.

    Status is authoritative and externally managed: nothing in the engine
    moves a loan between these values, and a loan past its maturity date
    stays ``active`` until a caller says otherwise.
    """

    ACTIVE = "active"
    REFINANCED = "refinanced"
    PAID_OFF = "paid_off"

    LABELS = {
        ACTIVE: "Active",
        REFINANCED: "Refinanced",
        PAID_OFF: "Paid Off",
    }

    @classmethod
    def all_kinds(cls) -> list[str]:
        return [cls.ACTIVE, cls.REFINANCED, cls.PAID_OFF]


class SaleReason:
    LOAN_PAYOFF = "loan_payoff"
    TAX_PAYMENT = "tax_payment"
    VOLUNTARY = "voluntary"

    LABELS = {
        LOAN_PAYOFF: "Loan Payoff",
        TAX_PAYMENT: "Tax Payment",
        VOLUNTARY: "Voluntary",
    }

    @classmethod
    def all_kinds(cls) -> list[str]:
        return [cls.LOAN_PAYOFF, cls.TAX_PAYMENT, cls.VOLUNTARY]


class EventKind:
    """Projected event types emitted by the projection engine."""

    VESTING = "vesting"
    LOAN_MATURITY = "loan_maturity"
    PLANNED_SALE = "planned_sale"

    @classmethod
    def all_kinds(cls) -> list[str]:
        return [cls.VESTING, cls.LOAN_MATURITY, cls.PLANNED_SALE]
