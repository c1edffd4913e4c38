"""Currency normalization to the base currency.

Conversion rates come from an injected ``CurrencyRateProvider`` so that
tests can use deterministic rates and a live-rate source can later replace
the static table without touching calculation code. Conversion is one-way:
there is no inverse from the base currency.
"""

import logging
from decimal import Decimal
from typing import Dict, Mapping, Optional, Union

from agency_finance.calculators.money_utils import ONE
from agency_finance.models.milestone import Milestone
from agency_finance.models.project import Project

logger = logging.getLogger(__name__)

BASE_CURRENCY = "PKR"

# Base currency units per one unit of the keyed currency (approximate)
DEFAULT_RATES: Dict[str, Decimal] = {
    "USD": Decimal("280"),
    "EUR": Decimal("305"),
    "GBP": Decimal("355"),
    "AUD": Decimal("185"),
    "CAD": Decimal("205"),
    "PKR": Decimal("1"),
}

# Used for a project whose currency has neither a custom nor a table rate
FALLBACK_EXCHANGE_RATE = Decimal("280")


class CurrencyRateProvider:
    """Supplies conversion rates to the base currency.

    Subclasses override ``rate_for``; the default implementation knows no
    rates besides the base currency itself.
    """

    base_currency: str = BASE_CURRENCY

    def rate_for(self, currency_code: str) -> Optional[Decimal]:
        """Return base units per one unit of ``currency_code``, or None."""
        if currency_code.upper() == self.base_currency:
            return ONE
        return None


class StaticRateProvider(CurrencyRateProvider):
    """Rate provider backed by a fixed lookup table.

    Args:
        rates: Mapping of currency code to base units per unit
            (defaults to DEFAULT_RATES)
        base_currency: Code of the base currency (defaults to PKR)

    Example:
        >>> provider = StaticRateProvider({"USD": 300}, base_currency="PKR")
        >>> provider.rate_for("usd")
        Decimal('300')
        >>> provider.rate_for("PKR")
        Decimal('1')
    """

    def __init__(
        self,
        rates: Optional[Mapping[str, Union[Decimal, int, float, str]]] = None,
        base_currency: str = BASE_CURRENCY,
    ):
        source = DEFAULT_RATES if rates is None else rates
        self.base_currency = base_currency.upper()
        self._rates: Dict[str, Decimal] = {
            code.upper(): Decimal(str(rate)) for code, rate in source.items()
        }
        self._rates[self.base_currency] = ONE

    def rate_for(self, currency_code: str) -> Optional[Decimal]:
        return self._rates.get(currency_code.upper())

    @property
    def rates(self) -> Dict[str, Decimal]:
        """Copy of the configured table."""
        return dict(self._rates)


class CurrencyNormalizer:
    """Converts amounts into the base currency.

    Attributes:
        provider: Source of conversion rates
        fallback_rate: Project rate used when nothing else resolves

    Example:
        >>> normalizer = CurrencyNormalizer(StaticRateProvider())
        >>> normalizer.to_base(Decimal("10"), "USD")
        Decimal('2800')
        >>> normalizer.to_base(None, "USD") is None
        True
    """

    def __init__(
        self,
        provider: Optional[CurrencyRateProvider] = None,
        fallback_rate: Decimal = FALLBACK_EXCHANGE_RATE,
    ):
        self.provider = provider or StaticRateProvider()
        self.fallback_rate = Decimal(str(fallback_rate))

    @property
    def base_currency(self) -> str:
        return self.provider.base_currency

    def rate(self, currency_code: str) -> Decimal:
        """Table rate for a currency; unknown codes are treated as base."""
        rate = self.provider.rate_for(currency_code)
        if rate is None:
            logger.debug(f"No rate for currency {currency_code}, treating as base")
            return ONE
        return rate

    def to_base(self, amount: Optional[Decimal], currency_code: str) -> Optional[Decimal]:
        """Convert an amount to the base currency.

        Args:
            amount: Amount in ``currency_code`` (None propagates)
            currency_code: ISO code of the amount

        Returns:
            The amount in base currency, or None when amount is None
        """
        if amount is None:
            return None
        return Decimal(amount) * self.rate(currency_code)

    def resolve_project_rate(self, project: Project) -> Decimal:
        """Resolve the exchange rate for a project's currency.

        Resolution order: the project's custom exchange rate, then the
        provider's rate for the project currency, then the fallback rate.
        """
        if project.exchange_rate:
            return project.exchange_rate
        rate = self.provider.rate_for(project.currency)
        if rate:
            return rate
        return self.fallback_rate

    def project_to_base(
        self, amount: Optional[Decimal], project: Project
    ) -> Optional[Decimal]:
        """Convert a project-currency amount using the project's resolved rate."""
        if amount is None:
            return None
        return Decimal(amount) * self.resolve_project_rate(project)

    def milestone_to_base(
        self, milestone: Milestone, project: Optional[Project] = None
    ) -> Decimal:
        """Convert a milestone amount to base currency.

        Amounts in the project's own currency use the project's resolved
        rate; a milestone-specific currency uses the rate table.
        """
        currency = milestone.currency
        if project is not None and currency in (None, project.currency):
            return self.project_to_base(milestone.amount, project)
        return self.to_base(milestone.amount, currency or self.base_currency)
