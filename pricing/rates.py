import logging
from decimal import Decimal, InvalidOperation
from functools import lru_cache
from types import MappingProxyType

from django.conf import settings
from django.core.exceptions import ImproperlyConfigured
from django.core.signals import setting_changed
from django.db import models
from django.dispatch import receiver

from .exceptions import UnknownCategory

logger = logging.getLogger(__name__)

# PricedItem.rate_per_kg is DecimalField(10, 2)
MAX_RATE = Decimal(10) ** 8


class WasteCategory(models.TextChoices):
    FOOD = "food", "Food Waste"
    CARDBOARD = "cardboard", "Cardboard"
    POLYTHENE = "polythene", "Polythene"
    PLASTIC = "plastic", "Plastic"
    GLASS = "glass", "Glass"
    METAL = "metal", "Metal"
    PAPER = "paper", "Paper"
    ORGANIC = "organic", "Organic"


class RateTable:
    """
    Read-only price-per-kilogram lookup keyed by waste category.
    """

    def __init__(self, rates):
        parsed = {}
        for category, value in dict(rates).items():
            if category not in WasteCategory.values:
                raise ImproperlyConfigured(f"WASTE_RATES: unknown waste category '{category}'.")
            try:
                rate = Decimal(str(value))
            except (InvalidOperation, ValueError):
                raise ImproperlyConfigured(f"WASTE_RATES: rate for '{category}' is not a number: {value!r}.")
            if not rate.is_finite() or rate < 0:
                raise ImproperlyConfigured(f"WASTE_RATES: rate for '{category}' must be a non-negative number.")
            if rate.as_tuple().exponent < -2:
                raise ImproperlyConfigured(f"WASTE_RATES: rate for '{category}' has more than 2 decimal places.")
            if rate >= MAX_RATE:
                raise ImproperlyConfigured(f"WASTE_RATES: rate for '{category}' must be below {MAX_RATE}.")
            parsed[category] = rate
        self._rates = MappingProxyType(parsed)

    def rate(self, category):
        try:
            return self._rates[category]
        except (KeyError, TypeError):
            raise UnknownCategory(f"Unknown waste category '{category}'.")

    def __contains__(self, category):
        return category in self._rates

    def __iter__(self):
        # Declaration order of WasteCategory, not settings order
        return (c for c in WasteCategory.values if c in self._rates)

    def __len__(self):
        return len(self._rates)

    def items(self):
        return [(category, self._rates[category]) for category in self]

    def __repr__(self):
        return f"RateTable({dict(self.items())!r})"


@lru_cache(maxsize=1)
def get_rate_table():
    """Build the process-wide rate table from ``settings.WASTE_RATES``."""
    table = RateTable(getattr(settings, "WASTE_RATES", {}))
    logger.info("Loaded rate table with %d categories", len(table))
    return table


@receiver(setting_changed)
def reset_rate_table(sender, setting, **kwargs):
    if setting == "WASTE_RATES":
        get_rate_table.cache_clear()
