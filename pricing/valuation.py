from collections import namedtuple
from decimal import Decimal, InvalidOperation

from .exceptions import InvalidWeight
from .rates import get_rate_table


WEIGHT_DECIMAL_PLACES = 3

# Exclusive upper bounds of the stored decimal columns
MAX_WEIGHT = Decimal(10) ** (10 - WEIGHT_DECIMAL_PLACES)   # PricedItem.weight_kg (10, 3)
MAX_LINE_TOTAL = Decimal(10) ** (18 - 5)                   # PricedItem.line_total (18, 5)
MAX_TOTAL_WEIGHT = Decimal(10) ** (14 - 3)                 # CollectionRecord.total_weight_kg (14, 3)
MAX_TOTAL_PRICE = Decimal(10) ** (20 - 5)                  # total_price / total_amount (20, 5)

ValuedItem = namedtuple("ValuedItem", ["category", "weight_kg", "rate_per_kg", "line_total"])


def to_weight(value):
    """
    Coerce a raw weight to Decimal.
    Raises InvalidWeight for negative, non-finite, non-numeric or
    out-of-range input.
    """
    if isinstance(value, bool) or value is None:
        raise InvalidWeight(f"Weight must be a number, got {value!r}.")
    try:
        weight = Decimal(str(value).strip())
    except (InvalidOperation, ValueError):
        raise InvalidWeight(f"Weight must be a number, got {value!r}.")
    if not weight.is_finite():
        raise InvalidWeight(f"Weight must be finite, got {value!r}.")
    if weight < 0:
        raise InvalidWeight(f"Weight cannot be negative, got {value!r}.")
    if weight.as_tuple().exponent < -WEIGHT_DECIMAL_PLACES:
        raise InvalidWeight(f"Weight supports at most {WEIGHT_DECIMAL_PLACES} decimal places, got {value!r}.")
    if weight >= MAX_WEIGHT:
        raise InvalidWeight(f"Weight must be below {MAX_WEIGHT} kg, got {value!r}.")
    return weight


def price(category, weight_kg, rate_table=None):
    """Line total for ``weight_kg`` of ``category``, at full precision."""
    return value_item(category, weight_kg, rate_table).line_total


def value_item(category, weight_kg, rate_table=None):
    table = rate_table if rate_table is not None else get_rate_table()
    rate = table.rate(category)
    weight = to_weight(weight_kg)
    line_total = weight * rate
    if line_total >= MAX_LINE_TOTAL:
        raise InvalidWeight(f"{weight} kg of {category} exceeds the largest billable amount.")
    return ValuedItem(category, weight, rate, line_total)


def value_items(items, rate_table=None):
    """
    Price a sequence of ``{"category", "weight_kg"}`` mappings against one
    rate table snapshot. Order is preserved.
    """
    table = rate_table if rate_table is not None else get_rate_table()
    return [value_item(item["category"], item["weight_kg"], table) for item in items]


def sum_line_totals(valued_items):
    total = sum((item.line_total for item in valued_items), Decimal("0"))
    if total >= MAX_TOTAL_PRICE:
        raise InvalidWeight("The combined amount of these items exceeds the largest billable total.")
    return total


def sum_weights(valued_items):
    total = sum((item.weight_kg for item in valued_items), Decimal("0"))
    if total >= MAX_TOTAL_WEIGHT:
        raise InvalidWeight("The combined weight of these items is too large to record.")
    return total
