"""Stock arithmetic and stock-level classification.

Everything here is pure: callers read the current values, call these
helpers, and persist the result through the data client.
"""
from enum import Enum

from flask_babel import lazy_gettext as _l

from services.errors import ValidationError

ADD = 'add'
SUBTRACT = 'subtract'
DIRECTIONS = (ADD, SUBTRACT)

FILTER_ALL = 'all'
FILTER_LOW = 'low'
FILTER_OUT = 'out'
STOCK_FILTERS = (FILTER_ALL, FILTER_LOW, FILTER_OUT)


class StockStatus(Enum):
    OUT_OF_STOCK = 'out_of_stock'
    LOW_STOCK = 'low_stock'
    NORMAL = 'normal'


STATUS_LABELS = {
    StockStatus.OUT_OF_STOCK: _l('Out of stock'),
    StockStatus.LOW_STOCK: _l('Low stock'),
    StockStatus.NORMAL: _l('Normal'),
}

STATUS_CLASSES = {
    StockStatus.OUT_OF_STOCK: 'stock-out',
    StockStatus.LOW_STOCK: 'stock-low',
    StockStatus.NORMAL: 'stock-normal',
}


def validate_adjustment_amount(amount):
    """Return ``amount`` as an int, or raise ValidationError.

    Missing, non-numeric and non-positive amounts are all rejected; the
    adjust button is never enabled for them.
    """
    if isinstance(amount, str) and amount.strip().isdigit():
        value = int(amount.strip())
    elif isinstance(amount, int) and not isinstance(amount, bool):
        value = amount
    else:
        raise ValidationError(_l('Enter a quantity of at least 1'))
    if value <= 0:
        raise ValidationError(_l('Enter a quantity of at least 1'))
    return value


def compute_adjusted_quantity(current_quantity, adjustment_amount, direction):
    if direction == ADD:
        return current_quantity + adjustment_amount
    if direction == SUBTRACT:
        # over-withdrawal is absorbed, never negative
        return max(0, current_quantity - adjustment_amount)
    raise ValueError(f'unknown adjustment direction: {direction!r}')


def adjustment_delta(adjustment_amount, direction):
    """Signed change applied server-side for an adjustment."""
    if direction == ADD:
        return adjustment_amount
    if direction == SUBTRACT:
        return -adjustment_amount
    raise ValueError(f'unknown adjustment direction: {direction!r}')


def normalize_level(min_stock_level):
    return min_stock_level or 0


def classify(quantity, min_stock_level):
    if quantity == 0:
        return StockStatus.OUT_OF_STOCK
    if quantity <= min_stock_level:
        return StockStatus.LOW_STOCK
    return StockStatus.NORMAL


def classify_row(row):
    return classify(row.get('quantity') or 0, normalize_level(row.get('min_stock_level')))


def status_label(status):
    return STATUS_LABELS[status]


def status_class(status):
    return STATUS_CLASSES[status]


def matches_stock_filter(row, stock_filter):
    status = classify_row(row)
    if stock_filter == FILTER_LOW:
        return status is StockStatus.LOW_STOCK
    if stock_filter == FILTER_OUT:
        return status is StockStatus.OUT_OF_STOCK
    return True
