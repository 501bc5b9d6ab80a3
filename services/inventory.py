"""Inventory writes built on the data client."""
import logging
from collections import namedtuple

from flask_babel import lazy_gettext as _l

from services.errors import RemoteOperationError, ValidationError
from services.stock import (
    ADD, SUBTRACT, adjustment_delta, classify, compute_adjusted_quantity,
    normalize_level, validate_adjustment_amount,
)

logger = logging.getLogger(__name__)

AdjustmentResult = namedtuple('AdjustmentResult', ['product_id', 'previous', 'expected', 'quantity', 'status'])

TRANSACTION_TYPE = {ADD: 'in', SUBTRACT: 'out'}


def save_inventory(client, product_id, quantity, min_stock_level, location=None):
    """Create or update the single inventory row of a product."""
    record = {
        'product_id': product_id,
        'quantity': quantity,
        'min_stock_level': min_stock_level,
        'location': location or None,
    }
    existing = client.select('inventory', columns=['id'], filters={'product_id': product_id})
    if existing:
        client.update('inventory', record, {'product_id': product_id})
    else:
        client.insert('inventory', record)


def delete_product(client, product_id):
    client.delete('inventory', {'product_id': product_id})
    client.delete('products', {'id': product_id})


def adjust_stock(client, product_id, amount, direction, record_transaction=False):
    """Add or withdraw stock for one product.

    The change is applied as a single floored delta in the store. With
    ``record_transaction`` an ``in``/``out`` transaction is appended for the
    quantity that actually moved.
    """
    amount = validate_adjustment_amount(amount)
    if direction not in TRANSACTION_TYPE:
        raise ValidationError(_l('Unknown adjustment direction'))

    current = client.select_one('inventory', {'product_id': product_id},
                                columns=['quantity', 'min_stock_level'])
    if current is None:
        raise RemoteOperationError(f'no inventory record for product {product_id}', code='not_found')
    previous = current['quantity']
    if direction == SUBTRACT and previous <= 0:
        raise ValidationError(_l('There is no stock to withdraw'))

    expected = compute_adjusted_quantity(previous, amount, direction)
    client.adjust('inventory', 'quantity', adjustment_delta(amount, direction),
                  {'product_id': product_id}, floor=0)

    after = client.select_one('inventory', {'product_id': product_id},
                              columns=['quantity', 'min_stock_level'])
    quantity = after['quantity'] if after else expected
    if quantity != expected:
        logger.info('product %s changed concurrently: expected %s, stored %s',
                    product_id, expected, quantity)

    if record_transaction:
        moved = abs(expected - previous)
        if moved:
            client.insert('transactions', {
                'product_id': product_id,
                'type': TRANSACTION_TYPE[direction],
                'quantity': moved,
                'notes': 'stock adjustment',
            })

    level = normalize_level((after or current).get('min_stock_level'))
    return AdjustmentResult(product_id, previous, expected, quantity, classify(quantity, level))
