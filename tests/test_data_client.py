"""
Tests for the generic table/view client.
"""
from datetime import timedelta

import pytest

from models import utcnow
from services.errors import RemoteOperationError


def _product(data_client, name, **extra):
    record = {'name': name, 'purchase_price': 1.0, 'selling_price': 2.0}
    record.update(extra)
    return data_client.insert('products', record)


class TestSelect:

    def test_insert_returns_row_with_id(self, data_client):
        category = data_client.insert('categories', {'name': 'Tools'})
        assert category['id'] is not None
        assert category['name'] == 'Tools'
        assert category['created_at'] is not None

    def test_order_and_columns(self, data_client):
        for name in ('Pliers', 'Anvil', 'Hammer'):
            _product(data_client, name)
        rows = data_client.select('products', columns=['name'], order_by='name')
        assert rows == [{'name': 'Anvil'}, {'name': 'Hammer'}, {'name': 'Pliers'}]

    def test_descending_and_limit(self, data_client):
        for name in ('a', 'b', 'c'):
            _product(data_client, name)
        rows = data_client.select('products', columns=['name'], order_by='name', descending=True, limit=2)
        assert [r['name'] for r in rows] == ['c', 'b']

    def test_lookups(self, data_client):
        _product(data_client, 'Blue Pen', sku='PEN-B')
        _product(data_client, 'Red Pen', sku='PEN-R')
        _product(data_client, 'Stapler')
        assert len(data_client.select('products', filters={'name__ilike': 'pen'})) == 2
        assert len(data_client.select('products', filters={'sku': None})) == 1
        assert len(data_client.select('products', filters={'sku__ne': None})) == 2
        assert len(data_client.select('products', filters={'sku__in': ['PEN-B', 'X']})) == 1

    def test_date_range(self, data_client):
        product = _product(data_client, 'Glue')
        now = utcnow()
        data_client.insert('transactions', {'product_id': product['id'], 'type': 'in', 'quantity': 1,
                                            'created_at': now - timedelta(days=40)})
        data_client.insert('transactions', {'product_id': product['id'], 'type': 'out', 'quantity': 1,
                                            'created_at': now})
        rows = data_client.select('transactions', filters={'created_at__gte': now - timedelta(days=30)})
        assert [r['type'] for r in rows] == ['out']

    def test_select_one_and_count(self, data_client):
        product = _product(data_client, 'Tape')
        assert data_client.select_one('products', {'id': product['id']})['name'] == 'Tape'
        assert data_client.select_one('products', {'id': product['id'] + 100}) is None
        assert data_client.count('products') == 1

    def test_transaction_timestamp_defaults_to_utc(self, data_client):
        product = _product(data_client, 'Clock')
        row = data_client.insert('transactions', {'product_id': product['id'], 'type': 'in', 'quantity': 1})
        assert abs(row['created_at'] - utcnow().replace(tzinfo=None)) < timedelta(minutes=1)

    def test_select_one_rejects_multiple_rows(self, data_client):
        _product(data_client, 'Dup')
        _product(data_client, 'Dup')
        with pytest.raises(RemoteOperationError):
            data_client.select_one('products', {'name': 'Dup'})


class TestErrors:

    def test_unknown_transaction_type_rejected(self, data_client):
        with pytest.raises(RemoteOperationError):
            data_client.insert('transactions', {'type': 'transfer', 'quantity': 1})

    def test_unknown_table(self, data_client):
        with pytest.raises(RemoteOperationError) as excinfo:
            data_client.select('widgets')
        assert 'widgets' in excinfo.value.message

    def test_unknown_column(self, data_client):
        with pytest.raises(RemoteOperationError):
            data_client.insert('categories', {'title': 'x'})

    def test_unknown_lookup(self, data_client):
        with pytest.raises(RemoteOperationError):
            data_client.select('categories', filters={'name__regex': 'x'})

    def test_users_are_not_exposed(self, data_client):
        with pytest.raises(RemoteOperationError):
            data_client.select('users')

    def test_views_are_read_only(self, data_client):
        with pytest.raises(RemoteOperationError):
            data_client.delete('product_inventory_view', {'product_id': 1})

    def test_constraint_violation_is_reported(self, data_client):
        with pytest.raises(RemoteOperationError):
            data_client.insert('products', {'name': 'No price'})
        # session stays usable after the rollback
        assert data_client.count('products') == 0

    def test_one_inventory_row_per_product(self, data_client):
        product = _product(data_client, 'Single')
        data_client.insert('inventory', {'product_id': product['id'], 'quantity': 1, 'min_stock_level': 0})
        with pytest.raises(RemoteOperationError):
            data_client.insert('inventory', {'product_id': product['id'], 'quantity': 2, 'min_stock_level': 0})

    def test_negative_quantity_rejected(self, data_client):
        product = _product(data_client, 'Neg')
        with pytest.raises(RemoteOperationError):
            data_client.insert('inventory', {'product_id': product['id'], 'quantity': -1, 'min_stock_level': 0})


class TestMutations:

    def test_update_and_delete(self, data_client):
        category = data_client.insert('categories', {'name': 'Old'})
        assert data_client.update('categories', {'name': 'New'}, {'id': category['id']}) == 1
        assert data_client.select_one('categories', {'id': category['id']})['name'] == 'New'
        assert data_client.delete('categories', {'id': category['id']}) == 1
        assert data_client.count('categories') == 0

    def test_adjust_adds_and_floors(self, data_client):
        product = _product(data_client, 'Bolt')
        data_client.insert('inventory', {'product_id': product['id'], 'quantity': 3, 'min_stock_level': 1})
        data_client.adjust('inventory', 'quantity', 4, {'product_id': product['id']})
        assert data_client.select_one('inventory', {'product_id': product['id']})['quantity'] == 7
        data_client.adjust('inventory', 'quantity', -100, {'product_id': product['id']}, floor=0)
        assert data_client.select_one('inventory', {'product_id': product['id']})['quantity'] == 0

    def test_deleting_category_nulls_product_reference(self, data_client):
        category = data_client.insert('categories', {'name': 'Doomed'})
        first = _product(data_client, 'One', category_id=category['id'])
        second = _product(data_client, 'Two', category_id=category['id'])
        data_client.delete('categories', {'id': category['id']})
        rows = data_client.select('products', filters={'id__in': [first['id'], second['id']]})
        assert len(rows) == 2
        assert all(row['category_id'] is None for row in rows)

    def test_deleting_product_cascades_inventory(self, data_client):
        product = _product(data_client, 'Gone')
        data_client.insert('inventory', {'product_id': product['id'], 'quantity': 1, 'min_stock_level': 0})
        data_client.delete('products', {'id': product['id']})
        assert data_client.count('inventory') == 0


class TestViews:

    def test_product_inventory_view(self, data_client):
        category = data_client.insert('categories', {'name': 'Hardware'})
        supplier = data_client.insert('suppliers', {'name': 'Acme'})
        stocked = _product(data_client, 'Nail', sku='N-1', category_id=category['id'], supplier_id=supplier['id'])
        _product(data_client, 'Screw')
        data_client.insert('inventory', {'product_id': stocked['id'], 'quantity': 12,
                                         'min_stock_level': 4, 'location': 'Bin 3'})
        rows = data_client.select('product_inventory_view', order_by='product_name')
        assert rows[0] == {
            'product_id': stocked['id'], 'product_name': 'Nail', 'sku': 'N-1',
            'category_name': 'Hardware', 'supplier_name': 'Acme',
            'quantity': 12, 'min_stock_level': 4, 'location': 'Bin 3',
        }
        assert rows[1]['product_name'] == 'Screw'
        assert rows[1]['quantity'] == 0
        assert rows[1]['min_stock_level'] == 0

    def test_low_stock_alert_view(self, data_client):
        for name, quantity, level in (('ok', 10, 5), ('edge', 5, 5), ('empty', 0, 2)):
            product = _product(data_client, name)
            data_client.insert('inventory', {'product_id': product['id'], 'quantity': quantity,
                                             'min_stock_level': level})
        names = {row['product_name'] for row in data_client.select('low_stock_alert_view')}
        assert names == {'edge', 'empty'}
