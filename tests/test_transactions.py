"""
Tests for the transaction history screen and its Excel export.
"""
import io
from datetime import timedelta

import pandas as pd
import pytest

from models import utcnow
from routes.transactions import TRANSACTION_FILTERS


@pytest.fixture
def history(seed, stocked_product):
    now = utcnow()
    seed('transactions', {'product_id': stocked_product['id'], 'type': 'in', 'quantity': 20,
                          'reference_number': 'PO-1', 'created_at': now - timedelta(days=2)})
    seed('transactions', {'product_id': stocked_product['id'], 'type': 'out', 'quantity': 4,
                          'notes': 'shop floor', 'created_at': now - timedelta(hours=1)})
    seed('transactions', {'product_id': stocked_product['id'], 'type': 'in', 'quantity': 7,
                          'reference_number': 'PO-OLD', 'created_at': now - timedelta(days=90)})
    return stocked_product


class TestHistory:

    def test_default_range_is_recent(self, logged_in, history):
        body = logged_in.get('/transactions/').data
        assert b'PO-1' in body
        assert b'shop floor' in body
        assert b'PO-OLD' not in body

    def test_newest_first(self, logged_in, history):
        body = logged_in.get('/transactions/').data.decode()
        assert body.index('shop floor') < body.index('PO-1')

    def test_type_filter(self, logged_in, history):
        body = logged_in.get('/transactions/?type=out').data
        assert b'shop floor' in body
        assert b'PO-1' not in body

    def test_explicit_range(self, logged_in, history):
        start = (utcnow() - timedelta(days=120)).strftime('%Y-%m-%d')
        body = logged_in.get(f'/transactions/?start_date={start}').data
        assert b'PO-OLD' in body

    def test_bad_dates_fall_back(self, logged_in, history):
        response = logged_in.get('/transactions/?start_date=yesterday&end_date=2020-13-40')
        assert response.status_code == 200
        assert b'PO-1' in response.data

    def test_search(self, logged_in, history):
        body = logged_in.get('/transactions/?q=po-1').data
        assert b'PO-1' in body
        assert b'shop floor' not in body

    def test_history_survives_product_delete(self, logged_in, fetch, history):
        logged_in.post(f'/products/delete/{history["id"]}')
        rows = fetch('transaction_history_view')
        assert len(rows) == 3
        assert all(r['product_name'] is None for r in rows)


class TestExport:

    def test_export_workbook(self, logged_in, history):
        response = logged_in.get('/transactions/export?type=all')
        assert response.status_code == 200
        assert response.mimetype == 'application/vnd.openxmlformats-officedocument.spreadsheetml.sheet'
        assert 'transactions_' in response.headers['Content-Disposition']
        frame = pd.read_excel(io.BytesIO(response.data), sheet_name='Transactions')
        assert list(frame.columns) == ['Date', 'Product', 'Type', 'Quantity', 'Reference', 'Notes']
        assert list(frame['Quantity']) == [4, 20]
        assert list(frame['Type']) == ['Out', 'In']

    def test_export_empty(self, logged_in):
        response = logged_in.get('/transactions/export')
        frame = pd.read_excel(io.BytesIO(response.data))
        assert frame.empty

    def test_export_filename_uses_utc_date(self, logged_in):
        response = logged_in.get('/transactions/export')
        assert f'transactions_{utcnow():%Y%m%d}' in response.headers['Content-Disposition']

    def test_type_filter_choices_match_stored_types(self):
        assert TRANSACTION_FILTERS == ('all', 'in', 'out')
