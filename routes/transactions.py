from datetime import datetime, time, timedelta

from flask import Blueprint, render_template, redirect, url_for, flash, request, send_file, current_app
from flask_babel import gettext as _
from models import utcnow
from models.transaction import TRANSACTION_TYPES
from routes.search import matches_search
from services.data_client import get_data_client
from services.errors import RemoteOperationError
from services.exports import transactions_workbook
from services.session import session_required

transactions_bp = Blueprint('transactions', __name__, url_prefix='/transactions')

TRANSACTION_FILTERS = ('all',) + TRANSACTION_TYPES
SEARCH_FIELDS = ('product_name', 'reference_number', 'notes')


def _parse_date(value, default):
    if not value:
        return default
    try:
        return datetime.strptime(value, '%Y-%m-%d').date()
    except ValueError:
        return default


def _filters_from_request():
    today = utcnow().date()
    lookback = current_app.config['TRANSACTION_LOOKBACK_DAYS']
    type_ = request.args.get('type', 'all')
    return {
        'type': type_ if type_ in TRANSACTION_FILTERS else 'all',
        'start_date': _parse_date(request.args.get('start_date'), today - timedelta(days=lookback)),
        'end_date': _parse_date(request.args.get('end_date'), today),
        'q': request.args.get('q', '').strip(),
    }


def fetch_transactions(client, filters):
    query = {
        'created_at__gte': datetime.combine(filters['start_date'], time.min),
        'created_at__lte': datetime.combine(filters['end_date'], time.max),
    }
    if filters['type'] != 'all':
        query['type'] = filters['type']
    rows = client.select('transaction_history_view', filters=query, order_by='created_at', descending=True)
    return [r for r in rows if matches_search(r, SEARCH_FIELDS, filters['q'])]


@transactions_bp.route('/')
@session_required
def list_transactions():
    filters = _filters_from_request()
    transactions = []
    try:
        transactions = fetch_transactions(get_data_client(), filters)
    except RemoteOperationError as e:
        flash(_('Failed to fetch transaction history: ') + e.message, 'danger')
    return render_template('transactions/list.html', title=_('Transaction history'),
                           transactions=transactions, filters=filters,
                           transaction_filters=TRANSACTION_FILTERS)


@transactions_bp.route('/export')
@session_required
def export_transactions():
    filters = _filters_from_request()
    try:
        rows = fetch_transactions(get_data_client(), filters)
    except RemoteOperationError as e:
        flash(_('Failed to export transactions: ') + e.message, 'danger')
        return redirect(url_for('transactions.list_transactions', **request.args))
    output = transactions_workbook(rows)
    timestamp = utcnow().strftime('%Y%m%d_%H%M%S')
    return send_file(
        output,
        as_attachment=True,
        download_name=f'transactions_{timestamp}.xlsx',
        mimetype='application/vnd.openxmlformats-officedocument.spreadsheetml.sheet'
    )
