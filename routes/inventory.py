from flask import Blueprint, render_template, redirect, url_for, flash, request, abort, jsonify, current_app
from flask_babel import gettext as _
from forms.inventory_forms import InventoryForm, StockAdjustForm
from routes.search import matches_search
from services.data_client import get_data_client
from services.errors import RemoteOperationError, ValidationError
from services.inventory import adjust_stock, save_inventory
from services.session import session_required
from services.stock import (
    ADD, FILTER_ALL, STOCK_FILTERS, classify_row, matches_stock_filter, status_class, status_label,
)

inventory_bp = Blueprint('inventory', __name__, url_prefix='/inventory')

SEARCH_FIELDS = ('product_name', 'sku', 'category_name', 'location')


def _with_status(rows):
    for row in rows:
        status = classify_row(row)
        row['status'] = status
        row['status_text'] = status_label(status)
        row['status_class'] = status_class(status)
    return rows


def _filtered_inventory(search, stock_filter):
    rows = get_data_client().select('product_inventory_view', order_by='product_name')
    rows = [r for r in rows if matches_search(r, SEARCH_FIELDS, search) and matches_stock_filter(r, stock_filter)]
    return _with_status(rows)


def _stock_filter():
    value = request.args.get('filter', FILTER_ALL)
    return value if value in STOCK_FILTERS else FILTER_ALL


@inventory_bp.route('/')
@session_required
def list_inventory():
    search = request.args.get('q', '').strip()
    stock_filter = _stock_filter()
    inventory = []
    try:
        inventory = _filtered_inventory(search, stock_filter)
    except RemoteOperationError as e:
        flash(_('Failed to fetch inventory data: ') + e.message, 'danger')
    return render_template('inventory/list.html', title=_('Inventory'), inventory=inventory,
                           search=search, stock_filter=stock_filter, stock_filters=STOCK_FILTERS)


@inventory_bp.route('/adjust/<int:product_id>', methods=['GET', 'POST'])
@session_required
def adjust(product_id):
    client = get_data_client()
    try:
        item = client.select_one('product_inventory_view', {'product_id': product_id})
    except RemoteOperationError as e:
        flash(_('Failed to fetch inventory data: ') + e.message, 'danger')
        return redirect(url_for('inventory.list_inventory'))
    if item is None:
        abort(404)

    form = StockAdjustForm()
    if request.method == 'GET':
        form.direction.data = request.args.get('direction', ADD)
    if form.validate_on_submit():
        try:
            result = adjust_stock(client, product_id, form.amount.data, form.direction.data,
                                  record_transaction=current_app.config['RECORD_STOCK_ADJUSTMENTS'])
        except ValidationError as e:
            flash(str(e), 'danger')
        except RemoteOperationError as e:
            flash(_('Failed to adjust stock: ') + e.message, 'danger')
        else:
            flash(_('Stock for %(name)s is now %(quantity)s (%(status)s)',
                    name=item['product_name'], quantity=result.quantity,
                    status=status_label(result.status)), 'success')
            return redirect(url_for('inventory.list_inventory'))
    return render_template('inventory/adjust.html', title=_('Adjust stock'), form=form,
                           item=_with_status([item])[0])


@inventory_bp.route('/edit/<int:product_id>', methods=['GET', 'POST'])
@session_required
def edit_inventory(product_id):
    client = get_data_client()
    try:
        product = client.select_one('products', {'id': product_id}, columns=['id', 'name', 'sku'])
        inventory = client.select_one('inventory', {'product_id': product_id})
    except RemoteOperationError as e:
        flash(_('Failed to fetch data: ') + e.message, 'danger')
        return redirect(url_for('inventory.list_inventory'))
    if product is None:
        abort(404)
    form = InventoryForm(data=inventory or {'min_stock_level': current_app.config['DEFAULT_MIN_STOCK_LEVEL']})
    if form.validate_on_submit():
        try:
            save_inventory(client, product_id, form.quantity.data, form.min_stock_level.data, form.location.data)
        except RemoteOperationError as e:
            flash(_('Failed to save data: ') + e.message, 'danger')
        else:
            flash(_('Inventory saved'), 'success')
            return redirect(url_for('inventory.list_inventory'))
    return render_template('inventory/form.html', title=_('Edit inventory'), form=form, product=product)


@inventory_bp.route('/api/list', methods=['GET'])
@session_required
def api_list_inventory():
    rows = _filtered_inventory(request.args.get('q', '').strip(), _stock_filter())
    for row in rows:
        row['status'] = row['status'].value
        row['status_text'] = str(row['status_text'])
    return jsonify(rows)
