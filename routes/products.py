import logging

from barcode.errors import BarcodeError
from flask import Blueprint, Response, render_template, redirect, url_for, flash, request, abort, current_app
from flask_babel import gettext as _
from forms.product_forms import ProductForm
from routes.search import matches_search
from services.barcodes import render_barcode_svg
from services.data_client import get_data_client
from services.errors import RemoteOperationError
from services.inventory import delete_product as remove_product, save_inventory
from services.session import session_required

logger = logging.getLogger(__name__)

products_bp = Blueprint('products', __name__, url_prefix='/products')

SEARCH_FIELDS = ('name', 'sku', 'category_name', 'supplier_name')


def _set_choices(form, client):
    categories = client.select('categories', columns=['id', 'name'], order_by='name')
    suppliers = client.select('suppliers', columns=['id', 'name'], order_by='name')
    form.category_id.choices = [('', _('-- None --'))] + [(c['id'], c['name']) for c in categories]
    form.supplier_id.choices = [('', _('-- None --'))] + [(s['id'], s['name']) for s in suppliers]


def _product_data(form):
    return {
        'name': form.name.data,
        'description': form.description.data or None,
        'sku': form.sku.data or None,
        'barcode': form.barcode.data or None,
        'category_id': form.category_id.data,
        'supplier_id': form.supplier_id.data,
        'purchase_price': form.purchase_price.data,
        'selling_price': form.selling_price.data,
        'image_url': form.image_url.data or None,
    }


def _save(form, client, product_id=None):
    if product_id is None:
        product_id = client.insert('products', _product_data(form))['id']
    else:
        client.update('products', _product_data(form), {'id': product_id})
    save_inventory(client, product_id, form.quantity.data, form.min_stock_level.data, form.location.data)
    return product_id


@products_bp.route('/')
@session_required
def list_products():
    search = request.args.get('q', '').strip()
    products = []
    try:
        products = get_data_client().select('product_list_view', order_by='name')
    except RemoteOperationError as e:
        flash(_('Failed to fetch products: ') + e.message, 'danger')
    products = [p for p in products if matches_search(p, SEARCH_FIELDS, search)]
    return render_template('products/list.html', title=_('Products'), products=products, search=search)


@products_bp.route('/add', methods=['GET', 'POST'])
@session_required
def add_product():
    client = get_data_client()
    form = ProductForm()
    if request.method == 'GET':
        form.min_stock_level.data = current_app.config['DEFAULT_MIN_STOCK_LEVEL']
    try:
        _set_choices(form, client)
    except RemoteOperationError as e:
        flash(_('Failed to fetch data: ') + e.message, 'danger')
        form.category_id.choices = form.supplier_id.choices = [('', _('-- None --'))]
    if form.validate_on_submit():
        try:
            _save(form, client)
        except RemoteOperationError as e:
            flash(_('Failed to save data: ') + e.message, 'danger')
        else:
            flash(_('Product saved'), 'success')
            return redirect(url_for('products.list_products'))
    return render_template('products/form.html', title=_('New product'), form=form)


@products_bp.route('/edit/<int:product_id>', methods=['GET', 'POST'])
@session_required
def edit_product(product_id):
    client = get_data_client()
    try:
        product = client.select_one('products', {'id': product_id})
        inventory = client.select_one('inventory', {'product_id': product_id})
    except RemoteOperationError as e:
        flash(_('Failed to fetch data: ') + e.message, 'danger')
        return redirect(url_for('products.list_products'))
    if product is None:
        abort(404)
    data = dict(product)
    data.update({
        'quantity': inventory['quantity'] if inventory else 0,
        'min_stock_level': inventory['min_stock_level'] if inventory else current_app.config['DEFAULT_MIN_STOCK_LEVEL'],
        'location': inventory['location'] if inventory else '',
    })
    form = ProductForm(data=data)
    try:
        _set_choices(form, client)
    except RemoteOperationError as e:
        flash(_('Failed to fetch data: ') + e.message, 'danger')
        form.category_id.choices = form.supplier_id.choices = [('', _('-- None --'))]
    if form.validate_on_submit():
        try:
            _save(form, client, product_id)
        except RemoteOperationError as e:
            flash(_('Failed to save data: ') + e.message, 'danger')
        else:
            flash(_('Product saved'), 'success')
            return redirect(url_for('products.list_products'))
    return render_template('products/form.html', title=_('Edit product'), form=form, edit=True)


@products_bp.route('/delete/<int:product_id>', methods=['POST'])
@session_required
def delete_product(product_id):
    try:
        remove_product(get_data_client(), product_id)
    except RemoteOperationError as e:
        flash(_('Failed to delete product: ') + e.message, 'danger')
    else:
        flash(_('Product deleted'), 'success')
    return redirect(url_for('products.list_products'))


@products_bp.route('/barcode/<int:product_id>.svg')
@session_required
def barcode_image(product_id):
    product = get_data_client().select_one('products', {'id': product_id}, columns=['barcode'])
    if product is None or not product['barcode']:
        abort(404)
    try:
        svg = render_barcode_svg(product['barcode'])
    except BarcodeError as e:
        # Code128 only encodes ASCII
        logger.warning('cannot render barcode for product %s: %s', product_id, e)
        abort(404)
    return Response(svg, mimetype='image/svg+xml')
