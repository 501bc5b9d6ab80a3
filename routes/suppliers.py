from flask import Blueprint, render_template, redirect, url_for, flash, request, abort, jsonify
from flask_babel import gettext as _
from forms.supplier_forms import SupplierForm
from routes.search import matches_search
from services.data_client import get_data_client
from services.errors import RemoteOperationError
from services.session import session_required

suppliers_bp = Blueprint('suppliers', __name__, url_prefix='/suppliers')

SEARCH_FIELDS = ('name', 'contact_person', 'email', 'phone')


def _supplier_data(form):
    return {
        'name': form.name.data,
        'contact_person': form.contact_person.data or None,
        'email': form.email.data or None,
        'phone': form.phone.data or None,
        'address': form.address.data or None,
    }


@suppliers_bp.route('/')
@session_required
def list_suppliers():
    search = request.args.get('q', '').strip()
    suppliers = []
    try:
        suppliers = get_data_client().select('suppliers', order_by='name')
    except RemoteOperationError as e:
        flash(_('Failed to fetch suppliers: ') + e.message, 'danger')
    suppliers = [s for s in suppliers if matches_search(s, SEARCH_FIELDS, search)]
    return render_template('suppliers/list.html', title=_('Suppliers'), suppliers=suppliers, search=search)


@suppliers_bp.route('/add', methods=['GET', 'POST'])
@session_required
def add_supplier():
    form = SupplierForm()
    if form.validate_on_submit():
        try:
            get_data_client().insert('suppliers', _supplier_data(form))
        except RemoteOperationError as e:
            flash(_('Failed to save supplier: ') + e.message, 'danger')
        else:
            flash(_('Supplier created'), 'success')
            return redirect(url_for('suppliers.list_suppliers'))
    return render_template('suppliers/form.html', title=_('New supplier'), form=form)


@suppliers_bp.route('/edit/<int:supplier_id>', methods=['GET', 'POST'])
@session_required
def edit_supplier(supplier_id):
    client = get_data_client()
    try:
        supplier = client.select_one('suppliers', {'id': supplier_id})
    except RemoteOperationError as e:
        flash(_('Failed to fetch supplier: ') + e.message, 'danger')
        return redirect(url_for('suppliers.list_suppliers'))
    if supplier is None:
        abort(404)
    form = SupplierForm(data=supplier)
    if form.validate_on_submit():
        try:
            client.update('suppliers', _supplier_data(form), {'id': supplier_id})
        except RemoteOperationError as e:
            flash(_('Failed to save supplier: ') + e.message, 'danger')
        else:
            flash(_('Supplier updated'), 'success')
            return redirect(url_for('suppliers.list_suppliers'))
    return render_template('suppliers/form.html', title=_('Edit supplier'), form=form, edit=True)


@suppliers_bp.route('/delete/<int:supplier_id>', methods=['POST'])
@session_required
def delete_supplier(supplier_id):
    client = get_data_client()
    try:
        client.update('products', {'supplier_id': None}, {'supplier_id': supplier_id})
        client.delete('suppliers', {'id': supplier_id})
    except RemoteOperationError as e:
        flash(_('Failed to delete supplier: ') + e.message, 'danger')
    else:
        flash(_('Supplier deleted'), 'success')
    return redirect(url_for('suppliers.list_suppliers'))


@suppliers_bp.route('/api/list', methods=['GET'])
@session_required
def api_list_suppliers():
    suppliers = get_data_client().select('suppliers', columns=['id', 'name'], order_by='name')
    return jsonify(suppliers)
