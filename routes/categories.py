from flask import Blueprint, render_template, redirect, url_for, flash, abort, jsonify
from flask_babel import gettext as _
from forms.category_forms import CategoryForm
from services.data_client import get_data_client
from services.errors import RemoteOperationError
from services.session import session_required

categories_bp = Blueprint('categories', __name__, url_prefix='/categories')


def _category_data(form):
    return {
        'name': form.name.data,
        'description': form.description.data or None,
    }


@categories_bp.route('/')
@session_required
def list_categories():
    categories = []
    try:
        categories = get_data_client().select(
            'categories', columns=['id', 'name', 'description', 'created_at'], order_by='name')
    except RemoteOperationError as e:
        flash(_('Failed to fetch categories: ') + e.message, 'danger')
    return render_template('categories/list.html', title=_('Categories'), categories=categories)


@categories_bp.route('/add', methods=['GET', 'POST'])
@session_required
def add_category():
    form = CategoryForm()
    if form.validate_on_submit():
        try:
            get_data_client().insert('categories', _category_data(form))
        except RemoteOperationError as e:
            flash(_('Failed to save category: ') + e.message, 'danger')
        else:
            flash(_('Category created'), 'success')
            return redirect(url_for('categories.list_categories'))
    return render_template('categories/form.html', title=_('New category'), form=form)


@categories_bp.route('/edit/<int:category_id>', methods=['GET', 'POST'])
@session_required
def edit_category(category_id):
    client = get_data_client()
    try:
        category = client.select_one('categories', {'id': category_id})
    except RemoteOperationError as e:
        flash(_('Failed to fetch category: ') + e.message, 'danger')
        return redirect(url_for('categories.list_categories'))
    if category is None:
        abort(404)
    form = CategoryForm(data=category)
    if form.validate_on_submit():
        try:
            client.update('categories', _category_data(form), {'id': category_id})
        except RemoteOperationError as e:
            flash(_('Failed to save category: ') + e.message, 'danger')
        else:
            flash(_('Category updated'), 'success')
            return redirect(url_for('categories.list_categories'))
    return render_template('categories/form.html', title=_('Edit category'), form=form, edit=True)


@categories_bp.route('/delete/<int:category_id>', methods=['POST'])
@session_required
def delete_category(category_id):
    client = get_data_client()
    try:
        # dependent products become uncategorised
        client.update('products', {'category_id': None}, {'category_id': category_id})
        client.delete('categories', {'id': category_id})
    except RemoteOperationError as e:
        flash(_('Failed to delete category: ') + e.message, 'danger')
    else:
        flash(_('Category deleted'), 'success')
    return redirect(url_for('categories.list_categories'))


@categories_bp.route('/api/list', methods=['GET'])
@session_required
def api_list_categories():
    categories = get_data_client().select('categories', columns=['id', 'name'], order_by='name')
    return jsonify(categories)
