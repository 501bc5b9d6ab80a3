"""Read-only joined views served by the data client.

Each view is a SQLAlchemy subquery so the client can filter and order it
exactly like a table, while refusing writes.
"""
from sqlalchemy import func, select

from models.category import Category
from models.inventory import Inventory
from models.product import Product
from models.supplier import Supplier
from models.transaction import Transaction


def _product_inventory_view():
    return (
        select(
            Product.id.label('product_id'),
            Product.name.label('product_name'),
            Product.sku.label('sku'),
            Category.name.label('category_name'),
            Supplier.name.label('supplier_name'),
            func.coalesce(Inventory.quantity, 0).label('quantity'),
            func.coalesce(Inventory.min_stock_level, 0).label('min_stock_level'),
            Inventory.location.label('location'),
        )
        .select_from(Product)
        .outerjoin(Category, Product.category_id == Category.id)
        .outerjoin(Supplier, Product.supplier_id == Supplier.id)
        .outerjoin(Inventory, Inventory.product_id == Product.id)
        .subquery('product_inventory_view')
    )


def _low_stock_alert_view():
    return (
        select(
            Product.id.label('product_id'),
            Product.name.label('product_name'),
            Product.sku.label('sku'),
            Inventory.quantity.label('quantity'),
            Inventory.min_stock_level.label('min_stock_level'),
            Inventory.location.label('location'),
        )
        .select_from(Inventory)
        .join(Product, Inventory.product_id == Product.id)
        .where(Inventory.quantity <= Inventory.min_stock_level)
        .subquery('low_stock_alert_view')
    )


def _product_list_view():
    return (
        select(
            Product.id.label('id'),
            Product.name.label('name'),
            Product.description.label('description'),
            Product.sku.label('sku'),
            Product.barcode.label('barcode'),
            Product.purchase_price.label('purchase_price'),
            Product.selling_price.label('selling_price'),
            Product.image_url.label('image_url'),
            Product.category_id.label('category_id'),
            Category.name.label('category_name'),
            Product.supplier_id.label('supplier_id'),
            Supplier.name.label('supplier_name'),
        )
        .select_from(Product)
        .outerjoin(Category, Product.category_id == Category.id)
        .outerjoin(Supplier, Product.supplier_id == Supplier.id)
        .subquery('product_list_view')
    )


def _transaction_history_view():
    return (
        select(
            Transaction.id.label('id'),
            Transaction.product_id.label('product_id'),
            Product.name.label('product_name'),
            Transaction.type.label('type'),
            Transaction.quantity.label('quantity'),
            Transaction.reference_number.label('reference_number'),
            Transaction.notes.label('notes'),
            Transaction.created_at.label('created_at'),
        )
        .select_from(Transaction)
        .outerjoin(Product, Transaction.product_id == Product.id)
        .subquery('transaction_history_view')
    )


VIEWS = {
    'product_inventory_view': _product_inventory_view(),
    'low_stock_alert_view': _low_stock_alert_view(),
    'product_list_view': _product_list_view(),
    'transaction_history_view': _transaction_history_view(),
}
