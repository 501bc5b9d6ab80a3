"""Create all tables and load a small demo data set.

Usage: python create_db.py [--reset]
"""
import sys

from app import create_app
from models import db
from models.category import Category
from models.inventory import Inventory
from models.product import Product
from models.supplier import Supplier
from models.transaction import Transaction
from models.user import User

DEMO_EMAIL = 'admin@example.com'
DEMO_PASSWORD = 'admin123'


def seed_database(reset=False):
    if reset:
        db.drop_all()
    db.create_all()

    if User.query.filter_by(email=DEMO_EMAIL).first() is None:
        admin = User(email=DEMO_EMAIL)
        admin.set_password(DEMO_PASSWORD)
        db.session.add(admin)

    if Product.query.count():
        db.session.commit()
        return False

    electronics = Category(name='Electronics', description='Devices and accessories')
    stationery = Category(name='Stationery')
    acme = Supplier(name='Acme Trading', contact_person='J. Smith', email='sales@acme.example', phone='03-0000-0001')
    db.session.add_all([electronics, stationery, acme])
    db.session.flush()

    products = [
        (Product(name='USB-C Cable', sku='EL-001', category_id=electronics.id, supplier_id=acme.id,
                 purchase_price=3.5, selling_price=9.9), 40, 10, 'A-1'),
        (Product(name='Wireless Mouse', sku='EL-002', category_id=electronics.id, supplier_id=acme.id,
                 purchase_price=8.0, selling_price=19.5), 4, 5, 'A-2'),
        (Product(name='Notebook A5', sku='ST-001', category_id=stationery.id,
                 purchase_price=0.8, selling_price=2.5), 0, 20, 'B-1'),
    ]
    for product, quantity, min_level, location in products:
        db.session.add(product)
        db.session.flush()
        db.session.add(Inventory(product_id=product.id, quantity=quantity,
                                 min_stock_level=min_level, location=location))
    db.session.add(Transaction(product_id=products[0][0].id, type='in', quantity=40, reference_number='PO-0001'))
    db.session.commit()
    return True


if __name__ == '__main__':
    app = create_app()
    with app.app_context():
        seeded = seed_database(reset='--reset' in sys.argv)
    print('Database ready' + (' with demo data' if seeded else ''))
    print(f'Login: {DEMO_EMAIL} / {DEMO_PASSWORD}')
