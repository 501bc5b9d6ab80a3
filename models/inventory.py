from models import db, utcnow


class Inventory(db.Model):
    __tablename__ = 'inventory'
    __table_args__ = (
        db.CheckConstraint('quantity >= 0', name='ck_inventory_quantity'),
        db.CheckConstraint('min_stock_level >= 0', name='ck_inventory_min_stock_level'),
    )
    id = db.Column(db.Integer, primary_key=True)
    # At most one stock row per product
    product_id = db.Column(db.Integer, db.ForeignKey('products.id', ondelete='CASCADE'),
                           unique=True, nullable=False)
    quantity = db.Column(db.Integer, nullable=False, default=0)
    min_stock_level = db.Column(db.Integer, nullable=False, default=0)
    location = db.Column(db.String(128), nullable=True)
    updated_at = db.Column(db.DateTime, default=utcnow, onupdate=utcnow)

    product = db.relationship('Product', backref=db.backref('inventory', uselist=False, passive_deletes=True))
