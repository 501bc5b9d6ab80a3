from models import db, utcnow

TRANSACTION_TYPES = ('in', 'out')


# Append-only stock history
class Transaction(db.Model):
    __tablename__ = 'transactions'
    __table_args__ = (
        db.CheckConstraint(
            'type IN (%s)' % ', '.join("'%s'" % t for t in TRANSACTION_TYPES), name='ck_transactions_type'),
        db.CheckConstraint('quantity > 0', name='ck_transactions_quantity'),
    )
    id = db.Column(db.Integer, primary_key=True)
    product_id = db.Column(db.Integer, db.ForeignKey('products.id', ondelete='SET NULL'), nullable=True)
    type = db.Column(db.String(10), nullable=False)  # in/out
    quantity = db.Column(db.Integer, nullable=False)
    reference_number = db.Column(db.String(64), nullable=True)
    notes = db.Column(db.String(255), nullable=True)
    created_at = db.Column(db.DateTime, default=utcnow)

    product = db.relationship('Product', backref=db.backref('transactions', passive_deletes=True))
