from flask_babel import lazy_gettext as _l
from flask_wtf import FlaskForm
from wtforms import StringField, TextAreaField, SelectField, IntegerField, FloatField, SubmitField
from wtforms.validators import DataRequired, InputRequired, NumberRange, Optional


def optional_int(value):
    if value in (None, '', 'None'):
        return None
    return int(value)


class ProductForm(FlaskForm):
    name = StringField(_l('Product name'), validators=[DataRequired()])
    description = TextAreaField(_l('Description'), validators=[Optional()])
    sku = StringField(_l('SKU'), validators=[Optional()])
    barcode = StringField(_l('Barcode'), validators=[Optional()])
    category_id = SelectField(_l('Category'), coerce=optional_int, validators=[Optional()])
    supplier_id = SelectField(_l('Supplier'), coerce=optional_int, validators=[Optional()])
    purchase_price = FloatField(_l('Purchase price'), validators=[InputRequired(), NumberRange(min=0)])
    selling_price = FloatField(_l('Selling price'), validators=[InputRequired(), NumberRange(min=0)])
    image_url = StringField(_l('Image URL'), validators=[Optional()])
    # initial stock
    quantity = IntegerField(_l('Quantity'), default=0, validators=[InputRequired(), NumberRange(min=0)])
    min_stock_level = IntegerField(_l('Minimum stock level'), default=5, validators=[InputRequired(), NumberRange(min=0)])
    location = StringField(_l('Storage location'), validators=[Optional()])
    submit = SubmitField(_l('Save'))
