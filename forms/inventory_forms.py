from flask_babel import lazy_gettext as _l
from flask_wtf import FlaskForm
from wtforms import HiddenField, IntegerField, StringField, SubmitField
from wtforms.validators import AnyOf, DataRequired, InputRequired, NumberRange, Optional

from services.stock import DIRECTIONS

class InventoryForm(FlaskForm):
    quantity = IntegerField(_l('Quantity'), default=0, validators=[InputRequired(), NumberRange(min=0)])
    min_stock_level = IntegerField(_l('Minimum stock level'), default=5, validators=[InputRequired(), NumberRange(min=0)])
    location = StringField(_l('Storage location'), validators=[Optional()])
    submit = SubmitField(_l('Save'))

class StockAdjustForm(FlaskForm):
    direction = HiddenField(validators=[DataRequired(), AnyOf(DIRECTIONS)])
    amount = IntegerField(_l('Quantity'), validators=[InputRequired(), NumberRange(min=1)])
    submit = SubmitField(_l('Apply'))
