from flask_babel import lazy_gettext as _l
from flask_wtf import FlaskForm
from wtforms import StringField, TextAreaField, SubmitField
from wtforms.validators import DataRequired, Length, Optional

class SupplierForm(FlaskForm):
    name = StringField(_l('Supplier name'), validators=[DataRequired()])
    contact_person = StringField(_l('Contact person'), validators=[Optional()])
    email = StringField(_l('Email'), validators=[Optional(), Length(max=255)])
    phone = StringField(_l('Phone'), validators=[Optional(), Length(max=32)])
    address = TextAreaField(_l('Address'), validators=[Optional()])
    submit = SubmitField(_l('Save'))
