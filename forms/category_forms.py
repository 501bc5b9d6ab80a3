from flask_babel import lazy_gettext as _l
from flask_wtf import FlaskForm
from wtforms import StringField, TextAreaField, SubmitField
from wtforms.validators import DataRequired, Optional

class CategoryForm(FlaskForm):
    name = StringField(_l('Category name'), validators=[DataRequired()])
    description = TextAreaField(_l('Description'), validators=[Optional()])
    submit = SubmitField(_l('Save'))
