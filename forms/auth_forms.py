from flask_babel import lazy_gettext as _l
from flask_wtf import FlaskForm
from wtforms import StringField, PasswordField, SubmitField
from wtforms.validators import DataRequired, Length, EqualTo

class LoginForm(FlaskForm):
    email = StringField(_l('Email'), validators=[DataRequired(), Length(max=255)])
    password = PasswordField(_l('Password'), validators=[DataRequired()])
    submit = SubmitField(_l('Log in'))

class RegisterForm(FlaskForm):
    email = StringField(_l('Email'), validators=[DataRequired(), Length(max=255)])
    password = PasswordField(_l('Password'), validators=[DataRequired(), Length(min=6)])
    confirm = PasswordField(_l('Confirm password'), validators=[DataRequired(), EqualTo('password', message=_l('Passwords do not match'))])
    submit = SubmitField(_l('Register'))
