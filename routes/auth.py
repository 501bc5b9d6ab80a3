from flask import Blueprint, render_template, redirect, url_for, flash, request
from flask_babel import gettext as _
from forms.auth_forms import LoginForm, RegisterForm
from services.auth import get_auth_client
from services.errors import RemoteOperationError
from services.session import session_required

auth_bp = Blueprint('auth', __name__, url_prefix='/auth')


def _safe_next(target):
    # only same-site relative paths
    if target and target.startswith('/') and not target.startswith('//'):
        return target
    return None


@auth_bp.route('/login', methods=['GET', 'POST'])
def login():
    auth = get_auth_client()
    if auth.get_current_session():
        return redirect(url_for('dashboard'))
    form = LoginForm()
    if form.validate_on_submit():
        try:
            auth.sign_in(form.email.data, form.password.data)
        except RemoteOperationError as e:
            flash(_('Login failed: ') + e.message, 'danger')
        else:
            return redirect(_safe_next(request.args.get('next')) or url_for('dashboard'))
    return render_template('auth/login.html', title=_('Log in'), form=form)


@auth_bp.route('/register', methods=['GET', 'POST'])
def register():
    form = RegisterForm()
    if form.validate_on_submit():
        try:
            get_auth_client().sign_up(form.email.data, form.password.data)
        except RemoteOperationError as e:
            flash(_('Registration failed: ') + e.message, 'danger')
        else:
            flash(_('Registration complete. You can now log in.'), 'success')
            return redirect(url_for('auth.login'))
    return render_template('auth/register.html', title=_('Register'), form=form)


@auth_bp.route('/logout', methods=['GET', 'POST'])
@session_required
def logout():
    get_auth_client().sign_out()
    flash(_('You have been logged out'), 'success')
    return redirect(url_for('auth.login'))
