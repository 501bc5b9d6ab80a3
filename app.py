import logging

from flask import Flask, render_template, request, jsonify, flash, current_app, has_request_context
from flask_login import LoginManager
from flask_wtf.csrf import CSRFProtect
from config import Config
from flask_babel import Babel, gettext as _
from models import db, VIEWS
from models.user import User
from services.auth import AuthClient
from services.data_client import DataClient, get_data_client
from services.errors import RemoteOperationError
from services.session import SessionGuard, session_required

logger = logging.getLogger(__name__)

# Initialize extensions
login_manager = LoginManager()
babel = Babel()
csrf = CSRFProtect()


def dashboard_stats(client, recent_limit=5):
    """Counts and breakdowns shown on the dashboard."""
    inventory = client.select('inventory', columns=['quantity'])
    low_stock = client.select('low_stock_alert_view', columns=['product_id'])

    category_counts = {}
    for product in client.select('product_list_view', columns=['category_name']):
        name = product['category_name'] or _('Uncategorised')
        category_counts[name] = category_counts.get(name, 0) + 1

    return {
        'total_products': client.count('products'),
        'total_inventory': sum(item['quantity'] for item in inventory),
        'low_stock_items': len(low_stock),
        'categories': [{'name': name, 'value': value} for name, value in category_counts.items()],
        'recent_transactions': client.select('transaction_history_view', order_by='created_at',
                                             descending=True, limit=recent_limit),
    }


def create_app(config_object=Config):
    app = Flask(__name__)
    app.config.from_object(config_object)
    logging.basicConfig(level=app.config['LOG_LEVEL'],
                        format='%(asctime)s %(levelname)s %(name)s: %(message)s')

    db.init_app(app)
    login_manager.init_app(app)
    csrf.init_app(app)
    login_manager.login_view = 'auth.login'

    def get_locale():
        # gettext outside a request (CLI, tests) falls back to the default
        if not has_request_context():
            return app.config['BABEL_DEFAULT_LOCALE']
        return request.accept_languages.best_match(app.config['LANGUAGES']) or app.config['BABEL_DEFAULT_LOCALE']
    babel.init_app(app, locale_selector=get_locale)

    @login_manager.user_loader
    def load_user(user_id):
        return db.session.get(User, int(user_id))

    auth_client = AuthClient()
    app.extensions['auth_client'] = auth_client
    app.extensions['data_client'] = DataClient.from_models(db, VIEWS)
    SessionGuard(app, auth_client)

    # Register Blueprints
    from routes.auth import auth_bp
    app.register_blueprint(auth_bp)
    from routes.products import products_bp
    app.register_blueprint(products_bp)
    from routes.categories import categories_bp
    app.register_blueprint(categories_bp)
    from routes.suppliers import suppliers_bp
    app.register_blueprint(suppliers_bp)
    from routes.inventory import inventory_bp
    app.register_blueprint(inventory_bp)
    from routes.transactions import transactions_bp
    app.register_blueprint(transactions_bp)

    @app.route('/')
    @app.route('/dashboard')
    @session_required
    def dashboard():
        stats = None
        try:
            stats = dashboard_stats(get_data_client(), current_app.config['RECENT_TRANSACTIONS_LIMIT'])
        except RemoteOperationError as e:
            logger.error('failed to load dashboard data: %s', e)
        if stats is None:
            stats = {'total_products': 0, 'total_inventory': 0, 'low_stock_items': 0,
                     'categories': [], 'recent_transactions': []}
        return render_template('dashboard.html', title=_('Dashboard'), stats=stats)

    @app.errorhandler(RemoteOperationError)
    def handle_remote_error(e):
        logger.error('unhandled data store error on %s: %s', request.path, e)
        if '/api/' in request.path:
            return jsonify({'success': False, 'message': e.message}), 502
        flash(_('Request failed: ') + e.message, 'danger')
        return render_template('error.html', title=_('Error')), 502

    @app.errorhandler(404)
    def not_found(e):
        if '/api/' in request.path:
            return jsonify({'success': False, 'message': 'not found'}), 404
        return render_template('error.html', title=_('Not found'), message=_('The requested record was not found')), 404

    @app.template_filter('datetime')
    def format_datetime(value):
        return value.strftime('%Y-%m-%d %H:%M') if value else '-'

    return app


if __name__ == "__main__":
    app = create_app()
    app.run(debug=True)
