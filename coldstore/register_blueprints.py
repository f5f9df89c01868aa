"""
Centralized Blueprint Registration
All blueprints MUST be registered inside register_all_blueprints(app)
"""

import logging

logger = logging.getLogger(__name__)


def register_all_blueprints(app):

    # Auth
    from coldstore.routes.auth_routes import auth_bp
    app.register_blueprint(auth_bp)

    # Store-admin pages
    from coldstore.routes.daybook_routes import daybook_bp
    from coldstore.routes.people_routes import people_bp
    from coldstore.routes.gate_pass_routes import gate_pass_bp
    from coldstore.routes.analytics_routes import analytics_bp
    from coldstore.routes.finance_routes import finance_bp
    from coldstore.routes.settings_routes import settings_bp

    app.register_blueprint(daybook_bp)
    app.register_blueprint(people_bp)
    app.register_blueprint(gate_pass_bp)
    app.register_blueprint(analytics_bp)
    app.register_blueprint(finance_bp)
    app.register_blueprint(settings_bp)

    # PDF reports
    from coldstore.routes.report_routes import report_bp
    app.register_blueprint(report_bp)

    # JSON errors for every blueprint above
    from coldstore.routes.route_helpers import register_error_handlers
    register_error_handlers(app)

    logger.info("All blueprints registered")
