from .meetings import meetings_bp
from .cycles import cycles_bp
from .expenses import expenses_bp
from .forecast import forecast_bp
from .upsell_leads import upsell_leads_bp

def register_blueprints(app):
    app.register_blueprint(meetings_bp)
    app.register_blueprint(cycles_bp)
    app.register_blueprint(expenses_bp)
    app.register_blueprint(forecast_bp)
    app.register_blueprint(upsell_leads_bp)
