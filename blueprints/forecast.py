from flask import Blueprint, current_app, jsonify, request

from decorators import manager_or_admin
from services.forecast import build_cycle_forecast, build_forecast
from utils import parse_positive_int

forecast_bp = Blueprint('forecast', __name__, url_prefix='/api/forecast')


def _window():
    config = current_app.config
    historical = parse_positive_int(request.args.get('historicalMonths'),
                                    config['FORECAST_HISTORICAL_MONTHS'], 'historicalMonths')
    forecast = parse_positive_int(request.args.get('forecastMonths'),
                                  config['FORECAST_MONTHS'], 'forecastMonths')
    return historical, forecast


@forecast_bp.route('', methods=['GET'])
@manager_or_admin
def forecast():
    historical, months = _window()
    return jsonify(build_forecast(historical_months=historical, forecast_months=months))


@forecast_bp.route('/cycle/<int:cycle_id>', methods=['GET'])
@manager_or_admin
def cycle_forecast(cycle_id):
    historical, months = _window()
    return jsonify(build_cycle_forecast(cycle_id, forecast_months=months, historical_months=historical))
