from app import select_config
from config import DevelopmentConfig, ProductionConfig, TestingConfig
from services.settings import FinanceSettings


def test_testing_config(app):
    assert app.config['TESTING'] is True
    assert app.config['SQLALCHEMY_DATABASE_URI'].startswith('sqlite')


def test_config_follows_flask_env(monkeypatch):
    monkeypatch.setenv('FLASK_ENV', 'development')
    assert select_config() is DevelopmentConfig
    monkeypatch.setenv('FLASK_ENV', 'testing')
    assert select_config() is TestingConfig
    monkeypatch.setenv('FLASK_ENV', 'staging')
    assert select_config() is ProductionConfig


def test_finance_settings_read_app_config(app):
    app.config['EMPLOYEE_COST_MULTIPLIER'] = 1.5
    app.config['PRIVATE_REVENUE_FORMULA'] = 'per_meeting'

    settings = FinanceSettings.current()

    assert settings.employee_multiplier == 1.5
    assert settings.private_revenue_formula == 'per_meeting'


def test_finance_settings_defaults_outside_app():
    assert FinanceSettings.current() == FinanceSettings(1.3, 'split_evenly')


def test_errors_render_as_json(admin_client):
    response = admin_client.get('/api/cycles/12345/summary')
    assert response.status_code == 404
    assert response.get_json() == {'error': {'code': 'not_found', 'message': 'Cycle 12345 not found'}}
