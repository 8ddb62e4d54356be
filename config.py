import os

def build_uri():
    url = os.getenv("DATABASE_URL")
    if url:
        return url
    user = os.getenv("DB_USER")
    password = os.getenv("DB_PASSWORD")
    host = os.getenv("DB_HOST")
    port = os.getenv("DB_PORT", "5432")
    name = os.getenv("DB_NAME")
    return f"postgresql://{user}:{password}@{host}:{port}/{name}"

class BaseConfig:
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    SECRET_KEY = os.getenv("SECRET_KEY", "default-secret-key")
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

    # Employer cost factor applied to employee instructors (freelancers pay 1.0)
    EMPLOYEE_COST_MULTIPLIER = float(os.getenv("EMPLOYEE_COST_MULTIPLIER", "1.3"))
    # 'split_evenly' or 'per_meeting', see services.financials.PRIVATE_REVENUE_FORMULAS
    PRIVATE_REVENUE_FORMULA = os.getenv("PRIVATE_REVENUE_FORMULA", "split_evenly")

    FORECAST_HISTORICAL_MONTHS = int(os.getenv("FORECAST_HISTORICAL_MONTHS", "6"))
    FORECAST_MONTHS = int(os.getenv("FORECAST_MONTHS", "3"))
    UPSELL_PAGE_SIZE = int(os.getenv("UPSELL_PAGE_SIZE", "20"))

class DevelopmentConfig(BaseConfig):
    SQLALCHEMY_DATABASE_URI = build_uri()
    LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG")

class TestingConfig(BaseConfig):
    SQLALCHEMY_DATABASE_URI = os.getenv("TEST_DATABASE_URL", "sqlite://")
    TESTING = True
    SECRET_KEY = "test-secret"

class ProductionConfig(BaseConfig):
    SQLALCHEMY_DATABASE_URI = build_uri()
