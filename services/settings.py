from dataclasses import dataclass

from flask import current_app, has_app_context

from services.rates import DEFAULT_EMPLOYEE_MULTIPLIER

DEFAULT_PRIVATE_REVENUE_FORMULA = "split_evenly"


@dataclass(frozen=True)
class FinanceSettings:
    employee_multiplier: float = DEFAULT_EMPLOYEE_MULTIPLIER
    private_revenue_formula: str = DEFAULT_PRIVATE_REVENUE_FORMULA

    @classmethod
    def current(cls):
        if not has_app_context():
            return cls()
        config = current_app.config
        return cls(
            employee_multiplier=float(config.get("EMPLOYEE_COST_MULTIPLIER", DEFAULT_EMPLOYEE_MULTIPLIER)),
            private_revenue_formula=config.get("PRIVATE_REVENUE_FORMULA", DEFAULT_PRIVATE_REVENUE_FORMULA),
        )
