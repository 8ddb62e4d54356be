import pytest

from errors import ValidationError
from models import Instructor
from services.rates import RateKind, base_rate, resolve_hourly_rate


def instructor(**rates):
    rates.setdefault('employment_type', 'freelancer')
    return Instructor(name='Tal', **rates)


def test_freelancer_pays_base_rate():
    assert resolve_hourly_rate(instructor(rate_frontal=100), 'frontal') == 100


def test_employee_multiplier_applies():
    tutor = instructor(rate_frontal=100, employment_type='employee')
    assert resolve_hourly_rate(tutor, 'frontal') == pytest.approx(130)


def test_employment_type_override():
    tutor = instructor(rate_frontal=100)
    assert resolve_hourly_rate(tutor, RateKind.FRONTAL, employment_type='employee') == pytest.approx(130)


def test_configurable_multiplier():
    tutor = instructor(rate_frontal=100, employment_type='employee')
    assert resolve_hourly_rate(tutor, 'frontal', employee_multiplier=1.5) == pytest.approx(150)


def test_online_and_private_fall_back_to_frontal():
    tutor = instructor(rate_frontal=90)
    assert base_rate(tutor, 'online') == 90
    assert base_rate(tutor, 'private_lesson') == 90


def test_own_rates_win_over_frontal():
    tutor = instructor(rate_frontal=90, rate_online=70, rate_private=150)
    assert base_rate(tutor, 'online') == 70
    assert base_rate(tutor, 'private_lesson') == 150


def test_preparation_has_no_fallback():
    assert base_rate(instructor(rate_frontal=90), 'preparation') == 0
    assert base_rate(instructor(rate_frontal=90, rate_preparation=60), 'preparation') == 60


def test_unknown_kind_rejected():
    with pytest.raises(ValidationError):
        resolve_hourly_rate(instructor(rate_frontal=100), 'webinar')
