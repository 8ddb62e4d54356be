import logging
from datetime import date

import pandas as pd

from db import db
from errors import NotFoundError, ValidationError
from models import Cycle, CycleStatus, Meeting, MeetingStatus
from services.expenses import cycle_expense_share, meeting_expenses_total
from services.financials import project_meeting_financials
from services.settings import FinanceSettings
from utils import add_months, first_of_month, month_key, month_keys, to_number

logger = logging.getLogger(__name__)

DEFAULT_HISTORICAL_MONTHS = 6
DEFAULT_FORECAST_MONTHS = 3

MEETING_COLUMNS = ["meetingId", "cycleId", "month", "revenue", "instructorPayments",
                   "cycleExpenses", "meetingExpenses"]
EXPENSE_COLUMNS = ["cycleId", "cycleName", "month", "type", "amount"]
AMOUNT_COLUMNS = ["revenue", "instructorPayments", "cycleExpenses", "meetingExpenses"]


def forecast_confidence(mean, std):
    if mean == 0:
        return 100 if std == 0 else 0
    cv = std / abs(mean)
    return round(min(100.0, max(0.0, 100.0 - cv * 100.0)))


def _sample_std(series):
    if len(series) < 2:
        return 0.0
    return float(series.std(ddof=1))


def _meetings_between(start, end, status, cycle_id=None):
    query = Meeting.query.filter(
        Meeting.status == status,
        Meeting.scheduled_date >= start,
        Meeting.scheduled_date < end,
    )
    if cycle_id is not None:
        query = query.filter(Meeting.cycle_id == cycle_id)
    return query.order_by(Meeting.scheduled_date).all()


class _ShareCache(dict):

    def __init__(self, settings):
        super().__init__()
        self.settings = settings

    def for_meeting(self, meeting):
        if meeting.cycle_id not in self:
            self[meeting.cycle_id] = cycle_expense_share(meeting.cycle, self.settings)
        return self[meeting.cycle_id]


def meeting_frame(meetings, shares):
    rows = [{
        "meetingId": m.id,
        "cycleId": m.cycle_id,
        "month": month_key(m.scheduled_date),
        "revenue": to_number(m.revenue),
        "instructorPayments": to_number(m.instructor_payment),
        "cycleExpenses": shares.for_meeting(m),
        "meetingExpenses": meeting_expenses_total(m),
    } for m in meetings]
    frame = pd.DataFrame(rows, columns=MEETING_COLUMNS)
    return frame.astype({column: "float64" for column in AMOUNT_COLUMNS})


def expense_frame(meetings):
    rows = [{
        "cycleId": m.cycle_id,
        "cycleName": m.cycle.name,
        "month": month_key(m.scheduled_date),
        "type": e.type,
        "amount": to_number(e.amount),
    } for m in meetings for e in m.expenses if e.counts_toward_totals]
    return pd.DataFrame(rows, columns=EXPENSE_COLUMNS).astype({"amount": "float64"})


def monthly_totals(frame, months):
    grouped = frame.groupby("month")[AMOUNT_COLUMNS].sum()
    grouped["meetingCount"] = frame.groupby("month")["meetingId"].count()
    grouped = grouped.reindex(months).fillna(0.0)
    grouped["totalExpenses"] = grouped["instructorPayments"] + grouped["cycleExpenses"] + grouped["meetingExpenses"]
    grouped["profit"] = grouped["revenue"] - grouped["totalExpenses"]
    return grouped


def _month_record(month, row, **extra):
    record = {
        "month": month,
        "revenue": float(row["revenue"]),
        "instructorPayments": float(row["instructorPayments"]),
        "cycleExpenses": float(row["cycleExpenses"]),
        "meetingExpenses": float(row["meetingExpenses"]),
        "totalExpenses": float(row["totalExpenses"]),
        "profit": float(row["profit"]),
        "meetingCount": int(row["meetingCount"]),
    }
    record.update(extra)
    return record


def expense_patterns(meetings_df, expenses_df):
    if expenses_df.empty:
        return []
    active_months = meetings_df.groupby("cycleId")["month"].nunique()
    monthly = expenses_df.groupby(["cycleId", "cycleName", "type", "month"], as_index=False)["amount"].sum()

    patterns = []
    for (cycle_id, cycle_name, expense_type), group in monthly.groupby(["cycleId", "cycleName", "type"]):
        months_with_meetings = int(active_months.get(cycle_id, 0))
        if not months_with_meetings:
            continue
        months = sorted(group["month"].unique())
        patterns.append({
            "cycleId": int(cycle_id),
            "cycleName": cycle_name,
            "type": expense_type,
            "avgAmount": float(group["amount"].mean()),
            "frequency": len(months) / months_with_meetings,
            "months": list(months),
        })
    patterns = [p for p in patterns if p["frequency"] > 0]
    patterns.sort(key=lambda p: p["avgAmount"] * p["frequency"], reverse=True)
    return patterns


def _project(meeting, settings, shares):
    try:
        projected = project_meeting_financials(meeting, settings)
    except ValidationError as error:
        logger.warning("Skipping meeting %s in forecast: %s", meeting.id, error.message)
        return None
    return {
        "meetingId": meeting.id,
        "cycleId": meeting.cycle_id,
        "month": month_key(meeting.scheduled_date),
        "revenue": float(projected.revenue),
        "instructorPayments": float(projected.instructor_payment),
        "cycleExpenses": shares.for_meeting(meeting),
        "meetingExpenses": meeting_expenses_total(meeting),
    }


def partial_month(as_of, settings, shares, profit_std):
    start = first_of_month(as_of)
    end = add_months(as_of, 1)
    completed = _meetings_between(start, end, MeetingStatus.COMPLETED.value)
    scheduled = _meetings_between(start, end, MeetingStatus.SCHEDULED.value)

    projected = [row for row in (_project(m, settings, shares) for m in scheduled) if row is not None]
    frame = pd.concat(
        [meeting_frame(completed, shares),
         pd.DataFrame(projected, columns=MEETING_COLUMNS).astype({c: "float64" for c in AMOUNT_COLUMNS})],
        ignore_index=True,
    )
    month = month_key(as_of)
    row = monthly_totals(frame, [month]).loc[month]
    return _month_record(
        month, row,
        isHistorical=False,
        isPartial=True,
        completedCount=len(completed),
        scheduledCount=len(scheduled),
        lowerBound=float(row["profit"]) - profit_std,
        upperBound=float(row["profit"]) + profit_std,
    )


def build_forecast(historical_months=DEFAULT_HISTORICAL_MONTHS, forecast_months=DEFAULT_FORECAST_MONTHS,
                   as_of=None, settings=None):
    as_of = as_of or date.today()
    settings = settings or FinanceSettings.current()
    shares = _ShareCache(settings)
    logger.info("Building forecast as of %s (%d historical, %d forecast months)",
                as_of, historical_months, forecast_months)

    history_start = add_months(as_of, -historical_months)
    history_end = first_of_month(as_of)
    months = month_keys(history_start, historical_months)

    completed = _meetings_between(history_start, history_end, MeetingStatus.COMPLETED.value)
    meetings_df = meeting_frame(completed, shares)
    history = monthly_totals(meetings_df, months)

    revenue_mean = float(history["revenue"].mean())
    expenses_mean = float(history["totalExpenses"].mean())
    profit_mean = float(history["profit"].mean())
    revenue_std = _sample_std(history["revenue"])
    expenses_std = _sample_std(history["totalExpenses"])
    profit_std = _sample_std(history["profit"])

    patterns = expense_patterns(meetings_df, expense_frame(completed))
    active_cycles = {
        cycle_id for (cycle_id,) in
        db.session.query(Cycle.id).filter(Cycle.status == CycleStatus.ACTIVE.value).all()
    }
    recurring_expenses = sum(p["avgAmount"] * p["frequency"] for p in patterns if p["cycleId"] in active_cycles)

    means = history[["revenue", "instructorPayments", "cycleExpenses", "meetingCount"]].mean()

    forecast = [partial_month(as_of, settings, shares, profit_std)]
    for month in month_keys(add_months(as_of, 1), forecast_months):
        total_expenses = float(means["instructorPayments"]) + float(means["cycleExpenses"]) + recurring_expenses
        profit = float(means["revenue"]) - total_expenses
        forecast.append({
            "month": month,
            "revenue": float(means["revenue"]),
            "instructorPayments": float(means["instructorPayments"]),
            "cycleExpenses": float(means["cycleExpenses"]),
            "meetingExpenses": recurring_expenses,
            "totalExpenses": total_expenses,
            "profit": profit,
            "meetingCount": round(float(means["meetingCount"])),
            "lowerBound": profit - profit_std,
            "upperBound": profit + profit_std,
            "isHistorical": False,
            "isPartial": False,
        })

    return {
        "historical": [_month_record(month, row, isHistorical=True) for month, row in history.iterrows()],
        "forecast": forecast,
        "patterns": patterns,
        "summary": {
            "avgMonthlyRevenue": round(revenue_mean),
            "avgMonthlyExpenses": round(expenses_mean),
            "avgMonthlyProfit": round(profit_mean),
            "revenueStdDev": round(revenue_std),
            "expensesStdDev": round(expenses_std),
            "profitStdDev": round(profit_std),
            "forecastConfidence": forecast_confidence(profit_mean, profit_std),
        },
    }


def build_cycle_forecast(cycle_id, forecast_months=DEFAULT_FORECAST_MONTHS,
                         historical_months=DEFAULT_HISTORICAL_MONTHS, as_of=None, settings=None):
    as_of = as_of or date.today()
    settings = settings or FinanceSettings.current()
    cycle = db.session.get(Cycle, cycle_id)
    if cycle is None:
        raise NotFoundError(f"Cycle {cycle_id} not found")
    shares = _ShareCache(settings)

    history = _meetings_between(add_months(as_of, -historical_months), first_of_month(as_of),
                                MeetingStatus.COMPLETED.value, cycle_id=cycle.id)
    expenses_df = expense_frame(history)
    avg_meeting_expenses = float(expenses_df["amount"].sum()) / len(history) if history else 0.0

    upcoming = _meetings_between(first_of_month(as_of), add_months(as_of, forecast_months),
                                 MeetingStatus.SCHEDULED.value, cycle_id=cycle.id)
    rows = []
    skipped = []
    for meeting in upcoming:
        projected = _project(meeting, settings, shares)
        if projected is None:
            skipped.append(meeting.id)
            continue
        estimated_expenses = avg_meeting_expenses + projected["cycleExpenses"]
        rows.append({
            "id": meeting.id,
            "date": meeting.scheduled_date.isoformat(),
            "month": projected["month"],
            "instructorId": meeting.instructor_id,
            "revenue": projected["revenue"],
            "instructorPayment": projected["instructorPayments"],
            "estimatedExpenses": estimated_expenses,
            "estimatedProfit": projected["revenue"] - projected["instructorPayments"] - estimated_expenses,
        })

    monthly = []
    if rows:
        frame = pd.DataFrame(rows)
        grouped = frame.groupby("month").agg(
            revenue=("revenue", "sum"),
            instructorPayments=("instructorPayment", "sum"),
            estimatedExpenses=("estimatedExpenses", "sum"),
            estimatedProfit=("estimatedProfit", "sum"),
            meetingCount=("id", "count"),
        )
        monthly = [{
            "month": month,
            "revenue": float(row["revenue"]),
            "instructorPayments": float(row["instructorPayments"]),
            "estimatedExpenses": float(row["estimatedExpenses"]),
            "estimatedProfit": float(row["estimatedProfit"]),
            "meetingCount": int(row["meetingCount"]),
        } for month, row in grouped.iterrows()]

    type_stats = []
    for expense_type, amounts in expenses_df.groupby("type")["amount"]:
        type_stats.append({
            "type": expense_type,
            "avgAmount": float(amounts.mean()),
            "stdDev": _sample_std(amounts),
            "occurrences": int(amounts.count()),
        })

    return {
        "cycle": {"id": cycle.id, "name": cycle.name, "status": cycle.status,
                  "instructorId": cycle.instructor_id},
        "meetings": [{k: v for k, v in row.items() if k != "month"} for row in rows],
        "skippedMeetings": skipped,
        "monthly": monthly,
        "expensePatterns": type_stats,
    }
