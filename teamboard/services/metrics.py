"""
Metrics aggregation: folds daily team rows into per-team summaries.

Summary ratios are computed from period totals. Daily cost ratios are per day;
the daily value-per-spend series is cumulative to date, so its last point
always equals the summary value_per_spend. Any ratio with a zero denominator
is 0.
"""
from dataclasses import dataclass, field, fields
from datetime import date
from typing import Dict, Iterable, List, Union

from teamboard.config import COUNTER_FIELDS
from teamboard.services.exchange_rate import ConversionRate

SERIES_NAMES = [
    'cost_per_inquiry_daily',
    'cost_per_deposit_daily',
    'deposits_count_daily',
    'value_per_spend_daily',
]


@dataclass(frozen=True)
class RawMetricRow:
    team_name: str
    record_date: date
    planned_inquiries: int = 0
    total_inquiries: int = 0
    wasted_inquiries: int = 0
    net_inquiries: int = 0
    planned_daily_spend: float = 0.0
    actual_spend: float = 0.0
    deposits_count: int = 0
    silent_inquiries: int = 0
    repeat_inquiries: int = 0
    existing_user_inquiries: int = 0
    spam_inquiries: int = 0
    blocked_inquiries: int = 0
    under_18_inquiries: int = 0
    over_50_inquiries: int = 0
    foreigner_inquiries: int = 0
    new_player_value_thb: float = 0.0


@dataclass
class DailySeriesPoint:
    date: date
    value: float

    def to_dict(self):
        return {'date': self.date.isoformat(), 'value': self.value}


@dataclass
class TeamSummary:
    team_name: str
    planned_inquiries: int = 0
    total_inquiries: int = 0
    wasted_inquiries: int = 0
    net_inquiries: int = 0
    planned_daily_spend: float = 0.0
    actual_spend: float = 0.0
    deposits_count: int = 0
    silent_inquiries: int = 0
    repeat_inquiries: int = 0
    existing_user_inquiries: int = 0
    spam_inquiries: int = 0
    blocked_inquiries: int = 0
    under_18_inquiries: int = 0
    over_50_inquiries: int = 0
    foreigner_inquiries: int = 0
    new_player_value_thb: float = 0.0
    cost_per_inquiry: float = 0.0
    cost_per_deposit: float = 0.0
    inquiries_per_deposit: float = 0.0
    net_inquiries_per_deposit: float = 0.0
    value_per_spend: float = 0.0
    cost_per_inquiry_daily: List[DailySeriesPoint] = field(default_factory=list)
    cost_per_deposit_daily: List[DailySeriesPoint] = field(default_factory=list)
    deposits_count_daily: List[DailySeriesPoint] = field(default_factory=list)
    value_per_spend_daily: List[DailySeriesPoint] = field(default_factory=list)

    def to_dict(self):
        data = {}
        for f in fields(self):
            value = getattr(self, f.name)
            if f.name in SERIES_NAMES:
                value = [point.to_dict() for point in value]
            data[f.name] = value
        return data


def safe_div(numerator, denominator) -> float:
    """numerator / denominator, or 0 when the denominator is 0."""
    if not denominator:
        return 0.0
    return numerator / denominator


def aggregate(rows: Iterable[RawMetricRow], rate: Union[ConversionRate, float]) -> List[TeamSummary]:
    """
    Build one TeamSummary per team from raw daily rows.

    rate is the resolved ConversionRate (or its bare THB-per-USD number).

    Teams come out in first-seen order of the input; each daily series is
    ascending by date whatever the input order. Counters are not validated,
    negative values are summed like any other.
    """
    if isinstance(rate, ConversionRate):
        rate = rate.rate
    rows = list(rows)
    teams: Dict[str, TeamSummary] = {}
    for row in rows:
        if row.team_name not in teams:
            teams[row.team_name] = TeamSummary(team_name=row.team_name)

    cumulative_spend = {name: 0.0 for name in teams}
    cumulative_value = {name: 0.0 for name in teams}

    for row in sorted(rows, key=lambda r: r.record_date):
        team = teams[row.team_name]
        for name in COUNTER_FIELDS:
            setattr(team, name, getattr(team, name) + getattr(row, name))

        spend = row.actual_spend
        team.cost_per_inquiry_daily.append(
            DailySeriesPoint(row.record_date, safe_div(spend, row.total_inquiries)))
        team.cost_per_deposit_daily.append(
            DailySeriesPoint(row.record_date, safe_div(spend, row.deposits_count)))
        team.deposits_count_daily.append(
            DailySeriesPoint(row.record_date, row.deposits_count))

        cumulative_spend[row.team_name] += spend
        cumulative_value[row.team_name] += row.new_player_value_thb
        team.value_per_spend_daily.append(DailySeriesPoint(
            row.record_date,
            value_per_spend(cumulative_value[row.team_name], cumulative_spend[row.team_name], rate),
        ))

    for team in teams.values():
        team.cost_per_inquiry = safe_div(team.actual_spend, team.total_inquiries)
        team.cost_per_deposit = safe_div(team.actual_spend, team.deposits_count)
        team.inquiries_per_deposit = safe_div(team.total_inquiries, team.deposits_count)
        team.net_inquiries_per_deposit = safe_div(team.net_inquiries, team.deposits_count)
        team.value_per_spend = value_per_spend(team.new_player_value_thb, team.actual_spend, rate)

    return list(teams.values())


def value_per_spend(value, spend, rate) -> float:
    """Local-currency value per unit of USD spend ("1$/Cover")."""
    if not spend or rate <= 0:
        return 0.0
    return (value / spend) / rate


def pivot_series(summaries: List[TeamSummary], series_name: str) -> List[dict]:
    """
    Reshape one daily series across teams into chart rows:
    [{'date': '2025-08-01', 'Team A': 0.5, 'Team B': 0.7}, ...] sorted by date.

    A team with several rows on one date keeps its last value for that date.
    """
    if series_name not in SERIES_NAMES:
        raise ValueError(f'Unknown series: {series_name}')

    by_date: Dict[date, dict] = {}
    for team in summaries:
        for point in getattr(team, series_name):
            entry = by_date.setdefault(point.date, {'date': point.date.isoformat()})
            entry[team.team_name] = point.value
    return [by_date[d] for d in sorted(by_date)]
