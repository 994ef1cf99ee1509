#!/usr/bin/env python3
"""
Seed demo data for trying the dashboard locally.

Creates a staff user and one row per team per day for the last N days, with
a few deliberate edge cases:
  1. A team with no deposits at all (cost-per-deposit stays 0)
  2. A day with spend but zero inquiries
  3. A team that starts mid-period

Usage:
    python scripts/seed_demo_data.py                    # seed 30 days
    python scripts/seed_demo_data.py --days 60
    python scripts/seed_demo_data.py --clear            # wipe demo rows first

Requires: DATABASE_URL set (or defaults to sqlite:///local.db).
"""
import sys
import os
import random
import argparse
from datetime import date, timedelta

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from teamboard.database import get_session, engine, Base
from teamboard.models.activity_log import ActivityLog
from teamboard.models.daily_metric import DailyMetric
from teamboard.models.user import User
from teamboard.services.auth import create_user
from teamboard.services.metrics_store import upsert_daily_metric


# ── Demo teams: name → (daily spend USD, inquiries/day, deposit rate, value per deposit THB) ──

TEAMS = {
    'Lotto A':        (120.0, 220, 0.08, 1800.0),
    'Lotto B':        (95.0,  180, 0.07, 1500.0),
    'Baccarat':       (210.0, 140, 0.05, 4200.0),
    'Football Area':  (300.0, 160, 0.04, 5200.0),
    'Spezbar':        (60.0,  90,  0.0,  0.0),
}

LATE_STARTER = 'Football Area'


def _day_row(rng, spend_base, inquiries_base, deposit_rate, value_per_deposit):
    total = max(0, int(rng.gauss(inquiries_base, inquiries_base * 0.15)))
    wasted = int(total * rng.uniform(0.1, 0.3))
    deposits = int(total * deposit_rate * rng.uniform(0.7, 1.3))
    spend = round(max(0.0, rng.gauss(spend_base, spend_base * 0.1)), 2)
    return dict(
        planned_inquiries=inquiries_base,
        total_inquiries=total,
        wasted_inquiries=wasted,
        net_inquiries=total - wasted,
        planned_daily_spend=spend_base,
        actual_spend=spend,
        deposits_count=deposits,
        silent_inquiries=int(wasted * 0.3),
        repeat_inquiries=int(wasted * 0.2),
        existing_user_inquiries=int(wasted * 0.15),
        spam_inquiries=int(wasted * 0.1),
        blocked_inquiries=int(wasted * 0.1),
        under_18_inquiries=int(wasted * 0.05),
        over_50_inquiries=int(wasted * 0.05),
        foreigner_inquiries=int(wasted * 0.05),
        new_player_value_thb=round(deposits * value_per_deposit * rng.uniform(0.8, 1.2), 2),
    )


def seed_metrics(session, days, seed=42):
    rng = random.Random(seed)
    today = date.today()
    count = 0
    for offset in range(days, -1, -1):
        day = today - timedelta(days=offset)
        for team, params in TEAMS.items():
            if team == LATE_STARTER and offset > days // 2:
                continue
            counters = _day_row(rng, *params)
            if team == 'Lotto B' and offset == days // 3:
                counters['total_inquiries'] = 0
                counters['net_inquiries'] = 0
                counters['wasted_inquiries'] = 0
            upsert_daily_metric(session, team, day, **counters)
            count += 1
    session.commit()
    print(f"  ✓ {count} daily rows across {len(TEAMS)} teams")


def seed_user(session, username, password):
    if session.query(User).filter_by(username=username).first():
        print(f"  · user '{username}' already exists")
        return
    create_user(session, username, password)
    session.commit()
    print(f"  ✓ user '{username}'")


def clear_demo_data(session):
    deleted = session.query(DailyMetric).filter(DailyMetric.team_name.in_(list(TEAMS))).delete(
        synchronize_session=False)
    session.query(ActivityLog).delete(synchronize_session=False)
    session.commit()
    print(f"  ✓ cleared {deleted} daily rows")


def main():
    parser = argparse.ArgumentParser(description='Seed demo data for the team overview dashboard')
    parser.add_argument('--days', type=int, default=30, help='Number of past days to generate')
    parser.add_argument('--username', default='admin')
    parser.add_argument('--password', default='admin')
    parser.add_argument('--clear', action='store_true', help='Clear demo rows before seeding')
    args = parser.parse_args()

    # Ensure tables exist (for SQLite local dev)
    Base.metadata.create_all(engine)

    session = get_session()
    try:
        if args.clear:
            clear_demo_data(session)
        seed_user(session, args.username, args.password)
        seed_metrics(session, args.days)
    finally:
        session.close()


if __name__ == '__main__':
    main()
