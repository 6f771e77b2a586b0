# Scripts/seed_demo.py
# Usage:
#   python -m Scripts.seed_demo            (from backend/)
#   python -m Scripts.seed_demo --season 2024-2025

import argparse

from app.core.roles import ROLE_COACH
from app.core.security import hash_password
from app.crud.crud_statistics import create_statistics
from app.db.init_db import init_db
from app.db.session import SessionLocal
from app.models.coach import Coach
from app.models.goalkeepers import Goalkeeper
from app.models.teams import Team

DEMO_PASSWORD = "demo1234"

# coach email -> team name -> [(first, last, counters)]
DEMO_ROSTERS = {
    "ana@example.com": {
        "CD Norte Senior": [
            ("Lucia", "Ferrer", dict(matches_played=20, minutes_played=1800, goals_conceded=18, clean_sheets=9, saves=71, penalties_saved=2, penalties_faced=5)),
            ("Marta", "Soler", dict(matches_played=8, minutes_played=690, goals_conceded=11, clean_sheets=2, saves=30, penalties_faced=1)),
        ],
        "CD Norte U17": [
            ("Irene", "Vidal", dict(matches_played=14, minutes_played=1120, goals_conceded=12, clean_sheets=6, saves=44, penalties_saved=1, penalties_faced=2, yellow_cards=1)),
            ("Nora", "Pons", dict(matches_played=3, minutes_played=270, goals_conceded=1, clean_sheets=2, saves=9)),
        ],
    },
    "bruno@example.com": {
        "Atletico Sur": [
            ("Pablo", "Rey", dict(matches_played=22, minutes_played=1980, goals_conceded=25, clean_sheets=7, saves=80, penalties_saved=3, penalties_faced=6, red_cards=1)),
        ],
    },
}


def run(season: str):
    init_db()
    db = SessionLocal()

    if db.query(Coach).count() > 0:
        print(f"Demo data already seeded. ({db.query(Coach).count()} coaches)")
        db.close()
        return

    records = 0
    for email, teams in DEMO_ROSTERS.items():
        coach = Coach(
            email=email,
            password_hash=hash_password(DEMO_PASSWORD),
            name=email.split("@")[0].title(),
            role=ROLE_COACH,
        )
        db.add(coach)
        db.flush()

        for team_name, keepers in teams.items():
            team = Team(coach_id=coach.id, name=team_name, is_active=True)
            db.add(team)
            db.flush()

            for number, (first, last, counters) in enumerate(keepers, start=1):
                gk = Goalkeeper(team_id=team.id, first_name=first, last_name=last, jersey_number=number)
                db.add(gk)
                db.commit()
                create_statistics(db, gk.id, season, counters)
                records += 1

    db.close()
    print(f"Seed DEMO OK ({len(DEMO_ROSTERS)} coaches, {records} statistics rows) for season {season}")
    print(f"Login with any demo email and password '{DEMO_PASSWORD}'")


def main():
    ap = argparse.ArgumentParser()
    ap.add_argument("--season", default="2024-2025", help='Season label, e.g. "2024-2025"')
    args = ap.parse_args()
    run(args.season)


if __name__ == "__main__":
    main()
