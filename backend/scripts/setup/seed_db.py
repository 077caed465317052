import os
import sys

# Add parent directory to path to allow importing from backend modules
sys.path.append(os.path.join(os.path.dirname(__file__), "..", ".."))

from sqlmodel import Session, select
from speedtype.core.database import engine, create_db_and_tables
from speedtype.core.security import get_password_hash
from speedtype.models.models import AttemptResult, Subscription, User
from speedtype.crud.crud import compute_aggregate

DEMO_PASSWORD = "demo-password"

# username, tier, list of (wpm, accuracy, time_taken, text_length)
DEMO_ACCOUNTS = [
    ("SpeedDemon", Subscription.TRAINER, [(120, 98, 41, 230), (112, 97, 44, 228)]),
    ("TypingMaster", Subscription.PRO, [(110, 96, 45, 236), (101, 95, 50, 240)]),
    ("KeyboardKing", Subscription.PRO, [(100, 95, 47, 215)]),
    ("FastFingers", Subscription.FREE, [(90, 93, 60, 201), (84, 92, 60, 178)]),
    ("TypeRacer", Subscription.FREE, [(85, 92, 58, 166)]),
]


def seed_data():
    """Seeds the database with demo accounts and their attempts.

    Skips seeding when any account already exists.
    """
    print("Creating tables...")
    create_db_and_tables()

    with Session(engine) as session:
        existing = session.exec(select(User)).first()
        if existing:
            print("Database already has data. Skipping seed.")
            return

        hashed = get_password_hash(DEMO_PASSWORD)
        for username, tier, attempts in DEMO_ACCOUNTS:
            user = User(
                username=username,
                email=f"{username.lower()}@example.com",
                hashed_password=hashed,
                subscription=tier,
            )
            session.add(user)
            session.flush()

            for sequence, (wpm, accuracy, time_taken, text_length) in enumerate(
                attempts, start=1
            ):
                session.add(
                    AttemptResult(
                        user_id=user.id,
                        sequence=sequence,
                        wpm=wpm,
                        accuracy=accuracy,
                        time_taken=time_taken,
                        text_length=text_length,
                    )
                )
            session.flush()

            user.best_wpm, user.average_accuracy, user.attempts_count = (
                compute_aggregate(session, user.id)
            )
            session.add(user)

        session.commit()
        print(f"Successfully inserted {len(DEMO_ACCOUNTS)} demo accounts.")


if __name__ == "__main__":
    seed_data()
