"""
Add a database-level overlap guard to the appointments table (PostgreSQL only)

Migration to add:
- btree_gist extension
- ex_appointments_no_overlap exclusion constraint: no two active
  appointments of the same owner may share any instant of [start, end)

The booking service maps a violation of this constraint to a 409 conflict.

Run with: python migrations/add_appointment_overlap_constraint.py
"""

import sys
from pathlib import Path

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from sqlalchemy import text

from agenda.database import engine

CONSTRAINT_NAME = "ex_appointments_no_overlap"


def upgrade():
    """Add the exclusion constraint"""
    if engine.dialect.name != "postgresql":
        print(f"ℹ️  {engine.dialect.name} does not support exclusion constraints, skipping")
        return

    with engine.connect() as conn:
        conn.execute(text("CREATE EXTENSION IF NOT EXISTS btree_gist"))

        # Check if the constraint already exists to make migration idempotent
        result = conn.execute(
            text("SELECT 1 FROM pg_constraint WHERE conname = :name"),
            {"name": CONSTRAINT_NAME},
        )
        if result.first():
            print(f"ℹ️  {CONSTRAINT_NAME} already exists")
        else:
            conn.execute(text(f"""
                ALTER TABLE appointments
                ADD CONSTRAINT {CONSTRAINT_NAME}
                EXCLUDE USING gist (
                    user_id WITH =,
                    tsrange(start_time, end_time, '[)') WITH &&
                )
                WHERE (status NOT IN ('CANCELLED', 'NO_SHOW'))
            """))
            print(f"✅ Added {CONSTRAINT_NAME}")

        conn.commit()
        print("\n✅ Migration completed successfully!")


def downgrade():
    """Remove the exclusion constraint"""
    with engine.connect() as conn:
        conn.execute(text(f"ALTER TABLE appointments DROP CONSTRAINT IF EXISTS {CONSTRAINT_NAME}"))
        conn.commit()
        print("✅ Migration rolled back successfully!")


if __name__ == "__main__":
    import argparse
    parser = argparse.ArgumentParser(description="Manage appointment overlap constraint migration")
    parser.add_argument("--down", action="store_true", help="Rollback the migration")
    args = parser.parse_args()

    if args.down:
        print("Rolling back migration...")
        downgrade()
    else:
        print("Running migration...")
        upgrade()
