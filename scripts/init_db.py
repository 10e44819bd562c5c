from __future__ import annotations

from sqlalchemy import text
from sqlalchemy.exc import ProgrammingError

from petsit.db.base import Base
from petsit.db.session import engine

# Import models to register with SQLAlchemy
import petsit.models  # noqa: F401


def main() -> int:
    # Extensions needed for exclusion constraints (overlap prevention)
    with engine.begin() as conn:
        conn.execute(text("CREATE EXTENSION IF NOT EXISTS btree_gist"))

    Base.metadata.create_all(bind=engine)

    # Two accepted bookings of one sitter may never share a day
    try:
        with engine.begin() as conn:
            conn.execute(
                text(
                    """
                    ALTER TABLE bookings
                    ADD CONSTRAINT bookings_no_accepted_overlap
                    EXCLUDE USING gist (
                        sitter_id WITH =,
                        daterange(start_date, end_date, '[]') WITH &&
                    )
                    WHERE (status = 'accepted');
                    """
                )
            )
    except ProgrammingError:
        print("bookings_no_accepted_overlap already exists")

    print("DB initialized")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
