"""
Academic-year promotion for students.

Every run advances each student one step; there is no guard against running
it twice.
"""

import logging

from pymongo.database import Database

from database import USERS
from stores import store_errors

logger = logging.getLogger(__name__)

NEXT_YEAR = {
    "1": "2",
    "2": "3",
    "3": "4",
    "4": "Graduated",
}


def promote_all_students(database: Database) -> int:
    """Move every student to the next year. Returns the number of users changed."""
    coll = database[USERS]
    updated = 0
    with store_errors("promote students"):
        # highest year first, so nobody is moved twice in one run
        for current in sorted(NEXT_YEAR, reverse=True):
            res = coll.update_many(
                {"role": "student", "year": current},
                {"$set": {"year": NEXT_YEAR[current]}},
            )
            updated += res.modified_count
    logger.info("Promotion: %d students updated", updated)
    return updated
