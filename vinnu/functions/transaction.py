# Unit-of-work helper for changes that touch more than one record

import logging
from sqlalchemy.exc import IntegrityError
from vinnu.extensions import db

logger = logging.getLogger(__name__)


def run_in_transaction(operation, *args, retries=1, **kwargs):
    # Run operation and commit its changes as a single transaction.
    # A unique-constraint collision means a concurrent request wrote the same
    # edge first; the session is rolled back and the operation replays against
    # the fresh state, at most `retries` times.
    attempt = 0
    while True:
        try:
            result = operation(*args, **kwargs)
            db.session.commit()
            return result
        except IntegrityError:
            db.session.rollback()
            if attempt >= retries:
                raise
            attempt += 1
            logger.info(f"[TRANSACTION] {operation.__name__} collided with a concurrent write, replaying")
        except Exception:
            db.session.rollback()
            raise
