import logging

from django.db import connections, DatabaseError

logger = logging.getLogger(__name__)

GREETING = "Hello from the patient portal server! Your back-end is connected."


def probe_database(alias: str = 'default') -> tuple[bool, str | None]:
    """Run ``SELECT 1`` on ``alias``; return ``(ok, error message)``."""
    try:
        with connections[alias].cursor() as c:
            c.execute('SELECT 1')
            row = c.fetchone()
        return bool(row and row[0] == 1), None
    except DatabaseError as e:
        return False, str(e)


def log_database_status(alias: str = 'default') -> bool:
    """Log whether the database is reachable.  Never raises."""
    ok, error = probe_database(alias)
    if ok:
        logger.info("Successfully connected to database '%s' (%s).", alias, connections[alias].vendor)
    else:
        logger.error("Database connection error on '%s': %s. Continuing without it.", alias, error)
    return ok
