from sqlalchemy.exc import DBAPIError

UNDEFINED_TABLE = "42P01"


def is_undefined_table(exc: BaseException) -> bool:
    """True when a database error reports a missing relation (SQLSTATE 42P01)."""
    if not isinstance(exc, DBAPIError):
        return False
    orig = exc.orig
    # psycopg2 exposes pgcode, psycopg 3 exposes sqlstate
    code = getattr(orig, "pgcode", None) or getattr(orig, "sqlstate", None)
    return code == UNDEFINED_TABLE
