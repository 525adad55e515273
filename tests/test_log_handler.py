import logging

from wordquest.database import get_db_connection, init_db
from wordquest.log_handler import SQLiteHandler


def test_sqlite_handler_writes_records(tmp_path):
    db_path = str(tmp_path / "db" / "logs.db")
    init_db(db_path)

    logger = logging.getLogger("wordquest.test_sqlite_handler")
    logger.propagate = False
    handler = SQLiteHandler(db_path)
    handler.setFormatter(logging.Formatter("%(message)s"))
    logger.addHandler(handler)
    try:
        logger.warning("not enough words")
    finally:
        logger.removeHandler(handler)

    conn = get_db_connection(db_path)
    rows = conn.execute("SELECT logger, level, message FROM logs").fetchall()
    conn.close()

    assert [tuple(r) for r in rows] == [
        ("wordquest.test_sqlite_handler", "WARNING", "not enough words")
    ]
