from flask_sqlalchemy import SQLAlchemy

db = SQLAlchemy()


def supports_row_locks():
    """SQLite ignores SELECT ... FOR UPDATE, PostgreSQL honours it."""
    return db.session.get_bind().dialect.name != "sqlite"
