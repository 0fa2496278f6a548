# pos_analytics/db/__init__.py
from .connection import Database, db, session_scope, get_session
from .interface import SalesDataSource, SQLAlchemySalesDataSource, InMemorySalesDataSource

def initialize(connection_string=None):
    """Initialize the database connection and create tables if needed."""
    db.initialize(connection_string)
    db.test_connection()
    db.create_all_tables()

__all__ = [
    'db',
    'initialize',
    'session_scope',
    'get_session',
    'Database',
    'SalesDataSource',
    'SQLAlchemySalesDataSource',
    'InMemorySalesDataSource'
]
