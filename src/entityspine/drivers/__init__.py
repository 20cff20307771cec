"""Store drivers -- :class:`~entityspine.protocols.StoreDriver` implementations.

Architecture::

    StoreDriver (protocols.py)       execute / query / quote
        |-- SqliteDriver             stdlib sqlite3
        |-- SQLAlchemyDriver         any SQLAlchemy Connection

Modules
-------
sqlite          SQLite driver (stdlib, always available)
sqlalchemy      SQLAlchemy driver (engine URL or existing Connection)

Tags:
    entityspine, drivers, sqlite, sqlalchemy
"""

from entityspine.drivers.sqlalchemy import SQLAlchemyDriver
from entityspine.drivers.sqlite import SqliteDriver

__all__ = ["SqliteDriver", "SQLAlchemyDriver"]
