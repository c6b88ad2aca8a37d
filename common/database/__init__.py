"""
Database module - Generic async MongoDB connection using Beanie ODM.

Usage:
    from common.database import MongoDB

    db = MongoDB()
    await db.connect(uri, database_name, models)

    readings = db.db["devotionalReadings"]
"""

from common.database.mongodb import MongoDB

__all__ = [
    "MongoDB",
]
