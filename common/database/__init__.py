"""
Database module - Generic async MongoDB connection using Beanie ODM.

Usage:
    from common.database import MongoDB

    db = MongoDB()
    await db.connect(uri, database_name, document_models=DOCUMENT_MODELS)
    users = db.get_collection("users")
"""

from common.database.mongodb import MongoDB

__all__ = ["MongoDB"]
