"""
utils/db.py
-----------------
This module initializes and manages the MongoDB connection
for the entire Flask application.
"""

from bson import ObjectId
from bson.errors import InvalidId
from flask_pymongo import PyMongo

# Create a global MongoDB instance
mongo = PyMongo()


def init_db_connection(app):
    """
    Initialize MongoDB connection with Flask app.
    Expects MONGO_URI to already be in app.config.
    """
    mongo.init_app(app)
    app.logger.info("MongoDB connection initialized for %s", app.config.get("MONGO_URI"))
    if app.config.get("MONGO_CREATE_INDEXES"):
        with app.app_context():
            ensure_indexes()
    return mongo


def ensure_indexes():
    """Unique keys the models rely on. Safe to call repeatedly."""
    mongo.db.users.create_index("email", unique=True)
    mongo.db.beneficiaries.create_index("jansetu_id", unique=True)
    mongo.db.beneficiaries.create_index([("ngo_id", 1), ("status", 1)])


# Collections (shortcuts)
users_col = lambda: mongo.db.users
ngos_col = lambda: mongo.db.ngos
beneficiaries_col = lambda: mongo.db.beneficiaries


def to_object_id(value):
    """ObjectId for a route/form value, or None when it is not a valid id."""
    if isinstance(value, ObjectId):
        return value
    if not value:
        return None
    try:
        return ObjectId(value)
    except (InvalidId, TypeError):
        return None
