from utils.db import mongo, to_object_id
from datetime import datetime


class NGO:

    @staticmethod
    def collection():
        return mongo.db.ngos

    def __init__(self, name, location=None, created_at=None):
        self.name = name
        self.location = location
        self.created_at = created_at or datetime.utcnow()

    def to_dict(self):
        return {
            "name": self.name,
            "location": self.location,
            "created_at": self.created_at,
        }

    def save(self):
        return self.collection().insert_one(self.to_dict())

    @staticmethod
    def find_by_id(ngo_id):
        oid = to_object_id(ngo_id)
        if oid is None:
            return None
        return NGO.collection().find_one({"_id": oid})

    @staticmethod
    def all():
        return list(NGO.collection().find().sort("name", 1))
