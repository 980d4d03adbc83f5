from utils.db import mongo, to_object_id
from datetime import datetime
from werkzeug.security import generate_password_hash, check_password_hash

ROLES = ("ngo", "supervisor", "vendor")


class User:

    @staticmethod
    def collection():
        return mongo.db.users

    def __init__(self, name, email, password, role, ngo_id=None, created_at=None):
        if role not in ROLES:
            raise ValueError(f"Unknown role: {role}")
        self.name = name
        self.email = email.strip().lower()
        self.password = generate_password_hash(password)
        self.role = role
        # Vendors are not tied to an NGO
        self.ngo_id = to_object_id(ngo_id) if ngo_id else None
        self.created_at = created_at or datetime.utcnow()

    # Convert to dictionary for MongoDB
    def to_dict(self):
        return {
            "name": self.name,
            "email": self.email,
            "password": self.password,
            "role": self.role,
            "ngo_id": self.ngo_id,
            "created_at": self.created_at,
        }

    # Save new user
    def save(self):
        return self.collection().insert_one(self.to_dict())

    # Find user by ID
    @staticmethod
    def find_by_id(user_id):
        oid = to_object_id(user_id)
        if oid is None:
            return None
        return User.collection().find_one({"_id": oid})

    # Find user by email
    @staticmethod
    def find_by_email(email):
        if not email:
            return None
        return User.collection().find_one({"email": email.strip().lower()})

    # Verify password
    @staticmethod
    def verify_password(email, password):
        user = User.find_by_email(email)
        if user and check_password_hash(user["password"], password or ""):
            return user
        return None
