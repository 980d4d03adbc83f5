import logging
import secrets
from datetime import datetime

from pymongo.errors import DuplicateKeyError

from utils.db import mongo, to_object_id
from utils.errors import InvalidTransitionError, JanSetuError, NotFoundError

logger = logging.getLogger(__name__)

PENDING = "Pending"
APPROVED = "Approved"
REJECTED = "Rejected"
STATUSES = (PENDING, APPROVED, REJECTED)

# Pending is the only state a supervisor can decide on
TRANSITIONS = {
    PENDING: (APPROVED, REJECTED),
    APPROVED: (),
    REJECTED: (),
}

GENDERS = ("Male", "Female", "Other")
AGE_RANGES = ("0-10", "10-20", "20-30", "30-40", "40-50", "50-60", "60-70", "70+")

JANSETU_PREFIX = "JS-"
ID_ATTEMPTS = 5


def generate_jansetu_id():
    """Human-readable id, e.g. JS-8435A."""
    return JANSETU_PREFIX + secrets.token_hex(3).upper()[:5]


class Beneficiary:

    @staticmethod
    def collection():
        return mongo.db.beneficiaries

    def __init__(self, ngo_id, name, description, photo_url, location, age_range,
                 gender, registered_by, registration_worker_id, voice_profile_id=None,
                 jansetu_id=None, registered_at=None):
        self.ngo_id = to_object_id(ngo_id)
        self.jansetu_id = jansetu_id
        self.name = name
        self.description = description
        self.photo_url = photo_url
        self.location = location
        self.age_range = age_range
        self.gender = gender
        self.registered_by = registered_by
        self.registration_worker_id = to_object_id(registration_worker_id)
        self.registered_at = registered_at or datetime.utcnow()
        self.status = PENDING
        self.voice_profile_id = voice_profile_id

    def to_dict(self):
        return {
            "ngo_id": self.ngo_id,
            "jansetu_id": self.jansetu_id,
            "name": self.name,
            "description": self.description,
            "photo_url": self.photo_url,
            "location": self.location,
            "age_range": self.age_range,
            "gender": self.gender,
            "registered_by": self.registered_by,
            "registration_worker_id": self.registration_worker_id,
            "registered_at": self.registered_at,
            "status": self.status,
            "voice_profile_id": self.voice_profile_id,
        }

    def save(self):
        """Insert as a Pending registration and return the stored document."""
        if self.ngo_id is None:
            raise NotFoundError("A beneficiary must belong to an NGO.")
        preset_id = bool(self.jansetu_id)
        for _ in range(ID_ATTEMPTS):
            if not self.jansetu_id:
                self.jansetu_id = Beneficiary.new_jansetu_id()
            doc = self.to_dict()
            try:
                result = self.collection().insert_one(doc)
            except DuplicateKeyError:
                # Lost a race for a generated id; draw another one
                if preset_id:
                    raise
                logger.warning("JanSetu id %s taken concurrently, retrying", self.jansetu_id)
                self.jansetu_id = None
                continue
            doc["_id"] = result.inserted_id
            logger.info("Registered beneficiary %s in NGO %s", self.jansetu_id, self.ngo_id)
            return doc
        raise JanSetuError("Could not allocate a unique JanSetu id, please try again.")

    @staticmethod
    def attach_photo(beneficiary_id, photo_url):
        Beneficiary.collection().update_one({"_id": to_object_id(beneficiary_id)},
                                            {"$set": {"photo_url": photo_url}})

    @staticmethod
    def discard(beneficiary_id):
        """Undo an insert whose registration could not be completed."""
        Beneficiary.collection().delete_one({"_id": to_object_id(beneficiary_id)})

    @staticmethod
    def new_jansetu_id():
        while True:
            candidate = generate_jansetu_id()
            if not Beneficiary.collection().find_one({"jansetu_id": candidate}, {"_id": 1}):
                return candidate

    # ----------------------------
    # Lookups
    # ----------------------------
    @staticmethod
    def find(ngo_id, beneficiary_id):
        ngo_oid, oid = to_object_id(ngo_id), to_object_id(beneficiary_id)
        if ngo_oid is None or oid is None:
            return None
        return Beneficiary.collection().find_one({"_id": oid, "ngo_id": ngo_oid})

    @staticmethod
    def find_by_jansetu_id(jansetu_id):
        if not jansetu_id:
            return None
        return Beneficiary.collection().find_one({"jansetu_id": jansetu_id.strip().upper()})

    @staticmethod
    def for_ngo(ngo_id, status=None):
        query = {"ngo_id": to_object_id(ngo_id)}
        if status:
            query["status"] = status
        return list(Beneficiary.collection().find(query).sort("registered_at", -1))

    @staticmethod
    def for_worker(ngo_id, worker_id):
        return list(Beneficiary.collection().find({
            "ngo_id": to_object_id(ngo_id),
            "registration_worker_id": to_object_id(worker_id),
        }).sort("registered_at", -1))

    @staticmethod
    def pending_for_ngo(ngo_id):
        return Beneficiary.for_ngo(ngo_id, status=PENDING)

    @staticmethod
    def approved():
        """Every Approved beneficiary across all NGOs (the vendor-visible registry)."""
        return list(Beneficiary.collection().find({"status": APPROVED}))

    @staticmethod
    def photos_for_ngo(ngo_id):
        cursor = Beneficiary.collection().find(
            {"ngo_id": to_object_id(ngo_id), "photo_url": {"$nin": [None, ""]}},
            {"photo_url": 1},
        )
        return [doc["photo_url"] for doc in cursor]

    @staticmethod
    def worker_stats(ngo_id, worker_id):
        registrations = Beneficiary.for_worker(ngo_id, worker_id)
        return {
            "my_registrations": len(registrations),
            "pending_approval": sum(1 for b in registrations if b["status"] == PENDING),
            "total_approved": sum(1 for b in registrations if b["status"] == APPROVED),
        }

    # ----------------------------
    # Status changes
    # ----------------------------
    @staticmethod
    def set_status(ngo_id, beneficiary_id, new_status, reviewed_by=None):
        """Move a Pending beneficiary to Approved or Rejected.

        The update is conditional on the stored status still being Pending,
        so a decided beneficiary can never be decided again.
        """
        if new_status not in TRANSITIONS[PENDING]:
            raise InvalidTransitionError(f"Cannot move a beneficiary to '{new_status}'.")

        ngo_oid, oid = to_object_id(ngo_id), to_object_id(beneficiary_id)
        if ngo_oid is None or oid is None:
            raise NotFoundError("Beneficiary not found.")

        result = Beneficiary.collection().update_one(
            {"_id": oid, "ngo_id": ngo_oid, "status": PENDING},
            {"$set": {
                "status": new_status,
                "reviewed_by": to_object_id(reviewed_by) if reviewed_by else None,
                "reviewed_at": datetime.utcnow(),
            }}
        )
        if result.modified_count == 0:
            existing = Beneficiary.find(ngo_oid, oid)
            if not existing:
                raise NotFoundError("Beneficiary not found.")
            raise InvalidTransitionError(
                f"Beneficiary {existing.get('jansetu_id')} is already {existing['status']}."
            )

        logger.info("Beneficiary %s -> %s", beneficiary_id, new_status)
        return Beneficiary.find(ngo_oid, oid)
