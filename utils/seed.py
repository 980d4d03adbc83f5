"""
utils/seed.py
-----------------
`flask seed` - demo NGOs, one account per role and a handful of
beneficiaries in every status. Safe to re-run: existing emails and
JanSetu ids are skipped.
"""

from datetime import datetime

import click
from flask.cli import with_appcontext

from models.beneficiary import Beneficiary, APPROVED, PENDING, REJECTED
from models.ngo import NGO
from models.users import User

DEMO_PASSWORD = "jansetu123"

DEMO_NGOS = [
    {"name": "Seva Sahayog Foundation", "location": "New Delhi"},
    {"name": "Asha Kiran Trust", "location": "Mumbai"},
]

DEMO_BENEFICIARIES = [
    ("JS-8435A", "Asha Devi", "An elderly woman from a rural village, seeking support for her family.",
     "28.6139° N, 77.2090° E", "60-70", "Female", datetime(2023, 10, 26, 10, 0), APPROVED),
    ("JS-91B24", "Ramesh Singh", "A young man with a disability, looking for skill development opportunities.",
     "19.0760° N, 72.8777° E", "20-30", "Male", datetime(2023, 11, 15, 14, 30), PENDING),
    ("JS-C72D9", "Sunita Kumari", "A single mother of two, in need of nutritional support for her children.",
     "12.9716° N, 77.5946° E", "30-40", "Female", datetime(2023, 11, 20, 9, 15), PENDING),
    ("JS-3E8F1", "Amit Patel", "A farmer who lost his crops due to recent floods, seeking immediate aid.",
     "23.0225° N, 72.5714° E", "40-50", "Male", datetime(2023, 12, 1, 11, 0), APPROVED),
    ("JS-F4A02", "Geeta Yadav", "A student from an underprivileged background, requiring educational materials.",
     "25.3176° N, 82.9739° E", "10-20", "Female", datetime(2024, 1, 5, 16, 45), REJECTED),
]


def _ensure_user(name, email, role, ngo_id=None):
    user = User.find_by_email(email)
    if user:
        return user
    User(name, email, DEMO_PASSWORD, role, ngo_id=ngo_id).save()
    return User.find_by_email(email)


def seed_demo_data():
    """Insert the demo data set; returns the number of beneficiaries created."""
    ngo_ids = []
    for ngo in DEMO_NGOS:
        existing = NGO.collection().find_one({"name": ngo["name"]})
        ngo_ids.append(existing["_id"] if existing else NGO(**ngo).save().inserted_id)

    primary = ngo_ids[0]
    worker = _ensure_user("Ravi Kumar", "ravi@jansetu.org", "ngo", primary)
    _ensure_user("Priya Sharma", "priya@jansetu.org", "ngo", primary)
    _ensure_user("Meena Iyer", "supervisor@jansetu.org", "supervisor", primary)
    _ensure_user("Local Ration Shop", "vendor@jansetu.org", "vendor")

    created = 0
    for jansetu_id, name, description, location, age_range, gender, registered_at, status in DEMO_BENEFICIARIES:
        if Beneficiary.find_by_jansetu_id(jansetu_id):
            continue
        doc = Beneficiary(
            ngo_id=primary,
            jansetu_id=jansetu_id,
            name=name,
            description=description,
            photo_url=f"https://picsum.photos/seed/{jansetu_id}/400/400",
            location=location,
            age_range=age_range,
            gender=gender,
            registered_by=worker["name"],
            registration_worker_id=worker["_id"],
            registered_at=registered_at,
        ).save()
        if status != PENDING:
            Beneficiary.set_status(primary, doc["_id"], status)
        created += 1
    return created


@click.command("seed")
@with_appcontext
def seed_command():
    """Load demo NGOs, users and beneficiaries."""
    created = seed_demo_data()
    click.echo(f"Seeded {created} beneficiaries. Demo password: {DEMO_PASSWORD}")
