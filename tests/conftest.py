"""
Pytest configuration and fixtures for JanSetu tests.
"""

import base64

import cv2
import mongomock
import numpy as np
import pytest

from app import create_app
from config import TestingConfig
from flows import client as model_client
from models.ngo import NGO
from models.users import User
from utils.db import ensure_indexes, mongo

PASSWORD = "secret123"


@pytest.fixture
def app(tmp_path, monkeypatch):
    class Config(TestingConfig):
        UPLOAD_FOLDER = str(tmp_path / "uploads")

    app = create_app(Config)
    monkeypatch.setattr(mongo, "db", mongomock.MongoClient().db)
    with app.app_context():
        ensure_indexes()
        yield app


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def make_ngo(app):
    def _make(name="Seva Foundation", location="New Delhi"):
        return NGO(name, location).save().inserted_id
    return _make


@pytest.fixture
def make_user(app):
    def _make(role, ngo_id=None, email=None, name="Test User"):
        email = email or f"{role}@example.org"
        User(name, email, PASSWORD, role, ngo_id=ngo_id).save()
        return User.find_by_email(email)
    return _make


@pytest.fixture
def login(client):
    def _login(user):
        return client.post("/login", data={"email": user["email"], "password": PASSWORD})
    return _login


def jpeg_bytes(width=40, height=30, shade=127):
    ok, buffer = cv2.imencode(".jpg", np.full((height, width, 3), shade, dtype=np.uint8))
    assert ok
    return buffer.tobytes()


def png_bytes(width=40, height=30, shade=90):
    ok, buffer = cv2.imencode(".png", np.full((height, width, 3), shade, dtype=np.uint8))
    assert ok
    return buffer.tobytes()


@pytest.fixture
def photo_data_uri():
    return "data:image/jpeg;base64," + base64.b64encode(jpeg_bytes()).decode("ascii")


@pytest.fixture
def audio_data_uri():
    return "data:audio/wav;base64," + base64.b64encode(b"RIFF....WAVEfmt ").decode("ascii")


class FakeModel:
    """Stands in for flows.client.run_prompt and records every call."""

    def __init__(self):
        self.calls = []
        self.replies = {}

    def reply(self, output_model_name, **fields):
        self.replies[output_model_name] = fields

    def __call__(self, prompt, images, output_model, label="flow"):
        self.calls.append({"prompt": prompt, "images": images, "label": label})
        fields = self.replies.get(output_model.__name__)
        if fields is None:
            raise AssertionError(f"No fake reply configured for {output_model.__name__}")
        return output_model(**fields)


@pytest.fixture
def fake_model(monkeypatch):
    fake = FakeModel()
    monkeypatch.setattr(model_client, "run_prompt", fake)
    return fake


@pytest.fixture
def make_beneficiary(app):
    """Insert a beneficiary directly, optionally moving it out of Pending."""
    from models.beneficiary import Beneficiary, PENDING

    def _make(ngo_id, name="Asha Devi", status=PENDING, photo_url="https://picsum.photos/seed/asha/400/400",
              voice_profile_id=None, worker_id=None):
        doc = Beneficiary(
            ngo_id=ngo_id,
            name=name,
            description="A registered beneficiary used in tests.",
            photo_url=photo_url,
            location="New Delhi",
            age_range="30-40",
            gender="Female",
            registered_by="Test Worker",
            registration_worker_id=worker_id,
            voice_profile_id=voice_profile_id,
        ).save()
        if status != PENDING:
            doc = Beneficiary.set_status(ngo_id, doc["_id"], status)
        return doc
    return _make
