"""
Tests for the verification flows.
"""

import re

import pytest
from pydantic import ValidationError

from flows import (
    create_voice_profile,
    find_beneficiary_by_face,
    generate_beneficiary_description,
    identify_speaker,
    verify_beneficiary_face,
    verify_face,
)

PHOTO_A = "https://example.org/photos/a.jpg"
PHOTO_B = "https://example.org/photos/b.jpg"


class TestVerifyFace:

    def test_empty_existing_photos_is_not_duplicate(self, fake_model, photo_data_uri):
        result = verify_face({"photo_data_uri": photo_data_uri, "existing_photos": []})
        assert result.is_duplicate is False
        assert "No existing photos" in result.reason
        assert fake_model.calls == []

    def test_missing_existing_photos_defaults_to_empty(self, fake_model, photo_data_uri):
        result = verify_face({"photo_data_uri": photo_data_uri})
        assert result.is_duplicate is False
        assert fake_model.calls == []

    def test_forwards_every_photo_to_model(self, fake_model, photo_data_uri):
        fake_model.reply("VerifyFaceOutput", is_duplicate=True, reason="Matches existing photo 2")
        result = verify_face({"photo_data_uri": photo_data_uri,
                              "existing_photos": [PHOTO_A, PHOTO_B]})
        assert result.is_duplicate is True
        assert len(fake_model.calls) == 1
        refs = [ref for _, ref in fake_model.calls[0]["images"]]
        assert refs == [photo_data_uri, PHOTO_A, PHOTO_B]

    def test_missing_stored_photos_are_skipped(self, app, fake_model, photo_data_uri):
        fake_model.reply("VerifyFaceOutput", is_duplicate=False, reason="New person")
        verify_face({"photo_data_uri": photo_data_uri, "existing_photos": ["JS-GONE1.jpg", PHOTO_A]})
        refs = [ref for _, ref in fake_model.calls[0]["images"]]
        assert refs == [photo_data_uri, PHOTO_A]

    def test_only_missing_photos_is_not_duplicate(self, app, fake_model, photo_data_uri):
        result = verify_face({"photo_data_uri": photo_data_uri, "existing_photos": ["JS-GONE1.jpg"]})
        assert result.is_duplicate is False
        assert "No existing photos" in result.reason
        assert fake_model.calls == []

    def test_rejects_non_data_uri_photo(self, fake_model):
        with pytest.raises(ValidationError):
            verify_face({"photo_data_uri": "not-a-data-uri", "existing_photos": [PHOTO_A]})
        assert fake_model.calls == []


class TestVerifyBeneficiaryFace:

    def test_returns_model_decision(self, fake_model, photo_data_uri):
        fake_model.reply("VerifyBeneficiaryFaceOutput", is_match=False,
                         reason="The faces do not appear to be the same person.")
        result = verify_beneficiary_face({"live_photo_data_uri": photo_data_uri,
                                          "registered_photo_url": PHOTO_A})
        assert result.is_match is False
        captions = [caption for caption, _ in fake_model.calls[0]["images"]]
        assert captions == ["Live Photo:", "Registered Photo:"]

    def test_requires_registered_photo(self, fake_model, photo_data_uri):
        with pytest.raises(ValidationError):
            verify_beneficiary_face({"live_photo_data_uri": photo_data_uri, "registered_photo_url": ""})


class TestFindBeneficiaryByFace:

    def test_empty_candidates_short_circuit(self, fake_model, photo_data_uri):
        result = find_beneficiary_by_face({"live_photo_data_uri": photo_data_uri,
                                           "approved_beneficiaries": []})
        assert result.is_match is False
        assert result.beneficiary_id is None
        assert fake_model.calls == []

    def test_match_returns_candidate_id(self, fake_model, photo_data_uri):
        fake_model.reply("FindBeneficiaryByFaceOutput", is_match=True,
                         beneficiary_id="JS-3E8F1", reason="Match found for beneficiary JS-3E8F1")
        result = find_beneficiary_by_face({
            "live_photo_data_uri": photo_data_uri,
            "approved_beneficiaries": [{"id": "JS-8435A", "photo_url": PHOTO_A},
                                       {"id": "JS-3E8F1", "photo_url": PHOTO_B}],
        })
        assert result.is_match is True
        assert result.beneficiary_id == "JS-3E8F1"

    def test_candidates_without_photo_file_are_skipped(self, app, fake_model, photo_data_uri):
        fake_model.reply("FindBeneficiaryByFaceOutput", is_match=True,
                         beneficiary_id="JS-GONE1", reason="Match")
        result = find_beneficiary_by_face({
            "live_photo_data_uri": photo_data_uri,
            "approved_beneficiaries": [{"id": "JS-GONE1", "photo_url": "JS-GONE1.jpg"},
                                       {"id": "JS-8435A", "photo_url": PHOTO_A}],
        })
        captions = [caption for caption, _ in fake_model.calls[0]["images"]]
        assert captions == ["Live Photo:", "Approved Beneficiary ID: JS-8435A"]
        assert result.is_match is False

    def test_only_missing_photos_short_circuit(self, app, fake_model, photo_data_uri):
        result = find_beneficiary_by_face({
            "live_photo_data_uri": photo_data_uri,
            "approved_beneficiaries": [{"id": "JS-GONE1", "photo_url": "JS-GONE1.jpg"}],
        })
        assert result.is_match is False
        assert fake_model.calls == []

    def test_unknown_id_from_model_is_no_match(self, fake_model, photo_data_uri):
        fake_model.reply("FindBeneficiaryByFaceOutput", is_match=True,
                         beneficiary_id="JS-99999", reason="Match")
        result = find_beneficiary_by_face({
            "live_photo_data_uri": photo_data_uri,
            "approved_beneficiaries": [{"id": "JS-8435A", "photo_url": PHOTO_A}],
        })
        assert result.is_match is False
        assert result.beneficiary_id is None

    def test_no_match_drops_beneficiary_id(self, fake_model, photo_data_uri):
        fake_model.reply("FindBeneficiaryByFaceOutput", is_match=False,
                         beneficiary_id="JS-8435A", reason="No matching beneficiary found.")
        result = find_beneficiary_by_face({
            "live_photo_data_uri": photo_data_uri,
            "approved_beneficiaries": [{"id": "JS-8435A", "photo_url": PHOTO_A}],
        })
        assert result.is_match is False
        assert result.beneficiary_id is None


class TestGenerateDescription:

    def test_prompt_includes_details(self, fake_model, photo_data_uri):
        fake_model.reply("GenerateDescriptionOutput", description="An elderly woman in a red sari.")
        result = generate_beneficiary_description({
            "photo_data_uri": photo_data_uri,
            "location": "28.6139° N, 77.2090° E",
            "age_range": "60-70",
            "gender": "Female",
        })
        assert result.description == "An elderly woman in a red sari."
        prompt = fake_model.calls[0]["prompt"]
        assert "60-70" in prompt and "Female" in prompt and "28.6139" in prompt


class TestVoiceFlows:

    def test_voice_profile_id_format(self, audio_data_uri):
        result = create_voice_profile({"audio_data_uri": audio_data_uri})
        assert re.fullmatch(r"vp_[0-9a-z]{9}", result.voice_profile_id)
        assert result.reason == "Mock voice profile created successfully."

    def test_voice_profile_ids_differ(self, audio_data_uri):
        first = create_voice_profile({"audio_data_uri": audio_data_uri})
        second = create_voice_profile({"audio_data_uri": audio_data_uri})
        assert first.voice_profile_id != second.voice_profile_id

    def test_identify_speaker_empty_candidates(self, audio_data_uri):
        result = identify_speaker({"audio_data_uri": audio_data_uri, "candidate_profile_ids": []})
        assert result.is_match is False
        assert result.voice_profile_id is None

    def test_identify_speaker_picks_first_candidate(self, audio_data_uri):
        result = identify_speaker({"audio_data_uri": audio_data_uri,
                                   "candidate_profile_ids": ["vp_first0000", "vp_second000"]})
        assert result.is_match is True
        assert result.voice_profile_id == "vp_first0000"
        assert "vp_first0000" in result.reason

    def test_identify_speaker_requires_data_uri(self):
        with pytest.raises(ValidationError):
            identify_speaker({"audio_data_uri": "blob:http://x", "candidate_profile_ids": ["vp_a"]})
