"""
tests/test_pipeline.py
=======================
Pipeline, API and Settings Tests - VoiceBase Connect Gateway

Tests verify:
    1. Deployment settings parsing and defaults
    2. forward_contact orchestration (client mocked)
    3. HTTP endpoints and their failure mapping

All tests are OFFLINE - no processing API calls.
"""

import os
import sys
import unittest
from unittest.mock import MagicMock, patch

# Ensure project root is on sys.path
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

from fastapi.testclient import TestClient

from src.api.forward import app
from src.attributes.contact import ContactRecordError
from src.client.errors import ApiError, ErrorResponse
from src.client.voicebase_client import VoiceBaseClient
from src.config import (
    DEFAULT_API_URL,
    FeatureToggles,
    Settings,
    get_list_setting,
    load_settings,
)
from src.pipeline import forward_contact, preview_request
from src.request.callbacks import callback_descriptor_from_settings


# ===================================================================
# Test fixtures
# ===================================================================

def _record():
    return {
        "ContactId": "contact-42",
        "Recording": {"Location": "https://media.example.com/contact-42.wav"},
        "Attributes": {
            "voicebase.priority": "HIGH",
            "voicebase.pciredact": "true",
            "voicebase.detectors": "Silence",
        },
    }


def _settings():
    return Settings(token="secret", toggles=FeatureToggles())


def _mock_client(body=None, error=None):
    client = MagicMock(spec=VoiceBaseClient)
    if error is not None:
        client.submit.side_effect = error
    else:
        client.submit.return_value = body or {"mediaId": "m-42", "status": "accepted"}
    return client


# ===================================================================
# 1. Settings
# ===================================================================


class TestSettings(unittest.TestCase):

    def test_defaults(self):
        settings = load_settings({})
        self.assertEqual(settings.api_url, DEFAULT_API_URL)
        self.assertIsNone(settings.token)
        self.assertEqual(settings.timeout_seconds, 30)
        self.assertEqual(settings.toggles, FeatureToggles())
        self.assertEqual(settings.left_speaker_name, "Customer")
        self.assertEqual(settings.right_speaker_name, "Agent")
        self.assertIn("transcript", settings.callback_includes)
        self.assertIsNone(callback_descriptor_from_settings(settings))

    def test_values_from_env(self):
        settings = load_settings({
            "VOICEBASE_API_URL": "https://api.example.com/v3/",
            "VOICEBASE_TOKEN": "t",
            "VOICEBASE_TIMEOUT_SECONDS": "12",
            "VOICEBASE_INDEXING_ENABLED": "false",
            "VOICEBASE_KNOWLEDGE_DISCOVERY_ENABLED": "yes",
            "VOICEBASE_CALLBACK_URL": "https://hooks.example.com",
            "VOICEBASE_CALLBACK_ADDITIONAL_URLS": "https://a, ,https://b",
        })
        self.assertEqual(settings.api_url, "https://api.example.com/v3")
        self.assertEqual(settings.timeout_seconds, 12)
        self.assertFalse(settings.toggles.indexing)
        self.assertTrue(settings.toggles.knowledge_discovery)

        descriptor = callback_descriptor_from_settings(settings)
        self.assertEqual(descriptor.callback_url, "https://hooks.example.com")
        self.assertEqual(descriptor.additional_callback_urls, ("https://a", "https://b"))
        self.assertTrue(descriptor.has_includes)
        self.assertTrue(descriptor.has_additional_callback_urls)

    def test_bad_values_fall_back_with_warning(self):
        with self.assertLogs("vbgateway.config", level="WARNING") as cm:
            settings = load_settings({
                "VOICEBASE_TIMEOUT_SECONDS": "soon",
                "VOICEBASE_PREDICTIONS_ENABLED": "perhaps",
            })
        self.assertEqual(settings.timeout_seconds, 30)
        self.assertTrue(settings.toggles.predictions)
        self.assertEqual(len(cm.output), 2)

    def test_list_setting(self):
        self.assertEqual(get_list_setting({"X": "a, b,,c "}, "X"), ("a", "b", "c"))
        self.assertEqual(get_list_setting({}, "X"), ())


# ===================================================================
# 2. forward_contact
# ===================================================================


class TestForwardContact(unittest.TestCase):

    def test_success(self):
        client = _mock_client()
        result = forward_contact(_record(), _settings(), client)

        self.assertEqual(result, {"contactId": "contact-42", "mediaId": "m-42", "status": "accepted"})
        request, media_url = client.submit.call_args[0]
        self.assertEqual(media_url, "https://media.example.com/contact-42.wav")
        self.assertEqual(request.metadata.external_id, "contact-42")
        self.assertEqual(
            [d.detector_name for d in request.configuration.prediction.detectors],
            ["PCI", "Silence"],
        )

    def test_missing_contact_id_fails_before_submission(self):
        record = _record()
        del record["ContactId"]
        client = _mock_client()
        with self.assertRaises(ContactRecordError):
            forward_contact(record, _settings(), client)
        client.submit.assert_not_called()

    def test_missing_recording_fails_before_submission(self):
        record = _record()
        del record["Recording"]
        client = _mock_client()
        with self.assertRaises(ContactRecordError):
            forward_contact(record, _settings(), client)
        client.submit.assert_not_called()

    def test_retryable_failure_propagates(self):
        client = _mock_client(error=ApiError("busy", status_code=503))
        with self.assertLogs("vbgateway.pipeline", level="WARNING") as cm:
            with self.assertRaises(ApiError) as ctx:
                forward_contact(_record(), _settings(), client)
        self.assertTrue(ctx.exception.retryable)
        self.assertTrue(any("retryable" in line for line in cm.output))

    def test_terminal_failure_propagates(self):
        client = _mock_client(error=ApiError("bad", status_code=400))
        with self.assertLogs("vbgateway.pipeline", level="ERROR"):
            with self.assertRaises(ApiError) as ctx:
                forward_contact(_record(), _settings(), client)
        self.assertFalse(ctx.exception.retryable)

    def test_client_built_from_settings(self):
        with patch("src.pipeline.VoiceBaseClient.from_settings") as mock_from_settings:
            mock_from_settings.return_value = _mock_client()
            forward_contact(_record(), _settings())
        mock_from_settings.assert_called_once()

    def test_preview_does_not_submit(self):
        request = preview_request(_record(), _settings())
        self.assertEqual(request.configuration.priority.value, "high")
        self.assertIsNone(request.configuration.vocabularies)


# ===================================================================
# 3. HTTP endpoints
# ===================================================================


class TestForwardEndpoint(unittest.TestCase):

    def setUp(self):
        self.client = TestClient(app)

    def test_health(self):
        resp = self.client.get("/health")
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json()["status"], "ok")

    @patch("src.api.forward.load_settings", return_value=Settings(token="secret"))
    @patch("src.api.forward.forward_contact")
    def test_accepted(self, mock_forward, _mock_settings):
        mock_forward.return_value = {"contactId": "contact-42", "mediaId": "m-42", "status": "accepted"}
        resp = self.client.post("/api/v1/contacts", json=_record())
        self.assertEqual(resp.status_code, 202)
        self.assertEqual(resp.json()["mediaId"], "m-42")
        self.assertEqual(mock_forward.call_args[0][0], _record())

    @patch("src.api.forward.load_settings", return_value=Settings(token="secret"))
    @patch("src.api.forward.forward_contact")
    def test_missing_contact_id(self, mock_forward, _mock_settings):
        mock_forward.side_effect = ContactRecordError("Contact record has no ContactId.")
        resp = self.client.post("/api/v1/contacts", json={"Attributes": {}})
        self.assertEqual(resp.status_code, 400)

    @patch("src.api.forward.load_settings", return_value=Settings(token="secret"))
    @patch("src.api.forward.forward_contact")
    def test_retryable_failure(self, mock_forward, _mock_settings):
        mock_forward.side_effect = ApiError("busy", status_code=429)
        resp = self.client.post("/api/v1/contacts", json=_record())
        self.assertEqual(resp.status_code, 503)
        self.assertTrue(resp.json()["retryable"])
        self.assertEqual(resp.json()["statusCode"], 429)

    @patch("src.api.forward.load_settings", return_value=Settings(token="secret"))
    @patch("src.api.forward.forward_contact")
    def test_terminal_failure(self, mock_forward, _mock_settings):
        mock_forward.side_effect = ApiError(
            "rejected", status_code=400, error=ErrorResponse(errors=("bad configuration",)),
        )
        resp = self.client.post("/api/v1/contacts", json=_record())
        self.assertEqual(resp.status_code, 502)
        self.assertFalse(resp.json()["retryable"])
        self.assertEqual(resp.json()["errors"], ["bad configuration"])

    @patch("src.api.forward.load_settings", return_value=Settings(token=None))
    @patch("src.api.forward.forward_contact")
    def test_missing_token(self, mock_forward, _mock_settings):
        mock_forward.side_effect = RuntimeError("VOICEBASE_TOKEN environment variable is not set.")
        resp = self.client.post("/api/v1/contacts", json=_record())
        self.assertEqual(resp.status_code, 500)

    @patch("src.api.forward.load_settings", return_value=Settings())
    def test_preview(self, _mock_settings):
        resp = self.client.post("/api/v1/contacts/preview", json=_record())
        self.assertEqual(resp.status_code, 200)
        body = resp.json()
        self.assertEqual(body["configuration"]["priority"], "high")
        self.assertEqual(body["metadata"]["externalId"], "contact-42")
        self.assertNotIn("vocabularies", body["configuration"])

    @patch("src.api.forward.load_settings", return_value=Settings())
    def test_preview_missing_contact_id(self, _mock_settings):
        resp = self.client.post("/api/v1/contacts/preview", json={"Attributes": {}})
        self.assertEqual(resp.status_code, 400)


if __name__ == "__main__":
    unittest.main()
