"""
tests/test_attributes.py
=========================
Attribute Layer Tests - VoiceBase Connect Gateway

Test categories:
    1. AttributeSubset namespaced views
    2. Typed accessors (string, boolean, string-set) and their defaults
    3. Attribute naming and copy-on-write rewrites
    4. Contact record accessors

All tests are OFFLINE.
"""

import os
import sys
import unittest

# Ensure project root is on sys.path
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

from src.attributes.contact import (
    ContactRecordError,
    get_attributes,
    get_contact_id,
    get_recording_url,
    require_contact_id,
)
from src.attributes.extractor import (
    AttributeSubset,
    get_boolean_parameter,
    get_string_parameter,
    get_string_parameter_set,
    get_voicebase_attribute_name,
    rewrite_attributes,
    voicebase_attributes,
)


# ===================================================================
# Test fixtures
# ===================================================================

def _attributes():
    return {
        "voicebase.priority": "high",
        "voicebase.pciredact": "yes",
        "voicebase.transcript.swearFilter": "true",
        "voicebase.transcript.numberFormatting": "nope",
        "voicebase.keywords.groups": " billing, ,refunds,billing ",
        "voicebase.vocabulary.terms": ["VoiceBase", " Connect ", ""],
        "voicebase.callMetadata": {"queue": "support"},
        "other.priority": "low",
    }


# ===================================================================
# 1. Subset views
# ===================================================================


class TestAttributeSubset(unittest.TestCase):

    def test_voicebase_view_strips_prefix(self):
        vb = voicebase_attributes(_attributes())
        self.assertEqual(vb["priority"], "high")
        self.assertNotIn("other.priority", vb)
        self.assertEqual(vb.prefix, "voicebase")

    def test_nested_subset(self):
        transcript = voicebase_attributes(_attributes()).subset("transcript")
        self.assertEqual(transcript.prefix, "voicebase.transcript")
        self.assertEqual(set(transcript), {"swearFilter", "numberFormatting"})
        self.assertEqual(len(transcript), 2)

    def test_missing_key_raises_key_error_and_get_returns_none(self):
        vb = voicebase_attributes(_attributes())
        with self.assertRaises(KeyError):
            vb["language"]
        self.assertIsNone(vb.get("language"))

    def test_empty_prefix_exposes_whole_map(self):
        attrs = _attributes()
        view = AttributeSubset(attrs)
        self.assertEqual(len(view), len(attrs))
        self.assertEqual(view["other.priority"], "low")

    def test_prefix_does_not_match_partial_namespace(self):
        view = AttributeSubset({"voicebaseX.priority": "high"}, "voicebase")
        self.assertEqual(len(view), 0)


# ===================================================================
# 2. Typed accessors
# ===================================================================


class TestStringParameter(unittest.TestCase):

    def test_present(self):
        vb = voicebase_attributes(_attributes())
        self.assertEqual(get_string_parameter(vb, "priority"), "high")

    def test_absent_returns_none(self):
        vb = voicebase_attributes(_attributes())
        self.assertIsNone(get_string_parameter(vb, "language"))

    def test_nested_map_is_not_a_string(self):
        vb = voicebase_attributes(_attributes())
        self.assertIsNone(get_string_parameter(vb, "callMetadata"))

    def test_scalars_are_rendered(self):
        self.assertEqual(get_string_parameter({"n": 3}, "n"), "3")
        self.assertEqual(get_string_parameter({"b": True}, "b"), "true")


class TestBooleanParameter(unittest.TestCase):

    def test_true_tokens(self):
        for token in ("true", "TRUE", " yes ", "on", "y", "t", "1"):
            self.assertTrue(get_boolean_parameter({"k": token}, "k"), token)

    def test_false_tokens(self):
        for token in ("false", "No", "off", "n", "f", "0"):
            self.assertFalse(get_boolean_parameter({"k": token}, "k", True), token)

    def test_absent_uses_default(self):
        self.assertFalse(get_boolean_parameter({}, "k"))
        self.assertTrue(get_boolean_parameter({}, "k", True))
        self.assertIsNone(get_boolean_parameter({}, "k", None))

    def test_bool_value_passes_through(self):
        self.assertTrue(get_boolean_parameter({"k": True}, "k"))

    def test_unparsable_uses_default_and_warns(self):
        transcript = voicebase_attributes(_attributes()).subset("transcript")
        with self.assertLogs("vbgateway.attributes.extractor", level="WARNING") as cm:
            result = get_boolean_parameter(transcript, "numberFormatting", True)
        self.assertTrue(result)
        self.assertIn("voicebase.transcript.numberFormatting", cm.output[0])


class TestStringParameterSet(unittest.TestCase):

    def test_comma_separated_trimmed_and_deduplicated(self):
        keywords = voicebase_attributes(_attributes()).subset("keywords")
        self.assertEqual(get_string_parameter_set(keywords, "groups"), {"billing", "refunds"})

    def test_absent_returns_none(self):
        self.assertIsNone(get_string_parameter_set({}, "groups"))

    def test_blank_returns_empty_set(self):
        self.assertEqual(get_string_parameter_set({"groups": " , ,"}, "groups"), set())

    def test_list_value_is_accepted(self):
        vocab = voicebase_attributes(_attributes()).subset("vocabulary")
        self.assertEqual(get_string_parameter_set(vocab, "terms"), {"VoiceBase", "Connect"})

    def test_reparsing_normalized_list_is_stable(self):
        first = get_string_parameter_set({"k": "b,a,b"}, "k")
        second = get_string_parameter_set({"k": sorted(first)}, "k")
        self.assertEqual(first, second)

    def test_unsupported_value_yields_empty_set(self):
        with self.assertLogs("vbgateway.attributes.extractor", level="WARNING"):
            self.assertEqual(get_string_parameter_set({"k": {"a": 1}}, "k"), set())


# ===================================================================
# 3. Naming and rewrites
# ===================================================================


class TestNamingAndRewrite(unittest.TestCase):

    def test_voicebase_attribute_name(self):
        self.assertEqual(
            get_voicebase_attribute_name("keywords", "groups"),
            "voicebase.keywords.groups",
        )

    def test_rewrite_returns_copy(self):
        attrs = {"voicebase.keywords.groups": "b,a", "keep": "me"}
        rewritten = rewrite_attributes(attrs, {"voicebase.keywords.groups": ["a", "b"]})
        self.assertEqual(rewritten["voicebase.keywords.groups"], ["a", "b"])
        self.assertEqual(rewritten["keep"], "me")
        self.assertEqual(attrs["voicebase.keywords.groups"], "b,a")


# ===================================================================
# 4. Contact record accessors
# ===================================================================


class TestContactRecord(unittest.TestCase):

    def test_contact_id(self):
        self.assertEqual(require_contact_id({"ContactId": "abc"}), "abc")
        self.assertIsNone(get_contact_id({"ContactId": "  "}))

    def test_missing_contact_id_fails_fast(self):
        with self.assertRaises(ContactRecordError):
            require_contact_id({"Attributes": {}})

    def test_attributes_default_to_empty(self):
        self.assertEqual(get_attributes({"ContactId": "abc"}), {})

    def test_non_dict_attributes_ignored(self):
        with self.assertLogs("vbgateway.attributes.contact", level="WARNING"):
            self.assertEqual(get_attributes({"ContactId": "abc", "Attributes": "x"}), {})

    def test_recording_url(self):
        record = {"ContactId": "abc", "Recording": {"Location": " https://media/abc.wav "}}
        self.assertEqual(get_recording_url(record), "https://media/abc.wav")

    def test_missing_recording_raises(self):
        with self.assertRaises(ContactRecordError):
            get_recording_url({"ContactId": "abc"})
        with self.assertRaises(ContactRecordError):
            get_recording_url({"ContactId": "abc", "Recording": None})


if __name__ == "__main__":
    unittest.main()
