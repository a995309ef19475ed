# src/attributes/__init__.py
# ===========================
# Attribute Layer - VoiceBase Connect Gateway
#
# Responsibility:
#   - Typed, defaulted views over a contact record's attribute map
#   - Contact record accessors (contact id, attributes, recording)
#
# Public API:
#   - AttributeSubset / voicebase_attributes() - namespaced views
#   - get_string_parameter(), get_boolean_parameter(),
#     get_string_parameter_set(), get_voicebase_attribute_name()
#   - require_contact_id(), get_attributes(), get_recording_url()

from src.attributes.extractor import (  # noqa: F401
    AttributeSubset,
    get_boolean_parameter,
    get_string_parameter,
    get_string_parameter_set,
    get_voicebase_attribute_name,
    rewrite_attributes,
    voicebase_attributes,
)
from src.attributes.contact import (  # noqa: F401
    ContactRecordError,
    get_attributes,
    get_contact_id,
    get_recording_url,
    require_contact_id,
)
