"""
src/attributes/keys.py
=======================
Attribute Names & Defaults - VoiceBase Connect Gateway

Responsibility:
    - Name the namespace under which processing options live in a contact
      record's attribute map (``voicebase.*``)
    - Name every per-call attribute read by the request builder
    - Hold the per-call defaults for attributes that have one

Attribute keys are relative to their namespace. A full key is built by
joining namespace parts with ``.``, e.g. ``voicebase.keywords.groups``.

This module does NOT:
    - Read attributes (see extractor.py)
    - Read deployment settings (see src/config.py)
"""

# ---------------------------------------------------------------------------
# Namespaces
# ---------------------------------------------------------------------------

NAMESPACE_SEPARATOR = "."

VB_ATTR = "voicebase"
VB_ATTR_TRANSCRIPT = "transcript"
VB_ATTR_KNOWLEDGE = "knowledge"
VB_ATTR_KEYWORDS = "keywords"
VB_ATTR_CATEGORIES = "categories"
VB_ATTR_CLASSIFIER = "classifier"
VB_ATTR_VOCABULARY = "vocabulary"
VB_ATTR_METRICS = "metrics"


# ---------------------------------------------------------------------------
# Keys directly under voicebase.*
# ---------------------------------------------------------------------------

VB_ATTR_PRIORITY = "priority"
VB_ATTR_PCIREDACT = "pciredact"
VB_ATTR_NUMBERREDACT = "numberredact"
VB_ATTR_REDACTORS = "redactors"
VB_ATTR_DETECTORS = "detectors"
VB_ATTR_LANGUAGE = "language"
VB_ATTR_LANGUAGE_EXTENSIONS = "extensions"
VB_ATTR_ENABLE_ANALYTIC_INDEXING = "analyticIndexing"

# ---------------------------------------------------------------------------
# Keys under nested namespaces
# ---------------------------------------------------------------------------

VB_ATTR_TRANSCRIPT_NUMBER_FORMAT = "numberFormatting"    # voicebase.transcript.*
VB_ATTR_TRANSCRIPT_SWEARWORD_FILTER = "swearFilter"      # voicebase.transcript.*
VB_ATTR_KNOWLEDGE_DISCOVERY = "discovery"                # voicebase.knowledge.*
VB_ATTR_KEYWORDS_GROUPS = "groups"                       # voicebase.keywords.*
VB_ATTR_CATEGORIES_ALL = "all"                           # voicebase.categories.*
VB_ATTR_CATEGORIES_NAMES = "names"                       # voicebase.categories.*
VB_ATTR_CLASSIFIER_NAMES = "names"                       # voicebase.classifier.*
VB_ATTR_VOCABULARY_TERMS = "terms"                       # voicebase.vocabulary.*
VB_ATTR_VOCABULARY_NAMES = "names"                       # voicebase.vocabulary.*
VB_ATTR_METRICS_GROUPS = "groups"                        # voicebase.metrics.*


# ---------------------------------------------------------------------------
# Per-call defaults
# ---------------------------------------------------------------------------

DEFAULT_BOOLEAN = False
DEFAULT_PCI_REDACTION_ENABLE = False
DEFAULT_NUMBER_REDACTION_ENABLE = False
