"""
src/request/builder.py
=======================
Media Processing Request Builder - VoiceBase Connect Gateway

Responsibility:
    - Turn a contact record's flat attribute map plus the deployment's
      feature toggles into a fully populated processing configuration
    - Wrap it with a metadata envelope (external id + extended attributes)
    - Record normalized forms of list attributes (spotting groups,
      classifiers, vocabularies) in a rewritten copy of the attribute map,
      so the remote side sees what was actually applied

Precedence, per feature:
    deployment gate  →  per-call attribute  →  default

    - Gated features (indexing, categories, classifiers) are honored only
      when the deployment toggle is on; otherwise the call proceeds without
      them and an informational note is logged.
    - Knowledge discovery starts from the deployment default and is
      overridden only by an explicit per-call value.
    - Advanced punctuation and speaker channels follow the deployment
      toggle alone.

Detectors are merged from four sources in order (PCI redaction flag,
number redaction flag, redactor names, detector names). An earlier source
always wins; later sources only fill gaps.

Malformed per-call data never raises: it is logged and replaced with the
documented default. The only hard precondition is the contact id.

This module does NOT:
    - Submit the request (see src/client/voicebase_client.py)
    - Mutate the contact record it is given
"""

import logging
from typing import Any

from src.attributes import keys
from src.attributes.contact import ATTRIBUTES, get_attributes, require_contact_id
from src.attributes.extractor import (
    AttributeSubset,
    get_boolean_parameter,
    get_string_parameter,
    get_string_parameter_set,
    get_voicebase_attribute_name,
    rewrite_attributes,
    voicebase_attributes,
)
from src.config import FeatureToggles, Settings
from src.request.callbacks import CallbackDescriptor, callback_descriptor_from_settings
from src.request.enums import (
    HttpMethod,
    IncludeType,
    Priority,
    lookup_http_method,
    lookup_include_type,
    lookup_priority,
)
from src.request.models import (
    AudioRedactorConfiguration,
    CallbackConfiguration,
    CategoryConfiguration,
    ChannelConfiguration,
    ClassifierConfiguration,
    Configuration,
    ContentFilteringConfiguration,
    DetectorConfiguration,
    FormattingConfiguration,
    MediaProcessingRequest,
    Metadata,
    MetricGroupConfiguration,
    Parameter,
    RedactorConfiguration,
    SpottingConfiguration,
    SpottingGroupConfiguration,
    TranscriptRedactorConfiguration,
    VocabularyConfiguration,
    VocabularyTermConfiguration,
)

logger = logging.getLogger("vbgateway.request.builder")


# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

SPEECH_FEATURE_VOICE = "voiceFeatures"
SPEECH_FEATURE_ADVANCED_PUNCTUATION = "advancedPunctuation"

REDACTION_REPLACEMENT = "[redacted]"
REDACTION_GAIN = 0.5
REDACTION_TONE = 270

DETECTOR_NAME_PCI = "PCI"
DETECTOR_NAME_NUMBER = "Number"
DETECTOR_PCI_PARAM_DETECTION_LEVEL_NAME = "detectionLevel"
DETECTOR_PCI_PARAM_DETECTION_LEVEL_VALUE = "probableNumbers"

DEFAULT_CALLBACK_METHOD = HttpMethod.POST


def default_redactor() -> RedactorConfiguration:
    return RedactorConfiguration(
        transcript=TranscriptRedactorConfiguration(replacement=REDACTION_REPLACEMENT),
        audio=AudioRedactorConfiguration(tone=REDACTION_TONE, gain=REDACTION_GAIN),
    )


def probable_numbers_parameter() -> Parameter:
    return Parameter(
        parameter=DETECTOR_PCI_PARAM_DETECTION_LEVEL_NAME,
        value=DETECTOR_PCI_PARAM_DETECTION_LEVEL_VALUE,
    )


# ---------------------------------------------------------------------------
# Precedence helpers
# ---------------------------------------------------------------------------


def resolve_gated(feature: str, gate_enabled: bool, requested: bool, contact_id: str) -> bool:
    """
    Honor a per-call request only if the deployment gate is open.

    A request against a closed gate is downgraded to "off" with an
    informational log line, never an error.
    """
    if requested and not gate_enabled:
        logger.info(
            "%s requested by contact %s but the feature has been disabled, "
            "will submit without %s",
            feature.capitalize(), contact_id, feature,
        )
        return False
    return requested


def resolve_override(deployment_default: bool, per_call: bool | None) -> bool:
    """Per-call value if one was given, deployment default otherwise."""
    if per_call is None:
        return deployment_default
    return per_call


def merge_detector_settings(
    redact_pci: bool,
    redact_numbers: bool,
    redactor_names: set[str] | None,
    detector_names: set[str] | None,
) -> dict[str, bool]:
    """
    Merge detector sources into ``{detector name: redact?}``.

    Sources are applied in order and never overwrite an earlier decision:
    a name listed as a redactor stays redacted even when it is also listed
    as a plain detector.
    """
    settings: dict[str, bool] = {}
    if redact_pci:
        settings[DETECTOR_NAME_PCI] = True
    if redact_numbers:
        settings[DETECTOR_NAME_NUMBER] = True
    for name in sorted(redactor_names or ()):
        settings.setdefault(name, True)
    for name in sorted(detector_names or ()):
        settings.setdefault(name, False)
    return settings


def detector_configurations(detector_settings: dict[str, bool]) -> list[DetectorConfiguration] | None:
    if not detector_settings:
        return None

    result: list[DetectorConfiguration] = []
    for name, redact in detector_settings.items():
        detector = DetectorConfiguration(detector_name=name)
        # the generic PCI detector needs its detection level
        if name == DETECTOR_NAME_PCI:
            detector.add_parameter(probable_numbers_parameter())
        if redact:
            detector.redactor = default_redactor()
        result.append(detector)
    return result


# ---------------------------------------------------------------------------
# Builder
# ---------------------------------------------------------------------------


class RequestBuilder:
    """
    Builds media processing requests from contact records.

    Deployment settings are fixed at construction time; ``build`` can be
    called for any number of records and keeps no state between them.
    """

    def __init__(
        self,
        toggles: FeatureToggles | None = None,
        left_speaker_name: str | None = None,
        right_speaker_name: str | None = None,
        callbacks: CallbackDescriptor | None = None,
    ) -> None:
        self.toggles = toggles if toggles is not None else FeatureToggles()
        self.left_speaker_name = left_speaker_name
        self.right_speaker_name = right_speaker_name
        self.callbacks = callbacks

    @classmethod
    def from_settings(cls, settings: Settings) -> "RequestBuilder":
        return cls(
            toggles=settings.toggles,
            left_speaker_name=settings.left_speaker_name,
            right_speaker_name=settings.right_speaker_name,
            callbacks=callback_descriptor_from_settings(settings),
        )

    def build(self, record: dict[str, Any]) -> MediaProcessingRequest:
        """
        Build the request for one contact record.

        Raises:
            ContactRecordError: If the record has no contact id.
        """
        contact_id = require_contact_id(record)
        attributes = get_attributes(record)
        rewrites: dict[str, list[str]] = {}

        configuration = self._create_configuration(contact_id, attributes, rewrites)

        extended = dict(record)
        if rewrites:
            extended[ATTRIBUTES] = rewrite_attributes(attributes, rewrites)
            logger.debug(
                "Contact %s: rewrote attributes %s", contact_id, sorted(rewrites),
            )

        return MediaProcessingRequest(
            configuration=configuration,
            metadata=Metadata(external_id=contact_id, extended=extended),
        )

    # ------------------------------------------------------------------
    # Configuration
    # ------------------------------------------------------------------

    def _create_configuration(
        self,
        contact_id: str,
        attributes: dict[str, Any],
        rewrites: dict[str, list[str]],
    ) -> Configuration:
        configuration = Configuration()
        vb_attrs = voicebase_attributes(attributes)

        self._configure_speakers(configuration)
        self._configure_speech_features(configuration)
        self._configure_callbacks(configuration, contact_id)

        configuration.priority = self._priority(vb_attrs, contact_id)

        # detectors and redactors
        detector_settings = merge_detector_settings(
            redact_pci=get_boolean_parameter(
                vb_attrs, keys.VB_ATTR_PCIREDACT, keys.DEFAULT_PCI_REDACTION_ENABLE,
            ),
            redact_numbers=get_boolean_parameter(
                vb_attrs, keys.VB_ATTR_NUMBERREDACT, keys.DEFAULT_NUMBER_REDACTION_ENABLE,
            ),
            redactor_names=get_string_parameter_set(vb_attrs, keys.VB_ATTR_REDACTORS),
            detector_names=get_string_parameter_set(vb_attrs, keys.VB_ATTR_DETECTORS),
        )
        configuration.prediction.detectors = detector_configurations(detector_settings)

        # transcript settings
        transcript_attrs = vb_attrs.subset(keys.VB_ATTR_TRANSCRIPT)
        configuration.transcript.formatting = FormattingConfiguration(
            enable_number_formatting=get_boolean_parameter(
                transcript_attrs, keys.VB_ATTR_TRANSCRIPT_NUMBER_FORMAT,
            ),
        )
        configuration.transcript.content_filtering = ContentFilteringConfiguration(
            enable_profanity_filtering=get_boolean_parameter(
                transcript_attrs, keys.VB_ATTR_TRANSCRIPT_SWEARWORD_FILTER,
            ),
        )

        # knowledge discovery
        knowledge_attrs = vb_attrs.subset(keys.VB_ATTR_KNOWLEDGE)
        configuration.knowledge.enable_discovery = resolve_override(
            self.toggles.knowledge_discovery,
            get_boolean_parameter(knowledge_attrs, keys.VB_ATTR_KNOWLEDGE_DISCOVERY, None),
        )

        self._configure_spotting(configuration, vb_attrs, rewrites)
        self._configure_language(configuration, vb_attrs)

        # analytic indexing
        indexing_requested = get_boolean_parameter(
            vb_attrs, keys.VB_ATTR_ENABLE_ANALYTIC_INDEXING, False,
        )
        if resolve_gated("analytical indexing", self.toggles.indexing, indexing_requested, contact_id):
            configuration.publish.enable_analytic_indexing = True

        self._configure_categories(configuration, vb_attrs, contact_id)
        self._configure_classifiers(configuration, vb_attrs, contact_id, rewrites)
        self._configure_vocabularies(configuration, vb_attrs, rewrites)
        self._configure_metrics(configuration, vb_attrs)

        return configuration

    def _configure_speakers(self, configuration: Configuration) -> None:
        if not self.toggles.configure_speakers:
            return
        configuration.ingest.channels = [
            ChannelConfiguration(speaker_name=self.left_speaker_name),
            ChannelConfiguration(speaker_name=self.right_speaker_name),
        ]

    def _configure_speech_features(self, configuration: Configuration) -> None:
        features = [SPEECH_FEATURE_VOICE]
        if self.toggles.advanced_punctuation:
            features.append(SPEECH_FEATURE_ADVANCED_PUNCTUATION)
        configuration.speech_model.features = features

    def _configure_callbacks(self, configuration: Configuration, contact_id: str) -> None:
        descriptor = self.callbacks
        if descriptor is None:
            return

        includes: list[IncludeType] = []
        for token in descriptor.includes:
            if not token or not token.strip():
                continue
            include = lookup_include_type(token)
            if include is None:
                logger.warning("Dropping unknown callback include %r", token)
                continue
            includes.append(include)

        method = lookup_http_method(descriptor.callback_method)
        if method is None:
            logger.warning(
                "Unknown callback method %r for contact %s, using %s",
                descriptor.callback_method, contact_id, DEFAULT_CALLBACK_METHOD.value,
            )
            method = DEFAULT_CALLBACK_METHOD

        urls: list[str] = []
        if descriptor.callback_url and descriptor.callback_url.strip():
            urls.append(descriptor.callback_url)
        urls.extend(descriptor.additional_callback_urls)

        callbacks = [
            CallbackConfiguration(url=url, method=method, include=list(includes))
            for url in urls
        ]
        if callbacks:
            configuration.publish.callbacks = callbacks

    def _priority(self, vb_attrs: AttributeSubset, contact_id: str) -> Priority:
        token = get_string_parameter(vb_attrs, keys.VB_ATTR_PRIORITY)
        priority = lookup_priority(token)
        if priority is not None:
            return priority
        if token is not None:
            logger.warning(
                "Unknown priority %r for contact %s, using %s",
                token, contact_id, Priority.NORMAL.name,
            )
        return Priority.NORMAL

    def _configure_spotting(
        self,
        configuration: Configuration,
        vb_attrs: AttributeSubset,
        rewrites: dict[str, list[str]],
    ) -> None:
        keyword_attrs = vb_attrs.subset(keys.VB_ATTR_KEYWORDS)
        groups = get_string_parameter_set(keyword_attrs, keys.VB_ATTR_KEYWORDS_GROUPS)
        if not groups:
            return

        names = sorted(groups)
        configuration.spotting = SpottingConfiguration(
            groups=[SpottingGroupConfiguration(group_name=name) for name in names],
        )
        rewrites[get_voicebase_attribute_name(keys.VB_ATTR_KEYWORDS, keys.VB_ATTR_KEYWORDS_GROUPS)] = names

    def _configure_language(self, configuration: Configuration, vb_attrs: AttributeSubset) -> None:
        configuration.speech_model.language = get_string_parameter(vb_attrs, keys.VB_ATTR_LANGUAGE)
        extensions = get_string_parameter_set(vb_attrs, keys.VB_ATTR_LANGUAGE_EXTENSIONS)
        if extensions:
            configuration.speech_model.extensions = sorted(extensions)

    def _configure_categories(
        self,
        configuration: Configuration,
        vb_attrs: AttributeSubset,
        contact_id: str,
    ) -> None:
        category_attrs = vb_attrs.subset(keys.VB_ATTR_CATEGORIES)
        all_categories = get_boolean_parameter(category_attrs, keys.VB_ATTR_CATEGORIES_ALL, False)
        category_names = get_string_parameter_set(category_attrs, keys.VB_ATTR_CATEGORIES_NAMES)

        requested = all_categories or bool(category_names)
        if not resolve_gated("categorization", self.toggles.categorization, requested, contact_id):
            return

        categories: list[CategoryConfiguration] = []
        if all_categories:
            categories.append(CategoryConfiguration(all_categories=True))
        for name in sorted(category_names or ()):
            categories.append(CategoryConfiguration(category_name=name))
        configuration.categories = categories

    def _configure_classifiers(
        self,
        configuration: Configuration,
        vb_attrs: AttributeSubset,
        contact_id: str,
        rewrites: dict[str, list[str]],
    ) -> None:
        classifier_attrs = vb_attrs.subset(keys.VB_ATTR_CLASSIFIER)
        classifier_names = get_string_parameter_set(classifier_attrs, keys.VB_ATTR_CLASSIFIER_NAMES)
        if not resolve_gated("predictions", self.toggles.predictions, bool(classifier_names), contact_id):
            return

        names = sorted(classifier_names)
        configuration.prediction.classifiers = [
            ClassifierConfiguration(classifier_name=name) for name in names
        ]
        rewrites[get_voicebase_attribute_name(keys.VB_ATTR_CLASSIFIER, keys.VB_ATTR_CLASSIFIER_NAMES)] = names

    def _configure_vocabularies(
        self,
        configuration: Configuration,
        vb_attrs: AttributeSubset,
        rewrites: dict[str, list[str]],
    ) -> None:
        vocab_attrs = vb_attrs.subset(keys.VB_ATTR_VOCABULARY)
        vocabularies: list[VocabularyConfiguration] = []

        # vocabulary terms need to be unique, the set takes care of that
        terms = get_string_parameter_set(vocab_attrs, keys.VB_ATTR_VOCABULARY_TERMS)
        if terms:
            sorted_terms = sorted(terms)
            vocabularies.append(
                VocabularyConfiguration(
                    terms=[VocabularyTermConfiguration(term=term) for term in sorted_terms],
                )
            )
            rewrites[get_voicebase_attribute_name(keys.VB_ATTR_VOCABULARY, keys.VB_ATTR_VOCABULARY_TERMS)] = sorted_terms

        vocab_names = get_string_parameter_set(vocab_attrs, keys.VB_ATTR_VOCABULARY_NAMES)
        if vocab_names:
            sorted_names = sorted(vocab_names)
            vocabularies.extend(
                VocabularyConfiguration(vocabulary_name=name) for name in sorted_names
            )
            rewrites[get_voicebase_attribute_name(keys.VB_ATTR_VOCABULARY, keys.VB_ATTR_VOCABULARY_NAMES)] = sorted_names

        if vocabularies:
            configuration.vocabularies = vocabularies

    def _configure_metrics(self, configuration: Configuration, vb_attrs: AttributeSubset) -> None:
        metrics_attrs = vb_attrs.subset(keys.VB_ATTR_METRICS)
        groups = get_string_parameter_set(metrics_attrs, keys.VB_ATTR_METRICS_GROUPS)
        if groups:
            configuration.metrics = [
                MetricGroupConfiguration(metric_group_name=name) for name in sorted(groups)
            ]


def build_request(record: dict[str, Any], settings: Settings) -> MediaProcessingRequest:
    """Build a request for ``record`` using deployment ``settings``."""
    return RequestBuilder.from_settings(settings).build(record)
