"""
src/request/models.py
======================
Request Model - VoiceBase Connect Gateway

Responsibility:
    - Define the nested configuration tree of a media processing request
      (ingest, transcript, speech model, prediction, knowledge, publish,
      plus priority, vocabularies, categories, metrics, spotting)
    - Define the metadata envelope (external id + extended attributes)
    - Serialize both to the remote API's camelCase JSON

Serialization rules:
    - Unset fields (None) are dropped
    - A section that is present but empty serializes as {}
    - Enum members serialize as their value

This module does NOT:
    - Decide what goes into a request (see builder.py)
    - Send anything over the network (see src/client/)
"""

from dataclasses import dataclass, field, fields
from enum import Enum
from typing import Any

from src.request.enums import HttpMethod, IncludeType, Priority


def _json(name: str, default: Any = None, factory: Any = None) -> Any:
    """Declare a model field together with its JSON name."""
    if factory is not None:
        return field(default_factory=factory, metadata={"json": name})
    return field(default=default, metadata={"json": name})


def _to_json_value(value: Any) -> Any:
    if isinstance(value, _Model):
        return value.to_dict()
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, list):
        return [_to_json_value(item) for item in value]
    return value


class _Model:
    """Mixin giving dataclass models a compact ``to_dict``."""

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {}
        for f in fields(self):  # type: ignore[arg-type]
            value = getattr(self, f.name)
            if value is None:
                continue
            result[f.metadata.get("json", f.name)] = _to_json_value(value)
        return result


# ---------------------------------------------------------------------------
# Ingest
# ---------------------------------------------------------------------------


@dataclass
class ChannelConfiguration(_Model):
    speaker_name: str | None = _json("speakerName")


@dataclass
class IngestConfiguration(_Model):
    channels: list[ChannelConfiguration] | None = _json("channels")


# ---------------------------------------------------------------------------
# Transcript
# ---------------------------------------------------------------------------


@dataclass
class FormattingConfiguration(_Model):
    enable_number_formatting: bool | None = _json("enableNumberFormatting")


@dataclass
class ContentFilteringConfiguration(_Model):
    enable_profanity_filtering: bool | None = _json("enableProfanityFiltering")


@dataclass
class TranscriptConfiguration(_Model):
    formatting: FormattingConfiguration | None = _json("formatting")
    content_filtering: ContentFilteringConfiguration | None = _json("contentFiltering")


# ---------------------------------------------------------------------------
# Speech model
# ---------------------------------------------------------------------------


@dataclass
class SpeechModelConfiguration(_Model):
    language: str | None = _json("language")
    extensions: list[str] | None = _json("extensions")
    features: list[str] | None = _json("features")


# ---------------------------------------------------------------------------
# Prediction - detectors, redactors, classifiers
# ---------------------------------------------------------------------------


@dataclass
class Parameter(_Model):
    parameter: str | None = _json("parameter")
    value: str | None = _json("value")


@dataclass
class TranscriptRedactorConfiguration(_Model):
    replacement: str | None = _json("replacement")


@dataclass
class AudioRedactorConfiguration(_Model):
    tone: int | None = _json("tone")
    gain: float | None = _json("gain")


@dataclass
class RedactorConfiguration(_Model):
    transcript: TranscriptRedactorConfiguration | None = _json("transcript")
    audio: AudioRedactorConfiguration | None = _json("audio")


@dataclass
class DetectorConfiguration(_Model):
    detector_name: str | None = _json("detectorName")
    parameters: list[Parameter] | None = _json("parameters")
    redactor: RedactorConfiguration | None = _json("redactor")

    def add_parameter(self, parameter: Parameter) -> None:
        if self.parameters is None:
            self.parameters = []
        self.parameters.append(parameter)


@dataclass
class ClassifierConfiguration(_Model):
    classifier_name: str | None = _json("classifierName")


@dataclass
class PredictionConfiguration(_Model):
    detectors: list[DetectorConfiguration] | None = _json("detectors")
    classifiers: list[ClassifierConfiguration] | None = _json("classifiers")


# ---------------------------------------------------------------------------
# Knowledge / publish
# ---------------------------------------------------------------------------


@dataclass
class KnowledgeConfiguration(_Model):
    enable_discovery: bool | None = _json("enableDiscovery")


@dataclass
class CallbackConfiguration(_Model):
    url: str | None = _json("url")
    method: HttpMethod | None = _json("method")
    include: list[IncludeType] | None = _json("include")


@dataclass
class PublishConfiguration(_Model):
    callbacks: list[CallbackConfiguration] | None = _json("callbacks")
    enable_analytic_indexing: bool | None = _json("enableAnalyticIndexing")


# ---------------------------------------------------------------------------
# Top-level optional lists
# ---------------------------------------------------------------------------


@dataclass
class SpottingGroupConfiguration(_Model):
    group_name: str | None = _json("groupName")


@dataclass
class SpottingConfiguration(_Model):
    groups: list[SpottingGroupConfiguration] | None = _json("groups")


@dataclass
class VocabularyTermConfiguration(_Model):
    term: str | None = _json("term")


@dataclass
class VocabularyConfiguration(_Model):
    vocabulary_name: str | None = _json("vocabularyName")
    terms: list[VocabularyTermConfiguration] | None = _json("terms")


@dataclass
class CategoryConfiguration(_Model):
    category_name: str | None = _json("categoryName")
    all_categories: bool | None = _json("allCategories")


@dataclass
class MetricGroupConfiguration(_Model):
    metric_group_name: str | None = _json("metricGroupName")


# ---------------------------------------------------------------------------
# Request
# ---------------------------------------------------------------------------


@dataclass
class Configuration(_Model):
    """
    Full processing configuration.

    The six sections always exist, even when empty. The optional lists
    (vocabularies, categories, metrics, spotting) stay None unless an
    attribute asked for them.
    """

    ingest: IngestConfiguration = _json("ingest", factory=IngestConfiguration)
    transcript: TranscriptConfiguration = _json("transcript", factory=TranscriptConfiguration)
    speech_model: SpeechModelConfiguration = _json("speechModel", factory=SpeechModelConfiguration)
    prediction: PredictionConfiguration = _json("prediction", factory=PredictionConfiguration)
    knowledge: KnowledgeConfiguration = _json("knowledge", factory=KnowledgeConfiguration)
    publish: PublishConfiguration = _json("publish", factory=PublishConfiguration)
    priority: Priority | None = _json("priority")
    vocabularies: list[VocabularyConfiguration] | None = _json("vocabularies")
    categories: list[CategoryConfiguration] | None = _json("categories")
    metrics: list[MetricGroupConfiguration] | None = _json("metrics")
    spotting: SpottingConfiguration | None = _json("spotting")


@dataclass
class Metadata(_Model):
    external_id: str | None = _json("externalId")
    extended: dict[str, Any] | None = _json("extended")


@dataclass
class MediaProcessingRequest(_Model):
    configuration: Configuration = _json("configuration", factory=Configuration)
    metadata: Metadata = _json("metadata", factory=Metadata)
