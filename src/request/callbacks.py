"""
src/request/callbacks.py
=========================
Callback Descriptor - VoiceBase Connect Gateway

Describes where the remote API should deliver results once a job is done:
one primary callback URL plus any number of additional URLs, all sharing
the same HTTP method and include list.

Tokens are kept as free text here. Translating them into canonical enum
values (and dropping unknown ones) is the request builder's job.
"""

from dataclasses import dataclass

from src.config import DEFAULT_CALLBACK_METHOD, Settings


@dataclass(frozen=True)
class CallbackDescriptor:
    callback_url: str | None = None
    callback_method: str = DEFAULT_CALLBACK_METHOD
    includes: tuple[str, ...] = ()
    additional_callback_urls: tuple[str, ...] = ()

    @property
    def has_includes(self) -> bool:
        return bool(self.includes)

    @property
    def has_additional_callback_urls(self) -> bool:
        return bool(self.additional_callback_urls)


def callback_descriptor_from_settings(settings: Settings) -> CallbackDescriptor | None:
    """Return the deployment's callback descriptor, or None if no URL is configured."""
    if not settings.callback_url and not settings.callback_additional_urls:
        return None
    return CallbackDescriptor(
        callback_url=settings.callback_url,
        callback_method=settings.callback_method,
        includes=settings.callback_includes,
        additional_callback_urls=settings.callback_additional_urls,
    )
