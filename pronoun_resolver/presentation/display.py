"""
Display helpers for UI collaborators.

A UI renders synchronously first (``formatted_pronouns_now``, backed by
``Resolver.peek``) and updates once ``formatted_pronouns`` completes.
Nothing is shown for the "no value" sentinel.
"""

from pydantic import BaseModel, ConfigDict, Field

from pronoun_resolver.core.config.settings import Settings, get_settings
from pronoun_resolver.domain.pronouns import (
    NO_VALUE,
    PRONOUN_MAPPING,
    PronounCode,
    PronounsFormat,
    format_pronouns,
)
from pronoun_resolver.resolution.resolver import Resolver


class DisplayOptions(BaseModel):
    """Read-only display configuration."""

    model_config = ConfigDict(frozen=True)

    pronouns_format: PronounsFormat = Field(default=PronounsFormat.LOWERCASE)
    show_in_profile: bool = Field(default=True)
    show_self: bool = Field(default=True)

    @classmethod
    def from_settings(cls, settings: Settings | None = None) -> "DisplayOptions":
        display = (settings or get_settings()).display
        return cls(
            pronouns_format=PronounsFormat(display.PRONOUNS_FORMAT),
            show_in_profile=display.SHOW_IN_PROFILE,
            show_self=display.SHOW_SELF,
        )


def displayable(code: PronounCode | None, options: DisplayOptions) -> str | None:
    """Formatted string for ``code``, or None when there is nothing to show."""
    if code is None or code is NO_VALUE or code not in PRONOUN_MAPPING:
        return None
    return format_pronouns(code, options.pronouns_format)


async def formatted_pronouns(resolver: Resolver, key: str, options: DisplayOptions) -> str | None:
    return displayable(await resolver.resolve(key), options)


def formatted_pronouns_now(resolver: Resolver, key: str, options: DisplayOptions) -> str | None:
    return displayable(resolver.peek(key), options)


async def profile_pronouns(
    resolver: Resolver,
    key: str,
    current_user_id: str | None,
    options: DisplayOptions,
) -> str | None:
    """
    Pronouns to show on the profile of ``key`` as seen by ``current_user_id``.

    Returns None without resolving when profiles are disabled, or when the
    profile is the viewer's own and ``show_self`` is off.
    """
    if not options.show_in_profile:
        return None
    if not options.show_self and key == current_user_id:
        return None
    return await formatted_pronouns(resolver, key, options)
