from .display import (
    DisplayOptions,
    displayable,
    formatted_pronouns,
    formatted_pronouns_now,
    profile_pronouns,
)

__all__ = [
    "DisplayOptions",
    "displayable",
    "formatted_pronouns",
    "formatted_pronouns_now",
    "profile_pronouns",
]
