from .pronouns import (
    META_CODES,
    NO_VALUE,
    PRONOUN_MAPPING,
    PronounCode,
    PronounsFormat,
    format_pronouns,
)

__all__ = [
    "META_CODES",
    "NO_VALUE",
    "PRONOUN_MAPPING",
    "PronounCode",
    "PronounsFormat",
    "format_pronouns",
]
