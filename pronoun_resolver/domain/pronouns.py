"""
Pronoun codes and display formatting.

PronounDB answers lookups with short codes ("hh", "tt", "any", ...). Each
code has one canonical, capitalized display string. ``format_pronouns`` is
the only place the display style is applied.
"""

from enum import Enum


class PronounCode(str, Enum):
    """
    Closed set of PronounDB pronoun codes.

    UNSPECIFIED doubles as the "no value" sentinel: it is what a caller gets
    when the remote source has nothing for an entity or could not be reached.
    """

    UNSPECIFIED = "unspecified"

    HE_HIM = "hh"
    HE_IT = "hi"
    HE_SHE = "hs"
    HE_THEY = "ht"
    IT_HIM = "ih"
    IT_ITS = "ii"
    IT_SHE = "is"
    IT_THEY = "it"
    SHE_HE = "shh"
    SHE_HER = "sh"
    SHE_IT = "si"
    SHE_THEY = "st"
    THEY_HE = "th"
    THEY_IT = "ti"
    THEY_SHE = "ts"
    THEY_THEM = "tt"

    ANY = "any"
    OTHER = "other"
    ASK = "ask"
    AVOID = "avoid"

    @classmethod
    def parse(cls, raw: object) -> "PronounCode | None":
        """Return the code for ``raw`` or None if it is not a known code."""
        if isinstance(raw, cls):
            return raw
        try:
            return cls(raw)
        except (TypeError, ValueError):
            return None


NO_VALUE = PronounCode.UNSPECIFIED


class PronounsFormat(str, Enum):
    """Display style chosen by the presentation layer."""

    LOWERCASE = "LOWERCASE"
    CAPITALIZED = "CAPITALIZED"


PRONOUN_MAPPING: dict[PronounCode, str] = {
    PronounCode.HE_HIM: "He/Him",
    PronounCode.HE_IT: "He/It",
    PronounCode.HE_SHE: "He/She",
    PronounCode.HE_THEY: "He/They",
    PronounCode.IT_HIM: "It/Him",
    PronounCode.IT_ITS: "It/Its",
    PronounCode.IT_SHE: "It/She",
    PronounCode.IT_THEY: "It/They",
    PronounCode.SHE_HE: "She/He",
    PronounCode.SHE_HER: "She/Her",
    PronounCode.SHE_IT: "She/It",
    PronounCode.SHE_THEY: "She/They",
    PronounCode.THEY_HE: "They/He",
    PronounCode.THEY_IT: "They/It",
    PronounCode.THEY_SHE: "They/She",
    PronounCode.THEY_THEM: "They/Them",
    PronounCode.ANY: "Any pronouns",
    PronounCode.OTHER: "Other pronouns",
    PronounCode.ASK: "Ask me my pronouns",
    PronounCode.AVOID: "Avoid pronouns, use my name",
    PronounCode.UNSPECIFIED: "Unspecified",
}

# Meta-answers read as short phrases, so they keep their canonical casing
# even when the lowercase style is selected.
META_CODES = frozenset({PronounCode.ANY, PronounCode.ASK, PronounCode.AVOID, PronounCode.OTHER})


def format_pronouns(code: PronounCode | str, style: PronounsFormat | str) -> str:
    """
    Render ``code`` in the requested display style.

    Args:
        code: Pronoun code (enum member or raw code string)
        style: PronounsFormat member or its string value

    Returns:
        Canonical display string for CAPITALIZED; lower-cased display string
        for LOWERCASE, except for meta-answers which stay canonical.

    Raises:
        ValueError: If ``code`` or ``style`` is unknown
    """
    code = PronounCode(code)
    style = PronounsFormat(style)
    canonical = PRONOUN_MAPPING[code]

    if style is PronounsFormat.CAPITALIZED or code in META_CODES:
        return canonical
    return canonical.lower()
