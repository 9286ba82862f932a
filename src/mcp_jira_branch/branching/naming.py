"""Branch name derivation for issue branches."""

import re
import unicodedata
from dataclasses import dataclass
from enum import Enum

MAX_BRANCH_NAME_LENGTH = 100

# Lower-case Cyrillic letters (Russian, Ukrainian, Belarusian) to Latin.
_CYRILLIC = {
    "а": "a",
    "б": "b",
    "в": "v",
    "г": "g",
    "ґ": "g",
    "д": "d",
    "е": "e",
    "ё": "yo",
    "є": "ye",
    "ж": "zh",
    "з": "z",
    "и": "i",
    "і": "i",
    "ї": "yi",
    "й": "y",
    "к": "k",
    "л": "l",
    "м": "m",
    "н": "n",
    "о": "o",
    "п": "p",
    "р": "r",
    "с": "s",
    "т": "t",
    "у": "u",
    "ў": "u",
    "ф": "f",
    "х": "kh",
    "ц": "ts",
    "ч": "ch",
    "ш": "sh",
    "щ": "shch",
    "ъ": "",
    "ы": "y",
    "ь": "",
    "э": "e",
    "ю": "yu",
    "я": "ya",
}

TRANSLITERATION_TABLE: dict[str, str] = {
    **_CYRILLIC,
    **{letter.upper(): latin.capitalize() for letter, latin in _CYRILLIC.items()},
}

_NON_SLUG_RE = re.compile(r"[^a-z0-9]+")


class BranchLocation(str, Enum):
    LOCAL = "local"
    REMOTE = "remote"
    NONE = "none"


@dataclass(frozen=True)
class BranchSpec:
    """The branch to create for an issue."""

    raw_name: str
    sanitized_name: str
    source_branch: str
    location: BranchLocation = BranchLocation.NONE


def transliterate(text: str) -> str:
    """Replace Cyrillic letters by their Latin spelling and drop diacritics.

    >>> transliterate("Щука")
    'Shchuka'
    >>> transliterate("café")
    'cafe'
    """
    substituted = "".join(TRANSLITERATION_TABLE.get(char, char) for char in text)
    decomposed = unicodedata.normalize("NFKD", substituted)
    return "".join(char for char in decomposed if not unicodedata.combining(char))


def sanitize_branch_name(name: str, default: str = "branch") -> str:
    """Turn free text into a branch-safe slug.

    The result matches ``^[a-z0-9]+(-[a-z0-9]+)*$`` and is at most 100
    characters long. When nothing usable survives, ``default`` is returned.

    >>> sanitize_branch_name("Fix login  bug!")
    'fix-login-bug'
    """
    slug = _NON_SLUG_RE.sub("-", transliterate(name).lower()).strip("-")
    slug = slug[:MAX_BRANCH_NAME_LENGTH].rstrip("-")
    return slug or default


def derive_branch_spec(
    issue_key: str,
    custom_name: str | None = None,
    source_branch: str = "master",
    location: BranchLocation = BranchLocation.NONE,
) -> BranchSpec:
    """Build the branch spec for an issue.

    Without a custom name the lower-cased issue key is used as-is.
    """
    key_name = issue_key.strip().lower()
    if custom_name and custom_name.strip():
        raw_name = custom_name.strip()
        sanitized = sanitize_branch_name(raw_name, default=key_name or "branch")
    else:
        raw_name = issue_key
        sanitized = key_name
    return BranchSpec(
        raw_name=raw_name,
        sanitized_name=sanitized,
        source_branch=source_branch,
        location=location,
    )
