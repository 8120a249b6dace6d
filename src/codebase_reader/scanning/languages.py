"""Language profiles: comment syntax used for line classification.

Adding a language means adding a parser and, for accurate comment counts,
a LanguageProfile entry below. Languages without a profile classify every
non-blank line as code.
"""

from dataclasses import dataclass, field
from typing import Optional


@dataclass(frozen=True)
class LanguageProfile:
    """Comment syntax for a language.

    Attributes:
        name: Lower-case language key
        line_comments: Prefixes that make a stripped line a comment
        block_comments: (open, close) delimiter pairs
        block_at_line_start: Block delimiters only count when they open the
            line (Python docstrings, as opposed to string literals)
    """

    name: str
    line_comments: tuple[str, ...] = ()
    block_comments: tuple[tuple[str, str], ...] = field(default_factory=tuple)
    block_at_line_start: bool = False


LANGUAGES = {
    "go": LanguageProfile(
        name="go",
        line_comments=("//",),
        block_comments=(("/*", "*/"),),
    ),
    "python": LanguageProfile(
        name="python",
        line_comments=("#",),
        block_comments=(('"""', '"""'), ("'''", "'''")),
        block_at_line_start=True,
    ),
}


def get_language_profile(name: str) -> Optional[LanguageProfile]:
    """Look up a profile by language name (case-insensitive)."""
    return LANGUAGES.get(name.lower())
