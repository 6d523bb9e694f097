"""
Inflector - String case conversion and singularization for record and field names.

Record names are CamelCase ("UserProfile"), field names are camelCase
("firstName"). Both conversions accept snake_case, kebab-case, spaced and
PascalCase input and are idempotent.
"""

from __future__ import annotations

import re
from typing import List, Tuple

_WORD_SEPARATORS = re.compile(r"[\s_\-]+")

# Ordered: the first matching rule wins
_SINGULAR_RULES: List[Tuple[str, str]] = [
    (r"(s)tatuses$", r"\1tatus"),
    (r"^(.*)(menu)s$", r"\1\2"),
    (r"(quiz)zes$", r"\1"),
    (r"(matr)ices$", r"\1ix"),
    (r"(vert|ind)ices$", r"\1ex"),
    (r"^(ox)en", r"\1"),
    (r"(alias|lens)(es)*$", r"\1"),
    (r"(alumn|bacill|cact|foc|fung|nucle|radi|stimul|syllab|termin|viri?)i$", r"\1us"),
    (r"([ftw]ax)es", r"\1"),
    (r"(cris|ax|test)es$", r"\1is"),
    (r"(shoe)s$", r"\1"),
    (r"(o)es$", r"\1"),
    (r"ouses$", "ouse"),
    (r"([^a])uses$", r"\1us"),
    (r"([m|l])ice$", r"\1ouse"),
    (r"(x|ch|ss|sh)es$", r"\1"),
    (r"(m)ovies$", r"\1ovie"),
    (r"(s)eries$", r"\1eries"),
    (r"([^aeiouy]|qu)ies$", r"\1y"),
    (r"([lr])ves$", r"\1f"),
    (r"(tive)s$", r"\1"),
    (r"(hive)s$", r"\1"),
    (r"(drive)s$", r"\1"),
    (r"([^fo])ves$", r"\1fe"),
    (r"(^analy)ses$", r"\1sis"),
    (r"(analy|diagno|parenthe|progno|synop|the|empha|cri|ne)ses$", r"\1sis"),
    (r"([ti])a$", r"\1um"),
    (r"(p)eople$", r"\1erson"),
    (r"(m)en$", r"\1an"),
    (r"(c)hildren$", r"\1hild"),
    (r"(n)ews$", r"\1ews"),
    (r"eaus$", "eau"),
    (r"^(.*us)$", r"\1"),
    (r"s$", ""),
]

# Case-sensitive rules (the rest ignore case)
_CASE_SENSITIVE = {r"ouses$", r"([^a])uses$", r"eaus$", r"^(.*us)$"}

_COMPILED_RULES = [
    (re.compile(pattern) if pattern in _CASE_SENSITIVE else re.compile(pattern, re.IGNORECASE), replacement)
    for pattern, replacement in _SINGULAR_RULES
]

_UNINFLECTED = re.compile(
    r"^(.*[nrlm]ese|.*data|.*deer|.*fish|.*measles|.*media|.*news|.*offspring"
    r"|.*pox|.*series|.*sheep|.*species|.*swiss)$",
    re.IGNORECASE,
)

_IRREGULAR = {
    "foes": "foe",
    "waves": "wave",
    "curves": "curve",
    "employees": "employee",
    "slaves": "slave",
    "moves": "move",
    "feet": "foot",
    "geese": "goose",
    "teeth": "tooth",
    "criteria": "criterion",
}


def ucfirst(value: str) -> str:
    """Uppercase the first character, leaving the rest untouched."""
    return value[:1].upper() + value[1:]


def lcfirst(value: str) -> str:
    """Lowercase the first character, leaving the rest untouched."""
    return value[:1].lower() + value[1:]


def camelize(value: str) -> str:
    """
    Convert a string to CamelCase.

    Examples:
        >>> camelize("user_profile")
        'UserProfile'
        >>> camelize("User Profile")
        'UserProfile'
    """
    return "".join(ucfirst(word) for word in _WORD_SEPARATORS.split(value) if word)


def variable(value: str) -> str:
    """Convert a string to camelCase (first letter lowercase)."""
    return lcfirst(camelize(value))


def singularize(word: str) -> str:
    """Return the singular form of an English word."""
    if not word:
        return word

    if _UNINFLECTED.match(word):
        return word

    irregular = _IRREGULAR.get(word.lower())
    if irregular is not None:
        if word[0].isupper():
            return ucfirst(irregular)
        return irregular

    for pattern, replacement in _COMPILED_RULES:
        if pattern.search(word):
            return pattern.sub(replacement, word)

    return word


__all__ = ["camelize", "variable", "ucfirst", "lcfirst", "singularize"]
