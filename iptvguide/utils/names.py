"""
Channel name normalization used to match playlist titles against guide display names.
"""
import re


_NON_ALNUM_RE = re.compile(r"[^a-z0-9]+")


def normalize_name(name: str | None) -> str:
    """
    Map display text to a canonical comparison key

    Lower-cases, collapses every run of characters outside [a-z0-9] into a
    single space and trims. "ESPN HD!!" and "espn-hd" both become "espn hd".
    """
    if not name:
        return ""
    return _NON_ALNUM_RE.sub(" ", name.lower()).strip()
