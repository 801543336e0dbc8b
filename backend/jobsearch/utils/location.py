import re

# Punctuation stripped before comparing free-text locations.
_PUNCTUATION_RE = re.compile(r"[.,/#!$%^&*;:{}=\-_`~()]")
_WHITESPACE_RE = re.compile(r"\s+")


def normalize_location(location: str | None) -> str:
    """Canonicalize a location string for substring comparison.

    "Palermo, CABA" and "palermo  caba" both become "palermo caba".
    """
    if not location:
        return ""
    text = _PUNCTUATION_RE.sub("", location.lower())
    return _WHITESPACE_RE.sub(" ", text).strip()


def location_matches(job_location: str | None, needle: str) -> bool:
    if not job_location:
        return False
    return normalize_location(needle) in normalize_location(job_location)
