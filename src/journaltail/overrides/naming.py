"""Default filesystem-safe encoding of session names.

Any reversible pair works; pass your own to ``OverrideMerger`` to match the
names an existing tool already wrote.
"""

from urllib.parse import quote, unquote


def sanitize(name: str) -> str:
    # "." separates the token from the prefix and suffix, so it is escaped too
    return quote(name, safe="").replace(".", "%2E")


def desanitize(token: str) -> str:
    return unquote(token)
