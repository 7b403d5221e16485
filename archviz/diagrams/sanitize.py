"""
Identifier and label helpers shared by every diagram view.
"""

import re

_ID_SEPARATORS = re.compile(r"::|[-<>()\[\], &*']")
_UNDERSCORE_RUNS = re.compile(r"__+")


def sanitize_id(name: str) -> str:
    """
    Turn a fully-qualified name into a diagram node identifier.

    `crate::domain::User` -> `crate_domain_User`. Separators and type
    punctuation become underscores, underscore runs collapse to one and
    leading/trailing underscores are dropped, so the function is
    idempotent.
    """
    safe = _ID_SEPARATORS.sub("_", name)
    safe = _UNDERSCORE_RUNS.sub("_", safe)
    return safe.strip("_")


def sanitize_type(ty: str) -> str:
    """Make a textual type safe inside a class diagram member line."""
    return (ty.replace("<", "~")
            .replace(">", "~")
            .replace(",", " ")
            .replace('"', "'"))


def parent_module(full_name: str) -> str:
    """`crate::domain::User` -> `crate::domain`; "" for unqualified names."""
    if "::" not in full_name:
        return ""
    return full_name.rsplit("::", 1)[0]


def short_name(path: str) -> str:
    return path.rsplit("::", 1)[-1]
