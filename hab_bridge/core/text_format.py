from __future__ import annotations

import re


_CASE_BOUNDARY = re.compile(r"([a-z\d])([A-Z]+)")
_DASH_OR_SPACE_RUN = re.compile(r"[-\s]+")
_TRAILING_ID = re.compile(r"_id\Z")


def underscored(text: str) -> str:
    result = _CASE_BOUNDARY.sub(r"\1_\2", text.strip())
    result = _DASH_OR_SPACE_RUN.sub("_", result)
    return _CASE_BOUNDARY.sub(r"\1_\2", result.lower())


def upper_first(text: str) -> str:
    return text[:1].upper() + text[1:]


def humanize(text: str) -> str:
    """Turn an identifier like ``livingRoom_light_id`` into ``Living room light``.

    The ``_id`` strip and underscore replacement run twice; the second pass
    never changes anything but is kept so labels match the ones the editor
    extension always produced.
    """
    result = underscored(text)
    result = _TRAILING_ID.sub("", result).replace("_", " ")
    result = _TRAILING_ID.sub("", result).replace("_", " ")
    return upper_first(result.strip())
