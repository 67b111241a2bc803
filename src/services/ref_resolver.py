"""Turns ref descriptors sent by the UI into git revisions."""

from typing import Optional

from .errors import InvalidRefError

HEAD = "HEAD"
WORKING = "working"


def resolve_ref(ref_text: str) -> Optional[str]:
    """
    Resolve a ref descriptor.

    ``"<label>:<value>"`` resolves to ``value``; the label ("branch",
    "commit", ...) is only a hint for the UI. ``"HEAD"`` resolves to itself
    and ``"working"`` resolves to ``None``, meaning the uncommitted working
    tree. Anything else raises ``InvalidRefError``.
    """
    label, separator, value = ref_text.partition(":")
    if separator:
        if not label or not value:
            raise InvalidRefError(f"Invalid ref text: {ref_text}")
        return value

    if ref_text == HEAD:
        return HEAD

    if ref_text == WORKING:
        return None

    raise InvalidRefError(f"Invalid ref text: {ref_text}")
