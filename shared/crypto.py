"""
Credential comparison helpers.
"""

from __future__ import annotations

import hmac
from typing import Optional


def codes_match(expected: Optional[str], submitted: Optional[str]) -> bool:
    """Return ``True`` when *submitted* equals the server-held *expected* code.

    Byte-for-byte equality of the UTF-8 encodings: no trimming, no case
    folding. Lone surrogates (valid in JSON strings) encode as-is and simply
    fail to match. A missing or empty expected code never matches. The comparison
    runs in constant time with respect to the contents.
    """
    if not expected or submitted is None:
        return False
    return hmac.compare_digest(
        expected.encode("utf-8", "surrogatepass"),
        submitted.encode("utf-8", "surrogatepass"),
    )
