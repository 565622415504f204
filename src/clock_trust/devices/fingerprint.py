from __future__ import annotations

import base64
import hashlib
import re
from typing import Iterable, Optional

from ..core.constants import FINGERPRINT_LENGTH

_NON_ALNUM = re.compile(r"[^a-zA-Z0-9]")


def fingerprint(components: Iterable[Optional[object]], *, length: int = FINGERPRINT_LENGTH) -> str:
    """Stable opaque identifier for a set of environment attributes.

    Absent components (None) are skipped, so an environment that cannot run a
    probe still fingerprints consistently.
    """
    combined = "|".join(str(c) for c in components if c is not None)
    digest = hashlib.sha256(combined.encode("utf-8")).digest()
    return _NON_ALNUM.sub("", base64.b64encode(digest).decode("ascii"))[:length]
