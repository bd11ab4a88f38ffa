"""
File: utils.py
Purpose: Small helpers shared by routes (timestamps, request ids, document digests).
"""

import base64
import json
import random
import string
import time
from datetime import datetime, timezone
from typing import Any

_ID_ALPHABET = string.digits + string.ascii_lowercase


def utc_timestamp() -> str:
    """Return ISO-8601 UTC time with millisecond precision, e.g. 2024-05-01T12:00:00.000Z."""
    now = datetime.now(timezone.utc)
    return now.strftime("%Y-%m-%dT%H:%M:%S.") + f"{now.microsecond // 1000:03d}Z"


def new_request_id() -> str:
    """Debuggable, unique-enough id: req_<epoch ms>_<9 base36 chars>. Not for security use."""
    suffix = "".join(random.choices(_ID_ALPHABET, k=9))
    return f"req_{int(time.time() * 1000)}_{suffix}"


def document_digest(data: Any) -> str:
    """Base64 of the compact JSON serialization; used for ETag and checksum."""
    raw = json.dumps(data, separators=(",", ":"), ensure_ascii=False)
    return base64.b64encode(raw.encode("utf-8")).decode("ascii")
