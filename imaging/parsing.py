"""imaging.parsing

Pulling image payloads out of SDK responses (candidates -> content -> parts -> inline_data).

Both google-genai and google-generativeai responses share the part layout,
so access is attribute-based and tolerant of missing levels.
"""

from __future__ import annotations

import base64
from typing import Any, Optional, Tuple


def _parts(resp: Any) -> list:
    candidates = getattr(resp, "candidates", None) or []
    if not candidates:
        return []
    content = getattr(candidates[0], "content", None)
    return list(getattr(content, "parts", None) or [])


def extract_inline_image(resp: Any) -> Optional[Tuple[str, str]]:
    """First inline image in a response as (mime_type, base64), or None.

    SDKs hand back raw bytes; some test doubles and REST shims hand back base64 text.
    """
    for part in _parts(resp):
        inline = getattr(part, "inline_data", None)
        if inline is None:
            continue
        data = getattr(inline, "data", None)
        if not data:
            continue
        mime = getattr(inline, "mime_type", None) or "image/png"
        if isinstance(data, (bytes, bytearray)):
            return str(mime), base64.b64encode(bytes(data)).decode("ascii")
        return str(mime), str(data)
    return None


def extract_text(resp: Any) -> str:
    """Concatenated text parts (the model sometimes explains instead of drawing)."""
    out = []
    for part in _parts(resp):
        txt = getattr(part, "text", None)
        if txt:
            out.append(str(txt))
    return " ".join(out).strip()
