"""imaging.providers.gemini

Gemini image provider.

- Supports google-genai (preferred) and google-generativeai (legacy).
- Always returns an ImageHandle or raises ServiceUnavailable / NoImageReturned.

Important: This provider is UI-agnostic (no Streamlit dependency).
Secrets/env loading is done in the Streamlit app.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, List, Optional

from core.state import Substance

from ..errors import NoImageReturned, ServiceUnavailable
from ..parsing import extract_inline_image, extract_text
from ..prompts import build_edit_prompt, build_scan_prompt
from ..schemas import ImageHandle, normalize_mime, validate_image
from .base import ProviderStatus

log = logging.getLogger("neuropath.imaging")

IMAGE_MODELS = [
    "gemini-2.5-flash-image",
    "gemini-2.5-flash-image-preview",
    "gemini-2.0-flash-preview-image-generation",
]


@dataclass
class GeminiImageProvider:
    api_keys: List[str]

    # runtime
    backend: str = "none"  # genai | legacy | none
    model_in_use: str = ""
    last_error: str = ""

    _client: Any = None
    _legacy: Any = None

    def __post_init__(self) -> None:
        self.api_keys = [k.strip() for k in (self.api_keys or []) if str(k).strip()]
        self._init_backend()

    @staticmethod
    def from_api_key_string(raw: str) -> "GeminiImageProvider":
        if not raw:
            return GeminiImageProvider([])
        raw = str(raw)
        keys = [x.strip() for x in raw.split(",") if x.strip()] if "," in raw else [raw.strip()]
        return GeminiImageProvider(keys)

    @staticmethod
    def with_client(client: Any, backend: str = "genai") -> "GeminiImageProvider":
        """Provider bound to a ready client (tests, custom transports)."""
        p = GeminiImageProvider([])
        if backend == "legacy":
            p._legacy = client
        else:
            p._client = client
        p.backend = backend
        p.model_in_use = IMAGE_MODELS[0]
        p.last_error = ""
        return p

    def _init_backend(self) -> None:
        self._client = None
        self._legacy = None
        self.backend = "none"
        self.model_in_use = ""

        if not self.api_keys:
            self.last_error = "No API key configured."
            return

        # Try new SDK: google-genai
        try:
            from google import genai  # type: ignore

            self._client = genai.Client(api_key=self.api_keys[0])
            self.backend = "genai"
            self.model_in_use = IMAGE_MODELS[0]
            self.last_error = ""
            return
        except Exception as e:
            self.last_error = f"google-genai missing/failed: {e}"

        # Try legacy: google-generativeai
        try:
            import google.generativeai as genai_legacy  # type: ignore

            genai_legacy.configure(api_key=self.api_keys[0])
            self._legacy = genai_legacy
            self.backend = "legacy"
            self.model_in_use = IMAGE_MODELS[0]
            self.last_error = ""
            return
        except Exception as e:
            self.backend = "none"
            self.last_error = f"google-generativeai missing/failed: {e}"

    def status(self) -> ProviderStatus:
        if self.backend == "none":
            return ProviderStatus(False, "none", "", note="", error=str(self.last_error or ""))
        return ProviderStatus(True, self.backend, self.model_in_use, note="", error="")

    def _rotate_key(self) -> None:
        if len(self.api_keys) <= 1:
            return
        self.api_keys = self.api_keys[1:] + self.api_keys[:1]
        self._init_backend()

    def _call(self, model: str, text: str, image: Optional[ImageHandle]) -> Any:
        if self.backend == "genai" and self._client is not None:
            if image is None:
                return self._client.models.generate_content(model=model, contents=text)
            from google.genai import types  # type: ignore

            part = types.Part.from_bytes(data=image.to_bytes(), mime_type=image.mime_type)
            return self._client.models.generate_content(model=model, contents=[text, part])

        if self.backend == "legacy" and self._legacy is not None:
            gm = self._legacy.GenerativeModel(model)
            if image is None:
                return gm.generate_content(text)
            return gm.generate_content([text, {"mime_type": image.mime_type, "data": image.to_bytes()}])

        raise ServiceUnavailable(self.last_error or "Gemini backend not initialised.")

    def _generate_image(self, text: str, image: Optional[ImageHandle], missing: str) -> ImageHandle:
        if self.backend == "none":
            raise ServiceUnavailable(self.last_error or "Gemini backend not initialised.")

        last_err: Optional[Exception] = None
        empty_reply = ""
        got_reply = False

        for _ in range(max(1, len(self.api_keys))):
            for m in IMAGE_MODELS:
                try:
                    resp = self._call(m, text, image)
                except ServiceUnavailable:
                    raise
                except Exception as e:
                    last_err = e
                    log.warning("gemini image call failed (model=%s): %s", m, e)
                    continue

                found = extract_inline_image(resp)
                if found:
                    mime, data = found
                    handle = ImageHandle(mime_type=normalize_mime(mime), data=data)
                    try:
                        validate_image(handle)
                    except ValueError as e:
                        got_reply = True
                        log.warning("gemini returned an unreadable image (model=%s): %s", m, e)
                        continue
                    self.model_in_use = m
                    self.last_error = ""
                    return handle

                got_reply = True
                empty_reply = extract_text(resp) or empty_reply
                log.warning("gemini returned no image (model=%s)", m)

            self._rotate_key()

        if got_reply:
            self.last_error = missing + (f": {empty_reply[:200]}" if empty_reply else "")
            raise NoImageReturned(self.last_error)
        self.last_error = f"Gemini error: {last_err}" if last_err else "Gemini did not respond."
        raise ServiceUnavailable(self.last_error)

    def generate(self, dopamine: float, serotonin: float, substance: Substance) -> ImageHandle:
        prompt = build_scan_prompt(float(dopamine), float(serotonin), Substance(substance))
        return self._generate_image(prompt, None, "No image data generated")

    def edit(self, image: ImageHandle, instruction: str) -> ImageHandle:
        if not (instruction or "").strip():
            raise ValueError("edit instruction is empty")
        validate_image(image)
        return self._generate_image(build_edit_prompt(instruction), image, "No edited image returned")
