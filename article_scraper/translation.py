"""Title translation through the RapidAPI "Top Google Translate" endpoint."""

from __future__ import annotations

import logging
import os
import time
from typing import Any, Optional

import requests

logger = logging.getLogger("article_scraper")

API_URL = "https://top-google-translate.p.rapidapi.com/v3/translate"
DEFAULT_API_HOST = "top-google-translate.p.rapidapi.com"
TIMEOUT_SECONDS = 15
RATE_LIMIT_PAUSE = 2.0
FAILED_PREFIX = "[TRANSLATION FAILED] "
NO_KEY_PREFIX = "[NO API KEY] "


def parse_translation(payload: Any) -> Optional[str]:
    """Return the translated text from any of the known response shapes."""
    if not isinstance(payload, dict):
        return None
    direct = payload.get("response")
    if isinstance(direct, str) and direct.strip():
        return direct
    data = payload.get("data")
    if isinstance(data, dict):
        translations = data.get("translations")
        if isinstance(translations, list) and translations:
            first = translations[0]
            if isinstance(first, dict):
                text = first.get("translatedText")
                if isinstance(text, str) and text.strip():
                    return text
    legacy = payload.get("translation")
    if isinstance(legacy, str) and legacy.strip():
        return legacy
    return None


class Translator:
    """Translate short strings, falling back to a marked original on error."""

    def __init__(
        self,
        source: str = "es",
        target: str = "en",
        api_key: Optional[str] = None,
        api_host: Optional[str] = None,
        session: Optional[requests.Session] = None,
    ) -> None:
        self.source = source
        self.target = target
        self.api_key = api_key if api_key is not None else os.getenv("TRANSLATION_API_KEY")
        self.api_host = api_host or os.getenv("RAPIDAPI_HOST") or DEFAULT_API_HOST
        self.session = session or requests.Session()

    def translate(self, text: Optional[str]) -> Optional[str]:
        if text is None or not text.strip():
            return text
        if not self.api_key:
            logger.warning("RapidAPI key not set.")
            return NO_KEY_PREFIX + text

        headers = {
            "Content-Type": "application/json",
            "X-RapidAPI-Key": self.api_key,
            "X-RapidAPI-Host": self.api_host,
        }
        body = {"sl": self.source, "tl": self.target, "text": text}
        logger.info("Translating: %r", text)
        try:
            resp = self.session.post(
                API_URL, json=body, headers=headers, timeout=TIMEOUT_SECONDS
            )
        except requests.RequestException as exc:
            logger.error("Translation error: %s", exc)
            return FAILED_PREFIX + text

        logger.debug("Response [%s]: %s", resp.status_code, resp.text)
        if resp.status_code == 429:
            logger.warning("Rate limited. Waiting %.0fs...", RATE_LIMIT_PAUSE)
            time.sleep(RATE_LIMIT_PAUSE)
            return FAILED_PREFIX + text
        if resp.status_code not in (200, 221):
            logger.error("API error %s: %s", resp.status_code, resp.text)
            return FAILED_PREFIX + text

        try:
            translated = parse_translation(resp.json())
        except ValueError as exc:
            logger.error("Parse error: %s", exc)
            return FAILED_PREFIX + text
        if translated is None:
            logger.warning("Unknown response structure: %s", resp.text)
            return FAILED_PREFIX + text
        logger.info("%r -> %r", text, translated)
        return translated

    def close(self) -> None:
        self.session.close()
