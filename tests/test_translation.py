from __future__ import annotations

from unittest.mock import MagicMock

import pytest
import requests

from article_scraper.translation import (
    API_URL,
    FAILED_PREFIX,
    NO_KEY_PREFIX,
    Translator,
    parse_translation,
)


def _translator(status_code=200, payload=None, error=None):
    response = MagicMock()
    response.status_code = status_code
    response.text = str(payload)
    if isinstance(payload, Exception):
        response.json.side_effect = payload
    else:
        response.json.return_value = payload
    session = MagicMock()
    if error is not None:
        session.post.side_effect = error
    else:
        session.post.return_value = response
    return Translator("es", "en", api_key="key", api_host="host", session=session), session


@pytest.mark.parametrize(
    "payload, expected",
    [
        ({"response": "The war"}, "The war"),
        ({"data": {"translations": [{"translatedText": "The peace"}]}}, "The peace"),
        ({"translation": "Legacy"}, "Legacy"),
        ({"response": "  ", "translation": "Second choice"}, "Second choice"),
        ({"data": {"translations": []}}, None),
        (["not", "a", "dict"], None),
    ],
)
def test_parse_translation_shapes(payload, expected):
    assert parse_translation(payload) == expected


def test_translate_posts_expected_request():
    translator, session = _translator(payload={"response": "The war"})

    assert translator.translate("La guerra") == "The war"
    session.post.assert_called_once_with(
        API_URL,
        json={"sl": "es", "tl": "en", "text": "La guerra"},
        headers={
            "Content-Type": "application/json",
            "X-RapidAPI-Key": "key",
            "X-RapidAPI-Host": "host",
        },
        timeout=15,
    )


def test_missing_api_key_marks_original():
    session = MagicMock()
    translator = Translator(api_key="", session=session)

    assert translator.translate("Hola") == NO_KEY_PREFIX + "Hola"
    session.post.assert_not_called()


def test_blank_text_is_returned_unchanged():
    translator, session = _translator(payload={"response": "x"})

    assert translator.translate("  ") == "  "
    assert translator.translate(None) is None
    session.post.assert_not_called()


def test_server_error_falls_back():
    translator, _ = _translator(status_code=500, payload={"message": "oops"})

    assert translator.translate("Hola") == FAILED_PREFIX + "Hola"


def test_rate_limit_waits_then_falls_back(monkeypatch):
    sleeps = []
    monkeypatch.setattr("article_scraper.translation.time.sleep", sleeps.append)
    translator, _ = _translator(status_code=429, payload={})

    assert translator.translate("Hola") == FAILED_PREFIX + "Hola"
    assert sleeps == [2.0]


def test_network_error_falls_back():
    translator, _ = _translator(error=requests.Timeout("slow"))

    assert translator.translate("Hola") == FAILED_PREFIX + "Hola"


def test_unparseable_body_falls_back():
    translator, _ = _translator(status_code=221, payload=ValueError("not json"))

    assert translator.translate("Hola") == FAILED_PREFIX + "Hola"
