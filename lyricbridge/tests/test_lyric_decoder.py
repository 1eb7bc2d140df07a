import base64

import pytest

from lyricbridge.app.utils.lyric_decoder import (
    LyricVariant,
    decode_lyric_payload,
    looks_like_lyric,
    maybe_decode_base64,
)

WORD_SYNCED = "[00:01.00]<0.1.2>Hello <0.2.3>world\n[00:03.00]<3.0.1>Second <3.5.1>line"
LINE_SYNCED = "[ti:当]\n[ar:动力火车]\n[00:12.30]假如把犯得起的错\n[00:16.80]能错的都错过"


def _b64(text: str) -> str:
    return base64.b64encode(text.encode("utf-8")).decode("ascii")


def test_word_synced_base64_is_decoded_and_preferred():
    payload = decode_lyric_payload({"yrc": _b64(WORD_SYNCED), "lyric": LINE_SYNCED})
    assert payload.variant is LyricVariant.word_synced
    assert payload.raw_content == WORD_SYNCED
    assert payload.is_base64_encoded is True


def test_line_synced_raw_content_is_kept():
    payload = decode_lyric_payload({"lrc": LINE_SYNCED})
    assert payload.variant is LyricVariant.line_synced
    assert payload.raw_content == LINE_SYNCED
    assert payload.is_base64_encoded is False


def test_line_synced_base64_lyric_field():
    payload = decode_lyric_payload({"lyric": _b64(LINE_SYNCED)})
    assert payload.variant is LyricVariant.line_synced
    assert payload.raw_content == LINE_SYNCED
    assert payload.is_base64_encoded is True


def test_translation_is_extracted_independently():
    trans = "[00:12.30]If I could make every mistake"
    payload = decode_lyric_payload({"trans": _b64(trans)})
    assert payload.variant is LyricVariant.none
    assert payload.raw_content == ""
    assert payload.translation == trans
    assert payload.translation_is_base64_encoded is True

    both = decode_lyric_payload({"lrc": LINE_SYNCED, "tlrc": trans})
    assert both.variant is LyricVariant.line_synced
    assert both.translation == trans


@pytest.mark.parametrize(
    "response",
    [None, {}, {"lyric": ""}, {"lyric": None}, {"code": 404, "data": {"lrc": LINE_SYNCED}}, "junk"],
)
def test_missing_lyrics_mean_none_variant(response):
    payload = decode_lyric_payload(response)
    assert payload.variant is LyricVariant.none
    assert payload.raw_content == ""


def test_full_envelope_is_unwrapped():
    payload = decode_lyric_payload({"code": 200, "data": {"lrc": LINE_SYNCED}})
    assert payload.variant is LyricVariant.line_synced
    assert payload.raw_content == LINE_SYNCED


def test_failed_decode_keeps_raw_content():
    assert maybe_decode_base64("not base64!!") == ("not base64!!", False)
    # valid base64 but not UTF-8
    assert maybe_decode_base64("//76") == ("//76", False)
    # valid base64 of text without lyric structure: strict rejects, permissive accepts
    encoded = _b64("just some words")
    assert maybe_decode_base64(encoded) == (encoded, False)
    assert maybe_decode_base64(encoded, permissive=True) == ("just some words", True)
    assert maybe_decode_base64("") == ("", False)
    assert maybe_decode_base64(None) == ("", False)


def test_base64_with_line_breaks_is_accepted():
    encoded = _b64(LINE_SYNCED)
    wrapped = "\n".join(encoded[i:i + 20] for i in range(0, len(encoded), 20))
    assert maybe_decode_base64(wrapped) == (LINE_SYNCED, True)


def test_looks_like_lyric():
    assert looks_like_lyric("[00:01.00]hi")
    assert looks_like_lyric("<0.1.2>hi")
    assert looks_like_lyric("[1000,2000]hi(1000,200)")
    assert not looks_like_lyric("plain words here")
    assert looks_like_lyric("plain words here", permissive=True)
    assert not looks_like_lyric("short", permissive=True)
    assert not looks_like_lyric("", permissive=True)
