import base64

import pytest

from lyricbridge.app.core.errors import UpstreamTransportError
from lyricbridge.app.utils.catalog import CatalogCandidate
from lyricbridge.app.utils.lyric_decoder import LyricVariant, decode_lyric_payload
from lyricbridge.app.utils.lyrics_lookup import LyricsLookupService, build_lyric_result

LRC = "[ti:当]\n[ar:动力火车]\n[00:12.30]假如把犯得起的错\n[00:16.80]能错的都错过"
WORD_SYNCED = "[00:01.00]<0.1.2>Hello <0.2.3>world\n[00:03.00]<3.0.1>Second <3.5.1>line"

DONG = {
    "id": 1,
    "mid": "003dong",
    "song": "当",
    "singer": [{"name": "动力火车"}],
    "album": {"name": "Power Station"},
    "interval": "3分45秒",
}
DONG_COVER = {
    "id": 2,
    "mid": "003cover",
    "song": "当",
    "singer": [{"name": "Cover Band"}],
    "album": "Karaoke Hits",
    "interval": "03:50",
}


@pytest.mark.asyncio
async def test_lookup_builds_response(catalog, provider_factory):
    catalog.add_song("当 动力火车", [DONG_COVER, DONG])
    catalog.lyrics["id=1"] = {"code": 200, "data": {"lrc": LRC}}
    async with provider_factory() as provider:
        result = await LyricsLookupService(provider).lookup("当", "动力火车")

    assert result is not None
    assert result.id == 1
    assert result.trackName == "当"
    assert result.artistName == "动力火车"
    assert result.albumName == "Power Station"
    assert result.duration == 225
    assert result.instrumental is False
    assert result.plainLyrics == "假如把犯得起的错\n能错的都错过"
    assert "[00:12.30]假如把犯得起的错" in result.syncedLyrics
    assert result.translatedLyrics is None


@pytest.mark.asyncio
async def test_strategies_stop_after_first_match(catalog, provider_factory):
    catalog.add_song("当 动力火车", [DONG])
    async with provider_factory() as provider:
        await LyricsLookupService(provider).lookup("当", "动力火车")
    assert catalog.search_words == ["当 动力火车"]


@pytest.mark.asyncio
async def test_later_strategy_can_match(catalog, provider_factory):
    catalog.add_song("当", [DONG])
    async with provider_factory() as provider:
        result = await LyricsLookupService(provider).lookup("当 (Live)", "动力火车")
    assert result is not None and result.id == 1
    assert catalog.search_words == ["当 动力火车", "当"]


@pytest.mark.asyncio
async def test_not_found_returns_none(catalog, provider_factory):
    async with provider_factory() as provider:
        result = await LyricsLookupService(provider).lookup("Nothing", "Nobody")
    assert result is None
    words = catalog.search_words
    assert words[0] == "Nothing Nobody"
    assert words[-1] == "Nobody"
    assert len(words) == len(set(w.lower() for w in words))


@pytest.mark.asyncio
async def test_every_strategy_failing_raises(catalog, provider_factory):
    catalog.failing_words.add("*")
    async with provider_factory() as provider:
        with pytest.raises(UpstreamTransportError):
            await LyricsLookupService(provider).lookup("当", "动力火车")
    assert len(catalog.search_words) >= 2


@pytest.mark.asyncio
async def test_partial_failure_is_not_an_error(catalog, provider_factory):
    catalog.failing_words.add("当 动力火车")
    async with provider_factory() as provider:
        result = await LyricsLookupService(provider).lookup("当", "动力火车")
    assert result is None


@pytest.mark.asyncio
async def test_word_synced_base64_lyrics(catalog, provider_factory):
    catalog.lyrics["id=1"] = {
        "code": 200,
        "data": {"yrc": base64.b64encode(WORD_SYNCED.encode("utf-8")).decode("ascii"), "lrc": LRC},
    }
    candidate = CatalogCandidate.from_row(DONG)
    async with provider_factory() as provider:
        lyrics = await LyricsLookupService(provider).fetch_lyrics(candidate)
    assert lyrics.variant is LyricVariant.word_synced
    assert lyrics.synced_lyrics == WORD_SYNCED
    assert lyrics.plain_lyrics == "Hello world\nSecond line"
    assert lyrics.is_instrumental is False


@pytest.mark.asyncio
async def test_lyrics_fall_back_to_mid(catalog, provider_factory):
    catalog.failing_lyric_keys.add("id=1")
    catalog.lyrics["mid=003dong"] = {"code": 200, "data": {"lrc": LRC}}
    candidate = CatalogCandidate.from_row(DONG)
    async with provider_factory() as provider:
        lyrics = await LyricsLookupService(provider).fetch_lyrics(candidate)
    assert lyrics.plain_lyrics == "假如把犯得起的错\n能错的都错过"


@pytest.mark.asyncio
async def test_unreachable_lyrics_give_instrumental_record(catalog, provider_factory):
    catalog.add_song("当 动力火车", [DONG])
    catalog.failing_lyric_keys.update({"id=1", "mid=003dong"})
    async with provider_factory() as provider:
        result = await LyricsLookupService(provider).lookup("当", "动力火车")
    assert result is not None
    assert result.instrumental is True
    assert result.plainLyrics == ""
    assert result.syncedLyrics == ""


@pytest.mark.asyncio
async def test_metadata_only_lyrics_are_instrumental(catalog, provider_factory):
    catalog.add_song("当 动力火车", [DONG])
    catalog.lyrics["id=1"] = {"code": 200, "data": {"lrc": "[ti:当]\n[ar:动力火车]\n[00:00.00]//"}}
    async with provider_factory() as provider:
        result = await LyricsLookupService(provider).lookup("当", "动力火车")
    assert result.instrumental is True
    assert result.syncedLyrics == ""


@pytest.mark.asyncio
async def test_translation_and_end_time_repair(catalog, provider_factory):
    catalog.add_song("当 动力火车", [DONG])
    catalog.lyrics["id=1"] = {
        "code": 200,
        "data": {"lrc": LRC, "trans": "[00:12.30]If I could make every mistake"},
    }
    async with provider_factory() as provider:
        service = LyricsLookupService(provider, fix_end_time=True, end_time_padding=2)
        result = await service.lookup("当", "动力火车")
    assert result.translatedLyrics == "[00:12.30]If I could make every mistake"
    assert result.syncedLyrics.endswith("\n[00:18.80]")


@pytest.mark.asyncio
async def test_title_mapping_changes_search_title(catalog, provider_factory):
    catalog.add_song("当 动力火车", [DONG])
    async with provider_factory() as provider:
        service = LyricsLookupService(provider, title_mappings={"dong_动力火车": "当"})
        result = await service.lookup("Dong", "动力火车")
    assert result is not None and result.id == 1
    assert catalog.search_words[0] == "当 动力火车"


def test_end_time_repair_keeps_provider_closing_stamp():
    payload = decode_lyric_payload({"lrc": "[00:10.00]first\n[00:20.00]last\n[00:45.00]"})
    result = build_lyric_result(payload, fix_end_time=True)
    assert result.synced_lyrics == "[00:10.00]first\n[00:20.00]last\n[00:45.00]"
    assert result.plain_lyrics == "first\nlast"


def test_end_time_repair_replaces_stale_closing_stamp():
    payload = decode_lyric_payload({"lrc": "[00:10.00]first\n[00:20.00]last\n[00:05.00]"})
    result = build_lyric_result(payload, fix_end_time=True)
    assert result.synced_lyrics == "[00:10.00]first\n[00:20.00]last\n[00:23.00]"


def test_closing_stamp_is_dropped_without_repair():
    payload = decode_lyric_payload({"lrc": "[00:10.00]first\n[00:20.00]last\n[00:45.00]"})
    assert build_lyric_result(payload).synced_lyrics == "[00:10.00]first\n[00:20.00]last"


def test_lyric_type_follows_served_variant():
    word = build_lyric_result(decode_lyric_payload({"yrc": WORD_SYNCED}))
    line = build_lyric_result(decode_lyric_payload({"lrc": LRC}))
    empty = build_lyric_result(decode_lyric_payload({"lrc": "[ti:当]\n[00:00.00]//"}))
    assert word.lyric_type == "yrc"
    assert line.lyric_type == "lrc"
    assert empty.lyric_type == "none"
