from lyricbridge.app.utils.catalog import CatalogCandidate, parse_search_rows
from lyricbridge.app.utils.fields import (
    ListField,
    MissingField,
    ObjectField,
    ScalarField,
    classify_field,
    extract_album,
    extract_artists,
    extract_song_title,
)


def test_classify_field_variants():
    assert isinstance(classify_field(None), MissingField)
    assert isinstance(classify_field("  "), MissingField)
    assert classify_field("Jay") == ScalarField("Jay")
    assert classify_field(42) == ScalarField("42")
    assert isinstance(classify_field({"name": "x"}), ObjectField)
    listed = classify_field([{"name": "a"}, "b"])
    assert isinstance(listed, ListField)
    assert listed.items[1] == ScalarField("b")


def test_extract_artists_list_of_objects_keeps_order_and_skips_blanks():
    singer = [
        {"name": "周杰伦"},
        {"mid": "no-name-here"},
        {"title": "费玉清"},
        {"name": ""},
        {"singer_name": "Lara"},
    ]
    assert extract_artists(singer) == "周杰伦, 费玉清, Lara"


def test_extract_artists_single_object_and_scalar():
    assert extract_artists({"name": "动力火车"}) == "动力火车"
    assert extract_artists({"title": "Queen"}) == "Queen"
    assert extract_artists("Adele") == "Adele"
    assert extract_artists(None) == ""
    assert extract_artists({"name": {"nested": "x"}}) == ""
    assert extract_artists([]) == ""


def test_extract_album_aliases():
    assert extract_album({"name": "叶惠美"}) == "叶惠美"
    assert extract_album({"title": "Abbey Road", "id": 3}) == "Abbey Road"
    assert extract_album("25") == "25"
    assert extract_album([{"id": 1}, {"name": "Second"}]) == "Second"
    assert extract_album(None) == ""


def test_extract_song_title_alias_order():
    assert extract_song_title({"song": "A", "name": "B"}) == "A"
    assert extract_song_title({"songname": "C"}) == "C"
    assert extract_song_title({"songName": "D"}) == "D"
    assert extract_song_title({"id": 1}) == ""
    assert extract_song_title("not a row") == ""


def test_catalog_candidate_from_row_normalizes_on_ingress():
    row = {
        "id": 102065756,
        "mid": "001Qu4I30eVFYb",
        "song": "当",
        "singer": [{"name": "动力火车"}],
        "album": {"name": "Power Station"},
        "interval": "3分45秒",
    }
    c = CatalogCandidate.from_row(row)
    assert c.external_id == 102065756
    assert c.external_alt_id == "001Qu4I30eVFYb"
    assert c.display_title == "当"
    assert c.artist_name == "动力火车"
    assert c.album_name == "Power Station"
    assert c.duration_sec == 225
    assert c.response_id == 102065756


def test_catalog_candidate_falls_back_to_mid():
    c = CatalogCandidate.from_row({"mid": "abc", "name": "Song"})
    assert c.external_id is None
    assert c.response_id == "abc"
    assert c.artist_name == ""
    assert c.duration_sec == 0


def test_parse_search_rows_skips_non_objects():
    rows = [{"id": 1, "name": "x"}, "junk", None, {"id": 2, "name": "y"}]
    assert [c.external_id for c in parse_search_rows(rows)] == [1, 2]
    assert parse_search_rows({"not": "a list"}) == []
    assert parse_search_rows(None) == []
