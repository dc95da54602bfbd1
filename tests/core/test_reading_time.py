import pytest

from folio.core.reading_time import count_words, estimate_read_minutes, estimate_read_minutes_from_html


def test_empty_text_reads_in_one_minute():
    assert estimate_read_minutes("") == 1
    assert estimate_read_minutes("   \n\t ") == 1


@pytest.mark.parametrize(
    ("words", "minutes"),
    [(1, 1), (199, 1), (200, 1), (201, 2), (400, 2), (401, 3)],
)
def test_minutes_are_the_ceiling_of_words_over_speed(words, minutes):
    assert estimate_read_minutes("word " * words) == minutes


def test_custom_reading_speed():
    assert estimate_read_minutes("word " * 100, words_per_minute=50) == 2


def test_reading_speed_must_be_positive():
    with pytest.raises(ValueError, match="positive"):
        estimate_read_minutes("word", words_per_minute=0)


def test_words_are_ascii_alphanumeric_runs():
    assert count_words("It's 2026 -- hello, world!") == 5
    assert count_words("naïve") == 2


def test_non_latin_scripts_undercount():
    assert count_words("这是一个测试") == 0
    assert estimate_read_minutes("这是一个测试" * 1000) == 1


def test_markup_tags_are_not_words():
    assert estimate_read_minutes_from_html("<p>one two</p><p>three</p>") == 1
    assert count_words("<p>one two</p><p>three</p>".replace("<p>", " ").replace("</p>", " ")) == 3


def test_adjacent_tags_do_not_join_words():
    html = "<p>" + "</p><p>".join(["word"] * 201) + "</p>"
    assert estimate_read_minutes_from_html(html) == 2


def test_tag_attributes_are_ignored():
    html = '<a href="https://example.com/some/long/path" class="link external">' + "word " * 200 + "</a>"
    assert estimate_read_minutes_from_html(html) == 1
