from article_scraper.analysis import (
    analyze_word_frequency,
    normalize,
    unique_word_count,
    word_frequency_report,
)


def test_normalize_strips_punctuation_and_spacing():
    assert normalize("  The  War, Again!  ") == "the war again"
    assert normalize(None) == ""


def test_only_words_repeated_more_than_twice_are_kept():
    titles = ["The war ends", "War and the peace", "The war again", "An end"]

    repeated = analyze_word_frequency(titles)

    assert repeated == {"the": 3, "war": 3}
    assert list(repeated) == ["the", "war"]


def test_stop_words_can_be_filtered():
    titles = ["The war ends", "War and the peace", "The war again"]

    assert analyze_word_frequency(titles, skip_stop_words=True) == {"war": 3}


def test_most_frequent_first():
    titles = ["peace peace", "peace war", "war war peace"]

    assert list(analyze_word_frequency(titles)) == ["peace", "war"]


def test_unique_word_count():
    assert unique_word_count(["The war", "the WAR ends"]) == 3


def test_report_holds_full_and_stop_word_free_counts():
    titles = ["The war ends", "War and the peace", "The war again"]

    assert word_frequency_report(titles) == {
        "all_words": {"the": 3, "war": 3},
        "without_stop_words": {"war": 3},
    }
