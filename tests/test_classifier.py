"""Tests for take-rank classification."""

from takeflow.config.models import SUBSTANTIAL_BYTES
from takeflow.ranking import TakeRanking, classify

MB = 1_000_000


def test_classify_empty_and_single(make_file) -> None:
    only = make_file("A.mov", size=10)

    assert classify([]) == TakeRanking(None, None)
    assert classify([only]) == TakeRanking(best_path=only.path, good_path=None)


def test_classify_latest_substantial_is_best_and_earliest_is_good(make_file) -> None:
    files = [
        make_file("A.mov", size=9 * MB, minutes=0),
        make_file("B.mov", size=500_000, minutes=1),
        make_file("C.mov", size=12 * MB, minutes=2),
    ]

    ranking = classify(files)

    assert ranking.best_path == "/watch/C.mov"
    assert ranking.good_path == "/watch/A.mov"
    assert ranking.rank_of("/watch/B.mov") is None


def test_classify_all_junk_picks_largest(make_file) -> None:
    files = [
        make_file("A.mov", size=100, minutes=0),
        make_file("B.mov", size=4 * MB, minutes=1),
        make_file("C.mov", size=200, minutes=2),
    ]

    assert classify(files) == TakeRanking(best_path="/watch/B.mov")


def test_classify_single_substantial_ignores_junk(make_file) -> None:
    files = [
        make_file("junk-late.mov", size=10, minutes=9),
        make_file("take.mov", size=SUBSTANTIAL_BYTES, minutes=5),
        make_file("junk-early.mov", size=4 * MB, minutes=0),
    ]

    assert classify(files) == TakeRanking(best_path="/watch/take.mov")


def test_classify_middle_takes_are_unranked(make_file) -> None:
    files = [
        make_file("third.mov", size=8 * MB, minutes=3),
        make_file("first.mov", size=8 * MB, minutes=1),
        make_file("second.mov", size=20 * MB, minutes=2),
    ]

    ranking = classify(files)

    assert ranking.rank_of("/watch/third.mov") == "best"
    assert ranking.rank_of("/watch/first.mov") == "good"
    assert ranking.rank_of("/watch/second.mov") is None
    assert ranking.best_path != ranking.good_path


def test_classify_timestamp_ties_keep_input_order(make_file) -> None:
    files = [
        make_file("x.mov", size=6 * MB, minutes=1),
        make_file("y.mov", size=6 * MB, minutes=1),
    ]

    assert classify(files) == TakeRanking(best_path="/watch/y.mov", good_path="/watch/x.mov")
    assert classify(files[::-1]) == TakeRanking(
        best_path="/watch/x.mov", good_path="/watch/y.mov"
    )


def test_classify_threshold_is_configurable(make_file) -> None:
    files = [
        make_file("A.mov", size=2_000, minutes=0),
        make_file("B.mov", size=3_000, minutes=1),
    ]

    assert classify(files, substantial_bytes=1_000) == TakeRanking(
        best_path="/watch/B.mov", good_path="/watch/A.mov"
    )
