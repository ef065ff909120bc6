"""Tests for in-process filter execution against a corpus provider."""

import threading

import pytest

from text_analyzer.exceptions import CorpusUnavailable, QueryCancelled, StorageError
from text_analyzer.schemas.text import StructuredFilter
from text_analyzer.services.filter_executor import execute
from text_analyzer.services.formatter import format_records
from text_analyzer.services.query_interpreter import interpret


def _values(records):
    return [record.value for record in records]


def test_palindrome_filter_keeps_corpus_order(stub_corpus_factory):
    corpus = stub_corpus_factory("racecar", "hello world", "civic")
    results = execute(StructuredFilter(is_palindrome=True), corpus)
    assert _values(results) == ["racecar", "civic"]


def test_empty_filter_matches_everything(stub_corpus_factory):
    corpus = stub_corpus_factory("b", "a", "c")
    assert _values(execute(StructuredFilter(), corpus)) == ["b", "a", "c"]


def test_length_bounds_are_inclusive_and_ignore_whitespace(stub_corpus_factory):
    corpus = stub_corpus_factory("abc", "ab cd", "abcdef")
    results = execute(StructuredFilter(min_length=3, max_length=4), corpus)
    # "ab cd" has four non-whitespace characters
    assert _values(results) == ["abc", "ab cd"]


def test_word_count_is_exact(stub_corpus_factory):
    corpus = stub_corpus_factory("one", "two words", "three word string", "other pair")
    assert _values(execute(StructuredFilter(word_count=2), corpus)) == ["two words", "other pair"]


def test_contains_character_is_case_sensitive(stub_corpus_factory):
    corpus = stub_corpus_factory("Apple", "banana", "grape")
    assert _values(execute(StructuredFilter(contains_character="a"), corpus)) == ["banana", "grape"]


def test_contains_text_is_case_sensitive(stub_corpus_factory):
    corpus = stub_corpus_factory("concatenate", "Cat nap", "the cat sat")
    assert _values(execute(StructuredFilter(contains_text="cat"), corpus)) == ["concatenate", "the cat sat"]


def test_all_present_predicates_must_hold(stub_corpus_factory):
    corpus = stub_corpus_factory("level", "rotor", "step on no pets", "radar")
    filters = StructuredFilter(is_palindrome=True, word_count=1, contains_character="r")
    assert _values(execute(filters, corpus)) == ["rotor", "radar"]


def test_interpreted_query_end_to_end(stub_corpus_factory):
    corpus = stub_corpus_factory("racecar", "nurses run", "a b", "Noon", "hello")
    results = execute(interpret("all single word palindromes"), corpus)
    assert _values(results) == ["racecar", "Noon"]


def test_execution_is_deterministic(stub_corpus_factory):
    corpus = stub_corpus_factory("kayak", "madam", "tree", "refer")
    filters = interpret("palindromes")
    assert _values(execute(filters, corpus)) == _values(execute(filters, corpus))


def test_corpus_is_fetched_once(stub_corpus_factory):
    corpus = stub_corpus_factory("a", "b")
    execute(StructuredFilter(min_length=1), corpus)
    assert corpus.fetch_calls == 1


def test_storage_error_becomes_corpus_unavailable(stub_corpus_factory):
    corpus = stub_corpus_factory("racecar", fail_fetch=True)
    with pytest.raises(CorpusUnavailable) as excinfo:
        execute(StructuredFilter(is_palindrome=True), corpus)
    assert isinstance(excinfo.value.__cause__, StorageError)


def test_cancelled_before_fetch_skips_corpus(stub_corpus_factory):
    corpus = stub_corpus_factory("racecar")
    cancel = threading.Event()
    cancel.set()
    with pytest.raises(QueryCancelled):
        execute(StructuredFilter(), corpus, cancel_event=cancel)
    assert corpus.fetch_calls == 0


def test_cancelled_during_fetch_aborts_before_scan(stub_corpus_factory):
    corpus = stub_corpus_factory("racecar")
    cancel = threading.Event()
    original_fetch = corpus.fetch_all

    def fetch_then_cancel():
        records = original_fetch()
        cancel.set()
        return records

    corpus.fetch_all = fetch_then_cancel
    with pytest.raises(QueryCancelled):
        execute(StructuredFilter(), corpus, cancel_event=cancel)


def test_unset_cancel_event_runs_normally(stub_corpus_factory):
    corpus = stub_corpus_factory("racecar", "tree")
    results = execute(StructuredFilter(is_palindrome=False), corpus, cancel_event=threading.Event())
    assert _values(results) == ["tree"]


def test_frequency_failure_substitutes_empty_map(stub_corpus_factory):
    corpus = stub_corpus_factory("racecar", "civic")
    corpus.failing_frequency_ids.add(corpus.records[0].id)

    formatted = format_records(execute(StructuredFilter(is_palindrome=True), corpus), corpus)

    assert [item.value for item in formatted] == ["racecar", "civic"]
    assert formatted[0].properties.character_frequency_map == {}
    assert formatted[1].properties.character_frequency_map == {"c": 2, "i": 2, "v": 1}
