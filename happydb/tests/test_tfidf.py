import math

import numpy as np
import pandas as pd
import pytest

from happydb.core.tfidf.config import TfIdfConfig
from happydb.core.tfidf.scorer import GroupTfIdfScorer, top_per_group
from happydb.core.tokenization.config import TokenizationConfig
from happydb.core.tokenization.tokenizer import DefaultTokenizer

PETS = pd.DataFrame(
    {
        "group": ["A", "A", "B"],
        "text": ["i love my cat", "i love my dog", "my cat and dog are friends"],
    }
)
PET_STOPWORDS = frozenset({"i", "my", "and", "are"})


def _score(df, **kwargs):
    cfg = TfIdfConfig(group_column="group", text_column="text", **kwargs)
    return GroupTfIdfScorer(cfg).score(df)


def _row(table, group, term):
    match = table[(table["group"] == group) & (table["term"] == term)]
    assert len(match) == 1
    return match.iloc[0]


def test_worked_example_matches_manual_calculation():
    table = _score(PETS, stopwords=PET_STOPWORDS)

    love = _row(table, "A", "love")
    # group A keeps love, cat, love, dog -> 4 terms; "love" only in A of 2 groups
    assert love["n"] == 2
    assert love["tf"] == pytest.approx(2 / 4)
    assert love["df"] == 1
    assert love["idf"] == pytest.approx(math.log(2))
    assert love["tf_idf"] == pytest.approx(0.5 * math.log(2))
    assert love["tf_idf"] == pytest.approx(0.34657359, abs=1e-8)

    friends = _row(table, "B", "friends")
    assert friends["tf"] == pytest.approx(1 / 3)
    assert friends["tf_idf"] == pytest.approx(math.log(2) / 3)


def test_term_in_every_group_scores_zero():
    table = _score(PETS, stopwords=PET_STOPWORDS)
    for group in ("A", "B"):
        for term in ("cat", "dog"):
            row = _row(table, group, term)
            assert row["idf"] == 0
            assert row["tf_idf"] == 0


def test_single_group_gives_zero_idf_everywhere():
    df = pd.DataFrame({"group": ["only"], "text": ["cat dog cat"]})
    table = _score(df)
    assert (table["idf"] == 0).all()
    assert (table["tf_idf"] == 0).all()


def test_tf_idf_recomposes_from_components():
    table = _score(PETS, stopwords=PET_STOPWORDS)
    assert np.allclose(table["tf"] * table["idf"], table["tf_idf"], atol=1e-12)


def test_only_observed_pairs_are_reported():
    table = _score(PETS, stopwords=PET_STOPWORDS)
    assert table[table["group"] == "B"]["term"].tolist().count("love") == 0
    assert len(table) == 3 + 3  # A: love cat dog, B: cat dog friends


def test_groups_are_documents_not_rows():
    # two rows in A count as one document for df/idf
    table = _score(PETS, stopwords=PET_STOPWORDS)
    assert table["df"].max() == 2


def test_empty_group_is_omitted():
    df = pd.concat(
        [PETS, pd.DataFrame({"group": ["C", None], "text": ["i and my", "cat"]})],
        ignore_index=True,
    )
    table = _score(df, stopwords=PET_STOPWORDS)
    assert set(table["group"]) == {"A", "B"}
    # C is not counted among the groups
    assert _row(table, "A", "love")["idf"] == pytest.approx(math.log(2))


def test_output_is_ranked_by_score():
    table = _score(PETS, stopwords=PET_STOPWORDS)
    assert table["tf_idf"].is_monotonic_decreasing
    assert table.iloc[0]["term"] == "love"


def test_missing_column_raises_key_error():
    with pytest.raises(KeyError):
        GroupTfIdfScorer(TfIdfConfig(group_column="country")).score(PETS)


def test_top_per_group_limits_rows():
    table = _score(PETS, stopwords=PET_STOPWORDS)
    top = top_per_group(table, "group", n=1)
    assert top["group"].tolist() == ["A", "B"]
    assert top["term"].tolist() == ["love", "friends"]


def test_tokenizer_methods():
    regex = DefaultTokenizer()
    assert regex.tokenize("it's 3 cats") == ["it", "s", "3", "cats"]

    punct = DefaultTokenizer(TokenizationConfig(method="wordpunct"))
    assert punct.tokenize("it's") == ["it", "'", "s"]

    filtered = DefaultTokenizer(
        TokenizationConfig(lowercase=True, min_length=2, drop_numeric=True)
    )
    assert filtered.tokenize_many(["Big 42 Cats a", ""]) == [["big", "cats"], []]


def test_count_terms_pools_texts_and_skips_excluded():
    counts = DefaultTokenizer().count_terms(["love cat", "love dog", ""], exclude={"dog"})
    assert counts == {"love": 2, "cat": 1}
    with pytest.raises(ValueError):
        DefaultTokenizer(TokenizationConfig(method="spacy"))
