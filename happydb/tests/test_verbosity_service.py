import pytest

from happydb.core.demographics.cleaner import DefaultDemographicCleaner, add_age_bins
from happydb.core.dtm.builder import CountDTMBuilder
from happydb.core.topic_modeling.gibbs_lda import GibbsLDAModeler
from happydb.schemas.analysis import BranchSpec, TfIdfSpec
from happydb.services.corpus_service import CorpusData, CorpusService
from happydb.services.tfidf_service import TfIdfService
from happydb.services.topic_modeling_service import (
    TopicModelingService,
    run_topic_branch,
    sentence_range,
)
from happydb.services.verbosity_service import (
    VerbosityAnalysisService,
    country_verbosity,
    verbosity_summary,
)
from happydb.utils.exceptions import InsufficientDataError


@pytest.fixture
def joined(moments_df, demographics_df):
    service = CorpusService(files=None, cleaner=DefaultDemographicCleaner())
    df = service.prepare(CorpusData(moments=moments_df, demographics=demographics_df))
    return add_age_bins(df)


@pytest.fixture
def analysis(normalizer, fast_lda_config):
    topics = TopicModelingService(
        normalizer, CountDTMBuilder(), GibbsLDAModeler(fast_lda_config)
    )
    return VerbosityAnalysisService(topics, TfIdfService(normalizer))


def test_sentence_range_is_inclusive(moments_df):
    corpus = CorpusService.build_corpus(moments_df)
    assert corpus.filter(sentence_range(min_sentences=4)).ids() == ["2", "4"]
    assert len(corpus.filter(sentence_range(max_sentences=1))) == 6
    assert len(corpus.filter(sentence_range())) == 8


def test_verbosity_summary_by_gender(joined):
    summary = verbosity_summary(joined, "gender").set_index("gender")
    assert summary.loc["f", "n"] == 4
    assert summary.loc["f", "mean"] == pytest.approx(2.0)
    assert summary.loc["m", "mean"] == pytest.approx(1.75)
    assert summary.loc["m", "max"] == 4


def test_verbosity_summary_unknown_column(joined):
    with pytest.raises(KeyError):
        verbosity_summary(joined, "religion")


def test_country_verbosity_filters_and_sorts(joined):
    table = country_verbosity(joined, min_count=2)
    assert table["country"].tolist() == ["UKR", "USA", "IND"]
    assert table["mean"].tolist() == pytest.approx([2.5, 2.0, 1.0])

    assert country_verbosity(joined, min_count=3)["country"].tolist() == ["USA"]


def test_demographic_summaries_skip_missing_attributes(joined):
    out = VerbosityAnalysisService.demographic_summaries(
        joined, ["gender", "age_group", "religion"]
    )
    assert set(out) == {"gender", "age_group"}


def test_failed_branch_does_not_stop_the_others(analysis, moments_df):
    corpus = CorpusService.build_corpus(moments_df)
    branches = [
        BranchSpec(name="garrulous", min_sentences=4),
        BranchSpec(name="taciturn", max_sentences=1),
    ]
    # garrulous keeps two documents, fewer than three topics
    results = analysis.compare_topics(corpus, branches, num_topics=3, top_n=3)

    assert not results["garrulous"].ok
    assert isinstance(results["garrulous"].error, InsufficientDataError)
    assert results["garrulous"].table is None

    taciturn = results["taciturn"]
    assert taciturn.ok
    assert taciturn.n_documents == 6
    assert sorted(taciturn.table["topic"].unique()) == [1, 2, 3]
    assert list(taciturn.coherence.columns) == ["topic", "coherence"]
    assert len(taciturn.coherence) == 3


def test_branch_with_only_noise_reports_empty_corpus(normalizer, fast_lda_config, moments_df):
    topics = TopicModelingService(
        normalizer,
        CountDTMBuilder(),
        GibbsLDAModeler(fast_lda_config),
        coherence_measure=None,
    )
    corpus = CorpusService.build_corpus(moments_df)
    result = topics.run_branch(
        corpus, "noise", lambda d: d.predicted_category == "enjoy_the_moment"
    )
    assert not result.ok
    assert result.error.code == "EMPTY_CORPUS"


def test_tfidf_by_category_omits_empty_groups(analysis, joined):
    tables = analysis.compare_tfidf(
        joined, [TfIdfSpec(name="category", group_column="predicted_category", top_n=1)]
    )
    table = tables["category"]
    # enjoy_the_moment holds only noise words
    assert set(table["predicted_category"]) == {"affection", "achievement"}
    top = dict(zip(table["predicted_category"], table["term"]))
    assert top["achievement"] == "code"
    assert top["affection"] == "cat"


def test_tfidf_restricted_to_selected_groups(analysis, joined):
    table = analysis.tfidf.score_groups(joined, "country", groups=["UKR", "USA"])
    assert set(table["country"]) == {"UKR", "USA"}
    assert (table["tf_idf"] >= 0).all()


class CountingNormalizer:
    """Wraps a normalizer and records how many texts went through it."""

    def __init__(self, inner):
        self.inner = inner
        self.seen = 0

    def normalize(self, text):
        self.seen += 1
        return self.inner.normalize(text)

    def normalize_many(self, texts):
        texts = list(texts)
        self.seen += len(texts)
        return self.inner.normalize_many(texts)


def test_branch_filters_and_normalizes_once(normalizer, fast_lda_config, moments_df):
    counting = CountingNormalizer(normalizer)
    topics = TopicModelingService(
        counting, CountDTMBuilder(), GibbsLDAModeler(fast_lda_config)
    )
    calls = []

    def taciturn(doc):
        calls.append(doc.hmid)
        return doc.num_sentence <= 1

    corpus = CorpusService.build_corpus(moments_df)
    result = topics.run_branch(corpus, "taciturn", taciturn, top_n=3)

    assert result.ok
    assert result.coherence is not None
    assert len(calls) == len(corpus)
    assert counting.seen == result.n_documents == 6


def test_run_topic_branch_matches_service(normalizer, fast_lda_config, moments_df):
    corpus = CorpusService.build_corpus(moments_df)
    predicate = sentence_range(max_sentences=1)
    table, result = run_topic_branch(
        corpus,
        predicate,
        normalizer,
        CountDTMBuilder(),
        GibbsLDAModeler(fast_lda_config),
        top_n=3,
    )
    service = TopicModelingService(
        normalizer,
        CountDTMBuilder(),
        GibbsLDAModeler(fast_lda_config),
        coherence_measure=None,
    )
    branch = service.run_branch(corpus, "taciturn", predicate, top_n=3)
    assert table.equals(branch.table)
    assert result.seed == branch.result.seed
