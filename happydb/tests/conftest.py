import pandas as pd
import pytest

from happydb.core.normalization.config import NormalizationConfig
from happydb.core.normalization.normalizer import DefaultTextNormalizer
from happydb.core.topic_modeling.config import LDAConfig

# Small explicit word lists keep tests independent of the NLTK download
STOPWORDS = frozenset(
    {"i", "my", "and", "are", "a", "the", "to", "with", "was", "of", "we", "me", "it", "in", "for", "at", "is"}
)
BROAD_STOPWORDS = frozenset({"really", "about", "also", "very"})
NOISE_WORDS = frozenset({"happy", "today", "day", "time"})


@pytest.fixture
def normalizer():
    return DefaultTextNormalizer(
        NormalizationConfig(
            stopwords=STOPWORDS,
            broad_stopwords=BROAD_STOPWORDS,
            noise_words=NOISE_WORDS,
        )
    )


@pytest.fixture
def fast_lda_config():
    return LDAConfig(
        num_topics=2, iterations=40, burnin=20, thin=10, seeds=(11, 22, 33), top_n=5
    )


@pytest.fixture
def moments_df():
    return pd.DataFrame(
        {
            "hmid": [1, 2, 3, 4, 5, 6, 7, 8],
            "wid": [10, 10, 20, 20, 30, 30, 40, 40],
            "cleaned_hm": [
                "My cat and my dog played in the garden.",
                "I fed the cat. The dog barked. We walked the dog. The cat slept. The garden was sunny.",
                "I fixed a bug in my python code.",
                "The python code passed every test. I merged the code. The build was green. We shipped.",
                "My dog chased the cat around the garden.",
                "I wrote python code and fixed the test.",
                "Happy today.",
                "I and my.",
            ],
            "num_sentence": [1, 5, 1, 4, 1, 1, 1, 1],
            "predicted_category": [
                "affection",
                "affection",
                "achievement",
                "achievement",
                "affection",
                "achievement",
                "enjoy_the_moment",
                "enjoy_the_moment",
            ],
        }
    )


@pytest.fixture
def demographics_df():
    return pd.DataFrame(
        {
            "wid": [10, 20, 30, 40],
            "age": ["34", "60yrs", "233", "prefer not to say"],
            "country": ["usa", "UKR", "IND", "usa "],
            "gender": ["F", "m", "f", "M"],
            "marital": ["married", "single", "married", "single"],
            "parenthood": ["y", "n", "y", "n"],
        }
    )
