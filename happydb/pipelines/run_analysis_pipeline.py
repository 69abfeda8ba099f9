import argparse
import logging
import sys
import time
from pathlib import Path
from typing import Callable, Dict, List, Optional

import pandas as pd
import yaml
from pydantic import ValidationError

from happydb.core.config import settings
from happydb.core.demographics.cleaner import DefaultDemographicCleaner, add_age_bins
from happydb.core.demographics.config import DemographicConfig
from happydb.core.dtm.builder import CountDTMBuilder
from happydb.core.file_handler.storage import HttpStorage, LocalStorage
from happydb.core.normalization.config import NormalizationConfig
from happydb.core.normalization.normalizer import DefaultTextNormalizer
from happydb.core.topic_modeling.config import LDAConfig
from happydb.core.topic_modeling.gibbs_lda import GibbsLDAModeler
from happydb.messages import pipeline_messages
from happydb.reporting import plots
from happydb.schemas.analysis import AnalysisConfig
from happydb.services.corpus_service import CorpusService
from happydb.services.file_service import FileService
from happydb.services.tfidf_service import TfIdfService
from happydb.services.topic_modeling_service import TopicModelingService
from happydb.services.verbosity_service import (
    VerbosityAnalysisService,
    country_verbosity,
)
from happydb.utils.exceptions import AnalysisError, ConfigError
from happydb.utils.logging import setup_logging

logger = logging.getLogger(__name__)

DEFAULT_CONFIG = Path(__file__).parent / "configs" / "analysis_config.yaml"
DEMOGRAPHIC_ATTRIBUTES = ["gender", "marital", "parenthood", "age_group"]


def load_config(path: Path) -> AnalysisConfig:
    try:
        with open(path, "r") as file:
            raw = yaml.safe_load(file) or {}
        return AnalysisConfig.model_validate(raw)
    except OSError as e:
        raise ConfigError(code="CONFIG_NOT_FOUND", message=f"{path}: {e}") from e
    except (yaml.YAMLError, ValidationError) as e:
        raise ConfigError(code="INVALID_CONFIG", message=f"{path}: {e}") from e


def build_corpus_service(
    cfg: AnalysisConfig, data_dir: Optional[str] = None
) -> CorpusService:
    storage = LocalStorage(data_dir) if data_dir else HttpStorage()
    cleaner = DefaultDemographicCleaner(
        DemographicConfig(
            overrides=cfg.age_overrides,
            strategy=cfg.age_strategy,
            impute_by=tuple(cfg.impute_by),
        )
    )
    return CorpusService(FileService(storage), cleaner)


def build_analysis_service(cfg: AnalysisConfig) -> VerbosityAnalysisService:
    normalizer = DefaultTextNormalizer(
        NormalizationConfig(noise_words=frozenset(cfg.noise_words))
    )
    modeler = GibbsLDAModeler(LDAConfig(**cfg.lda.model_dump()))
    topics = TopicModelingService(normalizer, CountDTMBuilder(), modeler)
    return VerbosityAnalysisService(topics, TfIdfService(normalizer))


def _timed(step: str, fn: Callable):
    start_time = time.time()
    result = fn()
    logger.info(
        pipeline_messages.STEP_COMPLETED.format(
            step=step, elapsed=time.time() - start_time
        )
    )
    return result


def _write_table(table: pd.DataFrame, path: Path) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    table.to_csv(path, index=False)
    logger.info(pipeline_messages.TABLE_WRITTEN.format(path=path))


def run(
    cfg: AnalysisConfig,
    corpus_service: CorpusService,
    analysis: VerbosityAnalysisService,
    report_dir: Path,
    make_plots: bool = True,
) -> Dict[str, pd.DataFrame]:
    """Runs every step and returns the tables it wrote, keyed by name."""
    tables: Dict[str, pd.DataFrame] = {}

    data = _timed("fetch", corpus_service.load)
    df = _timed("clean", lambda: corpus_service.prepare(data))
    df = add_age_bins(df, bins=cfg.age_bins)

    summaries = analysis.demographic_summaries(df, DEMOGRAPHIC_ATTRIBUTES)
    for attr, table in summaries.items():
        tables[f"verbosity_by_{attr}"] = table
    tables["verbosity_by_country"] = country_verbosity(df, cfg.min_country_count)

    corpus = corpus_service.build_corpus(df)
    branches = _timed(
        "topic_modeling",
        lambda: analysis.compare_topics(
            corpus,
            cfg.branches,
            num_topics=cfg.lda.num_topics,
            top_n=cfg.lda.top_n,
            sample_size=cfg.sample_size,
            sample_seed=cfg.sample_seed,
        ),
    )
    failed: List[str] = []
    for name, branch in branches.items():
        if branch.ok:
            tables[f"topics_{name}"] = branch.table
            if branch.coherence is not None:
                tables[f"coherence_{name}"] = branch.coherence
        else:
            failed.append(name)

    tfidf_tables = _timed("tfidf", lambda: analysis.compare_tfidf(df, cfg.tfidf))
    for name, table in tfidf_tables.items():
        tables[f"tfidf_{name}"] = table

    for name, table in tables.items():
        _write_table(table, report_dir / "tables" / f"{name}.csv")

    if make_plots:
        figures = report_dir / "figures"
        for attr in summaries:
            plots.plot_verbosity_boxplot(df, attr, path=figures / f"boxplot_{attr}.png")
        plots.plot_category_beeswarm(df, path=figures / "beeswarm_category.png")
        plots.plot_country_choropleth(
            tables["verbosity_by_country"], path=figures / "choropleth_country.html"
        )
        for name, branch in branches.items():
            if branch.ok:
                plots.plot_top_terms(
                    branch.table,
                    title=f"Topics: {name}",
                    path=figures / f"topics_{name}.png",
                )
        for spec in cfg.tfidf:
            plots.plot_top_terms(
                tfidf_tables[spec.name],
                facet=spec.group_column,
                value="tf_idf",
                title=f"TF-IDF by {spec.group_column}",
                path=figures / f"tfidf_{spec.name}.png",
            )

    if failed:
        logger.warning(f"Topic branches without results: {', '.join(failed)}")
    return tables


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Verbosity, topic and tf-idf analysis of HappyDB happy moments"
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=DEFAULT_CONFIG,
        help="Path to the analysis YAML config",
    )
    parser.add_argument(
        "--data-dir",
        type=str,
        default=None,
        help="Read the CSV files from this directory instead of the remote URL",
    )
    parser.add_argument(
        "--report-dir",
        type=Path,
        default=Path(settings.REPORT_DIR),
        help="Where tables and figures are written",
    )
    parser.add_argument(
        "--no-plots", action="store_true", help="Only write the result tables"
    )
    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    setup_logging()
    logger.info(pipeline_messages.PIPELINE_STARTED)

    try:
        cfg = load_config(args.config)
        run(
            cfg,
            build_corpus_service(cfg, args.data_dir),
            build_analysis_service(cfg),
            args.report_dir,
            make_plots=not args.no_plots,
        )
    except AnalysisError as e:
        logger.error(pipeline_messages.PIPELINE_FAILED.format(stage=e.stage, error=e))
        return 1

    logger.info(pipeline_messages.PIPELINE_COMPLETED)
    return 0


if __name__ == "__main__":
    sys.exit(main())
