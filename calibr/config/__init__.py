from .ranking_params import (
    CompositeWeights,
    VolumeParams,
    StreakParams,
    ReputationWeights,
    TierThreshold,
    TierTable,
    TierTables,
    PercentileParams,
    HistoryParams,
    VerificationParams,
    MetricsParams,
    RankingParams,
    DEFAULT_RANKING_PARAMS,
    get_ranking_params,
    load_ranking_params,
)
from .settings import RankingSettings, load_settings

__all__ = [
    "CompositeWeights",
    "VolumeParams",
    "StreakParams",
    "ReputationWeights",
    "TierThreshold",
    "TierTable",
    "TierTables",
    "PercentileParams",
    "HistoryParams",
    "VerificationParams",
    "MetricsParams",
    "RankingParams",
    "DEFAULT_RANKING_PARAMS",
    "get_ranking_params",
    "load_ranking_params",
    "RankingSettings",
    "load_settings",
]
