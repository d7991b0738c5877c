"""Reward catalog, code and statistics services."""

from .catalog import DEFAULT_TERMS, RewardDeletion, RewardService, RewardSummary, default_terms  # noqa: F401
from .codes import (  # noqa: F401
    BulkDeletion,
    CodeBatch,
    RewardCodeService,
    date_code,
    format_reward_code,
    reward_code_prefix,
)
from .statistics import RewardStatistics, RewardStatisticsService, summarize_codes  # noqa: F401
