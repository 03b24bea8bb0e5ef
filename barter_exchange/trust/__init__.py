"""Trust scoring services"""

from .trust_score_engine import TrustScoreEngine, TRUST_WEIGHTS, score_stats, component_scores
from .user_stats import UserStatsRepository

__all__ = ["TrustScoreEngine", "TRUST_WEIGHTS", "score_stats", "component_scores", "UserStatsRepository"]
