"""Engine modules for KidsGrowth.

Contains specialized computation engines:
- scoring_engine: M-CHAT-R item scoring and risk banding
- questionnaire_engine: Answer set and cursor for one screening attempt
- progress_engine: Goal period windows and completion ratios
- gamification_engine: Star milestones, levels and badge unlocking
- statistics_engine: Child state aggregation for badge predicates
"""

# Use relative imports within package to avoid mypy module resolution issues
from .gamification_engine import GamificationEngine
from .progress_engine import ProgressEngine
from .questionnaire_engine import QuestionnaireSession
from .scoring_engine import AnswerSet, IncompleteScreeningError, ScoringEngine
from .statistics_engine import StatisticsEngine

__all__ = [
    "AnswerSet",
    "GamificationEngine",
    "IncompleteScreeningError",
    "ProgressEngine",
    "QuestionnaireSession",
    "ScoringEngine",
    "StatisticsEngine",
]
