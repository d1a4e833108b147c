"""KidsGrowth - computation core for child development tracking.

Scores M-CHAT-R screenings, computes goal progress inside daily, weekly and
monthly windows, and evaluates star milestones and badges. Persistence and
presentation belong to the caller.
"""

from .catalog import CatalogValidationError, load_catalog, load_catalog_file
from .data_builders import EntityValidationError
from .engines import (
    AnswerSet,
    GamificationEngine,
    IncompleteScreeningError,
    ProgressEngine,
    QuestionnaireSession,
    ScoringEngine,
    StatisticsEngine,
)

__version__ = "0.1.0"

__all__ = [
    "AnswerSet",
    "CatalogValidationError",
    "EntityValidationError",
    "GamificationEngine",
    "IncompleteScreeningError",
    "ProgressEngine",
    "QuestionnaireSession",
    "ScoringEngine",
    "StatisticsEngine",
    "load_catalog",
    "load_catalog_file",
]
