"""trajtrust — Reputation for mobile agents from interaction evidence and trajectories."""

from trajtrust.models import Vector, Interaction, Opinion
from trajtrust.config import ReputationConfig, DEFAULT_CONFIG, load_config, config_from_dict
from trajtrust.errors import TrajTrustError, ConfigError, IngestError
from trajtrust.opinion import (
    local_opinion, opinion_to_reputation,
    OpinionCombiner, LocalOnlyCombiner, WeightedAverageCombiner, get_combiner,
)
from trajtrust.temporal import TemporalWeighter, EvidenceMass
from trajtrust.trajectory import (
    TrajectorySimilarity, lcs_length,
    speed_difference, location_difference, direction_difference,
)
from trajtrust.frequency import interaction_frequency
from trajtrust.manager import ReputationManager, ReputationBreakdown
from trajtrust.registry import AgentRegistry
from trajtrust.simulation import Simulation, SimulationReport, RoundResult

__all__ = [
    "Vector",
    "Interaction",
    "Opinion",
    "ReputationConfig",
    "DEFAULT_CONFIG",
    "load_config",
    "config_from_dict",
    "TrajTrustError",
    "ConfigError",
    "IngestError",
    "local_opinion",
    "opinion_to_reputation",
    "OpinionCombiner",
    "LocalOnlyCombiner",
    "WeightedAverageCombiner",
    "get_combiner",
    "TemporalWeighter",
    "EvidenceMass",
    "TrajectorySimilarity",
    "lcs_length",
    "speed_difference",
    "location_difference",
    "direction_difference",
    "interaction_frequency",
    "ReputationManager",
    "ReputationBreakdown",
    "AgentRegistry",
    "Simulation",
    "SimulationReport",
    "RoundResult",
]
