"""
Bots module - Agent implementations.

Provides:
- Agent: Interface for agent decision-making
- RandomAgent, FirstLegalAgent, ScriptedAgent, FunctionAgent, InteractiveAgent
- Evaluator: Scores non-terminal states for search
- MinimaxAgent: Alpha-beta search with iterative deepening
"""

from .policy import (
    Agent,
    RandomAgent,
    FirstLegalAgent,
    ScriptedAgent,
    FunctionAgent,
    InteractiveAgent,
    agent_name,
)
from .evaluator import (
    Evaluator,
    ZeroEvaluator,
    FunctionEvaluator,
    WeightedEvaluator,
    Evaluation,
)
from .minimax import MinimaxAgent, SearchReport

__all__ = [
    "Agent",
    "RandomAgent",
    "FirstLegalAgent",
    "ScriptedAgent",
    "FunctionAgent",
    "InteractiveAgent",
    "agent_name",
    "Evaluator",
    "ZeroEvaluator",
    "FunctionEvaluator",
    "WeightedEvaluator",
    "Evaluation",
    "MinimaxAgent",
    "SearchReport",
]
