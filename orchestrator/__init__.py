"""
Orchestrator Module

Runs the agent pipeline for one ticker or many.

Public API:
- Pipeline: Single-ticker runner applying the agent failure policy
- BatchCoordinator: Parallel multi-ticker runs with per-ticker isolation
- RunReport: Aggregated result of one run
- RunMetrics: Process-wide run and agent counters
- create_pipeline / create_test_pipeline: Factories
"""

from orchestrator.batch import BatchCoordinator
from orchestrator.metrics import (
    AgentMetrics,
    MetricsSnapshot,
    RunMetrics,
    get_metrics,
    set_metrics,
)
from orchestrator.pipeline import (
    Pipeline,
    PipelineConfig,
    create_pipeline,
    create_test_pipeline,
)
from orchestrator.report import RunReport


__all__ = [
    # Pipeline
    "Pipeline",
    "PipelineConfig",
    "create_pipeline",
    "create_test_pipeline",
    # Batch
    "BatchCoordinator",
    # Report
    "RunReport",
    # Metrics
    "AgentMetrics",
    "MetricsSnapshot",
    "RunMetrics",
    "get_metrics",
    "set_metrics",
]
