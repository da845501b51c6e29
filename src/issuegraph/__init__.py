from __future__ import annotations

from typing import TYPE_CHECKING

__all__ = [
    "__version__",
    "CentralityResult",
    "ConfigValidationError",
    "Dependency",
    "DependencyKind",
    "ExecutionPlan",
    "ForceLayout",
    "ForceLayoutOptions",
    "Graph",
    "Issue",
    "Status",
    "build_execution_plan",
    "build_graph",
    "compute_centrality",
    "compute_force_layout",
]

__version__ = "0.1.0"

if TYPE_CHECKING:
    from .centrality import CentralityResult, compute_centrality
    from .config import ConfigValidationError
    from .graph import Graph, build_graph
    from .layout import ForceLayout, ForceLayoutOptions, compute_force_layout
    from .model import Dependency, DependencyKind, Issue, Status
    from .plan import ExecutionPlan, build_execution_plan


_EXPORTS = {
    "CentralityResult": "centrality",
    "compute_centrality": "centrality",
    "ConfigValidationError": "config",
    "Graph": "graph",
    "build_graph": "graph",
    "ForceLayout": "layout",
    "ForceLayoutOptions": "layout",
    "compute_force_layout": "layout",
    "Dependency": "model",
    "DependencyKind": "model",
    "Issue": "model",
    "Status": "model",
    "ExecutionPlan": "plan",
    "build_execution_plan": "plan",
}


def __getattr__(name: str):
    module_name = _EXPORTS.get(name)
    if module_name is None:
        raise AttributeError(f"module 'issuegraph' has no attribute {name!r}")
    from importlib import import_module

    return getattr(import_module(f".{module_name}", __name__), name)
