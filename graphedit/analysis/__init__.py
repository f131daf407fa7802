"""Read-only analytics over a graph: paths, centrality and search."""

from .centrality import DEGREE_MODES, NodeScore, degree_centrality, page_rank, ranked
from .paths import PathResult, shortest_path
from .search import search_nodes

__all__ = [
    "DEGREE_MODES",
    "NodeScore",
    "degree_centrality",
    "page_rank",
    "ranked",
    "PathResult",
    "shortest_path",
    "search_nodes",
]
