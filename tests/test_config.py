import logging
import math

from replanner import config
from replanner.config import PlannerSettings, configure_logging
from replanner.d_star_lite import DStarLite
from replanner.graph import Graph


def test_defaults():
    defaults = PlannerSettings(_env_file=None)
    assert defaults.heuristic == "euclidean"
    assert defaults.infinity == math.inf
    assert defaults.max_iterations is None
    assert defaults.check_heuristic is False
    assert defaults.exploration_setting == "8N"


def test_environment_overrides(monkeypatch):
    monkeypatch.setenv("REPLANNER_HEURISTIC", "zero")
    monkeypatch.setenv("REPLANNER_MAX_ITERATIONS", "7")
    monkeypatch.setenv("REPLANNER_CHECK_HEURISTIC", "true")
    overrides = PlannerSettings(_env_file=None)

    assert overrides.heuristic == "zero"
    assert overrides.max_iterations == 7
    assert overrides.check_heuristic is True

    graph = Graph.from_edges([('a', 'b', 1.0)])
    planner = DStarLite(graph, 'a', 'b', config=overrides)
    assert planner.max_iterations == 7
    assert planner.check_heuristic is True
    assert planner.h('a', 'b') == 0.0


def test_configure_logging(monkeypatch):
    calls = []
    monkeypatch.setattr(logging, "basicConfig", lambda **kwargs: calls.append(kwargs))

    configure_logging(config=PlannerSettings(_env_file=None, debug=True))
    configure_logging("warning")

    assert calls[0]["level"] == logging.DEBUG
    assert calls[1]["level"] == logging.WARNING
    assert "%(name)s" in calls[0]["format"]


def test_global_settings_instance():
    assert isinstance(config.settings, PlannerSettings)
