"""
Solver worker tests

Runs the worker body synchronously; signals are delivered through
direct connections so no event loop is needed.

Usage:
    pytest tests/test_solver_worker.py
"""

import sys
from pathlib import Path

import pytest

pytest.importorskip("PyQt5.QtCore")

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from liquid_sort.solver import PuzzleState, is_solved
from liquid_sort.solver_worker import SolverWorker


def _connect(worker):
    received = {"solution": [], "error": [], "status": []}
    worker.solution_ready.connect(received["solution"].append)
    worker.error_occurred.connect(received["error"].append)
    worker.status_changed.connect(received["status"].append)
    return received


def test_worker_emits_solution():
    state = PuzzleState.from_lists([[1, 2], [2, 1], [0, 0]])
    worker = SolverWorker(state)
    received = _connect(worker)

    worker.run()

    assert received["error"] == []
    assert len(received["solution"]) == 1
    solution = received["solution"][0]
    assert solution.is_complete
    assert is_solved(solution.final_state)
    assert received["status"] == ["Solving", "Solved (3 moves)"]
    assert not worker.is_running()


def test_worker_reports_unsolvable():
    state = PuzzleState.from_lists([[1, 2], [2, 1]])
    worker = SolverWorker(state)
    received = _connect(worker)

    worker.run()

    assert received["solution"][0].is_exhausted
    assert received["status"][-1] == "No solution"


def test_worker_rejects_malformed_puzzle():
    state = PuzzleState.from_lists([[0, 1], [1, 1], [0, 0]])
    worker = SolverWorker(state)
    received = _connect(worker)

    worker.run()

    assert received["solution"] == []
    assert len(received["error"]) == 1
    assert received["status"][-1] == "Error"


def test_request_stop_sets_flag():
    worker = SolverWorker(PuzzleState.from_lists([[1, 2], [2, 1], [0, 0]]))
    worker.request_stop()
    assert worker._cancel_flag.is_set()


if __name__ == "__main__":
    sys.exit(pytest.main([__file__, "-v"]))
