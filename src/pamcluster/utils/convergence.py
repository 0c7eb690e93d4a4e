"""
Convergence handling for PAM clustering.

- SwapConvergence decides when the swap loop has settled
- ProcessingStateMachine tracks INITIALIZING -> ITERATING -> terminal state
  and rejects transitions that the loop should never make
"""

from typing import Dict, Any, Optional

from ..base.interfaces import ConvergenceCriterion
from ..base.data_structures import ProcessingState


class ConvergenceWarning(UserWarning):
    """Emitted when the iteration budget runs out before convergence."""


class SwapConvergence(ConvergenceCriterion):
    """Converged when no swap was applied, or when no object's distance to
    its medoid moved by `tol` or more during the iteration."""

    def __init__(self, tol: float = 1e-3):
        """
        Args:
            tol: Tolerance on the maximum per-object distance change
        """
        super().__init__()
        if tol < 0:
            raise ValueError(f"Tolerance must be non-negative, got {tol}")
        self.tol = tol

    def check(self, current_state: Dict[str, Any]) -> bool:
        """Check the outcome of one iteration."""
        swap_applied = current_state['swap_applied']
        max_change = current_state['max_change']

        converged = (not swap_applied) or max_change < self.tol

        self.history.append({
            'iteration': current_state.get('iteration', len(self.history)),
            'swap_applied': swap_applied,
            'max_change': max_change,
            'converged': converged
        })

        return converged


_TRANSITIONS = {
    ProcessingState.INITIALIZING: {ProcessingState.ITERATING},
    ProcessingState.ITERATING: {ProcessingState.ITERATING,
                                ProcessingState.CONVERGED,
                                ProcessingState.MAX_ITER_REACHED},
    ProcessingState.CONVERGED: set(),
    ProcessingState.MAX_ITER_REACHED: set(),
}


class ProcessingStateMachine:
    """Explicit state of one process() call.

    Usage:
        >>> machine = ProcessingStateMachine(SwapConvergence(1e-3), max_iter=100)
        >>> machine.start()
        >>> while not machine.is_terminal:
        ...     machine.advance(swap_applied=..., max_change=...)
    """

    def __init__(self, criterion: ConvergenceCriterion, max_iter: int):
        if max_iter < 0:
            raise ValueError(f"max_iter must be non-negative, got {max_iter}")
        self.criterion = criterion
        self.max_iter = max_iter
        self.state = ProcessingState.INITIALIZING
        self.iteration = 0

    @property
    def is_terminal(self) -> bool:
        return self.state.is_terminal

    def _transition(self, new_state: ProcessingState) -> None:
        if new_state not in _TRANSITIONS[self.state]:
            raise RuntimeError(f"Illegal transition {self.state.name} -> {new_state.name}")
        self.state = new_state

    def start(self) -> ProcessingState:
        """Leave INITIALIZING once inputs are validated."""
        if self.state is not ProcessingState.INITIALIZING:
            raise RuntimeError(f"Cannot start from state {self.state.name}")
        self._transition(ProcessingState.ITERATING)
        self.criterion.reset()
        # A zero budget allows no iteration at all
        if self.max_iter == 0:
            self._transition(ProcessingState.MAX_ITER_REACHED)
        return self.state

    def advance(self, swap_applied: bool, max_change: float,
                metadata: Optional[Dict[str, Any]] = None) -> ProcessingState:
        """Record one finished iteration and move to the next state."""
        if self.state is not ProcessingState.ITERATING:
            raise RuntimeError(f"Cannot advance from state {self.state.name}")

        self.iteration += 1
        current_state = {
            'iteration': self.iteration,
            'swap_applied': swap_applied,
            'max_change': max_change
        }
        if metadata:
            current_state.update(metadata)

        if self.criterion.check(current_state):
            self._transition(ProcessingState.CONVERGED)
        elif self.iteration >= self.max_iter:
            self._transition(ProcessingState.MAX_ITER_REACHED)
        else:
            self._transition(ProcessingState.ITERATING)

        return self.state
