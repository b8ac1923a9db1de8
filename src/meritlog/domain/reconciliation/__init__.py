"""Client-side reconciliation of polled claim lists.

Each dashboard owns one loop:
1) fetch the claims visible to its actor
2) diff them against the currently shown view
3) replace the view in one step, keeping optimistic mutations the fetch predates
4) hand the derived events to the notification sink
"""

from __future__ import annotations

from .loop import ReconciliationLoop, TickResult
from .overlay import OptimisticMutation, OptimisticOverlay
from .snapshot import ClaimSnapshot

__all__ = [
    "ClaimSnapshot",
    "OptimisticMutation",
    "OptimisticOverlay",
    "ReconciliationLoop",
    "TickResult",
]
