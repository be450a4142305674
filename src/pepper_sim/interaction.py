# MIT License (see LICENSE)
"""
Pointer gestures mapped onto simulation requests.

A press drops a full-strength pulse and aggressively weakens the sheet
under the pointer (it may tear there at once). Dragging with the button
held drops weaker pulses and weakens without forcing tears. Moves with the
button up do nothing.
"""
from __future__ import annotations
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .simulation import Simulation


class PointerController:
    """
    Translate pointer events into ``inject_pulse`` / ``weaken_near`` calls.

    Coordinates must already be in domain space; mapping from screen or
    client coordinates belongs to the front end.
    """

    def __init__(self, sim: "Simulation") -> None:
        self.sim = sim
        self.is_down = False

    def pointer_down(self, x: float, y: float) -> None:
        self.is_down = True
        self.sim.inject_pulse(x, y)
        self.sim.weaken_near(x, y, aggressive=True)

    def pointer_move(self, x: float, y: float) -> bool:
        """
        Handle a move event.

        Returns:
            True if the move produced requests (button held).
        """
        if not self.is_down:
            return False
        cfg = self.sim.config
        self.sim.inject_pulse(x, y, cfg.pulse_strength * cfg.move_pulse_scale)
        self.sim.weaken_near(x, y, aggressive=False)
        return True

    def pointer_up(self) -> None:
        self.is_down = False

    pointer_cancel = pointer_up
