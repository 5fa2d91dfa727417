from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass
class DisplayState:
    """Popup ownership shared by the controller and the popup manager.

    ``surface`` and ``buffer`` are opaque handles issued by the surface
    provider; ``None`` means not allocated.
    """

    enabled: bool = False
    surface: Any = None
    buffer: Any = None

    def forget_surface(self) -> None:
        self.surface = None
        self.buffer = None
