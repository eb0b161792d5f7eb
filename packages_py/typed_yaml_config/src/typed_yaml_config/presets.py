"""Stock schemas for a windowed application."""

from typing import Optional, Tuple

from .schema import config, setting
from .types import UInt16


@config
class DisplayConfig:
    title: str = setting("Amethyst game", doc="Window title.")
    brightness: float = setting(1.0, doc="Brightness multiplier, 1.0 is unchanged.")
    fullscreen: bool = False
    dimensions: Tuple[UInt16, UInt16] = setting(
        (1024, 768), doc="Width and height of the window on initialization."
    )
    min_dimensions: Optional[Tuple[UInt16, UInt16]] = None
    max_dimensions: Optional[Tuple[UInt16, UInt16]] = None
    vsync: bool = True
    multisampling: UInt16 = 0
    visibility: bool = True


@config
class LoggingConfig:
    file_path: str = "new_project.log"
    output_level: str = "warn"
    logging_level: str = "debug"
