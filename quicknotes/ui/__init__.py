from .main_window import NotesWindow
from .tray import build_tray_icon

__all__ = ["NotesWindow", "build_tray_icon"]
