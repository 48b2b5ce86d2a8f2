from . import auth_ui, ui

__all__ = ["auth_ui", "ui"]
