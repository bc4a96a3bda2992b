"""Base controller classes."""

from kafkalens.controllers.base.base_controller import (
    BaseController,
    Listener,
    ObservableMixin,
)

__all__ = [
    "BaseController",
    "Listener",
    "ObservableMixin",
]
