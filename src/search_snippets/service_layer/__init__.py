"""Service layer - orchestrates snippet building into navigable result sets."""

from search_snippets.service_layer.find_controller import FindControllerProtocol
from search_snippets.service_layer.result_presenter import ResultPresenter, ResultState


__all__ = ["FindControllerProtocol", "ResultPresenter", "ResultState"]
