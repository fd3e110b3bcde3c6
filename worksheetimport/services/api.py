from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Any, Dict

from .model import Batch, Sample, TestPage


class ServiceError(RuntimeError):
    pass


class BatchService(ABC):
    @abstractmethod
    def get(self, batch_id: str) -> Batch:
        pass

    @abstractmethod
    def patch_worksheet(self, batch_id: str, data: Dict[str, str]) -> None:
        pass


class TestService(ABC):
    __test__ = False

    @abstractmethod
    def list_page(self, batch_id: str, page_num: int) -> TestPage:
        """Return one page (1-based) of the tests assigned to a batch."""
        pass

    @abstractmethod
    def get_worksheet(self, test_id: int) -> Dict[str, Any]:
        """Return the worksheet document (field name -> field object) of a test.

        ws_instrument_results is returned still encoded. The writer decodes
        and re-encodes it (writer.decode_instrument_results /
        encode_instrument_results).
        """
        pass

    @abstractmethod
    def update_worksheet(self, test_id: int, worksheet: Dict[str, Any], run_calculations: bool = True) -> None:
        pass


class SampleService(ABC):
    @abstractmethod
    def get(self, sample_id: int) -> Sample:
        pass


class ParameterStore(ABC):
    @abstractmethod
    def get(self, param_set_id: str) -> Dict[str, Any]:
        """Return the raw assay parameter document stored under param_set_id."""
        pass


class Console(ABC):
    """User-visible message sink of the host."""

    @abstractmethod
    def log(self, message: str) -> None:
        pass


class ProgressBar(ABC):
    @abstractmethod
    def set_percentage(self, value: int) -> None:
        pass


class LoggingConsole(Console):
    def __init__(self, logger: logging.Logger | None = None) -> None:
        self._logger = logger or logging.getLogger("worksheetimport")

    def log(self, message: str) -> None:
        self._logger.info(message)


class NullProgressBar(ProgressBar):
    def set_percentage(self, value: int) -> None:
        return None
