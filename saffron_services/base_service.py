"""
    Generic base service for schema text operations.

    Design Pattern: Template Method
    ─────────────────────────────────
    Defines the skeleton of a schema text operation
    (normalize → transform), letting concrete subclasses (SchemaParser,
    SchemaHighlighter) provide the transform step.

    Genericity:
    ─────────────────────────
    Uses Generic[TResult] so each service declares what it produces.
"""
from abc import ABC, abstractmethod
from typing import Generic, Optional, TypeVar

TResult = TypeVar('TResult')


class SchemaTextService(ABC, Generic[TResult]):
    """
    Abstract generic base for services that consume raw schema source.

    Concrete subclasses must implement:
        - _transform(text) → result
    """

    def execute(self, text: Optional[str]) -> TResult:
        """
        Template Method: normalize → transform.

        ``None`` is treated as an empty document.
        """
        return self._transform(self._normalize(text))

    @staticmethod
    def _normalize(text: Optional[str]) -> str:
        return text or ""

    @abstractmethod
    def _transform(self, text: str) -> TResult:
        ...
