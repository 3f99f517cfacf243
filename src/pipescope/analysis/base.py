"""
Interface shared by analysis passes.
"""

from abc import ABC, abstractmethod

from pipescope.analysis.annotations import Annotation
from pipescope.core.pipeline import AnalysisSource


class Analysis(ABC):
    """Abstract base class for analysis passes run against an AnalysisSource."""

    @property
    @abstractmethod
    def id(self) -> str:
        """Identifier stamped on every annotation the pass produces."""
        pass

    @abstractmethod
    def get_annotations(self) -> list[Annotation]:
        """Annotations produced by the last run, in traversal order."""
        pass

    @abstractmethod
    async def run(self, source: AnalysisSource) -> None:
        """Analyse a source, replacing any previous results."""
        pass
