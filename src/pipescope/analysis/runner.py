"""
Running several analysis passes over one source.
"""

import logging
from collections.abc import Iterable

from pipescope.analysis.annotations import Annotation
from pipescope.analysis.base import Analysis
from pipescope.core.pipeline import AnalysisSource

logger = logging.getLogger(__name__)


async def run_analyses(
    source: AnalysisSource, analyses: Iterable[Analysis]
) -> list[Annotation]:
    """
    Run analysis passes in order and collect their annotations.

    Params:
        source: Source shared by every pass
        analyses: Passes to run; each keeps its own results as well

    Returns:
        Annotations of all passes, grouped by pass in run order

    Raises:
        PipelineStructureError: If the pipeline is malformed; remaining
            passes are not run
    """
    annotations: list[Annotation] = []
    for analysis in analyses:
        await analysis.run(source)
        found = analysis.get_annotations()
        logger.debug("Analysis %s produced %d annotations", analysis.id, len(found))
        annotations.extend(found)
    return annotations
