"""Pipeline modules.

- orchestrator: Main conversion run controller
- processor: Per-file L1R processing
- accumulator: Pass buffer and pass splitting
- commit: Pass selection and hand-off to the writer
- file_tracker: SQLite-based run ledger
"""

from radsgen.pipeline.orchestrator import PipelineOrchestrator
from radsgen.pipeline.processor import PassProcessor
from radsgen.pipeline.accumulator import AccumulationState, PassAccumulator
from radsgen.pipeline.commit import CommitPolicy, SelectionWindow
from radsgen.pipeline.file_tracker import FileProcessingTracker

__all__ = [
    "PipelineOrchestrator",
    "PassProcessor",
    "AccumulationState",
    "PassAccumulator",
    "CommitPolicy",
    "SelectionWindow",
    "FileProcessingTracker",
]
