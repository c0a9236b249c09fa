"""Pipeline orchestration.

Runs a sequence of L1R files through the processor in the order given,
owns the logging setup and the run ledger, and completes the last pass at
the end of the input.
"""

import time
import logging
from pathlib import Path
from typing import Iterable, List, Optional

from radsgen.pipeline.accumulator import PassAccumulator
from radsgen.pipeline.commit import CommitPolicy
from radsgen.pipeline.processor import PassProcessor
from radsgen.pipeline.file_tracker import FileProcessingTracker
from radsgen.setup_directories import get_log_path, get_tracker_path, setup_output_directories
from radsgen.writer.archive import NetCDFPassWriter

__all__ = ['PipelineOrchestrator']

logger = logging.getLogger(__name__)


class PipelineOrchestrator:
    """Manages a conversion run from L1R files to RADS pass files.

    This is the main entry point for running ``radsgen``. Processing is
    strictly sequential: files are read in the order given, and passes are
    written in the order they are completed.

    **Run lifecycle:**

    1. Create the output directories below ``base_dir`` (data/, logs/).
    2. Configure logging to console and logs/radsgen_c2.log.
    3. Open the run ledger (logs/radsgen_c2_tracker.db).
    4. Process every file; the pass buffer persists between files.
    5. Complete the pass still buffered at the end of the input.
    6. Log ledger statistics and close the ledger.

    A contract violation aborts the run: the exception propagates to the
    caller after the ledger is closed.

    Example usage::

        from radsgen.schemas import resolve_config, ParamConfig
        from radsgen.pipeline.orchestrator import PipelineOrchestrator

        config = resolve_config(ParamConfig(), None, None)
        orch = PipelineOrchestrator(config)
        written = orch.run(["CS_OFFL_SIR_GDR_2__..._C001.nc", ...])
    """

    def __init__(self, config, writer=None, setup_logging: bool = True):
        """Initialize orchestrator with resolved configuration.

        Parameters
        ----------
        config : InternalConfig
            Fully validated runtime configuration.

        writer : PassWriter, optional
            Pass writer; a NetCDFPassWriter below ``base_dir`` by default.

        setup_logging : bool, optional
            Install the console and file log handlers (default: True).
            Tests that capture logs switch this off.
        """
        self.config = config
        self.output_dirs = setup_output_directories(config.base_dir)
        self.writer = writer or NetCDFPassWriter(config, self.output_dirs)
        self._setup_logging_enabled = setup_logging

        self.tracker: Optional[FileProcessingTracker] = None
        self.accumulator = None
        self.processor = None
        self.state = None
        self.written: List[Path] = []
        self.statistics = {}

    def _setup_logging(self):
        """Configure logging and the run ledger.

        Initializes root logger with file and console handlers at the
        configured level, then opens the FileProcessingTracker.
        """
        satellite = self.config.output.satellite
        if self._setup_logging_enabled:
            log_level = getattr(logging, self.config.logging.level)
            log_path = get_log_path(self.output_dirs, satellite)

            formatter = logging.Formatter(
                fmt='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
                datefmt='%Y-%m-%d %H:%M:%S'
            )

            # Clear existing handlers and add new ones
            root = logging.getLogger()
            root.setLevel(log_level)
            for handler in root.handlers[:]:
                root.removeHandler(handler)

            fh = logging.FileHandler(log_path)
            fh.setLevel(log_level)
            fh.setFormatter(formatter)
            root.addHandler(fh)

            ch = logging.StreamHandler()
            ch.setLevel(log_level)
            ch.setFormatter(formatter)
            root.addHandler(ch)

            logger.info("Logging: level=%s, file=%s", self.config.logging.level, log_path)

        tracker_path = get_tracker_path(self.output_dirs, satellite)
        self.tracker = FileProcessingTracker(tracker_path)
        logger.info("File tracker: %s", tracker_path)

    def _build(self):
        """Wire commit policy, accumulator and processor for one run."""
        commit = CommitPolicy(self.config, self.writer, tracker=self.tracker)
        self.accumulator = PassAccumulator(self.config, commit.flush)
        self.processor = PassProcessor(self.config, self.accumulator, file_tracker=self.tracker)
        self.state = self.accumulator.new_state()

    def run(self, files: Iterable) -> List[Path]:
        """Convert the files in order and return the written pass files.

        Parameters
        ----------
        files : iterable of str or Path
            L1R file names. Blank entries are ignored.

        Returns
        -------
        list of Path
            Pass files written, in the order they were completed.

        Raises
        ------
        ContractViolation
            A pipeline invariant was broken; the run is aborted.
        """
        self._setup_logging()
        self.written = []
        start = time.time()

        logger.info("=" * 60)
        logger.info("Starting CryoSat-2 L1R conversion")
        logger.info("=" * 60)

        try:
            self._build()
            nfiles = 0
            for filepath in files:
                filepath = str(filepath).strip()
                if not filepath:
                    continue
                nfiles += 1
                self.written += self.processor.process_file(filepath, self.state)

            # Dump whatever remains
            path = self.accumulator.flush(self.state)
            if path is not None:
                self.written.append(path)

            logger.info("=" * 60)
            logger.info("Run complete: %d files, %d passes written, %.1f seconds",
                        nfiles, len(self.written), time.time() - start)
            self._log_statistics()
            return self.written
        finally:
            self.close()

    def _log_statistics(self):
        if not self.tracker:
            return
        stats = self.tracker.get_statistics()
        self.statistics = stats
        logger.info("Statistics: files=%d accumulated=%d skipped=%d passes=%d failed=%d records=%d",
                    stats["files"], stats["files_accumulated"], stats["files_skipped"],
                    stats["passes_written"], stats["passes_failed"], stats["records_written"])
        logger.info("=" * 60)

    def close(self):
        """Close the run ledger. Safe to call multiple times."""
        if self.tracker:
            self.tracker.close()
            self.tracker = None
