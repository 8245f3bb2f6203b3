"""Tests for the allocation event log.

The logger records structured entries for allocator events so a
placement policy can be followed step by step.
"""

from py_heap.logging import LogEntry, Logger, LogLevel
from py_heap.memory.best_fit import BestFitAllocator
from py_heap.memory.errors import OutOfMemoryError
from py_heap.memory.first_fit import FirstFitAllocator

SPACE_SIZE = 10


class TestLogLevel:
    """Verify log level ordering."""

    def test_levels_are_ordered(self) -> None:
        """DEBUG < INFO < WARNING < ERROR."""
        assert LogLevel.DEBUG < LogLevel.INFO
        assert LogLevel.INFO < LogLevel.WARNING
        assert LogLevel.WARNING < LogLevel.ERROR


class TestLogEntry:
    """Verify log entry structure."""

    def test_entry_has_fields(self) -> None:
        """A log entry should store level, message, and source."""
        entry = LogEntry(level=LogLevel.INFO, message="allocated", source="best-fit")
        assert entry.level is LogLevel.INFO
        assert entry.message == "allocated"
        assert entry.source == "best-fit"

    def test_entry_str(self) -> None:
        """String form should be ``[LEVEL] source: message``."""
        entry = LogEntry(level=LogLevel.WARNING, message="out of memory", source="first-fit")
        assert str(entry) == "[WARNING] first-fit: out of memory"


class TestLogger:
    """Verify the append-only log buffer."""

    def test_starts_empty(self) -> None:
        """A new logger has no entries."""
        assert Logger().entries == []

    def test_log_appends_in_order(self) -> None:
        """Entries come back in the order they were logged."""
        logger = Logger()
        logger.log(LogLevel.INFO, "first", source="a")
        logger.log(LogLevel.DEBUG, "second", source="b")
        assert [e.message for e in logger.entries] == ["first", "second"]
        assert len(logger) == 2

    def test_entries_is_a_copy(self) -> None:
        """Mutating the returned list must not affect the log."""
        logger = Logger()
        logger.log(LogLevel.INFO, "kept", source="a")
        logger.entries.clear()
        assert len(logger) == 1

    def test_min_level_drops_quieter_entries(self) -> None:
        """Entries below the configured level are not recorded."""
        logger = Logger(min_level=LogLevel.INFO)
        logger.log(LogLevel.DEBUG, "noise", source="a")
        logger.log(LogLevel.INFO, "signal", source="a")
        assert [e.message for e in logger.entries] == ["signal"]

    def test_filter_by_level_and_source(self) -> None:
        """Filtering combines minimum level and source."""
        logger = Logger()
        logger.log(LogLevel.INFO, "one", source="a")
        logger.log(LogLevel.WARNING, "two", source="a")
        logger.log(LogLevel.WARNING, "three", source="b")
        result = logger.filter(min_level=LogLevel.WARNING, source="a")
        assert [e.message for e in result] == ["two"]

    def test_clear(self) -> None:
        """Clearing removes every entry."""
        logger = Logger()
        logger.log(LogLevel.INFO, "gone", source="a")
        logger.clear()
        assert logger.entries == []


class TestAllocatorLogging:
    """Verify allocators report their events."""

    def test_best_fit_logs_allocate_and_release(self) -> None:
        """Allocation and release each leave an INFO entry."""
        logger = Logger()
        allocator = BestFitAllocator(size=SPACE_SIZE, logger=logger)
        handle = allocator.allocate(4)
        allocator.release(handle)
        messages = [e.message for e in logger.filter(source="best-fit")]
        assert messages == ["Allocated 4 cells at 0", "Released 4 cells at 0"]

    def test_failed_allocation_is_a_warning(self) -> None:
        """Running out of memory is logged at WARNING."""
        logger = Logger()
        allocator = FirstFitAllocator(size=SPACE_SIZE, logger=logger)
        allocator.allocate(SPACE_SIZE)
        try:
            allocator.allocate(1)
        except OutOfMemoryError:
            pass
        warnings = logger.filter(min_level=LogLevel.WARNING)
        assert len(warnings) == 1
        assert warnings[0].source == "first-fit"

    def test_no_logger_is_fine(self) -> None:
        """Allocators work without a logger."""
        allocator = BestFitAllocator(size=SPACE_SIZE)
        handle = allocator.allocate(1)
        allocator.release(handle)
        assert allocator.free_size == SPACE_SIZE
