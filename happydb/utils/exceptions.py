from typing import Optional


class AnalysisError(Exception):
    """Flexible analysis exception tagged with the pipeline stage that failed."""

    stage: str = "analysis"

    def __init__(
        self, code: str, message: Optional[str] = None, stage: Optional[str] = None
    ):
        self.code = code
        self.message = message or "An error occurred"
        if stage is not None:
            self.stage = stage
        super().__init__(f"[{self.stage}] {self.code}: {self.message}")


class DataFetchError(AnalysisError):
    """Remote source unreachable or malformed."""

    stage = "fetch"


class DemographicRepairError(AnalysisError):
    """Age values that cannot be repaired under the configured policy."""

    stage = "clean"

    def __init__(
        self, code: str, message: Optional[str] = None, wids: Optional[list] = None
    ):
        self.wids = list(wids or [])
        super().__init__(code=code, message=message)


class InsufficientDataError(AnalysisError):
    """Degenerate modeling input (empty vocabulary, more topics than documents)."""

    stage = "model"


class EmptyGroupError(AnalysisError):
    """A group key has no surviving tokens after filtering."""

    stage = "model"

    def __init__(self, group, message: Optional[str] = None):
        self.group = group
        super().__init__(
            code="EMPTY_GROUP",
            message=message or f"Group '{group}' has no surviving tokens.",
        )


class ConfigError(AnalysisError):
    """Unreadable or invalid run configuration."""

    stage = "config"
