class TimestampRenameError(Exception):
    """Base error for the project."""


class DirectoryError(TimestampRenameError):
    """The directory to process is missing or cannot be listed."""


class NamingConflictError(TimestampRenameError):
    """Two or more files would be renamed to the same target name."""

    def __init__(self, report):
        self.report = report
        super().__init__(
            f"{len(report.groups)} conflicting target name(s): "
            + ", ".join(target for target, _ in report.groups)
        )


class ContainerFormatError(TimestampRenameError):
    """A binary metadata container is truncated or malformed."""
