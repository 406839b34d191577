"""Branch sync exceptions.

Fatal errors raised before any target work is dispatched, plus the
configuration errors raised by source handlers and log path resolution.
"""


class BranchSyncError(Exception):
    """Base exception for branch sync errors."""

    pass


class UnsupportedSourcesError(BranchSyncError):
    """Raised when none of the requested sources can be synced."""

    def __init__(self, supported: list[str]) -> None:
        super().__init__(
            "Nothing to sync, stopping. Sync command currently only supports "
            f"the following sources: {','.join(supported)}"
        )
        self.supported = supported


class UnsupportedSourceError(BranchSyncError):
    """Raised when a target's origin has no source handler."""

    def __init__(self, origin: str) -> None:
        super().__init__(f"Source '{origin}' is not supported for branch sync")
        self.origin = origin


class OrgNotFoundError(BranchSyncError):
    """Raised when the organization cannot be read (missing or forbidden)."""

    def __init__(self, org_id: str) -> None:
        super().__init__(
            f"Org {org_id} was not found or you may not have the correct "
            "permissions to access the org"
        )
        self.org_id = org_id


class CustomBranchEnabledError(BranchSyncError):
    """Raised when the organization uses the custom branch feature."""

    def __init__(self, org_id: str) -> None:
        super().__init__(
            f"Detected custom branches feature. Skipping syncing organization {org_id} "
            "because it is not possible to determine which should be the default branch."
        )
        self.org_id = org_id


class SourceNotConfiguredError(BranchSyncError):
    """Raised when a source's credentials are missing from the environment."""

    pass


class LoggingPathError(BranchSyncError):
    """Raised when the sync log directory is unset or does not exist."""

    pass
