"""Branch sync module - align platform projects with default branches.

Services:
- BranchDecisionMaker: Single project decision (no-op / update / failure)
- TargetProjectSynchronizer: All projects of one target
- TargetBatchSynchronizer: Many targets with failure isolation
- OrgSyncOrchestrator: Every supported source of an organization
"""

from .batch_sync import TargetBatchSynchronizer
from .decision import BranchDecisionMaker
from .orchestrator import CUSTOM_BRANCH_FLAG, OrgSyncOrchestrator
from .results import (
    OrgSyncResult,
    ProjectUpdate,
    ProjectUpdateFailure,
    SyncResult,
    TargetSyncResult,
)
from .target_sync import TargetProjectSynchronizer

__all__ = [
    # Org orchestration
    "CUSTOM_BRANCH_FLAG",
    "OrgSyncOrchestrator",
    "OrgSyncResult",
    # Target batches
    "SyncResult",
    "TargetBatchSynchronizer",
    # Single target
    "TargetProjectSynchronizer",
    "TargetSyncResult",
    # Single project
    "BranchDecisionMaker",
    "ProjectUpdate",
    "ProjectUpdateFailure",
]
