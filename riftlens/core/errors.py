"""Exception hierarchy for riftlens.

Missing or partial upstream data is never an error inside the core; these
exceptions cover contract violations and adapter failures only.
"""


class RiftlensError(Exception):
    """Base class for all riftlens errors."""


class RoleAssignmentError(RiftlensError):
    """Raised when a team roster cannot be assigned (e.g. more than five players)."""
