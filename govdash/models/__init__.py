from govdash.models.organization import Organization
from govdash.models.proposal import Proposal
from govdash.models.vote import Vote

__all__ = [
    "Organization",
    "Proposal",
    "Vote",
]
