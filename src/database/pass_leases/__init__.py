"""Database model and operations for the in-flight pass guard."""

from src.database.pass_leases.models import PassLease
from src.database.pass_leases.operations import acquire_lease, release_lease

__all__ = [
    "PassLease",
    "acquire_lease",
    "release_lease",
]
