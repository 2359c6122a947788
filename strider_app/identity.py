"""
Submitter identity collaborators.

The core treats the submitter address as an opaque string: it is never
parsed or validated, only passed through into run records.
"""

from abc import ABC, abstractmethod
from typing import Optional


class IdentityProvider(ABC):
    """Source of the runner's ledger address (e.g. a connected wallet)."""

    @abstractmethod
    def get_address(self) -> Optional[str]:
        """Return the address, or None when no identity is connected."""
        pass


class StaticIdentity(IdentityProvider):
    """Identity known up front, such as a configured account."""

    def __init__(self, address: Optional[str]):
        self.address = address

    def get_address(self) -> Optional[str]:
        return self.address


def abbreviate_address(address: str, head: int = 8, tail: int = 4) -> str:
    """Shorten an address for display, e.g. "GABCDEFG...WXYZ"."""
    if len(address) <= head + tail:
        return address
    return f"{address[:head]}...{address[-tail:]}"
