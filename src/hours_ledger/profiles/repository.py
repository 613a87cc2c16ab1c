from __future__ import annotations

from typing import Iterable, Optional, Protocol, Sequence

from .model import Profile


class ProfileRepository(Protocol):
    """Read access to profile relationship data.

    Note: services call this on every authorization check; results must not be
    cached on the service side.
    """

    def get_by_id(self, profile_id: int) -> Optional[Profile]:
        raise NotImplementedError

    def list_by_ids(self, profile_ids: Iterable[int]) -> Sequence[Profile]:
        raise NotImplementedError

    def list_active_staff(self) -> Sequence[Profile]:
        raise NotImplementedError

    def list_staff_for_supervisor(self, supervisor_id: int) -> Sequence[Profile]:
        """Active profiles whose supervisor_id is ``supervisor_id``."""

        raise NotImplementedError
