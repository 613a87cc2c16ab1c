from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..core.enums import Role


@dataclass(frozen=True)
class Profile:
    """Domain entity: a worker's profile and reporting line.

    Note: owned by the identity service; this package only reads it.
    """

    profile_id: int
    name: str
    role: Role
    supervisor_id: Optional[int] = None
    manager_id: Optional[int] = None
    is_active: bool = True
