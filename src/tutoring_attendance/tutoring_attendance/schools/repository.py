from __future__ import annotations

from datetime import datetime
from typing import Optional, Protocol


class SchoolDirectory(Protocol):
    """Read-only view over schools, classes and rosters."""

    def school_exists(self, school_id: str) -> bool:
        raise NotImplementedError

    def class_exists(self, class_id: str) -> bool:
        raise NotImplementedError

    def get_school_id_for_class(self, class_id: str) -> Optional[str]:
        raise NotImplementedError

    def list_active_student_ids(self, class_id: str, *, on: datetime) -> set[str]:
        """Students enrolled in the class at the given lesson time."""

        raise NotImplementedError
