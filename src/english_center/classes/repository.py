from __future__ import annotations

from typing import Any, Dict, List, Mapping, Optional, Protocol


class OccupancyMaintainer(Protocol):
    def recompute_occupancy(self, class_id: int) -> Optional[int]:
        """Set ``current_students`` to the live count of ACTIVE enrollments.

        Returns the new count, or None when the class does not exist.
        """

        raise NotImplementedError


class ClassRepository(OccupancyMaintainer, Protocol):
    def list_all(self) -> List[Dict[str, Any]]:
        raise NotImplementedError

    def get_by_id(self, record_id: int) -> Optional[Dict[str, Any]]:
        raise NotImplementedError

    def search(self, term: str) -> List[Dict[str, Any]]:
        raise NotImplementedError

    def create(self, values: Mapping[str, Any]) -> Dict[str, Any]:
        raise NotImplementedError

    def update(self, record_id: int, values: Mapping[str, Any]) -> Optional[Dict[str, Any]]:
        raise NotImplementedError

    def delete(self, record_id: int) -> Optional[Dict[str, Any]]:
        raise NotImplementedError
