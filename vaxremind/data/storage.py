"""Child registry storage for the reminder service."""

import json
from pathlib import Path
from typing import Union

import aiofiles

from vaxremind.errors import StoreUnavailable
from vaxremind.utils import logger

from .models import Child, ScheduledDose


class ChildStore:
    """Read access to children and their vaccination schedules.

    Records are JSON files:
        {data_dir}/children/{child_id}.json   - child record
        {data_dir}/schedules/{child_id}.json  - list of schedule entries

    Writes use the atomic write pattern (temp file, then rename). The
    reminder run only reads; writes exist for seeding the registry.
    """

    def __init__(self, data_dir: Union[str, Path] = "data"):
        """Initialize child store.

        Args:
            data_dir: Root directory of the registry files
        """
        self.data_dir = Path(data_dir)
        self.children_dir = self.data_dir / "children"
        self.schedules_dir = self.data_dir / "schedules"
        self._ensure_dirs()

    def _ensure_dirs(self) -> None:
        """Ensure registry directories exist."""
        self.children_dir.mkdir(parents=True, exist_ok=True)
        self.schedules_dir.mkdir(parents=True, exist_ok=True)
        logger.debug(f"Registry directories ensured under {self.data_dir}")

    def _child_path(self, child_id: str) -> Path:
        return self.children_dir / f"{child_id}.json"

    def _schedule_path(self, child_id: str) -> Path:
        return self.schedules_dir / f"{child_id}.json"

    async def _read_json(self, path: Path):
        async with aiofiles.open(path, mode="r", encoding="utf-8") as f:
            content = await f.read()
        return json.loads(content)

    async def _write_json(self, path: Path, data) -> None:
        temp_path = path.with_name(path.name + ".tmp")
        json_content = json.dumps(data, ensure_ascii=False, indent=2)
        try:
            async with aiofiles.open(temp_path, mode="w", encoding="utf-8") as f:
                await f.write(json_content)
            temp_path.replace(path)
        except Exception:
            if temp_path.exists():
                temp_path.unlink()
            raise

    async def list_children(self) -> list[Child]:
        """List all registered children.

        A single corrupt child record is logged and left out; the listing
        as a whole fails only when the registry cannot be read.

        Returns:
            List of Child instances ordered by id

        Raises:
            StoreUnavailable: If the registry directory cannot be read
        """
        if not self.children_dir.is_dir():
            logger.error(f"Registry directory missing: {self.children_dir}")
            raise StoreUnavailable(f"Registry directory missing: {self.children_dir}")

        try:
            paths = sorted(self.children_dir.glob("*.json"))
        except OSError as e:
            logger.error(f"Cannot list children in {self.children_dir}: {e}")
            raise StoreUnavailable(f"Cannot list children: {e}") from e

        children = []
        for path in paths:
            try:
                data = await self._read_json(path)
                children.append(Child.from_dict(data, child_id=path.stem))
            except (json.JSONDecodeError, ValueError, TypeError, AttributeError) as e:
                logger.error(f"Corrupted child record {path.name}: {type(e).__name__}: {e}")
            except OSError as e:
                logger.error(f"Cannot read child record {path.name}: {e}")
                raise StoreUnavailable(f"Cannot read child record {path.name}: {e}") from e

        logger.debug(f"Found {len(children)} children")
        return children

    async def list_schedule(self, child_id: str) -> list[ScheduledDose]:
        """List scheduled doses of one child.

        A child without a schedule file has an empty schedule.

        Args:
            child_id: Child identifier

        Returns:
            List of ScheduledDose instances

        Raises:
            StoreUnavailable: If the schedule cannot be read or parsed
        """
        path = self._schedule_path(child_id)

        if not path.exists():
            logger.debug(f"No schedule stored for child {child_id}")
            return []

        try:
            entries = await self._read_json(path)
            if not isinstance(entries, list):
                raise ValueError("schedule must be a list of entries")
            return [
                ScheduledDose.from_dict(entry, child_id=child_id, index=index)
                for index, entry in enumerate(entries)
            ]
        except (OSError, json.JSONDecodeError, ValueError, TypeError, AttributeError) as e:
            logger.error(f"Cannot read schedule for child {child_id}: {type(e).__name__}: {e}")
            raise StoreUnavailable(f"Cannot read schedule for child {child_id}: {e}") from e

    async def save_child(self, child: Child) -> None:
        """Save child record with atomic write."""
        await self._write_json(self._child_path(child.id), child.to_dict())
        logger.debug(f"Saved child record: {child.id}")

    async def save_schedule(self, child_id: str, doses: list[ScheduledDose]) -> None:
        """Save a child's schedule with atomic write."""
        await self._write_json(
            self._schedule_path(child_id),
            [dose.to_dict() for dose in doses],
        )
        logger.debug(f"Saved schedule for child {child_id}: {len(doses)} dose(s)")
