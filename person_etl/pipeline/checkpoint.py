"""
Append-only restart log of committed chunks.

One JSON object per line, written after the sink committed the chunk:

    {"chunk": 1, "items": 10, "committed_at": "2026-01-01T00:00:00+00:00"}

On restart the step skips as many input records as the log says were
committed. A marker is appended only after the database commit returns, so a
crash between the two replays at most that one chunk.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import List, Tuple

from person_etl.errors import ResourceError
from person_etl.utils.logging import get_logger

log = get_logger(__name__)


@dataclass(frozen=True)
class ChunkMarker:
    chunk: int
    items: int
    committed_at: str


class ChunkCheckpointLog:
    def __init__(self, path: Path | str) -> None:
        self.path = Path(path)

    def markers(self) -> List[ChunkMarker]:
        """
        Parse every committed marker.

        A final line without its newline is what an interrupted `append`
        leaves behind; it is dropped. Any other unreadable line raises
        `ResourceError`.
        """
        if not self.path.exists():
            return []
        try:
            text = self.path.read_text(encoding="utf-8")
        except OSError as exc:
            raise ResourceError(str(self.path), exc.strerror or str(exc)) from exc

        lines = text.split("\n")
        # text.split leaves "" after a trailing newline; anything else is a torn write
        torn = lines.pop()
        if torn.strip():
            log.warning(
                "Ignoring incomplete checkpoint line",
                extra={"path": str(self.path), "line": torn},
            )

        markers: List[ChunkMarker] = []
        for line_number, line in enumerate(lines, start=1):
            if not line.strip():
                continue
            try:
                payload = json.loads(line)
                markers.append(
                    ChunkMarker(
                        chunk=int(payload["chunk"]),
                        items=int(payload["items"]),
                        committed_at=str(payload.get("committed_at", "")),
                    )
                )
            except (ValueError, KeyError, TypeError) as exc:
                raise ResourceError(
                    str(self.path), f"corrupt checkpoint marker on line {line_number}: {exc}"
                ) from exc
        return markers

    def resume_point(self) -> Tuple[int, int]:
        """Committed item count and last committed chunk number, from one read."""
        markers = self.markers()
        if not markers:
            return 0, 0
        return sum(marker.items for marker in markers), markers[-1].chunk

    def committed_items(self) -> int:
        return self.resume_point()[0]

    def last_chunk(self) -> int:
        return self.resume_point()[1]

    def append(self, chunk: int, items: int) -> ChunkMarker:
        marker = ChunkMarker(
            chunk=chunk,
            items=items,
            committed_at=datetime.now(timezone.utc).isoformat(),
        )
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self._drop_torn_tail()
        with self.path.open("a", encoding="utf-8") as f:
            f.write(json.dumps(marker.__dict__) + "\n")
            f.flush()
        return marker

    def _drop_torn_tail(self) -> None:
        if not self.path.exists():
            return
        with self.path.open("rb+") as f:
            data = f.read()
            if not data or data.endswith(b"\n"):
                return
            f.truncate(data.rfind(b"\n") + 1)

    def clear(self) -> None:
        if self.path.exists():
            self.path.unlink()
            log.info("Checkpoint log cleared", extra={"path": str(self.path)})


__all__ = ["ChunkCheckpointLog", "ChunkMarker"]
