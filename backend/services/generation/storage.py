"""Artifact storage for rendered documents."""

import asyncio
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Protocol

from config import settings

logger = logging.getLogger(__name__)


@dataclass
class StoredArtifact:
    url: str
    path: str
    size: int  # bytes


class ArtifactStore(Protocol):
    async def save(self, file_name: str, data: bytes) -> StoredArtifact: ...


class LocalArtifactStore:
    """Writes artifacts under a local directory and returns file:// URLs."""

    def __init__(self, output_dir: str | Path | None = None) -> None:
        self.output_dir = Path(output_dir or settings.output_dir)

    def _write(self, path: Path, data: bytes) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(data)

    async def save(self, file_name: str, data: bytes) -> StoredArtifact:
        # Only the base name is honoured so callers cannot escape output_dir
        path = self.output_dir / Path(file_name).name
        await asyncio.to_thread(self._write, path, data)
        logger.info("Stored %s (%d bytes)", path, len(data))
        return StoredArtifact(url=path.resolve().as_uri(), path=str(path), size=len(data))
