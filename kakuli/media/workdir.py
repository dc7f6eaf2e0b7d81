"""
Process-wide working directory for temporary media artifacts. [RM]

Concurrent jobs share the directory, so every artifact name carries the
sanitized job id, a monotonic counter and a random suffix.
"""
from __future__ import annotations

import itertools
import re
import shutil
import time
import uuid
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, List, Union

from ..utils.logging import get_logger

logger = get_logger(__name__)

_UNSAFE = re.compile(r"[^A-Za-z0-9_-]+")
_counter = itertools.count()


def safe_job_id(job_id: str) -> str:
    """Reduce an arbitrary message id to a filename-safe token."""
    cleaned = _UNSAFE.sub("", str(job_id))[:48]
    return cleaned or "job"


class ArtifactDir:
    """Creates uniquely named artifact paths and removes them again."""

    def __init__(self, root: Union[str, Path]):
        self.root = Path(root)

    def ensure(self) -> Path:
        self.root.mkdir(parents=True, exist_ok=True)
        return self.root

    def path_for(self, prefix: str, job_id: str, suffix: str) -> Path:
        self.ensure()
        name = (
            f"{prefix}_{safe_job_id(job_id)}_{time.time_ns()}"
            f"_{next(_counter)}_{uuid.uuid4().hex[:8]}{suffix}"
        )
        return self.root / name

    def discard(self, *paths: Path) -> None:
        """Delete artifacts; missing files are ignored."""
        for path in paths:
            try:
                Path(path).unlink(missing_ok=True)
            except OSError as e:
                logger.warning(
                    f"⚠️ Failed to delete artifact {path}: {e}",
                    extra={"subsys": "workdir", "event": "artifact.delete_failed"},
                )

    @contextmanager
    def scratch(self, job_id: str, *specs: str) -> Iterator[List[Path]]:
        """
        Yield one fresh path per ``"prefix.suffix"`` spec and delete them all
        when the block exits, whether it succeeded or raised.
        """
        paths = []
        for spec in specs:
            prefix, _, suffix = spec.partition(".")
            paths.append(self.path_for(prefix, job_id, f".{suffix}" if suffix else ""))
        try:
            yield paths
        finally:
            self.discard(*paths)

    def remove(self) -> None:
        """Remove the whole directory. Called on graceful shutdown."""
        if not self.root.exists():
            return
        shutil.rmtree(self.root, ignore_errors=False)
        logger.info(
            f"🧹 Removed working directory {self.root}",
            extra={"subsys": "workdir", "event": "workdir.removed"},
        )
