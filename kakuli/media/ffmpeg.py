"""
Thin async wrappers around the ffmpeg and ffprobe executables. [PA][REH]

Every invocation is a suspension point and is bounded by a timeout; the
child process is killed when the timeout expires.
"""
from __future__ import annotations

import asyncio
import json
from pathlib import Path
from typing import Optional, Sequence, Tuple

from ..exceptions import ConversionError
from ..utils.logging import get_logger

logger = get_logger(__name__)

DEFAULT_TIMEOUT_S = 120.0


async def run_process(
    cmd: Sequence[str],
    *,
    stdin_data: Optional[bytes] = None,
    timeout: float = DEFAULT_TIMEOUT_S,
) -> Tuple[bytes, bytes]:
    """Run ``cmd`` and return (stdout, stderr). Raises ConversionError on failure."""
    logger.debug(
        f"🧰 exec: {' '.join(str(c) for c in cmd)}",
        extra={"subsys": "ffmpeg", "event": "exec.start"},
    )
    try:
        proc = await asyncio.create_subprocess_exec(
            *[str(c) for c in cmd],
            stdin=asyncio.subprocess.PIPE if stdin_data is not None else asyncio.subprocess.DEVNULL,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
        )
    except FileNotFoundError as e:
        raise ConversionError(f"{cmd[0]} is not installed or not on PATH") from e

    try:
        stdout, stderr = await asyncio.wait_for(
            proc.communicate(input=stdin_data), timeout=timeout
        )
    except asyncio.TimeoutError:
        try:
            proc.kill()
        except ProcessLookupError:
            pass
        await proc.wait()
        raise ConversionError(f"{Path(cmd[0]).name} timed out after {timeout:.0f}s")

    if proc.returncode != 0:
        error_msg = stderr.decode(errors="ignore").strip()[-500:] if stderr else "unknown error"
        logger.error(
            f"❌ {Path(cmd[0]).name} exited with code {proc.returncode}: {error_msg}",
            extra={"subsys": "ffmpeg", "event": "exec.failed"},
        )
        raise ConversionError(f"{Path(cmd[0]).name} failed (code={proc.returncode})")

    return stdout, stderr


async def probe_duration(
    path: Path, *, ffprobe_bin: str = "ffprobe", timeout: float = 30.0
) -> float:
    """Return the container duration of ``path`` in seconds."""
    stdout, _ = await run_process(
        [
            ffprobe_bin,
            "-v",
            "error",
            "-show_entries",
            "format=duration",
            "-of",
            "json",
            str(path),
        ],
        timeout=timeout,
    )
    try:
        info = json.loads(stdout.decode() or "{}")
        return float(info["format"]["duration"])
    except (ValueError, KeyError, TypeError) as e:
        raise ConversionError("Could not read video duration") from e


async def pcm_to_mp3(
    pcm: bytes,
    output_path: Path,
    *,
    sample_rate: int = 24000,
    channels: int = 1,
    ffmpeg_bin: str = "ffmpeg",
    timeout: float = DEFAULT_TIMEOUT_S,
) -> Path:
    """Encode raw signed 16-bit little-endian PCM from stdin into an MP3 file."""
    await run_process(
        [
            ffmpeg_bin,
            "-hide_banner",
            "-loglevel",
            "error",
            "-y",
            "-f",
            "s16le",
            "-ar",
            str(sample_rate),
            "-ac",
            str(channels),
            "-i",
            "pipe:0",
            "-ar",
            str(sample_rate),
            "-f",
            "mp3",
            str(output_path),
        ],
        stdin_data=pcm,
        timeout=timeout,
    )
    if not output_path.exists() or output_path.stat().st_size == 0:
        raise ConversionError("Audio encoder produced no output")
    return output_path
