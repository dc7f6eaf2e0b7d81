"""
Short video -> animated 512x512 WEBP sticker via ffmpeg.

The transcoder works on files, so the input is written to the artifact
directory first. Input and output artifacts are removed on every path.
"""
from __future__ import annotations

from pathlib import Path
from typing import List

from ..exceptions import ConversionError, VideoTooLongError
from ..utils.logging import get_logger
from .ffmpeg import probe_duration, run_process
from .workdir import ArtifactDir

logger = get_logger(__name__)

MAX_SOURCE_SECONDS = 15.0
MAX_CLIP_SECONDS = 10.0
STICKER_SIZE = 512
FPS = 10
MAX_OUTPUT_SIZE = "800K"

VIDEO_FILTER = (
    f"scale={STICKER_SIZE}:{STICKER_SIZE}:force_original_aspect_ratio=decrease,"
    f"fps={FPS},"
    f"pad={STICKER_SIZE}:{STICKER_SIZE}:-1:-1:color=white@0.0"
)


def clip_seconds(duration: float) -> float:
    """Length of the clip taken from a source of ``duration`` seconds."""
    return min(duration, MAX_CLIP_SECONDS)


def build_transcode_command(
    input_path: Path, output_path: Path, duration: float, ffmpeg_bin: str = "ffmpeg"
) -> List[str]:
    return [
        ffmpeg_bin,
        "-hide_banner",
        "-loglevel",
        "error",
        "-y",
        "-ignore_chapters",
        "1",
        "-t",
        f"{clip_seconds(duration):.3f}",
        "-i",
        str(input_path),
        "-vcodec",
        "libwebp",
        "-vf",
        VIDEO_FILTER,
        "-loop",
        "0",
        "-preset",
        "default",
        "-an",
        "-fps_mode",
        "vfr",
        "-quality",
        "80",
        "-compression_level",
        "6",
        "-fs",
        MAX_OUTPUT_SIZE,
        str(output_path),
    ]


class VideoStickerConverter:
    """Converts a short video buffer into a looping WEBP sticker."""

    def __init__(
        self,
        workdir: ArtifactDir,
        *,
        ffmpeg_bin: str = "ffmpeg",
        ffprobe_bin: str = "ffprobe",
        timeout_s: float = 120.0,
    ):
        self.workdir = workdir
        self.ffmpeg_bin = ffmpeg_bin
        self.ffprobe_bin = ffprobe_bin
        self.timeout_s = timeout_s

    async def convert(self, data: bytes, job_id: str) -> bytes:
        """
        Transcode ``data`` into sticker bytes.

        Raises:
            VideoTooLongError: if the source is longer than 15 seconds.
            ConversionError: if probing or transcoding fails.
        """
        with self.workdir.scratch(job_id, "video.mp4", "sticker.webp") as (
            input_path,
            output_path,
        ):
            input_path.write_bytes(data)

            duration = await probe_duration(input_path, ffprobe_bin=self.ffprobe_bin)
            if duration > MAX_SOURCE_SECONDS:
                raise VideoTooLongError(duration, MAX_SOURCE_SECONDS)

            logger.info(
                f"🎞️ Transcoding {duration:.1f}s video to sticker ({clip_seconds(duration):.1f}s clip)",
                extra={"subsys": "sticker", "event": "video.transcode", "msg_id": job_id},
            )
            await run_process(
                build_transcode_command(input_path, output_path, duration, self.ffmpeg_bin),
                timeout=self.timeout_s,
            )

            if not output_path.exists() or output_path.stat().st_size == 0:
                raise ConversionError("Encoder produced an empty sticker.")
            return output_path.read_bytes()
