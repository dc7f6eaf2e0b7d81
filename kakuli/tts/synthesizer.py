"""
Speech synthesis through the Gemini speech model. [PA][REH]

Long text is sent chunk by chunk; the PCM of every chunk that produced
audio is concatenated in order and encoded to a single MP3 artifact.
"""
from __future__ import annotations

from pathlib import Path
from typing import List

from ..exceptions import InputValidationError, RemoteServiceError, SynthesisEmptyResult
from ..media.ffmpeg import pcm_to_mp3
from ..media.workdir import ArtifactDir
from ..services.gemini import GeminiClient
from ..utils.logging import get_logger
from .chunking import DEFAULT_CHUNK_LENGTH, split_text
from .voices import validate_voice

logger = get_logger(__name__)

MAX_TEXT_LENGTH = 500
SAMPLE_RATE = 24000
CHANNELS = 1


class VoiceSynthesizer:
    """Turns text plus a voice name into an MP3 file in the working directory."""

    def __init__(
        self,
        gemini: GeminiClient,
        workdir: ArtifactDir,
        *,
        ffmpeg_bin: str = "ffmpeg",
        timeout_s: float = 120.0,
        chunk_length: int = DEFAULT_CHUNK_LENGTH,
    ):
        self.gemini = gemini
        self.workdir = workdir
        self.ffmpeg_bin = ffmpeg_bin
        self.timeout_s = timeout_s
        self.chunk_length = chunk_length

    async def _synthesize_chunks(self, chunks: List[str], voice: str, job_id: str) -> List[bytes]:
        pcm_parts = []
        for index, chunk in enumerate(chunks, start=1):
            try:
                audio = await self.gemini.synthesize_speech(chunk, voice)
            except RemoteServiceError as e:
                logger.warning(
                    f"⚠️ Speech chunk {index}/{len(chunks)} failed: {e}",
                    extra={"subsys": "tts", "event": "chunk.failed", "msg_id": job_id},
                )
                continue
            if not audio:
                logger.warning(
                    f"⚠️ Speech chunk {index}/{len(chunks)} returned no audio",
                    extra={"subsys": "tts", "event": "chunk.empty", "msg_id": job_id},
                )
                continue
            pcm_parts.append(audio)
        return pcm_parts

    async def synthesize(self, text: str, voice: str, job_id: str) -> Path:
        """
        Synthesize ``text`` with ``voice`` and return the MP3 artifact path.

        The caller owns the returned file and must delete it.

        Raises:
            InputValidationError: empty or oversized text, or unknown voice.
            SynthesisEmptyResult: no chunk produced audio.
            ConversionError: the MP3 encoder failed.
        """
        if not text.strip():
            raise InputValidationError("Please provide some text to speak.")
        if len(text) > MAX_TEXT_LENGTH:
            raise InputValidationError(f"Text exceeds {MAX_TEXT_LENGTH} character limit.")
        validate_voice(voice)

        chunks = split_text(text, self.chunk_length)
        logger.info(
            f"🗣️ Synthesizing {len(text)} chars in {len(chunks)} chunk(s) with voice {voice}",
            extra={"subsys": "tts", "event": "synth.start", "msg_id": job_id},
        )
        pcm_parts = await self._synthesize_chunks(chunks, voice, job_id)
        if not pcm_parts:
            raise SynthesisEmptyResult("The speech service returned no audio.")

        output_path = self.workdir.path_for("voice", job_id, ".mp3")
        try:
            await pcm_to_mp3(
                b"".join(pcm_parts),
                output_path,
                sample_rate=SAMPLE_RATE,
                channels=CHANNELS,
                ffmpeg_bin=self.ffmpeg_bin,
                timeout=self.timeout_s,
            )
        except Exception:
            self.workdir.discard(output_path)
            raise

        logger.info(
            f"✅ Voice note ready ({len(pcm_parts)}/{len(chunks)} chunks)",
            extra={"subsys": "tts", "event": "synth.done", "msg_id": job_id},
        )
        return output_path
