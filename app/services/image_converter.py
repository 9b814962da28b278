"""Still image to animation conversion for the /gif command.

Telegram plays short silent mp4 clips as animations, so the still is looped
into an H.264 video rather than encoded as an actual GIF.
"""

import asyncio
import logging
from pathlib import Path

import ffmpeg
from PIL import Image

from ..exceptions import ConversionError
from ..models import MediaFileHandle, MediaKind
from .staging import ensure_staging_dir, remove_staged_file, unique_stem

logger = logging.getLogger(__name__)


class ImageToAnimationConverter:
    """Turns a decoded image into a looping animation file."""

    def __init__(self, output_dir: Path, duration_seconds: float = 3.0, fps: int = 25):
        """Initialize converter.

        Args:
            output_dir: Staging directory for generated clips.
            duration_seconds: Length of each generated clip.
            fps: Frame rate of each generated clip.
        """
        self.output_dir = Path(output_dir)
        self.duration_seconds = duration_seconds
        self.fps = fps

    async def convert(self, image: Image.Image) -> MediaFileHandle:
        """Render the image as an animation.

        Args:
            image: Decoded still image.

        Returns:
            Handle of the generated mp4, kind ``animation``.

        Raises:
            ConversionError: If the still cannot be written or encoded.
        """
        path = await asyncio.to_thread(self._render, image)
        logger.info("Created animation %s", path.name)
        return MediaFileHandle(path=path, kind=MediaKind.ANIMATION)

    async def cleanup(self, handle: MediaFileHandle) -> None:
        remove_staged_file(handle)
        logger.info("Deleted animation file: %s", handle.name)

    def _render(self, image: Image.Image) -> Path:
        ensure_staging_dir(self.output_dir)
        stem = unique_stem("gif")
        still_path = self.output_dir / f"{stem}.png"
        output_path = self.output_dir / f"{stem}.mp4"

        try:
            image.convert("RGB").save(still_path, format="PNG")
            (
                ffmpeg.input(str(still_path), loop=1, framerate=self.fps)
                .output(
                    str(output_path),
                    t=self.duration_seconds,
                    vcodec="libx264",
                    pix_fmt="yuv420p",
                    # libx264 needs even dimensions
                    vf="scale=trunc(iw/2)*2:trunc(ih/2)*2",
                    movflags="+faststart",
                    an=None,
                )
                .run(overwrite_output=True, quiet=True)
            )
        except ffmpeg.Error as e:
            stderr = e.stderr.decode("utf-8", errors="ignore") if e.stderr else str(e)
            output_path.unlink(missing_ok=True)
            raise ConversionError(f"ffmpeg failed to encode animation: {stderr}") from e
        except OSError as e:
            raise ConversionError(f"Failed to write still image: {e}") from e
        finally:
            still_path.unlink(missing_ok=True)

        return output_path
