"""Runtime context: FFmpeg program name and logger used when compiling."""

import logging
import os
from typing import Optional

FFMPEG_ENV_VAR = "CLIPGRAPH_FFMPEG"


class MediaContext:
    """Context for command generation with FFmpeg."""

    def __init__(
        self,
        ffmpeg: Optional[str] = None,
        logger: Optional[logging.Logger] = None,
    ):
        """
        Initialize media context.

        Args:
            ffmpeg: FFmpeg program name or path; defaults to $CLIPGRAPH_FFMPEG,
                then "ffmpeg"
            logger: Logger instance for debugging
        """
        self.ffmpeg = ffmpeg or os.environ.get(FFMPEG_ENV_VAR) or "ffmpeg"
        self.logger = logger or logging.getLogger(__name__)

    def __repr__(self) -> str:
        return f"MediaContext(ffmpeg={self.ffmpeg!r})"


# Global default context
_DEFAULT_CTX: Optional[MediaContext] = None


def default_context() -> MediaContext:
    """
    Get the default media context.

    Returns:
        Default MediaContext instance
    """
    global _DEFAULT_CTX
    if _DEFAULT_CTX is None:
        _DEFAULT_CTX = MediaContext()
    return _DEFAULT_CTX


def set_default_context(ctx: Optional[MediaContext]) -> None:
    """
    Set the default media context.

    Args:
        ctx: MediaContext to use as default, or None to rebuild it lazily
    """
    global _DEFAULT_CTX
    _DEFAULT_CTX = ctx
