"""
Encoder - Runs the external ffmpeg executable under a wall-clock budget.
"""

import logging
import subprocess
import time
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple


class EncodeError(Exception):
    """
    Raised when an animated asset could not be encoded.

    Attributes:
        path: Project-relative path of the source asset
        degraded: True when the original was copied as a fallback artifact
    """

    def __init__(self, path: str, message: str, degraded: bool = False):
        super().__init__(f"{path}: {message}")
        self.path = path
        self.message = message
        self.degraded = degraded


@dataclass(frozen=True)
class EncoderProfile:
    """
    One codec configuration in an encoder fallback chain.

    Attributes:
        name: Short label used in logs (e.g. 'vp9')
        codec_args: Codec and rate-control arguments passed to ffmpeg
    """
    name: str
    codec_args: Tuple[str, ...]


VP9_PROFILE = EncoderProfile(
    name='vp9',
    codec_args=(
        '-c:v', 'libvpx-vp9',
        '-deadline', 'good',
        '-cpu-used', '4',
        '-row-mt', '1',
        '-b:v', '0',
        '-crf', '35',
        '-auto-alt-ref', '0',
    ),
)

VP8_PROFILE = EncoderProfile(
    name='vp8',
    codec_args=(
        '-c:v', 'libvpx',
        '-b:v', '0',
        '-crf', '30',
    ),
)

THUMBNAIL_PROFILE = EncoderProfile(
    name='vp8-thumb',
    codec_args=(
        '-c:v', 'libvpx',
        '-deadline', 'good',
        '-cpu-used', '4',
        '-b:v', '0',
        '-crf', '40',
    ),
)

DEFAULT_FALLBACK_CHAIN = (VP9_PROFILE, VP8_PROFILE)


@dataclass
class EncodeResult:
    """
    Outcome of one encoder invocation.

    The exit status is the only success signal; a timeout or a missing
    executable is reported as an unsuccessful result.
    """
    ok: bool
    returncode: Optional[int] = None
    stdout: str = ''
    stderr: str = ''
    timed_out: bool = False
    elapsed_seconds: float = 0.0

    def describe(self) -> str:
        if self.timed_out:
            return f"timed out after {self.elapsed_seconds:.0f}s"
        if self.returncode is None:
            return self.stderr or 'could not start encoder'
        return f"exit status {self.returncode}"


class FFmpegRunner:
    """
    Invokes ffmpeg as a subprocess with a hard timeout per call.
    """

    def __init__(
        self,
        binary: str = 'ffmpeg',
        timeout: float = 90.0,
        logger: Optional[logging.Logger] = None
    ):
        """
        Initialize runner.

        Args:
            binary: ffmpeg executable name or path
            timeout: Wall-clock budget in seconds for each invocation
            logger: Optional logger instance
        """
        self.binary = binary
        self.timeout = timeout
        self.logger = logger or logging.getLogger(__name__)

    def version(self) -> Optional[str]:
        """Return the first line of ``ffmpeg -version``, or None if unavailable."""
        result = self.run(['-version'])
        if not result.ok:
            return None
        return result.stdout.split('\n', 1)[0]

    def run(self, args: Sequence[str]) -> EncodeResult:
        """
        Run the encoder with ``args``.

        Args:
            args: Arguments after the executable name

        Returns:
            EncodeResult; never raises for timeouts or a missing executable
        """
        cmd = [self.binary, *args]
        self.logger.debug(f"Running: {' '.join(cmd)}")
        start = time.monotonic()

        try:
            proc = subprocess.run(
                cmd,
                capture_output=True,
                text=True,
                errors='replace',
                timeout=self.timeout,
            )
        except subprocess.TimeoutExpired as e:
            stderr = e.stderr or ''
            if isinstance(stderr, bytes):
                stderr = stderr.decode('utf-8', errors='replace')
            return EncodeResult(
                ok=False,
                stderr=stderr,
                timed_out=True,
                elapsed_seconds=time.monotonic() - start,
            )
        except OSError as e:
            return EncodeResult(
                ok=False,
                stderr=f"{self.binary}: {e}",
                elapsed_seconds=time.monotonic() - start,
            )

        return EncodeResult(
            ok=proc.returncode == 0,
            returncode=proc.returncode,
            stdout=proc.stdout or '',
            stderr=proc.stderr or '',
            elapsed_seconds=time.monotonic() - start,
        )


def build_args(
    source: str,
    output: str,
    video_filter: str,
    profile: EncoderProfile,
    duration: Optional[float] = None
) -> List[str]:
    """Assemble an ffmpeg argument list producing a silent WebM file."""
    args = ['-y', '-hide_banner', '-i', source, '-vf', video_filter]
    if duration is not None:
        args += ['-t', f"{duration:g}"]
    args += ['-pix_fmt', 'yuv420p', *profile.codec_args, '-an', '-f', 'webm', output]
    return args
