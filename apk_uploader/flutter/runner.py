import asyncio
import codecs
import logging
import sys
from pathlib import Path
from typing import Any, Awaitable, Callable, Iterable, List, Optional, Set
from apk_uploader.config import BuildConfig

logger = logging.getLogger(__name__)

CHUNK_SIZE = 4096

ArtifactCallback = Callable[[Path], Awaitable[Any]]


class BuildRunner:
    """Runs the release build and reports when the APK appears"""

    def __init__(
        self,
        config: BuildConfig,
        on_artifact_ready: Optional[ArtifactCallback] = None,
        cwd: Optional[Path] = None,
    ):
        self.config = config
        self.on_artifact_ready = on_artifact_ready
        self.cwd = cwd or Path.cwd()
        self.artifact_path = config.resolve_artifact(self.cwd)
        self.process: Optional[asyncio.subprocess.Process] = None
        self.artifact_ready = asyncio.Event()
        self._tasks: Set[asyncio.Task] = set()

    def command(self, args: Iterable[str] = ()) -> List[str]:
        return [self.config.executable, *self.config.base_args, *args]

    async def run(self, args: Iterable[str] = ()) -> int:
        """Run the build to completion and return its exit code.

        Waits for an upload started during the build before returning.
        """
        self.artifact_ready.clear()
        command = self.command(args)
        logger.info(f"command is: {' '.join(command)}")

        self.process = await asyncio.create_subprocess_exec(
            *command,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
            cwd=str(self.cwd),
        )

        await asyncio.gather(
            self._pump(self.process.stdout, self.feed_stdout),
            self._pump(self.process.stderr, self.feed_stderr),
        )
        code = await self.process.wait()
        logger.info(f"exited with code {code}")

        if self._tasks:
            await asyncio.gather(*self._tasks, return_exceptions=True)
        return code

    async def _pump(self, stream: asyncio.StreamReader, handler: Callable[[str], None]):
        decoder = codecs.getincrementaldecoder("utf-8")(errors="replace")
        while True:
            data = await stream.read(CHUNK_SIZE)
            if not data:
                break
            text = decoder.decode(data)
            if text:
                handler(text)
        tail = decoder.decode(b"", final=True)
        if tail:
            handler(tail)

    def feed_stdout(self, chunk: str):
        """Handle one piece of build output.

        Fires the artifact notification the first time the marker shows up
        while the APK exists on disk.
        """
        if (
            self.config.marker in chunk
            and not self.artifact_ready.is_set()
            and self.artifact_path.exists()
        ):
            logger.info(f"APK file found at {self.artifact_path}")
            self.artifact_ready.set()
            if self.on_artifact_ready:
                task = asyncio.create_task(self.on_artifact_ready(self.artifact_path))
                self._tasks.add(task)
                task.add_done_callback(self._tasks.discard)

        print(chunk, end="", flush=True)

    def feed_stderr(self, chunk: str):
        print(chunk, end="", file=sys.stderr, flush=True)
