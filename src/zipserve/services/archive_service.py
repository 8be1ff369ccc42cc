# src/zipserve/services/archive_service.py
# SPDX-License-Identifier: AGPL-3.0-or-later
# Copyright (C) 2025 AZHAR ZOUHIR / BYTEDz

import asyncio
import concurrent.futures
import functools
import io
import logging
import os
import stat
import threading
import zipfile
from enum import Enum
from pathlib import Path, PurePosixPath
from typing import AsyncIterator, NamedTuple, Set

import aiofiles.os

from ..core import constants
from ..core.exceptions import (NotFoundError, StreamWriteError,
                               UnsupportedEntryTypeError)
from .file_service import ResolvedEntry

log = logging.getLogger(__name__)

NOT_FOUND_MESSAGE = "The asked file does not exist"
UNSUPPORTED_MESSAGE = "The asked file is neither a file nor a directory"
SINK_CLOSED_MESSAGE = "The archive stream was closed by the client"

_END_OF_STREAM = object()


class EntryKind(str, Enum):
    FILE = "file"
    DIRECTORY = "directory"


class ArchiveTarget(NamedTuple):
    name: str
    path: Path
    kind: EntryKind


def _raise_walk_error(error: OSError):
    raise error


class QueueSink(io.RawIOBase):
    """
    Write-only, non-seekable file object that zipfile writes into from a
    worker thread. Output is coalesced into chunk_size pieces and handed to
    the event loop through a bounded asyncio.Queue, so a slow client blocks
    the writer instead of growing memory.
    """

    def __init__(self, loop: asyncio.AbstractEventLoop, queue: asyncio.Queue,
                 chunk_size: int = constants.DOWNLOAD_CHUNK_SIZE,
                 poll_interval: float = constants.SINK_POLL_INTERVAL):
        super().__init__()
        self._loop = loop
        self._queue = queue
        self._chunk_size = chunk_size
        self._poll_interval = poll_interval
        self._buffer = bytearray()
        self._aborted = threading.Event()
        self._discarding = False
        self.bytes_sent = 0

    def writable(self) -> bool:
        return True

    def write(self, data) -> int:
        chunk = bytes(data)
        if self._discarding:
            return len(chunk)
        if self._aborted.is_set():
            raise StreamWriteError(SINK_CLOSED_MESSAGE)
        self._buffer += chunk
        if len(self._buffer) >= self._chunk_size:
            self._hand_off_buffer()
        return len(chunk)

    def abort(self):
        """Called from the event loop when nobody reads the stream anymore."""
        self._aborted.set()

    def discard(self):
        """Drops pending and further output; used when a failed archive is torn down."""
        self._discarding = True
        self._buffer.clear()

    def finish(self):
        """Hands off whatever is still buffered."""
        if self._buffer:
            self._hand_off_buffer()

    def end(self):
        """Tells the reader there is nothing more to come."""
        if not self._aborted.is_set():
            self._put(_END_OF_STREAM)

    def _hand_off_buffer(self):
        chunk = bytes(self._buffer)
        self._buffer.clear()
        self._put(chunk)
        self.bytes_sent += len(chunk)

    def _put(self, item):
        future = asyncio.run_coroutine_threadsafe(self._queue.put(item), self._loop)
        while True:
            try:
                future.result(timeout=self._poll_interval)
                return
            except concurrent.futures.TimeoutError:
                if self._aborted.is_set():
                    future.cancel()
                    raise StreamWriteError(SINK_CLOSED_MESSAGE)
            except concurrent.futures.CancelledError as e:
                raise StreamWriteError(SINK_CLOSED_MESSAGE) from e


class ArchiveStreamer:
    """
    Builds the ZIP encoding of one file or directory and yields it while it
    is being written. Each call to stream() owns its own writer thread,
    queue and sink. The only state kept across requests is the set of
    running writers behind active_streams.
    """

    def __init__(self, chunk_size: int = constants.DOWNLOAD_CHUNK_SIZE,
                 queue_depth: int = constants.STREAM_QUEUE_DEPTH):
        self.chunk_size = chunk_size
        self.queue_depth = queue_depth
        self._producers: Set[asyncio.Task] = set()

    async def prepare(self, entry: ResolvedEntry) -> ArchiveTarget:
        """Stats the resolved entry and decides how it will be archived."""
        try:
            st = await aiofiles.os.stat(entry.path)
        except (OSError, ValueError) as e:
            log.info(f"Archive source unavailable: {entry.path} ({e})")
            raise NotFoundError(NOT_FOUND_MESSAGE) from e

        if stat.S_ISREG(st.st_mode):
            kind = EntryKind.FILE
        elif stat.S_ISDIR(st.st_mode):
            kind = EntryKind.DIRECTORY
        else:
            log.warning(f"Refusing to archive special file {entry.path}")
            raise UnsupportedEntryTypeError(UNSUPPORTED_MESSAGE)
        return ArchiveTarget(name=entry.name, path=entry.path, kind=kind)

    async def stream(self, target: ArchiveTarget) -> AsyncIterator[bytes]:
        loop = asyncio.get_running_loop()
        queue: asyncio.Queue = asyncio.Queue(maxsize=self.queue_depth)
        sink = QueueSink(loop, queue, self.chunk_size)

        producer = asyncio.create_task(asyncio.to_thread(self._produce, target, sink))
        self._producers.add(producer)
        producer.add_done_callback(functools.partial(self._on_producer_done, target, sink))

        completed = False
        try:
            while True:
                chunk = await queue.get()
                if chunk is _END_OF_STREAM:
                    break
                yield chunk
            # Re-raises a failure of the writer so the connection is dropped
            # instead of ending like a complete response.
            await producer
            completed = True
        finally:
            if not completed:
                sink.abort()

    @property
    def active_streams(self) -> int:
        return len(self._producers)

    def _produce(self, target: ArchiveTarget, sink: QueueSink):
        try:
            self._write_archive(target, sink)
            sink.finish()
        finally:
            sink.end()

    def _write_archive(self, target: ArchiveTarget, sink: QueueSink):
        archive = zipfile.ZipFile(sink, "w", compression=zipfile.ZIP_DEFLATED, allowZip64=True)
        try:
            if target.kind is EntryKind.FILE:
                self._add_file(archive, target.path, target.name)
            else:
                self._add_directory(archive, target.path, target.name)
        except BaseException:
            # Release the writer without emitting a central directory.
            sink.discard()
            archive.close()
            raise
        archive.close()

    def _add_file(self, archive: zipfile.ZipFile, path: Path, arcname: str):
        zinfo = zipfile.ZipInfo.from_file(path, arcname, strict_timestamps=False)
        zinfo.compress_type = zipfile.ZIP_DEFLATED
        with open(path, "rb") as source, archive.open(zinfo, "w") as dest:
            while chunk := source.read(self.chunk_size):
                dest.write(chunk)

    def _add_directory(self, archive: zipfile.ZipFile, root: Path, arcroot: str):
        # Symbolic links are never followed; their targets may lie outside the root.
        for dirpath, dirnames, filenames in os.walk(root, onerror=_raise_walk_error):
            current = Path(dirpath)
            for name in [d for d in dirnames if (current / d).is_symlink()]:
                log.warning(f"Skipping symbolic link {current / name}")
                dirnames.remove(name)
            dirnames.sort()
            for filename in sorted(filenames):
                path = current / filename
                if path.is_symlink():
                    log.warning(f"Skipping symbolic link {path}")
                    continue
                if not path.is_file():
                    log.warning(f"Skipping non-regular file {path}")
                    continue
                arcname = PurePosixPath(arcroot, *path.relative_to(root).parts).as_posix()
                self._add_file(archive, path, arcname)

    def _on_producer_done(self, target: ArchiveTarget, sink: QueueSink, producer: asyncio.Task):
        self._producers.discard(producer)
        if producer.cancelled():
            log.info(f"Archive of '{target.name}' cancelled")
            return
        error = producer.exception()
        if error is None:
            log.info(f"Archive of '{target.name}' completed ({sink.bytes_sent} bytes)")
        elif isinstance(error, StreamWriteError):
            log.info(f"Archive of '{target.name}' aborted after {sink.bytes_sent} bytes: {error}")
        else:
            log.error(f"Archive of '{target.name}' failed after {sink.bytes_sent} bytes: {error}")
