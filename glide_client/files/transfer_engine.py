"""
Transfer engine module.

This module streams files over the session connection. Each transfer starts
with one metadata frame (``<filename>:<size>``) followed by exactly ``size``
raw payload bytes.
"""

import asyncio
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Optional

from glide_common.constants import CHUNK_SIZE, DOWNLOAD_DIR
from glide_common.errors import ConnectionClosed, LocalIOError, MalformedFrame
from glide_common.framing import TransferMetadata, chunk_count, read_chunk, read_frame, write_all
from glide_client.utils.logger import logger

# Called with (units_done, units_total)
ProgressCallback = Callable[[int, int], None]


@dataclass(frozen=True)
class TransferResult:
    """Outcome of one upload or download."""
    filename: str
    size: int
    transferred: int
    path: Path

    @property
    def complete(self) -> bool:
        return self.transferred == self.size


class TransferEngine:
    """Chunked, progress-tracked file transfer over one stream."""
    
    def __init__(self, reader: asyncio.StreamReader, writer: asyncio.StreamWriter,
                 chunk_size: int = CHUNK_SIZE, download_dir: str = DOWNLOAD_DIR,
                 safe_filenames: bool = False):
        self.reader = reader
        self.writer = writer
        self.chunk_size = chunk_size
        self.download_dir = Path(download_dir)
        self.safe_filenames = safe_filenames
    
    async def upload(self, file_path: str, progress: Optional[ProgressCallback] = None) -> TransferResult:
        """
        Send a local file: one metadata frame, then ``chunk_count`` chunks.

        If the file shrinks after its size was captured, the loop stops at the
        first empty read and the result reports fewer bytes than declared.
        """
        path = Path(file_path)
        try:
            size = path.stat().st_size
            f = open(path, 'rb')
        except OSError as e:
            raise LocalIOError(f"Cannot open '{file_path}': {e}") from e
        
        metadata = TransferMetadata(filename=path.name, size=size)
        total_chunks = chunk_count(size, self.chunk_size)
        sent = 0
        chunks_sent = 0
        
        with f:
            await write_all(self.writer, metadata.to_bytes())
            logger.debug(f"Metadata sent: {metadata.filename} ({size} bytes, {total_chunks} chunks)")
            
            for _ in range(total_chunks):
                try:
                    data = f.read(min(self.chunk_size, size - sent))
                except OSError as e:
                    raise LocalIOError(f"Cannot read '{file_path}': {e}") from e
                if not data:
                    break
                
                await write_all(self.writer, data)
                sent += len(data)
                chunks_sent += 1
                if progress:
                    progress(chunks_sent, total_chunks)
        
        logger.log_transfer("Upload", metadata.filename, sent, size)
        return TransferResult(filename=metadata.filename, size=size, transferred=sent, path=path)
    
    async def download(self, progress: Optional[ProgressCallback] = None) -> TransferResult:
        """
        Receive one file: read its metadata frame, then stream ``size`` bytes to disk.

        A peer that closes the stream early leaves a truncated file behind and
        raises ConnectionClosed.
        """
        metadata = TransferMetadata.from_bytes(await read_frame(self.reader))
        destination = self._destination(metadata.filename)
        logger.info(f"Receiving file: {metadata.filename} ({metadata.size} bytes) -> {destination}")
        
        received = 0
        try:
            f = open(destination, 'wb')
        except OSError as e:
            raise LocalIOError(f"Cannot create '{destination}': {e}") from e
        
        with f:
            while received < metadata.size:
                try:
                    data = await read_chunk(self.reader, min(self.chunk_size, metadata.size - received))
                except ConnectionClosed:
                    logger.log_transfer("Download", metadata.filename, received, metadata.size)
                    raise
                
                try:
                    f.write(data)
                except OSError as e:
                    raise LocalIOError(f"Cannot write '{destination}': {e}") from e
                received += len(data)
                if progress:
                    progress(received, metadata.size)
        
        logger.log_transfer("Download", metadata.filename, received, metadata.size)
        return TransferResult(filename=metadata.filename, size=metadata.size,
                              transferred=received, path=destination)
    
    def _destination(self, filename: str) -> Path:
        """Resolve where a received file is written."""
        name = filename
        if self.safe_filenames:
            name = os.path.basename(filename.replace('\\', '/'))
            if name in ('', '.', '..'):
                raise MalformedFrame(f"Unsafe file name in metadata: {filename!r}")
        elif not name:
            raise MalformedFrame("Empty file name in metadata")
        return self.download_dir / name
