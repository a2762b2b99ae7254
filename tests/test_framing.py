#!/usr/bin/env python3
"""
Unit tests for the framing codec.

Covers chunk accounting, transfer metadata parsing and the read helpers'
handling of a peer that closes the stream or sends an oversized frame.
"""

import asyncio
import unittest

import sys
from pathlib import Path
sys.path.insert(0, str(Path(__file__).parent.parent))

from glide_common.errors import ConnectionClosed, MalformedFrame
from glide_common.framing import (
    TransferMetadata, chunk_count, decode_frame, encode_frame, read_chunk, read_frame, write_all
)


class RecordingWriter:
    """Collects written bytes and counts flush boundaries."""
    
    def __init__(self):
        self.written = bytearray()
        self.drains = 0
    
    def write(self, data: bytes):
        self.written.extend(data)
    
    async def drain(self):
        self.drains += 1


class TestChunkCount(unittest.TestCase):
    """Test cases for chunk accounting."""
    
    def test_partial_last_chunk(self):
        """A trailing partial chunk counts as one more chunk."""
        self.assertEqual(chunk_count(2500, 1024), 3)
    
    def test_exact_multiple(self):
        """An exact multiple needs no extra chunk."""
        self.assertEqual(chunk_count(1024), 1)
        self.assertEqual(chunk_count(4096, 1024), 4)
    
    def test_empty_payload(self):
        """An empty file is sent with zero chunks."""
        self.assertEqual(chunk_count(0), 0)
    
    def test_smaller_than_one_chunk(self):
        self.assertEqual(chunk_count(1, 1024), 1)


class TestTransferMetadata(unittest.TestCase):
    """Test cases for the metadata sub-frame."""
    
    def test_wire_form(self):
        """Metadata is sent as name:size followed by the frame terminator."""
        self.assertEqual(TransferMetadata('notes.txt', 2500).to_bytes(), b'notes.txt:2500\n')
    
    def test_parse(self):
        metadata = TransferMetadata.from_bytes(b'notes.txt:2500\n')
        self.assertEqual(metadata, TransferMetadata('notes.txt', 2500))
    
    def test_parse_trims_fields(self):
        self.assertEqual(TransferMetadata.from_bytes(b' a b.txt : 12 \n'), TransferMetadata('a b.txt', 12))
    
    def test_wrong_field_count(self):
        """Splitting must yield exactly two fields."""
        with self.assertRaises(MalformedFrame):
            TransferMetadata.from_bytes(b'notes.txt\n')
        with self.assertRaises(MalformedFrame):
            TransferMetadata.from_bytes(b'c:/notes.txt:12\n')
    
    def test_invalid_size(self):
        """The size field must be a non-negative decimal integer."""
        for raw in (b'a.txt:-5\n', b'a.txt:12kb\n', b'a.txt:\n', b'a.txt:+3\n'):
            with self.subTest(raw=raw):
                with self.assertRaises(MalformedFrame):
                    TransferMetadata.from_bytes(raw)
    
    def test_invalid_text(self):
        with self.assertRaises(MalformedFrame):
            TransferMetadata.from_bytes(b'\xff\xfe:12\n')


class TestFrames(unittest.TestCase):
    """Test cases for text frame encoding."""
    
    def test_encode_appends_terminator(self):
        self.assertEqual(encode_frame('list'), b'list\n')
    
    def test_decode_strips_terminator(self):
        self.assertEqual(decode_frame(b'glide a b.txt @bob\n'), 'glide a b.txt @bob')
    
    def test_decode_rejects_invalid_utf8(self):
        with self.assertRaises(MalformedFrame):
            decode_frame(b'\xc3\x28\n')


class TestStreamHelpers(unittest.IsolatedAsyncioTestCase):
    """Test cases for reading from and writing to streams."""
    
    async def test_read_frame_returns_one_frame(self):
        """Frames that arrive together are still read one at a time."""
        reader = asyncio.StreamReader()
        reader.feed_data(b'OK_SUCCESS\nnotes.txt:3\nabc')
        
        self.assertEqual(await read_frame(reader), b'OK_SUCCESS\n')
        self.assertEqual(await read_frame(reader), b'notes.txt:3\n')
        self.assertEqual(await read_chunk(reader, 3), b'abc')
    
    async def test_read_frame_on_closed_stream(self):
        """An empty read surfaces as ConnectionClosed."""
        reader = asyncio.StreamReader()
        reader.feed_eof()
        with self.assertRaises(ConnectionClosed):
            await read_frame(reader)
    
    async def test_read_frame_cut_short(self):
        """A frame interrupted by closure is not returned as data."""
        reader = asyncio.StreamReader()
        reader.feed_data(b'USERNAME_')
        reader.feed_eof()
        with self.assertRaises(ConnectionClosed):
            await read_frame(reader)
    
    async def test_read_frame_too_long(self):
        reader = asyncio.StreamReader()
        reader.feed_data(b'x' * 40 + b'\n')
        with self.assertRaises(MalformedFrame):
            await read_frame(reader, limit=16)
    
    async def test_oversized_frame_is_skipped(self):
        """A frame past the stream buffer limit is dropped and the next frame still reads cleanly."""
        reader = asyncio.StreamReader()
        reader.feed_data(b'CONNECTED_USERS ' + b'a,' * 35000 + b'z\n')
        reader.feed_data(b'CONNECTED_USERS bob\n')
        
        with self.assertRaises(MalformedFrame):
            await read_frame(reader)
        self.assertEqual(await read_frame(reader), b'CONNECTED_USERS bob\n')
    
    async def test_oversized_frame_arriving_in_pieces(self):
        """The rest of an oversized frame is dropped even when it arrives later."""
        reader = asyncio.StreamReader(limit=64)
        reader.feed_data(b'x' * 100)
        
        pending = asyncio.create_task(read_frame(reader))
        await asyncio.sleep(0)
        reader.feed_data(b'x' * 100)
        reader.feed_data(b'yyy\nUSERNAME_OK\n')
        
        with self.assertRaises(MalformedFrame):
            await pending
        self.assertEqual(await read_frame(reader), b'USERNAME_OK\n')
    
    async def test_oversized_frame_cut_short(self):
        reader = asyncio.StreamReader(limit=64)
        reader.feed_data(b'x' * 100)
        reader.feed_eof()
        with self.assertRaises(ConnectionClosed):
            await read_frame(reader)
    
    async def test_read_chunk_on_closed_stream(self):
        reader = asyncio.StreamReader()
        reader.feed_eof()
        with self.assertRaises(ConnectionClosed):
            await read_chunk(reader)
    
    async def test_write_all_flushes_each_message(self):
        """Every logical message gets its own flush boundary."""
        writer = RecordingWriter()
        await write_all(writer, encode_frame('alice'))
        await write_all(writer, encode_frame('list'))
        
        self.assertEqual(bytes(writer.written), b'alice\nlist\n')
        self.assertEqual(writer.drains, 2)


if __name__ == '__main__':
    unittest.main()
