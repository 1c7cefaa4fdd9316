"""Tests for bounded output capture."""

import asyncio

import pytest

from execution.collector import BoundedBuffer, OutputCollector


def _stream(*chunks):
    reader = asyncio.StreamReader()
    for chunk in chunks:
        reader.feed_data(chunk)
    reader.feed_eof()
    return reader


class TestBoundedBuffer:

    def test_appends_below_limit(self):
        buffer = BoundedBuffer(limit=10)
        buffer.append("abc")
        buffer.append("def")
        assert buffer.getvalue() == "abcdef"
        assert not buffer.full

    def test_truncates_at_limit(self):
        buffer = BoundedBuffer(limit=5)
        buffer.append("abc")
        buffer.append("defgh")
        assert buffer.getvalue() == "abcde"
        assert buffer.full
        assert buffer.dropped == 3

    def test_drops_after_limit(self):
        buffer = BoundedBuffer(limit=3)
        buffer.append("abc")
        buffer.append("more")
        assert buffer.getvalue() == "abc"
        assert buffer.size == 3
        assert buffer.dropped == 4


class TestOutputCollector:

    @pytest.mark.asyncio
    async def test_pump_reads_until_eof(self):
        collector = OutputCollector(limit=100)
        await collector.pump(_stream(b"hello ", b"world\n"), collector.stdout)
        assert collector.stdout.getvalue() == "hello world\n"

    @pytest.mark.asyncio
    async def test_pump_caps_runaway_output(self):
        collector = OutputCollector(limit=1000)
        chunks = [b"x" * 4096 for _ in range(50)]
        await collector.pump(_stream(*chunks), collector.stdout)
        assert collector.stdout.getvalue() == "x" * 1000

    @pytest.mark.asyncio
    async def test_pump_decodes_split_multibyte_characters(self):
        encoded = "héllo".encode("utf-8")
        collector = OutputCollector(limit=100)
        await collector.pump(_stream(encoded[:2], encoded[2:]), collector.stdout)
        assert collector.stdout.getvalue() == "héllo"

    def test_result_is_trimmed(self):
        collector = OutputCollector(limit=100)
        collector.stdout.append("  2\n")
        collector.stderr.append("\nboom  ")
        assert collector.result() == ("2", "boom")

    @pytest.mark.asyncio
    async def test_dropped_counts_characters(self):
        collector = OutputCollector(limit=2)
        await collector.pump(_stream("ab".encode("utf-8"), "éé".encode("utf-8")), collector.stdout)

        assert collector.stdout.getvalue() == "ab"
        assert collector.stdout.dropped == 2
