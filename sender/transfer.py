"""Block transfer loop.

Contains:
- read_chunk: Read up to one block of payload from a stream
- send_block: Write one block until the receiver acknowledges it
- send_blocks: Frame and send the whole payload
"""

from collections.abc import Callable
from typing import BinaryIO

from common.block import Block, make_block
from common.errors import ChannelError, TransferCanceled, UnimplementedMode
from common.io import read_byte, write_bytes
from common.protocol import LOG_PROGRESS_INTERVAL, TRACE, ByteChannel, ControlByte, Mode
from session.state import TransferSession

ProgressCallback = Callable[[int, int, int], None]


def read_chunk(stream: BinaryIO, size: int) -> bytes:
    """Read up to size bytes, continuing over short reads until EOF."""
    chunk = b""
    while len(chunk) < size:
        data = stream.read(size - len(chunk))
        if not data:
            break
        chunk += data
    return chunk


def send_block(port: ByteChannel, session: TransferSession, block: Block) -> None:
    """Send block until it is acknowledged.

    The same header, payload and checksum bytes are written on every attempt.

    Raises:
        TransferCanceled: Retry ceiling exceeded on write failures, NAKs or garbage.
        ChannelError: Read failure on the last permitted retry.
    """
    log = session.log
    parts = (
        ("header", block.header_bytes),
        ("data", block.payload),
        ("checksum", block.checksum_bytes),
    )
    attempt = 0

    while True:
        if attempt > 0:
            session.retransmits += 1
        attempt += 1
        log.debug(f"send: block {block.sequence} (attempt {attempt})")

        try:
            for name, data in parts:
                write_bytes(port, data)
                session.wire_bytes += len(data)
        except ChannelError as e:
            log.error(f"Error writing {name} of block {block.sequence}: {e}")
            if session.record_error():
                log.error(f"send error: error_count reached {session.retries}, aborting")
                raise TransferCanceled(
                    f"Could not write block {block.sequence} after {session.error_count} errors"
                ) from e
            continue

        try:
            char = read_byte(port)
        except ChannelError as e:
            log.error(f"Error reading response to block {block.sequence}: {e}")
            if session.record_error():
                log.error("Too many errors, aborting transfer")
                raise
            continue

        match char:
            case ControlByte.ACK:
                log.log(TRACE, f"send: block {block.sequence} acknowledged")
                session.reset_errors()
                return
            case ControlByte.NAK:
                log.warning(f"send error: NAK received for block {block.sequence}")
            case _:
                log.error(f"send error: expected ACK or NAK, got 0x{char:02x}")

        if session.record_error():
            log.error(f"Too many errors ({session.error_count}), aborting transfer")
            raise TransferCanceled(
                f"Block {block.sequence} not acknowledged after {session.error_count} attempts"
            )


def send_blocks(
    port: ByteChannel,
    session: TransferSession,
    stream: BinaryIO,
    callback: ProgressCallback | None = None,
) -> None:
    """Frame the stream into blocks and send each one until the stream is exhausted.

    callback, if given, is called as callback(total_blocks, success_count,
    error_count) after each acknowledged block.

    Raises:
        UnimplementedMode: If the receiver negotiated basic mode.
        TransferCanceled, ChannelError: See send_block.
    """
    log = session.log
    if session.mode is Mode.BASIC:
        log.error("send error: 8-bit checksum (basic) mode is not implemented")
        raise UnimplementedMode("Receiver requested 8-bit checksum mode, which is not implemented")

    block_size = session.mode.block_size
    log.log(TRACE, f"Sending payload in {block_size} byte blocks")

    total_blocks = 0
    while True:
        data = read_chunk(stream, block_size)
        if not data:
            log.debug("send: at EOF")
            break
        total_blocks += 1
        if len(data) < block_size:
            log.log(TRACE, f"send: short read, padding with {block_size - len(data)} bytes")

        block = make_block(session.mode, session.sequence, data, session.padding)
        send_block(port, session, block)

        session.blocks_sent += 1
        session.bytes_sent += len(data)
        if callback is not None:
            callback(total_blocks, session.blocks_sent, session.error_count)
        if LOG_PROGRESS_INTERVAL > 0 and session.blocks_sent % LOG_PROGRESS_INTERVAL == 0:
            log.info(
                f"Progress: {session.blocks_sent} blocks, {session.bytes_sent} bytes, "
                f"{session.retransmits} retransmits"
            )
        session.advance_sequence()
