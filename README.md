# rtmpkit

Building blocks for the RTMP protocol. Each piece can be used on its own:

- **Handshake** (`rtmpkit.handshake_client`, `rtmpkit.handshake_server`):
  `SimpleHandshakeClient`, `SimpleHandshakeServer`, `ComplexHandshakeServer`
  (the HMAC-SHA256 digest variant) and `HandshakeServer`. `HandshakeServer`
  tries the complex handshake first. If that attempt raises a `HandshakeError`,
  for example because the digest in C1 does not validate, it replays the bytes
  received so far into the simple handshake. You can check which form is in
  use with `HandshakeServer.is_complex`.
- **Digests** (`rtmpkit.digest`): `DigestProcessor` locates, checks and fills
  the 32-byte digest in a 1536-byte C1/S1 block. `read_digest()` tries the
  schema 0 layout first and then schema 1.
- **Protocol control messages** (`rtmpkit.control_messages`):
  `ProtocolControlMessageReader` and `ProtocolControlMessagesWriter` handle
  Set Chunk Size, Abort, Acknowledgement, Window Acknowledgement Size and Set
  Peer Bandwidth. The writer emits each message as one type-0 chunk on chunk
  stream 2.
- **Messages** (`rtmpkit.messages_define`): the message type ids
  (`MessageTypeId`) and frozen dataclasses for decoded messages, such as
  `SetChunkSize`, `SetPeerBandwidth`, `AudioData` and `VideoData`.
- **H.264 helpers** (`rtmpkit.nalu`): `find_start_code`, `split_nalus`,
  `nalu_type` and `hex_dump` for Annex-B byte streams.
- **Constants** (`rtmpkit.handshake_define`): handshake sizes, version
  bytes, keys, the `SchemaVersion`, `ClientHandshakeState` and
  `ServerHandshakeState` enums, and `current_time()`.

The package has no third-party dependencies and needs Python 3.10 or later.

## Byte I/O

`rtmpkit.wire.ByteReader` is a growable input buffer with big-endian readers:
`read_u8`, `read_u24`, `read_u32` and `read_bytes`. A read that needs more
bytes than are buffered raises `BytesReadError`.

`rtmpkit.wire.AsyncByteWriter` collects outgoing bytes. `pending()` returns
the bytes that have not been flushed yet. `await writer.flush()` passes them
to the sink and then clears the buffer. The sink must be a callable that
takes `bytes` and returns an awaitable, such as an `async def` function.
Nothing is sent when the buffer is empty.

```python
import asyncio
from rtmpkit.handshake_server import HandshakeServer

async def serve(reader: asyncio.StreamReader, stream_writer: asyncio.StreamWriter):
    async def sink(data: bytes) -> None:
        stream_writer.write(data)
        await stream_writer.drain()

    server = HandshakeServer(sink)
    server.extend_data(await reader.readexactly(1 + 1536))
    await server.handshake()              # reads C0/C1, sends S0, S1 and S2
    server.extend_data(await reader.readexactly(1536))
    await server.handshake()              # reads C2
    leftover = server.remaining_bytes()   # bytes received past the handshake
```

## Control messages

```python
import asyncio
from rtmpkit.wire import AsyncByteWriter, ByteReader
from rtmpkit.control_messages import (
    ProtocolControlMessageReader,
    ProtocolControlMessagesWriter,
)

async def main() -> None:
    sent = []

    async def sink(data: bytes) -> None:
        sent.append(data)

    writer = ProtocolControlMessagesWriter(AsyncByteWriter(sink))
    await writer.write_set_chunk_size(4096)

    body = ByteReader(sent[0][12:])       # skip the 12-byte chunk header
    assert ProtocolControlMessageReader(body).read_set_chunk_size() == 4096

asyncio.run(main())
```

`write_set_chunk_size` clears the top bit of the chunk size before it writes
the value.

## NAL units

```python
from rtmpkit.nalu import split_nalus, nalu_type

for nalu in split_nalus(b"\x00\x00\x00\x01\x67\x42\x00\x00\x01\x68\xce"):
    print(nalu_type(nalu), nalu.hex())
# 7 6742
# 8 68ce
```

`split_nalus` removes the start codes. It drops any zero bytes that come just
before a following start code, and it ignores any bytes before the first start
code.

## Errors

All errors derive from `rtmpkit.errors.RtmpError`:

- `BytesReadError`: a `ByteReader` read ran past the end of the buffer.
- `HandshakeError`: a handshake step failed. Short reads inside a handshake
  are reported as this error.
- `DigestError`: a subclass of `HandshakeError` for digest problems. Its
  `kind` attribute is a `DigestErrorKind`.
- `ControlMessageReadError`: a control message payload was truncated.

## What it does not do

rtmpkit has no network server, no sessions and no command-line program. It
does not split messages into chunks or reassemble them, and it has no AMF
encoder or decoder, so it cannot build or parse command messages such as
`connect` or `publish`. It does not remux streams. Opening sockets and passing
received bytes to these classes is up to the caller.

## Running the tests

```
pip install -e .[test]
pytest
```