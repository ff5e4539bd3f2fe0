import pytest

from rtmpkit.digest import DigestProcessor
from rtmpkit.errors import DigestError, HandshakeError
from rtmpkit.handshake_define import (
    RTMP_CLIENT_KEY_FIRST_HALF,
    RTMP_DIGEST_LENGTH,
    RTMP_HANDSHAKE_SIZE,
    RTMP_SERVER_KEY,
    RTMP_SERVER_KEY_FIRST_HALF,
    RTMP_SERVER_VERSION,
    RTMP_VERSION,
    SchemaVersion,
    ServerHandshakeState,
)
from rtmpkit.handshake_server import (
    ComplexHandshakeServer,
    HandshakeServer,
    SimpleHandshakeServer,
)

PLAIN_C1 = bytes(range(256)) * 6


def _collector():
    sent = []

    async def sink(data):
        sent.append(data)

    return sent, sink


def _complex_c1():
    raw = bytes(reversed(range(256))) * 6
    return DigestProcessor(raw, RTMP_CLIENT_KEY_FIRST_HALF.encode()).generate_and_fill_digest()


@pytest.mark.asyncio
async def test_simple_server_echoes_c1():
    sent, sink = _collector()
    server = SimpleHandshakeServer(sink)
    server.extend_data(bytes([RTMP_VERSION]) + PLAIN_C1)
    await server.handshake()

    out = b"".join(sent)
    assert len(out) == 1 + 2 * RTMP_HANDSHAKE_SIZE
    assert out[0] == RTMP_VERSION
    s1 = out[1 : 1 + RTMP_HANDSHAKE_SIZE]
    s2 = out[1 + RTMP_HANDSHAKE_SIZE :]
    assert s1[4:8] == PLAIN_C1[:4]
    assert s2 == PLAIN_C1
    assert server.state is ServerHandshakeState.READ_C2


@pytest.mark.asyncio
async def test_simple_server_finishes_after_c2():
    _, sink = _collector()
    server = SimpleHandshakeServer(sink)
    server.extend_data(bytes([RTMP_VERSION]) + PLAIN_C1)
    await server.handshake()
    server.extend_data(PLAIN_C1)
    await server.handshake()
    assert server.state is ServerHandshakeState.FINISH
    assert len(server.reader) == 0


@pytest.mark.asyncio
async def test_simple_server_short_input_raises():
    _, sink = _collector()
    server = SimpleHandshakeServer(sink)
    server.extend_data(bytes(10))
    with pytest.raises(HandshakeError):
        await server.handshake()


@pytest.mark.asyncio
async def test_complex_server_produces_valid_digests():
    sent, sink = _collector()
    c1 = _complex_c1()
    server = ComplexHandshakeServer(sink)
    server.extend_data(bytes([RTMP_VERSION]) + c1)
    await server.handshake()

    out = b"".join(sent)
    assert len(out) == 1 + 2 * RTMP_HANDSHAKE_SIZE
    s1 = out[1 : 1 + RTMP_HANDSHAKE_SIZE]
    s2 = out[1 + RTMP_HANDSHAKE_SIZE :]

    assert s1[4:8] == RTMP_SERVER_VERSION
    _, schema = DigestProcessor(s1, RTMP_SERVER_KEY_FIRST_HALF.encode()).read_digest()
    assert schema is SchemaVersion.SCHEMA0

    assert s2[4:8] == c1[:4]
    c1_digest, _ = DigestProcessor(c1, RTMP_CLIENT_KEY_FIRST_HALF.encode()).read_digest()
    tmp_key = DigestProcessor(b"", RTMP_SERVER_KEY).make_digest(c1_digest)
    body = s2[: RTMP_HANDSHAKE_SIZE - RTMP_DIGEST_LENGTH]
    assert DigestProcessor(b"", tmp_key).make_digest(body) == s2[len(body) :]


@pytest.mark.asyncio
async def test_complex_server_rejects_plain_c1():
    _, sink = _collector()
    server = ComplexHandshakeServer(sink)
    server.extend_data(bytes([RTMP_VERSION]) + PLAIN_C1)
    with pytest.raises(DigestError):
        await server.handshake()


@pytest.mark.asyncio
async def test_handshake_server_falls_back_to_simple():
    sent, sink = _collector()
    server = HandshakeServer(sink)
    server.extend_data(bytes([RTMP_VERSION]) + PLAIN_C1 + b"abc")
    await server.handshake()

    assert server.is_complex is False
    out = b"".join(sent)
    assert out[1 + RTMP_HANDSHAKE_SIZE :] == PLAIN_C1
    assert server.state() is ServerHandshakeState.READ_C2
    assert server.remaining_bytes() == b"abc"


@pytest.mark.asyncio
async def test_handshake_server_keeps_complex_mode():
    sent, sink = _collector()
    server = HandshakeServer(sink)
    c1 = _complex_c1()
    server.extend_data(bytes([RTMP_VERSION]) + c1)
    await server.handshake()

    assert server.is_complex is True
    out = b"".join(sent)
    assert out[1 + 4 : 1 + 8] == RTMP_SERVER_VERSION
    server.extend_data(bytes(RTMP_HANDSHAKE_SIZE))
    await server.handshake()
    assert server.state() is ServerHandshakeState.FINISH
    assert server.remaining_bytes() == b""


@pytest.mark.asyncio
async def test_handshake_server_short_input_raises():
    _, sink = _collector()
    server = HandshakeServer(sink)
    server.extend_data(bytes(10))
    with pytest.raises(HandshakeError):
        await server.handshake()