"""RTMP handshake, digests, protocol control messages and H.264 NAL unit helpers."""

__version__ = "0.1.0"

__all__ = [
    "control_messages",
    "digest",
    "errors",
    "handshake_client",
    "handshake_define",
    "handshake_server",
    "messages_define",
    "nalu",
    "wire",
]