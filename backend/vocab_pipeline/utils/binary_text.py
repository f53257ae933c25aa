"""
Conversions between raw bytes, base64 text and UTF-8 strings.

Used by the audio decoder (base64 PCM) and by the share codec, which needs
to carry kanji, hiragana and emoji through an ASCII-only URL parameter.
"""
import base64
import binascii

from vocab_pipeline.errors import DecodeError


def bytes_from_base64(text: str) -> bytes:
    """
    Decode standard base64 into raw bytes.

    Raises:
        DecodeError: on characters outside the base64 alphabet or bad padding
    """
    try:
        return base64.b64decode(text, validate=True)
    except (binascii.Error, ValueError, TypeError) as e:
        raise DecodeError(f"Invalid base64 payload: {e}") from e


def bytes_to_base64(data: bytes) -> str:
    return base64.b64encode(data).decode('ascii')


def utf8_to_ascii_safe(text: str) -> str:
    """
    Encode any string into a base64 token.

    The string is encoded to UTF-8 first, so code points outside Latin-1
    survive the trip.

    Example:
        utf8_to_ascii_safe("犬") -> "54qs"
    """
    return bytes_to_base64(text.encode('utf-8'))


def ascii_safe_to_utf8(token: str) -> str:
    """
    Inverse of utf8_to_ascii_safe.

    Raises:
        DecodeError: if the token is not base64 or its bytes are not UTF-8
    """
    raw = bytes_from_base64(token)
    try:
        return raw.decode('utf-8')
    except UnicodeDecodeError as e:
        raise DecodeError(f"Token does not contain UTF-8 text: {e}") from e
