"""
Discord interaction signature verification

Every request Discord sends to the interactions endpoint is signed with the
application's Ed25519 key. Unsigned or tampered requests are rejected.
"""
import logging
from typing import Optional
from fastapi import HTTPException, Header, Request
from cryptography.exceptions import InvalidSignature
from cryptography.hazmat.primitives.asymmetric.ed25519 import Ed25519PublicKey

from studybot.config import get_discord_public_key

logger = logging.getLogger(__name__)


def verify_signature(public_key_hex: str, signature_hex: str, timestamp: str, body: bytes) -> bool:
    """
    Check an Ed25519 signature over timestamp + body.

    Returns False for malformed hex as well as for a bad signature.
    """
    try:
        public_key = Ed25519PublicKey.from_public_bytes(bytes.fromhex(public_key_hex))
        public_key.verify(bytes.fromhex(signature_hex), timestamp.encode() + body)
        return True
    except (InvalidSignature, ValueError):
        return False


async def verify_discord_request(
    request: Request,
    x_signature_ed25519: Optional[str] = Header(None),
    x_signature_timestamp: Optional[str] = Header(None),
) -> None:
    """FastAPI dependency rejecting interactions that are not signed by Discord"""
    if not x_signature_ed25519 or not x_signature_timestamp:
        raise HTTPException(
            status_code=401,
            detail="Missing request signature"
        )

    body = await request.body()
    if not verify_signature(get_discord_public_key(), x_signature_ed25519, x_signature_timestamp, body):
        logger.warning("Rejected interaction with invalid signature")
        raise HTTPException(
            status_code=401,
            detail="Bad request signature"
        )
