from .transcript import SpeechChunk, Transcript
from .user import WILDCARD_CLIENT, AccessLevel, CallerIdentity

__all__ = [
    "AccessLevel",
    "CallerIdentity",
    "SpeechChunk",
    "Transcript",
    "WILDCARD_CLIENT",
]
