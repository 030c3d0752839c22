"""Sequence catalog package."""

from .models import (
    Stage,
    Sequence,
    Outcome,
    CatalogDecodeError,
    default_sequences,
    encode_sequences,
    decode_sequences,
)
from .store import SequenceStore, SEQUENCES_KEY, SELECTED_KEY

__all__ = [
    "Stage",
    "Sequence",
    "Outcome",
    "CatalogDecodeError",
    "default_sequences",
    "encode_sequences",
    "decode_sequences",
    "SequenceStore",
    "SEQUENCES_KEY",
    "SELECTED_KEY",
]
