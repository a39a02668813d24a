"""Text processing services - morphology and normalization."""

from sentence_base.services.text_processing.morphology_service import Morpheme, MorphologyService
from sentence_base.services.text_processing.text_normalization import normalize_field

__all__ = [
    "MorphologyService",
    "Morpheme",
    "normalize_field",
]
