"""Morphology Service - tokenization, dictionary forms and readings for Japanese text."""

import logging
import threading
from dataclasses import asdict, dataclass, field
from typing import Any, List, Optional, Tuple

import ipadic
import MeCab

logger = logging.getLogger(__name__)

UNKNOWN_FEATURE = "*"
"""Placeholder the dictionary writes into feature slots it has no value for."""

SENTINEL_NODE_STATS = (MeCab.MECAB_BOS_NODE, MeCab.MECAB_EOS_NODE)


@dataclass
class Morpheme:
    """Represents a single morpheme of analyzed Japanese text."""

    surface: str
    """Original text span (e.g., "走っ")"""

    dictionary_form: str
    """Uninflected form (e.g., "走る")"""

    reading: str
    """Katakana reading (e.g., "ハシッ")"""

    features: List[str] = field(default_factory=list)
    """Raw dictionary feature vector, in dictionary order"""

    def to_dict(self) -> dict:
        data = asdict(self)
        # The wire name of the surface predates this class.
        data["morpheme"] = data.pop("surface")
        return data


class MorphologyService:
    """
    Analyzes Japanese text into morphemes.

    Uses MeCab with the IPADIC dictionary. IPADIC feature vectors end with
    (..., dictionary form, reading, pronunciation); entries missing from the
    dictionary carry "*" in those slots, in which case the fallbacks below
    keep every morpheme a complete (surface, dictionary form, reading) triple.
    """

    def __init__(self, tagger: Optional[Any] = None):
        """
        Args:
            tagger: Object exposing MeCab's ``parseToNode``. When None, each
                thread lazily builds its own IPADIC tagger.
        """
        self._tagger = tagger
        self._local = threading.local()

    def analyze(self, text: str) -> List[Morpheme]:
        """
        Tokenize Japanese text.

        Args:
            text: Non-empty Japanese text

        Returns:
            Morphemes in text order; empty list for empty input
        """
        if not text:
            return []

        morphemes = []
        for surface, features in self._parse(text):
            dictionary_form = _feature_at(features, 3)
            if dictionary_form is None:
                logger.debug("No dictionary form for %r, using surface", surface)
                dictionary_form = surface

            reading = _feature_at(features, 2)
            if reading is None:
                reading = self.reading_of(dictionary_form)
            if reading is None:
                logger.debug("No reading for %r, using dictionary form", surface)
                reading = dictionary_form

            morphemes.append(
                Morpheme(
                    surface=surface,
                    dictionary_form=dictionary_form,
                    reading=reading,
                    features=features,
                )
            )

        return morphemes

    def reading_of(self, dictionary_form: str) -> Optional[str]:
        """Reading of the first morpheme of ``dictionary_form`` re-tokenized on its own."""
        if not dictionary_form:
            return None
        for _, features in self._parse(dictionary_form):
            return _feature_at(features, 2)
        return None

    def _parse(self, text: str) -> List[Tuple[str, List[str]]]:
        """(surface, features) of every non-sentinel node.

        Read eagerly: parsing again with the same tagger invalidates the
        nodes of the previous lattice.
        """
        parsed = []
        node = self._get_tagger().parseToNode(text)
        while node:
            if node.stat not in SENTINEL_NODE_STATS:
                parsed.append((node.surface, node.feature.split(",")))
            node = node.next
        return parsed

    def _get_tagger(self) -> Any:
        if self._tagger is not None:
            return self._tagger
        tagger = getattr(self._local, "tagger", None)
        if tagger is None:
            tagger = MeCab.Tagger(ipadic.MECAB_ARGS)
            self._local.tagger = tagger
        return tagger


def _feature_at(features: List[str], offset_from_end: int) -> Optional[str]:
    """Feature ``len - offset_from_end``, or None when absent or the unknown placeholder."""
    index = len(features) - offset_from_end
    if index < 0:
        return None
    value = features[index]
    if not value or value == UNKNOWN_FEATURE:
        return None
    return value
