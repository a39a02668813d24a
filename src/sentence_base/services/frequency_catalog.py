"""Frequency Catalog - rank lookups against a static corpus frequency list."""

import json
import logging
from pathlib import Path
from typing import Dict, Iterable, Optional, Sequence, Tuple

from sentence_base.core import ConfigurationError

logger = logging.getLogger(__name__)

DEFAULT_FREQUENCY_LIST = Path(__file__).resolve().parent.parent / "resources" / "jp_frequency.json"


class FrequencyCatalog:
    """
    Immutable map from (dictionary form, reading) to corpus rank.

    Rank 1 is the most frequent entry. Pairs absent from the list share the
    worst rank, ``size + 1``.
    """

    def __init__(self, pairs: Iterable[Sequence[str]]):
        ranks: Dict[Tuple[str, str], int] = {}
        size = 0
        for index, pair in enumerate(pairs):
            # First occurrence keeps the better rank.
            ranks.setdefault((pair[0], pair[1]), index + 1)
            size = index + 1
        self._ranks = ranks
        self._size = size
        self._lowest_rank = size + 1

    @classmethod
    def from_file(cls, path: Optional[Path] = None) -> "FrequencyCatalog":
        """
        Load a JSON array of ``[dictionary_form, reading]`` pairs.

        Args:
            path: JSON file to read. Defaults to the list bundled with the package.

        Raises:
            ConfigurationError: If the file is missing or malformed.
        """
        path = Path(path) if path is not None else DEFAULT_FREQUENCY_LIST
        try:
            data = json.loads(path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as e:
            raise ConfigurationError(f"Cannot load frequency list {path}: {e}") from e

        if not isinstance(data, list):
            raise ConfigurationError(f"Frequency list {path} must be a JSON array")
        for index, entry in enumerate(data):
            if (
                not isinstance(entry, list)
                or len(entry) < 2
                or not all(isinstance(field, str) for field in entry[:2])
            ):
                raise ConfigurationError(
                    f"Frequency list {path} entry {index} is not a [dictionary_form, reading] pair"
                )

        catalog = cls(data)
        logger.info("Loaded %d frequency entries from %s", len(catalog), path)
        return catalog

    @property
    def lowest_rank(self) -> int:
        return self._lowest_rank

    def get_rank(self, dictionary_form: str, reading: str) -> int:
        return self._ranks.get((dictionary_form, reading), self._lowest_rank)

    def __contains__(self, key: Tuple[str, str]) -> bool:
        return key in self._ranks

    def __len__(self) -> int:
        return self._size
