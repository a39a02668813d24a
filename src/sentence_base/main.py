"""Main entry point: composition root and command-line analyzer."""

import json
import logging
import sys
from pathlib import Path
from typing import List, Optional

from sentence_base.coordinators import MiningCoordinator
from sentence_base.io import DatabaseManager, UserRepository
from sentence_base.services import (
    BatchCommitter,
    BatchReader,
    FrequencyCatalog,
    IdentityGate,
    MorphologyService,
    PendingQueue,
    SettingsManager,
    TokenService,
    WordLedger,
)


def build_coordinator(
    settings: SettingsManager,
    db: DatabaseManager,
    catalog: Optional[FrequencyCatalog] = None,
    morphology: Optional[MorphologyService] = None,
) -> MiningCoordinator:
    """
    Wire every component following the Composition Root pattern.
    This is the only place that knows how to instantiate and connect them.

    Raises:
        ConfigurationError: Missing signing secret or unreadable frequency list.
    """
    # 1. Startup-time configuration (fatal when broken)
    tokens = TokenService(settings)
    if catalog is None:
        catalog = FrequencyCatalog.from_file()
    if morphology is None:
        morphology = MorphologyService()

    # 2. Persistence
    db.ensure_schema()
    users = UserRepository(db)

    # 3. Services
    ledger = WordLedger(db)
    return MiningCoordinator(
        identity_gate=IdentityGate(tokens, users),
        tokens=tokens,
        users=users,
        morphology=morphology,
        pending_queue=PendingQueue(db, ledger, catalog, settings),
        batch_committer=BatchCommitter(db),
        batch_reader=BatchReader(db, catalog),
    )


def analyze_main(argv: Optional[List[str]] = None) -> int:
    """Print the morphemes of the given text as JSON."""
    args = sys.argv[1:] if argv is None else argv
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")

    text = " ".join(args).strip()
    if not text:
        print("usage: sentence-base-analyze TEXT", file=sys.stderr)
        return 2

    morphemes = MorphologyService().analyze(text)
    print(json.dumps([morpheme.to_dict() for morpheme in morphemes], ensure_ascii=False, indent=2))
    return 0


def main(project_root: Optional[Path] = None) -> int:
    """Check the configuration and prepare the database."""
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")
    settings = SettingsManager(project_root=project_root)
    db = DatabaseManager(settings.get_database_path())
    try:
        build_coordinator(settings, db)
    finally:
        db.close()
    logging.getLogger(__name__).info("Database ready at %s", settings.get_database_path())
    return 0


if __name__ == "__main__":
    sys.exit(main())
