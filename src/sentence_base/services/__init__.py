"""Services layer - business logic for analysis, authentication and mining."""

from sentence_base.services.settings_manager import SettingsManager
from sentence_base.services.frequency_catalog import FrequencyCatalog

# Text processing services
from sentence_base.services.text_processing import Morpheme, MorphologyService, normalize_field

# Authentication services
from sentence_base.services.token_service import TokenClaims, TokenKind, TokenService
from sentence_base.services.identity_gate import IdentityGate, extract_bearer_token

# Mining services
from sentence_base.services.mining import BatchCommitter, BatchReader, PendingQueue, WordLedger

__all__ = [
	"SettingsManager",
	"FrequencyCatalog",
	"MorphologyService",
	"Morpheme",
	"normalize_field",
	"TokenService",
	"TokenKind",
	"TokenClaims",
	"IdentityGate",
	"extract_bearer_token",
	"WordLedger",
	"PendingQueue",
	"BatchCommitter",
	"BatchReader",
]
