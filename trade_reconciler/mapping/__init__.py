"""Mapping layer package for raw-row to leg normalization boundaries."""

from .interfaces import (
	ColumnMapping,
	NonOptionRowError,
	NormalizationBatch,
	NormalizationError,
	NormalizerPort,
	RejectedRow,
	RejectionReason,
	SourceProfile,
	SuspiciousAmountWarning,
	UnknownSourceProfileError,
)
from .profiles import (
	GENERIC_PROFILE,
	ROBINHOOD_PROFILE,
	TASTYTRADE_PROFILE,
	mapping_detect_source_profile,
	mapping_get_source_profile,
	mapping_list_source_profiles,
)
from .service import NormalizerServiceConfig, RecordNormalizerService

__all__ = [
	"ColumnMapping",
	"NonOptionRowError",
	"NormalizationBatch",
	"NormalizationError",
	"NormalizerPort",
	"RejectedRow",
	"RejectionReason",
	"SourceProfile",
	"SuspiciousAmountWarning",
	"UnknownSourceProfileError",
	"GENERIC_PROFILE",
	"ROBINHOOD_PROFILE",
	"TASTYTRADE_PROFILE",
	"mapping_detect_source_profile",
	"mapping_get_source_profile",
	"mapping_list_source_profiles",
	"NormalizerServiceConfig",
	"RecordNormalizerService",
]
