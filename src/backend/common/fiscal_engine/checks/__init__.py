from .tax_itbis_consistency import TAX_ITBIS_CONSISTENCY
from .tax_total_consistency import TAX_TOTAL_CONSISTENCY
from .tax_propina_consistency import TAX_PROPINA_CONSISTENCY
from .tax_telecom_surcharges import TAX_TELECOM_SURCHARGES
from .tax_ncf_validation import TAX_NCF_VALIDATION
from .tax_retention_coherence import TAX_RETENTION_COHERENCE
from .tax_field_coherence import TAX_FIELD_COHERENCE

__all__ = [
    "TAX_ITBIS_CONSISTENCY",
    "TAX_TOTAL_CONSISTENCY",
    "TAX_PROPINA_CONSISTENCY",
    "TAX_TELECOM_SURCHARGES",
    "TAX_NCF_VALIDATION",
    "TAX_RETENTION_COHERENCE",
    "TAX_FIELD_COHERENCE",
]
