"""
Service layer for business logic.
"""

from services.bulk_import import (
    ImportResult,
    import_coding_csv,
    import_csv_questions,
    import_json_questions,
    import_json_records,
)
from services.catalogue import delete_category_cascade, delete_subcategory_cascade
from services.principal_cache import load_principal, principal_cache

__all__ = [
    "ImportResult",
    "import_coding_csv",
    "import_csv_questions",
    "import_json_questions",
    "import_json_records",
    "delete_category_cascade",
    "delete_subcategory_cascade",
    "load_principal",
    "principal_cache",
]
