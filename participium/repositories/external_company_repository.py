"""
External maintenance companies.
"""

from typing import Dict, List

from participium.repositories.base import FirestoreRepository


class ExternalCompanyRepository(FirestoreRepository):
    collection_name = "external_companies"

    def find_all(self) -> List[Dict]:
        return sorted(self.find_where(), key=lambda c: c.get("name", "").lower())

    def find_for_category(self, category: str) -> List[Dict]:
        """Companies with platform access that handle the category."""
        rows = self.find_where(("categories", "array_contains", category))
        return sorted(
            [c for c in rows if c.get("platform_access")],
            key=lambda c: c.get("name", "").lower(),
        )


_company_repository = None


def get_external_company_repository() -> ExternalCompanyRepository:
    global _company_repository
    if _company_repository is None:
        _company_repository = ExternalCompanyRepository()
    return _company_repository
