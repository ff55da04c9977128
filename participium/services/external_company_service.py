"""
External Company Service - contractor companies and their maintainer accounts.
"""

from typing import Dict, List, Optional
import logging

from participium.core.errors import BadRequestError, ConflictError, NotFoundError, UnprocessableEntityError
from participium.models.report import ReportCategory
from participium.models.user import Role
from participium.repositories.external_company_repository import get_external_company_repository
from participium.repositories.user_repository import get_user_repository
from participium.services.presenters import company_dict
from participium.services.user_service import normalize_email
from participium.utils.security import hash_password

logger = logging.getLogger(__name__)

MAX_COMPANY_CATEGORIES = 2


class ExternalCompanyService:

    def __init__(self, companies=None, users=None):
        self.companies = companies or get_external_company_repository()
        self.users = users or get_user_repository()

    def list_companies(self) -> List[Dict]:
        return [company_dict(c) for c in self.companies.find_all()]

    def list_with_access(self) -> List[Dict]:
        return [company_dict(c) for c in self.companies.find_all() if c.get("platform_access")]

    def create_company(self, name: str, categories: List[str], platform_access: bool) -> Dict:
        """
        Raises:
            BadRequestError: blank name or no categories
            UnprocessableEntityError: unknown category or more than two
        """
        if not name or not name.strip():
            raise BadRequestError("Company name is required")
        categories = list(dict.fromkeys(categories or []))
        if not categories:
            raise BadRequestError("At least one category is required")
        if len(categories) > MAX_COMPANY_CATEGORIES:
            raise UnprocessableEntityError(f"A company can handle at most {MAX_COMPANY_CATEGORIES} categories")
        valid = {c.value for c in ReportCategory}
        invalid = [c for c in categories if c not in valid]
        if invalid:
            raise UnprocessableEntityError(f"Invalid category: {', '.join(invalid)}")

        company = self.companies.create({
            "name": name.strip(),
            "categories": categories,
            "platform_access": bool(platform_access),
        })
        logger.info(f"External company created: {company['id']} ({company['name']})")
        return company_dict(company)

    def delete_company(self, company_id: str) -> None:
        if not self.companies.find_by_id(company_id):
            raise NotFoundError("External company not found")
        if self.users.find_maintainers_of_company(company_id):
            raise ConflictError("Company still has external maintainers")
        self.companies.delete(company_id)
        logger.info(f"External company deleted: {company_id}")

    def list_maintainers(self) -> List[Dict]:
        result = []
        companies: Dict[str, Optional[Dict]] = {}
        for user in self.users.find_by_role(Role.EXTERNAL_MAINTAINER.value):
            company_id = user.get("external_company_id")
            if company_id not in companies:
                companies[company_id] = self.companies.find_by_id(company_id)
            if companies[company_id]:
                result.append({**user, "company": company_dict(companies[company_id])})
        return result

    def create_maintainer(
        self,
        first_name: str,
        last_name: str,
        email: str,
        password: str,
        company_id: Optional[str],
    ) -> Dict:
        """
        Create an external maintainer bound to a company with platform access.

        Raises:
            BadRequestError: company id missing, or company without platform access
            NotFoundError: company does not exist
            ConflictError: e-mail already in use
        """
        if not company_id:
            raise BadRequestError("externalCompanyId is required")
        company = self.companies.find_by_id(company_id)
        if not company:
            raise NotFoundError("External company not found")
        if not company.get("platform_access"):
            raise BadRequestError("External company does not have platform access")

        email = normalize_email(email)
        if self.users.find_by_email(email):
            raise ConflictError("Email already in use")

        user = self.users.create({
            "first_name": first_name.strip(),
            "last_name": last_name.strip(),
            "email": email,
            "password_hash": hash_password(password),
            "role": [Role.EXTERNAL_MAINTAINER.value],
            "is_verified": True,
            "external_company_id": company["id"],
            "telegram_id": None,
            "telegram_username": None,
            "email_notifications_enabled": True,
        })
        logger.info(f"External maintainer created: {user['id']} for company {company['id']}")
        return {**user, "company": company_dict(company)}


_external_company_service = None


def get_external_company_service() -> ExternalCompanyService:
    global _external_company_service
    if _external_company_service is None:
        _external_company_service = ExternalCompanyService()
    return _external_company_service
