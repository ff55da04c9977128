"""
Assignment resolver - who may take a report.

Technical staff are eligible when one of their roles handles the report
category; external companies when they have platform access and list the
category.
"""

from typing import Dict, List
import logging

from participium.core.errors import ForbiddenError, NotFoundError
from participium.repositories.external_company_repository import get_external_company_repository
from participium.repositories.report_repository import get_report_repository
from participium.repositories.user_repository import get_user_repository
from participium.services.presenters import company_dict, user_summary
from participium.services.role_matrix import get_roles_for_category

logger = logging.getLogger(__name__)


class AssignmentService:

    def __init__(self, reports=None, users=None, companies=None):
        self.reports = reports or get_report_repository()
        self.users = users or get_user_repository()
        self.companies = companies or get_external_company_repository()

    def get_assignable_technicals(self, report_id: str) -> List[Dict]:
        """
        Technical staff whose roles match the report category.

        Raises:
            NotFoundError: report does not exist
        """
        report = self.reports.find_by_id(report_id)
        if not report:
            raise NotFoundError("Report not found")

        roles = get_roles_for_category(report.get("category"))
        if not roles:
            return []
        return [user_summary(user) for user in self.users.find_by_any_role(roles)]

    def get_assignable_externals(self, report_id: str, actor_id: str) -> List[Dict]:
        """
        External companies (with their maintainers) able to take the report.
        Only the report's assigned officer may ask.

        Raises:
            NotFoundError: report does not exist
            ForbiddenError: actor is not the assigned officer
        """
        report = self.reports.find_by_id(report_id)
        if not report:
            raise NotFoundError("Report not found")
        if report.get("assigned_officer_id") != actor_id:
            raise ForbiddenError("You are not assigned to this report")

        result = []
        for company in self.companies.find_for_category(report.get("category")):
            entry = company_dict(company)
            entry["maintainers"] = [
                user_summary(user) for user in self.users.find_maintainers_of_company(company["id"])
            ]
            result.append(entry)
        return result


_assignment_service = None


def get_assignment_service() -> AssignmentService:
    global _assignment_service
    if _assignment_service is None:
        _assignment_service = AssignmentService()
    return _assignment_service
