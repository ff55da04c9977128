"""
Category → technical office routing.

Each report category is handled by a fixed set of technical roles; a staff
member is eligible for a report when at least one of their roles is in that
set. OTHER is open to every technical office.
"""

from typing import Dict, Iterable, List

from participium.models.report import ReportCategory
from participium.models.user import Role


TECHNICAL_ROLES: List[Role] = [
    Role.CULTURE_EVENTS_TOURISM_SPORTS,
    Role.LOCAL_PUBLIC_SERVICES,
    Role.EDUCATION_SERVICES,
    Role.PUBLIC_RESIDENTIAL_HOUSING,
    Role.INFORMATION_SYSTEMS,
    Role.MUNICIPAL_BUILDING_MAINTENANCE,
    Role.PRIVATE_BUILDINGS,
    Role.INFRASTRUCTURES,
    Role.GREENSPACES_AND_ANIMAL_PROTECTION,
    Role.WASTE_MANAGEMENT,
    Role.ROAD_MAINTENANCE,
    Role.CIVIL_PROTECTION,
]

MUNICIPALITY_ROLES: List[Role] = TECHNICAL_ROLES + [Role.PUBLIC_RELATIONS, Role.ADMINISTRATOR]

CATEGORY_TO_ROLES: Dict[ReportCategory, List[Role]] = {
    ReportCategory.WATER_SUPPLY_DRINKING_WATER: [Role.LOCAL_PUBLIC_SERVICES, Role.INFRASTRUCTURES],
    ReportCategory.ARCHITECTURAL_BARRIERS: [Role.MUNICIPAL_BUILDING_MAINTENANCE, Role.PRIVATE_BUILDINGS],
    ReportCategory.SEWER_SYSTEM: [Role.INFRASTRUCTURES, Role.WASTE_MANAGEMENT],
    ReportCategory.PUBLIC_LIGHTING: [Role.LOCAL_PUBLIC_SERVICES, Role.INFRASTRUCTURES],
    ReportCategory.WASTE: [Role.WASTE_MANAGEMENT, Role.GREENSPACES_AND_ANIMAL_PROTECTION],
    ReportCategory.ROAD_SIGNS_TRAFFIC_LIGHTS: [Role.ROAD_MAINTENANCE, Role.INFRASTRUCTURES],
    ReportCategory.ROADS_URBAN_FURNISHINGS: [Role.ROAD_MAINTENANCE, Role.MUNICIPAL_BUILDING_MAINTENANCE],
    ReportCategory.PUBLIC_GREEN_AREAS_PLAYGROUNDS: [
        Role.GREENSPACES_AND_ANIMAL_PROTECTION,
        Role.MUNICIPAL_BUILDING_MAINTENANCE,
    ],
    ReportCategory.OTHER: list(TECHNICAL_ROLES),
}


def get_roles_for_category(category: str) -> List[str]:
    """
    Technical roles eligible for a report category.

    Args:
        category: ReportCategory value

    Returns:
        List of role strings (empty for an unknown category)
    """
    try:
        roles = CATEGORY_TO_ROLES[ReportCategory(category)]
    except ValueError:
        return []
    return [role.value for role in roles]


def roles_intersect(user_roles: Iterable[str], allowed_roles: Iterable[str]) -> bool:
    return bool(set(user_roles or []) & set(allowed_roles or []))


def is_technical(user_roles: Iterable[str]) -> bool:
    return roles_intersect(user_roles, [role.value for role in TECHNICAL_ROLES])


def is_municipality_role(role: str) -> bool:
    return role in {r.value for r in MUNICIPALITY_ROLES}


def validate_role_combination(roles: List[str]) -> bool:
    """
    A municipality user has at least one role. Several roles are only
    allowed when every one of them is a technical office role.
    """
    if not roles:
        return False
    if len(roles) == 1:
        return is_municipality_role(roles[0])
    technical = {r.value for r in TECHNICAL_ROLES}
    return all(role in technical for role in roles)
