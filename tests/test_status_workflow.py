import pytest

from participium.models.report import ReportStatus
from participium.services.role_matrix import (
    TECHNICAL_ROLES,
    get_roles_for_category,
    roles_intersect,
    validate_role_combination,
)
from participium.services.status_workflow import StatusWorkflowEngine
from participium.utils.boundaries import is_valid_coordinate, is_within_city


class TestTransitions:

    @pytest.mark.parametrize("target", ["ASSIGNED", "REJECTED"])
    def test_pending_moves_only_through_triage(self, target):
        assert StatusWorkflowEngine.is_valid_transition("PENDING_APPROVAL", target)
        assert not StatusWorkflowEngine.is_valid_transition("PENDING_APPROVAL", "IN_PROGRESS")
        assert not StatusWorkflowEngine.is_valid_transition("PENDING_APPROVAL", "RESOLVED")

    @pytest.mark.parametrize("terminal", ["REJECTED", "RESOLVED"])
    def test_terminal_states_have_no_exit(self, terminal):
        assert StatusWorkflowEngine.get_allowed_transitions(terminal) == []
        for status in ReportStatus:
            assert not StatusWorkflowEngine.is_valid_transition(terminal, status.value)

    def test_external_assignment_is_not_repeated(self):
        assert StatusWorkflowEngine.is_valid_transition("IN_PROGRESS", "EXTERNAL_ASSIGNED")
        assert not StatusWorkflowEngine.is_valid_transition("EXTERNAL_ASSIGNED", "EXTERNAL_ASSIGNED")

    def test_work_states_can_be_reapplied(self):
        assert StatusWorkflowEngine.is_valid_transition("IN_PROGRESS", "IN_PROGRESS")
        assert StatusWorkflowEngine.is_valid_transition("SUSPENDED", "SUSPENDED")

    def test_unknown_status_is_invalid(self):
        assert not StatusWorkflowEngine.is_valid_transition("ASSIGNED", "DONE")
        assert StatusWorkflowEngine.get_allowed_transitions("DONE") == []

    def test_validate_and_transition_builds_history_entry(self):
        result = StatusWorkflowEngine.validate_and_transition("ASSIGNED", "IN_PROGRESS", "user-1", note="started")
        entry = result["history_entry"]
        assert entry["from_status"] == "ASSIGNED"
        assert entry["to_status"] == "IN_PROGRESS"
        assert entry["changed_by"] == "user-1"
        assert entry["note"] == "started"
        assert entry["timestamp"] is not None

    def test_validate_and_transition_rejects_invalid(self):
        with pytest.raises(ValueError, match="Invalid status transition"):
            StatusWorkflowEngine.validate_and_transition("RESOLVED", "IN_PROGRESS", "user-1")

    def test_operator_statuses(self):
        assert StatusWorkflowEngine.is_operator_status("RESOLVED")
        assert not StatusWorkflowEngine.is_operator_status("ASSIGNED")
        assert not StatusWorkflowEngine.is_operator_status(None)


class TestRoleMatrix:

    def test_waste_is_handled_by_waste_offices(self):
        roles = get_roles_for_category("WASTE")
        assert set(roles) == {"WASTE_MANAGEMENT", "GREENSPACES_AND_ANIMAL_PROTECTION"}
        assert not roles_intersect(["ROAD_MAINTENANCE"], roles)

    def test_other_is_open_to_every_office(self):
        assert len(get_roles_for_category("OTHER")) == len(TECHNICAL_ROLES)

    def test_unknown_category(self):
        assert get_roles_for_category("POTHOLES") == []

    def test_roles_intersect(self):
        assert roles_intersect(["A", "B"], ["B", "C"])
        assert not roles_intersect([], ["B"])
        assert not roles_intersect(None, ["B"])

    def test_role_combinations(self):
        assert validate_role_combination(["PUBLIC_RELATIONS"])
        assert validate_role_combination(["ROAD_MAINTENANCE", "INFRASTRUCTURES"])
        assert not validate_role_combination([])
        assert not validate_role_combination(["PUBLIC_RELATIONS", "ROAD_MAINTENANCE"])
        assert not validate_role_combination(["ADMINISTRATOR", "PUBLIC_RELATIONS"])
        assert not validate_role_combination(["CITIZEN"])


class TestBoundaries:

    def test_city_centre_is_inside(self):
        assert is_within_city(45.0703, 7.6869)

    def test_milan_is_outside(self):
        assert not is_within_city(45.4642, 9.1900)

    def test_coordinate_ranges(self):
        assert is_valid_coordinate(45.0, 7.6)
        assert not is_valid_coordinate(91, 7.6)
        assert not is_valid_coordinate(45.0, -181)
        assert not is_valid_coordinate("abc", 7.6)
