import pytest
from pydantic import ValidationError

from placement_portal.core.errors import ErrorCode, PortalError
from placement_portal.schemas.schemas import PlacementStatus, StudentProfile
from placement_portal.services.placement_service import (
    apply_placement,
    describe_transition,
    mark_not_placed,
    mark_placed,
    placement_patch,
)


@pytest.mark.parametrize("company", ["", "   ", None])
def test_mark_placed_requires_company(make_student, company):
    with pytest.raises(PortalError) as exc_info:
        mark_placed(make_student(), company)

    assert exc_info.value.code == ErrorCode.company_required


def test_mark_placed_then_not_placed(make_student):
    student = make_student()

    placed = mark_placed(student, "Acme")
    assert placed.placement_status == PlacementStatus.placed
    assert placed.placed_company == "Acme"

    reset = mark_not_placed(placed)
    assert reset.placement_status == PlacementStatus.not_placed
    assert reset.placed_company is None


def test_transitions_do_not_mutate_input(make_student):
    student = make_student()

    mark_placed(student, "Acme")

    assert student.placement_status == PlacementStatus.not_placed


def test_mark_not_placed_allowed_from_not_placed(make_student):
    student = mark_not_placed(make_student())

    assert student.placement_status == PlacementStatus.not_placed
    assert student.placed_company is None


def test_mark_placed_trims_company(make_student):
    assert mark_placed(make_student(), "  Acme Corp ").placed_company == "Acme Corp"


def test_replacing_company_while_placed(make_student):
    student = mark_placed(make_student(), "Acme")

    assert mark_placed(student, "Globex").placed_company == "Globex"


def test_placement_patch(make_student):
    student = make_student()

    assert placement_patch(student, "Placed", " Acme ") == {"placement_status": "Placed", "placed_company": "Acme"}
    assert placement_patch(student, "Not Placed", "Acme") == {"placement_status": "Not Placed", "placed_company": None}


def test_apply_placement_dispatches_to_transitions(make_student):
    placed = apply_placement(make_student(), "Placed", "Acme")
    assert placed.placement_status == PlacementStatus.placed
    assert placed.placed_company == "Acme"

    reset = apply_placement(placed, "Not Placed", "Ignored")
    assert reset.placement_status == PlacementStatus.not_placed
    assert reset.placed_company is None


def test_placement_patch_errors(make_student):
    with pytest.raises(PortalError) as exc_info:
        placement_patch(make_student(), "Placed", "")
    assert exc_info.value.code == ErrorCode.company_required

    with pytest.raises(PortalError) as exc_info:
        placement_patch(make_student(), "Hired", "Acme")
    assert exc_info.value.code == ErrorCode.invalid_format


def test_profile_model_enforces_company_invariant():
    base = {"usn": "1MS22CS154", "email": "1ms22cs154@college.edu", "semester": 6, "branch": "Computer Science"}

    with pytest.raises(ValidationError):
        StudentProfile(**base, placement_status="Placed")
    with pytest.raises(ValidationError):
        StudentProfile(**base, placement_status="Not Placed", placed_company="Acme")

    assert StudentProfile(**base, placement_status="Placed", placed_company="Acme").placed_company == "Acme"


def test_profile_year_is_derived(make_student):
    student = make_student(usn="1MS19IS001")

    assert student.year == 2019
    assert student.model_dump()["year"] == 2019


def test_describe_transition():
    assert describe_transition("1MS22CS154", {"placement_status": "Placed", "placed_company": "Acme"}) == (
        "Student 1MS22CS154 has been marked as Placed in Acme"
    )
    assert describe_transition("1MS22CS154", {"placement_status": "Not Placed", "placed_company": None}) == (
        "Student 1MS22CS154 has been marked as Not Placed"
    )
