from __future__ import annotations

import pytest

from frontdesk.core.errors import BedCreateError, BedUpdateError, ValidationError


def test_new_bed_starts_available(beds):
    bed = beds.add_bed(bed_number=" A-1 ", ward=" Cardiology ")

    assert bed.status == "available"
    assert bed.patient_id is None
    assert bed.bed_number == "A-1"
    assert bed.ward == "Cardiology"


@pytest.mark.parametrize("bed_number, ward", [("", "General"), ("A-2", " ")])
def test_bed_needs_number_and_ward(beds, bed_number, ward):
    with pytest.raises(ValidationError):
        beds.add_bed(bed_number=bed_number, ward=ward)


def test_duplicate_bed_number_is_rejected(beds):
    beds.add_bed(bed_number="A-3", ward="General")

    with pytest.raises(BedCreateError):
        beds.add_bed(bed_number="A-3", ward="Surgery")


def test_occupy_and_release(beds, patients):
    patient = patients.register(name="Bed User", age=48)
    bed = beds.add_bed(bed_number="A-4", ward="General")

    occupied = beds.occupy(bed.id, patient.id)
    assert occupied.status == "occupied"
    assert occupied.patient_id == patient.id
    assert [b.id for b in beds.occupied_beds()] == [bed.id]
    assert beds.available_beds() == []

    released = beds.release(bed.id)
    assert released.status == "available"
    assert released.patient_id is None
    assert [b.id for b in beds.available_beds()] == [bed.id]


def test_occupy_requires_patient(beds):
    bed = beds.add_bed(bed_number="A-5", ward="General")

    with pytest.raises(ValidationError):
        beds.occupy(bed.id, None)


def test_occupying_again_for_same_patient_is_a_no_op(beds, patients):
    patient = patients.register(name="Repeat", age=48)
    bed = beds.add_bed(bed_number="A-6", ward="General")
    first = beds.occupy(bed.id, patient.id)
    updated_at = first.updated_at

    assert beds.occupy(bed.id, patient.id).updated_at == updated_at


def test_release_of_available_bed_is_a_no_op(beds):
    bed = beds.add_bed(bed_number="A-7", ward="General")
    updated_at = bed.updated_at

    released = beds.release(bed.id)

    assert released.status == "available"
    assert released.updated_at == updated_at


def test_release_unknown_bed(beds):
    with pytest.raises(BedUpdateError) as excinfo:
        beds.release(77)

    assert excinfo.value.step == "free bed"


def test_beds_listed_by_number(beds):
    for number in ("C-2", "A-1", "B-9"):
        beds.add_bed(bed_number=number, ward="General")

    assert [bed.bed_number for bed in beds.list_beds()] == ["A-1", "B-9", "C-2"]
