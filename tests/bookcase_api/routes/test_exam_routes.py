from datetime import datetime

import pytest
from fastapi import HTTPException, Response
from pydantic import ValidationError

from bookcase_api.auth.dependencies import CallerIdentity
from bookcase_api.models.exam import Exam
from bookcase_api.models.links import ApplicationExam, MajorExam
from bookcase_api.routes.exam_routes import (
    CreateExamRequest,
    UpdateExamRequest,
    create_exam,
    delete_exam,
    get_exam,
    list_exams,
    update_exam,
)

ADMIN = CallerIdentity(user_id=99, role='Admin')
EXAM_DATE = datetime(2026, 1, 10, 9, 0)


@pytest.fixture
def exams(db):
    records = [
        Exam(client_id=1, date=EXAM_DATE, address='A', test_name='T1'),
        Exam(client_id=2, date=EXAM_DATE, address='B', test_name='T2'),
    ]
    db.add_all(records)
    db.commit()
    return records


def test_list_exams_returns_all_for_admin(db, exams) -> None:
    assert len(list_exams(db=db, caller=ADMIN)) == 2


def test_list_exams_returns_only_own_for_user(db, exams) -> None:
    result = list_exams(db=db, caller=CallerIdentity(user_id=1))

    assert [exam.client_id for exam in result] == [1]


def test_get_exam_returns_not_found_when_missing(db) -> None:
    with pytest.raises(HTTPException) as exception_info:
        get_exam(exam_id=42, db=db, caller=ADMIN)

    assert exception_info.value.status_code == 404


def test_get_exam_forbids_non_owner(db, exams) -> None:
    with pytest.raises(HTTPException) as exception_info:
        get_exam(exam_id=exams[1].id, db=db, caller=CallerIdentity(user_id=1))

    assert exception_info.value.status_code == 403


def test_get_exam_returns_exam_for_admin(db, exams) -> None:
    exam = get_exam(exam_id=exams[1].id, db=db, caller=ADMIN)

    assert exam.id == exams[1].id


def test_create_exam_uses_caller_as_owner(db) -> None:
    response = Response()

    created = create_exam(
        data=CreateExamRequest(date=EXAM_DATE, address='Address', test_name='Test', client_id=1),
        response=response,
        db=db,
        caller=CallerIdentity(user_id=5),
    )

    assert created.client_id == 5
    assert response.headers['location'] == f'/exams/{created.id}'
    assert db.query(Exam).one().id == created.id


def test_update_exam_returns_bad_request_when_id_mismatch(db, exams) -> None:
    with pytest.raises(HTTPException) as exception_info:
        update_exam(exam_id=exams[0].id, data=UpdateExamRequest(id=exams[1].id, date=EXAM_DATE), db=db, caller=ADMIN)

    assert exception_info.value.status_code == 400


def test_update_exam_returns_not_found_when_missing(db) -> None:
    with pytest.raises(HTTPException) as exception_info:
        update_exam(exam_id=42, data=UpdateExamRequest(id=42, date=EXAM_DATE), db=db, caller=ADMIN)

    assert exception_info.value.status_code == 404


def test_update_exam_forbids_non_owner(db, exams) -> None:
    data = UpdateExamRequest(id=exams[1].id, date=EXAM_DATE, address='Updated', test_name='Updated')

    with pytest.raises(HTTPException) as exception_info:
        update_exam(exam_id=exams[1].id, data=data, db=db, caller=CallerIdentity(user_id=1))

    assert exception_info.value.status_code == 403


def test_update_exam_updates_exam_when_owner(db, exams) -> None:
    new_date = datetime(2026, 2, 1, 13, 30)
    data = UpdateExamRequest(id=exams[0].id, date=new_date, address='Updated', test_name='Updated')

    update_exam(exam_id=exams[0].id, data=data, db=db, caller=CallerIdentity(user_id=1))

    db.expire_all()
    updated = db.query(Exam).filter(Exam.id == exams[0].id).one()
    assert updated.address == 'Updated'
    assert updated.test_name == 'Updated'
    assert updated.date == new_date
    assert updated.client_id == 1


def test_delete_exam_returns_not_found_when_missing(db) -> None:
    with pytest.raises(HTTPException) as exception_info:
        delete_exam(exam_id=42, db=db, caller=ADMIN)

    assert exception_info.value.status_code == 404


def test_delete_exam_forbids_non_owner(db, exams) -> None:
    with pytest.raises(HTTPException) as exception_info:
        delete_exam(exam_id=exams[1].id, db=db, caller=CallerIdentity(user_id=1))

    assert exception_info.value.status_code == 403


def test_delete_exam_removes_exam_and_links_when_owner(db, exams) -> None:
    exam_id = exams[0].id
    db.add_all([MajorExam(major_id=1, exam_id=exam_id), ApplicationExam(application_id=1, exam_id=exam_id)])
    db.commit()

    delete_exam(exam_id=exam_id, db=db, caller=CallerIdentity(user_id=1))

    assert [exam.id for exam in db.query(Exam).all()] == [exams[1].id]
    assert db.query(MajorExam).count() == 0
    assert db.query(ApplicationExam).count() == 0


def test_update_exam_updates_exam_for_admin(db, exams) -> None:
    data = UpdateExamRequest(id=exams[0].id, date=EXAM_DATE, address='Moved', test_name='T1')

    update_exam(exam_id=exams[0].id, data=data, db=db, caller=ADMIN)

    db.expire_all()
    updated = db.query(Exam).filter(Exam.id == exams[0].id).one()
    assert updated.address == 'Moved'
    assert updated.client_id == 1


def test_delete_exam_removes_exam_for_admin(db, exams) -> None:
    exam_id = exams[0].id

    delete_exam(exam_id=exam_id, db=db, caller=ADMIN)

    assert [exam.id for exam in db.query(Exam).all()] == [exams[1].id]


def test_update_exam_request_rejects_id_beyond_64_bits() -> None:
    with pytest.raises(ValidationError):
        UpdateExamRequest(id=2**63, date=EXAM_DATE)
