# tests/test_mappings.py
from tests._helpers import bearer, create_doctor, create_mapping, create_patient, register


def test_assign_and_list_by_patient(client):
    alice = register(client, "alice@x.com")
    jane = create_patient(client, alice["token"])
    smith = create_doctor(client, alice["token"])

    mapping = create_mapping(client, alice["token"], jane["id"], smith["id"], notes="Initial consult")
    assert mapping["patientId"] == jane["id"]
    assert mapping["doctorId"] == smith["id"]
    assert mapping["status"] == "Active"
    assert mapping["notes"] == "Initial consult"
    assert mapping["assignedDate"]

    r = client.get(f"/api/mappings/{jane['id']}", headers=bearer(alice["token"]))
    assert r.status_code == 200
    assert [m["id"] for m in r.json()] == [mapping["id"]]


def test_assigned_date_is_set_by_the_server(client):
    alice = register(client, "alice@x.com")
    jane = create_patient(client, alice["token"])
    smith = create_doctor(client, alice["token"])

    mapping = create_mapping(
        client, alice["token"], jane["id"], smith["id"], assignedDate="1999-01-01T00:00:00Z"
    )
    assert not mapping["assignedDate"].startswith("1999")


def test_duplicate_assignment_conflicts(client, count_rows):
    alice = register(client, "alice@x.com")
    jane = create_patient(client, alice["token"])
    smith = create_doctor(client, alice["token"])
    create_mapping(client, alice["token"], jane["id"], smith["id"])

    r = client.post(
        "/api/mappings",
        json={"patientId": jane["id"], "doctorId": smith["id"], "status": "Pending"},
        headers=bearer(alice["token"]),
    )
    assert r.status_code == 409
    assert r.json()["code"] == "conflict"
    assert count_rows("patient_doctor_mappings") == 1


def test_mapping_validation(client):
    alice = register(client, "alice@x.com")
    jane = create_patient(client, alice["token"])
    smith = create_doctor(client, alice["token"])
    headers = bearer(alice["token"])

    for payload in (
        {"patientId": jane["id"], "doctorId": smith["id"], "status": "Archived"},
        {"patientId": jane["id"], "status": "Active"},
        {"patientId": "abc", "doctorId": smith["id"], "status": "Active"},
    ):
        r = client.post("/api/mappings", json=payload, headers=headers)
        assert r.status_code == 400, payload
        assert r.json()["code"] == "validation_error"


def test_unknown_or_foreign_records_are_not_found(client, count_rows):
    alice = register(client, "alice@x.com")
    bob = register(client, "bob@x.com")
    jane = create_patient(client, alice["token"])
    smith = create_doctor(client, alice["token"])
    bobs_patient = create_patient(client, bob["token"])
    bobs_doctor = create_doctor(client, bob["token"])
    headers = bearer(alice["token"])

    cases = [
        ({"patientId": 9999, "doctorId": smith["id"]}, "Patient not found or unauthorized"),
        ({"patientId": bobs_patient["id"], "doctorId": smith["id"]}, "Patient not found or unauthorized"),
        ({"patientId": jane["id"], "doctorId": 9999}, "Doctor not found or unauthorized"),
        ({"patientId": jane["id"], "doctorId": bobs_doctor["id"]}, "Doctor not found or unauthorized"),
    ]
    for payload, message in cases:
        r = client.post("/api/mappings", json={**payload, "status": "Active"}, headers=headers)
        assert r.status_code == 404, payload
        assert r.json()["message"] == message
    assert count_rows("patient_doctor_mappings") == 0


def test_list_by_patient_requires_ownership(client):
    alice = register(client, "alice@x.com")
    bob = register(client, "bob@x.com")
    jane = create_patient(client, alice["token"])

    assert client.get(f"/api/mappings/{jane['id']}", headers=bearer(bob["token"])).status_code == 404
    assert client.get("/api/mappings/9999", headers=bearer(alice["token"])).status_code == 404
    assert client.get(f"/api/mappings/{jane['id']}", headers=bearer(alice["token"])).json() == []


def test_list_all_mappings(client):
    alice = register(client, "alice@x.com")
    bob = register(client, "bob@x.com")
    for owner in (alice, bob):
        patient = create_patient(client, owner["token"])
        doctor = create_doctor(client, owner["token"])
        create_mapping(client, owner["token"], patient["id"], doctor["id"])

    r = client.get("/api/mappings", headers=bearer(alice["token"]))
    assert r.status_code == 200
    assert len(r.json()) == 2

    client.cookies.clear()
    assert client.get("/api/mappings").status_code == 401


def test_unassign_doctor(client, count_rows):
    alice = register(client, "alice@x.com")
    jane = create_patient(client, alice["token"])
    smith = create_doctor(client, alice["token"])
    mapping = create_mapping(client, alice["token"], jane["id"], smith["id"])
    headers = bearer(alice["token"])

    r = client.delete(f"/api/mappings/{mapping['id']}", headers=headers)
    assert r.status_code == 200
    assert r.json() == {"message": "Mapping deleted successfully"}
    assert count_rows("patient_doctor_mappings") == 0
    assert count_rows("patients") == 1
    assert count_rows("doctors") == 1

    r = client.delete(f"/api/mappings/{mapping['id']}", headers=headers)
    assert r.status_code == 404

    # the pair can be assigned again once removed
    create_mapping(client, alice["token"], jane["id"], smith["id"])


def test_unassign_foreign_mapping_is_forbidden(client, count_rows):
    alice = register(client, "alice@x.com")
    bob = register(client, "bob@x.com")
    jane = create_patient(client, alice["token"])
    smith = create_doctor(client, alice["token"])
    mapping = create_mapping(client, alice["token"], jane["id"], smith["id"])

    r = client.delete(f"/api/mappings/{mapping['id']}", headers=bearer(bob["token"]))
    assert r.status_code == 403
    assert r.json()["code"] == "forbidden"
    assert count_rows("patient_doctor_mappings") == 1


def test_full_care_team_flow(client, count_rows):
    alice = register(client, "alice@x.com", name="Alice")
    token = alice["token"]
    headers = bearer(token)

    jane = create_patient(client, token)
    smith = create_doctor(client, token)
    lee = create_doctor(client, token, name="Lee", email="lee@x.com", specialty="Neurology")
    create_mapping(client, token, jane["id"], smith["id"])
    create_mapping(client, token, jane["id"], lee["id"], status="Pending")

    team = client.get(f"/api/mappings/{jane['id']}", headers=headers).json()
    assert sorted(m["doctorId"] for m in team) == sorted([smith["id"], lee["id"]])

    assert client.delete(f"/api/doctors/{lee['id']}", headers=headers).status_code == 200
    team = client.get(f"/api/mappings/{jane['id']}", headers=headers).json()
    assert [m["doctorId"] for m in team] == [smith["id"]]

    assert client.delete(f"/api/patients/{jane['id']}", headers=headers).status_code == 200
    assert count_rows("patient_doctor_mappings") == 0
    assert count_rows("doctors") == 1


def test_references_outside_the_key_range_are_bad_input(client, count_rows):
    alice = register(client, "alice@x.com")
    jane = create_patient(client, alice["token"])
    smith = create_doctor(client, alice["token"])
    headers = bearer(alice["token"])

    for payload in (
        {"patientId": 2**64, "doctorId": smith["id"]},
        {"patientId": jane["id"], "doctorId": 2**31},
    ):
        r = client.post("/api/mappings", json={**payload, "status": "Active"}, headers=headers)
        assert r.status_code == 400, payload
        assert r.json()["code"] == "validation_error"
    assert count_rows("patient_doctor_mappings") == 0

    assert client.get("/api/mappings/99999999999999999999", headers=headers).status_code == 400
    assert client.delete("/api/mappings/99999999999999999999", headers=headers).status_code == 400
