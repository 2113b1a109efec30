from __future__ import annotations

from tests.fakes import add_registration, add_seminar


def test_generate_verify_revoke_flow(client, repos, admin_headers):
    seminar = add_seminar(repos)
    reg = add_registration(repos, seminar, "a@x.com")

    res = client.post("/api/certificates/generate", json={"registrationId": reg.registration_id})
    assert res.status_code == 201
    cert = res.get_json()["certificate"]
    assert client.post("/api/certificates/generate", json={"registrationId": reg.registration_id}).status_code == 400

    body = {"certificateNumber": cert["certificateNumber"], "verificationCode": cert["verificationCode"]}
    assert client.post("/api/certificates/verify", json=body).get_json()["isValid"] is True
    assert client.post("/api/certificates/verify", json={**body, "verificationCode": "XXXX"}).status_code == 404

    assert client.put(f"/api/certificates/revoke/{cert['certificateId']}").status_code == 401
    assert client.put(f"/api/certificates/revoke/{cert['certificateId']}", headers=admin_headers).status_code == 200
    res = client.post("/api/certificates/verify", json=body)
    assert res.status_code == 400
    assert res.get_json()["isValid"] is False


def test_bulk_and_qr(client, repos, admin_headers):
    seminar = add_seminar(repos)
    regs = [add_registration(repos, seminar, f"s{i}@x.com") for i in range(3)]
    client.post("/api/certificates/generate", json={"registrationId": regs[0].registration_id})

    res = client.post("/api/certificates/generate-bulk", json={"seminarId": seminar.seminar_id}, headers=admin_headers)
    assert res.status_code == 200
    assert res.get_json()["results"] == {"success": 2, "alreadyExists": 1, "failed": 0}

    listed = client.get(f"/api/certificates/seminar/{seminar.seminar_id}").get_json()
    cert_id = listed["certificates"][0]["certificateId"]
    qr = client.get(f"/api/certificates/{cert_id}/qr")
    assert qr.status_code == 200
    assert qr.mimetype == "image/png"
    assert qr.data[:4] == b"\x89PNG"
