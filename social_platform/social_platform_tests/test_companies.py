import io

from social_platform.social_service.models import Company


def register(client, legal_id="B12345678", email="info@acme.example.com", sectors="software"):
    return client.post("/api/company/register", json={
        "legal_id": legal_id,
        "name": "Acme",
        "email": email,
        "password": "Secret123!",
        "sectors": sectors,
        "size": "10-50",
        "location": "Madrid",
    })


def test_register_verify_and_login(client, database):
    r = register(client)
    assert r.status_code == 200
    company = r.json()["company"]
    assert company["legal_id"] == "b12345678"
    assert company["verified"] is False
    assert "password" not in company

    db = database.session()
    try:
        token = db.query(Company).first().verification_token
    finally:
        db.close()
    assert client.get(f"/api/company/verify/{token}").status_code == 200

    login = client.post("/api/company/login", json={"email": "info@acme.example.com", "password": "Secret123!"})
    assert login.status_code == 200
    assert login.json()["user"]["isCompany"] is True
    assert login.json()["user"]["verified"] is True


def test_register_duplicate_legal_id(client):
    assert register(client).status_code == 200
    dup = register(client, legal_id="b12345678", email="other@acme.example.com")
    assert dup.status_code == 409
    assert dup.json() == {"status": "error", "message": "La empresa ya existe"}


def test_login_wrong_password(client):
    register(client)
    r = client.post("/api/company/login", json={"email": "info@acme.example.com", "password": "nope"})
    assert r.status_code == 401


def test_profile(client, create_company):
    acme = create_company("acme")
    r = client.get(f"/api/company/profile/{acme}")
    assert r.status_code == 200
    assert r.json()["company"]["name"] == "Company acme"
    assert client.get("/api/company/profile/9999").status_code == 404


def test_update_requires_company_token(client, create_user, auth_header):
    ana = create_user("ana")
    r = client.put("/api/company/update", headers=auth_header(ana), json={"name": "Nope"})
    assert r.status_code == 403


def test_update(client, create_company, company_header):
    acme = create_company("acme")
    create_company("globex")

    r = client.put("/api/company/update", headers=company_header(acme), json={"description": "We build things"})
    assert r.status_code == 200
    assert r.json()["company"]["description"] == "We build things"

    clash = client.put("/api/company/update", headers=company_header(acme),
                       json={"email": "globex@corp.example.com"})
    assert clash.status_code == 409


def test_upload_logo(client, create_company, company_header):
    acme = create_company("acme")
    files = {"file0": ("logo.jpg", io.BytesIO(b"jpeg bytes"), "image/jpeg")}
    r = client.post("/api/company/upload", headers=company_header(acme), files=files)
    assert r.status_code == 200

    logo = client.get(f"/api/company/logo/{r.json()['file']}")
    assert logo.status_code == 200
    assert logo.content == b"jpeg bytes"


def test_counters_stub(client, create_company):
    acme = create_company("acme")
    r = client.get(f"/api/company/counters/{acme}")
    assert r.status_code == 200
    assert r.json() == {
        "status": "success",
        "companyId": acme,
        "following": 0,
        "followed": 0,
        "publications": 0,
    }


def test_list_and_sector(client, create_company):
    create_company("acme", sectors="software", name="Acme")
    create_company("globex", sectors="energy", name="Globex")
    create_company("initech", sectors="software", name="Initech")

    listing = client.get("/api/company/list").json()
    assert [c["name"] for c in listing] == ["Acme", "Globex", "Initech"]
    assert set(listing[0].keys()) == {"id", "name", "sectors"}

    software = client.get("/api/company/sector/software").json()
    assert [c["name"] for c in software] == ["Acme", "Initech"]
    assert "email" not in software[0]

    assert client.get("/api/company/sector/mining").json() == []
