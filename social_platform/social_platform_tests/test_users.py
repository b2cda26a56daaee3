import io

from social_platform.social_service.models import User, AccountEvent, Publication


def register(client, nick="ana", email=None, password="testing12345"):
    return client.post("/api/user/register", json={
        "name": "Ana",
        "surname": "Smith",
        "nick": nick,
        "email": email or f"{nick}@example.com",
        "password": password,
        "bio": "hello",
    })


def test_register_and_login(client, database):
    r = register(client)
    assert r.status_code == 200
    data = r.json()
    assert data["status"] == "success"
    assert data["user"]["nick"] == "ana"
    assert data["user"]["verified"] is False
    assert "password" not in data["user"]

    login = client.post("/api/user/login", json={"email": "ana@example.com", "password": "testing12345"})
    assert login.status_code == 200
    body = login.json()
    assert body["token"]
    assert body["user"]["nick"] == "ana"
    assert body["user"]["isCompany"] is False

    db = database.session()
    try:
        user = db.query(User).filter(User.nick == "ana").first()
        assert user.password != "testing12345"
        events = [e.event_type for e in db.query(AccountEvent).filter(AccountEvent.account_id == user.id).all()]
        assert "register" in events
        assert "login_success" in events
    finally:
        db.close()


def test_register_normalizes_email(client):
    register(client, nick="Ana", email="Ana@Example.COM")
    login = client.post("/api/user/login", json={"email": "ana@example.com", "password": "testing12345"})
    assert login.status_code == 200


def test_register_duplicate(client):
    assert register(client).status_code == 200
    dup_email = register(client, nick="other", email="ana@example.com")
    assert dup_email.status_code == 409
    assert dup_email.json()["status"] == "error"
    dup_nick = register(client, nick="ana", email="other@example.com")
    assert dup_nick.status_code == 409


def test_register_missing_fields(client):
    r = client.post("/api/user/register", json={"nick": "ana", "password": "x"})
    assert r.status_code == 422


def test_verify_email(client, database):
    register(client)
    db = database.session()
    try:
        token = db.query(User).filter(User.nick == "ana").first().verification_token
    finally:
        db.close()
    assert token

    r = client.get(f"/api/user/verify/{token}")
    assert r.status_code == 200

    db = database.session()
    try:
        user = db.query(User).filter(User.nick == "ana").first()
        assert user.verified is True
        assert user.verification_token is None
    finally:
        db.close()

    # Token is single use
    assert client.get(f"/api/user/verify/{token}").status_code == 400


def test_verify_unknown_token(client):
    r = client.get("/api/user/verify/not-a-token")
    assert r.status_code == 400
    assert r.json()["message"] == "Token de verificación inválido o expirado."


def test_login_wrong_password_logs_failure(client, database):
    register(client)
    bad = client.post("/api/user/login", json={"email": "ana@example.com", "password": "wrong"})
    assert bad.status_code == 401

    db = database.session()
    try:
        events = db.query(AccountEvent).filter(AccountEvent.event_type == "login_failure").all()
        assert len(events) == 1
        assert events[0].email == "ana@example.com"
        assert events[0].account_kind == "user"
    finally:
        db.close()


def test_login_unknown_email(client):
    r = client.post("/api/user/login", json={"email": "ghost@example.com", "password": "x"})
    assert r.status_code == 401


def test_profile_with_mutual_status(client, create_user, auth_header):
    ana = create_user("ana")
    bob = create_user("bob")

    r = client.get(f"/api/user/profile/{bob}", headers=auth_header(ana))
    assert r.status_code == 200
    data = r.json()
    assert data["user"]["nick"] == "bob"
    assert "email" not in data["user"]
    assert data["following"] is None
    assert data["follower"] is None

    client.post("/api/follow/save", headers=auth_header(bob), json={"followed": ana})
    data = client.get(f"/api/user/profile/{bob}", headers=auth_header(ana)).json()
    assert data["following"] is None
    assert data["follower"]["follower_id"] == bob


def test_profile_not_found(client, create_user, auth_header):
    ana = create_user("ana")
    r = client.get("/api/user/profile/9999", headers=auth_header(ana))
    assert r.status_code == 404


def test_list_users(client, create_user, auth_header):
    ana = create_user("ana")
    for i in range(6):
        create_user(f"user{i}")

    page1 = client.get("/api/user/list", headers=auth_header(ana)).json()
    page2 = client.get("/api/user/list/2", headers=auth_header(ana)).json()
    assert page1["total"] == 7
    assert page1["pages"] == 2
    assert len(page1["users"]) == 5
    assert len(page2["users"]) == 2
    assert page1["user_following"] == []


def test_update_profile(client, create_user, auth_header):
    ana = create_user("ana")
    create_user("bob")

    r = client.put("/api/user/update", headers=auth_header(ana), json={"bio": "new bio", "name": "Anita"})
    assert r.status_code == 200
    assert r.json()["user"]["bio"] == "new bio"
    assert r.json()["user"]["name"] == "Anita"

    clash = client.put("/api/user/update", headers=auth_header(ana), json={"nick": "bob"})
    assert clash.status_code == 409


def test_update_password(client, create_user, auth_header):
    ana = create_user("ana")
    r = client.put("/api/user/update", headers=auth_header(ana), json={"password": "Changed1!"})
    assert r.status_code == 200

    login = client.post("/api/user/login", json={"email": "ana@example.com", "password": "Changed1!"})
    assert login.status_code == 200


def test_upload_and_fetch_avatar(client, create_user, auth_header):
    ana = create_user("ana")
    files = {"file0": ("me.png", io.BytesIO(b"\x89PNG fake image"), "image/png")}

    r = client.post("/api/user/upload", headers=auth_header(ana), files=files)
    assert r.status_code == 200
    filename = r.json()["file"]
    assert filename.endswith(".png")
    assert r.json()["user"]["image"] == filename

    avatar = client.get(f"/api/user/avatar/{filename}")
    assert avatar.status_code == 200
    assert avatar.content == b"\x89PNG fake image"


def test_upload_rejects_other_extensions(client, create_user, auth_header):
    ana = create_user("ana")
    files = {"file0": ("notes.txt", io.BytesIO(b"text"), "text/plain")}
    r = client.post("/api/user/upload", headers=auth_header(ana), files=files)
    assert r.status_code == 400


def test_missing_avatar(client):
    assert client.get("/api/user/avatar/missing.png").status_code == 404


def test_counters(client, create_user, auth_header, database):
    ana = create_user("ana")
    bob = create_user("bob")
    carla = create_user("carla")
    client.post("/api/follow/save", headers=auth_header(ana), json={"followed": bob})
    client.post("/api/follow/save", headers=auth_header(ana), json={"followed": carla})
    client.post("/api/follow/save", headers=auth_header(carla), json={"followed": ana})

    db = database.session()
    try:
        db.add(Publication(user_id=ana, text="hi"))
        db.commit()
    finally:
        db.close()

    mine = client.get("/api/user/counters", headers=auth_header(ana)).json()
    assert mine["following"] == 2
    assert mine["followed"] == 1
    assert mine["publications"] == 1

    theirs = client.get(f"/api/user/counters/{bob}", headers=auth_header(ana)).json()
    assert theirs["userId"] == bob
    assert theirs["following"] == 0
    assert theirs["followed"] == 1


def test_counters_for_user_zero(client, create_user, auth_header):
    ana = create_user("ana")
    bob = create_user("bob")
    client.post("/api/follow/save", headers=auth_header(ana), json={"followed": bob})

    data = client.get("/api/user/counters/0", headers=auth_header(ana)).json()
    assert data["userId"] == 0
    assert data["following"] == 0
    assert data["followed"] == 0
    assert data["publications"] == 0
