def test_setup_status_setup_verify_scenario(client):
    r = client.get("/api/admin/setup-status")
    assert r.status_code == 200
    assert r.json()["needsSetup"] is True

    r = client.post("/api/admin/setup", json={"email": "a@x.com", "password": "longpassword"})
    assert r.status_code == 200
    body = r.json()
    assert body["success"] is True
    token = body["token"]

    r = client.get("/api/admin/setup-status")
    assert r.json()["needsSetup"] is False

    r = client.get("/api/admin/verify", headers={"Authorization": f"Bearer {token}"})
    assert r.status_code == 200
    assert r.json() == {"success": True, "admin": {"identity": "a@x.com", "isAdmin": True}}

    r = client.get("/api/admin/verify")
    assert r.status_code == 401
    assert r.json()["success"] is False


def test_setup_validation_errors_are_400(client):
    r = client.post("/api/admin/setup", json={"email": "a@x.com", "password": "short"})
    assert r.status_code == 400
    r = client.post("/api/admin/setup", json={"email": "a@x.com"})
    assert r.status_code == 400
    r = client.post("/api/admin/setup", json=["not", "an", "object"])
    assert r.status_code == 400
    r = client.post("/api/admin/setup")
    assert r.status_code == 400
    assert client.get("/api/admin/setup-status").json()["needsSetup"] is True


def test_second_setup_is_400(client, admin_token):
    r = client.post("/api/admin/setup", json={"email": "b@x.com", "password": "longpassword"})
    assert r.status_code == 400
    assert r.json()["success"] is False


def test_login_endpoint(client, admin_token):
    r = client.post("/api/admin/login", json={"email": "a@x.com", "password": "longpassword"})
    assert r.status_code == 200
    token = r.json()["token"]
    r = client.get("/api/admin/verify", headers={"Authorization": f"Bearer {token}"})
    assert r.json()["admin"]["identity"] == "a@x.com"


def test_login_mismatches_look_the_same(client, admin_token):
    wrong_pw = client.post("/api/admin/login", json={"email": "a@x.com", "password": "nottheone"})
    wrong_id = client.post("/api/admin/login", json={"email": "z@x.com", "password": "longpassword"})
    assert wrong_pw.status_code == wrong_id.status_code == 401
    assert wrong_pw.json() == wrong_id.json()

    missing = client.post("/api/admin/login", json={"email": "a@x.com"})
    assert missing.status_code == 400


def test_gate_rejections_are_indistinguishable(client, settings, admin_token):
    from admingate.auth.session import TokenIssuer
    import time

    expired = TokenIssuer(settings.secret_key, clock=lambda: time.time() - 3 * 86400).issue("a@x.com")
    cases = [
        {},
        {"Authorization": "Bearer "},
        {"Authorization": "Bearer not-a-token"},
        {"Authorization": f"Token {admin_token}"},
        {"Authorization": f"Bearer {expired}"},
        {"Authorization": f"Bearer {TokenIssuer('other-secret').issue('a@x.com')}"},
    ]
    responses = [client.get("/api/admin/verify", headers=h) for h in cases]
    assert {r.status_code for r in responses} == {401}
    assert len({r.text for r in responses}) == 1


def test_appointments_are_protected(client, settings, admin_token):
    assert client.get("/api/admin/appointments").status_code == 401

    settings.appointments_path.write_text(
        "appointments:\n"
        "  - {name: Bob, date: '2026-10-20', time: '10:00'}\n"
        "  - {name: Ann, date: '2026-10-19', time: '09:00'}\n",
        encoding="utf-8",
    )
    r = client.get("/api/admin/appointments", headers={"Authorization": f"Bearer {admin_token}"})
    assert r.status_code == 200
    body = r.json()
    assert body["success"] is True
    assert [a["name"] for a in body["appointments"]] == ["Ann", "Bob"]


def test_appointments_empty_without_file(client, admin_token):
    r = client.get("/api/admin/appointments", headers={"Authorization": f"Bearer {admin_token}"})
    assert r.json() == {"success": True, "appointments": []}


def test_corrupt_store_is_500_not_crash(client, settings):
    settings.data_dir.mkdir(parents=True, exist_ok=True)
    settings.admin_path.write_text("admin: [unclosed", encoding="utf-8")
    r = client.post("/api/admin/login", json={"email": "a@x.com", "password": "longpassword"})
    assert r.status_code == 500
    assert r.json()["success"] is False
    assert client.get("/health").json() == {"status": "ok"}


def test_response_never_contains_hash(client, settings, admin_token):
    stored = settings.admin_path.read_text(encoding="utf-8")
    assert "$argon2id$" in stored
    r = client.post("/api/admin/login", json={"email": "a@x.com", "password": "longpassword"})
    assert "argon2" not in r.text
    assert "longpassword" not in r.text


def test_signed_token_without_admin_claim_is_rejected(client, settings, admin_token):
    import time

    from itsdangerous import URLSafeTimedSerializer

    from admingate.auth.session import TOKEN_SALT

    signer = URLSafeTimedSerializer(settings.secret_key, salt=TOKEN_SALT)
    exp = int(time.time()) + 3600
    no_header = client.get("/api/admin/verify")
    for claims in ({"identity": "a@x.com", "isAdmin": False, "exp": exp}, {"identity": "a@x.com", "exp": exp}):
        token = signer.dumps(claims)
        for path in ("/api/admin/verify", "/api/admin/appointments"):
            r = client.get(path, headers={"Authorization": f"Bearer {token}"})
            assert r.status_code == 401
            assert r.json() == no_header.json()


def test_unquoted_times_and_dates_stay_strings(client, settings, admin_token):
    settings.appointments_path.write_text(
        "- name: Bob\n"
        "  date: 2026-10-20\n"
        "  time: 10:00\n"
        "- name: Ann\n"
        "  date: 2026-10-20\n"
        "  time: 09:30\n",
        encoding="utf-8",
    )
    r = client.get("/api/admin/appointments", headers={"Authorization": f"Bearer {admin_token}"})
    appts = r.json()["appointments"]
    assert [(a["name"], a["date"], a["time"]) for a in appts] == [
        ("Ann", "2026-10-20", "09:30"),
        ("Bob", "2026-10-20", "10:00"),
    ]


def test_unexpected_error_is_generic_500_and_not_logged_by_app(settings, caplog):
    from fastapi.testclient import TestClient

    from admingate.app import create_app

    app = create_app(settings)

    @app.get("/boom")
    def boom():
        raise RuntimeError("disk on fire")

    caplog.set_level("DEBUG", logger="admingate")
    r = TestClient(app, raise_server_exceptions=False).get("/boom")
    assert r.status_code == 500
    assert r.json() == {"success": False, "message": "disk on fire"}
    assert not [rec for rec in caplog.records if rec.name.startswith("admingate") and "boom" in rec.getMessage()]
