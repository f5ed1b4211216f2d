# tests/test_account.py
from conftest import auth, make_user
from storefront.data.models import UserDeviceModel

CHROME_WINDOWS = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
)
FIREFOX_LINUX = "Mozilla/5.0 (X11; Linux x86_64; rv:121.0) Gecko/20100101 Firefox/121.0"

ADDRESS = {
    "type": "shipping",
    "full_name": "Ada Lovelace",
    "address_line_1": "12 Marina Road",
    "city": "Lagos",
    "state": "Lagos",
    "postal_code": "100001",
    "country": "Nigeria",
}


# ---------- auth ----------

def test_register_login_me(client, notifier):
    resp = client.post(
        "/auth/register",
        json={"name": "Ada", "email": "Ada@Mail.com", "password": "secret123"},
    )
    assert resp.status_code == 201
    assert resp.json()["user"]["email"] == "ada@mail.com"
    assert [m["to"] for m in notifier.emails] == ["ada@mail.com"]

    resp = client.post("/auth/login", json={"email": "ada@mail.com", "password": "secret123"})
    assert resp.status_code == 200
    token = resp.json()["token"]

    me = client.get("/auth/me", headers={"Authorization": f"Bearer {token}"}).json()
    assert me["name"] == "Ada"
    assert me["is_admin"] is False


def test_register_duplicate_email(client, db):
    make_user(db)
    resp = client.post(
        "/auth/register",
        json={"name": "Ada", "email": "ada@mail.com", "password": "secret123"},
    )
    assert resp.status_code == 409
    assert resp.json()["detail"] == "The email has already been taken."


def test_login_rejects_bad_password(client, db):
    make_user(db)
    resp = client.post("/auth/login", json={"email": "ada@mail.com", "password": "wrong-one"})
    assert resp.status_code == 401


def test_short_password_is_rejected(client):
    resp = client.post("/auth/register", json={"name": "Ada", "email": "ada@mail.com", "password": "short"})
    assert resp.status_code == 422


# ---------- profile ----------

def test_update_profile(client, db):
    user = make_user(db)

    resp = client.patch(
        "/settings/profile",
        json={"name": "Ada L.", "phone": "08012345678", "date_of_birth": "1990-12-10"},
        headers=auth(user),
    )

    assert resp.status_code == 200
    body = resp.json()
    assert body["name"] == "Ada L."
    assert body["phone"] == "08012345678"
    assert body["date_of_birth"] == "1990-12-10"
    assert body["email"] == "ada@mail.com"


# ---------- addresses ----------

def test_first_address_of_a_type_becomes_default(client, db):
    user = make_user(db)

    first = client.post("/settings/addresses", json=ADDRESS, headers=auth(user)).json()
    second = client.post("/settings/addresses", json=dict(ADDRESS, city="Abuja"), headers=auth(user)).json()
    billing = client.post("/settings/addresses", json=dict(ADDRESS, type="billing"), headers=auth(user)).json()

    assert first["is_default"] is True
    assert second["is_default"] is False
    assert billing["is_default"] is True


def test_new_default_clears_the_old_one(client, db):
    user = make_user(db)
    first = client.post("/settings/addresses", json=ADDRESS, headers=auth(user)).json()
    second = client.post(
        "/settings/addresses",
        json=dict(ADDRESS, city="Abuja", is_default=True),
        headers=auth(user),
    ).json()

    listed = {a["id"]: a["is_default"] for a in client.get("/settings/addresses", headers=auth(user)).json()}

    assert listed == {first["id"]: False, second["id"]: True}


def test_addresses_of_other_users_are_forbidden(client, db):
    owner = make_user(db)
    intruder = make_user(db, email="bob@mail.com")
    address = client.post("/settings/addresses", json=ADDRESS, headers=auth(owner)).json()

    assert client.put(f"/settings/addresses/{address['id']}", json=ADDRESS, headers=auth(intruder)).status_code == 403
    assert client.delete(f"/settings/addresses/{address['id']}", headers=auth(intruder)).status_code == 403
    assert client.delete("/settings/addresses/999", headers=auth(owner)).status_code == 404
    assert client.delete(f"/settings/addresses/{address['id']}", headers=auth(owner)).status_code == 200


# ---------- devices ----------

def test_requests_track_the_current_device(client, db):
    user = make_user(db)

    client.get("/auth/me", headers=dict(auth(user), **{"User-Agent": CHROME_WINDOWS}))
    client.get("/auth/me", headers=dict(auth(user), **{"User-Agent": CHROME_WINDOWS}))
    devices = client.get("/settings/devices", headers=dict(auth(user), **{"User-Agent": FIREFOX_LINUX})).json()

    assert len(devices) == 2
    current = [d for d in devices if d["is_current"]]
    assert len(current) == 1
    assert current[0]["device_name"] == "Computer (Firefox on Linux)"
    chrome = next(d for d in devices if not d["is_current"])
    assert chrome["device_name"] == "Computer (Chrome on Windows)"
    assert chrome["description"].startswith("Chrome 120")
    assert chrome["description"].endswith("on Windows 10")


def test_current_device_cannot_be_removed(client, db):
    user = make_user(db)
    client.get("/auth/me", headers=dict(auth(user), **{"User-Agent": CHROME_WINDOWS}))
    client.get("/auth/me", headers=auth(user))

    current = db.query(UserDeviceModel).filter_by(is_current=True).one()
    other = db.query(UserDeviceModel).filter_by(is_current=False).one()

    resp = client.delete(f"/settings/devices/{current.id}", headers=auth(user))
    assert resp.status_code == 400
    assert resp.json()["detail"] == "You cannot remove your current device."

    assert client.delete(f"/settings/devices/{other.id}", headers=auth(user)).status_code == 200


def test_remove_other_devices(client, db):
    user = make_user(db)
    for agent in (CHROME_WINDOWS, "Firefox/121.0", "curl/8.0"):
        client.get("/auth/me", headers=dict(auth(user), **{"User-Agent": agent}))

    resp = client.delete("/settings/devices", headers=dict(auth(user), **{"User-Agent": "curl/8.0"}))

    assert resp.json()["removed"] == 2
    (device,) = db.query(UserDeviceModel).all()
    assert device.user_agent == "curl/8.0"
