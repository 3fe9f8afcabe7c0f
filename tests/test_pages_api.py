from datetime import timedelta

from storecms.db.types import utcnow


def _iso(**delta) -> str:
    return (utcnow() + timedelta(**delta)).isoformat()


def _create(client, api, **body):
    body.setdefault("title", "About Us")
    r = client.post(f"{api}/pages", json=body)
    assert r.status_code == 201, r.text
    return r.json()


def test_create_page_defaults(client, api):
    page = _create(client, api)
    assert page["slug"] == "about-us"
    assert page["status"] == "draft"
    assert page["isHome"] is False and page["isShop"] is False
    assert page["contentJson"] == {"version": 1, "blocks": []}
    assert page["navOrder"] == 0
    assert page["id"]


def test_create_page_sanitizes_legacy_html(client, api):
    page = _create(client, api, content='<p>hi</p><script>alert(1)</script><a onclick="x()">go</a>')
    assert page["content"] == "<p>hi</p><a>go</a>"


def test_create_page_normalizes_content_json(client, api):
    doc = {"blocks": [{"id": "h1", "type": "hero", "data": {"title": "Cold"}}]}
    page = _create(client, api, contentJson=doc)
    assert page["contentJson"]["version"] == 1
    assert page["contentJson"]["blocks"][0]["data"]["title"] == "Cold"


def test_unknown_block_type_is_accepted(client, api):
    page = _create(client, api, contentJson={"blocks": [{"id": "x", "type": "sparkles", "data": {}}]})
    assert page["contentJson"]["blocks"][0]["type"] == "sparkles"


def test_invalid_content_json_is_400_naming_the_block(client, api):
    doc = {"blocks": [{"id": "ok", "type": "hero"}, {"id": "", "type": "hero"}]}
    r = client.post(f"{api}/pages", json={"title": "Bad", "contentJson": doc})
    assert r.status_code == 400
    err = r.json()["error"]
    assert err["message"] == "contentJson.blocks[1].id must be a non-empty string"
    assert err["requestId"]


def test_content_json_array_is_400(client, api):
    r = client.post(f"{api}/pages", json={"title": "Bad", "contentJson": []})
    assert r.status_code == 400
    assert "not an array or primitive" in r.json()["error"]["message"]


def test_bad_slug_format_is_400(client, api):
    r = client.post(f"{api}/pages", json={"title": "X", "slug": "Not A Slug"})
    assert r.status_code == 400
    err = r.json()["error"]
    assert err["code"] == "validation_error"
    assert any(d["field"] == "slug" for d in err["details"])


def test_duplicate_slug_is_409(client, api):
    _create(client, api, title="Contact", slug="contact")
    r = client.post(f"{api}/pages", json={"title": "Contact 2", "slug": "contact"})
    assert r.status_code == 409
    assert r.json()["error"]["code"] == "slug_conflict"


def test_update_to_taken_slug_is_409_but_own_slug_is_fine(client, api):
    a = _create(client, api, title="A", slug="a")
    _create(client, api, title="B", slug="b")
    assert client.put(f"{api}/pages/{a['id']}", json={"slug": "b"}).status_code == 409
    r = client.put(f"{api}/pages/{a['id']}", json={"slug": "a", "title": "A!"})
    assert r.status_code == 200
    assert r.json()["title"] == "A!"


def test_update_is_a_patch(client, api):
    page = _create(client, api, metaTitle="Meta", navOrder=3)
    r = client.put(f"{api}/pages/{page['id']}", json={"title": "Renamed"})
    body = r.json()
    assert body["title"] == "Renamed"
    assert body["metaTitle"] == "Meta"
    assert body["navOrder"] == 3
    assert body["slug"] == page["slug"]


def test_null_title_on_update_is_400(client, api):
    page = _create(client, api)
    r = client.put(f"{api}/pages/{page['id']}", json={"title": None})
    assert r.status_code == 400


def test_list_is_ordered_by_nav_order(client, api):
    _create(client, api, title="Third", navOrder=3)
    _create(client, api, title="First", navOrder=1)
    _create(client, api, title="Second", navOrder=2)
    titles = [p["title"] for p in client.get(f"{api}/pages").json()]
    assert titles == ["First", "Second", "Third"]


def test_get_unknown_page_is_404_envelope(client, api):
    r = client.get(f"{api}/pages/nope")
    assert r.status_code == 404
    assert r.json()["error"]["code"] == "not_found"


def test_delete_page_is_physical(client, api):
    page = _create(client, api)
    r = client.delete(f"{api}/pages/{page['id']}")
    assert r.status_code == 204
    assert client.get(f"{api}/pages/{page['id']}").status_code == 404


def test_check_slug(client, api):
    _create(client, api, title="Shop", slug="shop")
    assert client.get(f"{api}/pages/check-slug", params={"slug": "shop"}).json() == {"slug": "shop", "available": False}
    assert client.get(f"{api}/pages/check-slug", params={"slug": "shop", "currentSlug": "shop"}).json()["available"]
    assert client.get(f"{api}/pages/check-slug", params={"slug": "other"}).json()["available"]


# ---- Home / shop ----
def test_home_and_shop_endpoints(client, api):
    assert client.get(f"{api}/pages/home").status_code == 404
    a = _create(client, api, title="Home", isHome=True)
    b = _create(client, api, title="Store")
    assert client.get(f"{api}/pages/home").json()["id"] == a["id"]

    r = client.post(f"{api}/pages/{b['id']}/set-home")
    assert r.status_code == 200 and r.json()["isHome"] is True
    assert client.get(f"{api}/pages/home").json()["id"] == b["id"]
    assert client.get(f"{api}/pages/{a['id']}").json()["isHome"] is False

    client.post(f"{api}/pages/{a['id']}/set-shop")
    assert client.get(f"{api}/pages/shop").json()["id"] == a["id"]


def test_create_second_home_moves_flag(client, api):
    _create(client, api, title="Old", isHome=True)
    new = _create(client, api, title="New", isHome=True)
    homes = [p for p in client.get(f"{api}/pages").json() if p["isHome"]]
    assert [p["id"] for p in homes] == [new["id"]]


# ---- Transitions ----
def test_publish_unpublish(client, api):
    page = _create(client, api)
    r = client.post(f"{api}/pages/{page['id']}/publish")
    assert r.json()["status"] == "published"
    assert r.json()["publishedAt"]
    r = client.post(f"{api}/pages/{page['id']}/unpublish")
    assert r.json()["status"] == "draft"


def test_schedule_requires_future(client, api):
    page = _create(client, api)
    r = client.post(f"{api}/pages/{page['id']}/schedule", json={"scheduledAt": _iso(minutes=-5)})
    assert r.status_code == 400
    assert r.json()["error"]["message"] == "scheduledAt must be in the future"

    r = client.post(f"{api}/pages/{page['id']}/schedule", json={"scheduledAt": _iso(days=1)})
    assert r.status_code == 200
    assert r.json()["status"] == "scheduled"
    assert r.json()["scheduledAt"]


def test_publish_clears_schedule(client, api):
    page = _create(client, api, status="scheduled", scheduledAt=_iso(days=2))
    r = client.post(f"{api}/pages/{page['id']}/publish")
    assert r.json()["scheduledAt"] is None


def test_update_out_of_scheduled_clears_scheduled_at(client, api):
    page = _create(client, api, status="scheduled", scheduledAt=_iso(days=2))
    r = client.put(f"{api}/pages/{page['id']}", json={"status": "draft"})
    assert r.json()["scheduledAt"] is None


def test_status_invariants_on_create(client, api):
    r = client.post(f"{api}/pages", json={"title": "P", "status": "published"})
    assert r.status_code == 400
    assert r.json()["error"]["details"][0]["field"] == "publishedAt"
    r = client.post(f"{api}/pages", json={"title": "S", "status": "scheduled"})
    assert r.status_code == 400
    assert r.json()["error"]["details"][0]["field"] == "scheduledAt"


def test_archive_page(client, api):
    page = _create(client, api)
    assert client.post(f"{api}/pages/{page['id']}/archive").json()["status"] == "archived"
