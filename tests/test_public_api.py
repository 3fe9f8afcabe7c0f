from datetime import timedelta

from storecms.core.settings import settings
from storecms.db.types import utcnow

PUBLIC = settings.PUBLIC_STR


def _iso(**delta) -> str:
    return (utcnow() + timedelta(**delta)).isoformat()


def _page(client, api, **body):
    r = client.post(f"{api}/pages", json=body)
    assert r.status_code == 201, r.text
    return r.json()


def _post(client, api, **body):
    r = client.post(f"{api}/posts", json=body)
    assert r.status_code == 201, r.text
    return r.json()


def test_draft_page_is_hidden(client, api):
    _page(client, api, title="Secret", slug="secret")
    assert client.get(f"{PUBLIC}/pages/secret").status_code == 404


def test_published_page_is_served(client, api):
    page = _page(client, api, title="About", slug="about")
    client.post(f"{api}/pages/{page['id']}/publish")
    r = client.get(f"{PUBLIC}/pages/about")
    assert r.status_code == 200
    assert r.json()["id"] == page["id"]


def test_future_published_at_is_hidden_until_due(client, api):
    _post(client, api, title="Tomorrow", status="published", publishedAt=_iso(days=1))
    _post(client, api, title="Yesterday", status="published", publishedAt=_iso(days=-1))

    assert client.get(f"{PUBLIC}/posts/tomorrow").status_code == 404
    assert client.get(f"{PUBLIC}/posts/yesterday").status_code == 200
    titles = [p["title"] for p in client.get(f"{PUBLIC}/posts").json()["data"]]
    assert titles == ["Yesterday"]

    # admin path still sees both
    assert client.get(f"{api}/posts", params={"status": "published"}).json()["total"] == 2


def test_home_requires_published(client, api):
    home = _page(client, api, title="Home", isHome=True)
    assert client.get(f"{PUBLIC}/pages/home").status_code == 404
    client.post(f"{api}/pages/{home['id']}/publish")
    assert client.get(f"{PUBLIC}/pages/home").json()["id"] == home["id"]
    assert client.get(f"{PUBLIC}/pages/shop").status_code == 404


def test_public_pages_list_only_visible(client, api):
    a = _page(client, api, title="Visible", navOrder=2)
    _page(client, api, title="Hidden", navOrder=1)
    client.post(f"{api}/pages/{a['id']}/publish")
    assert [p["title"] for p in client.get(f"{PUBLIC}/pages").json()] == ["Visible"]


def test_public_posts_use_blog_page_size(client, api):
    client.put(f"{api}/post-settings", json={"postsPerPage": 2})
    for i in range(3):
        _post(client, api, title=f"Post {i}", status="published", publishedAt=_iso(hours=-(i + 1)))
    body = client.get(f"{PUBLIC}/posts").json()
    assert body["pageSize"] == 2
    assert body["total"] == 3
    # newest first
    assert [p["title"] for p in body["data"]] == ["Post 0", "Post 1"]


def test_archived_post_is_hidden(client, api):
    post = _post(client, api, title="Old News", status="published", publishedAt=_iso(days=-3))
    client.delete(f"{api}/posts/{post['id']}")
    assert client.get(f"{PUBLIC}/posts/old-news").status_code == 404
