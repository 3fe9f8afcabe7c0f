def test_category_crud(client, api):
    r = client.post(f"{api}/post-categories", json={"name": "Recovery Science", "description": "Why it works"})
    assert r.status_code == 201
    cat = r.json()
    assert cat["slug"] == "recovery-science"

    r = client.put(f"{api}/post-categories/{cat['id']}", json={"name": "Recovery"})
    assert r.json()["name"] == "Recovery"
    assert r.json()["slug"] == "recovery-science"

    assert client.get(f"{api}/post-categories/{cat['id']}").json()["description"] == "Why it works"
    assert client.delete(f"{api}/post-categories/{cat['id']}").status_code == 204
    assert client.get(f"{api}/post-categories/{cat['id']}").status_code == 404


def test_lists_are_ordered_by_name(client, api):
    for name in ("Zeta", "Alpha", "Mu"):
        client.post(f"{api}/post-tags", json={"name": name})
        client.post(f"{api}/post-categories", json={"name": name})
    assert [t["name"] for t in client.get(f"{api}/post-tags").json()] == ["Alpha", "Mu", "Zeta"]
    assert [c["name"] for c in client.get(f"{api}/post-categories").json()] == ["Alpha", "Mu", "Zeta"]


def test_tag_slug_conflict(client, api):
    client.post(f"{api}/post-tags", json={"name": "Sauna"})
    r = client.post(f"{api}/post-tags", json={"name": "Sauna!"})
    assert r.status_code == 409
    assert r.json()["error"]["details"][0]["field"] == "slug"


def test_tag_and_category_slugs_are_separate_scopes(client, api):
    assert client.post(f"{api}/post-tags", json={"name": "News"}).status_code == 201
    assert client.post(f"{api}/post-categories", json={"name": "News"}).status_code == 201


def test_check_slug_endpoints(client, api):
    client.post(f"{api}/post-tags", json={"name": "Heat"})
    assert client.get(f"{api}/post-tags/check-slug", params={"slug": "heat"}).json()["available"] is False
    assert client.get(f"{api}/post-categories/check-slug", params={"slug": "heat"}).json()["available"] is True
    assert client.get(f"{api}/posts/check-slug", params={"slug": "heat"}).json()["available"] is True


def test_deleting_a_tag_keeps_its_posts(client, api):
    tag = client.post(f"{api}/post-tags", json={"name": "Temp"}).json()
    post = client.post(f"{api}/posts", json={"title": "Tagged", "tagIds": [tag["id"]]}).json()
    assert [t["id"] for t in post["tags"]] == [tag["id"]]

    assert client.delete(f"{api}/post-tags/{tag['id']}").status_code == 204
    r = client.get(f"{api}/posts/{post['id']}")
    assert r.status_code == 200
    assert r.json()["tags"] == []


def test_symbol_only_name_needs_explicit_slug(client, api):
    r = client.post(f"{api}/post-tags", json={"name": "™®©"})
    assert r.status_code == 400
    r = client.post(f"{api}/post-tags", json={"name": "™®©", "slug": "trademarks"})
    assert r.status_code == 201


def test_lists_with_post_counts(client, api):
    news = client.post(f"{api}/post-categories", json={"name": "News"}).json()
    client.post(f"{api}/post-categories", json={"name": "Guides"})
    heat = client.post(f"{api}/post-tags", json={"name": "Heat"}).json()
    cold = client.post(f"{api}/post-tags", json={"name": "Cold"}).json()

    client.post(f"{api}/posts", json={"title": "One", "categoryIds": [news["id"]], "tagIds": [heat["id"]]})
    client.post(f"{api}/posts", json={"title": "Two", "categoryIds": [news["id"]], "tagIds": [heat["id"], cold["id"]]})

    cats = client.get(f"{api}/post-categories", params={"withCounts": "true"}).json()
    assert [(c["name"], c["postCount"]) for c in cats] == [("Guides", 0), ("News", 2)]

    tags = client.get(f"{api}/post-tags", params={"withCounts": "true"}).json()
    assert [(t["name"], t["postCount"]) for t in tags] == [("Cold", 1), ("Heat", 2)]


def test_plain_list_has_no_counts(client, api):
    client.post(f"{api}/post-tags", json={"name": "Heat"})
    assert client.get(f"{api}/post-tags").json()[0]["postCount"] is None
