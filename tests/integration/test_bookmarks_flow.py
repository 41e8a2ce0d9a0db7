"""Integration tests for bookmarks kept in a signed cookie.

These tests verify that:
- Toggling sets a signed cookie holding the id list
- The cookie drives bookmarks.json, the bookmarks view and the page
- Tampered cookies are ignored
- The JSON routes are exempt from CSRF even when cookies are present
"""

from devtoolbox.bookmarks import BOOKMARKS_KEY


async def toggle(datasette, tool_id, cookies=None):
    response = await datasette.client.post(
        "/-/devtoolbox/bookmarks/toggle",
        json={"id": tool_id},
        cookies=cookies or {},
    )
    return response, {BOOKMARKS_KEY: response.cookies.get(BOOKMARKS_KEY)}


class TestBookmarkToggle:
    """Tests for POST /-/devtoolbox/bookmarks/toggle."""

    async def test_toggle_on(self, datasette):
        response, cookies = await toggle(datasette, 3)

        assert response.status_code == 200
        data = response.json()
        assert data["id"] == 3
        assert data["bookmarked"] is True
        assert data["ids"] == [3]
        assert [t["name"] for t in data["tools"]] == ["Vite"]
        assert cookies[BOOKMARKS_KEY]

    async def test_cookie_is_signed(self, datasette):
        _, cookies = await toggle(datasette, 3)
        assert datasette.unsign(cookies[BOOKMARKS_KEY], BOOKMARKS_KEY) == "[3]"

    async def test_toggle_twice_restores(self, datasette):
        _, cookies = await toggle(datasette, 8)
        _, cookies = await toggle(datasette, 1, cookies)
        response, cookies = await toggle(datasette, 8, cookies)

        assert response.json()["bookmarked"] is False
        assert response.json()["ids"] == [1]

        response, _ = await toggle(datasette, 8, cookies)
        assert response.json()["ids"] == [1, 8]

    async def test_non_integer_id(self, datasette):
        for body in ({"id": "3"}, {"id": True}, {"id": None}, {}, []):
            response = await datasette.client.post("/-/devtoolbox/bookmarks/toggle", json=body)
            assert response.status_code == 400
            assert response.json() == {"error": "Tool id must be an integer"}

    async def test_get_not_allowed(self, datasette):
        response = await datasette.client.get("/-/devtoolbox/bookmarks/toggle")
        assert response.status_code == 405


class TestBookmarkViews:
    """Tests for reading bookmarks back."""

    async def test_bookmarks_json(self, datasette):
        _, cookies = await toggle(datasette, 8)
        _, cookies = await toggle(datasette, 1, cookies)

        response = await datasette.client.get("/-/devtoolbox/bookmarks.json", cookies=cookies)

        data = response.json()
        assert data["ids"] == [8, 1]
        # entries follow catalog order
        assert [t["name"] for t in data["tools"]] == ["React", "Chrome DevTools"]

    async def test_bookmarks_view_in_tools_json(self, datasette):
        _, cookies = await toggle(datasette, 5)

        response = await datasette.client.get("/-/devtoolbox/tools.json?category=bookmarks", cookies=cookies)
        assert [t["name"] for t in response.json()["tools"]] == ["Postman"]

        response = await datasette.client.get("/-/devtoolbox/tools.json?bookmarks=1&q=react", cookies=cookies)
        assert [t["name"] for t in response.json()["tools"]] == ["Postman"]

    async def test_bookmarks_page(self, datasette):
        _, cookies = await toggle(datasette, 5)

        response = await datasette.client.get("/devtoolbox?category=bookmarks", cookies=cookies)

        assert "Postman" in response.text
        assert "Remove bookmark" in response.text
        assert "Bookmarks (1)" in response.text

    async def test_tampered_cookie_ignored(self, datasette):
        response = await datasette.client.get(
            "/-/devtoolbox/bookmarks.json",
            cookies={BOOKMARKS_KEY: "forged.value"},
        )
        assert response.status_code == 200
        assert response.json()["ids"] == []

    async def test_no_cookie(self, datasette):
        response = await datasette.client.get("/-/devtoolbox/bookmarks.json")
        assert response.json() == {"ids": [], "tools": []}


class TestBookmarkClear:
    """Tests for POST /-/devtoolbox/bookmarks/clear."""

    async def test_clear(self, datasette):
        _, cookies = await toggle(datasette, 1)
        _, cookies = await toggle(datasette, 2, cookies)

        response = await datasette.client.post("/-/devtoolbox/bookmarks/clear", cookies=cookies)

        assert response.status_code == 200
        assert response.json()["ids"] == []
        cleared = {BOOKMARKS_KEY: response.cookies.get(BOOKMARKS_KEY)}

        response = await datasette.client.get("/-/devtoolbox/bookmarks.json", cookies=cleared)
        assert response.json()["ids"] == []


class TestCSRFExemption:
    """JSON routes carry no form token and must not be rejected."""

    async def test_post_with_cookies_is_not_rejected(self, datasette):
        cookies = {"ds_csrftoken": "stale-token", "other": "value"}
        response = await datasette.client.post(
            "/-/devtoolbox/bookmarks/toggle",
            json={"id": 1},
            cookies=cookies,
        )
        assert response.status_code == 200

    async def test_relay_with_cookies_is_not_rejected(self, datasette):
        response = await datasette.client.post(
            "/api/recommendations",
            json={},
            cookies={"ds_csrftoken": "stale-token"},
        )
        # reaches the route (400 for the missing prompt), not a CSRF 403
        assert response.status_code == 400
