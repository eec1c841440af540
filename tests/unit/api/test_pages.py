"""Unit tests for the page endpoints.

Requests go through the real app with the user, tree store and branch config
dependencies overridden by fakes. The lifespan is not run, so no database is
touched.
"""

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from branchguard.api import deps
from branchguard.domains.branches.tests.conftest import (
    EDITOR_ROLE,
    _make_config,
    _make_tree,
    _make_user,
)
from branchguard.domains.branches.types import DENIED_MESSAGE
from branchguard.main import app
from branchguard.schemas import MatchType, UnmatchedPolicy


@pytest.fixture
def store():
    """Shared fake tree for one test."""
    return _make_tree()


@pytest.fixture
def configure(store):
    """Install dependency overrides; call with the user and config to serve."""

    def _configure(user=None, config=None):
        user = user or _make_user(branch_parent_id=42)
        config = config or _make_config()
        app.dependency_overrides[deps.get_current_user] = lambda: user
        app.dependency_overrides[deps.get_tree_store] = lambda: store
        app.dependency_overrides[deps.get_branch_config] = lambda: config

    yield _configure
    app.dependency_overrides.clear()


@pytest_asyncio.fixture
async def client():
    """HTTP client bound to the app."""
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac


@pytest.mark.asyncio
class TestPageList:
    """Test GET /pages/list."""

    async def test_opens_at_branch_root(self, configure, client):
        """Test that the list starts at the user's branch root."""
        configure()

        response = await client.get("/api/v1/pages/list")

        assert response.status_code == 200
        body = response.json()
        assert body["root_id"] == 42
        assert body["redirected"] is True
        assert [child["id"] for child in body["children"]] == [55]

    async def test_foreign_id_is_reset(self, configure, client):
        """Test that a foreign id lists the branch root instead."""
        configure()

        body = (await client.get("/api/v1/pages/list", params={"id": 43})).json()

        assert body["root_id"] == 42
        assert body["redirected"] is True

    async def test_denied_without_match(self, configure, client):
        """Test that an unmatched user under policy none gets a 403."""
        configure(
            user=_make_user(),
            config=_make_config(unmatched_policy=UnmatchedPolicy.NONE),
        )

        response = await client.get("/api/v1/pages/list")

        assert response.status_code == 403
        assert response.json() == {"detail": DENIED_MESSAGE}

    async def test_disabled_restriction_lists_tree_root(self, configure, client):
        """Test that a disabled config leaves the page list alone."""
        configure(config=_make_config(match_type=MatchType.DISABLED))

        body = (await client.get("/api/v1/pages/list", params={"id": 43})).json()

        assert body["root_id"] == 43
        assert body["redirected"] is False

    async def test_nav_parent_defaults_to_branch_root(self, configure, client):
        configure()

        response = await client.get("/api/v1/pages/nav-parent")

        assert response.json() == {"parent_id": 42}


@pytest.mark.asyncio
class TestSearch:
    """Test GET /pages/search."""

    async def test_matches_outside_branch_are_dropped(self, configure, client):
        configure(config=_make_config(restrict_from_search=True))

        response = await client.get("/api/v1/pages/search", params={"q": "spring"})

        assert response.status_code == 200
        assert [m["id"] for m in response.json()["matches"]] == [100]

    async def test_unfiltered_without_flag(self, configure, client):
        configure()

        response = await client.get("/api/v1/pages/search", params={"q": "spring"})

        assert [m["id"] for m in response.json()["matches"]] == [60, 100]


@pytest.mark.asyncio
class TestPermissions:
    """Test GET /pages/{id}/permissions."""

    async def test_page_inside_branch(self, configure, client):
        configure()

        body = (await client.get("/api/v1/pages/100/permissions")).json()

        assert body == {"page_id": 100, "editable": True, "addable": True}

    async def test_page_outside_branch(self, configure, client):
        configure()

        body = (await client.get("/api/v1/pages/60/permissions")).json()

        assert body == {"page_id": 60, "editable": False, "addable": False}

    async def test_missing_page_is_404(self, configure, client):
        configure()

        response = await client.get("/api/v1/pages/9999/permissions")

        assert response.status_code == 404

    async def test_store_failure_is_503(self, configure, client, store):
        """Test that a failing tree store never falls back to allowing."""
        configure()
        store.make_unavailable()

        response = await client.get("/api/v1/pages/100/permissions")

        assert response.status_code == 503


@pytest.mark.asyncio
class TestRewrites:
    """Test the lister, breadcrumb and add-nav endpoints."""

    async def test_lister_selector(self, configure, client):
        configure()

        response = await client.get(
            "/api/v1/pages/lister-selector", params={"selector": "template=12"}
        )

        assert response.json() == {"selector": "template=12, has_parent=42"}

    async def test_breadcrumbs(self, configure, client):
        configure(config=_make_config(modify_breadcrumbs=True))
        crumbs = [
            {"href": "/admin/page/edit/?id=1", "label": "Home"},
            {"href": "/admin/page/edit/?id=42", "label": "Branch one"},
        ]

        response = await client.post("/api/v1/pages/breadcrumbs", json=crumbs)

        assert response.json() == [{"href": "/admin/page/edit/?id=42", "label": "Branch one"}]

    async def test_add_nav(self, configure, client):
        configure()
        payload = {"list": [{"url": "add/?template_id=11", "parent_id": 0, "template_id": 11}]}

        response = await client.post("/api/v1/pages/add-nav", json=payload)

        assert response.json()["list"][0]["parent_id"] == 42

    async def test_superuser_is_not_rewritten(self, configure, client):
        configure(user=_make_user(is_superuser=True, roles=[EDITOR_ROLE]))

        response = await client.get(
            "/api/v1/pages/lister-selector", params={"selector": "template=12"}
        )

        assert response.json() == {"selector": "template=12"}


@pytest.mark.asyncio
class TestRequestErrors:
    """Test errors raised before any branch decision."""

    async def test_invalid_query_is_422(self, configure, client):
        configure()

        response = await client.get("/api/v1/pages/search", params={"q": "spring", "limit": 0})

        assert response.status_code == 422
        assert "query.limit" in response.json()["errors"][0]

    async def test_missing_user_header_is_401(self, configure, client):
        configure()
        del app.dependency_overrides[deps.get_current_user]

        response = await client.get("/api/v1/pages/list")

        assert response.status_code == 401
