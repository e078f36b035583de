from __future__ import annotations

import pytest

from conftest import FakeElement
from datatools_e2e.core import ElementNotFoundError
from datatools_e2e.workflows.discovery import (
    FEED_SOURCE_LINKS,
    LIST_ITEMS,
    PROJECT_LINKS,
    find_list_item,
    id_from_href,
    is_listed,
    resolve_entity_id,
)


def test_id_from_href() -> None:
    assert id_from_href("http://localhost:9966/project/a1b2-c3", "project") == "a1b2-c3"
    assert id_from_href("/feed/xyz_9/edit", "feed") == "xyz_9"
    with pytest.raises(ValueError):
        id_from_href("http://localhost:9966/home", "project")


@pytest.mark.asyncio
async def test_resolve_entity_id_picks_first_matching_link(ctx, page) -> None:
    page.add(
        PROJECT_LINKS,
        FakeElement("other-project", href="http://localhost:9966/project/other"),
        FakeElement("test-project-2024", href="http://localhost:9966/project/p-42"),
        FakeElement("test-project-2024 copy", href="http://localhost:9966/project/p-43"),
    )

    project_id, element = await resolve_entity_id(ctx.ui, PROJECT_LINKS, "test-project-2024", "project")

    assert project_id == "p-42"
    assert element.href.endswith("p-42")


@pytest.mark.asyncio
async def test_resolve_entity_id_missing_name(ctx, page) -> None:
    page.add(PROJECT_LINKS, FakeElement("other", href="/project/other"))

    with pytest.raises(ElementNotFoundError):
        await resolve_entity_id(ctx.ui, PROJECT_LINKS, "test-project", "project")


@pytest.mark.asyncio
async def test_find_list_item_returns_item_and_link(ctx, page) -> None:
    first = FakeElement(children={FEED_SOURCE_LINKS: FakeElement("feed-a", href="/feed/a")})
    wanted_link = FakeElement("feed-source-to-edit-from-scratch", href="/feed/b")
    second = FakeElement(children={FEED_SOURCE_LINKS: wanted_link})
    page.add(LIST_ITEMS, first, second)

    item, link = await find_list_item(ctx.ui, "feed-source-to-edit-from-scratch")

    assert item is second
    assert link is wanted_link
    with pytest.raises(ElementNotFoundError):
        await find_list_item(ctx.ui, "missing")


@pytest.mark.asyncio
async def test_is_listed(ctx, page) -> None:
    page.add(FEED_SOURCE_LINKS, FakeElement("test-feed-source-to-delete"))
    assert await is_listed(ctx.ui, FEED_SOURCE_LINKS, "test-feed-source-to-delete") is True
    assert await is_listed(ctx.ui, FEED_SOURCE_LINKS, "another") is False


@pytest.mark.asyncio
async def test_is_listed_raises_when_no_links_rendered(ctx) -> None:
    with pytest.raises(ElementNotFoundError):
        await is_listed(ctx.ui, FEED_SOURCE_LINKS, "test-feed-source-to-delete")
