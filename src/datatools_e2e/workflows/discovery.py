"""Recovering entity ids from the rendered UI.

The application never tells the harness which id it assigned to a project or
feed source; the only way back is to find the link whose text carries the name
we typed and read the id out of its href. All of that matching lives here so
workflow scripts only ask for "the id of the thing called X".
"""
from __future__ import annotations

import re
from typing import Any, Optional, Tuple

from datatools_e2e.core.errors import ElementNotFoundError
from datatools_e2e.session.driver import SessionDriver

PROJECT_LINKS = ".project-name-editable a"
FEED_SOURCE_LINKS = "h4 a"
LIST_ITEMS = ".list-group-item"


def id_from_href(href: str, kind: str) -> str:
    match = re.search(rf"/{re.escape(kind)}/([\w-]*)", href)
    if not match or not match.group(1):
        raise ValueError(f"No {kind} id in href: {href}")
    return match.group(1)


async def find_element_by_text(driver: SessionDriver, selector: str, text: str) -> Optional[Any]:
    for element in await driver.all_elements(selector):
        if text in await driver.inner_html_of(element):
            return element
    return None


async def resolve_entity_id(driver: SessionDriver, selector: str, name: str, kind: str) -> Tuple[str, Any]:
    """Return ``(id, link element)`` for the first link under ``selector`` showing ``name``."""
    element = await find_element_by_text(driver, selector, name)
    if element is None:
        raise ElementNotFoundError(selector, f'no entry named "{name}"')
    return id_from_href(await driver.href(element), kind), element


async def find_list_item(driver: SessionDriver, name: str) -> Tuple[Any, Any]:
    """Return ``(list item, feed source link)`` for the feed source called ``name``."""
    for item in await driver.all_elements(LIST_ITEMS):
        link = await driver.child(item, FEED_SOURCE_LINKS)
        if name in await driver.inner_html_of(link):
            return item, link
    raise ElementNotFoundError(LIST_ITEMS, f'no feed source named "{name}"')


async def is_listed(driver: SessionDriver, selector: str, name: str) -> bool:
    """Whether a link under ``selector`` shows ``name``; raises when nothing matches ``selector``."""
    return await find_element_by_text(driver, selector, name) is not None
