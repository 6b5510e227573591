"""
Catalogue maintenance: deletes that span several collections.

Each cascade runs inside one store transaction, so a parent and its content
disappear together or not at all.
"""

import logging

from core.domain.content import Collection
from core.interfaces.repositories import ContentStore, Filter

logger = logging.getLogger(__name__)


async def delete_subcategory_cascade(store: ContentStore, subcategory_id: str) -> dict[str, int]:
    """Delete a subcategory and its questions."""
    async with store.transaction():
        questions = await store.delete_where(
            Collection.QUESTIONS, [Filter.eq("subcategory_id", subcategory_id)]
        )
        subcategories = await store.delete_by_id(Collection.SUBCATEGORIES, subcategory_id)

    logger.info(
        "Deleted subcategory %s with %d question(s)", subcategory_id, questions
    )
    return {"subcategories": subcategories, "questions": questions}


async def delete_category_cascade(store: ContentStore, category_id: str) -> dict[str, int]:
    """
    Delete a category and everything filed under it: its subcategories,
    their questions, and its system design problems and projects.
    """
    by_category = [Filter.eq("category_id", category_id)]

    async with store.transaction():
        subcategories = await store.select(Collection.SUBCATEGORIES, filters=by_category)
        subcategory_ids = [s.id for s in subcategories]

        questions = 0
        if subcategory_ids:
            questions = await store.delete_where(
                Collection.QUESTIONS, [Filter.in_("subcategory_id", subcategory_ids)]
            )
            await store.delete_by_ids(Collection.SUBCATEGORIES, subcategory_ids)

        problems = await store.delete_where(Collection.SYSTEM_DESIGN_PROBLEMS, by_category)
        projects = await store.delete_where(Collection.PROJECTS, by_category)
        categories = await store.delete_by_id(Collection.CATEGORIES, category_id)

    counts = {
        "categories": categories,
        "subcategories": len(subcategory_ids),
        "questions": questions,
        "system_design_problems": problems,
        "projects": projects,
    }
    logger.info("Deleted category %s: %s", category_id, counts)
    return counts
