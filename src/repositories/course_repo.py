"""
Course Repository - Data access layer for the course catalog
"""

from typing import Optional, Sequence, Tuple

from sqlalchemy import select, func, or_
from sqlalchemy.ext.asyncio import AsyncSession

from src.model.course_models import Course
from src.model.enums import CourseLevel, CourseStatus, CourseSort
from src.repositories.base_repo import BaseRepository

_SORT_COLUMNS = {
    CourseSort.NEWEST: (Course.created_date.desc(), Course.id.desc()),
    CourseSort.RATING: (Course.rating.desc(), Course.total_rating.desc(), Course.id.desc()),
    CourseSort.POPULAR: (Course.total_student.desc(), Course.id.desc()),
    CourseSort.PRICE_ASC: (Course.price.asc(), Course.id.asc()),
    CourseSort.PRICE_DESC: (Course.price.desc(), Course.id.desc()),
}


def _escape_like(value: str) -> str:
    """Make % and _ in user input match literally"""
    return value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


class CourseRepository(BaseRepository[Course]):
    """
    Repository for Course entity
    """

    def __init__(self, session: AsyncSession):
        super().__init__(Course, session)

    async def get_by_slug(self, slug: str) -> Optional[Course]:
        return await self.get_by_field("slug", slug)

    async def search_published(
            self,
            keyword: Optional[str] = None,
            level: Optional[CourseLevel] = None,
            free: Optional[bool] = None,
            sort: CourseSort = CourseSort.NEWEST,
            skip: int = 0,
            limit: int = 12,
    ) -> Tuple[Sequence[Course], int]:
        """
        Search the public catalog.

        Args:
            keyword: Case-insensitive match against title or description
            level: Restrict to one difficulty level
            free: True for price 0, False for paid courses, None for both
            sort: Ordering of the results
            skip: Number of records to skip
            limit: Maximum number of records to return

        Returns:
            Tuple of (courses on this page, total matching count)
        """
        conditions = [
            Course.status == CourseStatus.PUBLISHED,
            Course.is_deleted.is_(False),
        ]
        if keyword:
            pattern = f"%{_escape_like(keyword.strip().lower())}%"
            conditions.append(
                or_(
                    func.lower(Course.title).like(pattern, escape="\\"),
                    func.lower(func.coalesce(Course.description, "")).like(pattern, escape="\\"),
                )
            )
        if level is not None:
            conditions.append(Course.level == level)
        if free is True:
            conditions.append(Course.price == 0)
        elif free is False:
            conditions.append(Course.price > 0)

        count_query = select(func.count(Course.id)).where(*conditions)
        total = (await self.session.execute(count_query)).scalar() or 0

        query = (
            select(Course)
            .where(*conditions)
            .order_by(*_SORT_COLUMNS[sort])
            .offset(skip)
            .limit(limit)
        )
        result = await self.session.execute(query)
        return result.unique().scalars().all(), total

    async def get_by_instructor(self, instructor_id: int) -> Sequence[Course]:
        """All non-deleted courses owned by an instructor, newest first"""
        return await self.get_by_filters(
            {"instructor_id": instructor_id},
            limit=1000,
            order_by="created_date",
            order_desc=True,
        )

    async def get_slugs_with_prefix(self, base_slug: str) -> set[str]:
        """Slugs equal to base_slug or starting with "base_slug-", soft-deleted included"""
        query = select(Course.slug).where(
            or_(Course.slug == base_slug, Course.slug.like(f"{base_slug}-%"))
        )
        result = await self.session.execute(query)
        return set(result.scalars().all())
