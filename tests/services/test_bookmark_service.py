"""Tests for bookmark service layer functionality."""
import pytest
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from models.bookmark import Bookmark
from models.canvas import CanvasPosition
from models.collection import Collection
from models.tag import bookmark_tags
from models.user import User
from schemas.bookmark import BookmarkCreate, BookmarkUpdate
from services.bookmark_service import (
    create_bookmark,
    delete_bookmark,
    get_bookmark_detail,
    get_user_bookmark_ids,
    search_bookmarks,
    update_bookmark,
)
from services.exceptions import (
    BookmarkNotFoundError,
    InvalidCollectionError,
    NothingToUpdateError,
)


@pytest.fixture
async def work(db_session: AsyncSession, test_user: User) -> Collection:
    """A collection owned by test_user."""
    collection = Collection(user_id=test_user.id, name="Work")
    db_session.add(collection)
    await db_session.flush()
    return collection


# =============================================================================
# create_bookmark Tests
# =============================================================================


async def test__create_bookmark__assembles_tags_and_collection_name(
    db_session: AsyncSession,
    test_user: User,
    work: Collection,
) -> None:
    """Test that the created record carries resolved tags and collection name."""
    created = await create_bookmark(
        db_session,
        test_user.id,
        BookmarkCreate(
            title="  Spec  ",
            url="https://example.com",
            collection_id=work.id,
            tags=["urgent", "design"],
        ),
    )

    assert created.title == "Spec"
    assert created.type == "link"
    assert created.tags == ["design", "urgent"]
    assert created.collection_id == work.id
    assert created.collection_name == "Work"
    assert created.favorite is False


async def test__create_bookmark__uncategorized_has_null_collection_name(
    db_session: AsyncSession,
    test_user: User,
) -> None:
    """Test that a bookmark without a collection reports no collection name."""
    created = await create_bookmark(db_session, test_user.id, BookmarkCreate(title="Loose"))

    assert created.collection_id is None
    assert created.collection_name is None
    assert created.tags == []


async def test__create_bookmark__foreign_collection_rejected(
    db_session: AsyncSession,
    test_user: User,
    other_user: User,
) -> None:
    """Test that a bookmark cannot be filed into another user's collection."""
    foreign = Collection(user_id=other_user.id, name="Theirs")
    db_session.add(foreign)
    await db_session.flush()

    with pytest.raises(InvalidCollectionError):
        await create_bookmark(
            db_session, test_user.id, BookmarkCreate(title="x", collection_id=foreign.id),
        )


@pytest.mark.parametrize("bookmark_type", ["link", "text", "image", "video"])
async def test__create_bookmark__supported_types(
    db_session: AsyncSession,
    test_user: User,
    bookmark_type: str,
) -> None:
    """Test that every supported type is accepted."""
    created = await create_bookmark(
        db_session, test_user.id, BookmarkCreate(title="typed", type=bookmark_type),
    )

    assert created.type == bookmark_type


# =============================================================================
# search_bookmarks Tests
# =============================================================================


async def test__search_bookmarks__newest_first(
    db_session: AsyncSession,
    test_user: User,
) -> None:
    """Test that results are ordered by creation time, newest first."""
    for title in ["first", "second", "third"]:
        await create_bookmark(db_session, test_user.id, BookmarkCreate(title=title))

    results = await search_bookmarks(db_session, test_user.id)

    assert [b.title for b in results] == ["third", "second", "first"]


async def test__search_bookmarks__only_own_bookmarks(
    db_session: AsyncSession,
    test_user: User,
    other_user: User,
) -> None:
    """Test that other users' bookmarks are never returned."""
    await create_bookmark(db_session, other_user.id, BookmarkCreate(title="secret"))

    assert await search_bookmarks(db_session, test_user.id) == []


async def test__search_bookmarks__filters_by_collection(
    db_session: AsyncSession,
    test_user: User,
    work: Collection,
) -> None:
    """Test the exact collection filter."""
    await create_bookmark(
        db_session, test_user.id, BookmarkCreate(title="in", collection_id=work.id),
    )
    await create_bookmark(db_session, test_user.id, BookmarkCreate(title="out"))

    results = await search_bookmarks(db_session, test_user.id, collection_id=work.id)

    assert [b.title for b in results] == ["in"]


async def test__search_bookmarks__filters_by_favorite(
    db_session: AsyncSession,
    test_user: User,
) -> None:
    """Test the favorite filter in both directions."""
    await create_bookmark(db_session, test_user.id, BookmarkCreate(title="fav", favorite=True))
    await create_bookmark(db_session, test_user.id, BookmarkCreate(title="plain"))

    favorites = await search_bookmarks(db_session, test_user.id, favorite=True)
    others = await search_bookmarks(db_session, test_user.id, favorite=False)

    assert [b.title for b in favorites] == ["fav"]
    assert [b.title for b in others] == ["plain"]


async def test__search_bookmarks__search_matches_title_description_content(
    db_session: AsyncSession,
    test_user: User,
) -> None:
    """Test case-insensitive substring search across the text fields."""
    await create_bookmark(db_session, test_user.id, BookmarkCreate(title="Python Tricks"))
    await create_bookmark(
        db_session, test_user.id, BookmarkCreate(title="desc", description="all about PYTHON"),
    )
    await create_bookmark(
        db_session, test_user.id, BookmarkCreate(title="body", content="notes on python"),
    )
    await create_bookmark(db_session, test_user.id, BookmarkCreate(title="Rust"))

    results = await search_bookmarks(db_session, test_user.id, search="python")

    assert {b.title for b in results} == {"Python Tricks", "desc", "body"}


async def test__search_bookmarks__search_wildcards_match_literally(
    db_session: AsyncSession,
    test_user: User,
) -> None:
    """Test that % and _ in the search term are not treated as wildcards."""
    await create_bookmark(db_session, test_user.id, BookmarkCreate(title="100% done"))
    await create_bookmark(db_session, test_user.id, BookmarkCreate(title="1000 done"))

    results = await search_bookmarks(db_session, test_user.id, search="0%")

    assert [b.title for b in results] == ["100% done"]


async def test__search_bookmarks__blank_search_is_ignored(
    db_session: AsyncSession,
    test_user: User,
) -> None:
    """Test that a whitespace-only search returns everything."""
    await create_bookmark(db_session, test_user.id, BookmarkCreate(title="one"))

    results = await search_bookmarks(db_session, test_user.id, search="   ")

    assert len(results) == 1


async def test__search_bookmarks__tag_filter_is_subset_of_unfiltered(
    db_session: AsyncSession,
    test_user: User,
) -> None:
    """Test that the tag filter keeps exactly the bookmarks carrying the tag."""
    await create_bookmark(db_session, test_user.id, BookmarkCreate(title="a", tags=["design"]))
    await create_bookmark(
        db_session, test_user.id, BookmarkCreate(title="b", tags=["design", "urgent"]),
    )
    await create_bookmark(db_session, test_user.id, BookmarkCreate(title="c", tags=["Design"]))
    await create_bookmark(db_session, test_user.id, BookmarkCreate(title="d"))

    everything = await search_bookmarks(db_session, test_user.id)
    filtered = await search_bookmarks(db_session, test_user.id, tag="design")

    assert [b.id for b in filtered] == [b.id for b in everything if "design" in b.tags]
    assert {b.title for b in filtered} == {"a", "b"}


async def test__search_bookmarks__deleted_collection_reads_as_uncategorized(
    db_session: AsyncSession,
    test_user: User,
    work: Collection,
) -> None:
    """Test that a stale collection_id yields a null collection name."""
    await create_bookmark(
        db_session, test_user.id, BookmarkCreate(title="stale", collection_id=work.id),
    )
    await db_session.delete(work)
    await db_session.flush()

    [bookmark] = await search_bookmarks(db_session, test_user.id)

    assert bookmark.collection_id == work.id
    assert bookmark.collection_name is None


# =============================================================================
# update_bookmark Tests
# =============================================================================


async def test__update_bookmark__only_present_fields_change(
    db_session: AsyncSession,
    test_user: User,
) -> None:
    """Test that fields absent from the patch are left untouched."""
    created = await create_bookmark(
        db_session,
        test_user.id,
        BookmarkCreate(title="Original", url="https://a.example", description="keep", tags=["t"]),
    )

    updated = await update_bookmark(
        db_session, test_user.id, created.id, BookmarkUpdate(title="Renamed"),
    )

    assert updated.title == "Renamed"
    assert updated.url == "https://a.example"
    assert updated.description == "keep"
    assert updated.tags == ["t"]
    assert updated.updated_at >= created.updated_at


async def test__update_bookmark__tags_replace_whole_set(
    db_session: AsyncSession,
    test_user: User,
) -> None:
    """Test that a tags list replaces every existing tag."""
    created = await create_bookmark(
        db_session, test_user.id, BookmarkCreate(title="x", tags=["old", "kept"]),
    )

    updated = await update_bookmark(
        db_session, test_user.id, created.id, BookmarkUpdate(tags=["kept", "new"]),
    )

    assert updated.tags == ["kept", "new"]


async def test__update_bookmark__no_fields(
    db_session: AsyncSession,
    test_user: User,
) -> None:
    """Test that an empty patch is rejected."""
    created = await create_bookmark(db_session, test_user.id, BookmarkCreate(title="x"))

    with pytest.raises(NothingToUpdateError):
        await update_bookmark(db_session, test_user.id, created.id, BookmarkUpdate())


async def test__update_bookmark__not_owned(
    db_session: AsyncSession,
    test_user: User,
    other_user: User,
) -> None:
    """Test that another user's bookmark is reported as not found."""
    theirs = await create_bookmark(db_session, other_user.id, BookmarkCreate(title="theirs"))

    with pytest.raises(BookmarkNotFoundError):
        await update_bookmark(db_session, test_user.id, theirs.id, BookmarkUpdate(title="mine"))


async def test__update_bookmark__foreign_collection_rejected(
    db_session: AsyncSession,
    test_user: User,
    other_user: User,
) -> None:
    """Test that a bookmark cannot be moved into another user's collection."""
    created = await create_bookmark(db_session, test_user.id, BookmarkCreate(title="x"))
    foreign = Collection(user_id=other_user.id, name="Theirs")
    db_session.add(foreign)
    await db_session.flush()

    with pytest.raises(InvalidCollectionError):
        await update_bookmark(
            db_session, test_user.id, created.id, BookmarkUpdate(collection_id=foreign.id),
        )


async def test__update_bookmark__null_collection_uncategorizes(
    db_session: AsyncSession,
    test_user: User,
    work: Collection,
) -> None:
    """Test that an explicit null collection_id removes the bookmark from its collection."""
    created = await create_bookmark(
        db_session, test_user.id, BookmarkCreate(title="x", collection_id=work.id),
    )

    updated = await update_bookmark(
        db_session, test_user.id, created.id, BookmarkUpdate(collection_id=None),
    )

    assert updated.collection_id is None
    assert updated.collection_name is None


# =============================================================================
# delete_bookmark / get Tests
# =============================================================================


async def test__delete_bookmark__removes_links_and_canvas_rows(
    db_session: AsyncSession,
    test_user: User,
    work: Collection,
) -> None:
    """Test that deleting a bookmark cascades to tag links and canvas positions."""
    created = await create_bookmark(
        db_session, test_user.id, BookmarkCreate(title="x", tags=["a"], collection_id=work.id),
    )
    db_session.add(CanvasPosition(bookmark_id=created.id, collection_id=work.id))
    await db_session.flush()

    await delete_bookmark(db_session, test_user.id, created.id)

    assert await get_user_bookmark_ids(db_session, test_user.id) == []
    links = await db_session.execute(
        select(func.count()).select_from(bookmark_tags).where(
            bookmark_tags.c.bookmark_id == created.id,
        ),
    )
    assert links.scalar_one() == 0
    positions = await db_session.execute(
        select(func.count()).select_from(CanvasPosition).where(
            CanvasPosition.bookmark_id == created.id,
        ),
    )
    assert positions.scalar_one() == 0


async def test__delete_bookmark__other_users_bookmark_untouched(
    db_session: AsyncSession,
    test_user: User,
    other_user: User,
) -> None:
    """Test that deleting a foreign bookmark is not-found and leaves it intact."""
    theirs = await create_bookmark(db_session, other_user.id, BookmarkCreate(title="theirs"))

    with pytest.raises(BookmarkNotFoundError):
        await delete_bookmark(db_session, test_user.id, theirs.id)

    assert await db_session.get(Bookmark, theirs.id) is not None


async def test__delete_bookmark__missing(
    db_session: AsyncSession,
    test_user: User,
) -> None:
    """Test that deleting a non-existent bookmark raises not-found."""
    with pytest.raises(BookmarkNotFoundError):
        await delete_bookmark(db_session, test_user.id, 99999)


async def test__get_bookmark_detail__not_owned(
    db_session: AsyncSession,
    test_user: User,
    other_user: User,
) -> None:
    """Test that a single read is owner-scoped."""
    theirs = await create_bookmark(db_session, other_user.id, BookmarkCreate(title="theirs"))

    with pytest.raises(BookmarkNotFoundError):
        await get_bookmark_detail(db_session, test_user.id, theirs.id)
