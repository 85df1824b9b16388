"""Tests for posts, feeds and cascading deletes."""

import pytest
import pytest_asyncio

from store import EntityStore, PostCreate

@pytest_asyncio.fixture
async def store():
    """Create and return an empty store."""
    return EntityStore()

@pytest_asyncio.fixture
async def users(store):
    """Create two users, ana (id 1) and carlos (id 2)."""
    ana = await store.create_user({"username": "ana", "password": "pw", "name": "Ana"})
    carlos = await store.create_user({"username": "carlos", "password": "pw", "name": "Carlos"})
    return ana, carlos

async def make_post(store, user_id, caption=None):
    return await store.create_post({
        "user_id": user_id,
        "image_url": "https://img.example/photo.jpg",
        "caption": caption
    })

@pytest.mark.asyncio
async def test_create_post(store, users):
    """Test creating a post bumps the owner's post count."""
    ana, _ = users
    post = await store.create_post(PostCreate(user_id=ana.id, image_url="https://img.example/a.jpg"))

    assert post.id == 1
    assert post.user_id == ana.id
    assert post.caption is None
    assert post.likes_count == 0
    assert post.comments_count == 0

    assert (await store.get_user(ana.id)).posts_count == 1

@pytest.mark.asyncio
async def test_create_post_missing_owner(store):
    """Test a post for an unknown user is stored without side effects."""
    post = await make_post(store, 99)

    assert (await store.get_post(post.id)) is not None
    # Orphan posts never show up joined with a user
    assert await store.get_post_with_user(post.id) is None
    assert await store.get_feed_posts() == []

@pytest.mark.asyncio
async def test_get_post_with_user(store, users):
    """Test joining a post with its author."""
    ana, _ = users
    post = await make_post(store, ana.id, "Beach day")

    joined = await store.get_post_with_user(post.id)
    assert joined.caption == "Beach day"
    assert joined.user.id == ana.id
    assert joined.user.username == "ana"

    assert await store.get_post_with_user(999) is None

@pytest.mark.asyncio
async def test_get_user_posts_newest_first(store, users):
    """Test a user's posts are listed newest first."""
    ana, carlos = users
    first = await make_post(store, ana.id, "first")
    await make_post(store, carlos.id, "other")
    second = await make_post(store, ana.id, "second")

    posts = await store.get_user_posts(ana.id)
    assert [p.id for p in posts] == [second.id, first.id]

@pytest.mark.asyncio
async def test_feed_newest_first(store, users):
    """Test the feed holds every resolvable post, newest first."""
    ana, carlos = users
    p1 = await make_post(store, ana.id)
    p2 = await make_post(store, carlos.id)
    await make_post(store, 99)  # orphan
    p4 = await make_post(store, ana.id)

    feed = await store.get_feed_posts()
    assert [p.id for p in feed] == [p4.id, p2.id, p1.id]
    assert [p.user.id for p in feed] == [ana.id, carlos.id, ana.id]

    # Strictly descending creation times
    times = [p.created_at for p in feed]
    assert all(a > b for a, b in zip(times, times[1:]))

@pytest.mark.asyncio
async def test_following_feed(store, users):
    """Test the following feed only holds posts by followed users."""
    ana, carlos = users
    dora = await store.create_user({"username": "dora", "password": "pw", "name": "Dora"})
    await make_post(store, ana.id)
    carlos_post = await make_post(store, carlos.id)
    dora_post = await make_post(store, dora.id)

    await store.create_follow(ana.id, carlos.id)
    await store.create_follow(ana.id, dora.id)

    feed = await store.get_following_feed(ana.id)
    assert [p.id for p in feed] == [dora_post.id, carlos_post.id]
    assert await store.get_following_feed(carlos.id) == []

@pytest.mark.asyncio
async def test_delete_post_cascades(store, users):
    """Test deleting a post removes exactly its likes and comments."""
    ana, carlos = users
    post = await make_post(store, ana.id)
    other = await make_post(store, carlos.id)

    # 2 likes and 3 comments on the post, 1 of each on the other one
    await store.create_like(ana.id, post.id)
    await store.create_like(carlos.id, post.id)
    await store.create_like(ana.id, other.id)
    for text in ("one", "two", "three"):
        await store.create_comment({"user_id": carlos.id, "post_id": post.id, "content": text})
    await store.create_comment({"user_id": ana.id, "post_id": other.id, "content": "nice"})

    before = await store.stats()
    assert await store.delete_post(post.id) is True
    after = await store.stats()

    assert before["likes"] - after["likes"] == 2
    assert before["comments"] - after["comments"] == 3
    assert before["posts"] - after["posts"] == 1

    assert await store.get_post(post.id) is None
    assert await store.get_post_comments(post.id) == []
    assert await store.get_post_likes(post.id) == []
    assert await store.get_like_by_user_and_post(ana.id, post.id) is None

    # The other post is untouched
    assert len(await store.get_post_comments(other.id)) == 1
    assert (await store.get_post(other.id)).likes_count == 1

    # Owner's post count dropped by one
    assert (await store.get_user(ana.id)).posts_count == 0
    assert (await store.get_user(carlos.id)).posts_count == 1
    assert await store.check_consistency() == []

@pytest.mark.asyncio
async def test_like_again_after_post_delete(store, users):
    """Test a pair freed by a cascade can like a new post normally."""
    ana, carlos = users
    post = await make_post(store, ana.id)
    await store.create_like(carlos.id, post.id)
    await store.delete_post(post.id)

    new_post = await make_post(store, ana.id)
    like = await store.create_like(carlos.id, new_post.id)
    assert (await store.get_post(new_post.id)).likes_count == 1
    assert like.post_id == new_post.id

@pytest.mark.asyncio
async def test_delete_missing_post(store):
    """Test deleting an unknown post returns False."""
    assert await store.delete_post(123) is False

@pytest.mark.asyncio
async def test_post_ids_not_reused(store, users):
    """Test ids stay unique after deletion."""
    ana, _ = users
    first = await make_post(store, ana.id)
    await store.delete_post(first.id)
    second = await make_post(store, ana.id)

    assert second.id == first.id + 1

@pytest.mark.asyncio
async def test_posts_count_never_negative(store, users):
    """Test the post counter is clamped at zero."""
    ana, _ = users
    post = await make_post(store, ana.id)
    # Counter drifted below the real number of posts
    store._users[ana.id].posts_count = 0

    await store.delete_post(post.id)
    assert (await store.get_user(ana.id)).posts_count == 0
