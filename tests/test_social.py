"""Tests for likes, follows and comments."""

import pytest
import pytest_asyncio

from store import EntityStore, NotificationType

@pytest_asyncio.fixture
async def store():
    """Create and return an empty store."""
    return EntityStore()

@pytest_asyncio.fixture
async def users(store):
    """Create ana (id 1), carlos (id 2) and dora (id 3)."""
    created = []
    for name in ("ana", "carlos", "dora"):
        created.append(await store.create_user({"username": name, "password": "pw", "name": name.title()}))
    return created

@pytest_asyncio.fixture
async def post(store, users):
    """Create a post owned by ana."""
    return await store.create_post({"user_id": users[0].id, "image_url": "https://img.example/a.jpg"})

async def notification_rows(store, user_id):
    """Raw notification rows for a user, oldest first."""
    return [n for n in store._notifications.values() if n.user_id == user_id]

# Likes

@pytest.mark.asyncio
async def test_create_like(store, users, post):
    """Test liking bumps the counter and notifies the owner."""
    _, carlos, _ = users
    like = await store.create_like(carlos.id, post.id)

    assert like.user_id == carlos.id
    assert like.post_id == post.id
    assert (await store.get_post(post.id)).likes_count == 1

    notifications = await notification_rows(store, post.user_id)
    assert len(notifications) == 1
    assert notifications[0].type == NotificationType.LIKE
    assert notifications[0].triggered_by_user_id == carlos.id
    assert notifications[0].resource_id == post.id

@pytest.mark.asyncio
async def test_create_like_is_idempotent(store, users, post):
    """Test liking twice keeps one row, one increment and one notification."""
    _, carlos, _ = users
    first = await store.create_like(carlos.id, post.id)
    second = await store.create_like(carlos.id, post.id)

    assert first.id == second.id
    assert first.created_at == second.created_at
    assert len(await store.get_post_likes(post.id)) == 1
    assert (await store.get_post(post.id)).likes_count == 1
    assert len(await notification_rows(store, post.user_id)) == 1

@pytest.mark.asyncio
async def test_self_like_not_notified(store, users, post):
    """Test liking your own post counts but does not notify."""
    ana = users[0]
    await store.create_like(ana.id, post.id)

    assert (await store.get_post(post.id)).likes_count == 1
    assert await notification_rows(store, ana.id) == []

@pytest.mark.asyncio
async def test_delete_like(store, users, post):
    """Test unliking removes the row and decrements the counter."""
    _, carlos, _ = users
    await store.create_like(carlos.id, post.id)

    assert await store.delete_like(carlos.id, post.id) is True
    assert await store.get_like_by_user_and_post(carlos.id, post.id) is None
    assert (await store.get_post(post.id)).likes_count == 0

    # Second delete finds nothing
    assert await store.delete_like(carlos.id, post.id) is False
    assert (await store.get_post(post.id)).likes_count == 0

@pytest.mark.asyncio
async def test_likes_count_matches_rows(store, users, post):
    """Test likes_count equals the number of like rows throughout."""
    for user in users:
        await store.create_like(user.id, post.id)
    await store.create_like(users[1].id, post.id)
    await store.delete_like(users[2].id, post.id)
    await store.delete_like(users[2].id, post.id)

    likes = await store.get_post_likes(post.id)
    assert (await store.get_post(post.id)).likes_count == len(likes) == 2
    assert await store.check_consistency() == []

@pytest.mark.asyncio
async def test_like_can_be_recreated(store, users, post):
    """Test like, unlike, like creates a fresh row."""
    _, carlos, _ = users
    first = await store.create_like(carlos.id, post.id)
    await store.delete_like(carlos.id, post.id)
    second = await store.create_like(carlos.id, post.id)

    assert second.id != first.id
    assert (await store.get_post(post.id)).likes_count == 1

# Follows

@pytest.mark.asyncio
async def test_create_follow(store, users):
    """Test following updates both counters and notifies the followee."""
    ana, carlos, _ = users
    follow = await store.create_follow(ana.id, carlos.id)

    assert follow.follower_id == ana.id
    assert follow.following_id == carlos.id
    assert (await store.get_user(ana.id)).following_count == 1
    assert (await store.get_user(carlos.id)).followers_count == 1

    notifications = await notification_rows(store, carlos.id)
    assert len(notifications) == 1
    assert notifications[0].type == NotificationType.FOLLOW
    assert notifications[0].triggered_by_user_id == ana.id
    assert notifications[0].resource_id is None

@pytest.mark.asyncio
async def test_create_follow_is_idempotent(store, users):
    """Test following twice keeps one row and one increment."""
    ana, carlos, _ = users
    first = await store.create_follow(ana.id, carlos.id)
    second = await store.create_follow(ana.id, carlos.id)

    assert first.id == second.id
    assert (await store.get_user(carlos.id)).followers_count == 1
    assert (await store.get_user(ana.id)).following_count == 1
    assert len(await notification_rows(store, carlos.id)) == 1

@pytest.mark.asyncio
async def test_follow_then_unfollow(store, users):
    """Test follow + unfollow leaves no row and restores both counters."""
    ana, carlos, _ = users
    before_ana = await store.get_user(ana.id)
    before_carlos = await store.get_user(carlos.id)

    await store.create_follow(ana.id, carlos.id)
    assert await store.delete_follow(ana.id, carlos.id) is True

    assert await store.get_follow_by_user_ids(ana.id, carlos.id) is None
    after_ana = await store.get_user(ana.id)
    after_carlos = await store.get_user(carlos.id)
    assert after_ana.following_count == before_ana.following_count
    assert after_carlos.followers_count == before_carlos.followers_count

@pytest.mark.asyncio
async def test_delete_missing_follow(store, users):
    """Test unfollowing a pair that does not exist is a no-op."""
    ana, carlos, _ = users
    assert await store.delete_follow(ana.id, carlos.id) is False
    assert (await store.get_user(carlos.id)).followers_count == 0

@pytest.mark.asyncio
async def test_self_follow(store, users):
    """Test self-follow creates a row but no notification."""
    ana = users[0]
    follow = await store.create_follow(ana.id, ana.id)

    assert follow is not None
    assert await store.get_follow_by_user_ids(ana.id, ana.id) is not None
    assert await notification_rows(store, ana.id) == []
    assert len(store._notifications) == 0

@pytest.mark.asyncio
async def test_followers_count_matches_rows(store, users):
    """Test followers_count equals the distinct follow rows pointing at a user."""
    ana, carlos, dora = users
    await store.create_follow(carlos.id, ana.id)
    await store.create_follow(dora.id, ana.id)
    await store.create_follow(dora.id, ana.id)
    await store.create_follow(ana.id, dora.id)
    await store.delete_follow(carlos.id, ana.id)

    followers = await store.get_followers_by_user_id(ana.id)
    assert [u.id for u in followers] == [dora.id]
    assert (await store.get_user(ana.id)).followers_count == len(followers)
    assert await store.check_consistency() == []

@pytest.mark.asyncio
async def test_followers_and_following(store, users):
    """Test follower and following listings resolve users."""
    ana, carlos, dora = users
    await store.create_follow(ana.id, carlos.id)
    await store.create_follow(ana.id, dora.id)
    await store.create_follow(dora.id, carlos.id)
    await store.create_follow(ana.id, 99)  # unknown user

    following = await store.get_following_by_user_id(ana.id)
    assert [u.username for u in following] == ["carlos", "dora"]

    followers = await store.get_followers_by_user_id(carlos.id)
    assert [u.username for u in followers] == ["ana", "dora"]

# Comments

@pytest.mark.asyncio
async def test_create_comment(store, users, post):
    """Test commenting bumps the counter and notifies the owner."""
    _, carlos, _ = users
    comment = await store.create_comment({"user_id": carlos.id, "post_id": post.id, "content": "Great!"})

    assert comment.content == "Great!"
    assert (await store.get_post(post.id)).comments_count == 1

    notifications = await notification_rows(store, post.user_id)
    assert len(notifications) == 1
    assert notifications[0].type == NotificationType.COMMENT
    assert notifications[0].resource_id == post.id

@pytest.mark.asyncio
async def test_comments_are_not_idempotent(store, users, post):
    """Test the same comment twice makes two rows."""
    _, carlos, _ = users
    data = {"user_id": carlos.id, "post_id": post.id, "content": "Great!"}
    first = await store.create_comment(data)
    second = await store.create_comment(data)

    assert first.id != second.id
    assert (await store.get_post(post.id)).comments_count == 2

@pytest.mark.asyncio
async def test_self_comment_not_notified(store, users, post):
    """Test commenting on your own post does not notify."""
    ana = users[0]
    await store.create_comment({"user_id": ana.id, "post_id": post.id, "content": "Thanks all"})
    assert await notification_rows(store, ana.id) == []

@pytest.mark.asyncio
async def test_comments_oldest_first(store, users, post):
    """Test comments read top to bottom in creation order."""
    _, carlos, dora = users
    for i in range(5):
        author = carlos if i % 2 else dora
        await store.create_comment({"user_id": author.id, "post_id": post.id, "content": f"c{i}"})

    comments = await store.get_post_comments(post.id)
    assert [c.content for c in comments] == ["c0", "c1", "c2", "c3", "c4"]

    times = [c.created_at for c in comments]
    assert all(a < b for a, b in zip(times, times[1:]))
