import pytest

from codeboard.db.models.user import Platform
from codeboard.services.rank_service import RankService
from codeboard.services.refresh_service import RefreshService

pytestmark = pytest.mark.integration


@pytest.mark.asyncio
async def test_update_scores_keeps_usernames(db_store, seed_users, make_user) -> None:
    """Test score writes overwrite scores and leave usernames in place."""
    await seed_users([
        make_user(1, {"codeforces": ("tourist", 1), "github": ("octo", 2)}, total_score=3),
    ])

    saved = await db_store.update_scores(
        1, {Platform.CODEFORCES: 9, Platform.LEETCODE: 4}, 15
    )

    assert saved is True
    user = await db_store.find_by_id(1)
    assert user.platforms["codeforces"] == {"username": "tourist", "score": 9}
    assert user.platforms["github"] == {"username": "octo", "score": 2}
    assert user.platforms["leetcode"] == {"score": 4}
    assert user.total_score == 15


@pytest.mark.asyncio
async def test_update_scores_missing_user(db_store) -> None:
    """Test score writes for an unknown id report failure."""
    assert await db_store.update_scores(42, {Platform.LEETCODE: 1}, 1) is False


@pytest.mark.asyncio
async def test_update_platform_replaces_entry(db_store, seed_users, make_user) -> None:
    """Test a platform update replaces one JSONB entry only."""
    await seed_users([
        make_user(1, {"codeforces": ("old", 5), "leetcode": ("lc", 8)}, total_score=13),
    ])

    saved = await db_store.update_platform(1, Platform.CODEFORCES, "new", 7)

    assert saved is True
    user = await db_store.find_by_email("user1@example.com")
    assert user.platforms["codeforces"] == {"username": "new", "score": 7}
    assert user.platforms["leetcode"] == {"username": "lc", "score": 8}
    assert user.total_score == 13


@pytest.mark.asyncio
async def test_list_by_score_breaks_ties_by_id(db_store, seed_users, make_user) -> None:
    """Test score ordering is descending with ties on ascending id."""
    await seed_users([
        make_user(3, total_score=10),
        make_user(1, total_score=10),
        make_user(2, total_score=20),
        make_user(4, total_score=0),
    ])

    users = await db_store.list_by_score()

    assert [user.id for user in users] == [2, 1, 3, 4]


@pytest.mark.asyncio
async def test_list_by_rank_puts_unranked_last(db_store, seed_users, make_user) -> None:
    """Test users without a rank are listed after ranked users."""
    await seed_users([
        make_user(1, rank=2),
        make_user(2, rank=None),
        make_user(3, rank=1),
        make_user(4, rank=None),
    ])

    users = await db_store.list_by_rank()

    assert [user.id for user in users] == [3, 1, 2, 4]


@pytest.mark.asyncio
async def test_update_by_id_reports_matches(db_store, seed_users, make_user) -> None:
    """Test partial updates return whether a row matched."""
    await seed_users([make_user(1)])

    assert await db_store.update_by_id(1, {"rank": 5}) is True
    assert await db_store.update_by_id(999, {"rank": 5}) is False

    user = await db_store.find_by_id(1)
    assert user.rank == 5
    assert await db_store.count() == 1


@pytest.mark.asyncio
async def test_recompute_ranks_persists_contiguous_ranks(
    db_store, seed_users, make_user
) -> None:
    """Test rank recomputation against stored totals."""
    await seed_users([
        make_user(1, total_score=5, rank=9),
        make_user(2, total_score=50),
        make_user(3, total_score=5),
    ])

    ranked = await RankService(db_store).recompute_ranks()

    assert ranked == 3
    assert [(u.id, u.rank) for u in await db_store.list_by_rank()] == [
        (2, 1),
        (1, 2),
        (3, 3),
    ]


@pytest.mark.asyncio
async def test_full_refresh_ranks_form_permutation(
    db_store, seed_users, make_user, stub_fetchers
) -> None:
    """Test one refresh cycle against the database end to end."""
    await seed_users([
        make_user(i, {"leetcode": (f"u{i}", 0), "github": (None, i)}) for i in range(1, 8)
    ])
    stub_fetchers[Platform.LEETCODE].scores = {f"u{i}": (i * 3) % 4 for i in range(1, 8)}

    report = await RefreshService(
        db_store, stub_fetchers, batch_size=3, update_interval=0, settle_delay=0
    ).refresh()

    assert report.users == 7
    assert report.batches == 3
    assert report.updated == 7
    assert report.ranked == 7

    users = await db_store.list_by_rank()
    assert [user.rank for user in users] == list(range(1, 8))
    assert [user.id for user in users] == [
        user.id for user in sorted(users, key=lambda u: (-u.total_score, u.id))
    ]
    for user in users:
        assert user.total_score == user.platform_score(Platform.LEETCODE) + user.id
        assert user.platform_username(Platform.LEETCODE) == f"u{user.id}"
