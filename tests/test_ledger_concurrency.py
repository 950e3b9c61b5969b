# tests/test_ledger_concurrency.py
"""Concurrent voting against a file-backed SQLite database.

Each worker uses its own session and connection, so these tests exercise
the database-level serialization rather than the single in-memory
connection the rest of the suite shares.
"""

from collections.abc import Iterator
from concurrent.futures import ThreadPoolExecutor
from contextlib import nullcontext
from pathlib import Path

import pytest
from sqlalchemy import func, select
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker

from edloop.core.exceptions import NotFoundError
from edloop.db.session import Base, build_engine
from edloop.models import Community, Post, User, Vote
from edloop.repositories.vote_repo import VoteRepository
from edloop.services import post_service, vote_ledger
from edloop.services.vote_ledger import VoteLedger

VOTERS = 40
WORKERS = 8


@pytest.fixture()
def file_engine(tmp_path: Path) -> Iterator[Engine]:
    engine = build_engine(f"sqlite:///{tmp_path / 'ledger.db'}")
    Base.metadata.create_all(bind=engine)
    try:
        yield engine
    finally:
        engine.dispose()


@pytest.fixture()
def make_session(file_engine: Engine) -> sessionmaker:
    return sessionmaker(bind=file_engine, autoflush=False)


@pytest.fixture()
def seeded(make_session: sessionmaker) -> tuple[str, str, list[str]]:
    """Create an author, a post with no votes and ``VOTERS`` voters."""
    with make_session() as session:
        author = User(username="author", display_name="Author")
        voters = [User(username=f"voter{i}", display_name=f"Voter {i}") for i in range(VOTERS)]
        session.add_all([author, *voters])
        session.flush()
        community = Community(name="physics", display_name="Physics", created_by=author.id)
        session.add(community)
        session.flush()
        post = Post(
            author_id=author.id,
            community_id=community.id,
            title="Race me",
            content="Body",
            type="text",
            tags=[],
        )
        session.add(post)
        session.commit()
        return post.id, author.id, [voter.id for voter in voters]


@pytest.fixture()
def without_process_locks(monkeypatch: pytest.MonkeyPatch) -> None:
    """Leave serialization to the database, as with several worker processes."""
    monkeypatch.setattr(vote_ledger, "post_lock", lambda post_id: nullcontext())
    monkeypatch.setattr(post_service, "post_lock", lambda post_id: nullcontext())


def _counters_and_ledger(make_session: sessionmaker, post_id: str) -> tuple[tuple[int, int], dict[str, int]]:
    with make_session() as session:
        post = session.get(Post, post_id)
        counts = VoteRepository(session).count_by_kind(post_id)
        return (post.upvotes, post.downvotes), counts


@pytest.mark.usefixtures("without_process_locks")
def test_concurrent_votes_from_separate_connections(make_session, seeded) -> None:
    post_id, _, voter_ids = seeded

    def vote(index_and_user: tuple[int, str]) -> None:
        index, user_id = index_and_user
        with make_session() as session:
            ledger = VoteLedger(session)
            ledger.cast_vote(user_id, post_id, "up")
            if index % 2:
                ledger.cast_vote(user_id, post_id, "down")

    with ThreadPoolExecutor(max_workers=WORKERS) as pool:
        list(pool.map(vote, enumerate(voter_ids)))

    counters, ledger_counts = _counters_and_ledger(make_session, post_id)
    assert counters == (VOTERS // 2, VOTERS // 2)
    assert counters == (ledger_counts["up"], ledger_counts["down"])


def test_concurrent_votes_with_process_locks(make_session, seeded) -> None:
    post_id, _, voter_ids = seeded

    def vote(user_id: str) -> None:
        with make_session() as session:
            VoteLedger(session).cast_vote(user_id, post_id, "up")

    with ThreadPoolExecutor(max_workers=WORKERS) as pool:
        list(pool.map(vote, voter_ids))

    counters, ledger_counts = _counters_and_ledger(make_session, post_id)
    assert counters == (VOTERS, 0)
    assert ledger_counts == {"up": VOTERS, "down": 0}


@pytest.mark.usefixtures("without_process_locks")
def test_votes_racing_delete_leave_no_orphans(make_session, seeded) -> None:
    post_id, author_id, voter_ids = seeded
    unexpected: list[BaseException] = []

    def vote(user_id: str) -> None:
        with make_session() as session:
            try:
                VoteLedger(session).cast_vote(user_id, post_id, "up")
            except NotFoundError:
                pass
            except Exception as exc:  # noqa: BLE001
                unexpected.append(exc)

    def delete() -> None:
        with make_session() as session:
            try:
                post_service.delete_post(session, post_id=post_id, user_id=author_id)
            except Exception as exc:  # noqa: BLE001
                unexpected.append(exc)

    half = len(voter_ids) // 2
    with ThreadPoolExecutor(max_workers=WORKERS) as pool:
        futures = [pool.submit(vote, user_id) for user_id in voter_ids[:half]]
        futures.append(pool.submit(delete))
        futures += [pool.submit(vote, user_id) for user_id in voter_ids[half:]]
        for future in futures:
            future.result()

    assert unexpected == []
    with make_session() as session:
        assert session.get(Post, post_id) is None
        orphans = session.execute(
            select(func.count()).select_from(Vote).where(Vote.post_id == post_id)
        ).scalar_one()
        assert orphans == 0
