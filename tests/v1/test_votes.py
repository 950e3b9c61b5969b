# tests/v1/test_votes.py
"""Tests for vote-related endpoints."""

from fastapi import status
from sqlalchemy import select

from edloop.models import Post, Vote


def _vote(client, headers, post_id, vote_type):
    return client.post(
        "/api/v1/votes/",
        json={"postId": post_id, "voteType": vote_type},
        headers=headers,
    )


def test_cast_upvote(client, auth_token, test_post) -> None:
    response = _vote(client, auth_token, test_post.id, "up")
    assert response.status_code == status.HTTP_200_OK
    assert response.json() == {
        "postId": test_post.id,
        "upvotes": 1,
        "downvotes": 0,
        "userVote": "up",
    }


def test_up_up_down_sequence(client, auth_token, test_post) -> None:
    """Vote, toggle it off, then vote the other way."""
    first = _vote(client, auth_token, test_post.id, "up").json()
    second = _vote(client, auth_token, test_post.id, "up").json()
    third = _vote(client, auth_token, test_post.id, "down").json()

    assert (first["upvotes"], first["downvotes"], first["userVote"]) == (1, 0, "up")
    assert (second["upvotes"], second["downvotes"], second["userVote"]) == (0, 0, None)
    assert (third["upvotes"], third["downvotes"], third["userVote"]) == (0, 1, "down")


def test_change_vote_direction(client, auth_token, other_auth_token, test_post) -> None:
    _vote(client, other_auth_token, test_post.id, "up")
    _vote(client, auth_token, test_post.id, "up")

    response = _vote(client, auth_token, test_post.id, "down")
    assert response.status_code == status.HTTP_200_OK
    assert response.json()["upvotes"] == 1
    assert response.json()["downvotes"] == 1

    response = client.get(f"/api/v1/votes/post/{test_post.id}", headers=auth_token)
    assert response.status_code == status.HTTP_200_OK
    assert response.json() == {"postId": test_post.id, "userVote": "down"}


def test_my_vote_is_null_without_vote(client, auth_token, test_post) -> None:
    response = client.get(f"/api/v1/votes/post/{test_post.id}", headers=auth_token)
    assert response.json()["userVote"] is None


def test_vote_invalid_type(client, auth_token, test_post, db_session) -> None:
    response = _vote(client, auth_token, test_post.id, "sideways")
    assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY
    assert db_session.execute(select(Vote)).first() is None


def test_vote_missing_post_id(client, auth_token) -> None:
    response = client.post("/api/v1/votes/", json={"voteType": "up"}, headers=auth_token)
    assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY


def test_vote_nonexistent_post(client, auth_token) -> None:
    response = _vote(client, auth_token, "no-such-post", "up")
    assert response.status_code == status.HTTP_404_NOT_FOUND
    assert response.json() == {"detail": "Post not found", "error_code": "not_found"}


def test_vote_requires_authentication(client, test_post, db_session) -> None:
    response = client.post(
        "/api/v1/votes/", json={"postId": test_post.id, "voteType": "up"}
    )
    assert response.status_code in {status.HTTP_401_UNAUTHORIZED, status.HTTP_403_FORBIDDEN}
    assert db_session.get(Post, test_post.id).upvotes == 0


def test_vote_rejects_bad_token(client, test_post) -> None:
    response = _vote(client, {"Authorization": "Bearer not-a-jwt"}, test_post.id, "up")
    assert response.status_code == status.HTTP_401_UNAUTHORIZED


def test_user_id_in_body_is_ignored(client, auth_token, other_user, test_post) -> None:
    """The voter always comes from the token."""
    client.post(
        "/api/v1/votes/",
        json={"postId": test_post.id, "voteType": "up", "userId": other_user.id},
        headers=auth_token,
    )
    response = client.get(f"/api/v1/votes/post/{test_post.id}", headers=auth_token)
    assert response.json()["userVote"] == "up"
