# tests/v1/test_communities.py
"""Tests for community-related endpoints."""

from datetime import timedelta

import pytest
from fastapi import status


def test_list_communities(client, community) -> None:
    response = client.get("/api/v1/communities/")
    assert response.status_code == status.HTTP_200_OK
    data = response.json()
    assert any(c["id"] == community.id for c in data)
    assert any(c["displayName"] == "Test Community" for c in data)


def test_search_communities(client, community) -> None:
    hit = client.get("/api/v1/communities/?search=SCIENCE").json()
    miss = client.get("/api/v1/communities/?search=basket-weaving").json()
    assert [c["id"] for c in hit] == [community.id]
    assert miss == []


def test_get_community(client, community) -> None:
    response = client.get(f"/api/v1/communities/{community.id}")
    assert response.status_code == status.HTTP_200_OK
    assert response.json()["name"] == community.name


def test_get_nonexistent_community(client) -> None:
    response = client.get("/api/v1/communities/99999")
    assert response.status_code == status.HTTP_404_NOT_FOUND


def test_create_community(client, auth_token, test_user) -> None:
    response = client.post(
        "/api/v1/communities/",
        json={
            "name": "linear-algebra",
            "displayName": "Linear Algebra",
            "description": "Vectors and friends",
        },
        headers=auth_token,
    )
    assert response.status_code == status.HTTP_201_CREATED
    data = response.json()
    assert data["name"] == "linear-algebra"
    assert data["createdBy"] == test_user.id


def test_create_duplicate_community(client, auth_token, community) -> None:
    response = client.post(
        "/api/v1/communities/",
        json={"name": community.name, "displayName": "Different Name"},
        headers=auth_token,
    )
    assert response.status_code == status.HTTP_409_CONFLICT


def test_create_community_rejects_bad_name(client, auth_token) -> None:
    response = client.post(
        "/api/v1/communities/",
        json={"name": "Has Spaces", "displayName": "Bad"},
        headers=auth_token,
    )
    assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY


@pytest.mark.usefixtures("frozen_clock")
def test_community_posts_sorted(client, community, make_post) -> None:
    make_post(title="older", upvotes=4, age=timedelta(hours=3))
    make_post(title="newer", upvotes=1)

    by_new = client.get(f"/api/v1/communities/{community.id}/posts?sort=new")
    by_top = client.get(f"/api/v1/communities/{community.id}/posts?sort=top")

    assert [p["title"] for p in by_new.json()] == ["newer", "older"]
    assert [p["title"] for p in by_top.json()] == ["older", "newer"]


def test_community_posts_unknown_community(client) -> None:
    response = client.get("/api/v1/communities/missing/posts")
    assert response.status_code == status.HTTP_404_NOT_FOUND
