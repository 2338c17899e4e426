"""
Tests for the genre endpoints.
"""

import pytest


def test_create_genre(client, auth_headers):
    response = client.post("/genres", json={"name": "Poetry"}, headers=auth_headers)
    assert response.status_code == 201
    data = response.json()
    assert data["name"] == "Poetry"
    assert data["bookCount"] == 0


def test_create_genre_requires_name(client, auth_headers):
    for payload in ({}, {"name": ""}, {"name": "   "}):
        response = client.post("/genres", json=payload, headers=auth_headers)
        assert response.status_code == 400
        assert response.json() == {"error": "Name is required"}


def test_duplicate_genre_name_conflicts(client, auth_headers, create_genre):
    create_genre("Poetry")
    response = client.post("/genres", json={"name": "Poetry"}, headers=auth_headers)
    assert response.status_code == 409
    assert response.json() == {"error": "Genre with this name already exists"}


def test_list_genres_counts_books(client, create_genre, create_book):
    fantasy = create_genre("Fantasy")
    create_genre("History")
    create_book(title="The Hobbit", author="J.R.R. Tolkien", genreId=fantasy["id"])
    create_book(title="Earthsea", author="Ursula K. Le Guin", genreId=fantasy["id"])

    response = client.get("/genres")
    assert response.status_code == 200
    counts = {genre["name"]: genre["bookCount"] for genre in response.json()}
    assert counts == {"Fantasy": 2, "History": 0}


def test_get_genre(client, create_genre, create_book):
    genre = create_genre("Mystery")
    create_book(title="Gone Girl", author="Gillian Flynn", genreId=genre["id"])
    response = client.get(f"/genres/{genre['id']}")
    assert response.status_code == 200
    assert response.json() == {"id": genre["id"], "name": "Mystery", "bookCount": 1}


def test_get_missing_genre(client):
    response = client.get("/genres/999")
    assert response.status_code == 404
    assert response.json() == {"error": "Genre not found"}


def test_update_genre(client, auth_headers, create_genre):
    genre = create_genre("Sci-Fi")
    response = client.put(f"/genres/{genre['id']}", json={"name": "Science Fiction"}, headers=auth_headers)
    assert response.status_code == 200
    assert response.json()["name"] == "Science Fiction"
    assert client.get(f"/genres/{genre['id']}").json()["name"] == "Science Fiction"


def test_update_genre_to_its_own_name(client, auth_headers, create_genre):
    genre = create_genre("Fantasy")
    response = client.put(f"/genres/{genre['id']}", json={"name": "Fantasy"}, headers=auth_headers)
    assert response.status_code == 200


def test_update_genre_to_taken_name_conflicts(client, auth_headers, create_genre):
    create_genre("Fantasy")
    history = create_genre("History")
    response = client.put(f"/genres/{history['id']}", json={"name": "Fantasy"}, headers=auth_headers)
    assert response.status_code == 409


def test_update_genre_errors(client, auth_headers, create_genre):
    genre = create_genre("Fantasy")
    assert client.put(f"/genres/{genre['id']}", json={"name": ""}, headers=auth_headers).status_code == 400
    assert client.put("/genres/999", json={"name": "Other"}, headers=auth_headers).status_code == 404


def test_delete_genre_blocked_while_books_reference_it(client, auth_headers, create_genre, create_book):
    genre = create_genre("Fantasy")
    book = create_book(title="The Hobbit", author="J.R.R. Tolkien", genreId=genre["id"])

    response = client.delete(f"/genres/{genre['id']}", headers=auth_headers)
    assert response.status_code == 400
    assert "associated books" in response.json()["error"]

    assert client.delete(f"/books/{book['id']}", headers=auth_headers).status_code == 204
    response = client.delete(f"/genres/{genre['id']}", headers=auth_headers)
    assert response.status_code == 204
    assert client.get(f"/genres/{genre['id']}").status_code == 404


def test_delete_genre_after_reassigning_books(client, auth_headers, create_genre, create_book):
    old = create_genre("Sci-Fi")
    new = create_genre("Science Fiction")
    book = create_book(title="Dune", author="Frank Herbert", genreId=old["id"])
    client.put(f"/books/{book['id']}", json={"genreId": new["id"]}, headers=auth_headers)
    assert client.delete(f"/genres/{old['id']}", headers=auth_headers).status_code == 204


def test_delete_missing_genre(client, auth_headers):
    assert client.delete("/genres/999", headers=auth_headers).status_code == 404


def test_genre_writes_do_not_need_a_token(client):
    created = client.post("/genres", json={"name": "Fantasy"})
    assert created.status_code == 201
    genre_id = created.json()["id"]
    renamed = client.put(f"/genres/{genre_id}", json={"name": "High Fantasy"})
    assert renamed.status_code == 200
    assert renamed.json()["name"] == "High Fantasy"
    assert client.delete(f"/genres/{genre_id}").status_code == 204
    assert client.get("/genres").json() == []


@pytest.mark.parametrize("genre_id", [2**63, -(2**63) - 1])
def test_out_of_range_genre_id_is_rejected(client, genre_id):
    assert client.get(f"/genres/{genre_id}").status_code == 400
    assert client.put(f"/genres/{genre_id}", json={"name": "Other"}).status_code == 400
    assert client.delete(f"/genres/{genre_id}").status_code == 400
