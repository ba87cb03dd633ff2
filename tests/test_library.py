def test_add_then_set_book_is_last_write_wins(client, register_user, create_book):
    user_id, headers = register_user()
    book = create_book(headers)

    first = client.post(
        "/user/books",
        json={"bookId": book["bookId"], "status": "Want to Read", "format": "paperback"},
        headers=headers,
    )
    assert first.status_code == 200
    assert first.json()["status"] == "Want to Read"

    second = client.post(
        "/user/books",
        json={"bookId": book["bookId"], "status": "Completed", "format": "ebook"},
        headers=headers,
    )
    assert second.status_code == 200
    entry = second.json()
    assert entry["status"] == "Completed"
    assert entry["format"] == "ebook"
    assert entry["title"] == "Dune"
    assert entry["author"] == "Frank Herbert"
    # The first added-at timestamp survives the overwrite
    assert entry["addedAt"] == first.json()["addedAt"]

    entries = client.get(f"/user/{user_id}/books").json()
    assert len(entries) == 1
    assert entries[0]["status"] == "Completed"
    assert entries[0]["format"] == "ebook"


def test_add_book_uses_defaults(client, register_user, create_book):
    _, headers = register_user()
    book = create_book(headers)
    entry = client.post("/user/books", json={"bookId": book["bookId"]}, headers=headers).json()
    assert entry["status"] == "Want to Read"
    assert entry["format"] == "paperback"


def test_add_missing_book_leaves_no_entry(client, register_user):
    user_id, headers = register_user()
    response = client.post(
        "/user/books", json={"bookId": 12345, "status": "Completed"}, headers=headers
    )
    assert response.status_code == 404
    assert response.json()["detail"] == "Book not found"
    assert client.get(f"/user/{user_id}/books").json() == []


def test_add_book_rejects_unknown_status(client, register_user, create_book):
    _, headers = register_user()
    book = create_book(headers)
    response = client.post(
        "/user/books", json={"bookId": book["bookId"], "status": "Abandoned"}, headers=headers
    )
    assert response.status_code == 400


def test_update_without_existing_entry_is_not_found(client, register_user, create_book):
    user_id, headers = register_user()
    book = create_book(headers)

    response = client.put(
        f"/user/books/{book['bookId']}",
        json={"status": "Completed", "format": "ebook"},
        headers=headers,
    )
    assert response.status_code == 404
    assert client.get(f"/user/{user_id}/books").json() == []


def test_update_existing_entry(client, register_user, create_book):
    _, headers = register_user()
    book = create_book(headers, coverUrl="https://covers.example.com/d.jpg")
    client.post("/user/books", json={"bookId": book["bookId"]}, headers=headers)

    response = client.put(
        f"/user/books/{book['bookId']}",
        json={"status": "Currently Reading", "format": "audiobook"},
        headers=headers,
    )
    assert response.status_code == 200
    entry = response.json()
    assert entry["status"] == "Currently Reading"
    assert entry["format"] == "audiobook"
    assert entry["coverUrl"] == "https://covers.example.com/d.jpg"


def test_remove_book(client, register_user, create_book):
    user_id, headers = register_user()
    book = create_book(headers)
    client.post("/user/books", json={"bookId": book["bookId"]}, headers=headers)

    assert client.delete(f"/user/books/{book['bookId']}", headers=headers).status_code == 204
    assert client.get(f"/user/{user_id}/books").json() == []
    assert client.delete(f"/user/books/{book['bookId']}", headers=headers).status_code == 404


def test_list_books_filters_by_status(client, register_user, create_book):
    user_id, headers = register_user()
    dune = create_book(headers, title="Dune")
    emma = create_book(headers, title="Emma", author="Jane Austen")
    client.post(
        "/user/books", json={"bookId": dune["bookId"], "status": "Completed"}, headers=headers
    )
    client.post(
        "/user/books", json={"bookId": emma["bookId"], "status": "Want to Read"}, headers=headers
    )

    completed = client.get(f"/user/{user_id}/books", params={"status": "Completed"}).json()
    assert [e["title"] for e in completed] == ["Dune"]

    everything = client.get(f"/user/{user_id}/books").json()
    assert {e["title"] for e in everything} == {"Dune", "Emma"}

    assert client.get(f"/user/{user_id}/books", params={"status": "completed"}).json() == []


def test_library_entries_are_per_user(client, register_user, create_book):
    alice_id, alice = register_user(email="alice@example.com")
    bob_id, bob = register_user(email="bob@example.com")
    book = create_book(alice)
    client.post("/user/books", json={"bookId": book["bookId"]}, headers=alice)

    assert len(client.get(f"/user/{alice_id}/books").json()) == 1
    assert client.get(f"/user/{bob_id}/books").json() == []
    assert client.delete(f"/user/books/{book['bookId']}", headers=bob).status_code == 404


def test_library_writes_require_auth(client, register_user, create_book):
    _, headers = register_user()
    book = create_book(headers)
    assert client.post("/user/books", json={"bookId": book["bookId"]}).status_code == 401
    assert (
        client.put(
            f"/user/books/{book['bookId']}", json={"status": "Completed", "format": "ebook"}
        ).status_code
        == 401
    )
    assert client.delete(f"/user/books/{book['bookId']}").status_code == 401
