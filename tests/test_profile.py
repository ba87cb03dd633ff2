from datetime import datetime

from bookreviews.core.security import create_access_token
from bookreviews.domain.entities import ReadingStats, Review, UserBook
from bookreviews.services.user_service import calculate_reading_stats


def _entry(book_id, status, format):
    return UserBook(id=book_id, user_id=1, book_id=book_id, status=status, format=format)


def _review(book_id, rating):
    return Review(id=book_id, book_id=book_id, user_id=1, rating=rating, created_at=datetime(2024, 1, 1))


def test_reading_stats_counts_statuses_and_formats():
    stats = calculate_reading_stats(
        [
            _entry(1, "Completed", "paperback"),
            _entry(2, "Completed", "ebook"),
            _entry(3, "Want to Read", "paperback"),
        ],
        [],
    )
    assert stats.total_books_read == 2
    assert stats.want_to_read == 1
    assert stats.currently_reading == 0
    assert stats.format_breakdown == {"paperback": 2, "ebook": 1}
    assert stats.average_rating == 0
    assert stats.total_reviews == 0


def test_reading_stats_average_rating_from_reviews():
    stats = calculate_reading_stats([], [_review(1, 5), _review(2, 3), _review(3, 4)])
    assert stats.average_rating == 4.0
    assert stats.total_reviews == 3
    assert stats.format_breakdown == {}


def test_reading_stats_empty():
    assert calculate_reading_stats([], []) == ReadingStats()


def test_get_profile_with_stats(client, register_user, create_book):
    user_id, headers = register_user(email="stats@example.com", name="Stats")
    books = [create_book(headers, title=f"Book {i}") for i in range(3)]
    for book, status, format in zip(
        books,
        ["Completed", "Completed", "Want to Read"],
        ["paperback", "ebook", "paperback"],
    ):
        client.post(
            "/user/books",
            json={"bookId": book["bookId"], "status": status, "format": format},
            headers=headers,
        )
    client.post("/reviews", json={"bookId": books[0]["bookId"], "rating": 5}, headers=headers)
    client.post("/reviews", json={"bookId": books[1]["bookId"], "rating": 2}, headers=headers)

    response = client.get(f"/user/profile/{user_id}")
    assert response.status_code == 200
    profile = response.json()
    assert profile["userId"] == user_id
    assert profile["name"] == "Stats"
    assert profile["email"] == "stats@example.com"
    assert profile["createdAt"]

    stats = profile["readingStats"]
    assert stats["totalBooksRead"] == 2
    assert stats["currentlyReading"] == 0
    assert stats["wantToRead"] == 1
    assert stats["formatBreakdown"] == {"paperback": 2, "ebook": 1}
    assert stats["averageRating"] == 3.5
    assert stats["totalReviews"] == 2


def test_get_missing_profile(client):
    assert client.get("/user/profile/777").status_code == 404


def test_update_profile_only_overwrites_given_fields(client, register_user):
    user_id, headers = register_user(name="Original")

    response = client.put(
        "/user/profile",
        json={"bio": "Reads a lot", "avatarUrl": "https://img.example.com/me.png"},
        headers=headers,
    )
    assert response.status_code == 200
    profile = response.json()
    assert profile["name"] == "Original"
    assert profile["bio"] == "Reads a lot"
    assert profile["avatarUrl"] == "https://img.example.com/me.png"

    profile = client.put("/user/profile", json={"name": "Renamed"}, headers=headers).json()
    assert profile["name"] == "Renamed"
    assert profile["bio"] == "Reads a lot"
    assert profile["readingStats"]["totalReviews"] == 0

    assert client.get(f"/user/profile/{user_id}").json()["name"] == "Renamed"


def test_update_profile_cannot_change_email(client, register_user):
    _, headers = register_user(email="fixed@example.com")
    profile = client.put(
        "/user/profile", json={"email": "moved@example.com"}, headers=headers
    ).json()
    assert profile["email"] == "fixed@example.com"


def test_update_profile_for_unknown_user(client):
    token = create_access_token({"sub": "31337"})
    response = client.put(
        "/user/profile", json={"bio": "ghost"}, headers={"Authorization": f"Bearer {token}"}
    )
    assert response.status_code == 404
