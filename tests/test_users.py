from library_app.extensions import db
from library_app.models.favorite import Favorite
from library_app.services.user_service import UserService


def _favorite(user, record):
    favorite = Favorite(user=user)
    favorite.favorable = record
    db.session.add(favorite)
    db.session.commit()


def test_profile_is_private(client, login, make_user, flashes):
    owner = make_user()
    login(make_user())
    res = client.get(f"/users/{owner.id}")
    assert res.status_code == 303
    assert ("alert", "You are not allowed to do that.") in flashes()


def test_missing_user_redirects(client, login, make_user):
    login(make_user())
    assert client.get("/users/999").status_code == 303


def test_show_own_profile(client, login, make_user):
    user = make_user(name="Ada")
    login(user)
    res = client.get(f"/users/{user.id}")
    assert res.status_code == 200
    assert b"Ada" in res.data


def test_update_profile_ignores_blank_password(client, login, make_user):
    user = make_user(name="Ada")
    login(user)

    res = client.post(f"/users/{user.id}/edit", data={
        "name": "Ada Lovelace", "gender": "female", "date_of_birth": "1815-12-10",
        "password": "", "password_confirmation": "",
    })
    assert res.status_code == 302
    assert user.name == "Ada Lovelace"
    assert user.date_of_birth.year == 1815
    assert user.check_password("secret123")


def test_update_profile_changes_password(client, login, make_user):
    user = make_user()
    login(user)
    client.post(f"/users/{user.id}/edit", data={"password": "newsecret", "password_confirmation": "newsecret"})
    assert user.check_password("newsecret")


def test_invalid_profile_update(client, login, make_user):
    user = make_user(name="Ada")
    login(user)
    res = client.post(f"/users/{user.id}/edit", data={"name": "", "gender": "robot"})
    assert res.status_code == 422
    assert b"Name can&#39;t be blank" in res.data
    db.session.expire_all()
    assert user.name == "Ada"


def test_favorite_books_with_stats(client, login, make_user, make_book, make_author, make_category):
    user = make_user()
    author = make_author()
    poetry = make_category("Poetry")
    drama = make_category("Drama")
    _favorite(user, make_book(title="Odes", author=author, categories=[poetry]))
    _favorite(user, make_book(title="Plays", author=author, categories=[poetry, drama]))
    _favorite(user, make_book(title="Elsewhere"))
    login(user)

    res = client.get(f"/users/{user.id}/favorites")
    assert res.status_code == 200
    for line in (b"Total favorites: 3", b"Unique authors: 2",
                 b"Unique categories: 2", b"Unique publishers: 3"):
        assert line in res.data
    assert b"Odes" in res.data


def test_followed_authors_with_stats(client, login, make_user, make_author, make_book):
    user = make_user()
    prolific = make_author(name="Prolific")
    quiet = make_author(name="Quiet")
    for _ in range(2):
        make_book(author=prolific)
    _favorite(user, prolific)
    _favorite(user, quiet)
    login(user)

    res = client.get(f"/users/{user.id}/follows")
    assert b"Total books: 2" in res.data
    assert b"Average books per author: 1.0" in res.data
    assert b"Quiet" in res.data


def test_author_average_rounds_half_up(make_author, make_book):
    authors = [make_author() for _ in range(4)]
    make_book(author=authors[0])

    stats = UserService.author_stats(authors)
    assert stats == {"total_books": 1, "avg_books": 0.3}
