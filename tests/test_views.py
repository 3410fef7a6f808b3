from jinja2 import DictLoader

from tddapp.auth.session import Session
from tddapp.views import DEFAULT_LOCALE, Locale

from doubles import SessionStoreSpy, UserRepositoryStub


def test_locale_falls_back_to_key():
    loc = Locale({"a": "A"})
    assert loc.t("a") == "A"
    assert loc.t("missing.key") == "missing.key"


def test_custom_locale_is_used_for_login_errors(make_client):
    locale = Locale({**DEFAULT_LOCALE, "login.invalid": "Credenciales inválidas"})
    client = make_client(user_repository=UserRepositoryStub(), locale=locale)
    r = client.post("/login", data={"email": "x@example.com", "password": "bad"})
    assert r.status_code == 401
    assert "Credenciales inválidas" in r.text


def test_injected_views_and_globals(make_client):
    views = DictLoader({"home.html": "<p>{{ shout(sid) }}</p>"})
    client = make_client(
        session=Session(SessionStoreSpy("abc")),
        views=views,
        view_globals={"shout": lambda s: s.upper() + "!"},
    )
    r = client.get("/")
    assert r.status_code == 200
    assert r.text == "<p>ABC!</p>"


def test_templates_escape_user_input(make_client):
    client = make_client(user_repository=UserRepositoryStub())
    r = client.post("/login", data={"email": "<script>x</script>", "password": "bad"})
    assert "<script>x</script>" not in r.text
    assert "&lt;script&gt;" in r.text


def test_static_url_follows_prefix(make_client):
    r = make_client(static_prefix="/public").get("/login")
    assert 'href="/public/css/app.css"' in r.text


def test_navigation_depends_on_session(make_client):
    r = make_client(session=Session(SessionStoreSpy("abc"))).get("/")
    assert 'action="/logout"' in r.text
    r = make_client(session=Session(SessionStoreSpy(""))).get("/login")
    assert 'action="/logout"' not in r.text
