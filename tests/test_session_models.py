from use_cases.session_models import Session, display_name, user_role


def test_session_is_logged_in() -> None:
    assert Session(access_token="a", refresh_token="r").is_logged_in is True
    assert Session().is_logged_in is False


def test_display_name() -> None:
    assert display_name({"firstName": "Asha", "lastName": "Rao", "email": "a@example.com"}) == "Asha Rao"
    assert display_name({"email": "a@example.com"}) == "a@example.com"
    assert display_name(None) == ""


def test_user_role() -> None:
    assert user_role({"role": "Spares"}) == "Spares"
    assert user_role(None) is None
