from unittest.mock import MagicMock, patch

from use_cases import auth_flow


def _client(authenticated=True, user=None):
    client = MagicMock()
    client.is_authenticated.return_value = authenticated
    client.get_current_user.return_value = user
    return client


@patch("use_cases.auth_flow.session_manager.get_api_client")
@patch("use_cases.auth_flow.session_manager.init_session_state")
def test_ensure_authenticated_session_stop_without_token(mock_init, mock_get_client):
    mock_get_client.return_value = _client(authenticated=False)

    result = auth_flow.ensure_authenticated_session()

    assert result.status == "STOP"
    assert result.reason == "auth_required"
    mock_init.assert_called_once()


@patch("use_cases.auth_flow.session_manager.get_api_client")
@patch("use_cases.auth_flow.session_manager.init_session_state")
def test_ensure_authenticated_session_continue_with_user(mock_init, mock_get_client):
    mock_get_client.return_value = _client(user={"id": "u42", "role": "Approver", "isActive": True})

    result = auth_flow.ensure_authenticated_session()

    assert result.status == "CONTINUE"
    assert result.user_id == "u42"


@patch("use_cases.auth_flow.session_manager.get_api_client")
@patch("use_cases.auth_flow.session_manager.init_session_state")
def test_ensure_authenticated_session_logs_out_inactive_user(mock_init, mock_get_client):
    client = _client(user={"id": "u7", "isActive": False})
    mock_get_client.return_value = client

    result = auth_flow.ensure_authenticated_session()

    assert result.status == "STOP"
    assert result.reason == "account_inactive"
    client.logout.assert_called_once()
