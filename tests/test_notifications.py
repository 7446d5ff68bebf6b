from psr_console.services.api_client import APIError, ErrorCategory
from psr_console.services.notifications import (
    GENERIC_ERROR_MESSAGE,
    Level,
    describe_error,
    handle_admin_action,
    handle_api_response,
)


def test_success_uses_server_message(notifier):
    result = handle_api_response(notifier, lambda: {"message": "Saved"})

    assert result == {"message": "Saved"}
    [note] = notifier.drain()
    assert note.level == Level.SUCCESS
    assert note.message == "Saved"
    assert notifier.drain() == []


def test_explicit_success_message_and_callbacks(notifier):
    seen = []

    handle_api_response(
        notifier, lambda: 42, success_message="Done", on_success=seen.append
    )

    assert seen == [42]
    assert notifier.peek()[0].message == "Done"


def test_unauthorized_becomes_session_expired_error(notifier):
    def call():
        raise APIError("Token expired", 401, ErrorCategory.AUTHENTICATION)

    assert handle_api_response(notifier, call, error_title="Load failed") is None

    [note] = notifier.drain()
    assert note.level == Level.ERROR
    assert note.title == "Load failed"
    assert note.message == "Your session has expired. Please log in again."
    assert note.category == "authentication"


def test_silent_failure_still_calls_on_error(notifier):
    errors = []

    def call():
        raise APIError("down", 503, ErrorCategory.SERVER)

    handle_api_response(notifier, call, show_error=False, on_error=errors.append)

    assert notifier.peek() == []
    assert errors[0].status == 503


def test_describe_error_for_unexpected_exceptions():
    assert describe_error(RuntimeError("bad state")) == ("bad state", "unexpected")
    assert describe_error(RuntimeError()) == (GENERIC_ERROR_MESSAGE, "unexpected")
    assert describe_error(APIError("Nope", 403, ErrorCategory.PERMISSION))[1] == "permission"


def test_handle_admin_action_titles(notifier):
    handle_admin_action(notifier, lambda: None, "Engineer application approval")

    def fail():
        raise APIError("Application not found", 404, ErrorCategory.NOT_FOUND)

    handle_admin_action(notifier, fail, "Engineer application rejection")

    ok, failed = notifier.drain()
    assert (ok.title, ok.message) == (
        "Action Completed", "Engineer application approval completed successfully"
    )
    assert (failed.title, failed.message) == ("Action Failed", "Application not found")
