from schedconsole.api.envelope import decode_envelope


def test_nested_token_grant():
    grant = decode_envelope({"success": True, "data": {"token": "abc"}}).token_grant()
    assert grant is not None
    assert grant.token == "abc"
    assert grant.shape == "nested"


def test_flat_token_grant():
    grant = decode_envelope({"success": True, "token": "xyz"}).token_grant()
    assert grant is not None
    assert grant.token == "xyz"
    assert grant.shape == "flat"


def test_no_grant_without_success_or_token():
    assert decode_envelope({"success": False, "token": "xyz"}).token_grant() is None
    assert decode_envelope({"success": True}).token_grant() is None
    assert decode_envelope({"success": True, "data": {"token": ""}}).token_grant() is None
    assert decode_envelope({"success": True, "token": 42}).token_grant() is None


def test_reason_prefers_error_then_message_then_fallback():
    assert decode_envelope({"error": "bad", "message": "m"}).reason("x") == "bad"
    assert decode_envelope({"message": "m"}).reason("x") == "m"
    assert decode_envelope({}).reason("x") == "x"


def test_non_object_bodies_decode_to_failure():
    for body in (None, [], "text", 3):
        env = decode_envelope(body)
        assert env.success is False
        assert env.reason("Unknown error") == "Unknown error"


def test_malformed_success_field_is_not_success():
    env = decode_envelope({"success": {"nested": True}, "error": "odd"})
    assert env.success is False
    assert env.reason("x") == "odd"


def test_empty_data_object_is_still_the_nested_shape():
    env = decode_envelope({"success": True, "data": {}, "token": "top-level"})
    assert env.token_grant() is None

    env = decode_envelope({"success": True, "data": None, "token": "top-level"})
    assert env.token_grant().shape == "flat"
