"""Unit tests for decoding the subsonic-response envelope."""

import pytest

from payloads import envelope, failed
from subsonic_client.envelope import decode, raise_for_error
from subsonic_client.exceptions import (
    ParseError,
    RemoteError,
    ShapeError,
    SubsonicAuthenticationError,
    SubsonicNotFoundError,
)
from subsonic_client.models import APIError, Envelope, EnvelopeStatus

URL = "https://music.example.com/rest/ping.view?u=admin&p=***"


class TestDecode:
    """Test envelope header extraction."""

    def test_ok_envelope(self):
        result, payload = decode(envelope(), URL)

        assert result.status is EnvelopeStatus.OK
        assert result.server_version == "1.9.0"
        assert result.xmlns == "http://subsonic.org/restapi"
        assert result.error is None
        assert payload["status"] == "ok"

    def test_server_version_fallback(self):
        body = b'{"subsonic-response": {"status": "ok", "serverVersion": "0.53.3"}}'

        result, _ = decode(body, URL)

        assert result.server_version == "0.53.3"
        assert result.xmlns == ""

    def test_failed_envelope_carries_error(self):
        result, _ = decode(failed(40, "Wrong username or password"), URL)

        assert result.status is EnvelopeStatus.FAILED
        assert result.error == APIError(40, "Wrong username or password")

    def test_failed_without_error_object(self):
        result, _ = decode(b'{"subsonic-response": {"status": "failed"}}', URL)

        assert result.error == APIError(0, "Unknown error")

    def test_error_ignored_when_status_ok(self):
        body = envelope(error={"code": 70, "message": "stale"})

        result, _ = decode(body, URL)

        assert result.error is None

    def test_unknown_fields_are_kept_in_payload(self):
        _, payload = decode(envelope(musicFolders={"musicFolder": []}, extra=1), URL)

        assert payload["musicFolders"] == {"musicFolder": []}
        assert payload["extra"] == 1

    def test_open_subsonic_flag(self):
        result, _ = decode(envelope(openSubsonic=True, type="navidrome"), URL)

        assert result.open_subsonic is True

    def test_status_is_case_insensitive(self):
        result, _ = decode(b'{"subsonic-response": {"status": "OK", "version": "1.9.0"}}', URL)

        assert result.status is EnvelopeStatus.OK

    @pytest.mark.parametrize(
        "body",
        [
            b'{"subsonic-response": {"version": "1.9.0"}}',
            b'{"subsonic-response": {"status": "pending", "version": "1.9.0"}}',
            b'{"subsonic-response": {"status": 1, "version": "1.9.0"}}',
            b'{"subsonic-response": {"status": "", "version": "1.9.0"}}',
        ],
    )
    def test_unknown_status_is_not_success(self, body):
        with pytest.raises(ShapeError) as exc_info:
            decode(body, URL)

        assert exc_info.value.field == "status"

    def test_invalid_json_names_url(self):
        with pytest.raises(ParseError) as exc_info:
            decode(b"<html>Bad Gateway</html>", URL)

        assert exc_info.value.url == URL
        assert URL in str(exc_info.value)

    @pytest.mark.parametrize(
        "body",
        [b"[]", b'{"other": {}}', b'{"subsonic-response": "ok"}'],
    )
    def test_missing_wrapper_raises_shape_error(self, body):
        with pytest.raises(ShapeError):
            decode(body, URL)


class TestRaiseForError:
    """Test error code to exception mapping."""

    def test_ok_envelope_does_not_raise(self):
        raise_for_error(Envelope(status=EnvelopeStatus.OK, server_version="1.9.0"))

    def test_code_and_message_preserved(self):
        error = Envelope(
            status=EnvelopeStatus.FAILED,
            server_version="1.9.0",
            error=APIError(70, "Song not found"),
        )

        with pytest.raises(SubsonicNotFoundError) as exc_info:
            raise_for_error(error)

        assert exc_info.value.code == 70
        assert exc_info.value.message == "Song not found"

    @pytest.mark.parametrize("code", [40, 41])
    def test_authentication_codes(self, code):
        error = Envelope(
            status=EnvelopeStatus.FAILED, server_version="", error=APIError(code, "denied")
        )

        with pytest.raises(SubsonicAuthenticationError):
            raise_for_error(error)

    def test_unmapped_code_is_plain_remote_error(self):
        error = Envelope(
            status=EnvelopeStatus.FAILED, server_version="", error=APIError(0, "Generic")
        )

        with pytest.raises(RemoteError) as exc_info:
            raise_for_error(error)

        assert type(exc_info.value) is RemoteError
        assert str(exc_info.value) == "Subsonic Error 0: Generic"
