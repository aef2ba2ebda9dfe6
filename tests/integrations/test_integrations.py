import hashlib
from unittest.mock import AsyncMock, MagicMock, patch

import httpx
import pytest

from wayamba.config import Settings
from wayamba.errors import UploadError
from wayamba.integrations import (
    CloudinaryImageHost,
    ImageHost,
    ImageUpload,
    Notifier,
    NullImageHost,
    NullNotifier,
    SendGridNotifier,
    build_image_host,
    build_notifier,
)
from wayamba.integrations.notifications import NotificationError
from wayamba.models import Feedback, FeedbackStatus

from tests.conftest import FakeImageHost, RecordingNotifier

PHOTO = ImageUpload(content=b"jpeg bytes", filename="fort.jpg", content_type="image/jpeg")


def cloudinary() -> CloudinaryImageHost:
    return CloudinaryImageHost("demo", "key123", "secret456", timeout=5)


def fake_response(status_code: int, body: dict) -> httpx.Response:
    return httpx.Response(status_code, json=body, request=httpx.Request("POST", "https://api.cloudinary.com"))


def test_build_image_host_without_credentials():
    assert isinstance(build_image_host(Settings()), NullImageHost)


def test_build_image_host_with_credentials():
    host = build_image_host(
        Settings(cloudinary_cloud_name="demo", cloudinary_api_key="k", cloudinary_api_secret="s", image_upload_timeout=7)
    )
    assert isinstance(host, CloudinaryImageHost)
    assert host.timeout == 7
    assert host.upload_url == "https://api.cloudinary.com/v1_1/demo/image/upload"


def test_sign_sorts_params_and_appends_secret():
    expected = hashlib.sha1(b"folder=tourist-feedback&timestamp=1700000000secret456").hexdigest()
    assert cloudinary().sign({"timestamp": "1700000000", "folder": "tourist-feedback"}) == expected


@pytest.mark.asyncio
async def test_null_image_host_returns_none():
    assert await NullImageHost().upload(PHOTO, folder="tourist-feedback") is None


@pytest.mark.asyncio
async def test_cloudinary_upload_returns_secure_url():
    reply = fake_response(200, {"secure_url": "https://res.cloudinary.com/demo/fort.jpg"})
    with patch("httpx.AsyncClient.post", new=AsyncMock(return_value=reply)) as post:
        url = await cloudinary().upload(PHOTO, folder="tourism-assets")

    assert url == "https://res.cloudinary.com/demo/fort.jpg"
    kwargs = post.call_args.kwargs
    assert kwargs["data"]["folder"] == "tourism-assets"
    assert kwargs["data"]["api_key"] == "key123"
    assert "signature" in kwargs["data"]
    assert kwargs["files"]["file"] == ("fort.jpg", b"jpeg bytes", "image/jpeg")


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "reply",
    [
        fake_response(401, {"error": {"message": "Invalid Signature"}}),
        fake_response(200, {"public_id": "fort"}),
        fake_response(200, ["https://res.cloudinary.com/demo/fort.jpg"]),
        httpx.Response(200, text="<html>gateway</html>", request=httpx.Request("POST", "https://api.cloudinary.com")),
    ],
)
async def test_cloudinary_bad_reply_raises(reply):
    with patch("httpx.AsyncClient.post", new=AsyncMock(return_value=reply)):
        with pytest.raises(UploadError):
            await cloudinary().upload(PHOTO, folder="tourist-feedback")


@pytest.mark.asyncio
@pytest.mark.parametrize("error", [httpx.ReadTimeout("slow"), httpx.ConnectError("down")])
async def test_cloudinary_transport_error_raises(error):
    with patch("httpx.AsyncClient.post", new=AsyncMock(side_effect=error)):
        with pytest.raises(UploadError):
            await cloudinary().upload(PHOTO, folder="tourist-feedback")


def make_feedback() -> Feedback:
    return Feedback(
        name="Alice",
        comment="Lovely",
        latitude=7.8,
        longitude=80.5,
        status=FeedbackStatus.PENDING,
    )


def test_build_notifier():
    assert isinstance(build_notifier(Settings()), NullNotifier)
    notifier = build_notifier(Settings(sendgrid_api_key="SG.x", notify_from_email="ops@example.org"))
    assert isinstance(notifier, SendGridNotifier)
    assert notifier.to_email == "ops@example.org"


@pytest.mark.asyncio
async def test_sendgrid_notifier_sends_mail():
    notifier = SendGridNotifier("SG.x", "ops@example.org", "team@example.org")
    with patch.object(notifier.client, "send", return_value=MagicMock(status_code=202)) as send:
        await notifier.feedback_submitted(make_feedback())

    message = send.call_args.args[0]
    assert message.subject.subject == "New Tourist Feedback Submitted"


@pytest.mark.asyncio
async def test_sendgrid_notifier_raises_on_refusal():
    notifier = SendGridNotifier("SG.x", "ops@example.org", "team@example.org")
    with patch.object(notifier.client, "send", return_value=MagicMock(status_code=403)):
        with pytest.raises(NotificationError):
            await notifier.feedback_submitted(make_feedback())


def test_collaborators_satisfy_their_protocols():
    for host in (NullImageHost(), cloudinary(), FakeImageHost()):
        assert isinstance(host, ImageHost)
    for notifier in (NullNotifier(), SendGridNotifier("SG.x", "a@example.org", "b@example.org"), RecordingNotifier()):
        assert isinstance(notifier, Notifier)
