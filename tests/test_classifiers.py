import pytest

from preview_api.models.link_preview_data import Platform, ResolvedMetadata
from preview_api.services.platform_classifier import classify_platform
from preview_api.services.video_classifier import is_video, is_video_url


@pytest.mark.parametrize(
    "hostname, platform",
    [
        ("www.youtube.com", Platform.YOUTUBE),
        ("m.youtube.com", Platform.YOUTUBE),
        ("youtu.be", Platform.YOUTUBE),
        ("x.com", Platform.X),
        ("mobile.twitter.com", Platform.X),
        ("rumble.com", Platform.RUMBLE),
        ("odysee.com", Platform.ODYSEE),
        ("t.me", Platform.TELEGRAM),
        ("example.com", None),
        ("notyoutube.com", None),
        ("box.com", None),
        ("x.company.com", None),
    ],
)
def test_classify_platform(hostname, platform):
    assert classify_platform(hostname) == platform


def test_video_url_by_host_or_extension():
    assert is_video_url("https://vimeo.com/76979871")
    assert is_video_url("https://www.twitch.tv/somestreamer")
    assert is_video_url("https://cdn.example.com/clip.MP4")
    assert not is_video_url("https://example.com/article")


def test_video_from_metadata_signals():
    url = "https://example.com/article"

    assert not is_video(url, ResolvedMetadata())
    assert is_video(url, ResolvedMetadata(video_tags={"og:video": "https://example.com/v.mp4"}))
    assert is_video(url, ResolvedMetadata(has_video_media=True))
