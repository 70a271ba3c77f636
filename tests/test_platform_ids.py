import pytest

from preview_api.utils.platform_ids import (
    extract_dailymotion_video_id,
    extract_odysee_channel,
    extract_odysee_video_id,
    extract_rumble_video_id,
    extract_telegram_post,
    extract_tweet_id,
    extract_vimeo_video_id,
    extract_youtube_video_id,
)


@pytest.mark.parametrize(
    "url",
    [
        "https://www.youtube.com/watch?v=dQw4w9WgXcQ",
        "https://youtube.com/watch?feature=share&v=dQw4w9WgXcQ",
        "https://m.youtube.com/watch?v=dQw4w9WgXcQ&t=42",
        "https://youtu.be/dQw4w9WgXcQ?si=abc",
        "https://www.youtube.com/embed/dQw4w9WgXcQ",
        "https://www.youtube.com/shorts/dQw4w9WgXcQ",
        "https://www.youtube.com/live/dQw4w9WgXcQ",
        "https://www.youtube-nocookie.com/embed/dQw4w9WgXcQ",
    ],
)
def test_youtube_video_id(url):
    assert extract_youtube_video_id(url) == "dQw4w9WgXcQ"


@pytest.mark.parametrize(
    "url",
    [
        "https://www.youtube.com/",
        "https://www.youtube.com/@somechannel",
        "https://www.youtube.com/watch?v=<x>",
        "https://example.com/watch?v=dQw4w9WgXcQ",
    ],
)
def test_youtube_without_video_id(url):
    assert extract_youtube_video_id(url) is None


def test_tweet_id_and_username():
    assert extract_tweet_id("https://x.com/jack/status/20") == ("20", "jack")
    assert extract_tweet_id("https://twitter.com/jack/statuses/20?s=1") == ("20", "jack")
    assert extract_tweet_id("https://x.com/i/web/status/1234567890") == ("1234567890", None)
    assert extract_tweet_id("https://x.com/i/status/1234567890") == ("1234567890", None)


def test_tweet_id_missing_keeps_profile_username():
    assert extract_tweet_id("https://x.com/jack") == (None, "jack")
    assert extract_tweet_id("https://x.com/home") == (None, None)


def test_rumble_video_id():
    assert extract_rumble_video_id("https://rumble.com/v4abcde-some-title.html") == "4abcde"
    assert extract_rumble_video_id("https://rumble.com/embed/v2xyz/?pub=4") == "v2xyz"
    assert extract_rumble_video_id("https://rumble.com/c/SomeChannel") is None


def test_odysee_ids():
    url = "https://odysee.com/@SomeChannel:7/my-video-title:3"
    assert extract_odysee_video_id(url) == "my-video-title"
    assert extract_odysee_channel(url) == "@SomeChannel"

    assert extract_odysee_video_id("https://odysee.com/$/embed/my-video/abc123") == "my-video"
    assert extract_odysee_video_id("https://odysee.com/standalone-video:f") == "standalone-video"
    assert extract_odysee_channel("https://odysee.com/standalone-video:f") is None


def test_telegram_post():
    assert extract_telegram_post("https://t.me/durov/123") == ("durov", "123")
    assert extract_telegram_post("https://t.me/s/durov/123") == ("durov", "123")
    assert extract_telegram_post("https://t.me/durov") == ("durov", None)
    assert extract_telegram_post("https://t.me/") == (None, None)


def test_vimeo_and_dailymotion_ids():
    assert extract_vimeo_video_id("https://vimeo.com/76979871") == "76979871"
    assert extract_vimeo_video_id("https://vimeo.com/channels/staffpicks/76979871") == "76979871"
    assert extract_dailymotion_video_id("https://www.dailymotion.com/video/x8abc12_some-title") == "x8abc12"
    assert extract_dailymotion_video_id("https://dai.ly/x8abc12") == "x8abc12"
