import httpx
import pytest

from conftest import page
from preview_api.common.errors import GenericFetchError
from preview_api.models.link_preview_data import Platform

TWEET_URL = "https://x.com/jack/status/20"

TWEET_PAYLOAD = {
    "data": {
        "id": "20",
        "text": "just setting up my twttr",
        "author_id": "12",
        "created_at": "2006-03-21T20:50:14.000Z",
        "public_metrics": {"like_count": 100, "impression_count": 5000},
        "attachments": {"media_keys": ["3_1"]},
    },
    "includes": {
        "users": [
            {
                "id": "12",
                "name": "jack",
                "username": "jack",
                "profile_image_url": "https://pbs.twimg.com/profile.jpg",
            }
        ],
        "media": [
            {
                "media_key": "3_1",
                "type": "video",
                "preview_image_url": "https://pbs.twimg.com/preview.jpg",
            }
        ],
    },
}

TWEET_OEMBED = {
    "url": TWEET_URL,
    "author_name": "jack",
    "author_url": "https://twitter.com/jack",
    "provider_name": "Twitter",
    "html": (
        '<blockquote class="twitter-tweet"><p lang="en" dir="ltr">just setting up my twttr</p>'
        "&mdash; jack (@jack) "
        '<a href="https://twitter.com/jack/status/20">March 21, 2006</a></blockquote>'
    ),
}


class TestXResolver:
    async def test_api_v2_first(self, upstream, service_factory):
        upstream.on_json("api.twitter.com", TWEET_PAYLOAD)
        resolver = service_factory(x_bearer_token="token").resolvers[Platform.X]

        metadata = await resolver.resolve(TWEET_URL)

        assert metadata.title == "jack (@jack)"
        assert metadata.description == "just setting up my twttr"
        assert metadata.image_url == "https://pbs.twimg.com/preview.jpg"
        assert metadata.has_video_media
        assert metadata.like_count == 100
        assert metadata.view_count == 5000
        assert not metadata.is_stub
        assert upstream.count("publish.twitter.com") == 0

        request = upstream.calls[0]
        assert request.headers["Authorization"] == "Bearer token"

    async def test_api_skipped_without_token(self, upstream, service):
        upstream.on_json("publish.twitter.com", TWEET_OEMBED)

        metadata = await service.resolvers[Platform.X].resolve(TWEET_URL)

        assert upstream.count("api.twitter.com") == 0
        assert metadata.title == "Tweet by @jack"
        assert metadata.description == "just setting up my twttr"
        assert metadata.published_at == "March 21, 2006"

    async def test_falls_through_to_oembed_when_api_fails(self, upstream, service_factory):
        upstream.on_json("api.twitter.com", {"title": "Unauthorized"}, status_code=401)
        upstream.on_json("publish.twitter.com", TWEET_OEMBED)
        resolver = service_factory(x_bearer_token="bad-token").resolvers[Platform.X]

        metadata = await resolver.resolve(TWEET_URL)

        assert upstream.count("api.twitter.com") == 1
        assert metadata.title == "Tweet by @jack"

    async def test_scrape_when_oembed_fails(self, upstream, service):
        upstream.on_json("publish.twitter.com", {}, status_code=404)
        upstream.on_html(
            "x.com",
            page(title="jack on X", description="just setting up my twttr", image=None),
        )

        metadata = await service.resolvers[Platform.X].resolve(TWEET_URL)

        assert metadata.title == "jack on X"
        assert not metadata.is_stub
        scrape = [call for call in upstream.calls if call.url.host == "x.com"][0]
        assert "Chrome" in scrape.headers["User-Agent"]

    async def test_shell_page_is_not_a_result(self, upstream, service):
        upstream.on_html("x.com", "<html><head><title>X</title></head></html>")

        metadata = await service.resolvers[Platform.X].resolve(TWEET_URL)

        assert metadata.is_stub
        assert metadata.title == "Tweet by @jack"
        assert metadata.author == "jack"

    async def test_stub_for_status_link_without_username(self, service):
        metadata = await service.resolvers[Platform.X].resolve("https://x.com/i/web/status/20")

        assert metadata.is_stub
        assert metadata.title == "Post on X"

    async def test_network_errors_become_stub(self, upstream, service):
        def boom(request):
            raise httpx.ConnectError("connection refused", request=request)

        upstream.on("publish.twitter.com", boom)
        upstream.on("x.com", boom)

        metadata = await service.resolvers[Platform.X].resolve(TWEET_URL)

        assert metadata.is_stub

    async def test_platform_cache_reused(self, upstream, service):
        upstream.on_json("publish.twitter.com", TWEET_OEMBED)
        resolver = service.resolvers[Platform.X]

        await resolver.resolve(TWEET_URL)
        await resolver.resolve(TWEET_URL)

        assert upstream.count("publish.twitter.com") == 1


def rumble_handler(oembed=None, html=None):
    def handle(request: httpx.Request) -> httpx.Response:
        if request.url.path.startswith("/api/Media/oembed.json"):
            if oembed is None:
                return httpx.Response(500)
            return httpx.Response(200, json=oembed)
        if html is None:
            return httpx.Response(403)
        return httpx.Response(200, text=html)

    return handle


RUMBLE_URL = "https://rumble.com/v4abcde-some-title.html"


class TestRumbleResolver:
    async def test_oembed(self, upstream, service):
        upstream.on(
            "rumble.com",
            rumble_handler(
                oembed={
                    "title": "Some title",
                    "author_name": "Some channel",
                    "thumbnail_url": "https://sp.rmbl.ws/thumb.jpg",
                    "html": '<iframe src="https://rumble.com/embed/v2xyz/?pub=4" width="640"></iframe>',
                }
            ),
        )

        metadata = await service.resolvers[Platform.RUMBLE].resolve(RUMBLE_URL)

        assert metadata.title == "Some title"
        assert metadata.embed_url == "https://rumble.com/embed/v2xyz/?pub=4"
        assert metadata.channel == "Some channel"
        assert metadata.image_url == "https://sp.rmbl.ws/thumb.jpg"
        oembed_call = upstream.calls[0]
        assert oembed_call.url.params["url"] == RUMBLE_URL

    async def test_scrape_ignores_foreign_embeds(self, upstream, service):
        upstream.on(
            "rumble.com",
            rumble_handler(
                html=page(
                    title="Some title",
                    body='<iframe src="https://www.youtube.com/embed/dQw4w9WgXcQ"></iframe>',
                    extra_head='<script>{"embedUrl":"https://www.youtube.com/embed/dQw4w9WgXcQ"}</script>',
                )
            ),
        )

        metadata = await service.resolvers[Platform.RUMBLE].resolve(RUMBLE_URL)

        assert metadata.title == "Some title"
        assert metadata.embed_url is None
        assert metadata.has_video_media

    async def test_stub_has_no_embed(self, upstream, service):
        upstream.on("rumble.com", rumble_handler())

        metadata = await service.resolvers[Platform.RUMBLE].resolve(RUMBLE_URL)

        assert metadata.is_stub
        assert metadata.title == "Rumble video 4abcde"
        assert metadata.embed_url is None
        assert metadata.has_video_media
        assert upstream.count("rumble.com") == 2


ODYSEE_URL = "https://odysee.com/@SomeChannel:7/my-video:3"


class TestOdyseeResolver:
    async def test_scrape_sets_channel(self, upstream, service):
        upstream.on_html("odysee.com", page(title="My video"))

        metadata = await service.resolvers[Platform.ODYSEE].resolve(ODYSEE_URL)

        assert metadata.title == "My video"
        assert metadata.channel == "@SomeChannel"
        assert metadata.embed_url is None
        assert metadata.has_video_media
        assert upstream.calls[0].headers["User-Agent"].startswith("Mozilla/5.0 (compatible")

    async def test_scrape_picks_up_page_embed(self, upstream, service):
        upstream.on_html(
            "odysee.com",
            page(
                title="My video",
                body='<iframe src="https://odysee.com/$/embed/my-video/abc123"></iframe>',
            ),
        )

        metadata = await service.resolvers[Platform.ODYSEE].resolve(ODYSEE_URL)

        assert metadata.embed_url == "https://odysee.com/$/embed/my-video/abc123"

    async def test_stub(self, service):
        metadata = await service.resolvers[Platform.ODYSEE].resolve(ODYSEE_URL)

        assert metadata.is_stub
        assert metadata.title == "Odysee video by @SomeChannel"


class TestTelegramResolver:
    async def test_scrape(self, upstream, service):
        upstream.on_html(
            "t.me",
            page(title="Pavel Durov", description="A message from the channel", image=None),
        )

        metadata = await service.resolvers[Platform.TELEGRAM].resolve("https://t.me/durov/123")

        assert metadata.title == "Pavel Durov"
        assert metadata.channel == "durov"
        assert metadata.embed_url is None
        assert not metadata.has_video_media

    async def test_scrape_keeps_video_tags(self, upstream, service):
        upstream.on_html(
            "t.me",
            page(
                title="Pavel Durov",
                description="A clip",
                extra_head='<meta name="twitter:player" content="https://t.me/durov/123?embed=1">',
            ),
        )

        metadata = await service.resolvers[Platform.TELEGRAM].resolve("https://t.me/durov/123")

        assert metadata.video_tags == {"twitter:player": "https://t.me/durov/123?embed=1"}
        assert metadata.embed_url is None

    async def test_stub(self, service):
        metadata = await service.resolvers[Platform.TELEGRAM].resolve("https://t.me/durov/123")

        assert metadata.is_stub
        assert metadata.title == "Telegram post from @durov"


YOUTUBE_URL = "https://www.youtube.com/watch?v=dQw4w9WgXcQ"

YOUTUBE_PAYLOAD = {
    "items": [
        {
            "id": "dQw4w9WgXcQ",
            "snippet": {
                "title": "Never Gonna Give You Up",
                "description": "The official video",
                "channelTitle": "Rick Astley",
                "publishedAt": "2009-10-25T06:57:33Z",
                "thumbnails": {
                    "default": {"url": "https://i.ytimg.com/vi/dQw4w9WgXcQ/default.jpg"},
                    "high": {"url": "https://i.ytimg.com/vi/dQw4w9WgXcQ/hqdefault.jpg"},
                },
            },
            "statistics": {"viewCount": "1500000000", "likeCount": "17000000"},
        }
    ]
}


class TestYouTubeResolver:
    async def test_data_api(self, upstream, service_factory):
        upstream.on_json("www.googleapis.com", YOUTUBE_PAYLOAD)
        resolver = service_factory(youtube_api_key="key").resolvers[Platform.YOUTUBE]

        metadata = await resolver.resolve(YOUTUBE_URL)

        assert metadata.title == "Never Gonna Give You Up"
        assert metadata.channel == "Rick Astley"
        assert metadata.view_count == 1500000000
        assert metadata.like_count == 17000000
        assert metadata.image_url == "https://i.ytimg.com/vi/dQw4w9WgXcQ/hqdefault.jpg"
        assert upstream.count("www.youtube.com") == 0

        params = upstream.calls[0].url.params
        assert params["id"] == "dQw4w9WgXcQ"
        assert params["part"] == "snippet,statistics"

    async def test_empty_api_result_uses_page(self, upstream, service_factory):
        upstream.on_json("www.googleapis.com", {"items": []})
        upstream.on_html("www.youtube.com", page(title="Page title"))
        resolver = service_factory(youtube_api_key="key").resolvers[Platform.YOUTUBE]

        metadata = await resolver.resolve(YOUTUBE_URL)

        assert metadata.title == "Page title"
        assert upstream.count("www.youtube.com") == 1

    async def test_without_key_goes_to_page(self, upstream, service):
        upstream.on_html("www.youtube.com", page(title="Page title"))

        metadata = await service.resolvers[Platform.YOUTUBE].resolve(YOUTUBE_URL)

        assert metadata.title == "Page title"
        assert upstream.count("www.googleapis.com") == 0

    async def test_page_failure_is_an_error(self, upstream, service):
        upstream.on_html("www.youtube.com", "unavailable", status_code=503)

        with pytest.raises(GenericFetchError):
            await service.resolvers[Platform.YOUTUBE].resolve(YOUTUBE_URL)
