"""
Preview server tests

Drives the FastAPI app with TestClient: slide rendering on demand, the
generic error page, static assets and the push channel.
"""

import asyncio
import time

import pytest
from fastapi.testclient import TestClient

from deck.lib.connections import ConnectionRegistry
from deck.lib.errors import DeckIOError, ThemeNotFoundError
from deck.lib.renderer import Renderer
from deck.lib.server import ERROR_PAGE, app_create, serve
from deck.models.server import ServerConfig, WatchTargets


def wait_until(predicate, timeout=2.0):
    deadline = time.monotonic() + timeout
    while not predicate():
        if time.monotonic() > deadline:
            return False
        time.sleep(0.01)
    return True


@pytest.fixture(scope="module")
def renderer():
    return Renderer()


@pytest.fixture
def deck_dir(tmp_path):
    (tmp_path / "slides.md").write_text("# A\n\n---\n\n# B\n\n![pic](pic.png)\n")
    (tmp_path / "pic.png").write_bytes(b"\x89PNG fake")
    (tmp_path / "extra.css").write_text("h2{color:blue}")
    (tmp_path / "extra.js").write_text("var extra = 1;")
    return tmp_path


@pytest.fixture
def registry():
    return ConnectionRegistry()


@pytest.fixture
def client(renderer, deck_dir, registry):
    targets = WatchTargets(input=(deck_dir / "slides.md").resolve())
    return TestClient(app_create(renderer, targets, registry))


class TestSlidesEndpoint:
    """GET /slides"""

    def test_renders_document(self, client):
        """Slides are rendered from the input file"""
        response = client.get("/slides")

        assert response.status_code == 200
        assert response.headers["content-type"].startswith("text/html")
        assert response.text.count('<div class="slide">') == 2
        assert "<h1>A</h1>" in response.text
        assert "<h1>B</h1>" in response.text

    def test_edits_visible_without_restart(self, client, deck_dir):
        """Every request is a fresh render"""
        client.get("/slides")
        (deck_dir / "slides.md").write_text("# Changed\n")

        assert "<h1>Changed</h1>" in client.get("/slides").text

    def test_custom_assets_reread(self, renderer, deck_dir, registry):
        """Custom CSS/JS files are read on every request"""
        targets = WatchTargets(
            input=(deck_dir / "slides.md").resolve(),
            css=(deck_dir / "extra.css").resolve(),
            js=(deck_dir / "extra.js").resolve(),
        )
        client = TestClient(app_create(renderer, targets, registry))

        assert "h2{color:blue}" in client.get("/slides").text
        (deck_dir / "extra.css").write_text("h2{color:green}")
        text = client.get("/slides").text
        assert "h2{color:green}" in text
        assert "var extra=1;" in text

    def test_deleted_input_gives_error_page(self, client, deck_dir):
        """A missing input file is a 500 with the generic page"""
        (deck_dir / "slides.md").unlink()
        response = client.get("/slides")

        assert response.status_code == 500
        assert response.text == ERROR_PAGE
        assert "slides.md" not in response.text

    def test_non_utf8_input_gives_error_page(self, client, deck_dir):
        """Undecodable input is a read failure, not a crash"""
        (deck_dir / "slides.md").write_bytes(b"# caf\xe9\n")
        response = client.get("/slides")

        assert response.status_code == 500
        assert response.text == ERROR_PAGE

    def test_bad_custom_css_gives_error_page(self, renderer, deck_dir, registry):
        """Minification failures degrade to the error page"""
        (deck_dir / "extra.css").write_text("h2{color:blue}}")
        targets = WatchTargets(
            input=(deck_dir / "slides.md").resolve(),
            css=(deck_dir / "extra.css").resolve(),
        )
        client = TestClient(app_create(renderer, targets, registry))

        response = client.get("/slides")
        assert response.status_code == 500
        assert response.text == ERROR_PAGE


class TestStaticAssets:
    """Files next to the input document"""

    def test_serves_sibling_file(self, client):
        """Relative references in the deck resolve"""
        response = client.get("/pic.png")

        assert response.status_code == 200
        assert response.content == b"\x89PNG fake"

    def test_missing_file(self, client):
        """Unknown paths are 404"""
        assert client.get("/nope.png").status_code == 404


class TestPushChannel:
    """WS /ws"""

    def test_register_receive_unregister(self, client, registry):
        """A connection registers, receives reloads and unregisters on close"""
        with client:
            with client.websocket_connect("/ws") as websocket:
                assert wait_until(lambda: registry.connections_count() == 1)

                client.portal.call(registry.message_broadcast, '{"type":"reload"}')
                assert websocket.receive_json() == {"type": "reload"}

                websocket.send_text("ignored")
                client.portal.call(registry.message_broadcast, '{"type":"reload"}')
                assert websocket.receive_text() == '{"type":"reload"}'

            assert wait_until(lambda: registry.connections_count() == 0)

    def test_connections_get_distinct_ids(self, client, registry):
        """Two tabs are two registry entries"""
        with client:
            with client.websocket_connect("/ws"), client.websocket_connect("/ws"):
                assert wait_until(lambda: registry.connections_count() == 2)
                ids = registry.connectionIds_get()
                assert len(set(ids)) == 2


class TestStartup:
    """Fail-fast server startup"""

    def test_unknown_theme_aborts(self, deck_dir):
        """A bad theme stops startup before binding"""
        config = ServerConfig(input=deck_dir / "slides.md", theme="no-such-theme", port=0)

        with pytest.raises(ThemeNotFoundError):
            asyncio.run(serve(config))

    def test_unwatchable_file_aborts(self, deck_dir):
        """Watch mode with a missing CSS file stops startup"""
        config = ServerConfig(
            input=deck_dir / "slides.md", watch=True, css=deck_dir / "missing.css", port=0
        )

        with pytest.raises(DeckIOError):
            asyncio.run(serve(config))
