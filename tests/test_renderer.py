"""
Renderer tests

Tests the full pipeline: Markdown source → events → slide/highlight
transform → HTML body, plus inlined assets and document assembly.
"""

import re

import pytest

from deck.lib.errors import MinificationError
from deck.lib.renderer import Renderer, document_render, SLIDE_OPEN, SLIDE_CLOSE
from deck.models.render import RenderOptions


@pytest.fixture(scope="module")
def renderer():
    return Renderer()


def slides_split(body):
    """Contents of each slide container, in order"""
    pattern = re.escape(SLIDE_OPEN) + r"(.*?)" + re.escape(SLIDE_CLOSE)
    return re.findall(pattern, body, flags=re.DOTALL)


class TestSlideSegmentation:
    """Thematic breaks split the body into slide containers"""

    def test_two_slides(self, renderer):
        """Scenario: one break, two headings"""
        output = renderer.render("# A\n\n---\n\n# B")

        slides = slides_split(output.body)
        assert len(slides) == 2
        assert "<h1>A</h1>" in slides[0]
        assert "<h1>B</h1>" in slides[1]
        assert output.slide_count == 2

    def test_no_break_is_one_slide(self, renderer):
        """A document without breaks is a single slide"""
        output = renderer.render("Just a paragraph.")

        assert output.body.count('<div class="slide">') == 1
        assert output.body.startswith(SLIDE_OPEN)
        assert output.body.endswith(SLIDE_CLOSE)
        assert "<p>Just a paragraph.</p>" in output.body

    def test_empty_document(self, renderer):
        """Empty input still yields one well-formed slide"""
        output = renderer.render("")

        assert output.body == SLIDE_OPEN + SLIDE_CLOSE
        assert output.slide_count == 1

    @pytest.mark.parametrize("breaks", [1, 2, 5])
    def test_n_breaks_give_n_plus_one_slides(self, renderer, breaks):
        """Slide count is number of breaks plus one, containers balanced"""
        source = "\n\n---\n\n".join(f"slide {i}" for i in range(breaks + 1))
        output = renderer.render(source)

        assert output.body.count('<div class="slide">') == breaks + 1
        assert output.body.count("<div") == output.body.count("</div>")
        assert output.slide_count == breaks + 1

    def test_consecutive_breaks_are_not_collapsed(self, renderer):
        """Back-to-back breaks produce an empty slide"""
        output = renderer.render("A\n\n---\n\n---\n\nB")

        slides = slides_split(output.body)
        assert len(slides) == 3
        assert slides[1] == ""

    def test_leading_break(self, renderer):
        """A break before any content leaves the first slide empty"""
        output = renderer.render("---\n\n# A")

        slides = slides_split(output.body)
        assert slides[0] == ""
        assert "<h1>A</h1>" in slides[1]

    def test_standard_markdown_passes_through(self, renderer):
        """Emphasis, lists, links and tables use the standard renderer"""
        source = (
            "Some *em* and **strong** text with a [link](http://x.y).\n\n"
            "- one\n- two\n\n"
            "| a | b |\n|---|---|\n| 1 | 2 |\n"
        )
        body = renderer.render(source).body

        assert "<em>em</em>" in body
        assert "<strong>strong</strong>" in body
        assert '<a href="http://x.y">link</a>' in body
        assert "<li>one</li>" in body
        assert "<table>" in body
        assert "<td>1</td>" in body

    def test_reference_links_resolve_across_slides(self, renderer):
        """Link reference definitions apply to the whole document"""
        source = "[home][h]\n\n---\n\n[h]: http://example.org\n"
        body = renderer.render(source).body

        assert '<a href="http://example.org">home</a>' in body


class TestCodeHighlighting:
    """Fenced code blocks are highlighted with the active theme"""

    def test_known_language_is_highlighted(self, renderer):
        """Keywords are wrapped in inline-styled spans"""
        body = renderer.render("```python\ndef f():\n    return 1\n```").body

        assert '<pre style="background-color:#2b303b;">' in body
        assert '<span style="color:#b48ead;">def</span>' in body
        assert '<span style="color:#b48ead;">return</span>' in body
        assert body.count("</pre>") == 1

    def test_every_line_is_wrapped(self, renderer):
        """No raw text is left between spans of a highlighted block"""
        body = renderer.render("```rust\nfn main() {\n    let x = 1;\n}\n```").body

        inner = body.split("\n", 1)[1].rsplit("</pre>", 1)[0]
        outside_spans = re.sub(r'<span style="[^"]*">.*?</span>', "", inner, flags=re.DOTALL)
        assert outside_spans == ""
        assert "fn" in inner and "let" in inner

    def test_no_background_per_span(self, renderer):
        """Spans never carry a background colour"""
        body = renderer.render("```python\nx = 'a'\n```").body

        assert "background-color" not in body.split("\n", 1)[1]

    def test_unknown_language_is_plain(self, renderer):
        """Unrecognized tags render the text verbatim, escaped"""
        body = renderer.render("```nosuchlang\nplain <b> text\n```").body

        assert "plain &lt;b&gt; text\n</pre>" in body
        assert "<span" not in body

    def test_indented_code_block_is_plain(self, renderer):
        """Indented blocks have no language and are not highlighted"""
        body = renderer.render("para\n\n    indented code\n").body

        assert "indented code\n</pre>" in body
        assert "<span" not in body

    def test_language_by_extension(self, renderer):
        """Language tokens also resolve as file extensions"""
        body = renderer.render("```py\nimport os\n```").body

        assert "<span" in body

    def test_highlighting_ends_with_block(self, renderer):
        """Text after a code block is not highlighted"""
        body = renderer.render("```python\npass\n```\n\nafter <the> block").body

        assert "<p>after &lt;the&gt; block</p>" in body

    def test_thematic_break_inside_fence_is_code(self, renderer):
        """--- inside a fence does not split slides"""
        output = renderer.render("```\n---\n```")

        assert output.slide_count == 1


class TestAssets:
    """Inlined CSS/JS"""

    def test_builtin_assets_present(self, renderer):
        """Style and script are minified built-ins"""
        output = renderer.render("# A")

        assert ".slide" in output.style
        assert "\n\n" not in output.style
        assert "addEventListener" in output.script

    def test_custom_css_appended_after_builtin(self, renderer):
        """Custom rules come last"""
        output = renderer.render("# A", css="h1{color:red}")

        assert output.style.endswith("h1{color:red}")
        assert output.style.index(".slide") < output.style.index("h1{color:red}")

    def test_custom_js_appended_after_builtin(self, renderer):
        """Custom script comes last"""
        output = renderer.render("# A", js="console.log('custom');")

        assert output.script.endswith("console.log('custom');")
        assert output.script.index("addEventListener") < output.script.index("console.log('custom')")

    def test_malformed_css_fails(self, renderer):
        """Minification failure surfaces as MinificationError"""
        with pytest.raises(MinificationError):
            renderer.render("# A", css="h1{color:red}}")


class TestDocument:
    """Output document assembly"""

    def test_idempotent(self, renderer):
        """Same input gives byte-identical output"""
        source = "# A\n\n```python\nx = 1\n```\n\n---\n\n# B"
        first = renderer.render(source, "p{margin:0}", "var a=1;").document_build()
        second = renderer.render(source, "p{margin:0}", "var a=1;").document_build()

        assert first == second

    def test_title_passes_through(self):
        """Title lands in <title> untouched"""
        output = Renderer(RenderOptions(title="My Talk")).render("# A")

        assert output.title == "My Talk"
        assert "<title>My Talk</title>" in str(output)

    def test_no_title(self, renderer):
        """No title, no <title> element"""
        assert "<title>" not in renderer.render("# A").document_build()

    def test_document_shape(self, renderer):
        """Head holds charset, style and script; body holds slides"""
        document = renderer.render("# A").document_build()

        assert document.startswith('<html><head><meta charset="utf-8">')
        assert document.index("<style>") < document.index("<script")
        assert document.index("</head>") < document.index("<body>")
        assert document.endswith("</body></html>")

    def test_document_render(self):
        """One-shot render entry point"""
        html = document_render("# A\n\n---\n\n# B", title="Demo", theme="monokai")

        assert html.count('<div class="slide">') == 2
        assert "<title>Demo</title>" in html
