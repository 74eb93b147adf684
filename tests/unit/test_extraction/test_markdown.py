"""Unit tests for Markdown conversion."""

from websearch.extraction.markdown import to_markdown


class TestToMarkdown:
    """Tests for to_markdown."""

    def test_empty_input(self):
        """Test that blank fragments convert to an empty string."""
        assert to_markdown("") == ""
        assert to_markdown("  \n ") == ""

    def test_headings(self):
        """Test that headings keep their level."""
        markdown = to_markdown("<h1>Title</h1><h2>Section</h2><p>Body text.</p>")

        assert "# Title" in markdown
        assert "## Section" in markdown
        assert "Body text." in markdown

    def test_links(self):
        """Test that links keep their target."""
        markdown = to_markdown('<p>See <a href="https://docs.python.org/3/">the docs</a>.</p>')
        assert "[the docs](https://docs.python.org/3/)" in markdown

    def test_emphasis(self):
        """Test that strong and emphasized text is kept."""
        markdown = to_markdown("<p>This is <strong>important</strong> and <em>subtle</em>.</p>")

        assert "**important**" in markdown
        assert "_subtle_" in markdown

    def test_lists(self):
        """Test that list items become Markdown bullets."""
        markdown = to_markdown("<ul><li>first</li><li>second</li></ul>")

        assert "* first" in markdown
        assert "* second" in markdown

    def test_images_dropped(self):
        """Test that images do not appear in the output."""
        markdown = to_markdown('<p>Text</p><img src="/photo.png" alt="photo">')

        assert "photo.png" not in markdown
        assert "Text" in markdown

    def test_no_long_line_wrapping(self):
        """Test that long paragraphs stay on one line."""
        sentence = " ".join(["word"] * 60)
        assert to_markdown(f"<p>{sentence}</p>") == sentence

    def test_collapses_blank_lines(self):
        """Test that runs of blank lines are collapsed and ends trimmed."""
        markdown = to_markdown("<p>One</p><br><br><br><p>Two</p>")

        assert "\n\n\n" not in markdown
        assert markdown.startswith("One")
        assert markdown.endswith("Two")

    def test_deterministic(self):
        """Test that repeated conversion gives the same result."""
        html = "<h2>Title</h2><p>Some <em>text</em> with a <a href='https://a.example'>link</a>.</p>"
        assert to_markdown(html) == to_markdown(html)
