"""
Tests for shell-word splitting and command formatting.
"""

from hashbang.core.parser import format_command, split_words


class TestSplitWords:
    """Tests for quote-aware splitting."""

    def test_simple(self):
        """Whitespace separates words."""
        assert split_words("-u -W ignore") == ["-u", "-W", "ignore"]

    def test_single_quotes(self):
        """Single-quoted text is one word."""
        assert split_words("-c 'print(1)'") == ["-c", "print(1)"]

    def test_double_quotes(self):
        """Double-quoted text is one word."""
        assert split_words('--name "two words" x') == ["--name", "two words", "x"]

    def test_placeholders_survive(self):
        """Placeholder tokens come through unchanged."""
        assert split_words("run @{script} @{passed_args}") == ["run", "@{script}", "@{passed_args}"]

    def test_fallback_placeholder_survives(self):
        """The $script fallback placeholder is not expanded."""
        assert split_words("-n $script") == ["-n", "$script"]

    def test_empty(self):
        """Empty and blank strings have no words."""
        assert split_words("") == []
        assert split_words("   ") == []
        assert split_words(None) == []

    def test_surrounding_whitespace(self):
        """Leading and trailing whitespace is ignored."""
        assert split_words("  -e  \n") == ["-e"]

    def test_semicolon_inside_word(self):
        """A semicolon is part of the word, not a command separator."""
        assert split_words("--config=a;b @{script}") == ["--config=a;b", "@{script}"]

    def test_redirect_inside_word(self):
        """Redirect characters stay inside their word."""
        assert split_words("--out=a>b x") == ["--out=a>b", "x"]
        assert split_words("2>&1") == ["2>&1"]

    def test_pipe_inside_word(self):
        """A pipe does not split a word."""
        assert split_words("--filter=a|b") == ["--filter=a|b"]

    def test_embedded_newline(self):
        """Newlines separate words like any other whitespace."""
        assert split_words("-u\n@{script}") == ["-u", "@{script}"]

    def test_quoted_operator(self):
        """A quoted operator is an ordinary word."""
        assert split_words("-e ';' x") == ["-e", ";", "x"]


class TestFormatCommand:
    """Tests for rendering argv in the log."""

    def test_plain(self):
        assert format_command(["python3", "-u", "/tmp/a.py"]) == "python3 -u /tmp/a.py"

    def test_quotes_spaces(self):
        assert format_command(["python3", "/tmp/my script.py"]) == "python3 '/tmp/my script.py'"

    def test_empty_word(self):
        assert format_command(["tool", ""]) == "tool ''"

    def test_embedded_quote(self):
        assert format_command(["it's"]) == "'it'\"'\"'s'"
