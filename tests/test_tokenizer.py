"""Tests for the whitespace tokenizer."""

from mysh.tokenizer import Word, is_any_operator, is_operator, tokenize


class TestTokenize:
    def test_collapses_runs_of_blanks(self) -> None:
        assert tokenize("  ls   -la  ") == ["ls", "-la"]

    def test_empty_and_blank_lines(self) -> None:
        assert tokenize("") == []
        assert tokenize("   ") == []
        assert tokenize("\t \n") == []

    def test_tabs_and_trailing_newline(self) -> None:
        assert tokenize("cat\tfile.txt\n") == ["cat", "file.txt"]

    def test_no_quoting(self) -> None:
        """Quotes are ordinary characters; blanks inside them still split."""
        assert tokenize('echo "a b"') == ["echo", '"a', 'b"']

    def test_operators_need_surrounding_blanks(self) -> None:
        assert tokenize("a | b > out") == ["a", "|", "b", ">", "out"]
        assert tokenize("a|b") == ["a|b"]


class TestOperators:
    def test_plain_token_is_operator(self) -> None:
        assert is_operator("|", "|")
        assert is_any_operator(">>")
        assert not is_any_operator("file")

    def test_expanded_word_is_never_operator(self) -> None:
        assert not is_operator(Word("|"), "|")
        assert not is_any_operator(Word(">"))
        assert Word("|") == "|"
