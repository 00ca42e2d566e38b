from logdrain.mem.tokenizer import is_number, signature, tokenize


def test_tokenize_splits_on_all_delimiters():
    toks = list(tokenize("  user=bob, ip: 10.0.0.1 port=22  "))
    assert toks == ["user", "bob", "ip", "10.0.0.1", "port", "22"]


def test_tokenize_drops_empty_fragments():
    assert list(tokenize("a,,b==c::d  e")) == ["a", "b", "c", "d", "e"]


def test_tokenize_empty_and_delimiter_only_lines():
    assert list(tokenize("")) == []
    assert list(tokenize("   ")) == []
    assert list(tokenize(" =,: ,= ")) == []


def test_tokenize_keeps_tabs_inside_tokens():
    # tab is whitespace for the outer strip only, not a delimiter
    assert list(tokenize("\ta\tb c\t")) == ["a\tb", "c"]


def test_tokenize_is_restartable():
    line = "x y z"
    assert list(tokenize(line)) == list(tokenize(line))


def test_tokenize_custom_delimiters():
    assert list(tokenize("a|b c", delimiters=("|",))) == ["a", "b c"]


def test_is_number_accepts_float_forms():
    for tok in ["0", "42", "-7", "+3.5", "1.", ".5", "1e5", "2.5E-3", "inf", "-Infinity", "NaN"]:
        assert is_number(tok), tok


def test_is_number_rejects_non_numbers():
    for tok in ["", ".", "e5", "1e", "1_000", "0x10", "10.0.0.1", "abc", "3\t", "١٢"]:
        assert not is_number(tok), tok


def test_signature_collapses_numbers():
    assert signature("081109") == "*"
    assert signature("-0.5") == "*"
    assert signature("INFO") == "INFO"
    assert signature("blk_123") == "blk_123"
