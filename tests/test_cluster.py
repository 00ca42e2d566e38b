from logdrain.mem.cluster import LogCluster, simseq


def test_simseq_counts_aligned_equal_tokens():
    assert simseq(["a", "b", "c"], ["a", "x", "c"]) == 2
    assert simseq(["a", "b"], ["b", "a"]) == 0


def test_simseq_wildcard_is_literal():
    assert simseq(["a", "b"], ["a", "*"]) == 1
    assert simseq(["a", "*"], ["a", "*"]) == 2


def test_first_line_creates_template():
    c = LogCluster(length=3)
    out = c.process(["a", "b", "c"], new_id=5)

    assert out.template == 5
    assert out.tokens == ["a", "b", "c"]
    assert out.parameters == []
    assert len(c.templates) == 1
    assert c.templates[0].count == 1


def test_exactly_half_updates():
    c = LogCluster(length=4)
    c.process(["a", "b", "c", "d"], new_id=1)

    out = c.process(["a", "b", "x", "y"], new_id=2)

    assert out.template == 1
    assert out.tokens == ["a", "b", "*", "*"]
    assert out.parameters == ["x", "y"]
    assert c.templates[0].count == 2
    assert len(c.templates) == 1


def test_below_half_creates_new():
    c = LogCluster(length=5)
    c.process(["a", "b", "c", "d", "e"], new_id=1)

    # 2/5 = 0.4
    out = c.process(["a", "b", "x", "y", "z"], new_id=2)

    assert out.template == 2
    assert out.tokens == ["a", "b", "x", "y", "z"]
    assert out.parameters == []
    assert len(c.templates) == 2
    assert c.templates[0].tokens == ["a", "b", "c", "d", "e"]


def test_wildcards_never_revert():
    c = LogCluster(length=3)
    c.process(["A", "A", "A"], new_id=1)
    c.process(["A", "B", "A"], new_id=2)

    out = c.process(["A", "A", "A"], new_id=2)

    assert out.template == 1
    assert out.tokens == ["A", "*", "A"]
    # earlier wildcard still yields a parameter even though this line matched the old literal
    assert out.parameters == ["A"]
    assert c.templates[0].count == 3


def test_tie_keeps_first_template():
    c = LogCluster(length=4)
    c.process(["a", "b", "c", "d"], new_id=1)
    c.process(["w", "x", "y", "z"], new_id=2)

    # two matches against each template
    out = c.process(["a", "b", "y", "z"], new_id=3)

    assert out.template == 1
    assert c.templates[1].count == 1


def test_output_tokens_are_a_copy():
    c = LogCluster(length=2)
    out = c.process(["a", "b"], new_id=1)
    out.tokens[0] = "mutated"

    assert c.templates[0].tokens == ["a", "b"]


def test_custom_threshold():
    c = LogCluster(length=4)
    c.process(["a", "b", "c", "d"], new_id=1)

    out = c.process(["a", "b", "c", "x"], new_id=2, sim_threshold=0.8)

    assert out.template == 2
