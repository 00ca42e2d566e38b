from logdrain.bench.datasets import toy_hdfs_log, toy_service_log
from logdrain.config import DrainConfig
from logdrain.mem.parser import DrainParser


def test_end_to_end_scenario():
    drain = DrainParser()

    out = drain.parse("A A A")
    assert out.template == 1
    assert out.tokens == ["A", "A", "A"]
    assert out.parameters == []

    out = drain.parse("A B A")
    assert out.template == 1
    assert out.tokens == ["A", "*", "A"]
    assert out.parameters == ["B"]
    assert drain.clusters[3]["A"].templates[0].count == 2

    out = drain.parse("q w e r t y")
    assert out.template == 2
    assert out.tokens == ["q", "w", "e", "r", "t", "y"]
    assert out.parameters == []

    assert drain.count_templates() == 2
    assert drain.next_id == 3


def test_blank_line_returns_none_and_keeps_state():
    drain = DrainParser()
    assert drain.parse("") is None
    assert drain.parse("  , = : ") is None
    assert drain.next_id == 1
    assert drain.clusters == {}


def test_lengths_are_isolated():
    drain = DrainParser()
    a = drain.parse("open file x")
    b = drain.parse("open file x y")

    assert a.template != b.template
    assert set(drain.clusters) == {3, 4}


def test_signatures_are_isolated():
    drain = DrainParser()
    a = drain.parse("GET /index 200")
    b = drain.parse("PUT /index 200")

    # 2/3 similar, but a different first token means a different cluster
    assert a.template == 1
    assert b.template == 2
    assert set(drain.clusters[3]) == {"GET", "PUT"}


def test_numeric_first_tokens_share_a_cluster():
    drain = DrainParser()
    a = drain.parse("081109 INFO started")
    b = drain.parse("081110 INFO started")

    assert set(drain.clusters[3]) == {"*"}
    assert a.template == b.template == 1
    assert b.tokens == ["*", "INFO", "started"]
    assert b.parameters == ["081110"]


def test_ids_are_unique_and_increasing():
    drain = DrainParser()
    created = []
    for ln in toy_hdfs_log(lines=500, seed=3):
        before = drain.next_id
        out = drain.parse(ln)
        if out.template == before:
            created.append(out.template)

    assert created == sorted(created)
    assert len(created) == len(set(created)) == drain.count_templates()

    ids = [t.id for _, _, t in drain.iter_templates()]
    assert len(ids) == len(set(ids))
    assert drain.next_id == max(ids) + 1


def test_parameters_follow_wildcards():
    drain = DrainParser()
    for ln in toy_service_log().splitlines():
        out = drain.parse(ln)
        if out is None:
            continue
        toks = ln.replace("=", " ").replace(",", " ").replace(":", " ").split()
        expected = [tok for tok, t in zip(toks, out.tokens) if t == "*"]
        assert out.parameters == expected


def test_count_templates_and_clusters():
    drain = DrainParser()
    for ln in toy_service_log().splitlines():
        drain.parse(ln)

    assert drain.count_templates() == sum(1 for _ in drain.iter_templates())
    assert drain.count_clusters() <= drain.count_templates()


def test_config_threshold_is_used():
    strict = DrainParser(config=DrainConfig(sim_threshold=1.0))
    strict.parse("A A A")
    out = strict.parse("A B A")

    assert out.template == 2
    assert strict.count_templates() == 2


def test_equality_ignores_config():
    a = DrainParser()
    b = DrainParser(config=DrainConfig(sim_threshold=0.9))
    a.parse("x y")
    b.parse("x y")

    assert a == b
