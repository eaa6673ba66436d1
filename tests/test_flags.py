import pytest

from clusternet.flags import word_sep_normalize


def test_underscores_become_hyphens():
    assert word_sep_normalize("kube_config") == "kube-config"


def test_multiple_underscores():
    assert word_sep_normalize("cluster_reg_token") == "cluster-reg-token"


@pytest.mark.parametrize("name", ["version", "already-hyphenated", ""])
def test_names_without_underscores_unchanged(name):
    assert word_sep_normalize(name) == name


@pytest.mark.parametrize("name", ["a_b_c", "__x__", "mixed_sep-name"])
def test_normalization_invariants(name):
    result = word_sep_normalize(name)
    assert "_" not in result
    assert len(result) == len(name)
    assert word_sep_normalize(result) == result