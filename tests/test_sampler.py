import math

import numpy as np
import pytest
from scipy.stats import chisquare

from cgsim.data_generator.generator.bayes import BayesIm
from cgsim.data_generator.generator.ersatz import (
    ErsatzMapping,
    build_continuous_graph,
    build_discrete_graph,
)
from cgsim.data_generator.generator.graph import Variable, build_graph
from cgsim.data_generator.generator.parameters import ParameterRanges
from cgsim.data_generator.generator.sampler import (
    Moments,
    TopologicalSampler,
    draw_category,
    gamma_scale,
    noise_deviation,
)
from cgsim.data_generator.generator.sem import SemPm


def _sampler(G, seed=0, sample_size=500, ranges=None, bayes_im=None):
    rng = np.random.default_rng(seed)
    AG, ersatz = build_discrete_graph(G, rng)
    im = bayes_im if bayes_im is not None else BayesIm.random(AG, rng)
    return TopologicalSampler(
        G, im, SemPm(build_continuous_graph(G)), ersatz,
        ranges=ranges or ParameterRanges(), rng=rng, sample_size=sample_size,
    )


def _mixed_graph():
    return build_graph(
        [Variable.continuous("X"), Variable.discrete("A", 3), Variable.continuous("Y"),
         Variable.discrete("B", 2), Variable.continuous("Z")],
        [("X", "A"), ("A", "Y"), ("X", "Y"), ("Y", "B"), ("A", "B"), ("B", "Z"), ("Y", "Z")],
    )


def test_draw_category_inverse_cdf():
    probs = np.array([0.2, 0.3, 0.5])
    assert draw_category(probs, 0.0) == 0
    assert draw_category(probs, 0.2) == 0
    assert draw_category(probs, 0.21) == 1
    assert draw_category(probs, 0.99) == 2


def test_draw_category_falls_back_to_last_category():
    # cumulative sum never reaches r
    assert draw_category(np.array([0.3, 0.3, 0.3]), 0.95) == 2


def test_noise_deviation_root_is_one():
    moments = Moments()
    for v in [10.0, -4.0, 7.5]:
        moments = moments.add(v)
    assert noise_deviation(False, moments) == 1.0
    assert noise_deviation(True, moments) == pytest.approx(np.std([10.0, -4.0, 7.5]))


def test_moments_accumulate():
    moments = Moments()
    for v in [1.0, 2.0, 3.0]:
        moments = moments.add(v)
    assert moments.count == 3
    assert moments.mean == pytest.approx(2.0)
    assert moments.std() == pytest.approx(math.sqrt(2.0 / 3.0))


def test_gamma_scale():
    assert gamma_scale(np.array([0.0, 1.0, 4.0]), 1.0) == pytest.approx(2.0 / (2 * math.pi))
    assert math.isinf(gamma_scale(np.array([3.0, 3.0]), 1.0))


def test_run_produces_typed_columns():
    sampler = _sampler(_mixed_graph())
    df = sampler.run()
    assert list(df.columns) == ["X", "A", "Y", "B", "Z"]
    assert df["A"].dtype == np.int64 and df["B"].dtype == np.int64
    assert df["X"].dtype == np.float64
    assert set(df["A"].unique()) <= {0, 1, 2}
    assert set(df["B"].unique()) <= {0, 1}
    assert np.isfinite(df[["X", "Y", "Z"]].to_numpy()).all()


def test_parents_complete_before_children():
    G = _mixed_graph()
    sampler = _sampler(G)
    with pytest.raises(RuntimeError):
        sampler.column("X")
    sampler.run()
    pos = {n: i for i, n in enumerate(sampler.completion_order)}
    assert set(pos) == set(G.nodes)
    for parent, child in G.edges:
        assert pos[parent] < pos[child]


def test_column_lookup_of_unknown_node_fails():
    sampler = _sampler(_mixed_graph())
    with pytest.raises(KeyError):
        sampler.column("Ersatz_X")


def test_parameters_tied_to_discrete_parent_values():
    G = _mixed_graph()
    sampler = _sampler(G, sample_size=1000)
    df = sampler.run()
    cache = sampler.parameter_cache
    pm = sampler.sem_pm

    observed_a = {(("A", int(a)),) for a in df["A"].unique()}
    assert set(cache.values_for(pm.get_mean_parameter("Y"))) == observed_a
    assert set(cache.values_for(pm.get_coef_parameter("X", "Y"))) == observed_a
    assert set(cache.values_for(pm.get_beta_parameter("X", "Y"))) == observed_a
    assert set(cache.values_for(pm.get_variance_parameter("Y"))) == observed_a

    # X is a root: a single value shared by every row
    assert list(cache.values_for(pm.get_mean_parameter("X"))) == [()]


def test_ersatz_parent_uses_memoized_breakpoints():
    G = _mixed_graph()
    sampler = _sampler(G)
    sampler.run()
    assert "X" in sampler.breakpoints and "Y" in sampler.breakpoints
    proxy = sampler.ersatz.proxy_for("X")
    edges = sampler.breakpoints.get_breakpoints("X", sampler.column("X"), proxy.num_categories)
    assert edges is sampler.breakpoints.get_breakpoints("X", sampler.column("X"), proxy.num_categories)
    assert len(edges) == proxy.num_categories - 1


def test_categorical_sampling_matches_probabilities():
    G = build_graph([Variable.discrete("A", 3)])
    im = BayesIm(G)
    im.set_probabilities(im.node_index("A"), 0, [0.2, 0.3, 0.5])
    sampler = TopologicalSampler(G, im, SemPm(build_continuous_graph(G)), ErsatzMapping(),
                                 ParameterRanges(), np.random.default_rng(123), sample_size=10_000)
    counts = np.bincount(sampler.run()["A"], minlength=3)
    _, p_value = chisquare(counts, f_exp=[2000, 3000, 5000])
    assert p_value > 0.001


def test_continuous_root_noise_scale():
    G = build_graph([Variable.continuous("Y")])
    ranges = ParameterRanges(var_low=2.0, var_high=2.0, mean_low=0.0, mean_high=0.0)
    sampler = _sampler(G, seed=4, sample_size=5000, ranges=ranges)
    y = sampler.run()["Y"].to_numpy()
    assert abs(y.mean()) < 0.15
    assert abs(y.std() - 2.0) < 0.15


def test_same_seed_same_table():
    df1 = _sampler(_mixed_graph(), seed=9).run()
    df2 = _sampler(_mixed_graph(), seed=9).run()
    assert df1.equals(df2)
