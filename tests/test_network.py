import math

import numpy as np
import pytest

from digitmlp.network import Layer, Network, cross_entropy, softmax


def _rng(seed=0):
    return np.random.default_rng(seed)


def test_softmax_sums_to_one_and_positive():
    probs = softmax([1.0, 2.0, 3.0, -4.0])
    assert probs.sum() == pytest.approx(1.0, abs=1e-6)
    assert np.all(probs > 0)


def test_softmax_uniform_for_equal_scores():
    probs = softmax([5.0, 5.0, 5.0, 5.0])
    assert np.allclose(probs, 0.25)


def test_softmax_shift_invariant_and_ordered():
    a = softmax([0.5, 1.5, -2.0])
    b = softmax([100.5, 101.5, 98.0])
    assert np.allclose(a, b, atol=1e-6)
    assert np.argmax(a) == 1
    assert a[1] > a[0] > a[2]


def test_softmax_rejects_empty():
    with pytest.raises(ValueError):
        softmax([])


def test_cross_entropy_of_certain_prediction_is_zero():
    assert cross_entropy([0.0, 1.0, 0.0], 1) == pytest.approx(0.0, abs=1e-7)


def test_cross_entropy_is_floored():
    assert cross_entropy([1.0, 0.0], 1) == pytest.approx(-math.log(1e-9), rel=1e-5)


def test_cross_entropy_matches_log_of_probability():
    assert cross_entropy([0.25, 0.75], 0) == pytest.approx(-math.log(0.25), rel=1e-6)


def test_cross_entropy_label_out_of_range():
    with pytest.raises(IndexError):
        cross_entropy([0.5, 0.5], 2)


def test_layer_initialisation():
    layer = Layer(400, 200, _rng(1))
    assert layer.weights.shape == (200, 400)
    assert layer.weights.dtype == np.float32
    assert np.all(layer.biases == 0)
    assert layer.weights.std() == pytest.approx(1 / math.sqrt(400), rel=0.05)
    assert abs(layer.weights.mean()) < 0.005


def test_layer_rejects_bad_sizes():
    with pytest.raises(ValueError):
        Layer(0, 3, _rng())


def test_layer_forward_is_relu_of_affine():
    layer = Layer(6, 5, _rng(2))
    x = np.linspace(-1, 1, 6, dtype=np.float32)
    out = layer.forward(x)
    assert np.all(out >= 0)
    assert np.allclose(out, np.maximum(layer.weights @ x + layer.biases, 0), atol=1e-6)
    assert np.array_equal(layer.inputs, x)


def test_layer_forward_rejects_wrong_size():
    layer = Layer(4, 2, _rng())
    with pytest.raises(ValueError):
        layer.forward([1.0, 2.0, 3.0])


def test_layer_backward_zero_lr_keeps_weights_and_gives_gradient():
    layer = Layer(5, 4, _rng(3))
    layer.forward(np.ones(5, dtype=np.float32))
    before = layer.weights.copy()
    grad_out = np.array([1.0, -2.0, 0.5, 3.0], dtype=np.float32)
    grad_in = layer.backward(grad_out, 0.0)
    mask = (layer.outputs > 0).astype(np.float32)
    assert np.array_equal(layer.weights, before)
    assert np.allclose(grad_in, before.T @ (grad_out * mask), atol=1e-6)
    assert np.allclose(layer.deltas, grad_out * mask)


def test_layer_backward_uses_weights_before_update():
    layer = Layer(3, 3, _rng(4))
    layer.biases[:] = 10.0  # every unit active
    x = np.array([1.0, 2.0, 3.0], dtype=np.float32)
    layer.forward(x)
    before = layer.weights.copy()
    grad_out = np.array([0.1, 0.2, 0.3], dtype=np.float32)
    grad_in = layer.backward(grad_out, 0.5)
    assert np.allclose(grad_in, before.T @ grad_out, atol=1e-6)
    assert np.allclose(layer.weights, before - 0.5 * np.outer(grad_out, x), atol=1e-6)
    assert np.allclose(layer.biases, 10.0 - 0.5 * grad_out, atol=1e-6)


def test_layer_backward_inactive_units_change_nothing():
    layer = Layer(3, 2, _rng(5))
    layer.biases[:] = -100.0
    layer.forward([0.1, 0.2, 0.3])
    before_w = layer.weights.copy()
    before_b = layer.biases.copy()
    grad_in = layer.backward([1.0, 1.0], 0.1)
    assert np.all(grad_in == 0)
    assert np.array_equal(layer.weights, before_w)
    assert np.array_equal(layer.biases, before_b)


def test_network_requires_two_sizes():
    with pytest.raises(ValueError):
        Network([10], _rng())


def test_network_layer_shapes():
    net = Network([8, 6, 4, 3], _rng())
    assert [layer.weights.shape for layer in net.layers] == [(6, 8), (4, 6), (3, 4)]


def test_network_default_sizes():
    net = Network(rng=_rng())
    assert net.sizes == (784, 128, 64, 10)


def test_predict_proba_and_predict_agree():
    net = Network([8, 6, 4], _rng(6))
    x = np.linspace(0, 1, 8)
    probs = net.predict_proba(x)
    assert probs.shape == (4,)
    assert probs.sum() == pytest.approx(1.0, abs=1e-6)
    assert net.predict(x) == int(np.argmax(probs))


def test_same_seed_gives_same_network():
    x = np.linspace(0, 1, 8)
    a = Network([8, 6, 4], _rng(7)).predict_proba(x)
    b = Network([8, 6, 4], _rng(7)).predict_proba(x)
    assert np.array_equal(a, b)


def test_train_step_reduces_loss_on_repeated_example():
    net = Network([8, 16, 4], _rng(8))
    x = np.linspace(0.1, 1.0, 8)
    first_loss, _ = net.train_step(x, 2, 0.05)
    loss = first_loss
    for _ in range(200):
        loss, prediction = net.train_step(x, 2, 0.05)
    assert loss < first_loss
    assert prediction == 2
    assert net.predict(x) == 2


def test_train_step_reports_loss_before_update():
    net = Network([5, 4, 3], _rng(9))
    x = np.linspace(0.2, 1.0, 5)
    expected = cross_entropy(net.predict_proba(x), 1)
    loss, prediction = net.train_step(x, 1, 0.01)
    assert loss == pytest.approx(expected, rel=1e-6)
    assert 0 <= prediction < 3


def test_train_step_rejects_bad_label():
    net = Network([5, 4, 3], _rng())
    with pytest.raises(IndexError):
        net.train_step(np.ones(5), 3, 0.01)