"""A small fully connected network with ReLU layers and a softmax output."""

from __future__ import annotations

from collections.abc import Sequence

import numpy as np

DEFAULT_SIZES: tuple[int, ...] = (784, 128, 64, 10)
PROBABILITY_FLOOR = np.float32(1e-9)


def _as_vector(x: Sequence[float] | np.ndarray, size: int, what: str) -> np.ndarray:
    vector = np.asarray(x, dtype=np.float32).reshape(-1)
    if vector.shape[0] != size:
        raise ValueError(f"{what} has {vector.shape[0]} values, expected {size}")
    return vector


class Layer:
    """A dense layer with ReLU activation, trained by plain gradient descent.

    The layer remembers the last input and output it saw so that
    :meth:`backward` can compute gradients for that step.
    """

    def __init__(
        self,
        input_size: int,
        output_size: int,
        rng: np.random.Generator | None = None,
    ) -> None:
        if input_size <= 0 or output_size <= 0:
            raise ValueError(
                f"layer sizes must be positive, got {input_size} -> {output_size}"
            )
        rng = rng if rng is not None else np.random.default_rng()
        scale = 1.0 / np.sqrt(input_size)
        self.weights = rng.normal(0.0, scale, size=(output_size, input_size)).astype(
            np.float32
        )
        self.biases = np.zeros(output_size, dtype=np.float32)
        self.inputs = np.zeros(input_size, dtype=np.float32)
        self.outputs = np.zeros(output_size, dtype=np.float32)
        self.deltas = np.zeros(output_size, dtype=np.float32)

    @property
    def input_size(self) -> int:
        return self.weights.shape[1]

    @property
    def output_size(self) -> int:
        return self.weights.shape[0]

    def forward(self, x: Sequence[float] | np.ndarray) -> np.ndarray:
        """Return ReLU(W x + b) and remember input and output."""
        self.inputs = _as_vector(x, self.input_size, "layer input").copy()
        z = self.weights @ self.inputs + self.biases
        self.outputs = np.maximum(z, np.float32(0.0)).astype(np.float32)
        return self.outputs.copy()

    def backward(
        self, grad_output: Sequence[float] | np.ndarray, lr: float
    ) -> np.ndarray:
        """Update weights and biases from the output gradient.

        Returns the gradient with respect to the layer's input, computed with
        the weights as they were before this update.
        """
        grad_output = _as_vector(grad_output, self.output_size, "output gradient")
        grad = grad_output * (self.outputs > 0).astype(np.float32)
        self.deltas = grad
        grad_input = (self.weights.T @ grad).astype(np.float32)
        step = np.float32(lr)
        self.weights -= step * np.outer(grad, self.inputs).astype(np.float32)
        self.biases -= step * grad
        return grad_input


def softmax(x: Sequence[float] | np.ndarray) -> np.ndarray:
    """Turn a vector of scores into probabilities that sum to one."""
    values = np.asarray(x, dtype=np.float32).reshape(-1)
    if values.size == 0:
        raise ValueError("softmax needs at least one value")
    exps = np.exp(values - values.max())
    return (exps / exps.sum()).astype(np.float32)


def cross_entropy(probs: Sequence[float] | np.ndarray, label: int) -> float:
    """Negative log probability of the true label, floored at 1e-9."""
    probs = np.asarray(probs, dtype=np.float32).reshape(-1)
    if not 0 <= label < probs.size:
        raise IndexError(f"label {label} outside 0..{probs.size - 1}")
    return float(-np.log(max(probs[label], PROBABILITY_FLOOR)))


class Network:
    """A stack of :class:`Layer` objects followed by a softmax."""

    def __init__(
        self,
        sizes: Sequence[int] = DEFAULT_SIZES,
        rng: np.random.Generator | None = None,
    ) -> None:
        sizes = tuple(sizes)
        if len(sizes) < 2:
            raise ValueError("a network needs at least an input and an output size")
        rng = rng if rng is not None else np.random.default_rng()
        self.sizes = sizes
        self.layers = [
            Layer(n_in, n_out, rng) for n_in, n_out in zip(sizes, sizes[1:])
        ]

    def _forward(self, x: Sequence[float] | np.ndarray) -> np.ndarray:
        out = np.asarray(x, dtype=np.float32)
        for layer in self.layers:
            out = layer.forward(out)
        return softmax(out)

    def predict_proba(self, x: Sequence[float] | np.ndarray) -> np.ndarray:
        """Class probabilities for one input vector."""
        return self._forward(x)

    def predict(self, x: Sequence[float] | np.ndarray) -> int:
        """Index of the most probable class (the first one on ties)."""
        return int(np.argmax(self._forward(x)))

    def train_step(
        self, x: Sequence[float] | np.ndarray, label: int, lr: float
    ) -> tuple[float, int]:
        """Run one forward and backward pass on a single example.

        Returns the loss before the update and the class that was predicted.
        """
        probs = self._forward(x)
        loss = cross_entropy(probs, label)
        prediction = int(np.argmax(probs))
        grad = probs.copy()
        grad[label] -= np.float32(1.0)
        for layer in reversed(self.layers):
            grad = layer.backward(grad, lr)
        return loss, prediction