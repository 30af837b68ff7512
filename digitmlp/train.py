"""Training loop, evaluation and the command that trains on MNIST."""

from __future__ import annotations

import argparse
import csv
import os
import sys
import time
from collections.abc import Callable, Iterable, Sequence
from dataclasses import dataclass
from pathlib import Path

import numpy as np

from digitmlp.mnist import IdxFormatError, read_images, read_labels
from digitmlp.network import DEFAULT_SIZES, Network

CSV_HEADER = ("Epoch", "Time (seconds)", "Loss", "Accuracy")
DEFAULT_EPOCHS = 10
DEFAULT_LR = 0.01
PREVIEW_COUNT = 10


@dataclass(frozen=True)
class EpochResult:
    """What one pass over the training data produced."""

    epoch: int
    seconds: float
    loss: float
    accuracy: float


def _check_pairs(images: Sequence, labels: Sequence) -> None:
    if len(images) != len(labels):
        raise ValueError(
            f"{len(images)} images but {len(labels)} labels"
        )
    if len(images) == 0:
        raise ValueError("no examples given")


def train(
    network: Network,
    images: Sequence[np.ndarray] | np.ndarray,
    labels: Sequence[int] | np.ndarray,
    epochs: int = DEFAULT_EPOCHS,
    lr: float = DEFAULT_LR,
    on_epoch: Callable[[EpochResult], None] | None = None,
) -> list[EpochResult]:
    """Train one example at a time for the given number of epochs.

    Loss and accuracy of an epoch are taken from each example's forward pass
    before its update. ``on_epoch`` is called with each result as it is made.
    """
    if epochs < 0:
        raise ValueError(f"epochs must not be negative, got {epochs}")
    _check_pairs(images, labels)
    results: list[EpochResult] = []
    for epoch in range(1, epochs + 1):
        start = time.perf_counter()
        total_loss = 0.0
        correct = 0
        for x, y in zip(images, labels):
            label = int(y)
            loss, prediction = network.train_step(x, label, lr)
            total_loss += loss
            correct += prediction == label
        seconds = time.perf_counter() - start
        result = EpochResult(
            epoch=epoch,
            seconds=seconds,
            loss=total_loss / len(images),
            accuracy=100.0 * correct / len(images),
        )
        results.append(result)
        if on_epoch is not None:
            on_epoch(result)
    return results


def evaluate(
    network: Network,
    images: Sequence[np.ndarray] | np.ndarray,
    labels: Sequence[int] | np.ndarray,
) -> float:
    """Percentage of examples whose predicted class matches the label."""
    _check_pairs(images, labels)
    correct = sum(
        network.predict(x) == int(y) for x, y in zip(images, labels)
    )
    return 100.0 * correct / len(images)


def write_results_csv(
    results: Iterable[EpochResult], path: str | os.PathLike[str]
) -> None:
    """Write one row per epoch under the header Epoch,Time (seconds),Loss,Accuracy."""
    with Path(path).open("w", newline="") as handle:
        writer = csv.writer(handle, lineterminator="\n")
        writer.writerow(CSV_HEADER)
        for result in results:
            writer.writerow(
                (
                    result.epoch,
                    f"{result.seconds:g}",
                    f"{result.loss:g}",
                    f"{result.accuracy:g}",
                )
            )


def _parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="digitmlp",
        description="Train a small multi-layer perceptron on MNIST digits.",
    )
    parser.add_argument(
        "--train-images",
        default="train-images-idx3-ubyte/train-images.idx3-ubyte",
    )
    parser.add_argument(
        "--train-labels",
        default="train-labels-idx1-ubyte/train-labels.idx1-ubyte",
    )
    parser.add_argument(
        "--test-images",
        default="t10k-images-idx3-ubyte/t10k-images.idx3-ubyte",
    )
    parser.add_argument(
        "--test-labels",
        default="t10k-labels-idx1-ubyte/t10k-labels.idx1-ubyte",
    )
    parser.add_argument("--epochs", type=int, default=DEFAULT_EPOCHS)
    parser.add_argument("--lr", type=float, default=DEFAULT_LR)
    parser.add_argument("--csv", default="training_results.csv")
    parser.add_argument("--seed", type=int, default=None)
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    """Train, write per-epoch results to CSV and report test accuracy."""
    args = _parser().parse_args(argv)
    try:
        train_images = read_images(args.train_images)
        train_labels = read_labels(args.train_labels)
    except (OSError, IdxFormatError) as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1

    sizes = (train_images.shape[1], *DEFAULT_SIZES[1:])
    network = Network(sizes, np.random.default_rng(args.seed))

    def report(result: EpochResult) -> None:
        print(
            f"Epoch {result.epoch} | Loss: {result.loss:g} | "
            f"Accuracy: {result.accuracy:g}% | Time: {result.seconds:g} seconds"
        )

    try:
        results = train(
            network, train_images, train_labels, args.epochs, args.lr, report
        )
    except ValueError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1
    write_results_csv(results, args.csv)

    try:
        test_images = read_images(args.test_images)
        test_labels = read_labels(args.test_labels)
        test_accuracy = evaluate(network, test_images, test_labels)
    except (OSError, ValueError) as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1
    print(f"Test Accuracy: {test_accuracy:g}%")

    print(f"\n=== Predictions for the first {PREVIEW_COUNT} test images ===")
    for number, (x, y) in enumerate(
        zip(test_images[:PREVIEW_COUNT], test_labels[:PREVIEW_COUNT]), start=1
    ):
        print(
            f"Image {number}: actual = {int(y)}, predicted = {network.predict(x)}"
        )

    print(f"Saved results to {args.csv}")
    return 0


if __name__ == "__main__":
    sys.exit(main())