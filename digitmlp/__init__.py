"""A small multi-layer perceptron that trains on MNIST IDX files and classifies digits."""

__version__ = "0.1.0"