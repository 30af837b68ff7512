# digitmlp

A small multi-layer perceptron that learns to recognise handwritten digits
from the MNIST data set. By default the network has three fully connected
layers (784 → 128 → 64 → 10), each with a ReLU activation, and a softmax on
top. It is trained with cross-entropy loss and plain stochastic gradient
descent, one example at a time.

## Installation

```
pip install .
```

To also install what the tests need:

```
pip install .[test]
```

## Data

Training reads the standard MNIST IDX files:

- images: `*.idx3-ubyte`, which hold a magic number (`0x00000803`), the count,
  rows and columns, then one byte per pixel
- labels: `*.idx1-ubyte`, which hold a magic number (`0x00000801`) and the
  count, then one byte per label

`digitmlp.mnist.read_images` returns a `float32` array of shape
`(count, rows * cols)` with pixels scaled into `[0, 1]`.
`digitmlp.mnist.read_labels` returns an integer array of shape `(count,)`.
Both raise `digitmlp.mnist.IdxFormatError` (a `ValueError`) when the header is
short, when the magic number is wrong, or when the file holds fewer data bytes
than the header promises.

## Command line

```
digitmlp
```

With no options the command reads these files from the current directory:

- `train-images-idx3-ubyte/train-images.idx3-ubyte`
- `train-labels-idx1-ubyte/train-labels.idx1-ubyte`
- `t10k-images-idx3-ubyte/t10k-images.idx3-ubyte`
- `t10k-labels-idx1-ubyte/t10k-labels.idx1-ubyte`

It trains for 10 epochs at a learning rate of 0.01. For each epoch it prints
a line such as

```
Epoch 1 | Loss: 0.31 | Accuracy: 90.6% | Time: 42.1 seconds
```

and once training ends it writes the same figures to `training_results.csv`
under the header `Epoch,Time (seconds),Loss,Accuracy`. It then prints the
accuracy on the test set and the actual and predicted label of the first ten
test images.

Options:

| option | default |
| --- | --- |
| `--train-images PATH` | `train-images-idx3-ubyte/train-images.idx3-ubyte` |
| `--train-labels PATH` | `train-labels-idx1-ubyte/train-labels.idx1-ubyte` |
| `--test-images PATH` | `t10k-images-idx3-ubyte/t10k-images.idx3-ubyte` |
| `--test-labels PATH` | `t10k-labels-idx1-ubyte/t10k-labels.idx1-ubyte` |
| `--epochs N` | `10` |
| `--lr RATE` | `0.01` |
| `--csv PATH` | `training_results.csv` |
| `--seed N` | none (weights start from fresh randomness) |

The input layer takes its size from the training images, so image files of
another size work too. When a file cannot be read or is malformed, the
command prints the error to standard error and exits with status 1.

## Library use

```python
import numpy as np

from digitmlp.mnist import read_images, read_labels
from digitmlp.network import Network
from digitmlp.train import train, evaluate, write_results_csv

images = read_images("train-images.idx3-ubyte")
labels = read_labels("train-labels.idx1-ubyte")

net = Network([784, 128, 64, 10], np.random.default_rng(0))
results = train(net, images, labels, epochs=10, lr=0.01, on_epoch=print)
write_results_csv(results, "training_results.csv")

test_images = read_images("t10k-images.idx3-ubyte")
test_labels = read_labels("t10k-labels.idx1-ubyte")
print(evaluate(net, test_images, test_labels))
```

### `digitmlp.network`

- `Layer(input_size, output_size, rng=None)` is a dense ReLU layer. Its weights
  are drawn from a normal distribution with standard deviation
  `1 / sqrt(input_size)`, and its biases start at zero. `forward(x)` returns
  `ReLU(W x + b)`. `backward(grad_output, lr)` updates the weights and biases
  and returns the gradient for the layer's input, using the weights as they
  were before the update.
- `softmax(x)` turns scores into probabilities that sum to one.
- `cross_entropy(probs, label)` is `-log(probs[label])`, with the probability
  floored at `1e-9`. It raises `IndexError` for a label out of range.
- `Network(sizes=(784, 128, 64, 10), rng=None)` stacks layers between
  consecutive sizes. `predict_proba(x)` returns the class probabilities for one
  input. `predict(x)` returns the most probable class, the first one on ties.
  `train_step(x, label, lr)` runs one forward and backward pass and returns
  the loss and the prediction from before the update.

### `digitmlp.train`

- `train(network, images, labels, epochs=10, lr=0.01, on_epoch=None)` trains
  one example at a time, in the order given, and returns a list of
  `EpochResult(epoch, seconds, loss, accuracy)`. Loss is the mean over the
  epoch, and accuracy is a percentage. `on_epoch` is called with each result
  as soon as it is made.
- `evaluate(network, images, labels)` returns the percentage of correct
  predictions.
- `write_results_csv(results, path)` writes one row per epoch.
- `main(argv=None)` is the command above and returns its exit status.

`train` and `evaluate` raise `ValueError` when there are no examples or when
the numbers of images and labels differ. `train` also raises it for a negative
number of epochs.

## What it does not do

The trained network is not saved anywhere: its weights exist only while the
process runs, and no files are written apart from the CSV of per-epoch
results. There is no batching, no shuffling between epochs and no other
optimiser than plain gradient descent.