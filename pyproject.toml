[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "digitmlp"
version = "0.1.0"
description = "A small multi-layer perceptron that learns handwritten digits from MNIST IDX files"
requires-python = ">=3.10"
dependencies = [
    "numpy",
]
keywords = ["mnist", "mlp", "neural-network", "digits", "classification", "idx"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Education",
    "Intended Audience :: Science/Research",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Scientific/Engineering :: Artificial Intelligence",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[project.scripts]
digitmlp = "digitmlp.train:main"

[tool.hatch.build.targets.wheel]
packages = ["digitmlp"]

[tool.pytest.ini_options]
addopts = "-ra"
