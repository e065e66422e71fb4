[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "facetexture"
version = "0.1.0"
description = "Local texture appearance codes (LBP, LDP, LDNP, CLBP, PTP, ICCE, NEDP) and a k-nearest-neighbour classifier for face images"
requires-python = ">=3.10"
dependencies = [
    "numpy",
]
keywords = [
    "local binary pattern",
    "local directional pattern",
    "texture descriptor",
    "kirsch",
    "face recognition",
    "facial expression",
    "knn",
]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Science/Research",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Scientific/Engineering :: Image Recognition",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[tool.hatch.build.targets.wheel]
packages = ["facetexture"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
