# facetexture

Local texture descriptors ("appearance codes") for face images, and a
k-nearest-neighbour classifier for comparing feature vectors such as code
histograms.

Every descriptor turns a grayscale or RGB image, given as a NumPy array, into a
code image. Each pixel of the code image holds a small integer that describes
the local edge or intensity structure around it.

## Descriptors

| Class   | Module              | Idea                                                                  | Output size            |
|---------|---------------------|-----------------------------------------------------------------------|------------------------|
| `LBP`   | `facetexture.lbp`   | Circular local binary pattern, optional uniform-pattern mapping      | `H - 2r` x `W - 2r`    |
| `LDP`   | `facetexture.ldp`   | Local directional pattern: top-k Kirsch responses                    | `H - 2` x `W - 2`      |
| `LDNP`  | `facetexture.ldnp`  | Strongest and weakest absolute response, Kirsch or Gaussian masks    | `H - 2` x `W - 2`      |
| `CLBP`  | `facetexture.clbp`  | Directions of the largest and smallest Kirsch response               | `H` x `W`, border 0    |
| `PTP`   | `facetexture.ptp`   | Prominent Kirsch directions plus a ternary sign                      | `H - 2` x `W - 2`      |
| `ICCE`  | `facetexture.icce`  | Two non-adjacent main directions plus a ternary sign                 | `H - 2` x `W - 2`      |
| `NEDPS` | `facetexture.nedp`  | Neighbourhood edge direction pattern from Sobel gradients, signed    | `H - 2p` x `W - 2p`    |
| `NEDPU` | `facetexture.nedpu` | Neighbourhood edge direction pattern, unsigned                       | `H - 2p` x `W - 2p`    |

All of them derive from `facetexture.base.AppearanceCode` and share two methods:

- `generate(images)` takes an iterable of images and returns a list of code
  images;
- `code_size()` gives the number of distinct code values, for building
  histograms.

How a list of several images is handled differs:

- `CLBP`, `ICCE`, `LDP` and `LDNP` raise
  `facetexture.base.SequenceNotSupportedError` (a `ValueError`) when given more
  than one image;
- `PTP`, `NEDPS` and `NEDPU` code only the first image;
- `LBP` codes every image separately and returns one code image each.

An empty input raises `ValueError` for all descriptors except `LBP`, which
returns an empty list.

### Options

Settings are passed to the constructors:

- `LBP(radius=1, neighbors=8, uniform=True, max_transitions=2)`: `uniform` may
  also be the string `"true"` or `"false"`; any other value warns and uses
  uniform codes. Codes are `int32`. `LBP.generate_one(image)` codes a single
  image and `LBP.apply_uniform(codes)` relabels raw codes.
- `LDP(directions=8, k=3, absolute_max=True, lsb_shift=False)`: `code_size()`
  is the number of ways to choose `k` of 8 bits, and codes are renumbered to
  `0 .. code_size() - 1`.
- `LDNP(mask_type=MaskType.KIRSCH)`: `facetexture.ldnp.MaskType` is `KIRSCH`
  or `GAUSSIAN`; the strings `"kirsch"` and `"gaussian"` (any case) are
  accepted too, and anything else warns and uses Kirsch masks.
- `NEDPS(edge_percent=0.2, score_threshold=10, sigma=30.0, ignore_code=0,
  padding=1)`, and the same for `NEDPU`.

The per-pixel code functions are available on their own:
`clbp_code`, `ptp_code`, `icce_code`, `ldp_code`, `ldnp_code`, as well as
`ldp_mapping_table`, `combinations_count`, `edge_masks`, `elbp`,
`uniform_mapping_table`, and for NEDP `sobel_gradients`, `gaussian_weights`,
`angle_diff`, `calc_sign` and `magnitude_threshold`.

## Example

```python
import numpy as np

from facetexture.knn import KNN
from facetexture.ldp import LDP

image = np.random.default_rng(0).integers(0, 256, (48, 36), dtype=np.uint8)

descriptor = LDP()
(codes,) = descriptor.generate([image])
histogram = np.bincount(codes.ravel(), minlength=descriptor.code_size())
```

Histograms from several images can be stacked into a feature matrix, one row
per sample, and classified:

```python
knn = KNN(k=1)
predicted = knn.classify(train_features, train_labels, test_features)  # list of int
label = knn.classify_one(train_features, train_labels, test_features[:1])  # float
```

`KNN` compares rows with the chi-square distance, skipping bins that are empty
in both vectors, and takes a majority vote among the `k` nearest neighbours;
ties go to the smallest label. Another distance can be given as
`KNN(k, distance=callable)`, where the callable takes two 1-D arrays and returns
a number. Custom classifiers can derive from `facetexture.knn.Classifier`.

## Helpers

`facetexture.base` also exposes the building blocks the descriptors use:

- `to_gray(image)` converts an RGB image to grayscale, treating channel 0 as
  red; 2-D images are returned unchanged;
- `single_image(images, name)` returns the only image of an iterable, or
  raises;
- `kirsch_responses(gray)` returns the eight directional Kirsch responses of
  every interior pixel, with shape `(H - 2, W - 2, 8)`.

## What it does not do

The package works on NumPy arrays in memory only. It does not read or write
image files, read configuration files, or build feature histograms for you.
It has no command-line tool, and provides no classifier other than `KNN` and
no feature-reduction step.

## Installation

```
pip install .
```

For running the test suite:

```
pip install .[test]
pytest
```