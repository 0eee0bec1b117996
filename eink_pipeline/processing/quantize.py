from __future__ import annotations

from bisect import bisect_left
from typing import Callable, Dict, List, Sequence, Tuple

from PIL import Image

Sample = Tuple[float, ...]

# Floyd-Steinberg weights: right, below-left, below, below-right.
_FS_RIGHT = 7 / 16
_FS_BELOW_LEFT = 3 / 16
_FS_BELOW = 5 / 16
_FS_BELOW_RIGHT = 1 / 16


def nearest_index(value: Sequence[float], targets: Sequence[Sequence[int]]) -> int:
    """Index of the closest target by squared Euclidean distance.

    Ties resolve to the earliest target so the mapping is deterministic.
    """

    best_index = 0
    best_distance = float("inf")
    for index, target in enumerate(targets):
        distance = 0.0
        for channel, component in enumerate(target):
            delta = value[channel] - component
            distance += delta * delta
        if distance < best_distance:
            best_distance = distance
            best_index = index
    return best_index


def nearest_level(value: float, levels: Sequence[int]) -> int:
    """``nearest_index`` for strictly ascending single-channel levels."""
    position = bisect_left(levels, value)
    if position == 0:
        return 0
    if position == len(levels):
        return len(levels) - 1
    below = levels[position - 1]
    above = levels[position]
    return position - 1 if value - below <= above - value else position


def _matcher(targets: Sequence[Sequence[int]]) -> Callable[[Sequence[float]], int]:
    levels = [target[0] for target in targets]
    ascending = all(len(target) == 1 for target in targets) and all(
        lower < upper for lower, upper in zip(levels, levels[1:])
    )
    if ascending:
        return lambda value: nearest_level(value[0], levels)
    return lambda value: nearest_index(value, targets)


def _samples(img: Image.Image) -> Tuple[List[List[Sample]], int]:
    width, height = img.size
    pixels = img.load()
    if img.mode == "L":
        rows = [[(pixels[x, y],) for x in range(width)] for y in range(height)]
        return rows, 1
    rows = [[tuple(pixels[x, y][:3]) for x in range(width)] for y in range(height)]
    return rows, 3


def map_nearest(img: Image.Image, targets: Sequence[Sequence[int]]) -> List[List[int]]:
    rows, _ = _samples(img)
    match = _matcher(targets)
    cache: Dict[Sample, int] = {}
    indices = []
    for row in rows:
        out_row = []
        for sample in row:
            index = cache.get(sample)
            if index is None:
                index = match(sample)
                cache[sample] = index
            out_row.append(index)
        indices.append(out_row)
    return indices


def floyd_steinberg(img: Image.Image, targets: Sequence[Sequence[int]]) -> List[List[int]]:
    """Map to ``targets`` while diffusing the quantization error.

    Pixels are visited row-major, left to right. Each pixel's error is pushed
    to its unvisited neighbours before they are quantized themselves.
    """

    rows, channels = _samples(img)
    match = _matcher(targets)
    height = len(rows)
    width = len(rows[0]) if rows else 0
    current = [[0.0] * channels for _ in range(width)]
    indices = []

    for y in range(height):
        following = [[0.0] * channels for _ in range(width)]
        out_row = []
        for x in range(width):
            sample = rows[y][x]
            value = [
                min(255.0, max(0.0, sample[channel] + current[x][channel]))
                for channel in range(channels)
            ]
            index = match(value)
            out_row.append(index)
            chosen = targets[index]
            for channel in range(channels):
                error = value[channel] - chosen[channel]
                if error == 0:
                    continue
                if x + 1 < width:
                    current[x + 1][channel] += error * _FS_RIGHT
                if y + 1 < height:
                    if x > 0:
                        following[x - 1][channel] += error * _FS_BELOW_LEFT
                    following[x][channel] += error * _FS_BELOW
                    if x + 1 < width:
                        following[x + 1][channel] += error * _FS_BELOW_RIGHT
        indices.append(out_row)
        current = following

    return indices


def quantize(img: Image.Image, targets: Sequence[Tuple[int, int, int]], dither: bool, grayscale: bool) -> Image.Image:
    """Reduce an RGB image to a ``P`` image indexing ``targets``.

    With ``grayscale`` the targets are gray levels and matching happens on
    luminance; otherwise on RGB.
    """

    if grayscale:
        source = img.convert("L")
        match_targets = [(target[0],) for target in targets]
    else:
        source = img.convert("RGB")
        match_targets = [tuple(target) for target in targets]

    if dither:
        indices = floyd_steinberg(source, match_targets)
    else:
        indices = map_nearest(source, match_targets)

    width, height = source.size
    out = Image.new("P", (width, height), 0)
    out.putpalette([channel for target in targets for channel in target])
    out_pixels = out.load()
    for y, row in enumerate(indices):
        for x, index in enumerate(row):
            out_pixels[x, y] = index
    return out
