# mediancut/quantization/tree.py
from __future__ import annotations
from dataclasses import dataclass
from typing import Iterator, List, Optional, Sequence, Tuple, Union
import logging
import numpy as np

from mediancut.errors import QuantizationError
from .average import CHANNELS, Color, compute_average_color

logger = logging.getLogger(__name__)

@dataclass
class Bucket:
    """Leaf node: pixels [offset, offset + count) of the working buffer."""
    offset: int
    count: int
    range: int = 0        # spread of the widest channel
    range_chan: int = 0   # 0: red, 1: green, 2: blue
    avg_color: Optional[Color] = None

@dataclass(frozen=True)
class Split:
    """Internal node. Values <= threshold on `chan` go left, larger values go right."""
    chan: int
    threshold: int
    left: int
    right: int

Node = Union[Bucket, Split]

def make_bucket(data: np.ndarray, offset: int, count: int) -> Bucket:
    """
    Build a leaf over data[offset:offset + count]. The widest channel wins;
    on equal spreads the lower channel index is kept. avg_color is left unset.
    """
    if count < 2:
        return Bucket(offset=offset, count=count)
    view = data[offset : offset + count, :CHANNELS]
    spread = view.max(axis=0) - view.min(axis=0)  # (3,) uint8, max >= min
    chan = int(np.argmax(spread))  # first maximum
    return Bucket(offset=offset, count=count, range=int(spread[chan]), range_chan=chan)

class PartitionTree:
    """
    Binary tree of Split/Bucket nodes stored in a fixed-capacity arena.
    Node 0 is the root; children are arena indices. Nodes are only appended.
    """

    def __init__(self, data: np.ndarray, palette_count: int):
        self.data = data
        self.capacity = 2 * palette_count - 1
        self.nodes: List[Node] = [make_bucket(data, 0, data.shape[0])]
        self.frozen = False

    def __len__(self) -> int:
        return len(self.nodes)

    def leaves(self) -> Iterator[Tuple[int, Bucket]]:
        for i, node in enumerate(self.nodes):
            if isinstance(node, Bucket):
                yield i, node

    def largest_leaf(self) -> Tuple[int, int]:
        """
        Return (index, range) of the leaf with the largest range. The scan uses
        >= so the most recently created leaf wins a tie.
        """
        best = 0
        max_range = 0
        for i, bucket in self.leaves():
            if bucket.range >= max_range:
                max_range = bucket.range
                best = i
        return best, max_range

    def cut(self, index: int) -> Split:
        """
        Sort the bucket at `index` by its widest channel, split it after the last
        value equal to the median element, and replace it with a Split whose two
        children are appended to the arena. Reorders the bucket's pixels in place.
        """
        bucket = self.nodes[index]
        if not isinstance(bucket, Bucket):
            raise QuantizationError(f"node {index} is already split")
        if bucket.count == 0:
            raise QuantizationError(f"cannot cut empty bucket {index}")
        if len(self.nodes) + 2 > self.capacity:
            raise QuantizationError(f"partition tree is full ({self.capacity} nodes)")

        chan = bucket.range_chan
        view = self.data[bucket.offset : bucket.offset + bucket.count]
        view[:] = view[np.argsort(view[:, chan], kind="stable")]
        values = view[:, chan]
        threshold = int(values[bucket.count // 2])
        # Not an exact median split: everything equal to the median stays left.
        cut = int(np.searchsorted(values, threshold, side="right"))

        left = len(self.nodes)
        self.nodes.append(make_bucket(self.data, bucket.offset, cut))
        self.nodes.append(make_bucket(self.data, bucket.offset + cut, bucket.count - cut))
        split = Split(chan=chan, threshold=threshold, left=left, right=left + 1)
        self.nodes[index] = split
        logger.debug(
            "cut node %d on channel %d at %d: %d | %d pixels",
            index, chan, threshold, cut, bucket.count - cut,
        )
        return split

    def freeze(self) -> None:
        """Compute the average color of every leaf."""
        for _, bucket in self.leaves():
            view = self.data[bucket.offset : bucket.offset + bucket.count]
            bucket.avg_color = compute_average_color(view)
        self.frozen = True

    def palette(self) -> List[Color]:
        return [bucket.avg_color for _, bucket in self.leaves()]

    def find_leaf(self, color: Sequence[int]) -> int:
        """Index of the leaf `color` falls into."""
        index = 0
        node = self.nodes[0]
        while isinstance(node, Split):
            index = node.left if color[node.chan] <= node.threshold else node.right
            node = self.nodes[index]
        return index

    def lookup(self, color: Sequence[int]) -> Color:
        """Average color of the leaf `color` falls into."""
        if not self.frozen:
            raise QuantizationError("leaf averages are not computed; call freeze() first")
        return self.nodes[self.find_leaf(color)].avg_color

    def lookup_many(self, pixels: np.ndarray) -> np.ndarray:
        """
        Same walk as lookup() for an (N, 4) buffer, one tree level per step.
        Returns a new (N, 4) uint8 array of leaf averages.
        """
        if not self.frozen:
            raise QuantizationError("leaf averages are not computed; call freeze() first")
        n = len(self.nodes)
        is_leaf = np.zeros(n, dtype=bool)
        chan = np.zeros(n, dtype=np.intp)
        threshold = np.zeros(n, dtype=np.uint8)
        left = np.zeros(n, dtype=np.intp)
        right = np.zeros(n, dtype=np.intp)
        colors = np.zeros((n, 4), dtype=np.uint8)
        for i, node in enumerate(self.nodes):
            if isinstance(node, Bucket):
                is_leaf[i] = True
                colors[i] = node.avg_color
            else:
                chan[i] = node.chan
                threshold[i] = node.threshold
                left[i] = node.left
                right[i] = node.right

        where = np.zeros(pixels.shape[0], dtype=np.intp)
        active = np.nonzero(~is_leaf[where])[0]
        while active.size:
            idx = where[active]
            go_left = pixels[active, chan[idx]] <= threshold[idx]
            where[active] = np.where(go_left, left[idx], right[idx])
            active = active[~is_leaf[where[active]]]
        return colors[where]
