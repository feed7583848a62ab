"""Sources of candidate orientations for the estimators."""

from abc import ABC, abstractmethod
from itertools import count as counter, product
from typing import Iterator, List, Optional, Sequence, Tuple

from numpy import arange, floor
from numpy.random import Generator, default_rng

from pyskycompass.exceptions import EmptySearchRangeError
from pyskycompass.estimator.Orientation import Orientation


class Searcher(ABC):
    """Produce candidate orientations; every call starts a fresh enumeration."""

    @abstractmethod
    def orientations(self) -> Iterator[Orientation]:
        """Return a new iterator over candidate orientations."""
        ...

    def __iter__(self) -> Iterator[Orientation]:
        return self.orientations()


class VecSearcher(Searcher):
    """Enumerate a fixed list of candidates in order."""

    __candidates: List[Orientation]

    def __init__(self, orientations: Sequence[Orientation]) -> None:
        """Initialize the searcher.

        Args:
            orientations: Candidates to try, in order.

        Raises:
            EmptySearchRangeError: If no candidate is given.
        """
        if len(orientations) == 0:
            raise EmptySearchRangeError('VecSearcher needs at least one orientation')
        self.__candidates = list(orientations)

    def orientations(self) -> Iterator[Orientation]:
        return iter(self.__candidates)

    def __len__(self) -> int:
        return len(self.__candidates)


class StochasticSearcher(Searcher):
    """Draw yaw, pitch and roll uniformly between two bounding orientations."""

    __low: Orientation
    __high: Orientation
    __count: Optional[int]
    __random_seed: Optional[int]
    __rng: Optional[Generator]

    def __init__(
            self,
            low: Orientation,
            high: Orientation,
            count: Optional[int] = None,
            random_seed: Optional[int] = None,
            rng: Optional[Generator] = None
    ) -> None:
        """Initialize the searcher.

        Args:
            low: Lower bound of every angle.
            high: Upper bound of every angle.
            count: Number of candidates per enumeration, or None for an endless stream.
            random_seed: Seed used to restart the same stream on every enumeration.
            rng: Shared generator to draw from instead; enumerations then continue the stream.

        Raises:
            EmptySearchRangeError: If a bound is inverted or count is not positive.
        """
        for axis in ('yaw', 'pitch', 'roll'):
            if getattr(low, axis) > getattr(high, axis):
                raise EmptySearchRangeError(
                    f'{axis} range is empty: {getattr(low, axis)} > {getattr(high, axis)}'
                )
        if count is not None and count <= 0:
            raise EmptySearchRangeError(f'count must be positive, got {count}')
        if rng is not None and random_seed is not None:
            raise ValueError('Pass either random_seed or rng, not both')
        self.__low = low
        self.__high = high
        self.__count = count
        self.__random_seed = random_seed
        self.__rng = rng

    def orientations(self) -> Iterator[Orientation]:
        rng: Generator = self.__rng if self.__rng is not None else default_rng(self.__random_seed)
        draws = counter() if self.__count is None else range(self.__count)
        for _ in draws:
            yield Orientation(
                yaw=float(rng.uniform(self.__low.yaw, self.__high.yaw)),
                pitch=float(rng.uniform(self.__low.pitch, self.__high.pitch)),
                roll=float(rng.uniform(self.__low.roll, self.__high.roll)),
            )


class GridSearcher(Searcher):
    """Enumerate a regular grid around a center orientation, yaw-major."""

    __center: Orientation
    __span: Tuple[float, float, float]
    __resolution: float

    def __init__(
            self,
            center: Orientation,
            span: Tuple[float, float, float],
            resolution: float
    ) -> None:
        """Initialize the searcher.

        Args:
            center: Grid center.
            span: Half-width of the grid in yaw, pitch and roll, in degrees.
            resolution: Grid step in degrees.

        Raises:
            EmptySearchRangeError: If the resolution is not positive or a span is negative.
        """
        if resolution <= 0:
            raise EmptySearchRangeError(f'resolution must be positive, got {resolution}')
        if len(span) != 3 or any(half_width < 0 for half_width in span):
            raise EmptySearchRangeError(f'span must hold three non-negative half-widths, got {span}')
        self.__center = center
        self.__span = (float(span[0]), float(span[1]), float(span[2]))
        self.__resolution = float(resolution)

    def __offsets(self, half_width: float) -> List[float]:
        steps = int(floor(half_width / self.__resolution + 1e-9))
        return [float(offset) for offset in arange(-steps, steps + 1) * self.__resolution]

    def orientations(self) -> Iterator[Orientation]:
        yaw_span, pitch_span, roll_span = self.__span
        for yaw, pitch, roll in product(
                self.__offsets(yaw_span), self.__offsets(pitch_span), self.__offsets(roll_span)
        ):
            yield self.__center.perturbed(yaw=yaw, pitch=pitch, roll=roll)

    def __len__(self) -> int:
        return len(self.__offsets(self.__span[0])) * len(self.__offsets(self.__span[1])) * len(
            self.__offsets(self.__span[2]))
