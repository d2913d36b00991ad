"""Connected-component analysis of the greenish mask."""

from dataclasses import dataclass

import numpy as np


@dataclass
class ComponentLabelingResult:
    """Size of the largest 4-connected masked region."""

    largest_component_size: int
    total_pixels: int
    component_count: int

    @property
    def largest_component_ratio(self) -> float:
        if self.total_pixels == 0:
            return 0.0
        return self.largest_component_size / self.total_pixels


class ComponentLabeler:
    """Finds the largest 4-connected region of a boolean mask."""

    def label(self, mask: np.ndarray) -> ComponentLabelingResult:
        """
        Flood-fill every region of the mask and keep the largest size.

        Uses an explicit stack, so host stack usage does not grow with region
        size. The resulting size does not depend on fill order.

        Args:
            mask: 2D boolean array

        Returns:
            ComponentLabelingResult for the mask
        """
        height, width = mask.shape
        total = width * height

        seeds = np.flatnonzero(mask).tolist()
        if not seeds:
            return ComponentLabelingResult(largest_component_size=0, total_pixels=total, component_count=0)

        masked = bytearray(mask.ravel().astype(np.uint8).tobytes())
        visited = bytearray(total)
        stack: list[int] = []

        largest = 0
        components = 0

        for seed in seeds:
            if visited[seed]:
                continue

            components += 1
            size = 0
            visited[seed] = 1
            stack.append(seed)

            while stack:
                i = stack.pop()
                size += 1
                x = i % width

                # Left, right, up, down
                if x > 0 and masked[i - 1] and not visited[i - 1]:
                    visited[i - 1] = 1
                    stack.append(i - 1)
                if x + 1 < width and masked[i + 1] and not visited[i + 1]:
                    visited[i + 1] = 1
                    stack.append(i + 1)
                if i >= width and masked[i - width] and not visited[i - width]:
                    visited[i - width] = 1
                    stack.append(i - width)
                if i + width < total and masked[i + width] and not visited[i + width]:
                    visited[i + width] = 1
                    stack.append(i + width)

            if size > largest:
                largest = size

        return ComponentLabelingResult(
            largest_component_size=largest,
            total_pixels=total,
            component_count=components,
        )
