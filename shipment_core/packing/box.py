from dataclasses import dataclass


@dataclass
class Box:
    """Packaging available for shipments. Dimensions in mm, weights in g."""

    box_id: int
    name: str
    width: int
    length: int
    depth: int
    empty_weight: int = 0
    max_load: int = 0  # 0 = no load limit
    priority: int = 100

    @property
    def volume(self) -> int:
        return self.width * self.length * self.depth

    def fits(self, item) -> bool:
        """Whether a single unit fits, allowing rotation."""
        if self.max_load and item.weight > self.max_load:
            return False
        inner = sorted((self.width, self.length, self.depth))
        outer = sorted((item.width, item.length, item.depth))
        return all(o <= i for o, i in zip(outer, inner))
