

class PublishSchedule:
    """Fixed-rate publish targets anchored to a baseline timestamp.

    The nth target is always baseline + n / rate, so time spent reading,
    encoding or publishing never shifts later targets.
    """

    def __init__(self, rate: float, baseline: float):
        if rate <= 0:
            raise ValueError(f"publish rate must be positive, got {rate}")
        self.rate = rate
        self.period = 1.0 / rate
        self.baseline = baseline
        self.ticks = 0

    @property
    def next_target(self) -> float:
        return self.baseline + self.ticks * self.period

    def advance(self) -> float:
        self.ticks += 1
        return self.next_target

    def wait_after(self, stamp: float) -> float:
        """Advance one period and return the time left from stamp to the new target."""
        return self.advance() - stamp
