import attrs


@attrs.define
class SweepResult:
    """Rows changed by one run of one reconciliation job, per kind of change"""

    job: str
    counts: dict[str, int] = attrs.field(factory=dict)

    @property
    def total(self) -> int:
        return sum(self.counts.values())
