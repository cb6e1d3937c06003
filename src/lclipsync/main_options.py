"""Click option helpers for mode selection and millisecond durations."""
import click


def _check_mutual_exclusion(name: str, not_required_if: list[str], opts: dict) -> None:
    """Raise UsageError if mutually exclusive options are both present.

    Args:
        name: Name of the current option.
        not_required_if: List of option names that are mutually exclusive.
        opts: Dictionary of parsed options.

    Raises:
        click.UsageError: If both options are present.
    """
    for other in not_required_if:
        if opts.get(other):
            msg = f"Options --{name} and --{other} are mutually exclusive"
            raise click.UsageError(msg)


class MutuallyExclusiveOption(click.Option):
    """Click flag that may not be combined with the listed flags."""

    def __init__(self, *args, **kwargs):
        """Initialize with not_required_if parameter for mutual exclusion."""
        self.not_required_if = kwargs.pop("not_required_if", [])
        super().__init__(*args, **kwargs)

    def handle_parse_result(self, ctx, opts, args):
        """Reject the flag when a mutually exclusive one is also set."""
        if opts.get(self.name):
            _check_mutual_exclusion(self.name, self.not_required_if, opts)
        return super().handle_parse_result(ctx, opts, args)


def ms_to_seconds(ctx: click.Context, param: click.Parameter, value: int | None) -> float | None:
    """Click callback converting a millisecond option value to seconds."""
    if value is None:
        return None
    return value / 1000.0
