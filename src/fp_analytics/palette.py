"""Deterministic option -> palette slot mapping, cycling when options outnumber colors."""

OPTION_PALETTE: tuple[str, ...] = ("votingGreen", "votingRed", "votingBlue", "warning", "secondary")


def palette_slot(option_index: int, palette_size: int = len(OPTION_PALETTE)) -> int:
    if option_index < 0:
        raise ValueError(f"option index must be non-negative, got {option_index}")
    return option_index % palette_size


def color_for_option(option_index: int) -> str:
    return OPTION_PALETTE[palette_slot(option_index)]
