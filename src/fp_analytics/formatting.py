def format_address(address: str | None, head: int = 6, tail: int = 4) -> str:
    """'0xf8d6e0586b0a20c7' -> '0xf8d6...20c7'."""
    if not address:
        return "Not connected"
    if len(address) <= head + tail:
        return address
    return f"{address[:head]}...{address[-tail:]}"


def format_accuracy(accuracy: float) -> str:
    """0.756 -> '75.6%'."""
    return f"{accuracy * 100:.1f}%"
