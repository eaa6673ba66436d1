"""Command-line flag name normalisation."""


def word_sep_normalize(name: str) -> str:
    """Turn every "_" separator in a flag name into "-"."""
    return name.replace("_", "-")