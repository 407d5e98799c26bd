def load_labels(path):
    """One class name per line; blank lines keep their index."""
    with open(path, "r", encoding="utf-8") as f:
        return [line.strip() for line in f.read().splitlines()]


def format_label(labels, idx):
    if labels and 0 <= idx < len(labels) and labels[idx]:
        return labels[idx]
    return f"#{idx}"
