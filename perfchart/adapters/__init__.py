from .normalize import normalize_dataset, normalize_labels

__all__ = ["normalize_dataset", "normalize_labels"]
