"""Entry name normalization."""


def normalize_entry_name(name: str) -> str:
    """Turn an archive entry name into a relative POSIX path.

    Backslashes become forward slashes, leading and trailing separators
    are trimmed and empty or ``.`` segments are dropped.

    Args:
        name: Entry name as stored in the archive

    Returns:
        str: Relative path, possibly empty

    Examples:
        normalize_entry_name("/srv/app/")      # "srv/app"
        normalize_entry_name("a\\b/./c.txt")   # "a/b/c.txt"
    """
    parts = name.replace("\\", "/").strip("/").split("/")
    return "/".join(part for part in parts if part not in ("", "."))
