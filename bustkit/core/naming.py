import os


def compose_hashed_name(path: str, digest: str, hash_length: int) -> str:
    """
    Insert the truncated digest between basename and extension.

    ``static/app.css`` + ``9f86d081...`` (6) -> ``static/app.9f86d0.css``

    Two files whose truncated digests coincide are not detected here.
    """
    directory, filename = os.path.split(path)
    basename, ext = os.path.splitext(filename)
    hashed = "{0}.{1}{2}".format(basename, digest[:hash_length], ext)
    if not directory:
        return hashed
    return os.path.join(directory, hashed)
