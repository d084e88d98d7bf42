from .pipeline import Manifest


def merge_incremental(existing: Manifest, new: Manifest) -> Manifest:
    """
    Merge the results of this run into the manifest of a previous run.

    Keys of ``new`` are inserted or overwritten, keys only present in
    ``existing`` stay. Entries of deleted sources are never pruned.
    ``existing`` is updated in place and returned.
    """
    for key, value in new.items():
        existing[key] = value
    return existing
