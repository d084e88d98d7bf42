import hashlib
import os
from pathlib import Path

import pytest


def md5_hex(data: bytes) -> str:
    return hashlib.md5(data).hexdigest()


@pytest.fixture
def asset_tree(tmp_path):
    """
    root/
      a.css
      b.txt
      sub/c.js
    """
    root = tmp_path / "root"
    (root / "sub").mkdir(parents=True)
    (root / "a.css").write_bytes(b"body { color: red; }\n")
    (root / "b.txt").write_bytes(b"not an asset\n")
    (root / "sub" / "c.js").write_bytes(b"console.log('c');\n")

    class Tree:
        def __init__(self):
            self.root = root
            self.contents = {
                "a.css": (root / "a.css").read_bytes(),
                "b.txt": (root / "b.txt").read_bytes(),
                os.path.join("sub", "c.js"): (root / "sub" / "c.js").read_bytes(),
            }

        def expected(self, rel: str, length: int) -> str:
            directory, name = os.path.split(rel)
            base, ext = os.path.splitext(name)
            hashed = f"{base}.{md5_hex(self.contents[rel])[:length]}{ext}"
            return os.path.join(directory, hashed) if directory else hashed

    return Tree()


@pytest.fixture
def write_files():
    def _write(root: Path, files: dict) -> None:
        for rel, data in files.items():
            p = root / rel
            p.parent.mkdir(parents=True, exist_ok=True)
            p.write_bytes(data)
    return _write
