"""Test helpers for building small customs declaration documents on disk."""
from pathlib import Path
from typing import Dict, Iterable, Optional


def goods_block(fields: Dict[str, str], tag: str = "ESADout_CUGoods") -> str:
    """Return one boundary element with one child element per field."""
    children = "".join(f"<{name}>{value}</{name}>" for name, value in fields.items())
    return f"<{tag}>{children}</{tag}>"


def write_declaration(directory: Path, name: str, blocks: Iterable[str],
                      root: str = "ESADout_CU", encoding: Optional[str] = None) -> Path:
    """Write an XML document whose root contains the given blocks."""
    body = f"<{root}>{''.join(blocks)}</{root}>"
    path = directory / name
    if encoding:
        path.write_bytes(f'<?xml version="1.0" encoding="{encoding}"?>{body}'.encode(encoding))
    else:
        path.write_text(f'<?xml version="1.0" encoding="UTF-8"?>{body}', encoding="utf-8")
    return path
